"""Minimal shell parser: tokens, aliases, variables and redirection."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field


class Operator(str):
    """An unquoted ``>`` or ``>>`` produced by :func:`tokenize`.

    Compares equal to its text; only instances of this class redirect.
    """

    __slots__ = ()


@dataclass
class ParsedLine:
    name: str | None
    args: list[str] = field(default_factory=list)
    stdout: str | None = None
    append: bool = False


_VARIABLE_RE = re.compile(r"\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))")


def tokenize(command_line: str) -> list[str]:
    """Split on whitespace; a double-quoted span is one token without its quotes.

    Unquoted ``>``/``>>`` come back as :class:`Operator` tokens. Raises
    ``ValueError`` on an unbalanced quote.
    """

    tokens: list[str] = []
    current: list[str] = []
    in_word = False
    quoted = False
    idx = 0
    while idx < len(command_line):
        char = command_line[idx]
        idx += 1
        if quoted:
            if char == '"':
                quoted = False
            else:
                current.append(char)
        elif char == '"':
            quoted = in_word = True
        elif char.isspace() or char == ">":
            if in_word:
                tokens.append("".join(current))
                current, in_word = [], False
            if char == ">":
                if command_line.startswith(">", idx):
                    tokens.append(Operator(">>"))
                    idx += 1
                else:
                    tokens.append(Operator(">"))
        else:
            current.append(char)
            in_word = True
    if quoted:
        raise ValueError("No closing quotation")
    if in_word:
        tokens.append("".join(current))
    return tokens


def expand_alias(tokens: list[str], aliases: Mapping[str, str]) -> list[str]:
    """Replace the command name by its alias text, exactly once."""

    if not tokens or tokens[0] not in aliases:
        return list(tokens)
    return [*tokenize(aliases[tokens[0]]), *tokens[1:]]


def expand_variables(token: str, environment: Mapping[str, str]) -> str:
    if isinstance(token, Operator):
        return token

    def replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        return environment.get(name, "")

    return _VARIABLE_RE.sub(replace, token)


def parse_line(tokens: list[str]) -> ParsedLine:
    """Separate ``>``/``>>`` redirection from the command and its arguments.

    Only :class:`Operator` tokens redirect; a plain ``">"`` string is an argument.
    """

    parsed = ParsedLine(name=None)
    idx = 0
    while idx < len(tokens):
        token = tokens[idx]
        if isinstance(token, Operator):
            if idx + 1 >= len(tokens) or isinstance(tokens[idx + 1], Operator):
                raise ValueError(f"syntax error near unexpected token `{token}'")
            parsed.stdout = tokens[idx + 1]
            parsed.append = token == ">>"
            idx += 2
            continue
        if parsed.name is None:
            parsed.name = token
        else:
            parsed.args.append(token)
        idx += 1
    if parsed.name is None and parsed.stdout is not None:
        raise ValueError("Redirection without command is not supported")
    return parsed


__all__ = [
    "Operator",
    "ParsedLine",
    "tokenize",
    "expand_alias",
    "expand_variables",
    "parse_line",
]
