"""Meta commands for shell introspection and session state."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..common import CLEAR_SCREEN, CommandResult
from ..registry import COMMAND_REGISTRY
from ...exceptions import NodeNotFound, UsageError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@COMMAND_REGISTRY.command("help", description="Show available commands", usage="help [command]")
def help(shell: "VirtualShell", args: list[str]) -> CommandResult:  # noqa: A001
    if args:
        spec = shell.commands.get(args[0])
        if spec is None:
            return CommandResult(stderr=f"help: no help topics match '{args[0]}'", exit_code=1)
        return CommandResult(stdout=f"{spec.usage}\n    {spec.description}")
    width = max(len(spec.usage) for spec in shell.commands.values())
    lines = ["Available commands:"]
    for name in shell.available_commands():
        spec = shell.commands[name]
        if spec.description:
            lines.append(f"  {spec.usage.ljust(width)}  - {spec.description}")
        else:
            lines.append(f"  {spec.usage}")
    aliases = shell.state.aliases
    if aliases:
        lines.append("")
        lines.append("Shortcuts:")
        alias_width = max(len(name) for name in aliases)
        for name in sorted(aliases):
            lines.append(f"  {name.ljust(alias_width)}  - {aliases[name]}")
    return CommandResult(stdout="\n".join(lines))


@COMMAND_REGISTRY.command("clear", description="Clear terminal")
def clear(shell: "VirtualShell", _: list[str]) -> CommandResult:
    return CommandResult(stdout=CLEAR_SCREEN)


@COMMAND_REGISTRY.command("stat", description="Display file status", usage="stat <path>")
def stat(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        raise UsageError("stat: missing operand")
    path = shell.resolve(args[0])
    if shell.vfs.is_directory(path):
        size = 0
        kind = "directory"
    elif shell.vfs.is_file(path):
        entry = shell.vfs.get_file(path)
        size = entry.size
        kind = "regular file" if size else "regular empty file"
    else:
        raise NodeNotFound(f"stat: cannot stat '{args[0]}': No such file or directory")
    lines = [f"  File: {path}", f"  Size: {size:<10} Type: {kind}"]
    if kind != "directory" and entry.mime_type:
        lines.append(f"  Mime: {entry.mime_type}")
    return CommandResult(stdout="\n".join(lines))


def _dump_environment(shell: "VirtualShell") -> str:
    return "\n".join(f"{key}={value}" for key, value in sorted(shell.env.items()))


@COMMAND_REGISTRY.command("env", description="Show environment variables")
def env(shell: "VirtualShell", _: list[str]) -> CommandResult:
    return CommandResult(stdout=_dump_environment(shell))


@COMMAND_REGISTRY.command(
    "export", description="Set environment variable", usage="export <var>=<value>"
)
def export(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        return CommandResult(stdout=_dump_environment(shell))
    errors: list[str] = []
    for arg in args:
        key, sep, value = arg.partition("=")
        if not _IDENTIFIER_RE.match(key):
            errors.append(f"export: `{arg}': not a valid identifier")
            continue
        if sep:
            shell.env[key] = value
    if errors:
        return CommandResult(stderr="\n".join(errors), exit_code=1)
    return CommandResult()


@COMMAND_REGISTRY.command(
    "unset", description="Remove environment variable", usage="unset <var>..."
)
def unset(shell: "VirtualShell", args: list[str]) -> CommandResult:
    for name in args:
        shell.env.pop(name, None)
    return CommandResult()


@COMMAND_REGISTRY.command("history", description="Show command history", usage="history [n] [-c]")
def history(shell: "VirtualShell", args: list[str]) -> CommandResult:
    state = shell.state
    if "-c" in args:
        state.history.clear()
        return CommandResult()
    count: int | None = None
    if args:
        try:
            count = int(args[0])
        except ValueError:
            raise UsageError(f"history: {args[0]}: numeric argument required") from None
    lines = [f"{idx}  {entry.command}" for idx, entry in state.recent(count)]
    return CommandResult(stdout="\n".join(lines))


@COMMAND_REGISTRY.command("alias", description="Define or list aliases", usage="alias [name=value]")
def alias(shell: "VirtualShell", args: list[str]) -> CommandResult:
    aliases = shell.state.aliases
    if not args:
        return CommandResult(
            stdout="\n".join(f"alias {name}='{aliases[name]}'" for name in sorted(aliases))
        )
    lines: list[str] = []
    errors: list[str] = []
    for arg in args:
        name, sep, value = arg.partition("=")
        if sep:
            if not name or "/" in name:
                errors.append(f"alias: `{arg}': invalid alias name")
                continue
            aliases[name] = value
        elif name in aliases:
            lines.append(f"alias {name}='{aliases[name]}'")
        else:
            errors.append(f"alias: {name}: not found")
    return CommandResult(
        stdout="\n".join(lines),
        stderr="\n".join(errors),
        exit_code=1 if errors else 0,
    )


@COMMAND_REGISTRY.command("unalias", description="Remove aliases", usage="unalias <name>...")
def unalias(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        raise UsageError("unalias: usage: unalias name [name ...]")
    errors: list[str] = []
    for name in args:
        if shell.state.aliases.pop(name, None) is None:
            errors.append(f"unalias: {name}: not found")
    if errors:
        return CommandResult(stderr="\n".join(errors), exit_code=1)
    return CommandResult()


@COMMAND_REGISTRY.command("whoami", description="Print the current user")
def whoami(shell: "VirtualShell", _: list[str]) -> CommandResult:
    return CommandResult(stdout=shell.env.get("USER", shell.settings.user))


@COMMAND_REGISTRY.command("which", description="Locate a command", usage="which <command>...")
def which(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        return CommandResult(exit_code=1)
    found: list[str] = []
    missing = False
    for name in args:
        if name in shell.state.aliases:
            found.append(f"{name}: aliased to {shell.state.aliases[name]}")
        elif name in shell.commands:
            found.append(f"/usr/bin/{name}")
        else:
            missing = True
    return CommandResult(stdout="\n".join(found), exit_code=1 if missing else 0)
