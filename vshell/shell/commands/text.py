"""Text processing commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..common import CommandResult
from ..registry import COMMAND_REGISTRY

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell


@COMMAND_REGISTRY.command("echo", description="Display text", usage="echo <text>...")
def echo(shell: "VirtualShell", args: list[str]) -> CommandResult:
    return CommandResult(stdout=" ".join(args))


def _read(shell: "VirtualShell", command: str, path_arg: str) -> tuple[str | None, str | None]:
    path = shell.resolve(path_arg)
    if shell.vfs.is_directory(path):
        return None, f"{command}: error reading '{path_arg}': Is a directory"
    if not shell.vfs.is_file(path):
        return None, f"{command}: cannot open '{path_arg}' for reading: No such file or directory"
    return shell.vfs.read_file(path), None


def _slice_content(content: str, *, count: int, mode: str, tail: bool) -> str:
    units = content.splitlines(keepends=True) if mode == "lines" else list(content)
    # Clamped so a zero count selects nothing.
    selected = units[max(len(units) - count, 0):] if tail else units[:count]
    return "".join(selected)


def _read_range_command(
    shell: "VirtualShell", args: list[str], *, tail: bool
) -> CommandResult:
    command = "tail" if tail else "head"
    count = 10
    mode = "lines"
    paths: list[str] = []

    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in ("-n", "-c"):
            if idx + 1 >= len(args):
                name = "n" if arg == "-n" else "c"
                return CommandResult(
                    stderr=f"{command}: option requires an argument -- '{name}'",
                    exit_code=1,
                )
            arg_value = args[idx + 1]
            try:
                count = int(arg_value)
            except ValueError:
                return CommandResult(
                    stderr=f"{command}: invalid number: '{arg_value}'",
                    exit_code=1,
                )
            mode = "lines" if arg == "-n" else "bytes"
            idx += 2
            continue
        paths.append(arg)
        idx += 1

    if not paths:
        return CommandResult(stderr=f"{command}: missing file operand", exit_code=1)

    output: list[str] = []
    for i, path in enumerate(paths):
        content, error = _read(shell, command, path)
        if error is not None:
            return CommandResult(stderr=error, exit_code=1)

        if len(paths) > 1:
            output.append(f"==> {path} <==")

        output.append(_slice_content(content or "", count=count, mode=mode, tail=tail))

        if i < len(paths) - 1:
            output.append("")

    return CommandResult(stdout="\n".join(output))


@COMMAND_REGISTRY.command(
    "head", description="Output the first part of files", usage="head [-n N] <file>..."
)
def head(shell: "VirtualShell", args: list[str]) -> CommandResult:
    return _read_range_command(shell, args, tail=False)


@COMMAND_REGISTRY.command(
    "tail", description="Output the last part of files", usage="tail [-n N] <file>..."
)
def tail(shell: "VirtualShell", args: list[str]) -> CommandResult:
    return _read_range_command(shell, args, tail=True)


@COMMAND_REGISTRY.command(
    "wc", description="Count lines, words and bytes", usage="wc [-l|-w|-c] <file>..."
)
def wc(shell: "VirtualShell", args: list[str]) -> CommandResult:
    selected = [flag for flag in ("l", "w", "c") if f"-{flag}" in args]
    paths = [arg for arg in args if not arg.startswith("-")]
    if not paths:
        return CommandResult(stderr="wc: missing file operand", exit_code=1)
    columns = selected or ["l", "w", "c"]
    lines: list[str] = []
    for path in paths:
        content, error = _read(shell, "wc", path)
        if error is not None:
            return CommandResult(stderr=error, exit_code=1)
        text = content or ""
        counts = {
            "l": text.count("\n"),
            "w": len(text.split()),
            "c": len(text.encode("utf-8")),
        }
        lines.append(" ".join(f"{counts[col]:>7}" for col in columns) + f" {path}")
    return CommandResult(stdout="\n".join(lines))
