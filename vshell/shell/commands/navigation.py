"""Navigation-oriented commands."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from ..common import CommandResult
from ..registry import COMMAND_REGISTRY
from ...exceptions import NodeNotFound, UsageError
from ...vfs import DirEntry

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell

OWNER = "developer developer"


def _long_line(entry: DirEntry, stamp: str) -> str:
    if entry.is_dir:
        return f"drwxr-xr-x  2 {OWNER} {4096:>6} {stamp} {entry.name}/"
    return f"-rw-r--r--  1 {OWNER} {entry.size:>6} {stamp} {entry.name}"


def _format_ls(entries: list[DirEntry], *, long_format: bool) -> str:
    if not entries:
        return ""
    if long_format:
        stamp = datetime.now().strftime("%a %b %d %Y")
        return "\n".join(_long_line(entry, stamp) for entry in entries)
    return "\n".join(f"{entry.name}/" if entry.is_dir else entry.name for entry in entries)


@COMMAND_REGISTRY.command("pwd", description="Print working directory")
def pwd(shell: "VirtualShell", _: list[str]) -> CommandResult:
    return CommandResult(stdout=shell.vfs.cwd)


@COMMAND_REGISTRY.command("cd", description="Change directory", usage="cd [path]")
def cd(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if len(args) > 1:
        raise UsageError("cd: too many arguments")
    env = shell.env
    target = args[0] if args else env.get("HOME", "/")
    echo = False
    if target == "-":
        target = env.get("OLDPWD", shell.vfs.cwd)
        echo = True
    path = shell.resolve(target)
    if not shell.vfs.is_directory(path):
        raise NodeNotFound(f"cd: no such file or directory: {target}")
    env["OLDPWD"] = shell.vfs.cwd
    shell.vfs.change_directory(path)
    env["PWD"] = path
    return CommandResult(stdout=path if echo else "")


@COMMAND_REGISTRY.command("ls", description="List directory contents", usage="ls [-a] [-l] [path]")
def ls(shell: "VirtualShell", args: list[str]) -> CommandResult:
    show_all = False
    long = False
    targets: list[str] = []
    for arg in args:
        if arg.startswith("-") and len(arg) > 1:
            show_all = show_all or "a" in arg or "A" in arg
            long = long or "l" in arg
        else:
            targets.append(arg)
    if not targets:
        targets = ["."]
    blocks: list[str] = []
    for idx, target in enumerate(targets):
        path = shell.resolve(target)
        if not shell.vfs.is_directory(path):
            raise NodeNotFound(f"ls: cannot access '{target}': No such file or directory")
        entries = [
            entry
            for entry in shell.vfs.list_children(path)
            if show_all or not entry.name.startswith(".")
        ]
        if len(targets) > 1:
            blocks.append(f"{target}:")
        blocks.append(_format_ls(entries, long_format=long))
        if idx < len(targets) - 1:
            blocks.append("")
    return CommandResult(stdout="\n".join(filter(None, blocks)))


@COMMAND_REGISTRY.command("tree", description="Render tree view", usage="tree [-a] [path]")
def tree(shell: "VirtualShell", args: list[str]) -> CommandResult:
    show_all = "-a" in args
    operands = [arg for arg in args if arg != "-a"]
    target = operands[0] if operands else "."
    root = shell.resolve(target)
    if not shell.vfs.is_directory(root):
        raise NodeNotFound(f"tree: {target}: No such file or directory")
    lines = [target]
    counts = {"dirs": 0, "files": 0}

    def render(directory: str, prefix: str = "") -> None:
        entries = [
            entry
            for entry in shell.vfs.list_children(directory)
            if show_all or not entry.name.startswith(".")
        ]
        for idx, entry in enumerate(entries):
            last = idx == len(entries) - 1
            connector = "└──" if last else "├──"
            if entry.is_dir:
                counts["dirs"] += 1
                lines.append(f"{prefix}{connector} {entry.name}/")
                render(entry.path, prefix + ("    " if last else "│   "))
            else:
                counts["files"] += 1
                lines.append(f"{prefix}{connector} {entry.name}")

    render(root)
    lines.append("")
    lines.append(f"{counts['dirs']} directories, {counts['files']} files")
    return CommandResult(stdout="\n".join(lines))
