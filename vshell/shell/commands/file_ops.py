"""File manipulation commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..common import CommandResult
from ..registry import COMMAND_REGISTRY
from ...exceptions import (
    DirectoryNotEmpty,
    InvalidOperation,
    NodeExists,
    NodeNotFound,
    ShellError,
    UsageError,
)
from ...path_utils import ROOT, is_inside, join, name_of

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell


def _split_flags(args: list[str]) -> tuple[set[str], list[str]]:
    flags: set[str] = set()
    operands: list[str] = []
    for arg in args:
        if arg.startswith("--") and len(arg) > 2:
            flags.add(arg[2:])
        elif arg.startswith("-") and len(arg) > 1:
            flags.update(arg[1:])
        else:
            operands.append(arg)
    return flags, operands


def _collect(errors: list[str]) -> CommandResult:
    if errors:
        return CommandResult(stderr="\n".join(errors), exit_code=1)
    return CommandResult()


@COMMAND_REGISTRY.command("cat", description="Print file contents", usage="cat <file>...")
def cat(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        raise UsageError("cat: missing operand")
    blobs: list[str] = []
    errors: list[str] = []
    for arg in args:
        path = shell.resolve(arg)
        if shell.vfs.is_directory(path):
            errors.append(f"cat: {arg}: Is a directory")
        elif not shell.vfs.is_file(path):
            errors.append(f"cat: {arg}: No such file or directory")
        else:
            blobs.append(shell.vfs.read_file(path))
    result = _collect(errors)
    result.stdout = "\n".join(blobs)
    return result


@COMMAND_REGISTRY.command("touch", description="Create empty file", usage="touch <file>...")
def touch(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        raise UsageError("touch: missing file operand")
    errors: list[str] = []
    for arg in args:
        try:
            shell.vfs.touch(shell.resolve(arg))
        except ShellError:
            errors.append(f"touch: cannot touch '{arg}': No such file or directory")
    return _collect(errors)


@COMMAND_REGISTRY.command("mkdir", description="Create directories", usage="mkdir [-p] <dir>...")
def mkdir(shell: "VirtualShell", args: list[str]) -> CommandResult:
    flags, paths = _split_flags(args)
    parents = "p" in flags or "parents" in flags
    if not paths:
        raise UsageError("mkdir: missing operand")
    errors: list[str] = []
    for arg in paths:
        try:
            shell.vfs.create_directory(shell.resolve(arg), parents=parents)
        except NodeExists:
            errors.append(f"mkdir: cannot create directory '{arg}': File exists")
        except NodeNotFound:
            errors.append(f"mkdir: cannot create directory '{arg}': No such file or directory")
        except InvalidOperation:
            errors.append(f"mkdir: cannot create directory '{arg}': Not a directory")
    return _collect(errors)


@COMMAND_REGISTRY.command(
    "rm", description="Remove files or directories", usage="rm [-r] [-f] <path>..."
)
def rm(shell: "VirtualShell", args: list[str]) -> CommandResult:
    flags, targets = _split_flags(args)
    recursive = bool(flags & {"r", "R", "recursive"})
    force = bool(flags & {"f", "force"})
    if not targets:
        if force:
            return CommandResult()
        raise UsageError("rm: missing operand")
    errors: list[str] = []
    for arg in targets:
        path = shell.resolve(arg)
        if path == ROOT:
            errors.append("rm: it is dangerous to operate recursively on '/'")
        elif shell.vfs.is_file(path):
            shell.vfs.delete_file(path)
        elif shell.vfs.is_directory(path):
            try:
                shell.vfs.delete_directory(path, recursive=recursive)
            except DirectoryNotEmpty:
                errors.append(f"rm: cannot remove '{arg}': Directory not empty")
        elif not force:
            errors.append(f"rm: cannot remove '{arg}': No such file or directory")
    return _collect(errors)


def _destination(shell: "VirtualShell", source: str, dest_arg: str) -> str:
    dest = shell.resolve(dest_arg)
    if shell.vfs.is_directory(dest):
        return join(dest, name_of(source))
    return dest


@COMMAND_REGISTRY.command(
    "cp", description="Copy files and directories", usage="cp [-r] <source> <dest>"
)
def cp(shell: "VirtualShell", args: list[str]) -> CommandResult:
    flags, operands = _split_flags(args)
    recursive = bool(flags & {"r", "R", "recursive"})
    if not operands:
        raise UsageError("cp: missing file operand")
    if len(operands) != 2:
        raise UsageError(f"cp: missing destination file operand after '{operands[0]}'")
    source_arg, dest_arg = operands
    source = shell.resolve(source_arg)
    if shell.vfs.is_directory(source):
        if not recursive:
            raise InvalidOperation(f"cp: -r not specified; omitting directory '{source_arg}'")
        dest = _destination(shell, source, dest_arg)
        if dest == source or is_inside(dest, source):
            raise InvalidOperation(
                f"cp: cannot copy a directory, '{source_arg}', into itself, '{dest_arg}'"
            )
        try:
            shell.vfs.copy_directory(source, dest)
        except NodeExists:
            raise InvalidOperation(f"cp: cannot overwrite directory '{dest_arg}'") from None
        except NodeNotFound:
            raise NodeNotFound(
                f"cp: cannot create directory '{dest_arg}': No such file or directory"
            ) from None
        return CommandResult()
    if not shell.vfs.is_file(source):
        raise NodeNotFound(f"cp: cannot stat '{source_arg}': No such file or directory")
    dest = _destination(shell, source, dest_arg)
    if dest == source:
        raise InvalidOperation(f"cp: '{source_arg}' and '{dest_arg}' are the same file")
    try:
        shell.vfs.move_or_copy(source, dest, keep_source=True)
    except InvalidOperation:
        raise InvalidOperation(
            f"cp: cannot overwrite directory '{dest}' with non-directory"
        ) from None
    except NodeNotFound:
        raise NodeNotFound(
            f"cp: cannot create regular file '{dest_arg}': No such file or directory"
        ) from None
    return CommandResult()


@COMMAND_REGISTRY.command(
    "mv", description="Move or rename files and directories", usage="mv <source> <dest>"
)
def mv(shell: "VirtualShell", args: list[str]) -> CommandResult:
    _, operands = _split_flags(args)
    if not operands:
        raise UsageError("mv: missing file operand")
    if len(operands) != 2:
        raise UsageError(f"mv: missing destination file operand after '{operands[0]}'")
    source_arg, dest_arg = operands
    source = shell.resolve(source_arg)
    if not shell.vfs.exists(source):
        raise NodeNotFound(f"mv: cannot stat '{source_arg}': No such file or directory")
    dest = _destination(shell, source, dest_arg)
    if dest == source:
        return CommandResult()
    if shell.vfs.is_directory(source):
        if source == ROOT or is_inside(dest, source):
            raise InvalidOperation(
                f"mv: cannot move '{source_arg}' to a subdirectory of itself, '{dest_arg}'"
            )
        try:
            shell.vfs.move_directory(source, dest)
        except NodeExists:
            if shell.vfs.is_file(dest):
                raise InvalidOperation(
                    f"mv: cannot overwrite non-directory '{dest}' with directory '{source_arg}'"
                ) from None
            raise InvalidOperation(
                f"mv: cannot move '{source_arg}' to '{dest}': Directory not empty"
            ) from None
        except NodeNotFound:
            raise NodeNotFound(
                f"mv: cannot move '{source_arg}' to '{dest_arg}': No such file or directory"
            ) from None
        return CommandResult()
    try:
        shell.vfs.move_or_copy(source, dest, keep_source=False)
    except InvalidOperation:
        raise InvalidOperation(
            f"mv: cannot overwrite directory '{dest}' with non-directory"
        ) from None
    except NodeNotFound:
        raise NodeNotFound(
            f"mv: cannot move '{source_arg}' to '{dest_arg}': No such file or directory"
        ) from None
    return CommandResult()
