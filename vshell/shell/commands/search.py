"""Search-oriented commands."""

from __future__ import annotations

import fnmatch
from typing import TYPE_CHECKING

from ..common import CommandResult
from ..registry import COMMAND_REGISTRY
from ...exceptions import UsageError
from ...path_utils import name_of

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell


@COMMAND_REGISTRY.command(
    "grep", description="Search for a pattern in files", usage="grep [-i] <pattern> <file>..."
)
def grep(shell: "VirtualShell", args: list[str]) -> CommandResult:
    ignore_case = False
    pattern: str | None = None
    paths: list[str] = []
    for token in args:
        if token in ("-i", "--ignore-case"):
            ignore_case = True
        elif token in ("-n", "--line-number"):
            continue
        elif pattern is None:
            pattern = token
        else:
            paths.append(token)
    if pattern is None or not paths:
        raise UsageError("grep: missing pattern or file\nUsage: grep [-i] <pattern> <file>...")
    needle = pattern.lower() if ignore_case else pattern
    results: list[str] = []
    errors: list[str] = []
    for target in paths:
        path = shell.resolve(target)
        if shell.vfs.is_directory(path):
            errors.append(f"grep: {target}: Is a directory")
            continue
        if not shell.vfs.is_file(path):
            errors.append(f"grep: {target}: No such file or directory")
            continue
        for idx, line in enumerate(shell.vfs.read_file(path).splitlines(), start=1):
            haystack = line.lower() if ignore_case else line
            if needle in haystack:
                prefix = f"{target}:{idx}:" if len(paths) > 1 else f"{idx}:"
                results.append(f"{prefix}{line}")
    if errors:
        return CommandResult(stdout="\n".join(results), stderr="\n".join(errors), exit_code=2)
    if not results:
        return CommandResult(stdout=f"No matches found for '{pattern}'")
    return CommandResult(stdout="\n".join(results))


@COMMAND_REGISTRY.command(
    "find",
    description="Search for files in a directory hierarchy",
    usage="find [pattern] [-name glob] [-type f|d]",
)
def find(shell: "VirtualShell", args: list[str]) -> CommandResult:
    pattern: str | None = None
    name_pattern: str | None = None
    type_filter: str | None = None

    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg == "-name":
            if idx + 1 >= len(args):
                raise UsageError("find: missing argument to `-name'")
            name_pattern = args[idx + 1]
            idx += 2
        elif arg == "-type":
            if idx + 1 >= len(args):
                raise UsageError("find: missing argument to `-type'")
            candidate = args[idx + 1]
            if candidate not in ("f", "d"):
                raise UsageError(f"find: unknown argument to -type: {candidate}")
            type_filter = candidate
            idx += 2
        elif arg.startswith("-"):
            raise UsageError(f"find: unknown predicate `{arg}'")
        else:
            pattern = arg
            idx += 1

    match_all = pattern is None or pattern == "*"
    results: list[str] = []
    for path, is_dir in shell.vfs.walk(shell.vfs.cwd):
        if type_filter == "f" and is_dir:
            continue
        if type_filter == "d" and not is_dir:
            continue
        if name_pattern and not fnmatch.fnmatch(name_of(path), name_pattern):
            continue
        if not match_all and pattern not in path:
            continue
        results.append(path)

    return CommandResult(stdout="\n".join(results))
