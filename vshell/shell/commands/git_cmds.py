"""Simulated git porcelain."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from ..common import CommandResult
from ..registry import COMMAND_REGISTRY
from ...exceptions import UsageError
from ...path_utils import name_of

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell

GIT_VERSION = "2.40.0"
BRANCH = "main"

USAGE = (
    "usage: git <command> [<args>]\n\n"
    "These are common Git commands:\n"
    "   init       Create an empty Git repository\n"
    "   clone      Clone a repository into a new directory\n"
    "   status     Show the working tree status\n"
    "   add        Add file contents to the index\n"
    "   commit     Record changes to the repository\n"
    "   log        Show commit logs\n"
    "   branch     List branches\n"
    "   checkout   Switch branches\n"
    "   diff       Show changes between commits\n"
    "   pull       Fetch from and integrate with another repository\n"
    "   push       Update remote refs"
)


def _short_hash(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:7]


def _status(shell: "VirtualShell") -> str:
    entries = [
        f"{entry.name}/" if entry.is_dir else entry.name
        for entry in shell.vfs.list_children(shell.vfs.cwd)
        if not entry.name.startswith(".")
    ]
    if not entries:
        return f"On branch {BRANCH}\nnothing to commit, working tree clean"
    listing = "\n".join(f"\t{name}" for name in entries)
    return (
        f"On branch {BRANCH}\n\nUntracked files:\n"
        '  (use "git add <file>..." to include in what will be committed)\n'
        f"{listing}\n\n"
        'nothing added to commit but untracked files present (use "git add" to track)'
    )


def _commit(shell: "VirtualShell", args: list[str]) -> CommandResult:
    message: str | None = None
    for idx, arg in enumerate(args):
        if arg in ("-m", "--message"):
            if idx + 1 >= len(args):
                raise UsageError("error: switch `m' requires a value")
            message = args[idx + 1]
    if message is None:
        raise UsageError("Aborting commit due to empty commit message.")
    changed = sum(1 for _, is_dir in shell.vfs.walk(shell.vfs.cwd) if not is_dir)
    noun = "file" if changed == 1 else "files"
    return CommandResult(
        stdout=f"[{BRANCH} {_short_hash(message)}] {message}\n {changed} {noun} changed"
    )


def _clone(args: list[str]) -> CommandResult:
    operands = [arg for arg in args if not arg.startswith("-")]
    if not operands:
        raise UsageError("fatal: You must specify a repository to clone.")
    url = operands[0]
    target = operands[1] if len(operands) > 1 else name_of(url.rstrip("/")).removesuffix(".git")
    return CommandResult(
        stdout=f"Cloning into '{target}'...\n"
        "remote: Enumerating objects: done.\n"
        "Receiving objects: 100%, done."
    )


@COMMAND_REGISTRY.command(
    "git",
    description="Version control (simulated)",
    usage="git <command> [<args>]",
    group="git",
    network={"clone", "pull", "push", "fetch"},
)
def git(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args or args[0] in ("help", "--help", "-h"):
        return CommandResult(stdout=USAGE)
    sub, rest = args[0], args[1:]
    if sub in ("version", "--version"):
        return CommandResult(stdout=f"git version {GIT_VERSION}")
    if sub == "init":
        return CommandResult(
            stdout=f"Initialized empty Git repository in {shell.vfs.cwd.rstrip('/')}/.git/"
        )
    if sub == "status":
        return CommandResult(stdout=_status(shell))
    if sub in ("add", "diff", "fetch"):
        return CommandResult()
    if sub == "commit":
        return _commit(shell, rest)
    if sub == "log":
        author = shell.env.get("USER", shell.settings.user)
        digest = hashlib.sha1(author.encode("utf-8")).hexdigest()
        return CommandResult(
            stdout=f"commit {digest}\n"
            f"Author: {author} <{author}@localhost>\n\n    Initial commit"
        )
    if sub == "branch":
        return CommandResult(stdout=f"* {BRANCH}")
    if sub in ("checkout", "switch"):
        if len(rest) >= 2 and rest[0] in ("-b", "-c"):
            return CommandResult(stdout=f"Switched to a new branch '{rest[1]}'")
        if rest:
            return CommandResult(stdout=f"Switched to branch '{rest[0]}'")
        raise UsageError(f"git {sub}: missing branch name")
    if sub == "clone":
        return _clone(rest)
    if sub == "pull":
        return CommandResult(stdout="Already up to date.")
    if sub == "push":
        return CommandResult(stdout="Everything up-to-date")
    return CommandResult(
        stdout=f"git: '{sub}' is not a git command. See 'git --help'.\n\n{USAGE}"
    )
