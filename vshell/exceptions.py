"""Exception hierarchy for the virtual shell."""

from __future__ import annotations


class ShellError(Exception):
    """Base error; the interpreter turns these into command output."""

    exit_code = 1


class NodeNotFound(ShellError):
    """Referenced path is neither a known directory nor a known file."""


class NodeExists(ShellError):
    """Target path is already taken."""


class InvalidOperation(ShellError):
    """Operation does not apply to the node it was given."""


class DirectoryNotEmpty(InvalidOperation):
    """Non-recursive removal of a directory that still has descendants."""


class UsageError(ShellError):
    """Missing or malformed command arguments."""

    exit_code = 2


class SessionClosed(RuntimeError):
    """Raised when a stopped session is asked to run a command."""


__all__ = [
    "ShellError",
    "NodeNotFound",
    "NodeExists",
    "InvalidOperation",
    "DirectoryNotEmpty",
    "UsageError",
    "SessionClosed",
]
