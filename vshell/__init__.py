"""vshell package: a simulated POSIX shell over an in-memory project tree."""

from .config import ShellSettings
from .exceptions import (
    DirectoryNotEmpty,
    InvalidOperation,
    NodeExists,
    NodeNotFound,
    SessionClosed,
    ShellError,
    UsageError,
)
from .hooks import FileSystemChangeHook
from .nodes import ProjectNode, dump_tree, load_tree
from .shell import CommandResult, TerminalCommand, VirtualShell
from .sync import export_tree, import_tree
from .vfs import VirtualFileSystem

__all__ = [
    "VirtualFileSystem",
    "VirtualShell",
    "CommandResult",
    "TerminalCommand",
    "ShellSettings",
    "ProjectNode",
    "load_tree",
    "dump_tree",
    "import_tree",
    "export_tree",
    "FileSystemChangeHook",
    "ShellError",
    "NodeNotFound",
    "NodeExists",
    "InvalidOperation",
    "DirectoryNotEmpty",
    "UsageError",
    "SessionClosed",
]
