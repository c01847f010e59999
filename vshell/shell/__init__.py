"""Virtual shell package."""

from .common import CommandResult, TerminalCommand
from .core import VirtualShell

__all__ = ["VirtualShell", "CommandResult", "TerminalCommand"]
