"""Shared shell types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import VirtualShell

CLEAR_SCREEN = "\x1b[2J\x1b[H"


@dataclass(slots=True)
class CommandResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


@dataclass(frozen=True, slots=True)
class TerminalCommand:
    """Immutable record of one executed line."""

    command: str
    args: tuple[str, ...] = ()
    output: str = ""
    exit_code: int = 0
    timestamp: datetime = field(default_factory=datetime.now)


ShellCommand = Callable[["VirtualShell", list[str]], CommandResult | str | None]


__all__ = ["CommandResult", "TerminalCommand", "ShellCommand", "CLEAR_SCREEN"]
