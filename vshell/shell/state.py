"""Per-session environment, aliases and command history."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from ..config import ShellSettings
from .common import TerminalCommand

DEFAULT_ALIASES = {
    "ll": "ls -la",
    "la": "ls -la",
    "..": "cd ..",
    "...": "cd ../..",
    "cls": "clear",
}


@dataclass
class SessionState:
    environment: dict[str, str] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    history: deque[TerminalCommand] = field(default_factory=lambda: deque(maxlen=100))
    history_text_limit: int = 256

    @classmethod
    def from_settings(cls, settings: ShellSettings) -> "SessionState":
        environment = {
            "HOME": settings.home,
            "PWD": settings.home,
            "USER": settings.user,
            "SHELL": settings.shell,
            "PATH": settings.path,
            "TERM": settings.term,
        }
        return cls(
            environment=environment,
            aliases=dict(DEFAULT_ALIASES),
            history=deque(maxlen=settings.history_limit),
            history_text_limit=settings.history_text_limit,
        )

    def record(self, entry: TerminalCommand) -> TerminalCommand:
        limit = self.history_text_limit
        stored = TerminalCommand(
            command=entry.command[:limit],
            args=tuple(arg[:limit] for arg in entry.args),
            output=entry.output,
            exit_code=entry.exit_code,
            timestamp=entry.timestamp,
        )
        self.history.append(stored)
        return stored

    def recent(self, count: int | None = None) -> list[tuple[int, TerminalCommand]]:
        numbered = list(enumerate(self.history, start=1))
        if count is None:
            return numbered
        return numbered[-count:] if count > 0 else []


__all__ = ["SessionState", "DEFAULT_ALIASES"]
