"""Session configuration definition."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COMMAND_GROUPS = frozenset({"core", "tooling", "git", "network"})


class ShellSettings(BaseSettings):
    """
    Defines the configuration of one virtual shell session, loaded from
    ``VSHELL_*`` environment variables or passed explicitly by the host.
    """

    model_config = SettingsConfigDict(env_prefix="VSHELL_", extra="ignore")

    # Seed values for the session environment.
    user: str = "developer"
    home: str = "/"
    shell: str = "/bin/bash"
    path: str = "/bin:/usr/bin:/usr/local/bin:/node_modules/.bin"
    term: str = "xterm-256color"

    # Number of commands kept in history before the oldest is evicted.
    history_limit: int = Field(default=100, ge=1)
    # Longest command text or argument stored in a history record.
    history_text_limit: int = Field(default=256, ge=1)
    autocomplete_limit: int = Field(default=10, ge=1)
    # Seconds execute_async waits before answering a network-flavored command.
    network_delay: float = Field(default=0.5, ge=0)
    # "core" is always enabled; the rest can be switched off per session.
    command_groups: frozenset[str] = DEFAULT_COMMAND_GROUPS

    log_level: str = "INFO"

    def enabled_groups(self) -> frozenset[str]:
        return frozenset(self.command_groups) | {"core"}


__all__ = ["ShellSettings", "DEFAULT_COMMAND_GROUPS"]
