"""Registry for shell commands."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .common import ShellCommand


@dataclass(frozen=True, slots=True)
class CommandSpec:
    name: str
    handler: ShellCommand
    description: str = ""
    usage: str = ""
    group: str = "core"
    # True for every invocation, or the subcommands that simulate network latency.
    network: bool | frozenset[str] = False

    def simulates_network(self, args: list[str]) -> bool:
        if isinstance(self.network, bool):
            return self.network
        return bool(args) and args[0] in self.network


class CommandRegistry:
    """Closed name -> handler table filled by the command modules."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}

    def register(
        self,
        name: str,
        handler: ShellCommand,
        *,
        description: str = "",
        usage: str = "",
        group: str = "core",
        network: bool | Iterable[str] = False,
    ) -> ShellCommand:
        if name in self._commands:
            raise ValueError(f"Command {name!r} is already registered")
        flag = network if isinstance(network, bool) else frozenset(network)
        self._commands[name] = CommandSpec(
            name=name,
            handler=handler,
            description=description,
            usage=usage or name,
            group=group,
            network=flag,
        )
        return handler

    def command(
        self,
        name: str,
        *,
        description: str = "",
        usage: str = "",
        group: str = "core",
        network: bool | Iterable[str] = False,
        aliases: Iterable[str] = (),
    ) -> Callable[[ShellCommand], ShellCommand]:
        """Decorator variant for registering shell commands."""

        def decorator(func: ShellCommand) -> ShellCommand:
            for command_name in (name, *aliases):
                self.register(
                    command_name,
                    func,
                    description=description,
                    usage=usage.replace(name, command_name, 1) if usage else "",
                    group=group,
                    network=network,
                )
            return func

        return decorator

    def iter_commands(self, groups: Iterable[str] | None = None) -> Iterable[CommandSpec]:
        allowed = set(groups) if groups is not None else None
        return tuple(
            spec
            for spec in self._commands.values()
            if allowed is None or spec.group in allowed
        )


COMMAND_REGISTRY = CommandRegistry()


__all__ = ["COMMAND_REGISTRY", "CommandRegistry", "CommandSpec"]
