"""Core VirtualShell implementation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from ..config import ShellSettings
from ..exceptions import SessionClosed, ShellError
from ..hooks import FileSystemChangeHook
from ..nodes import ProjectNode
from ..path_utils import abbreviate_home, resolve
from ..shell_parser import ParsedLine, expand_alias, expand_variables, parse_line, tokenize
from ..sync import export_tree, import_tree
from ..vfs import VirtualFileSystem
from .common import CLEAR_SCREEN, CommandResult, ShellCommand, TerminalCommand
from .registry import COMMAND_REGISTRY, CommandSpec
from .state import SessionState

logger = logging.getLogger(__name__)


class VirtualShell:
    """Interprets one input line at a time against a private VFS.

    The hosting terminal owns the session: it calls :meth:`start` with the
    editor's project tree, feeds completed lines to :meth:`execute` (or
    :meth:`execute_async`) one at a time and finally calls :meth:`stop`.
    """

    def __init__(
        self,
        *,
        settings: ShellSettings | None = None,
        on_file_system_change: FileSystemChangeHook | None = None,
        allowed_commands: Iterable[str] | None = None,
    ) -> None:
        self.settings = settings or ShellSettings()
        self.on_file_system_change = on_file_system_change
        self.allowed_commands: set[str] | None = set(allowed_commands) if allowed_commands else None
        self.commands: dict[str, CommandSpec] = {}
        self.last_command_name: str | None = None
        self.vfs: VirtualFileSystem | None = None
        self.state: SessionState | None = None
        self._lock = asyncio.Lock()
        self._register_builtin_commands()

    # ------------------------------------------------------------------
    # Command registration
    # ------------------------------------------------------------------
    def register_command(
        self,
        name: str,
        handler: ShellCommand,
        *,
        description: str = "",
        usage: str = "",
        network: bool | frozenset[str] = False,
    ) -> None:
        self.commands[name] = CommandSpec(
            name=name,
            handler=handler,
            description=description,
            usage=usage or name,
            group="custom",
            network=network,
        )

    def available_commands(self) -> list[str]:
        return sorted(self.commands)

    def _register_builtin_commands(self) -> None:
        # Import command modules for their side effects (registration)
        from . import commands  # noqa: F401

        for spec in COMMAND_REGISTRY.iter_commands(self.settings.enabled_groups()):
            if self.allowed_commands is not None and spec.name not in self.allowed_commands:
                continue
            self.commands[spec.name] = spec

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self.vfs is not None

    def start(self, tree: Iterable[ProjectNode] = ()) -> None:
        self.state = SessionState.from_settings(self.settings)
        self.vfs = import_tree(tree)
        home = resolve(self.settings.home, "/")
        if self.vfs.is_directory(home):
            self.vfs.cwd = home
        self.state.environment["PWD"] = self.vfs.cwd
        logger.debug("session started in %s", self.vfs.cwd)

    def stop(self) -> None:
        self.vfs = None
        self.state = None
        logger.debug("session stopped")

    def restart(self, tree: Iterable[ProjectNode] = ()) -> None:
        self.stop()
        self.start(tree)

    def setup_virtual_fs(self, tree: Iterable[ProjectNode]) -> None:
        """Replace the filesystem with a new project tree, keeping the session state."""

        vfs, state = self._require_session()
        import_tree(tree, vfs)
        state.environment["PWD"] = vfs.cwd

    def _require_session(self) -> tuple[VirtualFileSystem, SessionState]:
        if self.vfs is None or self.state is None:
            raise SessionClosed("Session is not running; call start() first")
        return self.vfs, self.state

    # ------------------------------------------------------------------
    # Helpers for command handlers
    # ------------------------------------------------------------------
    @property
    def env(self) -> dict[str, str]:
        return self._require_session()[1].environment

    def resolve(self, path: str | None) -> str:
        vfs, state = self._require_session()
        if path is not None and (path == "~" or path.startswith("~/")):
            path = state.environment.get("HOME", self.settings.home) + "/" + path[2:]
        return resolve(path, vfs.cwd)

    def prompt(self) -> str:
        vfs, state = self._require_session()
        user = state.environment.get("USER", self.settings.user)
        home = state.environment.get("HOME", self.settings.home)
        return f"{user}:{abbreviate_home(vfs.cwd, home)} $ "

    def export_tree(self) -> list[ProjectNode]:
        vfs, _ = self._require_session()
        return export_tree(vfs)

    def get_autocomplete(self, partial: str) -> list[str]:
        vfs, state = self._require_session()
        _, separator, word = partial.rpartition(" ")
        suggestions: list[str] = []
        if not separator:
            names = set(self.commands) | set(state.aliases)
            suggestions.extend(sorted(name for name in names if name.startswith(word)))
        directory, slash, prefix = word.rpartition("/")
        if slash:
            base = resolve(directory or "/", vfs.cwd)
            shown = f"{directory}/"
        else:
            base = vfs.cwd
            shown = ""
        for entry in vfs.list_children(base):
            if entry.name.startswith(prefix):
                suggestions.append(f"{shown}{entry.name}{'/' if entry.is_dir else ''}")
        return suggestions[: self.settings.autocomplete_limit]

    # ------------------------------------------------------------------
    # Dispatcher
    # ------------------------------------------------------------------
    def execute(self, line: str) -> TerminalCommand:
        vfs, _ = self._require_session()
        raw = line.strip()
        if not raw:
            return TerminalCommand(command="")
        revision, cwd = vfs.revision, vfs.cwd
        parsed, failure = self._prepare(raw)
        result = failure if failure is not None else self._dispatch(parsed)
        return self._finish(raw, parsed, result, revision, cwd)

    async def execute_async(self, line: str) -> TerminalCommand:
        """Like :meth:`execute`, but waits out simulated network latency."""

        async with self._lock:
            vfs, _ = self._require_session()
            raw = line.strip()
            if not raw:
                return TerminalCommand(command="")
            parsed, failure = self._prepare(raw)
            if failure is None and parsed.name is not None:
                spec = self.commands.get(parsed.name)
                if spec is not None and spec.simulates_network(parsed.args):
                    await asyncio.sleep(self.settings.network_delay)
                    if not self.running:
                        logger.warning("session stopped while %s was waiting", parsed.name)
                        return TerminalCommand(
                            command=raw,
                            args=tuple(parsed.args),
                            output=f"{parsed.name}: session closed",
                            exit_code=1,
                        )
            vfs, _ = self._require_session()
            revision, cwd = vfs.revision, vfs.cwd
            result = failure if failure is not None else self._dispatch(parsed)
            return self._finish(raw, parsed, result, revision, cwd)

    def _prepare(self, raw: str) -> tuple[ParsedLine, CommandResult | None]:
        _, state = self._require_session()
        try:
            tokens = tokenize(raw)
            expanded = expand_alias(tokens, state.aliases)
            if expanded != tokens:
                logger.debug("alias %s expanded to %s", tokens[0], expanded)
            # Operators pass through untouched; expanded text is always an argument.
            expanded = [expand_variables(token, state.environment) for token in expanded]
            parsed = parse_line(expanded)
        except ValueError as exc:
            return ParsedLine(name=None), CommandResult(stderr=f"syntax error: {exc}", exit_code=2)
        return parsed, None

    def _dispatch(self, parsed: ParsedLine) -> CommandResult:
        name = parsed.name
        if name is None:
            return CommandResult()
        spec = self.commands.get(name)
        if spec is None:
            return CommandResult(stderr=f"{name}: command not found", exit_code=127)
        self.last_command_name = name
        logger.debug("dispatching %s %s", name, parsed.args)
        try:
            result = self._coerce(spec.handler(self, list(parsed.args)))
        except ShellError as exc:
            return CommandResult(stderr=str(exc), exit_code=exc.exit_code)
        except Exception as exc:  # unexpected failure path
            logger.exception("command %s failed unexpectedly", name)
            return CommandResult(stderr=f"{name}: {exc}", exit_code=1)
        if parsed.stdout is not None:
            return self._redirect(result, parsed.stdout, append=parsed.append)
        return result

    def _coerce(self, result: CommandResult | str | None) -> CommandResult:
        if isinstance(result, CommandResult):
            return result
        if result is None:
            return CommandResult()
        return CommandResult(stdout=str(result))

    def _redirect(self, result: CommandResult, target: str, *, append: bool) -> CommandResult:
        vfs, _ = self._require_session()
        payload = result.stdout
        if payload and not payload.endswith("\n"):
            payload += "\n"
        try:
            vfs.write_file(self.resolve(target), payload, append=append)
        except ShellError:
            return CommandResult(
                stderr=f"bash: {target}: No such file or directory",
                exit_code=1,
            )
        return CommandResult(stderr=result.stderr, exit_code=result.exit_code)

    def _finish(
        self,
        raw: str,
        parsed: ParsedLine,
        result: CommandResult,
        revision: int,
        cwd: str,
    ) -> TerminalCommand:
        vfs, state = self._require_session()
        if vfs.cwd != cwd:
            state.environment["PWD"] = vfs.cwd
        entry = state.record(
            TerminalCommand(
                command=raw,
                args=tuple(parsed.args),
                output=result.output,
                exit_code=result.exit_code,
            )
        )
        if vfs.revision != revision and self.on_file_system_change is not None:
            self.on_file_system_change(export_tree(vfs))
        return entry


__all__ = ["VirtualShell", "CLEAR_SCREEN"]
