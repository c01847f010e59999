"""Command-line interface for vshell."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import ShellSettings
from .nodes import ProjectNode, dump_tree, load_tree
from .shell import VirtualShell
from .shell.common import TerminalCommand

logger = logging.getLogger(__name__)


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project",
        type=Path,
        help="Load the project tree from a JSON file (array of file/folder nodes).",
    )
    parser.add_argument(
        "--save",
        type=Path,
        help="Write the project tree back to this JSON file when done.",
    )
    parser.add_argument(
        "--log-level",
        help="Override VSHELL_LOG_LEVEL for this run.",
    )


def _configure_logging(settings: ShellSettings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _start_shell(args: argparse.Namespace) -> VirtualShell:
    settings = ShellSettings()
    if args.log_level:
        settings = settings.model_copy(update={"log_level": args.log_level})
    _configure_logging(settings)
    tree: list[ProjectNode] = []
    if args.project is not None:
        tree = load_tree(args.project.read_bytes())
        logger.info("loaded project tree from %s", args.project)
    shell = VirtualShell(settings=settings)
    shell.start(tree)
    return shell


def _save(shell: VirtualShell, target: Path | None) -> None:
    if target is None:
        return
    target.write_text(dump_tree(shell.export_tree()) + "\n", encoding="utf-8")
    logger.info("saved project tree to %s", target)


def _emit(entry: TerminalCommand) -> None:
    if entry.output:
        stream = sys.stdout if entry.exit_code == 0 else sys.stderr
        stream.write(entry.output + "\n")


def _run_exec(args: argparse.Namespace) -> int:
    shell = _start_shell(args)
    entry = shell.execute(args.command)
    _emit(entry)
    _save(shell, args.save)
    return entry.exit_code


def _run_shell(args: argparse.Namespace) -> int:
    shell = _start_shell(args)
    try:
        while True:
            line = input(shell.prompt())
            if line.strip() in {":q", "exit", "quit"}:
                return 0
            _emit(shell.execute(line))
    except (EOFError, KeyboardInterrupt):
        return 0
    finally:
        _save(shell, args.save)
        shell.stop()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="vshell")
    subparsers = parser.add_subparsers(dest="command_name", required=True)

    exec_parser = subparsers.add_parser("exec", help="Run a single command line")
    _add_common_flags(exec_parser)
    exec_parser.add_argument("command", help="Command line to execute")
    exec_parser.set_defaults(func=_run_exec)

    shell_parser = subparsers.add_parser("shell", help="Start an interactive shell")
    _add_common_flags(shell_parser)
    shell_parser.set_defaults(func=_run_shell)

    args = parser.parse_args(argv)
    exit_code = args.func(args)
    raise SystemExit(exit_code)


__all__ = ["main"]
