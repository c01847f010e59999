"""Simulated developer tooling: package managers and language runtimes.

Nothing here spawns a process or touches the network. Every command answers
with fixed text so that tutorials typed into the terminal "work" while the
editor stays entirely in memory.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from ..common import CommandResult
from ..registry import COMMAND_REGISTRY
from ...exceptions import NodeNotFound, UsageError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell

logger = logging.getLogger(__name__)

NODE_VERSION = "18.0.0"
PYTHON_VERSION = "3.11.4"
PIP_VERSION = "23.1.2"
MANAGER_VERSIONS = {"npm": "9.0.0", "yarn": "1.22.19", "pnpm": "8.6.0"}

INSTALL_SUBCOMMANDS = frozenset({"install", "i", "add", "ci"})
REMOVE_SUBCOMMANDS = frozenset({"uninstall", "remove", "rm", "un"})

DEV_SERVER = "Starting development server...\n✓ Server running on http://localhost:3000"
BUILD = "Building project...\n✓ Build completed successfully!"

DEFAULT_SCRIPTS = {"dev": "vite", "build": "vite build", "preview": "vite preview"}
CANNED_SCRIPTS = {
    "dev": DEV_SERVER,
    "start": DEV_SERVER,
    "build": BUILD,
    "preview": "Starting preview server...\n✓ Preview server running on http://localhost:4173",
    "test": "Running tests...\n✓ All tests passed!",
}


def _manager_usage(tool: str) -> str:
    return (
        f"{tool} <command>\n\nUsage:\n"
        f"  {tool} install [package...]\n"
        f"  {tool} uninstall <package...>\n"
        f"  {tool} run <script>\n"
        f"  {tool} test\n"
        f"  {tool} start\n"
        f"  {tool} build\n"
        f"  {tool} list\n"
        f"  {tool} version"
    )


def _package_json(shell: "VirtualShell") -> dict:
    path = shell.resolve("package.json")
    if not shell.vfs.is_file(path):
        return {}
    try:
        payload = json.loads(shell.vfs.read_file(path))
    except json.JSONDecodeError:
        logger.debug("ignoring malformed %s", path)
        return {}
    return payload if isinstance(payload, dict) else {}


def _run_script(shell: "VirtualShell", args: list[str]) -> CommandResult:
    declared = _package_json(shell).get("scripts")
    scripts = declared if isinstance(declared, dict) and declared else DEFAULT_SCRIPTS
    if not args:
        listing = "\n".join(f"  {name}: {body}" for name, body in scripts.items())
        return CommandResult(stdout=f"Available scripts:\n{listing}")
    script = args[0]
    if script in CANNED_SCRIPTS and script in scripts:
        return CommandResult(stdout=CANNED_SCRIPTS[script])
    if script in scripts:
        return CommandResult(
            stdout=f"> {script}\n> {scripts[script]}\n\n✓ Script completed successfully!"
        )
    return CommandResult(stderr=f'Error: Missing script: "{script}"', exit_code=1)


def _list_packages(shell: "VirtualShell") -> CommandResult:
    manifest = _package_json(shell)
    name = manifest.get("name", "project")
    version = manifest.get("version", "1.0.0")
    deps: dict[str, str] = {}
    for key in ("dependencies", "devDependencies"):
        section = manifest.get(key)
        if isinstance(section, dict):
            deps.update(section)
    lines = [f"{name}@{version} {shell.vfs.cwd}"]
    if not deps:
        lines.append("└── (empty)")
    names = sorted(deps)
    for idx, dep in enumerate(names):
        connector = "└──" if idx == len(names) - 1 else "├──"
        lines.append(f"{connector} {dep}@{str(deps[dep]).lstrip('^~')}")
    return CommandResult(stdout="\n".join(lines))


@COMMAND_REGISTRY.command(
    "npm",
    description="Node package manager (simulated)",
    usage="npm <command>",
    group="tooling",
    network=INSTALL_SUBCOMMANDS,
    aliases=("yarn", "pnpm"),
)
def npm(shell: "VirtualShell", args: list[str]) -> CommandResult:
    tool = shell.last_command_name if shell.last_command_name in MANAGER_VERSIONS else "npm"
    if not args:
        return CommandResult(stdout=_manager_usage(tool))
    sub, rest = args[0], args[1:]
    if sub in ("-v", "--version"):
        return CommandResult(stdout=MANAGER_VERSIONS[tool])
    if sub in INSTALL_SUBCOMMANDS:
        packages = [arg for arg in rest if not arg.startswith("-")]
        if not packages:
            return CommandResult(
                stdout="Installing dependencies...\n✓ Dependencies installed successfully!"
            )
        return CommandResult(
            stdout=f"Installing {', '.join(packages)}...\n✓ Packages installed successfully!"
        )
    if sub in REMOVE_SUBCOMMANDS:
        packages = [arg for arg in rest if not arg.startswith("-")]
        if not packages:
            raise UsageError(f"{tool} {sub}: missing package name")
        return CommandResult(
            stdout=f"Removing {', '.join(packages)}...\n✓ Packages removed successfully!"
        )
    if sub == "run":
        return _run_script(shell, rest)
    if sub in ("test", "start", "build"):
        return CommandResult(stdout=CANNED_SCRIPTS[sub])
    if sub == "version":
        return CommandResult(stdout=f"{tool}: {MANAGER_VERSIONS[tool]}\nnode: {NODE_VERSION}")
    if sub in ("list", "ls"):
        return _list_packages(shell)
    return CommandResult(
        stdout=f"{tool}: '{sub}' is not a {tool} command. See '{tool} help'.\n\n"
        + _manager_usage(tool)
    )


@COMMAND_REGISTRY.command(
    "npx",
    description="Run a package binary (simulated)",
    usage="npx <package> [args...]",
    group="tooling",
    network=True,
)
def npx(shell: "VirtualShell", args: list[str]) -> CommandResult:
    packages = [arg for arg in args if not arg.startswith("-")]
    if not packages:
        raise UsageError("npx: missing package name\nUsage: npx <package> [args...]")
    package = packages[0]
    return CommandResult(stdout=f"Running {package}...\n✓ {package} finished successfully!")


@COMMAND_REGISTRY.command(
    "node", description="Run Node.js (simulated)", usage="node [file]", group="tooling"
)
def node(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        return CommandResult(stdout=f'Node.js v{NODE_VERSION}\nType ".help" for more information.')
    if args[0] in ("-v", "--version"):
        return CommandResult(stdout=f"v{NODE_VERSION}")
    if args[0] in ("-e", "--eval"):
        return CommandResult(stdout="✓ Script executed successfully!")
    filename = args[0]
    if not shell.vfs.is_file(shell.resolve(filename)):
        raise NodeNotFound(f"Error: Cannot find module '{filename}'")
    return CommandResult(stdout=f"Executing {filename}...\n✓ Script executed successfully!")


@COMMAND_REGISTRY.command(
    "python",
    description="Run Python (simulated)",
    usage="python [-c code | file]",
    group="tooling",
    aliases=("python3",),
)
def python(shell: "VirtualShell", args: list[str]) -> CommandResult:
    command = shell.last_command_name or "python"
    if not args:
        return CommandResult(
            stdout=f'Python {PYTHON_VERSION}\nType "help", "copyright", "credits" or "license" '
            "for more information."
        )
    if args[0] in ("-V", "--version"):
        return CommandResult(stdout=f"Python {PYTHON_VERSION}")
    if args[0] == "-c":
        if len(args) < 2:
            raise UsageError("Argument expected for the -c option")
        return CommandResult(stdout="✓ Script executed successfully!")
    if args[0] == "-m":
        if len(args) < 2:
            raise UsageError("Argument expected for the -m option")
        return CommandResult(
            stdout=f"Running module {args[1]}...\n✓ Module finished successfully!"
        )
    filename = args[0]
    path = shell.resolve(filename)
    if not shell.vfs.is_file(path):
        return CommandResult(
            stderr=f"{command}: can't open file '{path}': [Errno 2] No such file or directory",
            exit_code=2,
        )
    return CommandResult(stdout=f"Executing {filename}...\n✓ Script executed successfully!")


def _pip_usage() -> str:
    return (
        "Usage:\n  pip <command> [options]\n\nCommands:\n"
        "  install      Install packages.\n"
        "  uninstall    Uninstall packages.\n"
        "  list         List installed packages.\n"
        "  freeze       Output installed packages in requirements format."
    )


def _requirements(shell: "VirtualShell", target: str) -> list[str]:
    path = shell.resolve(target)
    if not shell.vfs.is_file(path):
        raise NodeNotFound(
            "ERROR: Could not open requirements file: "
            f"[Errno 2] No such file or directory: '{target}'"
        )
    packages: list[str] = []
    for line in shell.vfs.read_file(path).splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            packages.append(line)
    return packages


@COMMAND_REGISTRY.command(
    "pip",
    description="Python package installer (simulated)",
    usage="pip <command>",
    group="tooling",
    network={"install"},
    aliases=("pip3",),
)
def pip(shell: "VirtualShell", args: list[str]) -> CommandResult:
    if not args:
        return CommandResult(stdout=_pip_usage())
    sub, rest = args[0], args[1:]
    if sub in ("-V", "--version"):
        return CommandResult(
            stdout=f"pip {PIP_VERSION} from /usr/lib/python3/site-packages/pip "
            f"(python {PYTHON_VERSION.rsplit('.', 1)[0]})"
        )
    if sub == "install":
        packages: list[str] = []
        idx = 0
        while idx < len(rest):
            if rest[idx] in ("-r", "--requirement"):
                if idx + 1 >= len(rest):
                    raise UsageError("ERROR: -r option requires 1 argument")
                packages.extend(_requirements(shell, rest[idx + 1]))
                idx += 2
                continue
            if not rest[idx].startswith("-"):
                packages.append(rest[idx])
            idx += 1
        if not packages:
            raise UsageError("ERROR: You must give at least one requirement to install")
        collecting = "\n".join(f"Collecting {pkg}" for pkg in packages)
        return CommandResult(
            stdout=f"{collecting}\nSuccessfully installed {' '.join(packages)}"
        )
    if sub == "uninstall":
        packages = [arg for arg in rest if not arg.startswith("-")]
        if not packages:
            raise UsageError("ERROR: You must give at least one requirement to uninstall")
        return CommandResult(
            stdout="\n".join(f"Successfully uninstalled {pkg}" for pkg in packages)
        )
    if sub == "list":
        return CommandResult(
            stdout=f"Package    Version\n---------- -------\npip        {PIP_VERSION}"
        )
    if sub == "freeze":
        return CommandResult()
    return CommandResult(stdout=f'ERROR: unknown command "{sub}"\n\n' + _pip_usage())


@COMMAND_REGISTRY.command(
    "serve",
    description="Serve a static directory (simulated)",
    usage="serve [-l port] [dir]",
    group="tooling",
)
def serve(shell: "VirtualShell", args: list[str]) -> CommandResult:
    port = "3000"
    target = "."
    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in ("-l", "-p", "--listen", "--port"):
            if idx + 1 >= len(args):
                raise UsageError(f"serve: option '{arg}' requires an argument")
            port = args[idx + 1]
            idx += 2
            continue
        target = arg
        idx += 1
    if not port.isdigit():
        raise UsageError(f"serve: invalid port '{port}'")
    path = shell.resolve(target)
    if not shell.vfs.is_directory(path):
        raise NodeNotFound(f"serve: {target}: No such file or directory")
    return CommandResult(
        stdout=f"Serving {path}...\n✓ Server running on http://localhost:{port}"
    )
