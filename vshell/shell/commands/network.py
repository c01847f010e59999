"""Simulated HTTP clients. They never open a socket."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from ..common import CommandResult
from ..registry import COMMAND_REGISTRY
from ...exceptions import UsageError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import VirtualShell

# curl options that consume the following token
_CURL_VALUE_OPTIONS = frozenset(
    {"-X", "--request", "-H", "--header", "-d", "--data", "-o", "--output"}
)


def _url_parts(url: str) -> tuple[str, str]:
    parts = urlsplit(url if "://" in url else f"http://{url}")
    return parts.hostname or url, parts.path or "/"


@COMMAND_REGISTRY.command(
    "curl",
    description="Transfer a URL (simulated)",
    usage="curl [-I] [-X method] <url>",
    group="network",
    network=True,
)
def curl(shell: "VirtualShell", args: list[str]) -> CommandResult:
    method = "GET"
    head_only = False
    url: str | None = None
    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in _CURL_VALUE_OPTIONS:
            if idx + 1 >= len(args):
                raise UsageError(f"curl: option {arg}: requires parameter")
            if arg in ("-X", "--request"):
                method = args[idx + 1].upper()
            idx += 2
            continue
        if arg in ("-I", "--head"):
            head_only = True
        elif not arg.startswith("-"):
            url = arg
        idx += 1
    if url is None:
        raise UsageError("curl: no URL specified!\ncurl: try 'curl --help' for more information")
    host, path = _url_parts(url)
    if head_only:
        return CommandResult(
            stdout="HTTP/1.1 200 OK\nContent-Type: application/json\nServer: simulated"
        )
    body = {"method": method, "host": host, "path": path, "status": "ok", "simulated": True}
    return CommandResult(stdout=json.dumps(body, indent=2))


@COMMAND_REGISTRY.command(
    "wget",
    description="Download a URL (simulated)",
    usage="wget <url>",
    group="network",
    network=True,
)
def wget(shell: "VirtualShell", args: list[str]) -> CommandResult:
    urls = [arg for arg in args if not arg.startswith("-")]
    if not urls:
        raise UsageError("wget: missing URL\nUsage: wget [OPTION]... [URL]...")
    blocks: list[str] = []
    for url in urls:
        host, path = _url_parts(url)
        filename = path.rstrip("/").rsplit("/", 1)[-1] or "index.html"
        blocks.append(
            f"Resolving {host}... done.\n"
            "HTTP request sent, awaiting response... 200 OK\n"
            f"'{filename}' saved (simulated, nothing written)"
        )
    return CommandResult(stdout="\n\n".join(blocks))
