"""Helpers for working with canonical POSIX paths inside the VFS.

Every helper here is purely syntactic: nothing checks whether a path exists.
"""

from __future__ import annotations

from collections.abc import Iterator

ROOT = "/"


def _segments(path: str) -> Iterator[str]:
    for part in path.split("/"):
        if part in ("", "."):
            continue
        yield part


def normalize(path: str) -> str:
    """Collapse an absolute path into its canonical form."""

    parts: list[str] = []
    for part in _segments(path):
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return ROOT + "/".join(parts)


def resolve(path: str | None, cwd: str) -> str:
    """Resolve ``path`` against ``cwd`` into a canonical absolute path."""

    if path is None or path in ("", "."):
        return cwd
    if path == "..":
        return parent_of(cwd)
    if path.startswith("/"):
        return normalize(path)
    if cwd == ROOT:
        return normalize(ROOT + path)
    return normalize(f"{cwd}/{path}")


def parent_of(path: str) -> str:
    if path == ROOT:
        return ROOT
    head, _, _ = path.rpartition("/")
    return head or ROOT


def name_of(path: str) -> str:
    return path.rpartition("/")[2]


def join(directory: str, name: str) -> str:
    if directory == ROOT:
        return ROOT + name
    return f"{directory}/{name}"


def is_inside(path: str, ancestor: str) -> bool:
    """True when ``path`` is a strict descendant of ``ancestor``."""

    if path == ancestor:
        return False
    if ancestor == ROOT:
        return path.startswith(ROOT)
    return path.startswith(ancestor + "/")


def ancestors_of(path: str) -> list[str]:
    """Every proper ancestor of ``path``, root first."""

    result: list[str] = []
    current = path
    while current != ROOT:
        current = parent_of(current)
        result.append(current)
    result.reverse()
    return result


def rebase(path: str, old_prefix: str, new_prefix: str) -> str:
    """Move ``path`` from under ``old_prefix`` to under ``new_prefix``."""

    if path == old_prefix:
        return new_prefix
    suffix = path[len(old_prefix) :] if old_prefix != ROOT else path
    if new_prefix == ROOT:
        return suffix
    return new_prefix + suffix


def abbreviate_home(path: str, home: str) -> str:
    if path == home:
        return "~"
    if home == ROOT:
        return "~" + path
    if is_inside(path, home):
        return "~" + path[len(home) :]
    return path


__all__ = [
    "ROOT",
    "normalize",
    "resolve",
    "parent_of",
    "name_of",
    "join",
    "is_inside",
    "ancestors_of",
    "rebase",
    "abbreviate_home",
]
