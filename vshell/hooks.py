"""Callback types used to notify the hosting editor."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import ProjectNode


FileSystemChangeHook = Callable[[list["ProjectNode"]], None]


__all__ = ["FileSystemChangeHook"]
