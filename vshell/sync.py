"""Conversion between the editor's project tree and the flat VFS."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .nodes import ProjectNode
from .path_utils import ROOT, ancestors_of, join, name_of, parent_of
from .vfs import VirtualFileSystem

logger = logging.getLogger(__name__)


def import_tree(
    nodes: Iterable[ProjectNode],
    vfs: VirtualFileSystem | None = None,
) -> VirtualFileSystem:
    """Rebuild ``vfs`` (or a fresh one) from a project tree.

    Folders become directories and files become file entries keyed by their
    full path. Ancestors are always added so the tree can never leave an
    orphaned file behind. The working directory is kept when it survives the
    rebuild and reset to ``/`` otherwise.
    """

    target = vfs if vfs is not None else VirtualFileSystem()
    previous_cwd = target.cwd
    target.clear()
    _import_nodes(target, nodes, ROOT)
    if previous_cwd in target.directories:
        target.cwd = previous_cwd
    logger.debug(
        "imported project tree: %d directories, %d files",
        len(target.directories) - 1,
        len(target.files),
    )
    return target


def _import_nodes(vfs: VirtualFileSystem, nodes: Iterable[ProjectNode], parent: str) -> None:
    for node in nodes:
        path = join(parent, node.name)
        if not node.name or "/" in node.name or node.name in (".", ".."):
            logger.warning("skipping project node with invalid name %r", node.name)
            continue
        if node.is_folder:
            if path in vfs.files:
                logger.warning("skipping folder %s: a file already uses that path", path)
                continue
            vfs.directories.add(path)
            _import_nodes(vfs, node.children or [], path)
            continue
        if path in vfs.directories:
            logger.warning("skipping file %s: a folder already uses that path", path)
            continue
        for ancestor in ancestors_of(path):
            vfs.directories.add(ancestor)
        vfs.write_file(path, node.content or "", mime_type=node.mime_type)
        vfs.files[path].node_id = node.id


def export_tree(vfs: VirtualFileSystem) -> list[ProjectNode]:
    """Build the project tree the editor should display for ``vfs``."""

    built: dict[str, ProjectNode] = {}
    roots: list[ProjectNode] = []
    paths = sorted((vfs.directories - {ROOT}) | set(vfs.files))
    for path in paths:
        entry = vfs.files.get(path)
        if entry is None:
            node = ProjectNode(id=path, name=name_of(path), type="folder", children=[])
        else:
            node = ProjectNode(
                id=entry.node_id or path,
                name=name_of(path),
                type="file",
                content=entry.content,
                mime_type=entry.mime_type,
            )
        built[path] = node
        parent = _closest_folder(built, path)
        if parent is None:
            roots.append(node)
        else:
            assert parent.children is not None
            parent.children.append(node)
    return roots


def _closest_folder(built: dict[str, ProjectNode], path: str) -> ProjectNode | None:
    current = parent_of(path)
    while current != ROOT:
        node = built.get(current)
        if node is not None and node.is_folder:
            return node
        current = parent_of(current)
    return None


__all__ = ["import_tree", "export_tree"]
