"""Flat, path-keyed virtual filesystem."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from .exceptions import DirectoryNotEmpty, InvalidOperation, NodeExists, NodeNotFound
from .path_utils import ROOT, ancestors_of, is_inside, name_of, parent_of, rebase

logger = logging.getLogger(__name__)


@dataclass
class FileEntry:
    content: str = ""
    mime_type: str | None = None
    node_id: str | None = None

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


@dataclass
class DirEntry:
    name: str
    path: str
    is_dir: bool
    size: int = 0


class VirtualFileSystem:
    """In-memory filesystem made of a directory set and a file map.

    All public methods take canonical absolute paths; resolving user input
    against the working directory is the caller's job.
    """

    def __init__(self) -> None:
        self.directories: set[str] = {ROOT}
        self.files: dict[str, FileEntry] = {}
        self.cwd = ROOT
        self.revision = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_directory(self, path: str) -> bool:
        return path in self.directories

    def is_file(self, path: str) -> bool:
        return path in self.files

    def exists(self, path: str) -> bool:
        return path in self.directories or path in self.files

    def list_children(self, path: str) -> list[DirEntry]:
        if path not in self.directories:
            return []
        entries = [
            DirEntry(name=name_of(d), path=d, is_dir=True)
            for d in self.directories
            if d != ROOT and parent_of(d) == path
        ]
        entries.extend(
            DirEntry(name=name_of(f), path=f, is_dir=False, size=entry.size)
            for f, entry in self.files.items()
            if parent_of(f) == path
        )
        entries.sort(key=lambda entry: entry.name)
        return entries

    def read_file(self, path: str) -> str:
        return self.get_file(path).content

    def get_file(self, path: str) -> FileEntry:
        entry = self.files.get(path)
        if entry is None:
            if path in self.directories:
                raise InvalidOperation(f"{path}: Is a directory")
            raise NodeNotFound(f"{path}: No such file or directory")
        return entry

    def walk(self, path: str = ROOT) -> Iterator[tuple[str, bool]]:
        """Yield ``(path, is_dir)`` for ``path`` and everything under it, sorted."""

        if path in self.files:
            yield (path, False)
            return
        if path not in self.directories:
            raise NodeNotFound(f"{path}: No such file or directory")
        found = [(d, True) for d in self.directories if d == path or is_inside(d, path)]
        found.extend((f, False) for f in self.files if is_inside(f, path))
        yield from sorted(found)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def change_directory(self, path: str) -> str:
        if path not in self.directories:
            raise NodeNotFound(f"{path}: No such file or directory")
        self.cwd = path
        return self.cwd

    def create_directory(self, path: str, *, parents: bool = False) -> None:
        if path in self.files:
            raise NodeExists(f"{path}: File exists")
        if path in self.directories:
            if parents:
                return
            raise NodeExists(f"{path}: File exists")
        missing = [p for p in ancestors_of(path) if p not in self.directories]
        if missing and not parents:
            raise NodeNotFound(f"{path}: No such file or directory")
        for ancestor in missing:
            if ancestor in self.files:
                raise InvalidOperation(f"{ancestor}: Not a directory")
        for ancestor in missing:
            self._add_directory(ancestor)
        self._add_directory(path)

    def write_file(
        self,
        path: str,
        content: str,
        *,
        append: bool = False,
        mime_type: str | None = None,
    ) -> FileEntry:
        if path == ROOT or path in self.directories:
            raise InvalidOperation(f"{path}: Is a directory")
        parent = parent_of(path)
        if parent not in self.directories:
            raise NodeNotFound(f"{path}: No such file or directory")
        entry = self.files.get(path)
        if entry is None:
            entry = FileEntry(content=content, mime_type=mime_type)
            self.files[path] = entry
            self._changed(path, "create", is_dir=False)
            return entry
        entry.content = entry.content + content if append else content
        if mime_type is not None:
            entry.mime_type = mime_type
        self._changed(path, "update", is_dir=False)
        return entry

    def touch(self, path: str) -> bool:
        """Create an empty file if nothing lives at ``path``; report creation."""

        if self.exists(path):
            return False
        self.write_file(path, "")
        return True

    def delete_file(self, path: str) -> None:
        if path in self.directories:
            raise InvalidOperation(f"{path}: Is a directory")
        if path not in self.files:
            raise NodeNotFound(f"{path}: No such file or directory")
        del self.files[path]
        self._changed(path, "delete", is_dir=False)

    def delete_directory(self, path: str, *, recursive: bool = False) -> None:
        if path == ROOT:
            raise InvalidOperation("/: Cannot remove root directory")
        if path in self.files:
            raise InvalidOperation(f"{path}: Not a directory")
        if path not in self.directories:
            raise NodeNotFound(f"{path}: No such file or directory")
        nested_files = [f for f in self.files if is_inside(f, path)]
        nested_dirs = [d for d in self.directories if is_inside(d, path)]
        if (nested_files or nested_dirs) and not recursive:
            raise DirectoryNotEmpty(f"{path}: Directory not empty")
        for file_path in sorted(nested_files):
            del self.files[file_path]
            self._changed(file_path, "delete", is_dir=False)
        for dir_path in sorted(nested_dirs, reverse=True):
            self.directories.discard(dir_path)
            self._changed(dir_path, "delete", is_dir=True)
        self.directories.discard(path)
        self._changed(path, "delete", is_dir=True)
        if self.cwd == path or is_inside(self.cwd, path):
            self.cwd = parent_of(path)
            logger.debug("working directory removed, moved to %s", self.cwd)

    def move_or_copy(self, source: str, dest: str, *, keep_source: bool) -> FileEntry:
        entry = self.files.get(source)
        if entry is None:
            raise NodeNotFound(f"{source}: No such file or directory")
        if dest == source:
            return entry
        copied = self.write_file(dest, entry.content, mime_type=entry.mime_type)
        if keep_source:
            return copied
        copied.node_id = entry.node_id
        self.delete_file(source)
        return copied

    def copy_directory(self, source: str, dest: str) -> None:
        self._relocate_directory(source, dest, keep_source=True)

    def move_directory(self, source: str, dest: str) -> None:
        self._relocate_directory(source, dest, keep_source=False)

    def clear(self) -> None:
        self.directories = {ROOT}
        self.files = {}
        self.cwd = ROOT
        self.revision += 1

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------
    def check_invariants(self) -> None:
        assert ROOT in self.directories, "root directory missing"
        assert self.cwd in self.directories, f"cwd {self.cwd} is not a directory"
        for path in self.files:
            assert path not in self.directories, f"{path} is both a file and a directory"
        for path in list(self.files) + list(self.directories):
            for ancestor in ancestors_of(path):
                assert ancestor in self.directories, f"{path} has no parent {ancestor}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _add_directory(self, path: str) -> None:
        self.directories.add(path)
        self._changed(path, "create", is_dir=True)

    def _relocate_directory(self, source: str, dest: str, *, keep_source: bool) -> None:
        if source == ROOT:
            raise InvalidOperation("/: Cannot move or copy the root directory")
        if source not in self.directories:
            raise NodeNotFound(f"{source}: No such file or directory")
        if dest == source or is_inside(dest, source):
            raise InvalidOperation(f"{dest}: Cannot place a directory inside itself")
        if self.exists(dest):
            raise NodeExists(f"{dest}: File exists")
        if parent_of(dest) not in self.directories:
            raise NodeNotFound(f"{dest}: No such file or directory")
        subdirs = sorted(d for d in self.directories if d == source or is_inside(d, source))
        subfiles = sorted(f for f in self.files if is_inside(f, source))
        for dir_path in subdirs:
            self._add_directory(rebase(dir_path, source, dest))
        for file_path in subfiles:
            self.move_or_copy(file_path, rebase(file_path, source, dest), keep_source=True)
            if not keep_source:
                self.files[rebase(file_path, source, dest)].node_id = self.files[file_path].node_id
        if keep_source:
            return
        cwd = self.cwd
        self.delete_directory(source, recursive=True)
        if cwd == source or is_inside(cwd, source):
            self.cwd = rebase(cwd, source, dest)

    def _changed(self, path: str, event: str, *, is_dir: bool) -> None:
        self.revision += 1
        logger.debug("%s %s%s", event, path, "/" if is_dir else "")


__all__ = ["VirtualFileSystem", "FileEntry", "DirEntry"]
