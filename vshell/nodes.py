"""Project tree nodes exchanged with the hosting editor."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ProjectNode(BaseModel):
    """One file or folder of the editor's project tree."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    type: Literal["file", "folder"]
    content: str | None = None
    children: list["ProjectNode"] | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")

    @classmethod
    def folder(
        cls,
        name: str,
        children: list["ProjectNode"] | None = None,
        *,
        id: str | None = None,
    ) -> "ProjectNode":
        return cls(id=id or name, name=name, type="folder", children=list(children or []))

    @classmethod
    def file(
        cls,
        name: str,
        content: str = "",
        *,
        id: str | None = None,
        mime_type: str | None = None,
    ) -> "ProjectNode":
        return cls(id=id or name, name=name, type="file", content=content, mime_type=mime_type)

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"


ProjectNode.model_rebuild()
_TREE_ADAPTER = TypeAdapter(list[ProjectNode])


def load_tree(payload: str | bytes) -> list[ProjectNode]:
    """Parse a JSON array of nodes as produced by the editor."""

    return _TREE_ADAPTER.validate_json(payload)


def dump_tree(nodes: list[ProjectNode], *, indent: int | None = 2) -> str:
    return _TREE_ADAPTER.dump_json(
        nodes, indent=indent, by_alias=True, exclude_none=True
    ).decode()


__all__ = ["ProjectNode", "load_tree", "dump_tree"]
