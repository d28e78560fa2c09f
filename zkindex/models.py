"""Shared models for the zettelkasten index."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QueryKind(str, Enum):
    FOCUS = "focus"
    SEARCH = "search"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SortMode(str, Enum):
    MODIFIED = "modified"
    CREATED = "created"
    SIZE = "size"
    NONE = "none"


@dataclass(frozen=True)
class NoteMetadata:
    modified_at: float
    created_at: float
    size_bytes: int


@dataclass(frozen=True)
class Note:
    """A single note as reported by a note store."""

    id: str
    title: str
    path: str
    modified_at: float
    created_at: float
    size_bytes: int

    @property
    def metadata(self) -> NoteMetadata:
        return NoteMetadata(
            modified_at=self.modified_at,
            created_at=self.created_at,
            size_bytes=self.size_bytes,
        )


@dataclass(frozen=True)
class QueryTerm:
    kind: QueryKind
    term: str


# API payloads

class CommandRequest(BaseModel):
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class RowPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    line: int
    note_id: str = Field(alias="note_id")
    text: str
    current: bool = False


class ViewPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    visible_ids: List[str] = Field(default_factory=list, alias="visible_ids")
    rows: List[RowPayload] = Field(default_factory=list)
    breadcrumb: Optional[str] = None
    sort_mode: SortMode = Field(alias="sort_mode")
    cursor_line: int = Field(alias="cursor_line", ge=1)
    narrowed: bool = False


class NotePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    path: str
    modified_at: float = Field(alias="modified_at")
    created_at: float = Field(alias="created_at")
    size_bytes: int = Field(alias="size_bytes")


class QueryTermPayload(BaseModel):
    kind: QueryKind
    term: str


class HistoryResponsePayload(BaseModel):
    terms: List[QueryTermPayload] = Field(default_factory=list)
