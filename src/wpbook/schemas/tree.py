"""Book tree models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SectionNode(BaseModel):
    """A section, the leaf tier."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: str = ""
    parent_id: int


class TopicNode(BaseModel):
    """A topic and its sections, ordered by id."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: str = ""
    parent_id: int
    sections: tuple[SectionNode, ...] = Field(default_factory=tuple)


class ChapterNode(BaseModel):
    """A chapter and its topics, ordered by id."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: str = ""
    parent_id: int
    topics: tuple[TopicNode, ...] = Field(default_factory=tuple)


class BookTree(BaseModel):
    """The assembled hierarchy for one book."""

    model_config = ConfigDict(frozen=True)

    book_id: int
    chapters: tuple[ChapterNode, ...] = Field(default_factory=tuple)
