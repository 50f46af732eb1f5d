"""Flat content item model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Tier(str, Enum):
    """Hierarchy level of an item."""

    BOOK = "book"
    CHAPTER = "chapter"
    TOPIC = "topic"
    SECTION = "section"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Item(BaseModel):
    """A single WordPress post at any tier.

    Attributes:
        id: Post id, unique within its tier.
        title: Rendered title (may contain HTML entities).
        content: Rendered HTML content, possibly empty.
        parent_id: Id of the parent in the tier above. ``None`` for books and
            for children whose parent reference could not be resolved.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: str = ""
    parent_id: int | None = None
