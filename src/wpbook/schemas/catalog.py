"""Catalog and connection check results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from wpbook.schemas.item import Item


class CatalogResult(BaseModel):
    """Books available for generation.

    ``error`` carries a user-facing message when the load failed or returned
    nothing; ``books`` is empty in both cases.
    """

    books: list[Item] = Field(default_factory=list)
    error: str | None = None

    def find(self, book_id: int) -> Item | None:
        """Return the book with ``book_id`` if it is in the catalog."""
        for book in self.books:
            if book.id == book_id:
                return book
        return None


class ConnectionStatus(BaseModel):
    """Outcome of a site or post type availability check."""

    ok: bool
    name: str | None = None
    error: str | None = None
