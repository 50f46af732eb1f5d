"""Pydantic models for the API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class OutputFormat(str, Enum):
    """Enumeration for generated document formats."""

    HTML = "html"
    MARKDOWN = "markdown"


class GenerateRequest(BaseModel):
    """Request model for the /api/generate endpoint.

    Attributes
    ----------
    book_id : int
        Id of the book to generate.
    book_title : str | None
        Title for the header and filename. Looked up in the catalog if omitted.
    output_format : OutputFormat
        Document format.
    include_timestamp : bool
        Stamp the document with the generation time.
    refetch_per_parent : bool
        Request child collections once per parent.

    """

    book_id: int = Field(..., ge=1, description="Book id")
    book_title: str | None = Field(default=None, description="Book title override")
    output_format: OutputFormat = Field(default=OutputFormat.HTML, description="Document format")
    include_timestamp: bool = Field(default=False, description="Stamp the generation time")
    refetch_per_parent: bool = Field(default=False, description="Re-request child collections per parent")

    @field_validator("book_title")
    @classmethod
    def normalize_book_title(cls, v: str | None) -> str | None:
        """Treat blank titles as missing."""
        if v is None or not v.strip():
            return None
        return v.strip()


class BookSummary(BaseModel):
    """A catalog entry."""

    id: int
    title: str


class BookListResponse(BaseModel):
    """Response model for the /api/books endpoint.

    Attributes
    ----------
    books : list[BookSummary]
        Books sorted by title.
    count : int
        Number of books.
    error : str | None
        Why the catalog is empty, if it is.

    """

    books: list[BookSummary] = Field(default_factory=list)
    count: int = Field(..., description="Number of books")
    error: str | None = Field(default=None, description="Catalog load error")


class ErrorResponse(BaseModel):
    """Error response model.

    Attributes
    ----------
    error : str
        Error message describing what went wrong.

    """

    error: str = Field(..., description="Error message")
