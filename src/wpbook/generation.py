"""Generation pipeline: WordPress book -> printable document."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import httpx

from wpbook.exceptions import NoContentError
from wpbook.output_formatter import OutputFormat, format_book
from wpbook.schemas import GeneratedDocument, ProgressUpdate
from wpbook.schemas.progress import ProgressCallback
from wpbook.tree_fetcher import TreeFetchOptions, fetch_tree
from wpbook.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class GenerationOptions:
    """Options for document generation.

    Attributes:
        output_format: ``"html"`` (printable, default) or ``"markdown"``.
        include_timestamp: If True, stamp the header with the current time.
            Leave False for byte-stable output.
        refetch_per_parent: Request child collections once per parent instead
            of once per build.
        base_url: REST base override.
    """

    output_format: OutputFormat = "html"
    include_timestamp: bool = False
    refetch_per_parent: bool = False
    base_url: str | None = None


async def generate_book(
    book_id: int,
    *,
    book_title: str | None = None,
    options: GenerationOptions | None = None,
    client: httpx.AsyncClient | None = None,
    on_progress: ProgressCallback | None = None,
) -> GeneratedDocument:
    """Fetch a book's hierarchy and serialize it into one document.

    Args:
        book_id: Id of the selected book.
        book_title: Rendered book title for the header and filename. Falls
            back to ``"Book <id>"``.
        options: Generation options. Uses defaults if None.
        client: Optional shared client.
        on_progress: Receives phase/message updates.

    Returns:
        The formatted document with its summary and download filename.

    Raises:
        FetchError: If a collection fetch exhausts its retries.
        NoContentError: If the book has no chapters.
    """
    opts = options or GenerationOptions()
    logger.info("Starting document generation", extra={"book_id": book_id, "format": opts.output_format})

    tree = await fetch_tree(
        book_id,
        options=TreeFetchOptions(
            base_url=opts.base_url,
            refetch_per_parent=opts.refetch_per_parent,
        ),
        client=client,
        on_progress=on_progress,
    )

    if not tree.chapters:
        raise NoContentError(
            f"No chapters found for book {book_id}. Please verify the book has content."
        )

    if on_progress is not None:
        on_progress(ProgressUpdate(step="document", message="Generating document..."))

    document = format_book(
        tree,
        book_title=book_title,
        generated_at=datetime.now() if opts.include_timestamp else None,
        output_format=opts.output_format,
    )

    if on_progress is not None:
        on_progress(ProgressUpdate(step="complete", message="Document generated successfully!"))
    logger.info("Document generated", extra={"book_id": book_id, "output_file": document.filename})
    return document
