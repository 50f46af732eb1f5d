"""Load the list of books available for generation."""

from __future__ import annotations

import locale

import httpx

from wpbook.exceptions import FetchError
from wpbook.http_utils import fetch_collection
from wpbook.schemas import CatalogResult, Item
from wpbook.utils.logging_config import get_logger
from wpbook.wordpress import catalog_url, parse_book, plain_text

logger = get_logger(__name__)

EMPTY_CATALOG_MESSAGE = "No books found in the WordPress site"


def sort_key(item: Item) -> tuple[str, int]:
    """Locale-aware title key; the id breaks ties so ordering is total."""
    return locale.strxfrm(plain_text(item.title).casefold()), item.id


async def load_catalog(
    *, base_url: str | None = None, client: httpx.AsyncClient | None = None
) -> CatalogResult:
    """Fetch, validate and sort the book catalog.

    The catalog is fetched in a single attempt. Failures are reported through
    ``CatalogResult.error`` rather than raised so the caller stays usable.

    Args:
        base_url: REST base override. Defaults to ``WPBOOK_BASE_URL``.
        client: Optional shared client.

    Returns:
        The books sorted by title, or an empty list with an error message.
    """
    url = catalog_url(base_url)
    try:
        raw_books = await fetch_collection(url, client=client)
    except FetchError as exc:
        logger.error("Error fetching books", extra={"url": url, "error": str(exc)})
        return CatalogResult(books=[], error=f"Failed to fetch books: {exc}")

    books = [book for book in (parse_book(raw) for raw in raw_books) if book is not None]
    books.sort(key=sort_key)

    logger.info("Fetched books", extra={"count": len(books), "skipped": len(raw_books) - len(books)})
    if not books:
        return CatalogResult(books=[], error=EMPTY_CATALOG_MESSAGE)
    return CatalogResult(books=books)
