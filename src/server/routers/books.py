"""Catalog and generation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, Response

from server.models import BookListResponse, BookSummary, ErrorResponse, GenerateRequest
from wpbook.catalog import load_catalog
from wpbook.exceptions import FetchError, NoContentError
from wpbook.generation import GenerationOptions, generate_book
from wpbook.http_utils import create_client
from wpbook.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()

COMMON_GENERATE_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "The book has no chapters"},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse, "description": "WordPress could not be fetched"},
}


@router.get("/api/books", response_model=BookListResponse)
async def list_books() -> BookListResponse:
    """List the books available for generation, sorted by title.

    **Returns**

    - **BookListResponse**: The catalog. ``error`` is set and ``books`` is
      empty when the catalog could not be loaded or the site has no books.

    """
    async with create_client() as client:
        catalog = await load_catalog(client=client)
    return BookListResponse(
        books=[BookSummary(id=book.id, title=book.title) for book in catalog.books],
        count=len(catalog.books),
        error=catalog.error,
    )


@router.post("/api/generate", response_model=None, responses=COMMON_GENERATE_RESPONSES)
async def generate(generate_request: GenerateRequest) -> Response:
    """Generate the complete document for one book.

    **Parameters**

    - **generate_request** (`GenerateRequest`): Book id and formatting options

    **Returns**

    - **Response**: The document as an attachment

    **Errors**

    - **404**: the book has no chapters
    - **502**: a WordPress collection could not be fetched after retries

    """
    book_title = generate_request.book_title
    try:
        async with create_client() as client:
            if book_title is None:
                catalog = await load_catalog(client=client)
                book = catalog.find(generate_request.book_id)
                book_title = book.title if book else None

            document = await generate_book(
                generate_request.book_id,
                book_title=book_title,
                options=GenerationOptions(
                    output_format=generate_request.output_format.value,
                    include_timestamp=generate_request.include_timestamp,
                    refetch_per_parent=generate_request.refetch_per_parent,
                ),
                client=client,
            )
    except NoContentError as exc:
        logger.info("No content for book", extra={"book_id": generate_request.book_id})
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )
    except FetchError as exc:
        logger.error("Generation failed", extra={"book_id": generate_request.book_id, "error": str(exc)})
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
