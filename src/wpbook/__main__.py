"""Command-line entry point: ``python -m wpbook``."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from wpbook.catalog import load_catalog
from wpbook.exceptions import WpBookError
from wpbook.generation import GenerationOptions, generate_book
from wpbook.http_utils import create_client
from wpbook.schemas import ProgressUpdate
from wpbook.utils.logging_config import configure_logging, get_logger
from wpbook.wordpress import check_connection, plain_text, validate_post_types

logger = get_logger("wpbook")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wpbook",
        description=(
            "Fetch a book's chapters, topics and sections from a WordPress site "
            "and write them out as one printable document. Without BOOK_ID, "
            "list the available books."
        ),
    )
    parser.add_argument("book_id", nargs="?", type=int, help="Id of the book to generate")
    parser.add_argument(
        "-o",
        "--output",
        help="Output path, or '-' for stdout (default: <title>-complete.<ext> in the current directory)",
    )
    parser.add_argument("--format", choices=("html", "markdown"), default="html", help="Output format")
    parser.add_argument("--base-url", help="REST base URL, e.g. https://example.com/wp-json/wp/v2")
    parser.add_argument(
        "--refetch-per-parent",
        action="store_true",
        help="Request child collections once per parent instead of once per book",
    )
    parser.add_argument("--timestamp", action="store_true", help="Stamp the document with the generation time")
    parser.add_argument("--check", action="store_true", help="Validate the site connection and post types before fetching")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)
    try:
        return asyncio.run(_run(args))
    except WpBookError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


async def _run(args: argparse.Namespace) -> int:
    async with create_client() as client:
        if args.check:
            status = await check_connection(base_url=args.base_url, client=client)
            if not status.ok:
                print(f"Error: {status.error}", file=sys.stderr)
                return 1
            logger.info("Connected", extra={"site": status.name})
            post_types = await validate_post_types(base_url=args.base_url, client=client)
            missing = [name for name, result in post_types.items() if not result.ok]
            if missing:
                print(f"Error: post types unavailable: {', '.join(missing)}", file=sys.stderr)
                for name in missing:
                    print(f"  {name}: {post_types[name].error}", file=sys.stderr)
                return 1

        catalog = await load_catalog(base_url=args.base_url, client=client)

        if args.book_id is None:
            if catalog.error:
                print(f"Error: {catalog.error}", file=sys.stderr)
                return 1
            for book in catalog.books:
                print(f"{book.id}\t{plain_text(book.title)}")
            return 0

        if catalog.error:
            logger.warning("Catalog unavailable, using a generic title", extra={"error": catalog.error})
        book = catalog.find(args.book_id)

        document = await generate_book(
            args.book_id,
            book_title=book.title if book else None,
            options=GenerationOptions(
                output_format=args.format,
                include_timestamp=args.timestamp,
                refetch_per_parent=args.refetch_per_parent,
                base_url=args.base_url,
            ),
            client=client,
            on_progress=_log_progress,
        )

    if args.output == "-":
        sys.stdout.write(document.content)
    else:
        target = Path(args.output) if args.output else Path.cwd() / document.filename
        target.write_text(document.content, encoding="utf-8")
        print(f"Wrote {target}", file=sys.stderr)
    print(document.summary, file=sys.stderr)
    return 0


def _log_progress(update: ProgressUpdate) -> None:
    logger.info(update.message, extra={"step": update.step})


if __name__ == "__main__":
    sys.exit(main())
