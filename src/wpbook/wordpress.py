"""WordPress REST API endpoints and post parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc

from wpbook.config import (
    WPBOOK_BASE_URL,
    WPBOOK_BOOK_TYPE,
    WPBOOK_CHAPTER_TYPE,
    WPBOOK_PER_PAGE,
    WPBOOK_SECTION_TYPE,
    WPBOOK_TOPIC_TYPE,
)
from wpbook.exceptions import FetchError
from wpbook.http_utils import create_client, fetch_json
from wpbook.schemas import ConnectionStatus, Item, Tier
from wpbook.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TierEndpoint:
    """Where a tier lives and which ACF field points at its parent."""

    tier: Tier
    post_type: str
    parent_field: str


CHAPTERS = TierEndpoint(Tier.CHAPTER, WPBOOK_CHAPTER_TYPE, "chapter_parent_book")
TOPICS = TierEndpoint(Tier.TOPIC, WPBOOK_TOPIC_TYPE, "topic_parent_chapter")
SECTIONS = TierEndpoint(Tier.SECTION, WPBOOK_SECTION_TYPE, "section_parent_topic")

POST_TYPES = (WPBOOK_BOOK_TYPE, WPBOOK_CHAPTER_TYPE, WPBOOK_TOPIC_TYPE, WPBOOK_SECTION_TYPE)


def catalog_url(base_url: str | None = None) -> str:
    """URL of the book collection, projected to id and title."""
    base = (base_url or WPBOOK_BASE_URL).rstrip("/")
    return str(httpx.URL(f"{base}/{WPBOOK_BOOK_TYPE}", params={"_fields": "id,title"}))


def tier_url(endpoint: TierEndpoint, base_url: str | None = None) -> str:
    """URL of a full tier collection with the parent reference projected in."""
    base = (base_url or WPBOOK_BASE_URL).rstrip("/")
    params = {
        "_fields": f"id,title,content,acf.{endpoint.parent_field}",
        "per_page": str(WPBOOK_PER_PAGE),
    }
    return str(httpx.URL(f"{base}/{endpoint.post_type}", params=params))


def rest_index_url(base_url: str | None = None) -> str:
    """URL of the site's ``/wp-json`` discovery document."""
    base = (base_url or WPBOOK_BASE_URL).rstrip("/")
    site_root, marker, _ = base.partition("/wp-json")
    if not marker:
        return f"{base}/wp-json"
    return f"{site_root}/wp-json"


def rendered_text(raw: dict[str, Any], key: str) -> str:
    """Return ``raw[key]["rendered"]`` or a bare string value, else ``""``."""
    value = raw.get(key)
    if isinstance(value, dict):
        value = value.get("rendered")
    return value if isinstance(value, str) else ""


def plain_text(html: str) -> str:
    """Strip tags and decode entities from a rendered WordPress string."""
    if not html:
        return ""
    if "<" not in html and "&" not in html:
        return html.strip()
    return BeautifulSoup(html, "lxml").get_text(" ", strip=True)


def resolve_parent_id(value: Any) -> int | None:
    """Coerce an ACF relationship value into a post id.

    ACF returns relationships as integers, numeric strings, post objects or
    single-element lists depending on the field's return format.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        return int(value) if value.isascii() and value.isdigit() else None
    if isinstance(value, dict):
        return resolve_parent_id(value.get("ID", value.get("id")))
    if isinstance(value, list) and len(value) == 1:
        return resolve_parent_id(value[0])
    return None


def parse_book(raw: Any) -> Item | None:
    """Parse a catalog entry; entries without an id or a title are rejected."""
    if not isinstance(raw, dict):
        return None
    book_id = _post_id(raw)
    title = rendered_text(raw, "title")
    if book_id is None or not title:
        return None
    return Item(id=book_id, title=title)


def parse_child(raw: Any, endpoint: TierEndpoint) -> Item | None:
    """Parse a chapter, topic or section post.

    Missing titles fall back to ``"<Tier> <id>"``. Posts without a usable id
    are rejected.
    """
    if not isinstance(raw, dict):
        return None
    item_id = _post_id(raw)
    if item_id is None:
        return None

    acf = raw.get("acf")
    parent_value = acf.get(endpoint.parent_field) if isinstance(acf, dict) else None

    return Item(
        id=item_id,
        title=rendered_text(raw, "title") or f"{endpoint.tier.label} {item_id}",
        content=rendered_text(raw, "content"),
        parent_id=resolve_parent_id(parent_value),
    )


async def check_connection(
    *, base_url: str | None = None, client: httpx.AsyncClient | None = None
) -> ConnectionStatus:
    """Request the REST index so configuration errors surface before a long fetch."""
    url = rest_index_url(base_url)
    try:
        data = await fetch_json(url, client=client)
    except FetchError as exc:
        logger.warning("WordPress connection check failed", extra={"url": url, "error": str(exc)})
        return ConnectionStatus(ok=False, error=str(exc))

    name = data.get("name") if isinstance(data, dict) else None
    logger.info("WordPress connection validated", extra={"url": url})
    return ConnectionStatus(ok=True, name=name if isinstance(name, str) else None)


def post_type_url(post_type: str, base_url: str | None = None) -> str:
    """URL of a post type's registration under ``/types``."""
    base = (base_url or WPBOOK_BASE_URL).rstrip("/")
    return f"{base}/types/{post_type}"


async def validate_post_types(
    *, base_url: str | None = None, client: httpx.AsyncClient | None = None
) -> dict[str, ConnectionStatus]:
    """Check that the book, chapter, topic and section post types are registered.

    Types are checked one after another. A missing type is reported in its
    status instead of raising.
    """
    if client is None:
        async with create_client() as new_client:
            return await validate_post_types(base_url=base_url, client=new_client)

    results: dict[str, ConnectionStatus] = {}
    for post_type in POST_TYPES:
        url = post_type_url(post_type, base_url)
        try:
            data = await fetch_json(url, client=client)
        except FetchError as exc:
            logger.warning("Post type unavailable", extra={"post_type": post_type, "error": str(exc)})
            results[post_type] = ConnectionStatus(ok=False, error=str(exc))
            continue
        name = data.get("name") if isinstance(data, dict) else None
        results[post_type] = ConnectionStatus(ok=True, name=name if isinstance(name, str) else None)
    return results


def _post_id(raw: dict[str, Any]) -> int | None:
    value = raw.get("id")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value
