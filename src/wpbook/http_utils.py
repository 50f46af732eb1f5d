"""HTTP utilities for fetching WordPress collections with linear-backoff retries."""

from __future__ import annotations

import asyncio
from typing import Any, Final

import httpx

from wpbook.config import (
    WPBOOK_FETCH_BACKOFF_S,
    WPBOOK_FETCH_MAX_ATTEMPTS,
    WPBOOK_FETCH_TIMEOUT_S,
    WPBOOK_PASSWORD,
    WPBOOK_USER_AGENT,
    WPBOOK_USERNAME,
)
from wpbook.exceptions import AuthenticationError, EndpointNotFoundError, FetchError
from wpbook.utils.logging_config import get_logger

logger = get_logger(__name__)

_MAX_REDIRECTS: Final[int] = 5


def create_client(
    *,
    username: str | None = None,
    password: str | None = None,
    timeout_s: float | None = None,
) -> httpx.AsyncClient:
    """Create an async client configured for the WordPress REST API.

    Basic auth is attached only when both a username and a password are
    available, either passed in or taken from the environment.
    """
    user = WPBOOK_USERNAME if username is None else username
    secret = WPBOOK_PASSWORD if password is None else password
    auth = httpx.BasicAuth(user, secret) if user and secret else None

    return httpx.AsyncClient(
        timeout=httpx.Timeout(WPBOOK_FETCH_TIMEOUT_S if timeout_s is None else timeout_s),
        headers={"User-Agent": WPBOOK_USER_AGENT, "Accept": "application/json"},
        auth=auth,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


def error_for_response(response: httpx.Response, url: str) -> FetchError:
    """Translate a non-2xx response into a descriptive FetchError."""
    status = response.status_code
    if status == 401:
        return AuthenticationError(
            f"Authentication failed: invalid username or password for {url}"
        )
    if status == 403:
        return AuthenticationError(
            f"Permission denied: the user lacks sufficient permissions on {url}"
        )
    if status == 404:
        return EndpointNotFoundError(
            f"Endpoint not found at {url}. The custom post type may not be "
            "registered or exposed to the REST API."
        )
    if status == 500:
        return FetchError(
            f"WordPress server error at {url}. Check the WordPress error logs."
        )

    wp_message = _wordpress_message(response)
    if wp_message:
        return FetchError(f"WordPress API error (HTTP {status}) from {url}: {wp_message}")
    return FetchError(f"HTTP {status}: {response.reason_phrase} from {url}")


def error_for_transport(exc: httpx.HTTPError, url: str) -> FetchError:
    """Translate a transport-level failure into a FetchError."""
    if isinstance(exc, httpx.TimeoutException):
        return FetchError(f"Connection timeout to {url}. The site may be slow or unreachable.")
    return FetchError(f"Network connection failed to {url}: {exc}")


async def fetch_json(url: str, *, client: httpx.AsyncClient | None = None) -> Any:
    """Fetch and decode a JSON document in a single attempt.

    Raises:
        FetchError: On transport failure, a non-2xx status, or invalid JSON.
    """
    if client is not None:
        return await _get_json(client, url)

    async with create_client() as new_client:
        return await _get_json(new_client, url)


async def fetch_collection(
    url: str, *, client: httpx.AsyncClient | None = None
) -> list[dict[str, Any]]:
    """Fetch a REST collection in a single attempt.

    Raises:
        FetchError: On any failure, including a response body that is not
            a JSON array.
    """
    data = await fetch_json(url, client=client)
    return _require_collection(data, url)


async def fetch_collection_with_retries(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    max_attempts: int | None = None,
    backoff_s: float | None = None,
) -> list[dict[str, Any]]:
    """Fetch a REST collection, retrying failed attempts with linear backoff.

    After failed attempt ``n`` the call sleeps ``backoff_s * n`` seconds
    before trying again. Every failure is retried, including non-2xx
    statuses and malformed bodies.

    Args:
        url: Collection URL.
        client: Optional shared client. A new one is created if omitted.
        max_attempts: Total attempts. Defaults to ``WPBOOK_FETCH_MAX_ATTEMPTS``.
        backoff_s: Base delay. Defaults to ``WPBOOK_FETCH_BACKOFF_S``.

    Returns:
        The decoded list of objects.

    Raises:
        FetchError: If the final attempt fails. Status-specific subclasses
            are preserved.
    """
    attempts = WPBOOK_FETCH_MAX_ATTEMPTS if max_attempts is None else max_attempts
    delay = WPBOOK_FETCH_BACKOFF_S if backoff_s is None else backoff_s
    if attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    async def do_fetch(http_client: httpx.AsyncClient) -> list[dict[str, Any]]:
        attempt = 1
        while True:
            try:
                data = await _get_json(http_client, url)
                return _require_collection(data, url)
            except FetchError as exc:
                logger.warning(
                    "Collection fetch failed",
                    extra={"url": url, "attempt": attempt, "max_attempts": attempts, "error": str(exc)},
                )
                if attempt >= attempts:
                    raise type(exc)(f"{exc} (gave up after {attempts} attempts)") from exc

            await asyncio.sleep(delay * attempt)
            attempt += 1

    if client is not None:
        return await do_fetch(client)

    async with create_client() as new_client:
        return await do_fetch(new_client)


async def _get_json(client: httpx.AsyncClient, url: str) -> Any:
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        raise error_for_transport(exc, url) from exc

    if not response.is_success:
        raise error_for_response(response, url)

    try:
        return response.json()
    except ValueError as exc:
        raise FetchError(f"Invalid JSON returned from {url}") from exc


def _require_collection(data: Any, url: str) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        raise FetchError(f"Invalid response format from {url}: expected a collection")
    return data


def _wordpress_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    for key in ("message", "error", "code"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None
