"""Tests for HTTP utilities module."""

from __future__ import annotations

from unittest.mock import AsyncMock, call, patch

import httpx
import pytest

from wpbook.exceptions import AuthenticationError, EndpointNotFoundError, FetchError
from wpbook.http_utils import (
    create_client,
    error_for_response,
    fetch_collection,
    fetch_collection_with_retries,
    fetch_json,
)

URL = "https://example.com/wp-json/wp/v2/chapter"


def _client(*responses: object) -> AsyncMock:
    client = AsyncMock()
    client.get = AsyncMock(side_effect=list(responses))
    return client


class TestErrorForResponse:
    """Tests for status-specific error messages."""

    def test_401_is_authentication_error(self) -> None:
        error = error_for_response(httpx.Response(401), URL)
        assert isinstance(error, AuthenticationError)
        assert "Authentication failed" in str(error)

    def test_403_is_permission_error(self) -> None:
        error = error_for_response(httpx.Response(403), URL)
        assert isinstance(error, AuthenticationError)
        assert "Permission denied" in str(error)

    def test_404_names_missing_post_type(self) -> None:
        error = error_for_response(httpx.Response(404), URL)
        assert isinstance(error, EndpointNotFoundError)
        assert URL in str(error)

    def test_500_points_at_server_logs(self) -> None:
        error = error_for_response(httpx.Response(500), URL)
        assert "server error" in str(error)

    def test_other_status_uses_wordpress_message(self) -> None:
        response = httpx.Response(400, json={"code": "rest_invalid_param", "message": "Invalid parameter(s): per_page"})
        assert "Invalid parameter(s): per_page" in str(error_for_response(response, URL))

    def test_other_status_without_body(self) -> None:
        error = error_for_response(httpx.Response(418), URL)
        assert "HTTP 418" in str(error)


class TestFetchCollection:
    """Tests for single-attempt fetches."""

    @pytest.mark.asyncio
    async def test_returns_decoded_list(self) -> None:
        client = _client(httpx.Response(200, json=[{"id": 1}]))

        result = await fetch_collection(URL, client=client)

        assert result == [{"id": 1}]
        client.get.assert_called_once_with(URL)

    @pytest.mark.asyncio
    async def test_rejects_non_collection(self) -> None:
        client = _client(httpx.Response(200, json={"id": 1}))

        with pytest.raises(FetchError, match="expected a collection"):
            await fetch_collection(URL, client=client)

    @pytest.mark.asyncio
    async def test_does_not_retry(self) -> None:
        client = _client(httpx.Response(503), httpx.Response(200, json=[]))

        with pytest.raises(FetchError, match="HTTP 503"):
            await fetch_collection(URL, client=client)

        assert client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        client = _client(httpx.Response(200, content=b"<html>not json</html>"))

        with pytest.raises(FetchError, match="Invalid JSON"):
            await fetch_json(URL, client=client)

    @pytest.mark.asyncio
    async def test_wraps_transport_error(self) -> None:
        client = _client(httpx.ConnectError("Connection refused"))

        with pytest.raises(FetchError, match="Network connection failed"):
            await fetch_json(URL, client=client)

    @pytest.mark.asyncio
    async def test_wraps_timeout(self) -> None:
        client = _client(httpx.ReadTimeout("timed out"))

        with pytest.raises(FetchError, match="Connection timeout"):
            await fetch_json(URL, client=client)


class TestFetchCollectionWithRetries:
    """Tests for fetch_collection_with_retries function."""

    @pytest.mark.asyncio
    async def test_returns_first_success_without_sleeping(self) -> None:
        client = _client(httpx.Response(200, json=[{"id": 3}]))

        with patch("wpbook.http_utils.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            result = await fetch_collection_with_retries(URL, client=client, max_attempts=3, backoff_s=1.0)

        assert result == [{"id": 3}]
        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_recovers_after_failures(self) -> None:
        """N failures followed by a success, with N below the attempt limit."""
        client = _client(
            httpx.Response(503),
            httpx.ConnectError("Connection reset"),
            httpx.Response(200, json=[{"id": 7}]),
        )

        with patch("wpbook.http_utils.asyncio.sleep", new_callable=AsyncMock):
            result = await fetch_collection_with_retries(URL, client=client, max_attempts=3, backoff_s=1.0)

        assert result == [{"id": 7}]
        assert client.get.call_count == 3

    @pytest.mark.asyncio
    async def test_backoff_is_linear(self) -> None:
        client = _client(httpx.Response(500), httpx.Response(500), httpx.Response(500), httpx.Response(200, json=[]))

        with patch("wpbook.http_utils.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await fetch_collection_with_retries(URL, client=client, max_attempts=4, backoff_s=1.5)

        assert mock_sleep.await_args_list == [call(1.5), call(3.0), call(4.5)]

    @pytest.mark.asyncio
    async def test_always_failing_stops_at_max_attempts(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(return_value=httpx.Response(503))

        with patch("wpbook.http_utils.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(FetchError, match="gave up after 3 attempts"):
                await fetch_collection_with_retries(URL, client=client, max_attempts=3, backoff_s=1.0)

        assert client.get.call_count == 3
        # no sleep after the final attempt
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_retries_malformed_body(self) -> None:
        client = _client(httpx.Response(200, json={"code": "oops"}), httpx.Response(200, json=[{"id": 1}]))

        result = await fetch_collection_with_retries(URL, client=client, max_attempts=2, backoff_s=0)

        assert result == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_preserves_error_subclass(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(return_value=httpx.Response(401))

        with pytest.raises(AuthenticationError):
            await fetch_collection_with_retries(URL, client=client, max_attempts=2, backoff_s=0)

        assert client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_defaults_come_from_config(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(return_value=httpx.Response(503))

        with (
            patch("wpbook.http_utils.WPBOOK_FETCH_MAX_ATTEMPTS", 2),
            patch("wpbook.http_utils.WPBOOK_FETCH_BACKOFF_S", 0.25),
            patch("wpbook.http_utils.asyncio.sleep", new_callable=AsyncMock) as mock_sleep,
        ):
            with pytest.raises(FetchError):
                await fetch_collection_with_retries(URL, client=client)

        assert client.get.call_count == 2
        mock_sleep.assert_awaited_once_with(0.25)

    @pytest.mark.asyncio
    async def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            await fetch_collection_with_retries(URL, client=AsyncMock(), max_attempts=0)

    @pytest.mark.asyncio
    async def test_creates_client_when_missing(self) -> None:
        with patch("wpbook.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=httpx.Response(200, json=[]))
            mock_client.__aenter__ = AsyncMock(return_value=mock_client)
            mock_client.__aexit__ = AsyncMock(return_value=None)
            mock_client_class.return_value = mock_client

            result = await fetch_collection_with_retries(URL)

        assert result == []
        call_kwargs = mock_client_class.call_args[1]
        assert call_kwargs["follow_redirects"] is True
        assert call_kwargs["max_redirects"] == 5
        assert "User-Agent" in call_kwargs["headers"]


class TestCreateClient:
    """Tests for client construction."""

    def test_anonymous_without_credentials(self) -> None:
        with patch("wpbook.http_utils.httpx.AsyncClient") as mock_client_class:
            create_client(username="", password="")

        assert mock_client_class.call_args[1]["auth"] is None

    def test_basic_auth_with_credentials(self) -> None:
        with patch("wpbook.http_utils.httpx.AsyncClient") as mock_client_class:
            create_client(username="editor", password="app pass word")

        assert isinstance(mock_client_class.call_args[1]["auth"], httpx.BasicAuth)
