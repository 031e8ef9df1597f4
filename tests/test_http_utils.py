"""Tests for HTTP utilities module."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from docs2json.exceptions import FetchError
from docs2json.http_utils import RETRY_STATUS_CODES, fetch_text


def _response(status_code: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status = MagicMock()
    return response


def _client_class_returning(mock_client_class: MagicMock, get: AsyncMock) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.get = get
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client_class.return_value = mock_client
    return mock_client


class TestRetryStatusCodes:
    """Tests for RETRY_STATUS_CODES constant."""

    def test_contains_expected_codes(self) -> None:
        """Should contain all expected retryable status codes."""
        assert RETRY_STATUS_CODES == frozenset({429, 500, 502, 503, 504})


class TestFetchText:
    """Tests for fetch_text function."""

    @pytest.mark.asyncio
    async def test_returns_text(self) -> None:
        """Should return the response text."""
        with patch("docs2json.http_utils.httpx.AsyncClient") as mock_client_class:
            _client_class_returning(
                mock_client_class, AsyncMock(return_value=_response(200, "<urlset/>"))
            )

            result = await fetch_text("https://example.com/sitemap.xml")

        assert result == "<urlset/>"

    @pytest.mark.asyncio
    async def test_raises_on_404(self) -> None:
        """Should raise FetchError on 404 without retrying."""
        with patch("docs2json.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = _client_class_returning(
                mock_client_class, AsyncMock(return_value=_response(404))
            )

            with pytest.raises(FetchError, match="Resource not found"):
                await fetch_text("https://example.com/missing")

        assert mock_client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_retries_on_503(self) -> None:
        """Should retry on 503 status code."""
        with (
            patch("docs2json.http_utils.DOCS2JSON_FETCH_MAX_RETRIES", 2),
            patch("docs2json.http_utils.asyncio.sleep", new=AsyncMock()) as mock_sleep,
            patch("docs2json.http_utils.httpx.AsyncClient") as mock_client_class,
        ):
            mock_client = _client_class_returning(
                mock_client_class,
                AsyncMock(side_effect=[_response(503), _response(200, "success")]),
            )

            result = await fetch_text("https://example.com")

        assert result == "success"
        assert mock_client.get.call_count == 2
        mock_sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_backoff_doubles(self) -> None:
        """Should double the backoff and give up after the retries."""
        with (
            patch("docs2json.http_utils.DOCS2JSON_FETCH_MAX_RETRIES", 2),
            patch("docs2json.http_utils.DOCS2JSON_FETCH_BACKOFF_S", 0.5),
            patch("docs2json.http_utils.asyncio.sleep", new=AsyncMock()) as mock_sleep,
            patch("docs2json.http_utils.httpx.AsyncClient") as mock_client_class,
        ):
            mock_client = _client_class_returning(
                mock_client_class, AsyncMock(return_value=_response(503))
            )

            with pytest.raises(FetchError, match="Failed to fetch"):
                await fetch_text("https://example.com")

        # Initial attempt + 2 retries = 3 total
        assert mock_client.get.call_count == 3
        assert [call.args[0] for call in mock_sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_retries_on_request_error(self) -> None:
        """Should retry on network request errors."""
        with (
            patch("docs2json.http_utils.DOCS2JSON_FETCH_MAX_RETRIES", 2),
            patch("docs2json.http_utils.asyncio.sleep", new=AsyncMock()),
            patch("docs2json.http_utils.httpx.AsyncClient") as mock_client_class,
        ):
            _client_class_returning(
                mock_client_class,
                AsyncMock(
                    side_effect=[
                        httpx.RequestError("Connection failed"),
                        _response(200, "success"),
                    ]
                ),
            )

            result = await fetch_text("https://example.com")

        assert result == "success"

    @pytest.mark.asyncio
    async def test_uses_provided_client(self) -> None:
        """Should use the provided httpx.AsyncClient."""
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(200, "success"))

        result = await fetch_text("https://example.com", client=mock_client)

        assert result == "success"
        mock_client.get.assert_called_once_with("https://example.com")

    @pytest.mark.asyncio
    async def test_client_has_correct_settings(self) -> None:
        """Should create the client with redirect and header settings."""
        with patch("docs2json.http_utils.httpx.AsyncClient") as mock_client_class:
            _client_class_returning(
                mock_client_class, AsyncMock(return_value=_response(200, "ok"))
            )

            await fetch_text("https://example.com")

            call_kwargs = mock_client_class.call_args[1]
            assert call_kwargs["follow_redirects"] is True
            assert call_kwargs["max_redirects"] == 5
            assert "User-Agent" in call_kwargs["headers"]
