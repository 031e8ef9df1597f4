"""HTTP utilities for fetching content with retry logic."""

from __future__ import annotations

import asyncio
from typing import Final

import httpx

from docs2json.config import (
    DOCS2JSON_FETCH_BACKOFF_S,
    DOCS2JSON_FETCH_MAX_RETRIES,
    DOCS2JSON_FETCH_TIMEOUT_S,
    DOCS2JSON_USER_AGENT,
)
from docs2json.exceptions import FetchError

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


async def fetch_text(url: str, *, client: httpx.AsyncClient | None = None) -> str:
    """Fetch a URL as text, retrying transient failures with exponential backoff.

    Args:
        url: The URL to fetch.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.

    Returns:
        The decoded response body.

    Raises:
        FetchError: If the URL returns 404 or the fetch fails after all retries.
    """
    last_exc: Exception | None = None

    async def do_fetch(http_client: httpx.AsyncClient) -> str:
        nonlocal last_exc

        for attempt in range(DOCS2JSON_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url)

                if response.status_code == 404:
                    raise FetchError(f"Resource not found at {url}")

                if response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    return response.text
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc

            if attempt < DOCS2JSON_FETCH_MAX_RETRIES:
                backoff = DOCS2JSON_FETCH_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(DOCS2JSON_FETCH_TIMEOUT_S),
        headers={"User-Agent": DOCS2JSON_USER_AGENT},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_fetch(new_client)
