"""Seed a crawl from an XML sitemap."""

from __future__ import annotations

from bs4 import BeautifulSoup

from docs2json.http_utils import fetch_text
from docs2json.utils.logging_config import get_logger

logger = get_logger(__name__)


def parse_sitemap(xml: str) -> list[str]:
    """Return the ``<loc>`` URLs of a sitemap in document order, deduplicated."""
    soup = BeautifulSoup(xml, "xml")
    urls: dict[str, None] = {}
    for loc in soup.find_all("loc"):
        url = loc.get_text(strip=True)
        if url:
            urls.setdefault(url, None)
    return list(urls)


async def download_sitemap_urls(url: str) -> list[str]:
    xml = await fetch_text(url)
    urls = parse_sitemap(xml)
    logger.info("Found %d URLs in sitemap %s", len(urls), url)
    return urls
