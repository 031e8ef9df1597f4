"""URL scoping, link discovery and record path mapping."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import PurePosixPath
from typing import Iterable
from urllib.parse import unquote, urldefrag, urljoin, urlsplit

from bs4.element import Tag

_INVALID_FILENAME_CHARS = re.compile(r"[<>:\"/\\|?*\x00-\x1F]")
_MAX_COMPONENT_LENGTH = 150


@dataclass(frozen=True)
class UrlScope:
    """Decides which discovered URLs belong to the crawl.

    A URL is in scope when it starts with ``prefix`` and, if ``patterns`` is
    non-empty, matches at least one of the glob patterns.
    """

    prefix: str
    patterns: tuple[str, ...] = field(default_factory=tuple)

    def contains(self, url: str) -> bool:
        if not url.startswith(self.prefix):
            return False
        if self.patterns and not any(fnmatchcase(url, pattern) for pattern in self.patterns):
            return False
        return True


def normalize_url(href: str, page_url: str) -> str | None:
    """Resolve ``href`` against ``page_url`` and drop the fragment.

    Returns None for fragment-only links, empty hrefs and non-http(s) schemes.
    """
    href = href.strip()
    if not href or href.startswith("#"):
        return None
    absolute, _fragment = urldefrag(urljoin(page_url, href))
    if urlsplit(absolute).scheme not in {"http", "https"}:
        return None
    return absolute


def find_documentation_links(
    regions: Iterable[Tag | None], *, page_url: str, scope: UrlScope
) -> list[str]:
    """Collect in-scope absolute URLs from the anchors of each region."""
    links: dict[str, None] = {}
    for region in regions:
        if region is None:
            continue
        for anchor in region.find_all("a", href=True):
            url = normalize_url(anchor["href"], page_url)
            if url and scope.contains(url):
                links.setdefault(url, None)
    return list(links)


def record_path_for(url: str, base_url: str) -> PurePosixPath:
    """Map a page URL to a relative ``.json`` path mirroring its URL path.

    URLs below ``base_url`` keep their path segments as directories
    (``base/a/b`` -> ``a/b.json``); ``base_url`` itself maps to
    ``index.json``. Other URLs are flattened into a single file name built
    from host and path. A query string is kept in the file name
    (``base/a?v=2`` -> ``a-v=2.json``) so that URLs crawled as distinct
    pages never share a record file.
    """
    page, _, query = urldefrag(url)[0].partition("?")
    base = base_url.split("?", 1)[0].rstrip("/")
    if page.rstrip("/") == base:
        parts: list[str] = []
    elif page.startswith(base + "/"):
        parts = [unquote(part) for part in page[len(base) + 1 :].split("/") if part]
    else:
        split = urlsplit(page)
        flat = "_".join(part for part in [split.netloc, *split.path.split("/")] if part)
        parts = [flat]

    parts = [part for part in parts if part not in {".", ".."}] or ["index"]
    if query:
        parts[-1] = f"{parts[-1]}?{unquote(query)}"
    parts = [_safe_filename_component(part) for part in parts]
    return PurePosixPath(*parts[:-1], f"{parts[-1]}.json")


def _safe_filename_component(text: str) -> str:
    cleaned = _INVALID_FILENAME_CHARS.sub("-", text.strip())
    cleaned = cleaned.strip(". ")
    cleaned = re.sub(r"\s+", " ", cleaned)
    if not cleaned:
        cleaned = "page"
    return cleaned[:_MAX_COMPONENT_LENGTH]
