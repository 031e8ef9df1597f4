"""Breadth-first crawl of a documentation site, one page at a time."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from docs2json.exceptions import RenderError
from docs2json.html_parser import parse_page_html
from docs2json.render import PageRenderer, PlaywrightRenderer
from docs2json.schemas import CrawlConfig, PageContent, PageRecord, RawPageRecord
from docs2json.sections import count_sections, redistribute_content
from docs2json.sitemap import download_sitemap_urls
from docs2json.storage import PageStore
from docs2json.urls import UrlScope
from docs2json.utils.logging_config import get_logger

logger = get_logger(__name__)

_END_OF_TEXT = "<|endoftext|>"


class Frontier:
    """FIFO queue of URLs to crawl plus the set of URLs already taken.

    A URL is marked visited when it is popped and is never queued again.
    """

    def __init__(self, seeds: Iterable[str] = ()) -> None:
        self._queue: deque[str] = deque()
        self._queued: set[str] = set()
        self.visited: set[str] = set()
        for url in seeds:
            self.push(url)

    def __len__(self) -> int:
        return len(self._queue)

    def __contains__(self, url: object) -> bool:
        return url in self._queued

    def push(self, url: str) -> bool:
        """Queue ``url`` unless it was visited or is already waiting."""
        if url in self.visited or url in self._queued:
            return False
        self._queue.append(url)
        self._queued.add(url)
        return True

    def pop(self) -> str | None:
        """Take the next unvisited URL and mark it visited; None when empty."""
        while self._queue:
            url = self._queue.popleft()
            self._queued.discard(url)
            if url in self.visited:
                continue
            self.visited.add(url)
            return url
        return None


@dataclass
class CrawlSession:
    """State of a single crawl run."""

    config: CrawlConfig
    frontier: Frontier
    scope: UrlScope
    pages_attempted: int = 0
    saved_pages: list[str] = field(default_factory=list)
    failed_pages: list[str] = field(default_factory=list)

    @property
    def limit_reached(self) -> bool:
        return self.pages_attempted >= self.config.max_pages_to_crawl


def scope_for(config: CrawlConfig) -> UrlScope:
    return UrlScope(prefix=config.scope_prefix, patterns=tuple(config.match))


async def visit_page(
    url: str, renderer: PageRenderer, config: CrawlConfig, scope: UrlScope
) -> tuple[PageRecord | RawPageRecord, list[str]]:
    """Render ``url`` and turn the snapshot into a record plus discovered links.

    Raises:
        RenderError: If the page could not be rendered.
    """
    rendered = await renderer.render(url)
    parsed = parse_page_html(
        rendered.html,
        page_url=rendered.loaded_url or url,
        scope=scope,
        selector=config.selector,
        navigation_selector=config.navigation_selector,
        title=rendered.title,
        current_page_marker=config.current_page_marker,
    )

    if config.mode == "raw":
        record: PageRecord | RawPageRecord = RawPageRecord(
            title=parsed.title, url=url, html=parsed.text.replace(_END_OF_TEXT, "")
        )
    else:
        sections = redistribute_content(parsed.sections)
        logger.debug("Extracted %d sections from %s", count_sections(sections), url)
        record = PageRecord(
            url=url,
            content=PageContent(
                title=parsed.title, main_content=sections, navigation=parsed.navigation
            ),
        )
    return record, parsed.links


async def crawl(
    config: CrawlConfig,
    renderer: PageRenderer,
    *,
    seeds: Iterable[str] | None = None,
    store: PageStore | None = None,
) -> CrawlSession:
    """Crawl from ``seeds`` (default: the configured start URLs).

    Pages are processed strictly one after another. A page that fails to
    render is logged and skipped; the crawl continues with the next queued
    URL. The run ends when the queue is empty or ``max_pages_to_crawl`` pages
    have been attempted, and finishes by writing the directory index. Records
    left by an earlier run are deleted first unless ``purge_on_start`` is off.
    """
    store = store or PageStore(
        config.output_dir, config.base_url, output_file_name=config.output_file_name
    )
    if config.purge_on_start:
        await store.purge()
    session = CrawlSession(
        config=config,
        frontier=Frontier(config.start_urls if seeds is None else seeds),
        scope=scope_for(config),
    )

    while session.frontier and not session.limit_reached:
        url = session.frontier.pop()
        if url is None:
            break
        session.pages_attempted += 1
        logger.info(
            "Crawling: Page %d / %d - URL: %s",
            session.pages_attempted,
            config.max_pages_to_crawl,
            url,
        )

        try:
            record, links = await visit_page(url, renderer, config, session.scope)
        except RenderError as exc:
            session.failed_pages.append(url)
            logger.warning("Skipping %s: %s", url, exc)
        else:
            await store.save(record)
            session.saved_pages.append(url)
            added = sum(session.frontier.push(link) for link in links)
            logger.debug("Queued %d new URLs from %s", added, url)

        if session.frontier and not session.limit_reached and config.request_delay > 0:
            await asyncio.sleep(config.request_delay)

    if session.frontier:
        logger.info(
            "Reached maxPagesToCrawl (%d) with %d URLs still queued",
            config.max_pages_to_crawl,
            len(session.frontier),
        )
    await store.write_index(session.saved_pages)
    logger.info(
        "Crawl complete: %d saved, %d skipped",
        len(session.saved_pages),
        len(session.failed_pages),
    )
    return session


async def run_crawl(config: CrawlConfig) -> CrawlSession:
    """Crawl with a Playwright browser, seeding from a sitemap when configured."""
    seeds = await download_sitemap_urls(config.start_urls[0]) if config.is_sitemap else None
    async with PlaywrightRenderer(config) as renderer:
        return await crawl(config, renderer, seeds=seeds)
