"""Render pages in a headless Chromium controlled by Playwright."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    Route,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from docs2json.exceptions import RenderError, RenderTimeoutError
from docs2json.html_utils import is_xpath
from docs2json.schemas import CrawlConfig
from docs2json.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RenderedPage:
    """Snapshot of a page after rendering."""

    url: str
    loaded_url: str
    title: str
    html: str


class PageRenderer(Protocol):
    async def render(self, url: str) -> RenderedPage:
        """Render ``url``; raise RenderError on failure."""
        ...


def to_playwright_selector(selector: str) -> str:
    if is_xpath(selector):
        return f"xpath={selector}"
    return selector


class PlaywrightRenderer:
    """Renders one page at a time in a shared browser context.

    Use as an async context manager::

        async with PlaywrightRenderer(config) as renderer:
            page = await renderer.render(url)
    """

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self._excluded = frozenset(config.resource_exclusions)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    async def __aenter__(self) -> PlaywrightRenderer:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def start(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
        self._context = await self._browser.new_context()
        if self._excluded:
            await self._context.route("**/*", self._handle_route)
            logger.info(
                "Aborting requests for resource types: %s", ", ".join(sorted(self._excluded))
            )

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def render(self, url: str) -> RenderedPage:
        """Navigate to ``url`` and capture its HTML once the content root exists.

        Raises:
            RenderTimeoutError: Navigation, challenge or selector wait timed out.
            RenderError: Any other browser failure.
        """
        if self._context is None:
            raise RenderError("Renderer has not been started")

        page: Page | None = None
        try:
            if self.config.cookies:
                await self._context.add_cookies(
                    [{"name": cookie.name, "value": cookie.value, "url": url} for cookie in self.config.cookies]
                )
            page = await self._context.new_page()
            await page.goto(url, timeout=self.config.navigation_timeout)
            await self._wait_for_challenge(page)
            await page.wait_for_selector(
                to_playwright_selector(self.config.selector),
                timeout=self.config.wait_for_selector_timeout,
            )
            await self._wait_for_navigation_region(page)
            return RenderedPage(
                url=url,
                loaded_url=page.url,
                title=await page.title(),
                html=await page.content(),
            )
        except PlaywrightTimeoutError as exc:
            raise RenderTimeoutError(f"Timed out rendering {url}: {exc}") from exc
        except PlaywrightError as exc:
            raise RenderError(f"Failed to render {url}: {exc}") from exc
        finally:
            if page is not None:
                await page.close()

    async def _handle_route(self, route: Route) -> None:
        if route.request.resource_type in self._excluded:
            await route.abort("aborted")
        else:
            await route.continue_()

    async def _wait_for_challenge(self, page: Page) -> None:
        selector = self.config.challenge_selector
        if not selector or await page.query_selector(selector) is None:
            return
        logger.info("Detected browser challenge on %s, waiting...", page.url)
        await page.wait_for_selector(
            selector, state="detached", timeout=self.config.challenge_timeout
        )

    async def _wait_for_navigation_region(self, page: Page) -> None:
        selector = self.config.navigation_selector
        if not selector:
            return
        try:
            await page.wait_for_selector(
                to_playwright_selector(selector),
                timeout=self.config.wait_for_selector_timeout,
            )
        except PlaywrightTimeoutError:
            logger.debug("Navigation region %s not found on %s", selector, page.url)
