"""Test setup for docs2json."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from docs2json.exceptions import RenderTimeoutError  # noqa: E402
from docs2json.render import RenderedPage  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (real browser or network)",
    )


class FakeRenderer:
    """Serves canned HTML and records every render call."""

    def __init__(self, pages: dict[str, str], failures: set[str] | None = None) -> None:
        self.pages = pages
        self.failures = failures or set()
        self.calls: list[str] = []

    async def render(self, url: str) -> RenderedPage:
        self.calls.append(url)
        if url in self.failures:
            raise RenderTimeoutError(f"Timed out rendering {url}")
        return RenderedPage(url=url, loaded_url=url, title=f"Title of {url}", html=self.pages[url])


def _build_page(body: str, *, title: str = "Docs", sidebar: str = "") -> str:
    return (
        f"<html><head><title>{title}</title></head><body>"
        f'<nav class="sidebar">{sidebar}</nav>'
        f'<main class="content">{body}</main>'
        "</body></html>"
    )


@pytest.fixture
def base_url() -> str:
    """Root URL of the fake documentation site."""
    return "https://docs.example.com/documentation/lib"


@pytest.fixture
def make_page() -> Callable[..., str]:
    """Builder wrapping a body in a page with a ``nav.sidebar`` and ``main.content``."""
    return _build_page


@pytest.fixture
def fake_renderer() -> type[FakeRenderer]:
    """Renderer class serving canned HTML; URLs in ``failures`` time out."""
    return FakeRenderer
