"""Extract navigation entries from a sidebar-like region."""

from __future__ import annotations

from bs4.element import Tag

from docs2json.markdown import normalize_text
from docs2json.schemas import NavItem

DEFAULT_CURRENT_PAGE_MARKER = "Current page is"


def extract_navigation(
    region: Tag | None, *, current_page_marker: str = DEFAULT_CURRENT_PAGE_MARKER
) -> list[NavItem]:
    """Collect ``(title, url)`` pairs from every anchor in ``region``.

    Pairs are deduplicated in first-seen order. Anchors without text or href,
    and anchors whose text contains ``current_page_marker``, are skipped.
    """
    if region is None:
        return []

    items: list[NavItem] = []
    seen: set[tuple[str, str]] = set()
    for link in region.find_all("a"):
        title = normalize_text(link.get_text())
        url = (link.get("href") or "").strip()
        if not title or not url:
            continue
        if current_page_marker and current_page_marker in title:
            continue
        key = (title, url)
        if key in seen:
            continue
        seen.add(key)
        items.append(NavItem(title=title, url=url))
    return items
