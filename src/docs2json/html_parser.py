"""Parse a rendered documentation page into a section tree, navigation and links."""

from __future__ import annotations

from dataclasses import dataclass, field

from bs4.element import Tag

from docs2json.html_utils import parse_html, select_region
from docs2json.markdown import (
    heading_level,
    is_heading,
    normalize_text,
    serialize_text_content,
)
from docs2json.navigation import DEFAULT_CURRENT_PAGE_MARKER, extract_navigation
from docs2json.schemas import NavItem, Section
from docs2json.urls import UrlScope, find_documentation_links

OVERVIEW_TITLE = "Overview"
_HEADING_NAMES = ["h1", "h2", "h3", "h4", "h5", "h6"]


@dataclass(frozen=True)
class HeaderRecord:
    """A heading element found by the document-order scan."""

    level: int
    title: str
    index: int
    element: Tag = field(compare=False, repr=False)


@dataclass
class ParsedPage:
    """Everything extracted from one page snapshot."""

    title: str
    sections: list[Section]
    navigation: list[NavItem]
    links: list[str]
    text: str


def parse_page_html(
    html: str,
    *,
    page_url: str,
    scope: UrlScope,
    selector: str = "body",
    navigation_selector: str | None = None,
    title: str | None = None,
    current_page_marker: str = DEFAULT_CURRENT_PAGE_MARKER,
) -> ParsedPage:
    """Extract the section tree, navigation entries and in-scope links.

    Args:
        html: Full HTML snapshot of the rendered page.
        page_url: URL the snapshot was loaded from; relative links resolve
            against it.
        scope: Filter applied to discovered links.
        selector: CSS selector or XPath of the content root.
        navigation_selector: CSS selector or XPath of the navigation region.
        title: Page title reported by the browser. Falls back to ``<title>``.
        current_page_marker: Text marking the navigation entry of the current
            page.

    Returns:
        The parsed page. Sections are returned as built, before content
        redistribution.
    """
    soup = parse_html(html)
    root = select_region(soup, html, selector)
    nav_region = select_region(soup, html, navigation_selector)

    if title is None:
        title = soup.title.get_text(strip=True) if soup.title else ""

    sections = extract_sections(root) if root is not None else []
    navigation = extract_navigation(nav_region, current_page_marker=current_page_marker)
    body = soup.body or soup
    links = find_documentation_links(
        [root if root is not None else body, nav_region if nav_region is not None else body],
        page_url=page_url,
        scope=scope,
    )
    text = root.get_text("\n", strip=True) if root is not None else ""

    return ParsedPage(
        title=title, sections=sections, navigation=navigation, links=links, text=text
    )


def extract_sections(root: Tag) -> list[Section]:
    """Convert ``root`` into a list of top-level sections.

    Element children of ``root`` preceding the first heading become a
    synthetic level-1 "Overview" section.
    """
    sections: list[Section] = []
    overview = _collect_overview(root)
    if overview:
        sections.append(Section(level=1, title=OVERVIEW_TITLE, content=overview))
    sections.extend(build_section_tree(collect_headers(root)))
    return sections


def collect_headers(root: Tag) -> list[HeaderRecord]:
    return [
        HeaderRecord(
            level=heading_level(heading),
            title=normalize_text(heading.get_text()),
            index=index,
            element=heading,
        )
        for index, heading in enumerate(root.find_all(_HEADING_NAMES))
    ]


def build_section_tree(headers: list[HeaderRecord]) -> list[Section]:
    """Nest sections by heading level without recursion.

    A header becomes a child of the nearest preceding header with a lower
    level, or a top-level section when there is none.
    """
    boundaries = _content_boundaries(headers)
    roots: list[Section] = []
    stack: list[Section] = []

    for position, header in enumerate(headers):
        section = Section(
            level=header.level,
            title=header.title,
            content=_collect_section_content(header, boundaries[position]),
        )
        while stack and stack[-1].level >= header.level:
            stack.pop()
        if stack:
            stack[-1].children.append(section)
        else:
            roots.append(section)
        stack.append(section)

    return roots


def _content_boundaries(headers: list[HeaderRecord]) -> list[Tag | None]:
    """For each header, the element of the next header with level <= its own."""
    boundaries: list[Tag | None] = [None] * len(headers)
    pending: list[HeaderRecord] = []
    for position in range(len(headers) - 1, -1, -1):
        header = headers[position]
        while pending and pending[-1].level > header.level:
            pending.pop()
        if pending:
            boundaries[position] = pending[-1].element
        pending.append(header)
    return boundaries


def _collect_section_content(header: HeaderRecord, boundary: Tag | None) -> str:
    parts: list[str] = []
    own = serialize_text_content(header.element)
    if own:
        parts.append(own)

    sibling = header.element.find_next_sibling()
    while sibling is not None and sibling is not boundary:
        if is_heading(sibling):
            # Deeper headings start subsections; shallower ones are skipped.
            if heading_level(sibling) > header.level:
                break
        else:
            text = serialize_text_content(sibling)
            if text:
                parts.append(text)
        sibling = sibling.find_next_sibling()

    return "\n\n".join(parts).strip()


def _collect_overview(root: Tag) -> str:
    parts: list[str] = []
    for child in root.find_all(True, recursive=False):
        if is_heading(child):
            break
        text = serialize_text_content(child)
        if text:
            parts.append(text)
    return "\n\n".join(parts).strip()
