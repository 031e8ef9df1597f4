"""Shared HTML utilities for rendered page snapshots."""

from __future__ import annotations

import lxml.html
from bs4 import BeautifulSoup
from bs4.element import Tag
from lxml import etree


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def is_xpath(selector: str) -> bool:
    """Selectors starting with ``/`` or ``(`` are treated as XPath."""
    return selector.startswith(("/", "("))


def select_region(soup: BeautifulSoup, html: str, selector: str | None) -> Tag | None:
    """Find the first element matching a CSS selector or an XPath expression.

    CSS selectors are resolved against ``soup`` directly. XPath expressions are
    evaluated with lxml on the raw ``html`` and the matching element is
    re-parsed, so the returned tag is detached from ``soup``.
    """
    if not selector:
        return None
    if not is_xpath(selector):
        return soup.select_one(selector)
    return _select_xpath(html, selector)


def _select_xpath(html: str, xpath: str) -> Tag | None:
    document = lxml.html.fromstring(html)
    try:
        results = document.xpath(xpath)
    except etree.XPathError as exc:
        raise ValueError(f"Invalid XPath selector {xpath!r}: {exc}") from exc
    if not isinstance(results, list):
        return None
    element = next(
        (
            item
            for item in results
            if isinstance(item, etree._Element) and isinstance(item.tag, str)
        ),
        None,
    )
    if element is None:
        return None

    fragment = BeautifulSoup(lxml.html.tostring(element, encoding="unicode", with_tail=False), "lxml")
    if element.tag == "html":
        return fragment.html
    if element.tag == "body":
        return fragment.body
    container = fragment.body or fragment
    return container.find(True, recursive=False)
