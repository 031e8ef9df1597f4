"""docs2json: crawl documentation sites into section-structured JSON."""

from docs2json.batching import OutputBatcher, write_output
from docs2json.crawler import CrawlSession, Frontier, crawl, run_crawl
from docs2json.exceptions import (
    ConfigError,
    Docs2jsonError,
    FetchError,
    RecordFormatError,
    RenderError,
    RenderTimeoutError,
)
from docs2json.html_parser import extract_sections, parse_page_html
from docs2json.navigation import extract_navigation
from docs2json.schemas import CrawlConfig, NavItem, PageContent, PageRecord, Section
from docs2json.sections import redistribute_content

__all__ = [
    "ConfigError",
    "CrawlConfig",
    "CrawlSession",
    "Docs2jsonError",
    "FetchError",
    "Frontier",
    "NavItem",
    "OutputBatcher",
    "PageContent",
    "PageRecord",
    "RecordFormatError",
    "RenderError",
    "RenderTimeoutError",
    "Section",
    "crawl",
    "extract_navigation",
    "extract_sections",
    "parse_page_html",
    "redistribute_content",
    "run_crawl",
    "write_output",
]
