"""Shared schemas for docs2json."""

from docs2json.schemas.config import Cookie, CrawlConfig
from docs2json.schemas.page import NavItem, PageContent, PageRecord, RawPageRecord
from docs2json.schemas.sections import Section

__all__ = [
    "Cookie",
    "CrawlConfig",
    "NavItem",
    "PageContent",
    "PageRecord",
    "RawPageRecord",
    "Section",
]
