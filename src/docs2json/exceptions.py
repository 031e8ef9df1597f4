"""Custom exceptions for docs2json."""


class Docs2jsonError(Exception):
    """Base exception for docs2json operations."""


class ConfigError(Docs2jsonError):
    """Invalid or unreadable crawl configuration."""


class FetchError(Docs2jsonError):
    """Error during plain HTTP fetching (e.g. sitemap download)."""


class RenderError(Docs2jsonError):
    """A page could not be rendered by the browser."""


class RenderTimeoutError(RenderError):
    """Navigation, selector or challenge wait exceeded its timeout."""


class RecordFormatError(Docs2jsonError):
    """A persisted page record is not valid JSON."""
