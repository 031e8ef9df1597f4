"""Crawl configuration model."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal
from urllib.parse import urlsplit

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from docs2json.config import (
    DEFAULT_OUTPUT_FILE_NAME,
    DOCS2JSON_CHALLENGE_TIMEOUT_MS,
    DOCS2JSON_MAX_PAGES_TO_CRAWL,
    DOCS2JSON_MAX_TOKENS,
    DOCS2JSON_NAVIGATION_TIMEOUT_MS,
    DOCS2JSON_OUTPUT_DIR,
    DOCS2JSON_REQUEST_DELAY_S,
    DOCS2JSON_WAIT_FOR_SELECTOR_TIMEOUT_MS,
)

_SITEMAP_RE = re.compile(r"sitemap.*\.xml$")


class Cookie(BaseModel):
    """A cookie forwarded to the browser before each navigation."""

    name: str
    value: str


class CrawlConfig(BaseModel):
    """Settings for one crawl run and the batching pass that follows it.

    Keys are accepted either in snake_case or in the camelCase form used by
    JSON config files (``maxPagesToCrawl``, ``outputFileName`` ...).

    Attributes:
        url: Start URL, list of start URLs, or a single sitemap URL.
        match: Optional glob patterns; discovered links must match one.
        scope: URL prefix a discovered link must start with. Defaults to the
            first start URL followed by ``/``.
        selector: CSS selector or XPath (leading ``/``) of the content root.
        navigation_selector: CSS selector or XPath of the navigation region.
        current_page_marker: Navigation entries containing this text are dropped.
        max_pages_to_crawl: Upper bound on pages attempted in one run.
        max_file_size: Byte ceiling of one batch file, in megabytes.
        max_tokens: Token ceiling of one batch file.
        purge_on_start: Delete page records left in ``output_dir`` by an
            earlier run before crawling.
        mode: ``structured`` section trees or ``raw`` text capture.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str | list[str]
    match: list[str] = Field(default_factory=list)
    scope: str | None = None
    selector: str = "body"
    navigation_selector: str | None = Field(default=None, alias="navigationSelector")
    current_page_marker: str = Field(default="Current page is", alias="currentPageMarker")
    max_pages_to_crawl: int = Field(default=DOCS2JSON_MAX_PAGES_TO_CRAWL, ge=1, alias="maxPagesToCrawl")
    max_file_size: float | None = Field(default=None, gt=0, alias="maxFileSize")
    max_tokens: int | None = Field(default=DOCS2JSON_MAX_TOKENS, ge=1, alias="maxTokens")
    wait_for_selector_timeout: int = Field(
        default=DOCS2JSON_WAIT_FOR_SELECTOR_TIMEOUT_MS, ge=0, alias="waitForSelectorTimeout"
    )
    navigation_timeout: int = Field(default=DOCS2JSON_NAVIGATION_TIMEOUT_MS, ge=0, alias="navigationTimeout")
    challenge_selector: str | None = Field(default="#challenge-running", alias="challengeSelector")
    challenge_timeout: int = Field(default=DOCS2JSON_CHALLENGE_TIMEOUT_MS, ge=0, alias="challengeTimeout")
    resource_exclusions: list[str] = Field(default_factory=list, alias="resourceExclusions")
    cookies: list[Cookie] = Field(
        default_factory=list,
        validation_alias=AliasChoices("cookies", "cookie"),
    )
    output_dir: Path = Field(default=DOCS2JSON_OUTPUT_DIR, alias="outputDir")
    output_file_name: str = Field(default=DEFAULT_OUTPUT_FILE_NAME, alias="outputFileName")
    request_delay: float = Field(default=DOCS2JSON_REQUEST_DELAY_S, ge=0, alias="requestDelay")
    purge_on_start: bool = Field(default=True, alias="purgeOnStart")
    headless: bool = True
    mode: Literal["structured", "raw"] = "structured"

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | list[str]) -> str | list[str]:
        """Require at least one http(s) start URL."""
        urls = [v] if isinstance(v, str) else v
        if not urls:
            raise ValueError("at least one start URL is required")
        for item in urls:
            if not item.startswith(("http://", "https://")):
                raise ValueError(f"start URL must be http(s): {item!r}")
        return v

    @field_validator("match", mode="before")
    @classmethod
    def coerce_match(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("cookies", mode="before")
    @classmethod
    def coerce_cookies(cls, v: Any) -> Any:
        """Accept a single cookie object as well as a list."""
        if v is None:
            return []
        if isinstance(v, dict):
            return [v]
        return v

    @field_validator("output_file_name")
    @classmethod
    def validate_output_file_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("outputFileName must not be empty")
        return v

    @property
    def start_urls(self) -> list[str]:
        return [self.url] if isinstance(self.url, str) else list(self.url)

    @property
    def base_url(self) -> str:
        if self.is_sitemap:
            parts = urlsplit(self.start_urls[0])
            return f"{parts.scheme}://{parts.netloc}"
        return self.start_urls[0]

    @property
    def is_sitemap(self) -> bool:
        return isinstance(self.url, str) and bool(_SITEMAP_RE.search(self.url))

    @property
    def scope_prefix(self) -> str:
        if self.scope:
            return self.scope
        return self.base_url.rstrip("/") + "/"

    @property
    def max_bytes(self) -> int | None:
        if self.max_file_size is None:
            return None
        return int(self.max_file_size * 1024 * 1024)
