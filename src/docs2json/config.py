"""Local configuration for docs2json."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_OUTPUT_DIR = "output"
DEFAULT_OUTPUT_FILE_NAME = "output.json"
DEFAULT_MAX_PAGES_TO_CRAWL = 50
DEFAULT_MAX_TOKENS = 2_000_000
DEFAULT_WAIT_FOR_SELECTOR_TIMEOUT_MS = 30_000
DEFAULT_NAVIGATION_TIMEOUT_MS = 60_000
DEFAULT_CHALLENGE_TIMEOUT_MS = 30_000
DEFAULT_REQUEST_DELAY_S = 1.0
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "docs2json/0.1"
DEFAULT_TOKEN_ENCODING = "o200k_base"

# Directory receiving one JSON record per crawled page plus _index.json.
DOCS2JSON_OUTPUT_DIR = Path(os.getenv("DOCS2JSON_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)).expanduser()
DOCS2JSON_MAX_PAGES_TO_CRAWL = int(os.getenv("DOCS2JSON_MAX_PAGES_TO_CRAWL", str(DEFAULT_MAX_PAGES_TO_CRAWL)))
DOCS2JSON_MAX_TOKENS = int(os.getenv("DOCS2JSON_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))
DOCS2JSON_WAIT_FOR_SELECTOR_TIMEOUT_MS = int(
    os.getenv("DOCS2JSON_WAIT_FOR_SELECTOR_TIMEOUT_MS", str(DEFAULT_WAIT_FOR_SELECTOR_TIMEOUT_MS))
)
DOCS2JSON_NAVIGATION_TIMEOUT_MS = int(os.getenv("DOCS2JSON_NAVIGATION_TIMEOUT_MS", str(DEFAULT_NAVIGATION_TIMEOUT_MS)))
DOCS2JSON_CHALLENGE_TIMEOUT_MS = int(os.getenv("DOCS2JSON_CHALLENGE_TIMEOUT_MS", str(DEFAULT_CHALLENGE_TIMEOUT_MS)))
DOCS2JSON_REQUEST_DELAY_S = float(os.getenv("DOCS2JSON_REQUEST_DELAY_S", str(DEFAULT_REQUEST_DELAY_S)))
DOCS2JSON_FETCH_TIMEOUT_S = float(os.getenv("DOCS2JSON_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
DOCS2JSON_FETCH_MAX_RETRIES = int(os.getenv("DOCS2JSON_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
DOCS2JSON_FETCH_BACKOFF_S = float(os.getenv("DOCS2JSON_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
DOCS2JSON_USER_AGENT = os.getenv("DOCS2JSON_USER_AGENT", DEFAULT_USER_AGENT)
DOCS2JSON_TOKEN_ENCODING = os.getenv("DOCS2JSON_TOKEN_ENCODING", DEFAULT_TOKEN_ENCODING)
