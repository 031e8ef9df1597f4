"""Command line interface: crawl a site, then combine records into batches."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from docs2json.batching import write_output
from docs2json.crawler import run_crawl
from docs2json.exceptions import ConfigError, Docs2jsonError
from docs2json.schemas import CrawlConfig
from docs2json.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

# CLI flag -> CrawlConfig field
_OVERRIDES = {
    "url": "url",
    "selector": "selector",
    "navigation_selector": "navigation_selector",
    "max_pages": "max_pages_to_crawl",
    "max_tokens": "max_tokens",
    "max_file_size": "max_file_size",
    "output_dir": "output_dir",
    "output_file_name": "output_file_name",
    "mode": "mode",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs2json",
        description="Crawl documentation pages into section-structured JSON batches.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("crawl", "Crawl pages and save one JSON record per page"),
        ("write", "Combine saved page records into batch files"),
        ("run", "Crawl, then write batch files"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--config", type=Path, help="JSON config file")
        sub.add_argument("--url", nargs="+", help="Start URL(s) or a sitemap URL")
        sub.add_argument("--selector", help="CSS selector or XPath of the content root")
        sub.add_argument("--navigation-selector", help="CSS selector or XPath of the navigation region")
        sub.add_argument("--max-pages", type=int, help="Maximum pages to crawl")
        sub.add_argument("--max-tokens", type=int, help="Token ceiling per batch file")
        sub.add_argument("--max-file-size", type=float, help="Size ceiling per batch file, in MB")
        sub.add_argument("--output-dir", type=Path, help="Directory for per-page records")
        sub.add_argument("--output-file-name", help="Base name of batch files")
        sub.add_argument("--mode", choices=["structured", "raw"], help="Record format")
        if name == "run":
            sub.add_argument(
                "--no-crawl",
                action="store_true",
                help="Skip crawling and only write batches (also NO_CRAWL=true)",
            )
    return parser


def load_config(args: argparse.Namespace) -> CrawlConfig:
    """Merge the JSON config file (if any) with command line overrides."""
    data: dict[str, Any] = {}
    if args.config is not None:
        try:
            data = json.loads(args.config.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read config {args.config}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config {args.config} must contain a JSON object")

    for flag, field_name in _OVERRIDES.items():
        value = getattr(args, flag, None)
        if value is None:
            continue
        if flag == "url" and len(value) == 1:
            value = value[0]
        data = {key: item for key, item in data.items() if _field_of(key) != field_name}
        data[field_name] = value

    try:
        return CrawlConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration:\n{exc}") from exc


def _field_of(key: str) -> str:
    field = CrawlConfig.model_fields.get(key)
    if field is not None:
        return key
    for name, info in CrawlConfig.model_fields.items():
        if info.alias == key:
            return name
    return "cookies" if key == "cookie" else key


def _skip_crawl(args: argparse.Namespace) -> bool:
    return getattr(args, "no_crawl", False) or os.getenv("NO_CRAWL", "").lower() == "true"


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(args)
        if args.command == "crawl" or (args.command == "run" and not _skip_crawl(args)):
            asyncio.run(run_crawl(config))
        if args.command in {"write", "run"}:
            written = write_output(config)
            if written:
                logger.info("Output written to %s", ", ".join(str(path) for path in written))
            else:
                logger.info("No page records found in %s", config.output_dir)
    except Docs2jsonError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
