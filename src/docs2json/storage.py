"""Persist page records and the directory index."""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

from docs2json.schemas import PageRecord, RawPageRecord
from docs2json.urls import record_path_for
from docs2json.utils.logging_config import get_logger

logger = get_logger(__name__)

INDEX_FILE_NAME = "_index.json"

_JSON_SUFFIX_RE = re.compile(r"\.json$")


async def write_text_async(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text to a file asynchronously using a thread pool.

    Args:
        path: Path to the file to write.
        content: Text content to write.
        encoding: Text encoding to use.
    """
    await asyncio.to_thread(path.write_text, content, encoding=encoding)


async def mkdir_async(
    path: Path, parents: bool = False, exist_ok: bool = False
) -> None:
    """Create a directory asynchronously using a thread pool.

    Args:
        path: Path to the directory to create.
        parents: If True, create parent directories as needed.
        exist_ok: If True, don't raise an error if directory exists.
    """
    await asyncio.to_thread(path.mkdir, parents=parents, exist_ok=exist_ok)


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def batch_path_for(output_file_name: str | Path, index: int) -> Path:
    """Path of the ``index``-th batch file: ``<name without .json>-<index>.json``."""
    return Path(f"{_JSON_SUFFIX_RE.sub('', str(output_file_name))}-{index}.json")


def is_batch_file(path: Path, output_file_name: str | Path) -> bool:
    """True if ``path`` is one of the numbered batch files of ``output_file_name``."""
    base = Path(_JSON_SUFFIX_RE.sub("", str(output_file_name)))
    path = Path(path)
    if path.resolve().parent != base.resolve().parent:
        return False
    return re.fullmatch(re.escape(base.name) + r"-\d+\.json", path.name) is not None


class PageStore:
    """Writes one JSON file per crawled page below ``output_dir``.

    File locations mirror the URL path relative to ``base_url``. Batch files
    named after ``output_file_name`` are never treated as page records.
    """

    def __init__(
        self, output_dir: Path, base_url: str, output_file_name: str | Path | None = None
    ) -> None:
        self.output_dir = Path(output_dir)
        self.base_url = base_url
        self.output_file_name = output_file_name

    def path_for(self, url: str) -> Path:
        return self.output_dir / Path(record_path_for(url, self.base_url))

    def record_files(self) -> list[Path]:
        return list_record_files(self.output_dir, output_file_name=self.output_file_name)

    async def purge(self) -> int:
        """Delete page records and the index left by a previous run.

        Returns the number of files removed.
        """
        removed = await asyncio.to_thread(self._purge)
        if removed:
            logger.info("Purged %d files from previous run in %s", removed, self.output_dir)
        return removed

    def _purge(self) -> int:
        if not self.output_dir.is_dir():
            return 0
        files = self.record_files()
        index = self.output_dir / INDEX_FILE_NAME
        if index.is_file():
            files.append(index)
        for path in files:
            path.unlink()
        _remove_empty_dirs(self.output_dir)
        return len(files)

    async def save(self, record: PageRecord | RawPageRecord) -> Path:
        path = self.path_for(record.url)
        await mkdir_async(path.parent, parents=True, exist_ok=True)
        await write_text_async(path, dump_json(record.to_json_dict()))
        logger.info("Content saved to %s", path)
        return path

    async def write_index(self, pages: list[str]) -> Path:
        """Write ``_index.json`` with the base URL, saved pages and file tree."""
        await mkdir_async(self.output_dir, parents=True, exist_ok=True)
        structure = await asyncio.to_thread(build_directory_structure, self.output_dir)
        index = {"baseUrl": self.base_url, "pages": pages, "structure": structure}
        path = self.output_dir / INDEX_FILE_NAME
        await write_text_async(path, dump_json(index))
        logger.info("Index saved to %s", path)
        return path


def build_directory_structure(directory: Path) -> dict[str, Any]:
    """Map each entry name to None (file) or a nested mapping (directory)."""
    structure: dict[str, Any] = {}
    for entry in sorted(Path(directory).iterdir(), key=lambda item: item.name):
        if entry.is_dir():
            structure[entry.name] = build_directory_structure(entry)
        else:
            structure[entry.name] = None
    return structure


def list_record_files(
    output_dir: Path, *, output_file_name: str | Path | None = None
) -> list[Path]:
    """All persisted page records below ``output_dir``, in sorted path order.

    The directory index is skipped, and so are the batch files of
    ``output_file_name`` when they live inside ``output_dir``.
    """
    root = Path(output_dir)
    if not root.is_dir():
        return []
    return sorted(
        path
        for path in root.rglob("*.json")
        if path.is_file()
        and path != root / INDEX_FILE_NAME
        and not (output_file_name is not None and is_batch_file(path, output_file_name))
    )


def _remove_empty_dirs(root: Path) -> None:
    # Deepest first, so parents emptied by their children go too.
    for directory in sorted(
        (path for path in root.rglob("*") if path.is_dir()),
        key=lambda path: len(path.parts),
        reverse=True,
    ):
        if not any(directory.iterdir()):
            directory.rmdir()
