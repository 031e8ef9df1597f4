"""Combine persisted page records into token- and size-bounded batch files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from docs2json.exceptions import RecordFormatError
from docs2json.schemas import CrawlConfig
from docs2json.storage import batch_path_for, dump_json, list_record_files
from docs2json.tokens import TokenEstimator, estimate_tokens, format_token_count
from docs2json.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class OutputBatch:
    """Records collected for the next numbered output file."""

    index: int
    records: list[dict[str, Any]] = field(default_factory=list)
    token_total: int = 0
    byte_total: int = 0


class OutputBatcher:
    """Accumulates records and flushes them to ``<base>-<N>.json`` files.

    Two running totals bound a batch independently:

    * tokens: when adding a record would push the total over ``max_tokens``,
      the current batch is flushed first and the new batch starts at half the
      record's count. A record whose count alone exceeds the ceiling is kept
      but not counted.
    * bytes: once the total goes over ``max_bytes`` the batch is flushed
      immediately.

    A ceiling of None disables that bound.
    """

    def __init__(
        self,
        output_file_name: str | Path,
        *,
        max_tokens: int | None = None,
        max_bytes: int | None = None,
        estimate: TokenEstimator = estimate_tokens,
    ) -> None:
        self.output_file_name = str(output_file_name)
        self.max_tokens = max_tokens
        self.max_bytes = max_bytes
        self._estimate = estimate
        self._batch = OutputBatch(index=1)
        self.written: list[Path] = []

    @property
    def current(self) -> OutputBatch:
        return self._batch

    def batch_path(self, index: int) -> Path:
        return batch_path_for(self.output_file_name, index)

    def add(self, record: dict[str, Any]) -> None:
        serialized = json.dumps(record, ensure_ascii=False, separators=(",", ":"))
        count = self._estimate(serialized, self.max_tokens)

        if count is None:
            self._batch.records.append(record)
        elif self.max_tokens is not None and self._batch.token_total + count > self.max_tokens:
            if self._batch.records:
                self.flush()
            self._batch.records.append(record)
            self._batch.token_total = count // 2
        else:
            self._batch.records.append(record)
            self._batch.token_total += count

        self._batch.byte_total += len(serialized.encode("utf-8"))
        if self.max_bytes is not None and self._batch.byte_total > self.max_bytes:
            self.flush()

    def flush(self) -> Path | None:
        """Write the current batch if it has records and start the next one."""
        batch = self._batch
        if not batch.records:
            return None

        path = self.batch_path(batch.index)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_json(batch.records), encoding="utf-8")
        logger.info(
            "Wrote %d items to %s (~%s tokens, %d bytes)",
            len(batch.records),
            path,
            format_token_count(batch.token_total),
            batch.byte_total,
        )
        self.written.append(path)
        self._batch = OutputBatch(index=batch.index + 1)
        return path


def load_record(path: Path) -> dict[str, Any]:
    """Read one persisted page record.

    Raises:
        RecordFormatError: If the file is not a JSON object.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RecordFormatError(f"Malformed page record {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise RecordFormatError(f"Page record {path} is not a JSON object")
    return data


def write_batches(record_files: Iterable[Path], batcher: OutputBatcher) -> list[Path]:
    """Feed every record file through ``batcher`` and flush the remainder."""
    for path in record_files:
        batcher.add(load_record(path))
    batcher.flush()
    return batcher.written


def write_output(
    config: CrawlConfig, *, estimate: TokenEstimator = estimate_tokens
) -> list[Path]:
    """Combine all records under ``config.output_dir`` into batch files."""
    record_files = list_record_files(
        config.output_dir, output_file_name=config.output_file_name
    )
    logger.info("Found %d files to combine...", len(record_files))
    batcher = OutputBatcher(
        config.output_file_name,
        max_tokens=config.max_tokens,
        max_bytes=config.max_bytes,
        estimate=estimate,
    )
    return write_batches(record_files, batcher)
