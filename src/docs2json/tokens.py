"""Token estimation for batch accounting."""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Optional

import tiktoken

from docs2json.config import DOCS2JSON_TOKEN_ENCODING

# Returns the token count, or None when the text exceeds ``limit``.
TokenEstimator = Callable[[str, Optional[int]], Optional[int]]


@lru_cache(maxsize=4)
def get_encoding(name: str = DOCS2JSON_TOKEN_ENCODING) -> tiktoken.Encoding:
    return tiktoken.get_encoding(name)


def estimate_tokens(text: str, limit: int | None = None) -> int | None:
    """Count the tokens of ``text``, or return None if it exceeds ``limit``.

    Special tokens such as ``<|endoftext|>`` are counted as ordinary text.
    """
    count = len(get_encoding().encode(text, disallowed_special=()))
    if limit is not None and count > limit:
        return None
    return count


def format_token_count(total_tokens: int) -> str:
    if total_tokens >= 1_000_000:
        return f"{total_tokens / 1_000_000:.1f}M"
    if total_tokens >= 1_000:
        return f"{total_tokens / 1_000:.1f}k"
    return str(total_tokens)
