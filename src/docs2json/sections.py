"""Section tree utilities and content redistribution."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from docs2json.schemas import Section

# A bracketed link title followed by a "(/path#fragment)" target, i.e. the
# start of the next subsection's block inside serialized content.
_NEXT_BLOCK_RE = re.compile(r"\[[^\]]+\](?=\(/[^)]+#[^)]+\))")


def iter_sections(sections: Iterable[Section]) -> Iterator[Section]:
    """Yield sections in pre-order."""
    stack = list(reversed(list(sections)))
    while stack:
        section = stack.pop()
        yield section
        stack.extend(reversed(section.children))


def count_sections(sections: Iterable[Section]) -> int:
    """Count total sections in the tree."""
    return sum(1 for _ in iter_sections(sections))


def redistribute_content(sections: list[Section]) -> list[Section]:
    """Move text trapped in a parent's content onto the child it belongs to.

    For every child, the parent's content is searched for a ``[<child title>]``
    marker. The block starting there and running up to the next
    ``[title](/path#fragment)`` link (or the end of the content) is cut from
    the parent and appended to the child. Content that matches no child stays
    on the parent. Sections are modified in place and the list is returned.
    """
    stack = list(sections)
    while stack:
        section = stack.pop()
        if not section.children:
            continue
        if section.content:
            remaining = section.content
            for child in section.children:
                remaining = _move_blocks(remaining, child)
            section.content = remaining
        stack.extend(section.children)
    return sections


def extract_content_block(content: str, title: str) -> tuple[str | None, str]:
    """Split the block introduced by ``[title]`` out of ``content``.

    Returns ``(block, remaining)``; ``block`` is None when the marker is absent.
    """
    start_match = re.search(r"\[" + re.escape(title) + r"\][^\[]*", content)
    if not start_match:
        return None, content

    start = start_match.start()
    next_block = _NEXT_BLOCK_RE.search(content, start_match.end())
    end = next_block.start() if next_block else len(content)

    block = content[start:end].strip()
    remaining = "\n\n".join(
        part for part in (content[:start].strip(), content[end:].strip()) if part
    )
    return block, remaining


def _move_blocks(content: str, child: Section) -> str:
    while content:
        block, content = extract_content_block(content, child.title)
        if block is None:
            break
        child.content = f"{child.content}\n\n{block}" if child.content else block
    return content
