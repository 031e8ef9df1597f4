"""Serialize rendered HTML nodes into text with light Markdown markup."""

from __future__ import annotations

import re

from bs4.element import NavigableString, PreformattedString, Tag

_HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template"})
_HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")
_NEWLINE_PADDING_RE = re.compile(r" *\n *")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

BULLET = "• "

# (text, verbatim) pairs; verbatim pieces are fenced code and never rewritten.
_Piece = tuple[str, bool]


def serialize_text_content(node: Tag) -> str:
    """Render ``node`` and its descendants as text.

    Code blocks become fenced blocks with their text kept verbatim, paragraphs
    end with a blank line, list items get a bullet, links are written as
    ``[text](href)``. Everything else contributes the text of its children.
    """
    return _join_pieces(_serialize(node))


def is_heading(node: object) -> bool:
    return isinstance(node, Tag) and node.name in _HEADING_TAGS


def heading_level(tag: Tag) -> int:
    return int(tag.name[1])


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _serialize(node: Tag | NavigableString) -> list[_Piece]:
    if isinstance(node, PreformattedString):
        return []
    if isinstance(node, NavigableString):
        text = normalize_text(str(node))
        return [(text, False)] if text else []
    if not isinstance(node, Tag) or node.name in _SKIPPED_TAGS:
        return []

    if node.name == "pre":
        code = node.find("code")
        if code is not None:
            return [(f"```\n{code.get_text()}\n```", True)]
        return _serialize_children(node)

    if node.name == "br":
        return [("\n", False)]

    if node.name == "p":
        return _serialize_children(node) + [("\n\n", False)]

    if node.name == "li":
        return [(BULLET, False)] + _serialize_children(node) + [("\n", False)]

    if node.name == "a":
        text = normalize_text(node.get_text())
        href = node.get("href")
        if href:
            return [(f"[{text}]({href})", False)]
        return [(text, False)] if text else []

    return _serialize_children(node)


def _serialize_children(tag: Tag) -> list[_Piece]:
    pieces: list[_Piece] = []
    for child in tag.children:
        pieces.extend(_serialize(child))
    return pieces


def _join_pieces(pieces: list[_Piece]) -> str:
    blocks: list[str] = []
    buffer: list[str] = []
    for text, verbatim in pieces:
        if verbatim:
            blocks.append(_cleanup_text(" ".join(buffer)))
            buffer = []
            blocks.append(text)
        else:
            buffer.append(text)
    blocks.append(_cleanup_text(" ".join(buffer)))
    return "\n\n".join(block for block in blocks if block).strip()


def _cleanup_text(text: str) -> str:
    text = _HORIZONTAL_WS_RE.sub(" ", text)
    text = _NEWLINE_PADDING_RE.sub("\n", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text.strip()
