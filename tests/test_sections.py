"""Tests for content redistribution."""

from __future__ import annotations

from bs4 import BeautifulSoup

from docs2json.html_parser import extract_sections
from docs2json.schemas import Section
from docs2json.sections import (
    count_sections,
    extract_content_block,
    iter_sections,
    redistribute_content,
)

TOPICS_PAGE = (
    "<main>"
    "<h1>A</h1>"
    '<div class="topics">'
    '<a href="/documentation/x/b#b">B</a> <p>About B.</p>'
    '<a href="/documentation/x/c#c">C</a> <p>About C.</p>'
    "</div>"
    "<h2>B</h2>"
    "<h2>C</h2>"
    "<p>Trailing paragraph.</p>"
    "</main>"
)


def _extract(html: str) -> list[Section]:
    return extract_sections(BeautifulSoup(html, "lxml").main)


def _snapshot(sections: list[Section]) -> list[dict]:
    return [section.model_dump() for section in sections]


class TestExtractContentBlock:
    """Tests for extract_content_block."""

    def test_block_ends_at_next_fragment_link(self) -> None:
        """Should end the block at the next [title](/path#fragment) link."""
        content = "intro [B](/x/b#b) about b [C](/x/c#c) about c"

        block, remaining = extract_content_block(content, "B")

        assert block == "[B](/x/b#b) about b"
        assert remaining == "intro\n\n[C](/x/c#c) about c"

    def test_block_runs_to_end_without_next_link(self) -> None:
        """Should run the block to the end when no link follows."""
        block, remaining = extract_content_block("intro [C](/x/c#c) about c", "C")

        assert block == "[C](/x/c#c) about c"
        assert remaining == "intro"

    def test_missing_marker(self) -> None:
        """Should return None and leave the content as is."""
        block, remaining = extract_content_block("nothing here", "B")

        assert block is None
        assert remaining == "nothing here"

    def test_title_is_matched_literally(self) -> None:
        """Should escape regex characters in the title."""
        content = "[a.b()](/x#y) text [axb()](/x#z) other"

        block, remaining = extract_content_block(content, "a.b()")

        assert block == "[a.b()](/x#y) text"
        assert remaining == "[axb()](/x#z) other"

        assert extract_content_block("[axb] text", "a.b")[0] is None


class TestRedistributeContent:
    """Tests for redistribute_content."""

    def test_trapped_text_moves_to_children(self) -> None:
        """Should move each child's block out of the parent."""
        sections = redistribute_content(_extract(TOPICS_PAGE))

        a = sections[0]
        b, c = a.children
        assert a.content == "A"
        assert b.content == "B\n\n[B](/documentation/x/b#b) About B."
        assert c.content == "C\n\nTrailing paragraph.\n\n[C](/documentation/x/c#c) About C."

    def test_unmatched_content_stays_on_parent(self) -> None:
        """Should leave text that matches no child on the parent."""
        parent = Section(
            level=1,
            title="Parent",
            content="Parent text [Other](/x#o) not a child",
            children=[Section(level=2, title="Child", content="Child")],
        )

        redistribute_content([parent])

        assert parent.content == "Parent text [Other](/x#o) not a child"
        assert parent.children[0].content == "Child"

    def test_empty_child_receives_block_without_separator(self) -> None:
        """Should not prepend a separator to an empty child."""
        parent = Section(
            level=1,
            title="P",
            content="[Kid](/p#kid) kid text",
            children=[Section(level=2, title="Kid")],
        )

        redistribute_content([parent])

        assert parent.content == ""
        assert parent.children[0].content == "[Kid](/p#kid) kid text"

    def test_blocks_cascade_to_grandchildren(self) -> None:
        """Should keep redistributing below the children it filled."""
        grandchild = Section(level=3, title="G", content="G")
        child = Section(level=2, title="C", content="C", children=[grandchild])
        root = Section(
            level=1,
            title="R",
            content="R [C](/r#c) about c [G] about g",
            children=[child],
        )

        redistribute_content([root])

        assert root.content == "R"
        assert child.content == "C\n\n[C](/r#c) about c"
        assert grandchild.content == "G\n\n[G] about g"

    def test_repeated_marker_is_fully_moved(self) -> None:
        """Should move every occurrence of a child's marker."""
        parent = Section(
            level=1,
            title="P",
            content="[K](/p#k) first [L](/p#l) middle [K](/p#k) second",
            children=[Section(level=2, title="K")],
        )

        redistribute_content([parent])

        assert parent.children[0].content == "[K](/p#k) first\n\n[K](/p#k) second"
        assert parent.content == "[L](/p#l) middle"

    def test_idempotent(self) -> None:
        """Should change nothing on a second pass."""
        once = redistribute_content(_extract(TOPICS_PAGE))
        snapshot = _snapshot(once)

        twice = redistribute_content(once)

        assert _snapshot(twice) == snapshot

    def test_no_text_is_duplicated(self) -> None:
        """Should never copy a block to more than one section."""
        sections = _extract(TOPICS_PAGE)
        before = sum(len(section.content) for section in iter_sections(sections))

        redistribute_content(sections)

        after_text = "".join(section.content for section in iter_sections(sections))
        assert after_text.count("About B.") == 1
        assert after_text.count("About C.") == 1
        assert len(after_text) <= before + 2 * count_sections(sections)

    def test_leaf_sections_untouched(self) -> None:
        """Should not touch sections without children."""
        sections = [Section(level=1, title="Only", content="[Only] text")]
        assert _snapshot(redistribute_content(sections)) == [
            {"level": 1, "title": "Only", "content": "[Only] text", "children": []}
        ]
