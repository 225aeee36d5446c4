"""Property-based fuzzing tests for the chat Markdown parser.

This test module uses Hypothesis to generate Markdown-like text, including
unbalanced delimiters, stray fences and deep nesting, and checks the
guarantees the renderer relies on.

Test Coverage:
- Parsing never raises on any text
- Parsing is deterministic
- No empty or adjacent Text nodes survive in any inline list
- The JSON wire format reproduces the tree
- The completion marker always yields a trailing link graph
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from chatmark.ast import (
    ChecklistItem,
    Compare,
    CompareItem,
    Document,
    Emphasis,
    Heading,
    Link,
    ListItem,
    LocalGraph,
    Paragraph,
    Strong,
    Table,
    Text,
    TimelineItem,
    ast_to_json,
    json_to_ast,
    walk,
)
from chatmark.parsers import parse_inline, parse_markdown

MARKDOWN_ALPHABET = list("ab 1#*`-_>|[]()!:\\\nx块") + ["```", "```mermaid\n", "```timeline\n", "- [ ] ", "1. ", "blockid:"]

markdown_text = st.lists(st.sampled_from(MARKDOWN_ALPHABET), max_size=80).map("".join)


def _inline_lists(node):
    if isinstance(node, (Paragraph, Heading, ChecklistItem, Strong, Emphasis, Link)):
        yield node.children
    elif isinstance(node, ListItem):
        yield node.content
    elif isinstance(node, Table):
        yield from node.headers
        for row in node.rows:
            yield from row
    elif isinstance(node, TimelineItem):
        yield node.title
        if node.description is not None:
            yield node.description
    elif isinstance(node, Compare):
        yield node.left_title
        yield node.right_title
    elif isinstance(node, CompareItem):
        yield node.left
        yield node.right


@pytest.mark.unit
@pytest.mark.fuzzing
class TestParserFuzzing:
    """Property-based tests for parser totality and normalization."""

    @given(st.text(max_size=200))
    def test_arbitrary_text_never_raises(self, text):
        """Test that any unicode text parses to a document."""
        assert isinstance(parse_markdown(text), Document)

    @given(markdown_text)
    def test_markdown_like_text_never_raises(self, text):
        """Test delimiter-heavy text."""
        assert isinstance(parse_markdown(text), Document)

    @given(markdown_text)
    def test_deterministic(self, text):
        """Test that the same text always yields the same tree."""
        assert parse_markdown(text) == parse_markdown(text)

    @given(markdown_text)
    def test_no_adjacent_or_empty_text(self, text):
        """Test text merging across the whole tree."""
        doc = parse_markdown(text)

        for node in walk(doc):
            for inline in _inline_lists(node):
                for index, child in enumerate(inline):
                    if isinstance(child, Text):
                        assert child.content
                        if index > 0:
                            assert not isinstance(inline[index - 1], Text)

    @given(markdown_text)
    def test_inline_scan_never_raises(self, text):
        """Test the inline scanner on its own."""
        assert isinstance(parse_inline(text), list)

    @given(markdown_text)
    def test_json_round_trip(self, text):
        """Test that the wire format reproduces the tree."""
        doc = parse_markdown(text)

        assert json_to_ast(ast_to_json(doc)) == doc

    @given(st.text(max_size=100).map(lambda s: s.replace("[", "")), st.integers(1, 10**6))
    def test_completion_marker_appends_graph(self, text, block_id):
        """Test that a trailing marker always ends the document with a link graph."""
        doc = parse_markdown(f"{text}[LOCALGRAPH:{block_id}]")

        assert doc.children[-1] == LocalGraph(block_id=block_id)
