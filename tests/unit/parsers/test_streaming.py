#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the streaming helper."""

import pytest

from chatmark import StreamingParser
from chatmark.ast import CodeBlock, Heading, LocalGraph, Paragraph, Text
from chatmark.options import ChatMarkdownOptions


@pytest.mark.unit
class TestStreamingParser:
    """Tests for StreamingParser."""

    def test_starts_empty(self) -> None:
        """Test the initial state."""
        stream = StreamingParser()

        assert stream.text == ""
        assert stream.document.children == []

    def test_feed_reparses_full_text(self) -> None:
        """Test that chunks accumulate and the whole text is re-parsed."""
        stream = StreamingParser()

        stream.feed("# Ti")
        doc = stream.feed("tle\n\nBody")

        assert stream.text == "# Title\n\nBody"
        assert doc.children == [
            Heading(level=1, children=[Text(content="Title")]),
            Paragraph(children=[Text(content="Body")]),
        ]

    def test_partial_fence_then_closed(self) -> None:
        """Test that an open diagram fence resolves as more text arrives."""
        stream = StreamingParser()

        first = stream.feed("```mermaid\ngraph TD")
        assert first.children == [CodeBlock(content="graph TD", language="mermaid")]

        second = stream.feed("\n  A[blockId=777] --> B\n```")
        assert second.children == [LocalGraph(block_id=777)]

    def test_empty_chunk_keeps_document(self) -> None:
        """Test that an empty chunk does not re-parse."""
        stream = StreamingParser()
        doc = stream.feed("x")

        assert stream.feed("") is doc

    def test_update_accepts_longer_text(self) -> None:
        """Test full-text updates."""
        stream = StreamingParser()

        doc = stream.update("Hello")

        assert doc is not None
        assert doc.children == [Paragraph(children=[Text(content="Hello")])]

    def test_update_rejects_stale_text(self) -> None:
        """Test that shorter or equal text never replaces a newer tree."""
        stream = StreamingParser()
        latest = stream.update("Hello world")

        assert stream.update("Hello") is None
        assert stream.update("Hello-world") is None
        assert stream.document is latest
        assert stream.text == "Hello world"

    def test_reset(self) -> None:
        """Test starting a new message."""
        stream = StreamingParser()
        stream.feed("old text")

        stream.reset()

        assert stream.text == ""
        assert stream.update("new") is not None

    def test_options_are_used(self) -> None:
        """Test that parser options reach the re-parse."""
        stream = StreamingParser(ChatMarkdownOptions(parse_reference_heuristics=False))

        doc = stream.feed("blockid:42")

        assert doc.children == [Paragraph(children=[Text(content="blockid:42")])]
