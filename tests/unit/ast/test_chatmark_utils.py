#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for AST utility functions."""

import pytest

from chatmark.ast import (
    Code,
    Document,
    Gallery,
    GalleryImage,
    Heading,
    Image,
    LineBreak,
    Link,
    Paragraph,
    Strong,
    Text,
    extract_text,
    walk,
)


@pytest.mark.unit
class TestExtractText:
    """Tests for extract_text."""

    def test_inline_text(self) -> None:
        """Test concatenation of inline content."""
        node = Paragraph(
            children=[
                Text(content="Hello "),
                Strong(children=[Text(content="big")]),
                Text(content=" "),
                Link(url="u", children=[Text(content="world")]),
            ]
        )

        assert extract_text(node) == "Hello big world"

    def test_code_breaks_and_images(self) -> None:
        """Test code content, line breaks and image alt text."""
        nodes = [Code(content="x"), LineBreak(), Image(src="a.png", alt="cat")]

        assert extract_text(nodes) == "x\ncat"

    def test_block_joiner(self) -> None:
        """Test joining block content with a separator."""
        doc = Document(
            children=[
                Heading(level=1, children=[Text(content="Title")]),
                Paragraph(children=[Text(content="Body")]),
            ]
        )

        assert extract_text(doc, joiner=" ") == "Title Body"

    def test_gallery_alt_text(self) -> None:
        """Test gallery images contribute their alt text."""
        gallery = Gallery(images=[GalleryImage(src="a.png", alt="one"), GalleryImage(src="b.png", alt="two")])

        assert extract_text(gallery, joiner=" ") == "one two"


@pytest.mark.unit
class TestWalk:
    """Tests for walk."""

    def test_pre_order(self) -> None:
        """Test depth-first pre-order traversal."""
        inner = Text(content="b")
        strong = Strong(children=[inner])
        first = Text(content="a")
        paragraph = Paragraph(children=[first, strong])
        doc = Document(children=[paragraph])

        assert list(walk(doc)) == [doc, paragraph, first, strong, inner]

    def test_list_input(self) -> None:
        """Test walking a list of roots."""
        nodes = [Text(content="a"), Text(content="b")]

        assert list(walk(nodes)) == nodes
