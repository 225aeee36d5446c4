#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for AST transforms and normalization passes."""

import pytest

from chatmark.ast import (
    BlockQuote,
    Code,
    Document,
    Emphasis,
    Gallery,
    GalleryImage,
    Heading,
    Image,
    LineBreak,
    List,
    ListItem,
    NodeTransformer,
    Paragraph,
    Strong,
    Table,
    Text,
    Timeline,
    TimelineItem,
    is_single_image_paragraph,
    merge_adjacent_text,
    merge_image_galleries,
)
from chatmark.ast.transforms import merge_inline_text


class UppercaseTransformer(NodeTransformer):
    """Uppercase every text node."""

    def visit_text(self, node: Text) -> Text:
        return Text(content=node.content.upper())


class DropCodeTransformer(NodeTransformer):
    """Remove inline code spans."""

    def visit_code(self, node: Code) -> None:
        return None


@pytest.mark.unit
class TestNodeTransformer:
    """Tests for the NodeTransformer base class."""

    def test_identity_copy(self) -> None:
        """Test that the base transformer rebuilds an equal tree."""
        doc = Document(
            children=[
                Heading(level=1, children=[Text(content="T")]),
                List(items=[ListItem(content=[Text(content="a")], children=[ListItem(content=[Text(content="b")])])]),
            ]
        )

        copied = NodeTransformer().transform(doc)

        assert copied == doc
        assert copied is not doc

    def test_override_visit(self) -> None:
        """Test that overridden visit methods are applied everywhere."""
        doc = Document(
            children=[
                Paragraph(children=[Strong(children=[Text(content="bold")])]),
                Table(headers=[[Text(content="h")]], alignments=[None], rows=[[[Text(content="c")]]]),
            ]
        )

        result = UppercaseTransformer().transform(doc)

        assert result == Document(
            children=[
                Paragraph(children=[Strong(children=[Text(content="BOLD")])]),
                Table(headers=[[Text(content="H")]], alignments=[None], rows=[[[Text(content="C")]]]),
            ]
        )

    def test_remove_nodes(self) -> None:
        """Test that returning None removes a node."""
        doc = Paragraph(children=[Text(content="a"), Code(content="x"), Text(content="b")])

        assert DropCodeTransformer().transform(doc) == Paragraph(children=[Text(content="a"), Text(content="b")])


@pytest.mark.unit
class TestMergeAdjacentText:
    """Tests for text merging."""

    def test_merges_and_drops_empty(self) -> None:
        """Test that adjacent runs merge and empty text disappears."""
        blocks = [Paragraph(children=[Text(content="a"), Text(content=""), Text(content="b"), LineBreak()])]

        assert merge_adjacent_text(blocks) == [Paragraph(children=[Text(content="ab"), LineBreak()])]

    def test_merges_nested_inline(self) -> None:
        """Test merging inside emphasis and quotes."""
        blocks = [BlockQuote(children=[Paragraph(children=[Emphasis(children=[Text(content="x"), Text(content="y")])])])]

        assert merge_adjacent_text(blocks) == [
            BlockQuote(children=[Paragraph(children=[Emphasis(children=[Text(content="xy")])])])
        ]

    def test_merges_extension_inline_lists(self) -> None:
        """Test merging in timeline titles."""
        blocks = [Timeline(items=[TimelineItem(date="d", title=[Text(content="a"), Text(content="b")])])]

        result = merge_adjacent_text(blocks)

        assert result[0] == Timeline(items=[TimelineItem(date="d", title=[Text(content="ab")])])

    def test_inline_helper(self) -> None:
        """Test the single-list helper."""
        assert merge_inline_text([Text(content="a"), Text(content="b"), Code(content="c")]) == [
            Text(content="ab"),
            Code(content="c"),
        ]


@pytest.mark.unit
class TestImageGalleries:
    """Tests for gallery normalization."""

    def test_single_image_paragraph_detection(self) -> None:
        """Test whitespace and line breaks are ignored around the image."""
        assert is_single_image_paragraph(Paragraph(children=[Image(src="a.png")]))
        assert is_single_image_paragraph(Paragraph(children=[Text(content=" "), Image(src="a.png"), LineBreak()]))
        assert not is_single_image_paragraph(Paragraph(children=[Image(src="a.png"), Image(src="b.png")]))
        assert not is_single_image_paragraph(Paragraph(children=[Image(src="a.png"), Text(content="caption")]))
        assert not is_single_image_paragraph(Paragraph())
        assert not is_single_image_paragraph(Heading(level=1, children=[Image(src="a.png")]))

    def test_run_of_three(self) -> None:
        """Test that a run of three images becomes one gallery."""
        blocks = [Paragraph(children=[Image(src=f"{n}.png", alt=str(n))]) for n in range(3)]

        assert merge_image_galleries(blocks) == [
            Gallery(images=[GalleryImage(src=f"{n}.png", alt=str(n)) for n in range(3)])
        ]

    def test_lone_image_untouched(self) -> None:
        """Test that a single image paragraph is kept."""
        blocks = [
            Paragraph(children=[Image(src="a.png")]),
            Paragraph(children=[Text(content="text")]),
            Paragraph(children=[Image(src="b.png")]),
        ]

        assert merge_image_galleries(blocks) == blocks

    def test_two_runs(self) -> None:
        """Test that separate runs become separate galleries."""
        image = Paragraph(children=[Image(src="a.png")])
        blocks = [image, image, Paragraph(children=[Text(content="mid")]), image, image]

        result = merge_image_galleries(blocks)

        assert [node.node_type for node in result] == ["gallery", "paragraph", "gallery"]
