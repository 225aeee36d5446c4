#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for AST node classes and the visitor protocol."""

import pytest

from chatmark.ast import (
    BLOCK_NODE_TYPES,
    INLINE_NODE_TYPES,
    Compare,
    CompareItem,
    Document,
    Gallery,
    GalleryImage,
    Heading,
    LineBreak,
    Link,
    List,
    ListItem,
    LocalGraph,
    Paragraph,
    Strong,
    Table,
    TaskCard,
    TaskCardData,
    Text,
    ThematicBreak,
    TimelineItem,
    get_node_children,
    is_block_node,
    is_inline_node,
)


@pytest.mark.unit
class TestNodeConstruction:
    """Tests for node construction and validation."""

    def test_heading_level_validated(self) -> None:
        """Test that heading levels outside 1-6 are rejected."""
        with pytest.raises(ValueError):
            Heading(level=0)
        with pytest.raises(ValueError):
            Heading(level=7)

    def test_default_children_not_shared(self) -> None:
        """Test that default lists are independent per instance."""
        first = Paragraph()
        second = Paragraph()
        first.children.append(Text(content="x"))

        assert second.children == []

    def test_task_card_defaults(self) -> None:
        """Test default task card values."""
        task = TaskCardData(title="Do it")

        assert task.status == "todo"
        assert task.priority is None
        assert task.tags == []

    def test_wire_type_names(self) -> None:
        """Test the renderer-facing type names."""
        assert Strong.node_type == "bold"
        assert ThematicBreak.node_type == "hr"
        assert LineBreak.node_type == "break"
        assert LocalGraph.node_type == "localgraph"

    def test_equality_is_structural(self) -> None:
        """Test that nodes compare by value."""
        assert Link(url="u", children=[Text(content="a")]) == Link(url="u", children=[Text(content="a")])
        assert Text(content="a") != Text(content="b")


@pytest.mark.unit
class TestNodeClassification:
    """Tests for block/inline classification helpers."""

    def test_block_nodes(self) -> None:
        """Test block node detection."""
        assert is_block_node(LocalGraph(block_id=1))
        assert is_block_node(ThematicBreak())
        assert not is_block_node(Text(content="x"))

    def test_inline_nodes(self) -> None:
        """Test inline node detection."""
        assert is_inline_node(LineBreak())
        assert not is_inline_node(Paragraph())

    def test_type_sets_disjoint(self) -> None:
        """Test that no class is both block and inline."""
        assert not set(BLOCK_NODE_TYPES) & set(INLINE_NODE_TYPES)


@pytest.mark.unit
class TestGetNodeChildren:
    """Tests for uniform child access."""

    def test_list_item_content_then_children(self) -> None:
        """Test that item content precedes nested items."""
        nested = ListItem(content=[Text(content="b")])
        item = ListItem(content=[Text(content="a")], children=[nested])

        assert get_node_children(item) == [Text(content="a"), nested]

    def test_table_cells_flattened(self) -> None:
        """Test that header and body cells are flattened in reading order."""
        table = Table(
            headers=[[Text(content="h1")], [Text(content="h2")]],
            alignments=[None, None],
            rows=[[[Text(content="c1")], []]],
        )

        assert get_node_children(table) == [Text(content="h1"), Text(content="h2"), Text(content="c1")]

    def test_compare_titles_then_items(self) -> None:
        """Test comparison children order."""
        item = CompareItem(left=[Text(content="l")], right=[Text(content="r")])
        node = Compare(left_title=[Text(content="L")], right_title=[Text(content="R")], items=[item])

        assert get_node_children(node) == [Text(content="L"), Text(content="R"), item]
        assert get_node_children(item) == [Text(content="l"), Text(content="r")]

    def test_timeline_item_without_description(self) -> None:
        """Test a timeline item with only a title."""
        item = TimelineItem(date="2024", title=[Text(content="t")])

        assert get_node_children(item) == [Text(content="t")]

    def test_leaves(self) -> None:
        """Test that leaf nodes have no children."""
        assert get_node_children(Text(content="x")) == []
        assert get_node_children(TaskCard(task=TaskCardData(title="t"))) == []
        assert get_node_children(GalleryImage(src="a.png")) == []

    def test_gallery_images(self) -> None:
        """Test gallery children."""
        image = GalleryImage(src="a.png")

        assert get_node_children(Gallery(images=[image])) == [image]

    def test_document_and_list(self) -> None:
        """Test container nodes."""
        item = ListItem(content=[Text(content="a")])

        assert get_node_children(List(items=[item])) == [item]
        assert get_node_children(Document(children=[ThematicBreak()])) == [ThematicBreak()]
