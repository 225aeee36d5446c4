#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the JSON wire format."""

import json

import pytest

from chatmark.ast import (
    CodeBlock,
    Compare,
    CompareItem,
    Document,
    Gallery,
    GalleryImage,
    Heading,
    List,
    ListItem,
    LocalGraph,
    Node,
    Paragraph,
    Strong,
    Table,
    TaskCard,
    TaskCardData,
    Text,
    ThematicBreak,
    Timeline,
    TimelineItem,
    ast_to_dict,
    ast_to_json,
    dict_to_ast,
    json_to_ast,
)
from chatmark.parsers import parse_markdown


@pytest.mark.unit
class TestAstToDict:
    """Tests for node to dictionary conversion."""

    def test_paragraph_with_bold(self) -> None:
        """Test inline children and renderer type names."""
        node = Paragraph(children=[Text(content="a"), Strong(children=[Text(content="b")])])

        assert ast_to_dict(node) == {
            "type": "paragraph",
            "children": [
                {"type": "text", "content": "a"},
                {"type": "bold", "children": [{"type": "text", "content": "b"}]},
            ],
        }

    def test_heading(self) -> None:
        """Test heading level."""
        assert ast_to_dict(Heading(level=2, children=[Text(content="T")])) == {
            "type": "heading",
            "level": 2,
            "children": [{"type": "text", "content": "T"}],
        }

    def test_list_items_omit_missing_children(self) -> None:
        """Test that items without nested lists have no children key."""
        node = List(
            ordered=True,
            items=[ListItem(content=[Text(content="a")], children=[ListItem(content=[Text(content="b")])])],
        )

        assert ast_to_dict(node) == {
            "type": "list",
            "ordered": True,
            "items": [
                {
                    "content": [{"type": "text", "content": "a"}],
                    "children": [{"content": [{"type": "text", "content": "b"}]}],
                }
            ],
        }

    def test_code_block_language_optional(self) -> None:
        """Test that a missing language is omitted."""
        assert ast_to_dict(CodeBlock(content="x")) == {"type": "codeblock", "content": "x"}
        assert ast_to_dict(CodeBlock(content="x", language="py"))["language"] == "py"

    def test_table_alignments_include_none(self) -> None:
        """Test that unaligned columns serialize as null."""
        node = Table(headers=[[Text(content="h")], []], alignments=["center", None], rows=[])

        assert json.loads(ast_to_json(node))["alignments"] == ["center", None]

    def test_thematic_break(self) -> None:
        """Test the rule type name."""
        assert ast_to_dict(ThematicBreak()) == {"type": "hr"}

    def test_extension_nodes(self) -> None:
        """Test camelCase keys of extension nodes."""
        assert ast_to_dict(LocalGraph(block_id=5)) == {"type": "localgraph", "blockId": 5}

        compare = Compare(
            left_title=[Text(content="L")],
            right_title=[Text(content="R")],
            items=[CompareItem(left=[], right=[])],
        )
        assert set(ast_to_dict(compare)) == {"type", "leftTitle", "rightTitle", "items"}

        gallery = Gallery(images=[GalleryImage(src="a.png", alt="A", caption="C"), GalleryImage(src="b.png")])
        assert ast_to_dict(gallery)["images"] == [
            {"src": "a.png", "alt": "A", "caption": "C"},
            {"src": "b.png", "alt": ""},
        ]

    def test_timeline_optional_fields(self) -> None:
        """Test that absent description and category are omitted."""
        node = Timeline(items=[TimelineItem(date="2024", title=[Text(content="t")])])

        assert ast_to_dict(node)["items"] == [{"date": "2024", "title": [{"type": "text", "content": "t"}]}]

    def test_task_card(self) -> None:
        """Test task card payload."""
        node = TaskCard(task=TaskCardData(title="T", status="done", due_date="2024-01-01", tags=["x"], block_id=3))

        assert ast_to_dict(node) == {
            "type": "taskcard",
            "task": {
                "title": "T",
                "status": "done",
                "priority": None,
                "tags": ["x"],
                "dueDate": "2024-01-01",
                "blockId": 3,
            },
        }

    def test_unknown_node_raises(self) -> None:
        """Test that a foreign node class is rejected."""

        class Custom(Node):
            node_type = "custom"

            def accept(self, visitor):
                return None

        with pytest.raises(ValueError, match="Unknown node type"):
            ast_to_dict(Custom())


@pytest.mark.unit
class TestJson:
    """Tests for JSON encoding."""

    def test_non_ascii_kept(self) -> None:
        """Test that CJK text is not escaped."""
        assert "多巴胺" in ast_to_json(Text(content="多巴胺"))

    def test_indent(self) -> None:
        """Test pretty printing."""
        assert "\n" in ast_to_json(Document(children=[ThematicBreak()]), indent=2)
        assert "\n" not in ast_to_json(Document(children=[ThematicBreak()]))

    def test_parsed_message_survives_round_trip(self, sample_message: str) -> None:
        """Test that a parsed message is reproduced from its JSON."""
        doc = parse_markdown(sample_message + "\n```task\ntitle: Follow up\nblock: 9\n```\n[LOCALGRAPH:12]")

        assert json_to_ast(ast_to_json(doc)) == doc


@pytest.mark.unit
class TestDictToAst:
    """Tests for dictionary to node conversion."""

    def test_minimal_nodes(self) -> None:
        """Test defaults for optional fields."""
        assert dict_to_ast({"type": "hr"}) == ThematicBreak()
        assert dict_to_ast({"type": "paragraph"}) == Paragraph()
        assert dict_to_ast({"type": "image", "src": "a.png"}).alt == ""

    def test_not_a_dict(self) -> None:
        """Test that non-dict data is rejected."""
        with pytest.raises(ValueError, match="Expected a dict"):
            dict_to_ast(["paragraph"])  # type: ignore[arg-type]

    def test_missing_type(self) -> None:
        """Test that data without type is rejected."""
        with pytest.raises(ValueError, match="missing the 'type'"):
            dict_to_ast({"children": []})

    def test_unknown_type(self) -> None:
        """Test that unknown type names are rejected."""
        with pytest.raises(ValueError, match="Unknown node type"):
            dict_to_ast({"type": "footnote"})

    def test_missing_required_field(self) -> None:
        """Test that required fields are enforced."""
        with pytest.raises(ValueError, match="blockId"):
            dict_to_ast({"type": "localgraph"})
