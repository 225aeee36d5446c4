#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/ast/serialization.py
"""JSON serialization and deserialization for AST nodes.

This module converts AST structures to and from the wire format consumed by
chat renderers: every block and inline node becomes ``{"type": <wire type>,
...}``. Sub-records that only exist inside a parent (list items, checklist
items, timeline and comparison rows, gallery images, task data) are encoded
without a ``type`` key, exactly as the renderer reads them.

Examples
--------
Serialize AST to JSON:

    >>> from chatmark.ast import Document, Heading, Text
    >>> from chatmark.ast.serialization import ast_to_json
    >>>
    >>> doc = Document(children=[Heading(level=1, children=[Text(content="Title")])])
    >>> print(ast_to_json(doc))
    {"type": "document", "children": [{"type": "heading", "level": 1, "children": [{"type": "text", "content": "Title"}]}]}

Deserialize JSON back to AST:

    >>> from chatmark.ast.serialization import json_to_ast
    >>> doc = json_to_ast(json_str)
    >>> doc.children[0].level
    1

"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, cast

from chatmark.ast.nodes import (
    BlockQuote,
    Checklist,
    ChecklistItem,
    Code,
    CodeBlock,
    Compare,
    CompareItem,
    Document,
    Emphasis,
    Gallery,
    GalleryImage,
    Heading,
    Image,
    LineBreak,
    Link,
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
)

# =============================================================================
# Serialization
# =============================================================================


def _serialize_nodes(nodes: list[Node]) -> list[dict[str, Any]]:
    return [ast_to_dict(node) for node in nodes]


def _serialize_children_node(node: Any) -> dict[str, Any]:
    """Serialize a node whose only payload is a ``children`` list."""
    return {"type": node.node_type, "children": _serialize_nodes(node.children)}


def _serialize_text_content_node(node: Any) -> dict[str, Any]:
    """Serialize a node whose only payload is a ``content`` string."""
    return {"type": node.node_type, "content": node.content}


def _serialize_heading(node: Heading) -> dict[str, Any]:
    return {"type": node.node_type, "level": node.level, "children": _serialize_nodes(node.children)}


def _serialize_list_item(node: ListItem) -> dict[str, Any]:
    result: dict[str, Any] = {"content": _serialize_nodes(node.content)}
    if node.children is not None:
        result["children"] = [_serialize_list_item(child) for child in node.children]
    return result


def _serialize_list(node: List) -> dict[str, Any]:
    return {
        "type": node.node_type,
        "ordered": node.ordered,
        "items": [_serialize_list_item(item) for item in node.items],
    }


def _serialize_checklist_item(node: ChecklistItem) -> dict[str, Any]:
    return {"checked": node.checked, "children": _serialize_nodes(node.children)}


def _serialize_checklist(node: Checklist) -> dict[str, Any]:
    return {"type": node.node_type, "items": [_serialize_checklist_item(item) for item in node.items]}


def _serialize_code_block(node: CodeBlock) -> dict[str, Any]:
    result: dict[str, Any] = {"type": node.node_type, "content": node.content}
    if node.language is not None:
        result["language"] = node.language
    return result


def _serialize_table(node: Table) -> dict[str, Any]:
    return {
        "type": node.node_type,
        "headers": [_serialize_nodes(cell) for cell in node.headers],
        "alignments": list(node.alignments),
        "rows": [[_serialize_nodes(cell) for cell in row] for row in node.rows],
    }


def _serialize_thematic_break(node: ThematicBreak) -> dict[str, Any]:
    return {"type": node.node_type}


def _serialize_timeline_item(node: TimelineItem) -> dict[str, Any]:
    result: dict[str, Any] = {"date": node.date, "title": _serialize_nodes(node.title)}
    if node.description is not None:
        result["description"] = _serialize_nodes(node.description)
    if node.category is not None:
        result["category"] = node.category
    return result


def _serialize_timeline(node: Timeline) -> dict[str, Any]:
    return {"type": node.node_type, "items": [_serialize_timeline_item(item) for item in node.items]}


def _serialize_compare_item(node: CompareItem) -> dict[str, Any]:
    return {"left": _serialize_nodes(node.left), "right": _serialize_nodes(node.right)}


def _serialize_compare(node: Compare) -> dict[str, Any]:
    return {
        "type": node.node_type,
        "leftTitle": _serialize_nodes(node.left_title),
        "rightTitle": _serialize_nodes(node.right_title),
        "items": [_serialize_compare_item(item) for item in node.items],
    }


def _serialize_gallery_image(node: GalleryImage) -> dict[str, Any]:
    result: dict[str, Any] = {"src": node.src, "alt": node.alt}
    if node.caption is not None:
        result["caption"] = node.caption
    return result


def _serialize_gallery(node: Gallery) -> dict[str, Any]:
    return {"type": node.node_type, "images": [_serialize_gallery_image(image) for image in node.images]}


def _serialize_local_graph(node: LocalGraph) -> dict[str, Any]:
    return {"type": node.node_type, "blockId": node.block_id}


def _serialize_task_card(node: TaskCard) -> dict[str, Any]:
    task = node.task
    data: dict[str, Any] = {
        "title": task.title,
        "status": task.status,
        "priority": task.priority,
        "tags": list(task.tags),
    }
    if task.due_date is not None:
        data["dueDate"] = task.due_date
    if task.block_id is not None:
        data["blockId"] = task.block_id
    return {"type": node.node_type, "task": data}


def _serialize_link(node: Link) -> dict[str, Any]:
    return {"type": node.node_type, "url": node.url, "children": _serialize_nodes(node.children)}


def _serialize_image(node: Image) -> dict[str, Any]:
    return {"type": node.node_type, "src": node.src, "alt": node.alt}


def _serialize_line_break(node: LineBreak) -> dict[str, Any]:
    return {"type": node.node_type}


# Dispatch table mapping node types to their serialization functions
_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    Document: _serialize_children_node,
    Paragraph: _serialize_children_node,
    Heading: _serialize_heading,
    List: _serialize_list,
    ListItem: _serialize_list_item,
    Checklist: _serialize_checklist,
    ChecklistItem: _serialize_checklist_item,
    BlockQuote: _serialize_children_node,
    CodeBlock: _serialize_code_block,
    Table: _serialize_table,
    ThematicBreak: _serialize_thematic_break,
    Timeline: _serialize_timeline,
    TimelineItem: _serialize_timeline_item,
    Compare: _serialize_compare,
    CompareItem: _serialize_compare_item,
    Gallery: _serialize_gallery,
    GalleryImage: _serialize_gallery_image,
    LocalGraph: _serialize_local_graph,
    TaskCard: _serialize_task_card,
    Text: _serialize_text_content_node,
    Strong: _serialize_children_node,
    Emphasis: _serialize_children_node,
    Code: _serialize_text_content_node,
    Link: _serialize_link,
    Image: _serialize_image,
    LineBreak: _serialize_line_break,
}


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node to its wire-format dictionary.

    Parameters
    ----------
    node : Node
        The AST node to convert

    Returns
    -------
    dict
        Dictionary representation of the node

    Raises
    ------
    ValueError
        If the node type is unknown

    Examples
    --------
    >>> ast_to_dict(Text(content="Hello"))
    {'type': 'text', 'content': 'Hello'}

    """
    node_class = type(node)
    serializer = _SERIALIZATION_DISPATCH.get(node_class)
    if serializer:
        return serializer(node)

    raise ValueError(f"Unknown node type for serialization: {node_class.__name__}")


def ast_to_json(node: Node, indent: Optional[int] = None) -> str:
    """Serialize an AST node to a JSON string.

    Parameters
    ----------
    node : Node
        The AST node to serialize
    indent : int or None, default = None
        JSON indentation; None produces compact output

    Returns
    -------
    str
        JSON representation (non-ASCII characters are kept as-is)

    """
    return json.dumps(ast_to_dict(node), indent=indent, ensure_ascii=False)


# =============================================================================
# Deserialization
# =============================================================================


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required field '{key}' for node type '{data.get('type', '?')}'")
    return data[key]


def _deserialize_nodes(children_data: list[dict[str, Any]]) -> list[Node]:
    """Recursively deserialize a list of nodes."""
    return [dict_to_ast(child) for child in children_data]


def _deserialize_list_item(data: dict[str, Any]) -> ListItem:
    children_data = data.get("children")
    children = [_deserialize_list_item(child) for child in children_data] if children_data is not None else None
    return ListItem(content=_deserialize_nodes(data.get("content", [])), children=children)


def _deserialize_timeline_item(data: dict[str, Any]) -> TimelineItem:
    description = data.get("description")
    return TimelineItem(
        date=_require(data, "date"),
        title=_deserialize_nodes(data.get("title", [])),
        description=_deserialize_nodes(description) if description is not None else None,
        category=data.get("category"),
    )


def _deserialize_task_card(data: dict[str, Any]) -> TaskCard:
    task = _require(data, "task")
    return TaskCard(
        task=TaskCardData(
            title=_require(task, "title"),
            status=task.get("status", "todo"),
            priority=task.get("priority"),
            due_date=task.get("dueDate"),
            tags=list(task.get("tags", [])),
            block_id=task.get("blockId"),
        )
    )


_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any]], Node]] = {
    "document": lambda d: Document(children=_deserialize_nodes(d.get("children", []))),
    "paragraph": lambda d: Paragraph(children=_deserialize_nodes(d.get("children", []))),
    "heading": lambda d: Heading(level=_require(d, "level"), children=_deserialize_nodes(d.get("children", []))),
    "list": lambda d: List(
        ordered=bool(d.get("ordered", False)),
        items=[_deserialize_list_item(item) for item in d.get("items", [])],
    ),
    "checklist": lambda d: Checklist(
        items=[
            ChecklistItem(checked=bool(item.get("checked", False)), children=_deserialize_nodes(item.get("children", [])))
            for item in d.get("items", [])
        ]
    ),
    "quote": lambda d: BlockQuote(children=_deserialize_nodes(d.get("children", []))),
    "codeblock": lambda d: CodeBlock(content=_require(d, "content"), language=d.get("language")),
    "table": lambda d: Table(
        headers=[_deserialize_nodes(cell) for cell in d.get("headers", [])],
        alignments=list(d.get("alignments", [])),
        rows=[[_deserialize_nodes(cell) for cell in row] for row in d.get("rows", [])],
    ),
    "hr": lambda d: ThematicBreak(),
    "timeline": lambda d: Timeline(items=[_deserialize_timeline_item(item) for item in d.get("items", [])]),
    "compare": lambda d: Compare(
        left_title=_deserialize_nodes(d.get("leftTitle", [])),
        right_title=_deserialize_nodes(d.get("rightTitle", [])),
        items=[
            CompareItem(left=_deserialize_nodes(item.get("left", [])), right=_deserialize_nodes(item.get("right", [])))
            for item in d.get("items", [])
        ],
    ),
    "gallery": lambda d: Gallery(
        images=[
            GalleryImage(src=_require(image, "src"), alt=image.get("alt", ""), caption=image.get("caption"))
            for image in d.get("images", [])
        ]
    ),
    "localgraph": lambda d: LocalGraph(block_id=_require(d, "blockId")),
    "taskcard": _deserialize_task_card,
    "text": lambda d: Text(content=_require(d, "content")),
    "bold": lambda d: Strong(children=_deserialize_nodes(d.get("children", []))),
    "italic": lambda d: Emphasis(children=_deserialize_nodes(d.get("children", []))),
    "code": lambda d: Code(content=_require(d, "content")),
    "link": lambda d: Link(url=_require(d, "url"), children=_deserialize_nodes(d.get("children", []))),
    "image": lambda d: Image(src=_require(d, "src"), alt=d.get("alt", "")),
    "break": lambda d: LineBreak(),
}


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Convert a wire-format dictionary to an AST node.

    Parameters
    ----------
    data : dict
        Dictionary with a ``type`` key

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    ValueError
        If the type is missing or unknown, or a required field is absent

    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a dict for node data, got {type(data).__name__}")

    node_type = data.get("type")
    if node_type is None:
        raise ValueError("Node data is missing the 'type' field")

    deserializer = _DESERIALIZATION_DISPATCH.get(node_type)
    if deserializer is None:
        raise ValueError(f"Unknown node type: {node_type}")

    return deserializer(data)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string produced by ast_to_json."""
    return dict_to_ast(cast(dict[str, Any], json.loads(json_str)))


__all__ = [
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
