#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/ast/__init__.py
"""Abstract Syntax Tree (AST) module for chat document representation.

The parser turns model-generated Markdown into the node tree defined here;
renderers consume the tree (or its JSON wire format) to draw the message.

The module consists of several components:

- nodes: AST node classes representing document structure
- visitors: Visitor pattern base class for AST traversal
- transforms: Tree rebuilding and the text/gallery normalization passes
- serialization: Wire-format (JSON) serialization and deserialization
- utils: Text extraction and tree walking helpers

Examples
--------
    >>> from chatmark.ast import Document, Heading, Paragraph, Text
    >>> doc = Document(children=[
    ...     Heading(level=1, children=[Text(content="Title")]),
    ...     Paragraph(children=[Text(content="Hello world")])
    ... ])

"""

from __future__ import annotations

from chatmark.ast.nodes import (
    BLOCK_NODE_TYPES,
    INLINE_NODE_TYPES,
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
    get_node_children,
    is_block_node,
    is_inline_node,
)
from chatmark.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from chatmark.ast.transforms import (
    NodeTransformer,
    is_single_image_paragraph,
    merge_adjacent_text,
    merge_image_galleries,
)
from chatmark.ast.utils import extract_text, walk
from chatmark.ast.visitors import NodeVisitor

__all__ = [
    # Base
    "Node",
    "BLOCK_NODE_TYPES",
    "INLINE_NODE_TYPES",
    # Block nodes
    "Document",
    "Paragraph",
    "Heading",
    "List",
    "ListItem",
    "Checklist",
    "ChecklistItem",
    "BlockQuote",
    "CodeBlock",
    "Table",
    "ThematicBreak",
    # Extension blocks
    "Timeline",
    "TimelineItem",
    "Compare",
    "CompareItem",
    "Gallery",
    "GalleryImage",
    "LocalGraph",
    "TaskCard",
    "TaskCardData",
    # Inline nodes
    "Text",
    "Strong",
    "Emphasis",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    # Helpers
    "get_node_children",
    "is_block_node",
    "is_inline_node",
    "extract_text",
    "walk",
    # Visitors and transforms
    "NodeVisitor",
    "NodeTransformer",
    "merge_adjacent_text",
    "merge_image_galleries",
    "is_single_image_paragraph",
    # Serialization
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
