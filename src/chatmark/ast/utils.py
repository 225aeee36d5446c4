#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/ast/utils.py
"""Utility functions for working with AST nodes.

Functions
---------
extract_text : Extract plain text from a node or list of nodes
walk : Iterate over every node of a tree, depth first

Examples
--------
Flatten a paragraph:

    >>> from chatmark.ast import Paragraph, Strong, Text
    >>> from chatmark.ast.utils import extract_text
    >>>
    >>> para = Paragraph(children=[Text("Hello "), Strong(children=[Text("world")])])
    >>> extract_text(para)
    'Hello world'

"""

from __future__ import annotations

from typing import Iterator, Union

from chatmark.ast.nodes import Code, GalleryImage, Image, LineBreak, Node, Text, get_node_children


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "") -> str:
    r"""Extract plain text from a node or list of nodes.

    Text content is concatenated in reading order. LineBreak nodes become
    ``"\n"``, code spans contribute their literal content and images their
    alt text.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = ""
        String placed between sibling parts. The default keeps inline text
        exactly as written; use ``" "`` to separate block-level content.

    Returns
    -------
    str
        Concatenated text content

    """
    if isinstance(node_or_nodes, list):
        parts = [extract_text(node, joiner=joiner) for node in node_or_nodes]
        return joiner.join(part for part in parts if part)

    node = node_or_nodes
    if isinstance(node, (Text, Code)):
        return node.content
    if isinstance(node, LineBreak):
        return "\n"
    if isinstance(node, (Image, GalleryImage)):
        return node.alt

    parts = [extract_text(child, joiner=joiner) for child in get_node_children(node)]
    return joiner.join(part for part in parts if part)


def walk(node_or_nodes: Union[Node, list[Node]]) -> Iterator[Node]:
    """Yield every node of a tree in depth-first, pre-order sequence."""
    stack: list[Node] = list(reversed(node_or_nodes)) if isinstance(node_or_nodes, list) else [node_or_nodes]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(get_node_children(node)))


__all__ = [
    "extract_text",
    "walk",
]
