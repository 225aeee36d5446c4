#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

This module provides the visitor base class for traversing and processing
AST nodes. Visitors keep algorithms (serialization, normalization, tree
printing) separate from the node structure itself.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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
    Paragraph,
    Strong,
    Table,
    TaskCard,
    Text,
    ThematicBreak,
    Timeline,
    TimelineItem,
)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement one visit_* method per node type. Because the node
    set is closed, every method is abstract: a visitor that forgets a variant
    fails at instantiation instead of silently skipping content.

    Examples
    --------
    Visitor that counts links:

        >>> class LinkCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_link(self, node):
        ...         self.count += 1
        ...     # ... remaining visit_* methods recurse via get_node_children

    """

    # Block nodes

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_checklist(self, node: Checklist) -> Any:
        """Visit a Checklist node."""

    @abstractmethod
    def visit_checklist_item(self, node: ChecklistItem) -> Any:
        """Visit a ChecklistItem node."""

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""

    # Extension blocks

    @abstractmethod
    def visit_timeline(self, node: Timeline) -> Any:
        """Visit a Timeline node."""

    @abstractmethod
    def visit_timeline_item(self, node: TimelineItem) -> Any:
        """Visit a TimelineItem node."""

    @abstractmethod
    def visit_compare(self, node: Compare) -> Any:
        """Visit a Compare node."""

    @abstractmethod
    def visit_compare_item(self, node: CompareItem) -> Any:
        """Visit a CompareItem node."""

    @abstractmethod
    def visit_gallery(self, node: Gallery) -> Any:
        """Visit a Gallery node."""

    @abstractmethod
    def visit_gallery_image(self, node: GalleryImage) -> Any:
        """Visit a GalleryImage node."""

    @abstractmethod
    def visit_local_graph(self, node: LocalGraph) -> Any:
        """Visit a LocalGraph node."""

    @abstractmethod
    def visit_task_card(self, node: TaskCard) -> Any:
        """Visit a TaskCard node."""

    # Inline nodes

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit a Code node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""


__all__ = ["NodeVisitor"]
