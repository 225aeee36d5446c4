#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/ast/transforms.py
"""AST transformation utilities.

This module provides the NodeTransformer base class, which rebuilds a tree
node by node, and the normalization passes applied to every parse result:

- merge_adjacent_text: no two adjacent Text nodes survive anywhere in a tree
- merge_image_galleries: runs of two or more single-image paragraphs become
  one Gallery node

Examples
--------
Uppercase all text:

    >>> class UppercaseTransformer(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return Text(content=node.content.upper())
    >>>
    >>> new_doc = UppercaseTransformer().transform(doc)

"""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Optional

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
    Text,
    ThematicBreak,
    Timeline,
    TimelineItem,
)
from chatmark.ast.visitors import NodeVisitor

logger = logging.getLogger(__name__)


class NodeTransformer(NodeVisitor):
    """Base class for transforming AST nodes.

    Subclasses override visit_* methods that return modified nodes, or None
    to remove a node. Every inline list passes through
    ``_transform_inline`` so that list-level rewrites (merging, filtering)
    can be implemented in one place.

    """

    def transform(self, node: Node) -> Node | None:
        """Transform an AST node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node or None
            Transformed node or None to remove

        """
        return node.accept(self)

    def _transform_children(self, children: list[Node]) -> list[Node]:
        """Transform a list of block-level child nodes, dropping removed ones."""
        result = []
        for child in children:
            transformed = self.transform(child)
            if transformed is not None:
                result.append(transformed)
        return result

    def _transform_inline(self, nodes: list[Node]) -> list[Node]:
        """Transform a list of inline nodes."""
        return self._transform_children(nodes)

    def _transform_items(self, items: list) -> list:
        return [item for item in (self.transform(item) for item in items) if item is not None]

    def visit_document(self, node: Document) -> Document:
        """Transform a Document node."""
        return Document(children=self._transform_children(node.children))

    def visit_paragraph(self, node: Paragraph) -> Paragraph:
        """Transform a Paragraph node."""
        return Paragraph(children=self._transform_inline(node.children))

    def visit_heading(self, node: Heading) -> Heading:
        """Transform a Heading node."""
        return Heading(level=node.level, children=self._transform_inline(node.children))

    def visit_list(self, node: List) -> List:
        """Transform a List node."""
        return List(ordered=node.ordered, items=self._transform_items(node.items))

    def visit_list_item(self, node: ListItem) -> ListItem:
        """Transform a ListItem node, including its nested items."""
        children = self._transform_items(node.children) if node.children is not None else None
        return ListItem(content=self._transform_inline(node.content), children=children)

    def visit_checklist(self, node: Checklist) -> Checklist:
        """Transform a Checklist node."""
        return Checklist(items=self._transform_items(node.items))

    def visit_checklist_item(self, node: ChecklistItem) -> ChecklistItem:
        """Transform a ChecklistItem node."""
        return ChecklistItem(checked=node.checked, children=self._transform_inline(node.children))

    def visit_block_quote(self, node: BlockQuote) -> BlockQuote:
        """Transform a BlockQuote node."""
        return BlockQuote(children=self._transform_children(node.children))

    def visit_code_block(self, node: CodeBlock) -> CodeBlock:
        """Transform a CodeBlock node."""
        return CodeBlock(content=node.content, language=node.language)

    def visit_table(self, node: Table) -> Table:
        """Transform a Table node cell by cell."""
        return Table(
            headers=[self._transform_inline(cell) for cell in node.headers],
            alignments=list(node.alignments),
            rows=[[self._transform_inline(cell) for cell in row] for row in node.rows],
        )

    def visit_thematic_break(self, node: ThematicBreak) -> ThematicBreak:
        """Transform a ThematicBreak node."""
        return ThematicBreak()

    def visit_timeline(self, node: Timeline) -> Timeline:
        """Transform a Timeline node."""
        return Timeline(items=self._transform_items(node.items))

    def visit_timeline_item(self, node: TimelineItem) -> TimelineItem:
        """Transform a TimelineItem node."""
        description = self._transform_inline(node.description) if node.description is not None else None
        return TimelineItem(
            date=node.date,
            title=self._transform_inline(node.title),
            description=description,
            category=node.category,
        )

    def visit_compare(self, node: Compare) -> Compare:
        """Transform a Compare node."""
        return Compare(
            left_title=self._transform_inline(node.left_title),
            right_title=self._transform_inline(node.right_title),
            items=self._transform_items(node.items),
        )

    def visit_compare_item(self, node: CompareItem) -> CompareItem:
        """Transform a CompareItem node."""
        return CompareItem(left=self._transform_inline(node.left), right=self._transform_inline(node.right))

    def visit_gallery(self, node: Gallery) -> Gallery:
        """Transform a Gallery node."""
        return Gallery(images=self._transform_items(node.images))

    def visit_gallery_image(self, node: GalleryImage) -> GalleryImage:
        """Transform a GalleryImage node."""
        return replace(node)

    def visit_local_graph(self, node: LocalGraph) -> LocalGraph:
        """Transform a LocalGraph node."""
        return LocalGraph(block_id=node.block_id)

    def visit_task_card(self, node: TaskCard) -> TaskCard:
        """Transform a TaskCard node."""
        return TaskCard(task=copy.deepcopy(node.task))

    def visit_text(self, node: Text) -> Text:
        """Transform a Text node."""
        return Text(content=node.content)

    def visit_strong(self, node: Strong) -> Strong:
        """Transform a Strong node."""
        return Strong(children=self._transform_inline(node.children))

    def visit_emphasis(self, node: Emphasis) -> Emphasis:
        """Transform an Emphasis node."""
        return Emphasis(children=self._transform_inline(node.children))

    def visit_code(self, node: Code) -> Code:
        """Transform a Code node."""
        return Code(content=node.content)

    def visit_link(self, node: Link) -> Link:
        """Transform a Link node."""
        return Link(url=node.url, children=self._transform_inline(node.children))

    def visit_image(self, node: Image) -> Image:
        """Transform an Image node."""
        return Image(src=node.src, alt=node.alt)

    def visit_line_break(self, node: LineBreak) -> LineBreak:
        """Transform a LineBreak node."""
        return LineBreak()


class TextMergeTransformer(NodeTransformer):
    """Merge adjacent Text nodes and drop empty ones in every inline list."""

    def _transform_inline(self, nodes: list[Node]) -> list[Node]:
        merged: list[Node] = []
        for node in super()._transform_inline(nodes):
            if isinstance(node, Text):
                if not node.content:
                    continue
                previous = merged[-1] if merged else None
                if isinstance(previous, Text):
                    merged[-1] = Text(content=previous.content + node.content)
                    continue
            merged.append(node)
        return merged


def merge_adjacent_text(nodes: list[Node]) -> list[Node]:
    """Merge adjacent Text nodes throughout a list of block nodes.

    Parameters
    ----------
    nodes : list of Node
        Block-level nodes

    Returns
    -------
    list of Node
        New block nodes with every inline run merged

    """
    document = TextMergeTransformer().transform(Document(children=nodes))
    assert isinstance(document, Document)
    return document.children


def merge_inline_text(nodes: list[Node]) -> list[Node]:
    """Merge adjacent Text nodes in a single inline list (recursively)."""
    return TextMergeTransformer()._transform_inline(nodes)


def _single_image(node: Node) -> Optional[Image]:
    if not isinstance(node, Paragraph):
        return None

    image: Optional[Image] = None
    for child in node.children:
        if isinstance(child, LineBreak):
            continue
        if isinstance(child, Text) and not child.content.strip():
            continue
        if isinstance(child, Image) and image is None:
            image = child
            continue
        return None
    return image


def is_single_image_paragraph(node: Node) -> bool:
    """Return True for a paragraph whose only content is one image.

    Line breaks and whitespace-only text are ignored.

    """
    return _single_image(node) is not None


def merge_image_galleries(blocks: list[Node]) -> list[Node]:
    """Merge runs of two or more single-image paragraphs into galleries.

    A lone single-image paragraph is left untouched. Only the given list is
    inspected; nested quotes are not rewritten.

    Parameters
    ----------
    blocks : list of Node
        Top-level block nodes

    Returns
    -------
    list of Node
        Blocks with each qualifying run replaced by one Gallery

    """
    result: list[Node] = []
    run: list[Paragraph] = []

    def flush_run() -> None:
        if len(run) >= 2:
            images = []
            for paragraph in run:
                image = _single_image(paragraph)
                assert image is not None
                images.append(GalleryImage(src=image.src, alt=image.alt))
            logger.debug("Merged %d single-image paragraphs into a gallery", len(run))
            result.append(Gallery(images=images))
        else:
            result.extend(run)
        run.clear()

    for block in blocks:
        if isinstance(block, Paragraph) and is_single_image_paragraph(block):
            run.append(block)
            continue
        flush_run()
        result.append(block)
    flush_run()

    return result


__all__ = [
    "NodeTransformer",
    "TextMergeTransformer",
    "merge_adjacent_text",
    "merge_inline_text",
    "is_single_image_paragraph",
    "merge_image_galleries",
]
