#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/ast/nodes.py
"""AST node classes for chat document representation.

This module defines the closed set of node variants produced by the chat
Markdown parser. Each node represents a structural or inline element of a
model-generated chat message; a renderer walks the tree and draws it.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Block-level nodes represent structural document elements:
    - Document (root wrapper)
    - Paragraph, Heading, List, ListItem, Checklist, ChecklistItem
    - BlockQuote, CodeBlock, Table, ThematicBreak

Extension block nodes are decoded from language-tagged fences:
    - Timeline, TimelineItem
    - Compare, CompareItem
    - Gallery, GalleryImage
    - LocalGraph
    - TaskCard, TaskCardData

Inline nodes represent text formatting:
    - Text, Strong, Emphasis, Code
    - Link, Image, LineBreak

Every node class carries a ``node_type`` class constant holding the wire
name used by the renderer (``"paragraph"``, ``"bold"``, ``"hr"``, ...).

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from chatmark.constants import DEFAULT_TASK_STATUS, Alignment, TaskPriority, TaskStatus


class Node(ABC):
    """Base class for all AST nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal, serialization and rendering.

    """

    node_type: ClassVar[str]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing the ordered block list.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in document order

    """

    node_type: ClassVar[str] = "document"

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content.

    Consecutive source lines stay in one paragraph and are separated by
    LineBreak nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Inline nodes representing paragraph content

    """

    node_type: ClassVar[str] = "paragraph"

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class Heading(Node):
    """Heading node with level and inline content.

    Parameters
    ----------
    level : int
        Heading level (1-6)
    children : list of Node, default = empty list
        Inline nodes representing heading text

    """

    node_type: ClassVar[str] = "heading"

    level: int
    children: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate heading level."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self)


@dataclass
class ListItem(Node):
    """List item with inline content and optional nested items.

    Nesting is indentation based; a nested list is stored directly as the
    item's ``children``.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes of the item text
    children : list of ListItem or None, default = None
        Items of the nested list, if any

    """

    node_type: ClassVar[str] = "list_item"

    content: list[Node] = field(default_factory=list)
    children: Optional[list[ListItem]] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool, default = False
        Whether the list is numbered
    items : list of ListItem, default = empty list
        Top-level items

    """

    node_type: ClassVar[str] = "list"

    ordered: bool = False
    items: list[ListItem] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class ChecklistItem(Node):
    """Single checkbox entry of a checklist.

    Parameters
    ----------
    checked : bool, default = False
        Whether the box is ticked (``[x]``)
    children : list of Node, default = empty list
        Inline nodes of the text after the box

    """

    node_type: ClassVar[str] = "checklist_item"

    checked: bool = False
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this checklist item."""
        return visitor.visit_checklist_item(self)


@dataclass
class Checklist(Node):
    """Checklist built from ``- [ ]`` / ``- [x]`` lines.

    Kept separate from List so that a renderer can draw checkboxes.

    Parameters
    ----------
    items : list of ChecklistItem, default = empty list
        Checkbox entries in order

    """

    node_type: ClassVar[str] = "checklist"

    items: list[ChecklistItem] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this checklist."""
        return visitor.visit_checklist(self)


@dataclass
class BlockQuote(Node):
    """Block quote containing a complete nested sub-document.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes parsed from the dedented quote text

    """

    node_type: ClassVar[str] = "quote"

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class CodeBlock(Node):
    """Code block; also the fallback for any unrecognized fence.

    Parameters
    ----------
    content : str
        Verbatim fence content
    language : str or None, default = None
        Fence language tag as written

    """

    node_type: ClassVar[str] = "codeblock"

    content: str
    language: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class Table(Node):
    """Pipe table with header cells, column alignments and data rows.

    Every row holds exactly ``len(headers)`` cells; each cell is a list of
    inline nodes.

    Parameters
    ----------
    headers : list of list of Node
        Header cells
    alignments : list
        Column alignments ('left', 'center', 'right', or None)
    rows : list of list of list of Node
        Data rows

    """

    node_type: ClassVar[str] = "table"

    headers: list[list[Node]] = field(default_factory=list)
    alignments: list[Alignment | None] = field(default_factory=list)
    rows: list[list[list[Node]]] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule); carries no payload."""

    node_type: ClassVar[str] = "hr"

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


# ============================================================================
# Extension Block Nodes
# ============================================================================


@dataclass
class TimelineItem(Node):
    """One event of a timeline.

    Parameters
    ----------
    date : str
        Date/time column, kept verbatim
    title : list of Node
        Inline-parsed title (commonly a block link)
    description : list of Node or None, default = None
        Inline-parsed description
    category : str or None, default = None
        Free-form category label

    """

    node_type: ClassVar[str] = "timeline_item"

    date: str
    title: list[Node] = field(default_factory=list)
    description: Optional[list[Node]] = None
    category: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this timeline item."""
        return visitor.visit_timeline_item(self)


@dataclass
class Timeline(Node):
    """Timeline decoded from a ```timeline fence."""

    node_type: ClassVar[str] = "timeline"

    items: list[TimelineItem] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this timeline."""
        return visitor.visit_timeline(self)


@dataclass
class CompareItem(Node):
    """One row of a side-by-side comparison."""

    node_type: ClassVar[str] = "compare_item"

    left: list[Node] = field(default_factory=list)
    right: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this comparison row."""
        return visitor.visit_compare_item(self)


@dataclass
class Compare(Node):
    """Side-by-side comparison decoded from a ```compare fence.

    Parameters
    ----------
    left_title : list of Node
        Inline-parsed left column title
    right_title : list of Node
        Inline-parsed right column title
    items : list of CompareItem
        Comparison rows, at least one

    """

    node_type: ClassVar[str] = "compare"

    left_title: list[Node] = field(default_factory=list)
    right_title: list[Node] = field(default_factory=list)
    items: list[CompareItem] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this comparison."""
        return visitor.visit_compare(self)


@dataclass
class GalleryImage(Node):
    """Image entry of a gallery."""

    node_type: ClassVar[str] = "gallery_image"

    src: str
    alt: str = ""
    caption: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this gallery image."""
        return visitor.visit_gallery_image(self)


@dataclass
class Gallery(Node):
    """Image gallery.

    Produced from a ```gallery / ```images fence, or by merging runs of
    single-image paragraphs.

    """

    node_type: ClassVar[str] = "gallery"

    images: list[GalleryImage] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this gallery."""
        return visitor.visit_gallery(self)


@dataclass
class LocalGraph(Node):
    """Request to render the link graph around a block.

    Parameters
    ----------
    block_id : int
        Positive id of the block at the center of the graph

    """

    node_type: ClassVar[str] = "localgraph"

    block_id: int

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link graph."""
        return visitor.visit_local_graph(self)


@dataclass
class TaskCardData:
    """Flat task record decoded from a ```task fence.

    Parameters
    ----------
    title : str
        Task title; the only required field
    status : str, default = "todo"
        One of todo, done, in-progress, cancelled
    priority : str or None, default = None
        One of high, medium, low
    due_date : str or None, default = None
        Due date, kept verbatim
    tags : list of str, default = empty list
        Tags as written (``#`` prefixes preserved)
    block_id : int or None, default = None
        Referenced block id, if any

    """

    title: str
    status: TaskStatus = DEFAULT_TASK_STATUS
    priority: Optional[TaskPriority] = None
    due_date: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    block_id: Optional[int] = None


@dataclass
class TaskCard(Node):
    """Task card block wrapping a TaskCardData record."""

    node_type: ClassVar[str] = "taskcard"

    task: TaskCardData

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this task card."""
        return visitor.visit_task_card(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text run."""

    node_type: ClassVar[str] = "text"

    content: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text node."""
        return visitor.visit_text(self)


@dataclass
class Strong(Node):
    """Bold text (``**...**``)."""

    node_type: ClassVar[str] = "bold"

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong node."""
        return visitor.visit_strong(self)


@dataclass
class Emphasis(Node):
    """Italic text (``*...*``)."""

    node_type: ClassVar[str] = "italic"

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis node."""
        return visitor.visit_emphasis(self)


@dataclass
class Code(Node):
    """Inline code span; its content is never parsed further."""

    node_type: ClassVar[str] = "code"

    content: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink, either written as ``[label](url)`` or synthesized from a reference.

    Parameters
    ----------
    url : str
        Link target; block references use ``<scheme>:<id>``
    children : list of Node, default = empty list
        Inline label content; never contains another Link

    """

    node_type: ClassVar[str] = "link"

    url: str
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Inline image (``![alt](src)``)."""

    node_type: ClassVar[str] = "image"

    src: str
    alt: str = ""

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Hard line break between the source lines of a paragraph."""

    node_type: ClassVar[str] = "break"

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


BLOCK_NODE_TYPES: tuple[type[Node], ...] = (
    Paragraph,
    Heading,
    List,
    Checklist,
    BlockQuote,
    CodeBlock,
    Table,
    ThematicBreak,
    Timeline,
    Compare,
    Gallery,
    LocalGraph,
    TaskCard,
)

INLINE_NODE_TYPES: tuple[type[Node], ...] = (Text, Strong, Emphasis, Code, Link, Image, LineBreak)


def is_block_node(node: Node) -> bool:
    """Return True if ``node`` is one of the top-level block variants."""
    return isinstance(node, BLOCK_NODE_TYPES)


def is_inline_node(node: Node) -> bool:
    """Return True if ``node`` is one of the inline variants."""
    return isinstance(node, INLINE_NODE_TYPES)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes from a node.

    This is a helper for visitor implementations that need to traverse the
    AST uniformly. Inline content held in nested lists (table cells,
    timeline titles, comparison sides) is flattened in reading order.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        List of child nodes (empty list if node has no children)

    Examples
    --------
    >>> heading = Heading(level=1, children=[Text("Hello"), Strong(children=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, (Document, Paragraph, Heading, BlockQuote, ChecklistItem, Strong, Emphasis, Link)):
        return list(node.children)

    if isinstance(node, ListItem):
        children: list[Node] = list(node.content)
        if node.children:
            children.extend(node.children)
        return children

    if isinstance(node, (List, Checklist, Timeline, Compare)):
        if isinstance(node, Compare):
            return [*node.left_title, *node.right_title, *node.items]
        return list(node.items)

    if isinstance(node, Table):
        cells: list[Node] = []
        for header in node.headers:
            cells.extend(header)
        for row in node.rows:
            for cell in row:
                cells.extend(cell)
        return cells

    if isinstance(node, TimelineItem):
        return [*node.title, *(node.description or [])]

    if isinstance(node, CompareItem):
        return [*node.left, *node.right]

    if isinstance(node, Gallery):
        return list(node.images)

    # Leaf nodes (no children)
    return []
