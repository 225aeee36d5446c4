"""Output rendering for the chatmark CLI."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/chatmark/cli/output.py
from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from chatmark.ast import (
    BlockQuote,
    Checklist,
    ChecklistItem,
    Code,
    CodeBlock,
    Compare,
    Document,
    GalleryImage,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    LocalGraph,
    Node,
    Table,
    TaskCard,
    Text,
    Timeline,
    TimelineItem,
    ast_to_json,
    extract_text,
    get_node_children,
)

_LABEL_WIDTH = 60


def should_use_rich_output(args: argparse.Namespace, stream: Optional[TextIO] = None) -> bool:
    """Determine if rich output should be used based on TTY and args.

    Rich output is used when ``--rich`` is set and either ``--force-rich``
    is set or the output stream is a TTY.

    """
    if not args.rich:
        return False
    if getattr(args, "force_rich", False):
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def _shorten(text: str) -> str:
    text = text.replace("\n", "\\n")
    if len(text) > _LABEL_WIDTH:
        return text[: _LABEL_WIDTH - 3] + "..."
    return text


def _describe_heading(node: Heading) -> str:
    return f"heading level={node.level}"


def _describe_list(node: List) -> str:
    return f"list ordered={str(node.ordered).lower()} items={len(node.items)}"


def _describe_checklist_item(node: ChecklistItem) -> str:
    return f"checklist_item checked={str(node.checked).lower()}"


def _describe_code_block(node: CodeBlock) -> str:
    language = f" language={node.language}" if node.language else ""
    return f"codeblock{language} {_shorten(node.content)!r}"


def _describe_table(node: Table) -> str:
    return f"table columns={len(node.headers)} rows={len(node.rows)}"


def _describe_timeline_item(node: TimelineItem) -> str:
    category = f" category={node.category}" if node.category else ""
    return f"timeline_item date={node.date}{category}"


def _describe_gallery_image(node: GalleryImage) -> str:
    caption = f" caption={node.caption!r}" if node.caption else ""
    return f"gallery_image src={node.src} alt={node.alt!r}{caption}"


def _describe_local_graph(node: LocalGraph) -> str:
    return f"localgraph blockId={node.block_id}"


def _describe_task_card(node: TaskCard) -> str:
    task = node.task
    parts = [f"taskcard title={task.title!r}", f"status={task.status}"]
    if task.priority:
        parts.append(f"priority={task.priority}")
    if task.due_date:
        parts.append(f"due={task.due_date}")
    if task.tags:
        parts.append(f"tags={','.join(task.tags)}")
    if task.block_id is not None:
        parts.append(f"blockId={task.block_id}")
    return " ".join(parts)


def _describe_text(node: Text) -> str:
    return f"text {_shorten(node.content)!r}"


def _describe_code(node: Code) -> str:
    return f"code {_shorten(node.content)!r}"


def _describe_link(node: Link) -> str:
    return f"link url={node.url}"


def _describe_image(node: Image) -> str:
    return f"image src={node.src} alt={node.alt!r}"


_DESCRIBE_DISPATCH: dict[type, Callable[..., str]] = {
    Heading: _describe_heading,
    List: _describe_list,
    ChecklistItem: _describe_checklist_item,
    CodeBlock: _describe_code_block,
    Table: _describe_table,
    TimelineItem: _describe_timeline_item,
    GalleryImage: _describe_gallery_image,
    LocalGraph: _describe_local_graph,
    TaskCard: _describe_task_card,
    Text: _describe_text,
    Code: _describe_code,
    Link: _describe_link,
    Image: _describe_image,
}


def describe_node(node: Node) -> str:
    """Return a one-line description of ``node`` for tree output."""
    describe = _DESCRIBE_DISPATCH.get(type(node))
    if describe is not None:
        return describe(node)
    return node.node_type


def render_tree_text(document: Document, indent: str = "  ") -> str:
    """Render the node tree as an indented plain-text outline."""
    lines: list[str] = []

    def visit(node: Node, depth: int) -> None:
        lines.append(f"{indent * depth}{describe_node(node)}")
        for child in get_node_children(node):
            visit(child, depth + 1)

    visit(document, 0)
    return "\n".join(lines)


def build_rich_tree(document: Document) -> Tree:
    """Build a ``rich.tree.Tree`` mirroring the node tree."""
    root = Tree(f"[bold]{escape(describe_node(document))}[/bold]")

    def visit(node: Node, branch: Tree) -> None:
        for child in get_node_children(node):
            label = escape(describe_node(child))
            child_branch = branch.add(f"[cyan]{label}[/cyan]" if child.node_type in ("text", "code") else label)
            visit(child, child_branch)

    visit(document, root)
    return root


def _list_item_lines(item: ListItem, marker: str, depth: int) -> list[str]:
    lines = [f"{'  ' * depth}{marker} {extract_text(item.content)}"]
    for child in item.children or []:
        lines.extend(_list_item_lines(child, marker, depth + 1))
    return lines


def _block_text(node: Node) -> str:
    if isinstance(node, CodeBlock):
        return node.content
    if isinstance(node, List):
        lines: list[str] = []
        for index, item in enumerate(node.items, start=1):
            lines.extend(_list_item_lines(item, f"{index}." if node.ordered else "-", 0))
        return "\n".join(lines)
    if isinstance(node, Checklist):
        return "\n".join(f"[{'x' if item.checked else ' '}] {extract_text(item.children)}" for item in node.items)
    if isinstance(node, BlockQuote):
        inner = render_plain_text(Document(children=node.children))
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
    if isinstance(node, Table):
        rows = [node.headers, *node.rows]
        return "\n".join(" | ".join(extract_text(cell) for cell in row) for row in rows)
    if isinstance(node, Timeline):
        return "\n".join(
            f"{item.date}: {extract_text(item.title)}"
            + (f" ({extract_text(item.description)})" if item.description else "")
            for item in node.items
        )
    if isinstance(node, Compare):
        rows = [(node.left_title, node.right_title), *((item.left, item.right) for item in node.items)]
        return "\n".join(f"{extract_text(left)} | {extract_text(right)}" for left, right in rows)
    if isinstance(node, TaskCard):
        return f"[{node.task.status}] {node.task.title}"
    if isinstance(node, LocalGraph):
        return ""
    return extract_text(node)


def render_plain_text(document: Document) -> str:
    """Flatten a document to plain text, one paragraph per block."""
    parts = [_block_text(block) for block in document.children]
    return "\n\n".join(part for part in parts if part)


def write_document(document: Document, args: argparse.Namespace, stream: Optional[TextIO] = None) -> None:
    """Write ``document`` to ``stream`` in the format selected by ``args``."""
    target = stream or sys.stdout

    if args.output_format == "json":
        target.write(ast_to_json(document, indent=args.indent) + "\n")
    elif args.output_format == "text":
        target.write(render_plain_text(document) + "\n")
    elif should_use_rich_output(args, target):
        Console(file=target, force_terminal=bool(getattr(args, "force_rich", False))).print(build_rich_tree(document))
    else:
        target.write(render_tree_text(document) + "\n")


__all__ = [
    "build_rich_tree",
    "describe_node",
    "render_plain_text",
    "render_tree_text",
    "should_use_rich_output",
    "write_document",
]
