#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/parsers/markdown.py
"""Chat Markdown to AST parser.

This module turns model-generated Markdown into the chatmark document tree.
It is a line-driven scanner: each line is dispatched to the first matching
block rule, inline text is handed to the ``InlineScanner`` and fenced blocks
are routed through the extension sub-parsers when they close.

Per-line dispatch order:

1. fence delimiter (opens or closes a fence)
2. any line inside a fence (kept verbatim)
3. blank line
4. thematic break
5. blockquote (collected and parsed recursively)
6. heading
7. pipe table
8. checkbox item
9. ordered / unordered list item
10. paragraph text

The parser never raises on malformed text: unclosed constructs are closed at
end of input and rejected extension fences render as code blocks. Every
call works on fresh local state, so a parser instance may be shared.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from chatmark.ast import (
    BlockQuote,
    Checklist,
    ChecklistItem,
    CodeBlock,
    Document,
    Heading,
    LineBreak,
    List,
    ListItem,
    LocalGraph,
    Node,
    Paragraph,
    Table,
    ThematicBreak,
)
from chatmark.ast.transforms import merge_adjacent_text, merge_image_galleries, merge_inline_text
from chatmark.constants import DIAGRAM_LANGUAGES, Alignment
from chatmark.options.markdown import ChatMarkdownOptions
from chatmark.parsers.base import BaseParser, ParserInput
from chatmark.parsers.extensions import parse_extension_block
from chatmark.parsers.inline import InlineScanner
from chatmark.parsers.references import extract_completion_marker, extract_diagram_block_id

logger = logging.getLogger(__name__)

FENCE_OPEN_PATTERN = re.compile(r"^\s*(`{3,})([^`]*)$")
FENCE_CLOSE_PATTERN = re.compile(r"^\s*(`{3,})")
THEMATIC_BREAK_PATTERN = re.compile(r"^\s*([-*_])(?:\s*\1){2,}\s*$")
BLOCKQUOTE_PATTERN = re.compile(r"^\s*>")
BLOCKQUOTE_MARKER_PATTERN = re.compile(r"^\s*> ?")
HEADING_PATTERN = re.compile(r"^\s*(#{1,6})\s+(.+?)\s*$")
HEADING_CLOSING_SEQUENCE_PATTERN = re.compile(r"\s+#+$")
TABLE_SEPARATOR_PATTERN = re.compile(r"^[\s|:-]+$")
CHECKBOX_PATTERN = re.compile(r"^\s*[-*+]\s+\[([ xX])\]\s*(.*)$")
ORDERED_ITEM_PATTERN = re.compile(r"^(\s*)\d+[.)]\s+(.*)$")
UNORDERED_ITEM_PATTERN = re.compile(r"^(\s*)[-*+]\s+(.*)$")


def _indent_width(whitespace: str) -> int:
    return len(whitespace.expandtabs(4))


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _split_table_row(line: str) -> list[str]:
    """Split a pipe table row into stripped cell strings.

    Escaped pipes (``\\|``) stay inside their cell.

    """
    trimmed = line.strip()
    if trimmed.startswith("|"):
        trimmed = trimmed[1:]
    if trimmed.endswith("|") and not trimmed.endswith("\\|"):
        trimmed = trimmed[:-1]

    cells: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(trimmed):
        char = trimmed[i]
        if char == "\\" and i + 1 < len(trimmed) and trimmed[i + 1] == "|":
            current.append("\\|")
            i += 2
            continue
        if char == "|":
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    cells.append("".join(current).strip())
    return cells


def _is_table_row(line: str) -> bool:
    trimmed = line.strip()
    return "|" in trimmed and not trimmed.startswith(">") and not trimmed.startswith("```")


def _is_table_separator(line: str) -> bool:
    trimmed = line.strip()
    return "|" in trimmed and "-" in trimmed and bool(TABLE_SEPARATOR_PATTERN.match(trimmed))


def _parse_alignment(cell: str) -> Optional[Alignment]:
    cell = cell.strip()
    starts, ends = cell.startswith(":"), cell.endswith(":")
    if starts and ends:
        return "center"
    if ends:
        return "right"
    if starts:
        return "left"
    return None


def _fit_row(cells: list, width: int, filler) -> list:
    """Pad or truncate ``cells`` to exactly ``width`` entries."""
    if len(cells) >= width:
        return cells[:width]
    return cells + [filler() for _ in range(width - len(cells))]


@dataclass
class _ListFrame:
    indent: int
    items: list[ListItem]


class _ListBuilder:
    """Accumulates list items with an explicit indentation stack.

    Each frame holds the indentation width of its items and the item list
    they are appended to. A deeper item pushes a frame whose list is the
    previous item's ``children``; a shallower item pops frames until one
    at or above its indentation remains.

    """

    def __init__(self, ordered: bool, indent: int):
        self.ordered = ordered
        self.root = List(ordered=ordered, items=[])
        self.stack: list[_ListFrame] = [_ListFrame(indent=indent, items=self.root.items)]

    @property
    def root_indent(self) -> int:
        return self.stack[0].indent

    def is_root_level(self, indent: int) -> bool:
        return indent <= self.root_indent

    def add_item(self, indent: int, content: list[Node]) -> None:
        top = self.stack[-1]
        if indent > top.indent and top.items:
            parent = top.items[-1]
            if parent.children is None:
                parent.children = []
            self.stack.append(_ListFrame(indent=indent, items=parent.children))
        else:
            while len(self.stack) > 1 and indent < self.stack[-1].indent:
                self.stack.pop()
        self.stack[-1].items.append(ListItem(content=content))


@dataclass
class _BlockState:
    """Mutable state of a single block scan; never shared between calls."""

    quote_depth: int = 0
    result: list[Node] = field(default_factory=list)
    paragraph_lines: list[str] = field(default_factory=list)
    list_builder: Optional[_ListBuilder] = None
    checklist_items: list[ChecklistItem] = field(default_factory=list)


class ChatMarkdownParser(BaseParser):
    """Convert chat Markdown to the chatmark AST.

    Parameters
    ----------
    options : ChatMarkdownOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic usage:

        >>> parser = ChatMarkdownParser()
        >>> doc = parser.parse("# Title\\n\\nSome **bold** text.")

    With options:

        >>> options = ChatMarkdownOptions(merge_image_galleries=False)
        >>> parser = ChatMarkdownParser(options)
        >>> doc = parser.parse(markdown_text)

    """

    def __init__(self, options: ChatMarkdownOptions | None = None):
        """Initialize the chat Markdown parser with options."""
        BaseParser._validate_options_type(options, ChatMarkdownOptions, "markdown")
        options = options or ChatMarkdownOptions()
        super().__init__(options)
        self.options: ChatMarkdownOptions = options
        self.inline_scanner = InlineScanner(options)

    def parse(self, input_data: ParserInput) -> Document:
        """Parse chat Markdown input into an AST Document.

        Parameters
        ----------
        input_data : str, bytes, Path or file-like
            Markdown text (or a source of it)

        Returns
        -------
        Document
            AST document node

        Raises
        ------
        ParsingError
            If the input object cannot be read as text; malformed Markdown
            never raises

        """
        text = _normalize_newlines(self._load_text_content(input_data))

        marker_block_id: Optional[int] = None
        if self.options.extract_completion_marker:
            text, marker_block_id = extract_completion_marker(text)

        children = self._parse_blocks(text.split("\n"), quote_depth=0)
        if marker_block_id is not None:
            children.append(LocalGraph(block_id=marker_block_id))

        children = merge_adjacent_text(children)
        if self.options.merge_image_galleries:
            children = merge_image_galleries(children)

        return Document(children=children)

    def _parse_blocks(self, lines: list[str], quote_depth: int) -> list[Node]:
        """Run the block scanner over ``lines`` and return block nodes."""
        state = _BlockState(quote_depth=quote_depth)
        i = 0

        while i < len(lines):
            line = lines[i]

            fence = FENCE_OPEN_PATTERN.match(line)
            if fence:
                i = self._consume_fence(lines, i, fence, state)
                continue

            if not line.strip():
                self._flush_all(state)
                i += 1
                continue

            if THEMATIC_BREAK_PATTERN.match(line):
                self._flush_all(state)
                state.result.append(ThematicBreak())
                i += 1
                continue

            new_i = self._try_parse_blockquote(lines, i, state)
            if new_i is not None:
                i = new_i
                continue

            if self._try_parse_heading(line, state):
                i += 1
                continue

            new_i = self._try_parse_table(lines, i, state)
            if new_i is not None:
                i = new_i
                continue

            if self._try_parse_checkbox(line, state):
                i += 1
                continue

            if self._try_parse_list_item(line, state):
                i += 1
                continue

            self._add_paragraph_line(line, state)
            i += 1

        self._flush_all(state)
        return state.result

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------

    def _flush_paragraph(self, state: _BlockState) -> None:
        if not state.paragraph_lines:
            return
        children: list[Node] = []
        for index, line in enumerate(state.paragraph_lines):
            if index > 0:
                children.append(LineBreak())
            children.extend(self.inline_scanner.scan(line.strip()))
        state.paragraph_lines = []
        state.result.append(Paragraph(children=merge_inline_text(children)))

    def _flush_list(self, state: _BlockState) -> None:
        if state.list_builder is None:
            return
        state.result.append(state.list_builder.root)
        state.list_builder = None

    def _flush_checklist(self, state: _BlockState) -> None:
        if not state.checklist_items:
            return
        state.result.append(Checklist(items=state.checklist_items))
        state.checklist_items = []

    def _flush_all(self, state: _BlockState) -> None:
        self._flush_paragraph(state)
        self._flush_list(state)
        self._flush_checklist(state)

    # ------------------------------------------------------------------
    # Fences
    # ------------------------------------------------------------------

    def _consume_fence(self, lines: list[str], start: int, opening: re.Match[str], state: _BlockState) -> int:
        """Collect a fenced block starting at ``start`` and emit its node.

        Returns
        -------
        int
            Index of the first line after the fence

        """
        self._flush_all(state)

        fence_length = len(opening.group(1))
        info = opening.group(2).strip()
        language = info.split()[0] if info else None

        content_lines: list[str] = []
        i = start + 1
        closed = False
        while i < len(lines):
            closing = FENCE_CLOSE_PATTERN.match(lines[i])
            if closing and len(closing.group(1)) >= fence_length:
                closed = True
                i += 1
                break
            content_lines.append(lines[i])
            i += 1

        if not closed:
            logger.debug("Unterminated %s fence closed at end of input", language or "code")

        state.result.append(self._build_fence_node(language, "\n".join(content_lines), closed))
        return i

    def _build_fence_node(self, language: Optional[str], content: str, closed: bool) -> Node:
        """Route fence content to an extension, a link graph or a code block."""
        if language is None:
            return CodeBlock(content=content)

        if closed and self.options.parse_extensions:
            node = parse_extension_block(language, content, self.inline_scanner)
            if node is not None:
                return node

        if self.options.intercept_diagrams and language.lower() in DIAGRAM_LANGUAGES:
            block_id = extract_diagram_block_id(content, self.options.block_link_scheme)
            if block_id is not None:
                logger.debug("Intercepted %s fence as link graph for block %d", language, block_id)
                return LocalGraph(block_id=block_id)

        return CodeBlock(content=content, language=language)

    # ------------------------------------------------------------------
    # Block rules
    # ------------------------------------------------------------------

    def _try_parse_blockquote(self, lines: list[str], start: int, state: _BlockState) -> Optional[int]:
        if not BLOCKQUOTE_PATTERN.match(lines[start]):
            return None
        if state.quote_depth >= self.options.max_quote_depth:
            logger.debug("Blockquote depth limit %d reached; keeping quote as text", self.options.max_quote_depth)
            return None

        self._flush_all(state)

        quote_lines: list[str] = []
        i = start
        while i < len(lines):
            line = lines[i]
            if BLOCKQUOTE_PATTERN.match(line):
                quote_lines.append(BLOCKQUOTE_MARKER_PATTERN.sub("", line, count=1))
            elif not line.strip():
                quote_lines.append("")
            else:
                break
            i += 1

        children = self._parse_blocks(quote_lines, quote_depth=state.quote_depth + 1)
        state.result.append(BlockQuote(children=children))
        return i

    def _try_parse_heading(self, line: str, state: _BlockState) -> bool:
        match = HEADING_PATTERN.match(line)
        if not match:
            return False

        self._flush_all(state)

        level = len(match.group(1))
        text = HEADING_CLOSING_SEQUENCE_PATTERN.sub("", match.group(2)).strip() or match.group(2)
        state.result.append(Heading(level=level, children=self.inline_scanner.scan(text)))
        return True

    def _try_parse_table(self, lines: list[str], start: int, state: _BlockState) -> Optional[int]:
        if not self.options.parse_tables:
            return None
        if start + 1 >= len(lines):
            return None
        if not _is_table_row(lines[start]) or not _is_table_separator(lines[start + 1]):
            return None

        self._flush_all(state)

        header_cells = _split_table_row(lines[start])
        width = len(header_cells)
        alignments = _fit_row([_parse_alignment(cell) for cell in _split_table_row(lines[start + 1])], width, lambda: None)

        rows: list[list[list[Node]]] = []
        i = start + 2
        while i < len(lines) and lines[i].strip() and _is_table_row(lines[i]) and not _is_table_separator(lines[i]):
            cells = [self.inline_scanner.scan(cell) for cell in _split_table_row(lines[i])]
            rows.append(_fit_row(cells, width, list))
            i += 1

        state.result.append(
            Table(
                headers=[self.inline_scanner.scan(cell) for cell in header_cells],
                alignments=alignments,
                rows=rows,
            )
        )
        return i

    def _try_parse_checkbox(self, line: str, state: _BlockState) -> bool:
        match = CHECKBOX_PATTERN.match(line)
        if not match:
            return False

        self._flush_paragraph(state)
        self._flush_list(state)
        state.checklist_items.append(
            ChecklistItem(checked=match.group(1).lower() == "x", children=self.inline_scanner.scan(match.group(2)))
        )
        return True

    def _try_parse_list_item(self, line: str, state: _BlockState) -> bool:
        ordered = True
        match = ORDERED_ITEM_PATTERN.match(line)
        if not match:
            ordered = False
            match = UNORDERED_ITEM_PATTERN.match(line)
        if not match:
            return False

        indent = _indent_width(match.group(1))
        content = self.inline_scanner.scan(match.group(2).strip())

        self._flush_paragraph(state)
        self._flush_checklist(state)

        builder = state.list_builder
        if builder is not None and builder.ordered != ordered and builder.is_root_level(indent):
            self._flush_list(state)
            builder = None

        if builder is None:
            state.list_builder = _ListBuilder(ordered=ordered, indent=indent)
            state.list_builder.add_item(indent, content)
        else:
            builder.add_item(indent, content)
        return True

    def _add_paragraph_line(self, line: str, state: _BlockState) -> None:
        self._flush_list(state)
        self._flush_checklist(state)
        state.paragraph_lines.append(line)


def parse_markdown(text: str, options: ChatMarkdownOptions | None = None) -> Document:
    """Parse chat Markdown text into a Document.

    Parameters
    ----------
    text : str
        Markdown text; ``\\r\\n`` line endings are normalized
    options : ChatMarkdownOptions or None, default None
        Parser options

    Returns
    -------
    Document
        Root node whose ``children`` are the block nodes

    Examples
    --------
    >>> doc = parse_markdown("# Hi\\n\\nHello **world**")
    >>> [child.node_type for child in doc.children]
    ['heading', 'paragraph']

    """
    return ChatMarkdownParser(options).parse(text)


__all__ = ["ChatMarkdownParser", "parse_markdown"]
