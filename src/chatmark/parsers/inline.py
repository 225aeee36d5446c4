#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/parsers/inline.py
"""Inline scanner for chat Markdown.

The scanner walks a line of text left to right with manual lookahead. At
each position it tries, in order: a backslash escape, a code span, an image,
a link, bold (``**``), italic (``*``) and, outside link labels, the block
reference heuristics. Characters that start nothing are collected in a text
buffer; an opening delimiter that is never closed is emitted as literal text
and scanning continues after it.

Nested labels (link text, emphasis) are scanned recursively up to
``max_inline_depth`` levels; beyond that the span is kept as plain text.

"""

from __future__ import annotations

import logging
from typing import Optional

from chatmark.ast import Code, Emphasis, Image, Link, Node, Strong, Text
from chatmark.ast.transforms import merge_inline_text
from chatmark.constants import ESCAPABLE_CHARS
from chatmark.options.markdown import ChatMarkdownOptions
from chatmark.parsers.references import ReferencePattern, build_reference_patterns, match_reference

logger = logging.getLogger(__name__)

ScanResult = Optional[tuple[Node, int]]


def _find_closing_bracket(text: str, open_pos: int) -> int:
    """Return the index of the ``]`` matching the ``[`` at ``open_pos``, or -1."""
    depth = 0
    i = open_pos
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _find_closing_paren(text: str, open_pos: int) -> int:
    """Return the index of the ``)`` balancing the ``(`` at ``open_pos``, or -1."""
    depth = 0
    i = open_pos
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        elif char == "\n":
            return -1
        i += 1
    return -1


class _DelimiterIndex:
    """Closing ``]`` and ``)`` positions for one scanned text.

    Both tables are filled in a single left-to-right pass, so looking up a
    partner is constant time however many brackets stay unclosed. Openers
    that never close map to -1. An opener absent from a table was hidden by
    a backslash in this pass and is resolved by a direct search instead.

    """

    def __init__(self, text: str):
        self.text = text
        self.brackets: dict[int, int] = {}
        self.parens: dict[int, int] = {}

        open_brackets: list[int] = []
        open_parens: list[int] = []
        i = 0
        while i < len(text):
            char = text[i]
            if char == "\\":
                i += 2
                continue
            if char == "[":
                open_brackets.append(i)
            elif char == "]":
                if open_brackets:
                    self.brackets[open_brackets.pop()] = i
            elif char == "(":
                open_parens.append(i)
            elif char == ")":
                if open_parens:
                    self.parens[open_parens.pop()] = i
            elif char == "\n":
                # Link destinations never span lines
                self.parens.update(dict.fromkeys(open_parens, -1))
                open_parens.clear()
            i += 1

        self.brackets.update(dict.fromkeys(open_brackets, -1))
        self.parens.update(dict.fromkeys(open_parens, -1))

    def closing_bracket(self, open_pos: int) -> int:
        if open_pos in self.brackets:
            return self.brackets[open_pos]
        return _find_closing_bracket(self.text, open_pos)

    def closing_paren(self, open_pos: int) -> int:
        if open_pos in self.parens:
            return self.parens[open_pos]
        return _find_closing_paren(self.text, open_pos)


def _has_unpaired_star(text: str) -> bool:
    return text.replace("**", "").count("*") % 2 == 1


def _clean_destination(raw: str) -> str:
    """Strip whitespace, angle brackets and an optional quoted title from a link target."""
    destination = raw.strip()
    if destination.startswith("<") and destination.endswith(">"):
        return destination[1:-1].strip()
    for quote in ('"', "'"):
        title_start = destination.find(" " + quote)
        if title_start != -1 and destination.endswith(quote):
            return destination[:title_start].strip()
    return destination


def _match_bracketed_target(index: _DelimiterIndex, open_pos: int) -> Optional[tuple[str, str, int]]:
    """Match ``[label](target)`` starting at ``open_pos``.

    Returns
    -------
    tuple of (str, str, int) or None
        Label, cleaned target and the index just past the closing paren

    """
    text = index.text
    close_bracket = index.closing_bracket(open_pos)
    if close_bracket == -1 or close_bracket + 1 >= len(text) or text[close_bracket + 1] != "(":
        return None
    close_paren = index.closing_paren(close_bracket + 1)
    if close_paren == -1:
        return None
    label = text[open_pos + 1 : close_bracket]
    target = _clean_destination(text[close_bracket + 2 : close_paren])
    return label, target, close_paren + 1


class InlineScanner:
    """Turn a line of text into inline nodes.

    Parameters
    ----------
    options : ChatMarkdownOptions or None, default None
        Parser options; defaults are used when None

    Examples
    --------
    >>> InlineScanner().scan("Hello **world**")
    [Text(content='Hello '), Strong(children=[Text(content='world')])]

    """

    def __init__(self, options: ChatMarkdownOptions | None = None):
        self.options = options or ChatMarkdownOptions()
        self.reference_patterns: tuple[ReferencePattern, ...] = (
            build_reference_patterns(self.options) if self.options.parse_reference_heuristics else ()
        )

    def scan(self, text: str) -> list[Node]:
        """Scan ``text`` and return merged inline nodes."""
        if not text:
            return []
        return merge_inline_text(self._scan(text, depth=0, in_link=False))

    def _scan(self, text: str, depth: int, in_link: bool) -> list[Node]:
        if not text:
            return []
        if depth >= self.options.max_inline_depth:
            logger.debug("Inline depth limit %d reached; keeping span as text", self.options.max_inline_depth)
            return [Text(content=text)]

        nodes: list[Node] = []
        buffer: list[str] = []
        index = _DelimiterIndex(text)

        def flush_buffer() -> None:
            if buffer:
                nodes.append(Text(content="".join(buffer)))
                buffer.clear()

        i = 0
        length = len(text)
        while i < length:
            char = text[i]

            if char == "\\" and i + 1 < length and text[i + 1] in ESCAPABLE_CHARS:
                buffer.append(text[i + 1])
                i += 2
                continue

            if char == "`":
                result, consumed = self._try_code_span(text, i)
                if result is None:
                    buffer.append(text[i:consumed])
                    i = consumed
                    continue
                flush_buffer()
                nodes.append(result)
                i = consumed
                continue

            if char == "!" and text.startswith("![", i):
                image = self._try_image(index, i)
                if image is not None:
                    flush_buffer()
                    nodes.append(image[0])
                    i = image[1]
                    continue

            if char == "[" and not in_link:
                link = self._try_link(index, i, depth)
                if link is not None:
                    flush_buffer()
                    nodes.append(link[0])
                    i = link[1]
                    continue

            if char == "*":
                if text.startswith("**", i):
                    strong = self._try_strong(text, i, depth, in_link)
                    if strong is None:
                        # Unclosed "**" stays literal as a unit so italic does not pick up its second star
                        buffer.append("**")
                        i += 2
                        continue
                    flush_buffer()
                    nodes.append(strong[0])
                    i = strong[1]
                    continue

                emphasis = self._try_emphasis(text, i, depth, in_link)
                if emphasis is not None:
                    flush_buffer()
                    nodes.append(emphasis[0])
                    i = emphasis[1]
                    continue
                buffer.append(char)
                i += 1
                continue

            if not in_link and self.reference_patterns:
                reference = match_reference(self.reference_patterns, text, i)
                if reference is not None:
                    flush_buffer()
                    nodes.append(
                        Link(
                            url=f"{self.options.block_link_scheme}:{reference.block_id}",
                            children=[Text(content=reference.label)],
                        )
                    )
                    i = reference.end
                    continue

            buffer.append(char)
            i += 1

        flush_buffer()
        return nodes

    @staticmethod
    def _try_code_span(text: str, start: int) -> tuple[Optional[Node], int]:
        """Match a code span opened by the backtick run at ``start``.

        Returns the node (None when unclosed) and the position to resume at;
        an unclosed run is skipped as a whole.

        """
        run_end = start
        while run_end < len(text) and text[run_end] == "`":
            run_end += 1
        delimiter = text[start:run_end]

        search_from = run_end
        while True:
            close = text.find(delimiter, search_from)
            if close == -1:
                return None, run_end
            close_end = close + len(delimiter)
            # The closing run must have exactly the opening length
            if close_end < len(text) and text[close_end] == "`":
                search_from = close_end
                while search_from < len(text) and text[search_from] == "`":
                    search_from += 1
                continue
            break

        content = text[run_end:close]
        if not content:
            return None, run_end
        if len(content) > 2 and content.startswith(" ") and content.endswith(" ") and content.strip():
            content = content[1:-1]
        return Code(content=content), close_end

    @staticmethod
    def _try_image(index: _DelimiterIndex, start: int) -> ScanResult:
        matched = _match_bracketed_target(index, start + 1)
        if matched is None:
            return None
        alt, src, end = matched
        if not src:
            return None
        return Image(src=src, alt=alt), end

    def _try_link(self, index: _DelimiterIndex, start: int, depth: int) -> ScanResult:
        matched = _match_bracketed_target(index, start)
        if matched is None:
            return None
        label, url, end = matched
        return Link(url=url, children=self._scan(label, depth + 1, in_link=True)), end

    def _try_strong(self, text: str, start: int, depth: int, in_link: bool) -> ScanResult:
        close = text.find("**", start + 2)
        if close == -1:
            return None
        # "***x***" and "**a *b***": the last two stars of a longer run close
        # the bold so the extra star can close an inner italic
        if text.startswith("*", close + 2) and (
            text.startswith("*", start + 2) or _has_unpaired_star(text[start + 2 : close])
        ):
            while text.startswith("*", close + 2):
                close += 1
        inner = text[start + 2 : close]
        if not inner.strip():
            return None
        return Strong(children=self._scan(inner, depth + 1, in_link)), close + 2

    def _try_emphasis(self, text: str, start: int, depth: int, in_link: bool) -> ScanResult:
        if start > 0 and text[start - 1] == "*":
            return None
        if start + 1 >= len(text) or text[start + 1].isspace():
            return None

        i = start + 1
        close = -1
        while i < len(text):
            char = text[i]
            if char == "\\":
                i += 2
                continue
            if char == "`":
                _, resume = self._try_code_span(text, i)
                i = resume
                continue
            if char == "*":
                if text.startswith("**", i):
                    i += 2
                    continue
                close = i
                break
            i += 1

        if close == -1:
            return None
        inner = text[start + 1 : close]
        if not inner or inner[-1].isspace():
            return None
        return Emphasis(children=self._scan(inner, depth + 1, in_link)), close + 1


def parse_inline(text: str, options: ChatMarkdownOptions | None = None) -> list[Node]:
    """Parse a single line of chat Markdown into inline nodes.

    Parameters
    ----------
    text : str
        Text to scan
    options : ChatMarkdownOptions or None, default None
        Parser options

    Returns
    -------
    list of Node
        Inline nodes with adjacent text merged

    Examples
    --------
    >>> parse_inline("see blockid:42")
    [Text(content='see '), Link(url='orca-block:42', children=[Text(content='Block #42')])]

    """
    return InlineScanner(options).scan(text)


__all__ = ["InlineScanner", "parse_inline"]
