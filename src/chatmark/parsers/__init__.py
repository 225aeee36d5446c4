#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Parsers turning chat Markdown into the chatmark AST.

- markdown: the block scanner (``ChatMarkdownParser``, ``parse_markdown``)
- inline: the inline scanner (``InlineScanner``, ``parse_inline``)
- extensions: extension fence sub-parsers and their registry
- references: block reference heuristics, diagram id extraction and the
  completion marker

"""

from __future__ import annotations

from chatmark.parsers.base import BaseParser, ParserInput
from chatmark.parsers.extensions import (
    EXTENSION_PARSERS,
    parse_compare,
    parse_extension_block,
    parse_gallery,
    parse_localgraph,
    parse_task_card,
    parse_timeline,
)
from chatmark.parsers.inline import InlineScanner, parse_inline
from chatmark.parsers.markdown import ChatMarkdownParser, parse_markdown
from chatmark.parsers.references import (
    ReferenceMatch,
    ReferencePattern,
    build_reference_patterns,
    extract_completion_marker,
    extract_diagram_block_id,
    match_reference,
    parse_block_id,
)

__all__ = [
    "BaseParser",
    "ParserInput",
    "ChatMarkdownParser",
    "parse_markdown",
    "InlineScanner",
    "parse_inline",
    "EXTENSION_PARSERS",
    "parse_extension_block",
    "parse_timeline",
    "parse_compare",
    "parse_gallery",
    "parse_localgraph",
    "parse_task_card",
    "ReferenceMatch",
    "ReferencePattern",
    "build_reference_patterns",
    "match_reference",
    "parse_block_id",
    "extract_diagram_block_id",
    "extract_completion_marker",
]
