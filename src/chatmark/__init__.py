"""chatmark - parse model-generated chat Markdown into a renderable document tree.

chatmark turns free-form, possibly still-streaming Markdown written by a
language model into a closed set of block and inline nodes. Besides the usual
Markdown constructs it decodes the extension fences used for rich chat
content (timelines, comparisons, image galleries, link graphs and task cards)
and repairs common model mistakes such as loosely written block references
or diagram fences that should have been link graphs. Parsing never fails on
malformed text; it degrades to less structured output instead.

Key Features
------------
- Line-driven block scanner with nested lists, checklists, tables and quotes
- Left-to-right inline scanner with bounded recursion
- Extension sub-parsers dispatched from a language-tag registry
- Data-driven block reference heuristics
- JSON wire format for renderers
- Streaming helper enforcing monotonic re-parses

Requirements
------------
- Python 3.10+

Examples
--------
Parse a message:

    >>> from chatmark import parse_markdown
    >>> doc = parse_markdown("# Hi\\n\\nHello **world**")

Serialize for a renderer:

    >>> from chatmark import ast_to_json
    >>> payload = ast_to_json(doc)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "chatmark requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from chatmark.ast import Document, ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from chatmark.exceptions import ChatMarkError, InvalidOptionsError, ParsingError, ValidationError
from chatmark.options import ChatMarkdownOptions
from chatmark.parsers import (
    EXTENSION_PARSERS,
    ChatMarkdownParser,
    extract_diagram_block_id,
    parse_compare,
    parse_gallery,
    parse_inline,
    parse_localgraph,
    parse_markdown,
    parse_task_card,
    parse_timeline,
)
from chatmark.streaming import StreamingParser

__all__ = [
    "__version__",
    "ChatMarkdownParser",
    "ChatMarkdownOptions",
    "StreamingParser",
    "parse_markdown",
    "parse_inline",
    "parse_timeline",
    "parse_compare",
    "parse_gallery",
    "parse_localgraph",
    "parse_task_card",
    "extract_diagram_block_id",
    "EXTENSION_PARSERS",
    "Document",
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
    "ChatMarkError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
]
