#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the chatmark library.

This module centralizes the hardcoded values used by the chat Markdown
parser: recursion bounds, extension language tags, reference heuristics
defaults and task card vocabularies.

Constants are organized by category:
1. Type Definitions - Literal types shared by nodes and options
2. Parser Limits - Recursion bounds
3. Inline Syntax - Escape set and reference defaults
4. Extension Blocks - Fence language tags and task card vocabularies
5. CLI - Config file names and exit codes
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

Alignment = Literal["left", "center", "right"]
TaskStatus = Literal["todo", "done", "in-progress", "cancelled"]
TaskPriority = Literal["high", "medium", "low"]
OutputFormat = Literal["json", "tree", "text"]

# =============================================================================
# Parser Limits
# =============================================================================

# Maximum nesting of emphasis/link labels handled by the inline scanner
DEFAULT_MAX_INLINE_DEPTH = 10

# Maximum nesting of blockquotes before quote text is kept as plain paragraphs
DEFAULT_MAX_QUOTE_DEPTH = 16

# =============================================================================
# Inline Syntax
# =============================================================================

# Characters that may be escaped with a backslash; the escaped char is literal text
ESCAPABLE_CHARS = frozenset("\\`*_[]()!#|>")

# Scheme used for synthetic block reference links: "<scheme>:<id>"
DEFAULT_BLOCK_LINK_SCHEME = "orca-block"

# Display text for normalized "blockid:" references
DEFAULT_BLOCK_LABEL_TEMPLATE = "Block #{block_id}"

# Natural-language reference words ("block #123", "Block 123", "块 #123", "笔记 #123")
DEFAULT_REFERENCE_KEYWORDS: tuple[str, ...] = ("block", "Block", "块", "笔记")

# Bracketed bare numbers ("[1234]") must have at least this many digits
DEFAULT_MIN_BRACKET_REFERENCE_DIGITS = 3

# Longest block id accepted anywhere; longer digit runs are not references
MAX_BLOCK_ID_DIGITS = 15

# =============================================================================
# Extension Blocks
# =============================================================================

TIMELINE_LANGUAGES = frozenset({"timeline"})
COMPARE_LANGUAGES = frozenset({"compare"})
GALLERY_LANGUAGES = frozenset({"gallery", "images"})
LOCALGRAPH_LANGUAGES = frozenset({"localgraph"})
TASK_LANGUAGES = frozenset({"task"})

# Fence tags the model emits for diagrams; intercepted when a block id can be extracted
DIAGRAM_LANGUAGES = frozenset({"mermaid", "flowchart", "graph", "dot", "graphviz", "diagram"})

TASK_STATUSES: tuple[TaskStatus, ...] = ("todo", "done", "in-progress", "cancelled")
TASK_PRIORITIES: tuple[TaskPriority, ...] = ("high", "medium", "low")
DEFAULT_TASK_STATUS: TaskStatus = "todo"

# Keys of a ```task block that carry the referenced block id
TASK_BLOCK_ID_KEYS = frozenset({"block", "blockid", "block_id", "id"})

# Out-of-band completion marker: "[LOCALGRAPH:123]"
COMPLETION_MARKER_TAG = "LOCALGRAPH"

# =============================================================================
# CLI
# =============================================================================

CONFIG_FILENAMES = [".chatmark.toml", ".chatmark.yaml", ".chatmark.yml", ".chatmark.json"]
PYPROJECT_TOOL_SECTION = "chatmark"

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 3
