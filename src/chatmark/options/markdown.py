#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for chat Markdown parsing.

This module defines the options controlling the block scanner, the inline
scanner, the extension sub-parsers and the recovery heuristics.
"""
# src/chatmark/options/markdown.py


from __future__ import annotations

import re
from dataclasses import dataclass, field

from chatmark.constants import (
    DEFAULT_BLOCK_LABEL_TEMPLATE,
    DEFAULT_BLOCK_LINK_SCHEME,
    DEFAULT_MAX_INLINE_DEPTH,
    DEFAULT_MAX_QUOTE_DEPTH,
    DEFAULT_MIN_BRACKET_REFERENCE_DIGITS,
    DEFAULT_REFERENCE_KEYWORDS,
)
from chatmark.exceptions import ValidationError
from chatmark.options.base import BaseParserOptions

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


@dataclass(frozen=True)
class ChatMarkdownOptions(BaseParserOptions):
    """Configuration options for chat Markdown-to-AST parsing.

    Parameters
    ----------
    max_inline_depth : int, default 10
        Maximum nesting of emphasis and link labels. Deeper spans are kept
        as plain text.
    max_quote_depth : int, default 16
        Maximum nesting of blockquotes. Deeper quote text is kept as plain
        paragraphs.
    block_link_scheme : str, default "orca-block"
        Scheme of synthetic block reference links (``orca-block:123``). The
        same scheme is recognized inline as a direct reference.
    block_label_template : str, default "Block #{block_id}"
        Display text for ``blockid:`` references. Must contain ``{block_id}``.
    reference_keywords : tuple of str, default ("block", "Block", "块", "笔记")
        Words introducing natural-language references such as "block #123".
    min_bracket_reference_digits : int, default 3
        Minimum digit count for bracketed bare-number references ("[1234]").
    parse_reference_heuristics : bool, default True
        Whether to turn loosely written block references into links.
    parse_extensions : bool, default True
        Whether to decode extension fences (timeline, compare, gallery,
        localgraph, task). When False they render as code blocks.
    parse_tables : bool, default True
        Whether to parse pipe tables.
    intercept_diagrams : bool, default True
        Whether diagram fences carrying a block id become link graphs.
    merge_image_galleries : bool, default True
        Whether runs of single-image paragraphs merge into galleries.
    extract_completion_marker : bool, default True
        Whether the out-of-band ``[LOCALGRAPH:<id>]`` marker is honored.

    """

    max_inline_depth: int = field(
        default=DEFAULT_MAX_INLINE_DEPTH,
        metadata={"help": "Maximum nesting of emphasis and link labels", "importance": "advanced"},
    )
    max_quote_depth: int = field(
        default=DEFAULT_MAX_QUOTE_DEPTH,
        metadata={"help": "Maximum nesting of blockquotes", "importance": "advanced"},
    )
    block_link_scheme: str = field(
        default=DEFAULT_BLOCK_LINK_SCHEME,
        metadata={
            "help": "Scheme for synthetic block reference links (<scheme>:<id>)",
            "cli_name": "link-scheme",
            "importance": "core",
        },
    )
    block_label_template: str = field(
        default=DEFAULT_BLOCK_LABEL_TEMPLATE,
        metadata={
            "help": "Display text for blockid: references; must contain {block_id}",
            "cli_name": "link-label",
            "importance": "advanced",
        },
    )
    reference_keywords: tuple[str, ...] = field(
        default=DEFAULT_REFERENCE_KEYWORDS,
        metadata={"help": "Words introducing natural-language block references", "importance": "advanced"},
    )
    min_bracket_reference_digits: int = field(
        default=DEFAULT_MIN_BRACKET_REFERENCE_DIGITS,
        metadata={"help": "Minimum digits for bracketed [1234] references", "importance": "advanced"},
    )
    parse_reference_heuristics: bool = field(
        default=True,
        metadata={"help": "Convert loosely written block references into links", "cli_name": "no-references"},
    )
    parse_extensions: bool = field(
        default=True,
        metadata={"help": "Decode timeline/compare/gallery/localgraph/task fences", "cli_name": "no-extensions"},
    )
    parse_tables: bool = field(
        default=True,
        metadata={"help": "Parse pipe tables", "cli_name": "no-tables"},
    )
    intercept_diagrams: bool = field(
        default=True,
        metadata={
            "help": "Render diagram fences that carry a block id as link graphs",
            "cli_name": "no-diagram-interception",
        },
    )
    merge_image_galleries: bool = field(
        default=True,
        metadata={"help": "Merge runs of single-image paragraphs into galleries", "cli_name": "no-galleries"},
    )
    extract_completion_marker: bool = field(
        default=True,
        metadata={"help": "Honor the [LOCALGRAPH:<id>] completion marker", "cli_name": "no-completion-marker"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and reference settings.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range

        """
        super().__post_init__()

        for name in ("max_inline_depth", "max_quote_depth", "min_bracket_reference_digits"):
            self._require_at_least(name, 1)
        if not _SCHEME_PATTERN.match(self.block_link_scheme):
            raise ValidationError(
                f"block_link_scheme must be a URI scheme name, got {self.block_link_scheme!r}",
                parameter_name="block_link_scheme",
                parameter_value=self.block_link_scheme,
            )
        if "{block_id}" not in self.block_label_template:
            raise ValidationError(
                "block_label_template must contain the {block_id} placeholder",
                parameter_name="block_label_template",
                parameter_value=self.block_label_template,
            )

        self._freeze_sequence("reference_keywords")
        if any(not isinstance(keyword, str) or not keyword.strip() for keyword in self.reference_keywords):
            raise ValidationError(
                "reference_keywords must not contain empty entries",
                parameter_name="reference_keywords",
                parameter_value=self.reference_keywords,
            )
