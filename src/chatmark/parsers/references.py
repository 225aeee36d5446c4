#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/parsers/references.py
"""Block reference heuristics.

Language models refer to blocks in many loosely formatted ways. This module
holds the recovery heuristics that turn those mentions into block ids:

- ``ReferencePattern`` tables consulted by the inline scanner at each scan
  position (first pattern that matches wins)
- the numeric-id extraction used to intercept diagram fences
- the out-of-band ``[LOCALGRAPH:<id>]`` completion marker

The tables are plain data, so a new reference format is added by appending
an entry rather than by touching the scanning loop.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from chatmark.constants import COMPLETION_MARKER_TAG, DEFAULT_BLOCK_LINK_SCHEME, MAX_BLOCK_ID_DIGITS
from chatmark.options.markdown import ChatMarkdownOptions

logger = logging.getLogger(__name__)

LabelStrategy = Callable[[re.Match[str], int], str]
ContextGuard = Callable[[str, int], bool]

COMPLETION_MARKER_PATTERN = re.compile(
    r"\[\s*" + COMPLETION_MARKER_TAG + r"\s*[:=]\s*(\d+)\s*\]",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ReferencePattern:
    """One entry of the reference heuristics table.

    Parameters
    ----------
    name : str
        Identifier used in debug logging
    pattern : re.Pattern
        Compiled pattern anchored at the scan position (used with ``match``)
    label : callable
        Label strategy ``(match, block_id) -> str`` producing the link text
    triggers : frozenset of str
        Characters a match can start with; positions starting with any
        other character are skipped without running the pattern
    id_group : int, default 1
        Capture group holding the decimal block id
    guard : callable or None, default None
        Context check ``(text, start) -> bool`` that must pass for a match

    """

    name: str
    pattern: re.Pattern[str]
    label: LabelStrategy
    triggers: frozenset[str]
    id_group: int = 1
    guard: Optional[ContextGuard] = None


@dataclass(frozen=True)
class ReferenceMatch:
    """A recognized block reference."""

    block_id: int
    label: str
    start: int
    end: int
    pattern_name: str


def parse_block_id(digits: str) -> Optional[int]:
    """Return the positive block id spelled by ``digits``, or None.

    Zero and digit runs longer than ``MAX_BLOCK_ID_DIGITS`` (ignoring
    leading zeros) are not usable ids.

    """
    if not digits.isdecimal() or len(digits.lstrip("0")) > MAX_BLOCK_ID_DIGITS:
        return None
    block_id = int(digits)
    return block_id if block_id > 0 else None


def _not_preceded_by_word(text: str, start: int) -> bool:
    # CJK prose has no spaces between words, so only ASCII letters and digits block a match
    if start == 0:
        return True
    previous = text[start - 1]
    return not (previous.isascii() and previous.isalnum())


def _matched_text(match: re.Match[str], block_id: int) -> str:
    return match.group(0).strip()


def _template_label(template: str) -> LabelStrategy:
    def label(match: re.Match[str], block_id: int) -> str:
        return template.format(block_id=block_id)

    return label


def _case_variants(word: str) -> set[str]:
    return {word[:1].lower(), word[:1].upper()}


def build_reference_patterns(options: ChatMarkdownOptions | None = None) -> tuple[ReferencePattern, ...]:
    """Build the ordered reference heuristics table for a set of options.

    The order is: scheme-qualified token (``orca-block:123``), labelled
    ``blockid:`` token, natural-language mention (``block #123``) and
    bracketed bare number (``[1234]``).

    Parameters
    ----------
    options : ChatMarkdownOptions or None, default None
        Parser options; defaults are used when None

    Returns
    -------
    tuple of ReferencePattern
        Patterns in priority order

    """
    options = options or ChatMarkdownOptions()
    scheme = options.block_link_scheme
    template_label = _template_label(options.block_label_template)

    keywords = sorted(options.reference_keywords, key=len, reverse=True)
    keyword_alternation = "|".join(re.escape(keyword) for keyword in keywords)
    keyword_triggers = {keyword[0] for keyword in keywords}

    min_digits = options.min_bracket_reference_digits

    return (
        ReferencePattern(
            name="scheme",
            pattern=re.compile(re.escape(scheme) + r":(\d+)"),
            label=template_label,
            triggers=frozenset(_case_variants(scheme)),
            guard=_not_preceded_by_word,
        ),
        ReferencePattern(
            name="blockid",
            pattern=re.compile(r"blockid(?::\s*|\s+)(\d+)", re.IGNORECASE),
            label=template_label,
            triggers=frozenset({"b", "B"}),
            guard=_not_preceded_by_word,
        ),
        ReferencePattern(
            name="natural",
            # Trailing whitespace is consumed only together with a closing paren
            pattern=re.compile(r"(?:\(\s*)?(?:" + keyword_alternation + r")\s*#?\s*(\d+)(?:\s*\))?"),
            label=_matched_text,
            triggers=frozenset(keyword_triggers | {"("}),
            guard=_not_preceded_by_word,
        ),
        ReferencePattern(
            name="bracket",
            pattern=re.compile(r"\[(\d{" + str(min_digits) + r",})\](?!\()"),
            label=template_label,
            triggers=frozenset({"["}),
        ),
    )


def match_reference(patterns: tuple[ReferencePattern, ...], text: str, pos: int) -> Optional[ReferenceMatch]:
    """Try each reference pattern at ``pos``; the first match wins.

    Parameters
    ----------
    patterns : tuple of ReferencePattern
        Table built by ``build_reference_patterns``
    text : str
        Text being scanned
    pos : int
        Scan position

    Returns
    -------
    ReferenceMatch or None
        The recognized reference, or None when no pattern applies

    """
    if pos >= len(text):
        return None

    char = text[pos]
    for entry in patterns:
        if char not in entry.triggers:
            continue
        match = entry.pattern.match(text, pos)
        if not match:
            continue
        if entry.guard is not None and not entry.guard(text, pos):
            continue

        block_id = parse_block_id(match.group(entry.id_group))
        if block_id is None:
            continue

        return ReferenceMatch(
            block_id=block_id,
            label=entry.label(match, block_id),
            start=match.start(),
            end=match.end(),
            pattern_name=entry.name,
        )
    return None


def build_diagram_id_patterns(scheme: str = DEFAULT_BLOCK_LINK_SCHEME) -> tuple[re.Pattern[str], ...]:
    """Return the prioritized id extraction patterns for diagram fences."""
    return (
        re.compile(r"\b(?:block_?id|id)\s*[:=]\s*[\"']?(\d+)", re.IGNORECASE),
        re.compile(re.escape(scheme) + r":(\d+)"),
        re.compile(r"\b(\d{4,})\b"),
    )


def extract_diagram_block_id(content: str, scheme: str = DEFAULT_BLOCK_LINK_SCHEME) -> Optional[int]:
    """Extract a block id from the body of a diagram fence.

    Patterns are tried in order: an explicit ``blockId=123`` / ``id: 123``
    assignment, a scheme-qualified reference, then a bare number of four or
    more digits. The first pattern that matches decides; later patterns are
    not consulted even if its id is unusable.

    Parameters
    ----------
    content : str
        Raw fence content
    scheme : str, default "orca-block"
        Scheme of block reference links

    Returns
    -------
    int or None
        Positive block id, or None when the fence should stay a code block

    Examples
    --------
    >>> extract_diagram_block_id("graph TD\\n  A[blockId=777] --> B")
    777
    >>> extract_diagram_block_id("graph TD\\n  A --> B") is None
    True

    """
    for pattern in build_diagram_id_patterns(scheme):
        match = pattern.search(content)
        if match:
            return parse_block_id(match.group(1))
    return None


def extract_completion_marker(text: str) -> tuple[str, Optional[int]]:
    """Strip every completion marker from ``text``.

    Parameters
    ----------
    text : str
        Full message text

    Returns
    -------
    tuple of (str, int or None)
        The text without markers and the first positive marker id (None
        when no usable marker was present)

    Examples
    --------
    >>> extract_completion_marker("Done. [LOCALGRAPH:42]")
    ('Done. ', 42)

    """
    block_id: Optional[int] = None
    for match in COMPLETION_MARKER_PATTERN.finditer(text):
        candidate = parse_block_id(match.group(1))
        if candidate is not None:
            block_id = candidate
            break

    stripped = COMPLETION_MARKER_PATTERN.sub("", text)
    if block_id is not None:
        logger.debug("Extracted completion marker for block %d", block_id)
    return stripped, block_id


__all__ = [
    "COMPLETION_MARKER_PATTERN",
    "ReferenceMatch",
    "ReferencePattern",
    "build_diagram_id_patterns",
    "build_reference_patterns",
    "extract_completion_marker",
    "extract_diagram_block_id",
    "match_reference",
    "parse_block_id",
]
