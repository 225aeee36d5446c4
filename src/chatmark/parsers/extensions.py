#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/parsers/extensions.py
"""Sub-parsers for extension fences.

Each sub-parser receives the raw content of a fenced block and returns the
decoded node, or None when the content does not fit the format. The block
scanner then falls back to a plain code block carrying the original
language tag.

Supported fences:

- ``timeline``: ``date | title | description? | category?`` lines
- ``compare``: ``left | right`` title line, optional ``---`` line, rows
- ``gallery`` / ``images``: one image descriptor per line
- ``localgraph``: a single positive block id
- ``task``: ``key: value`` lines

"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from chatmark.ast import (
    Compare,
    CompareItem,
    Gallery,
    GalleryImage,
    LocalGraph,
    Node,
    TaskCard,
    TaskCardData,
    Timeline,
    TimelineItem,
)
from chatmark.constants import (
    COMPARE_LANGUAGES,
    DEFAULT_TASK_STATUS,
    GALLERY_LANGUAGES,
    LOCALGRAPH_LANGUAGES,
    TASK_BLOCK_ID_KEYS,
    TASK_LANGUAGES,
    TASK_PRIORITIES,
    TASK_STATUSES,
    TIMELINE_LANGUAGES,
)
from chatmark.parsers.inline import InlineScanner
from chatmark.parsers.references import parse_block_id

logger = logging.getLogger(__name__)

ExtensionParser = Callable[[str, InlineScanner], Optional[Node]]

COMPARE_SEPARATOR_PATTERN = re.compile(r"^[\s|:-]+$")
GALLERY_MARKDOWN_IMAGE_PATTERN = re.compile(
    r"^!\[(?P<alt>[^\]]*)\]\((?P<src>[^)\s]+)(?:\s+\"[^\"]*\")?\)\s*(?:\|\s*(?P<caption>.*))?$"
)
GALLERY_BARE_URL_PATTERN = re.compile(r"^(?:https?://|data:image/)\S+$")
LOCALGRAPH_CONTENT_PATTERN = re.compile(r"^#?(\d+)$")


def _content_lines(content: str) -> list[str]:
    return [line.strip() for line in content.split("\n") if line.strip()]


def _strip_outer_pipes(line: str) -> str:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return stripped.strip()


def _split_pair(line: str) -> Optional[tuple[str, str]]:
    """Split ``left | right`` on the first pipe; None when there is no pipe."""
    inner = _strip_outer_pipes(line)
    if "|" not in inner:
        return None
    left, right = inner.split("|", 1)
    return left.strip(), right.strip()


def _positive_int(value: str) -> Optional[int]:
    return parse_block_id(value.strip().lstrip("#").strip())


def parse_timeline(content: str, scanner: Optional[InlineScanner] = None) -> Optional[Timeline]:
    """Decode a ``timeline`` fence.

    Each line is ``date | title | description | category``; the last two
    fields are optional. Title and description are inline-parsed. Lines
    missing a date or title are skipped.

    Parameters
    ----------
    content : str
        Raw fence content
    scanner : InlineScanner or None, default None
        Inline scanner for titles and descriptions

    Returns
    -------
    Timeline or None
        The timeline, or None when no line yields an item

    """
    scanner = scanner or InlineScanner()
    items: list[TimelineItem] = []

    for line in _content_lines(content):
        parts = [part.strip() for part in _strip_outer_pipes(line).split("|")]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            continue

        description = parts[2] if len(parts) > 2 and parts[2] else None
        category = parts[3] if len(parts) > 3 and parts[3] else None
        items.append(
            TimelineItem(
                date=parts[0],
                title=scanner.scan(parts[1]),
                description=scanner.scan(description) if description is not None else None,
                category=category,
            )
        )

    return Timeline(items=items) if items else None


def parse_compare(content: str, scanner: Optional[InlineScanner] = None) -> Optional[Compare]:
    """Decode a ``compare`` fence.

    The first line holds ``leftTitle | rightTitle``. A separator line of
    dashes directly after it is skipped. Every later line with a pipe becomes
    a row, split on its first pipe; lines without a pipe are ignored.

    Returns
    -------
    Compare or None
        The comparison, or None without a title line or without any row

    """
    scanner = scanner or InlineScanner()
    lines = _content_lines(content)
    if not lines:
        return None

    titles = _split_pair(lines[0])
    if titles is None:
        return None

    body = lines[1:]
    if body and COMPARE_SEPARATOR_PATTERN.match(body[0]) and "-" in body[0]:
        body = body[1:]

    items: list[CompareItem] = []
    for line in body:
        pair = _split_pair(line)
        if pair is None:
            continue
        items.append(CompareItem(left=scanner.scan(pair[0]), right=scanner.scan(pair[1])))

    if not items:
        return None

    return Compare(left_title=scanner.scan(titles[0]), right_title=scanner.scan(titles[1]), items=items)


def _parse_gallery_line(line: str) -> Optional[GalleryImage]:
    match = GALLERY_MARKDOWN_IMAGE_PATTERN.match(line)
    if match:
        caption = (match.group("caption") or "").strip()
        return GalleryImage(src=match.group("src"), alt=match.group("alt").strip(), caption=caption or None)

    parts = [part.strip() for part in line.split("|")]
    src = parts[0]
    if not src or any(char.isspace() for char in src):
        return None
    # Without pipes only a recognizable URL is accepted as an image
    if len(parts) == 1 and not GALLERY_BARE_URL_PATTERN.match(src):
        return None

    alt = parts[1] if len(parts) > 1 else ""
    caption = parts[2] if len(parts) > 2 and parts[2] else None
    return GalleryImage(src=src, alt=alt, caption=caption)


def parse_gallery(content: str, scanner: Optional[InlineScanner] = None) -> Optional[Gallery]:
    """Decode a ``gallery`` / ``images`` fence.

    Lines are ``![alt](src)`` with an optional ``| caption``, or a
    ``src | alt | caption`` triple whose ``src`` contains no spaces.
    Unrecognized lines are skipped.

    Returns
    -------
    Gallery or None
        The gallery, or None when no line yields an image

    """
    images = [image for image in map(_parse_gallery_line, _content_lines(content)) if image is not None]
    return Gallery(images=images) if images else None


def parse_localgraph(content: str, scanner: Optional[InlineScanner] = None) -> Optional[LocalGraph]:
    """Decode a ``localgraph`` fence holding a single positive integer."""
    match = LOCALGRAPH_CONTENT_PATTERN.match(content.strip())
    if not match:
        return None
    block_id = parse_block_id(match.group(1))
    return LocalGraph(block_id=block_id) if block_id is not None else None


def parse_task_card(content: str, scanner: Optional[InlineScanner] = None) -> Optional[TaskCard]:
    """Decode a ``task`` fence of ``key: value`` lines.

    Recognized keys are ``title``, ``status``, ``priority``, ``due``,
    ``tags`` (comma separated) and a block reference key (``block``,
    ``blockid``, ``block_id`` or ``id``). Unknown keys are ignored, and so
    are unrecognized status or priority values.

    Parameters
    ----------
    content : str
        Raw fence content
    scanner : InlineScanner or None, default None
        Unused; accepted for a uniform sub-parser signature

    Returns
    -------
    TaskCard or None
        The task card, or None when no title is given

    Examples
    --------
    >>> card = parse_task_card("title: Ship it\\nstatus: done\\ntags: #a, #b")
    >>> card.task.status, card.task.tags
    ('done', ['#a', '#b'])

    """
    title: Optional[str] = None
    status = DEFAULT_TASK_STATUS
    priority = None
    due_date: Optional[str] = None
    tags: list[str] = []
    block_id: Optional[int] = None

    for line in _content_lines(content):
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        value = value.strip()

        if key == "title":
            title = value or None
        elif key == "status":
            if value.lower() in TASK_STATUSES:
                status = value.lower()  # type: ignore[assignment]
        elif key == "priority":
            if value.lower() in TASK_PRIORITIES:
                priority = value.lower()
        elif key == "due":
            due_date = value or None
        elif key == "tags":
            tags = [tag.strip() for tag in value.split(",") if tag.strip()]
        elif key in TASK_BLOCK_ID_KEYS:
            block_id = _positive_int(value)

    if title is None:
        return None

    return TaskCard(
        task=TaskCardData(
            title=title,
            status=status,
            priority=priority,  # type: ignore[arg-type]
            due_date=due_date,
            tags=tags,
            block_id=block_id,
        )
    )


def _build_registry() -> dict[str, ExtensionParser]:
    registry: dict[str, ExtensionParser] = {}
    for languages, parser in (
        (TIMELINE_LANGUAGES, parse_timeline),
        (COMPARE_LANGUAGES, parse_compare),
        (GALLERY_LANGUAGES, parse_gallery),
        (LOCALGRAPH_LANGUAGES, parse_localgraph),
        (TASK_LANGUAGES, parse_task_card),
    ):
        for language in languages:
            registry[language] = parser
    return registry


EXTENSION_PARSERS: dict[str, ExtensionParser] = _build_registry()


def parse_extension_block(language: str, content: str, scanner: InlineScanner) -> Optional[Node]:
    """Dispatch fence content to the sub-parser registered for ``language``.

    Parameters
    ----------
    language : str
        Fence language tag (case-insensitive)
    content : str
        Raw fence content
    scanner : InlineScanner
        Inline scanner shared with the block parser

    Returns
    -------
    Node or None
        The decoded extension node; None when no sub-parser is registered or
        the sub-parser rejected the content

    """
    parser = EXTENSION_PARSERS.get(language.lower())
    if parser is None:
        return None

    node = parser(content, scanner)
    if node is None:
        logger.debug("Extension fence '%s' rejected; rendering as code block", language)
    return node


__all__ = [
    "EXTENSION_PARSERS",
    "ExtensionParser",
    "parse_compare",
    "parse_extension_block",
    "parse_gallery",
    "parse_localgraph",
    "parse_task_card",
    "parse_timeline",
]
