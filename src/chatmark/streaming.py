#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/streaming.py
"""Host-side helper for parsing streamed model output.

The parser has no incremental mode: every update re-parses the complete text
received so far. ``StreamingParser`` keeps that text for one message and
enforces the ordering rule renderers rely on, namely that a parse result
computed from shorter text is never applied after one computed from longer
text.

"""

from __future__ import annotations

import logging
from typing import Optional

from chatmark.ast import Document
from chatmark.options.markdown import ChatMarkdownOptions
from chatmark.parsers.markdown import ChatMarkdownParser

logger = logging.getLogger(__name__)


class StreamingParser:
    """Accumulate streamed text for one message and re-parse on each update.

    Parameters
    ----------
    options : ChatMarkdownOptions or None, default None
        Parser options

    Examples
    --------
    >>> stream = StreamingParser()
    >>> _ = stream.feed("# Hel")
    >>> doc = stream.feed("lo\\n\\nworld")
    >>> [child.node_type for child in doc.children]
    ['heading', 'paragraph']

    """

    def __init__(self, options: ChatMarkdownOptions | None = None):
        self._parser = ChatMarkdownParser(options)
        self._text = ""
        self._document = Document()

    @property
    def text(self) -> str:
        """Text accumulated so far."""
        return self._text

    @property
    def document(self) -> Document:
        """Tree parsed from the text accumulated so far."""
        return self._document

    def feed(self, chunk: str) -> Document:
        """Append ``chunk`` and re-parse the full text.

        Parameters
        ----------
        chunk : str
            Newly streamed text

        Returns
        -------
        Document
            Tree for the complete text

        """
        if chunk:
            self._text += chunk
            self._document = self._parser.parse(self._text)
        return self._document

    def update(self, full_text: str) -> Optional[Document]:
        """Replace the accumulated text with ``full_text`` and re-parse.

        Updates must arrive in strictly increasing length. Text that is not
        longer than the last applied text is stale and is ignored.

        Parameters
        ----------
        full_text : str
            Complete message text so far

        Returns
        -------
        Document or None
            The new tree, or None when the update was rejected as stale

        """
        if len(full_text) <= len(self._text):
            logger.debug("Ignoring stale update (%d <= %d characters)", len(full_text), len(self._text))
            return None
        self._text = full_text
        self._document = self._parser.parse(full_text)
        return self._document

    def reset(self) -> None:
        """Forget the accumulated text, e.g. when a new message starts."""
        self._text = ""
        self._document = Document()


__all__ = ["StreamingParser"]
