#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the chatmark parser.

Options are frozen dataclasses; use ``create_updated`` (or
``create_updated_options``) to derive modified copies.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from chatmark.options.base import BaseParserOptions, CloneFrozenMixin
from chatmark.options.markdown import ChatMarkdownOptions


def create_updated_options(options: Any, **kwargs: Any) -> Any:
    """Create a new options instance with updated values.

    Parameters
    ----------
    options : Any
        The original options instance (must be a dataclass)
    **kwargs
        Field values to update

    Returns
    -------
    Any
        New options instance with the updated values

    """
    return replace(options, **kwargs)


__all__ = [
    "BaseParserOptions",
    "CloneFrozenMixin",
    "ChatMarkdownOptions",
    "create_updated_options",
]
