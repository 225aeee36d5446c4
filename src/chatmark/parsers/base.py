#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/chatmark/parsers/base.py
"""Base class for chatmark parsers.

The BaseParser provides the common interface (``parse(input_data) ->
Document``), options type validation and input loading shared by parser
implementations.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from chatmark.ast import Document
from chatmark.exceptions import InvalidOptionsError, ParsingError
from chatmark.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

ParserInput = Union[str, bytes, Path, IO[bytes], IO[str]]


class BaseParser(ABC):
    """Abstract base class for chatmark parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Parser-specific options

    Notes
    -----
    ``parse`` accepts:

    - str: the message text itself (never interpreted as a file path)
    - bytes: UTF-8 encoded text; invalid sequences are replaced
    - Path: a UTF-8 text file
    - a file-like object opened in binary or text mode

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                parser_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse the input into a Document.

        Parameters
        ----------
        input_data : str, bytes, Path or file-like
            The input to parse

        Returns
        -------
        Document
            Root node of the parsed tree

        Raises
        ------
        ParsingError
            If the input object cannot be read as text

        """
        raise NotImplementedError

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load text from the supported input types.

        Raises
        ------
        ParsingError
            If the input type is unsupported or the file cannot be read

        """
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, (bytes, bytearray)):
            return bytes(input_data).decode("utf-8", errors="replace")
        if isinstance(input_data, Path):
            try:
                return input_data.read_bytes().decode("utf-8", errors="replace")
            except OSError as e:
                raise ParsingError(
                    f"Could not read input file {input_data}: {e}",
                    parsing_stage="input_loading",
                    source=str(input_data),
                    original_error=e,
                ) from e
        if hasattr(input_data, "read"):
            try:
                content = input_data.read()
            except OSError as e:
                raise ParsingError(
                    f"Could not read input stream: {e}", parsing_stage="input_loading", original_error=e
                ) from e
            if isinstance(content, bytes):
                return content.decode("utf-8", errors="replace")
            if isinstance(content, str):
                return content

        raise ParsingError(
            f"Unsupported input type: {type(input_data).__name__}",
            parsing_stage="input_loading",
        )


__all__ = ["BaseParser", "ParserInput"]
