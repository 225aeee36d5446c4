#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Exceptions raised by chatmark.

Malformed Markdown is never an error: the parser degrades to less structured
nodes instead. Exceptions are reserved for the outer surface, namely invalid
options and input objects that cannot be read as text.

Exception Hierarchy
-------------------
- ChatMarkError

  - ValidationError (also a ``ValueError``)
    - InvalidOptionsError

  - ParsingError

"""

from typing import Any


class ChatMarkError(Exception):
    """Base class of chatmark errors.

    Parameters
    ----------
    message : str
        Human-readable description
    original_error : Exception, optional
        Exception that caused this one

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(ChatMarkError, ValueError):
    """An option or argument has an unusable value.

    Subclasses ``ValueError`` so that callers validating dataclass options
    can catch either.

    Parameters
    ----------
    message : str
        Description of the problem
    parameter_name : str, optional
        Name of the offending option
    parameter_value : any, optional
        The rejected value

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """A parser received an options object of the wrong class."""

    def __init__(self, parser_name: str, expected_type: type, received_type: type):
        super().__init__(
            f"{parser_name} parser expects {expected_type.__name__}, got {received_type.__name__}",
            parameter_name="options",
            parameter_value=received_type,
        )
        self.parser_name = parser_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(ChatMarkError):
    """The input object could not be turned into text.

    Parameters
    ----------
    message : str
        Description of the failure
    parsing_stage : str, optional
        Stage that failed, e.g. ``"input_loading"``
    source : str, optional
        Path or description of the input
    original_error : Exception, optional
        Underlying I/O error

    """

    def __init__(
        self,
        message: str,
        parsing_stage: str | None = None,
        source: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage
        self.source = source


__all__ = [
    "ChatMarkError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
]
