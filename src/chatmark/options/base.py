"""Base classes for parser options.

Options are frozen dataclasses. Derived copies are made with
``create_updated``; subclasses validate their fields in ``__post_init__``
with the helpers defined on ``BaseParserOptions``.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from chatmark.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin for deriving modified copies of frozen dataclasses."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Return a copy with the given fields replaced.

        The copy runs ``__post_init__`` again, so invalid values raise
        ``ValueError`` just as they would in the constructor.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New, validated instance

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Field ``metadata`` carries the CLI help text (``"help"``), an optional
    flag name (``"cli_name"``) and an ``"importance"`` tier used to group
    arguments in ``--help``.

    """

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Names accepted by the constructor and in configuration files."""
        return frozenset(item.name for item in fields(cls))

    def _require_at_least(self, name: str, minimum: int) -> None:
        value = getattr(self, name)
        if value < minimum:
            raise ValidationError(
                f"{name} must be at least {minimum}, got {value}", parameter_name=name, parameter_value=value
            )

    def _freeze_sequence(self, name: str) -> None:
        # Config files deliver lists; a tuple keeps the instance hashable
        value = getattr(self, name)
        if not isinstance(value, tuple):
            object.__setattr__(self, name, tuple(value))

    def __post_init__(self) -> None:
        """Validate option values; subclasses extend this."""
