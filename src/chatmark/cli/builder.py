#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Dynamic CLI argument builder for chatmark.

Parser option flags are generated from the ``ChatMarkdownOptions`` dataclass
fields and their metadata (``help``, ``cli_name``), so a new option needs no
hand-written argparse code.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import MISSING, fields
from typing import Any, Dict, Optional, Type, get_args, get_origin, get_type_hints

from chatmark.constants import EXIT_FILE_ERROR, EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from chatmark.exceptions import ParsingError
from chatmark.options.markdown import ChatMarkdownOptions

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """Argparse type accepting integers >= 1."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {value!r}") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {number}")
    return number


class DynamicCLIBuilder:
    """Builds CLI arguments dynamically from an options dataclass.

    Parameters
    ----------
    options_class : type, default ChatMarkdownOptions
        Frozen options dataclass to expose on the command line

    """

    def __init__(self, options_class: Type[Any] = ChatMarkdownOptions) -> None:
        """Initialize the CLI builder."""
        self.options_class = options_class
        self.dest_to_cli_flag: Dict[str, str] = {}

    @staticmethod
    def snake_to_kebab(name: str) -> str:
        """Convert snake_case to kebab-case."""
        return name.replace("_", "-")

    def infer_cli_name(self, field: Any, default: Any) -> str:
        """Infer the CLI flag for a field.

        ``metadata["cli_name"]`` wins; otherwise the kebab-case field name is
        used, with a ``no-`` prefix for booleans that default to True.

        """
        cli_name = field.metadata.get("cli_name")
        if cli_name is None:
            cli_name = self.snake_to_kebab(field.name)
            if default is True and not cli_name.startswith("no-"):
                cli_name = f"no-{cli_name}"
        return f"--{cli_name}"

    def get_argument_kwargs(self, field: Any, resolved_type: Any, default: Any) -> Dict[str, Any]:
        """Build argparse kwargs for one dataclass field.

        Defaults are suppressed so that only flags the user actually passed
        override values from a configuration file.

        """
        kwargs: Dict[str, Any] = {
            "dest": field.name,
            "default": argparse.SUPPRESS,
            "help": field.metadata.get("help", f"Configure {field.name}"),
        }

        if resolved_type is bool:
            kwargs["action"] = "store_false" if default is True else "store_true"
        elif resolved_type is int:
            kwargs["type"] = positive_int
            kwargs["metavar"] = "N"
            kwargs["help"] = f"{kwargs['help']} (default: {default})"
        elif get_origin(resolved_type) is tuple:
            item_types = [arg for arg in get_args(resolved_type) if arg is not Ellipsis]
            kwargs["nargs"] = "+"
            kwargs["type"] = item_types[0] if item_types else str
            kwargs["metavar"] = "VALUE"
        else:
            kwargs["type"] = str
            kwargs["help"] = f"{kwargs['help']} (default: {default})"

        return kwargs

    def add_options_class_arguments(self, parser: argparse.ArgumentParser, group_name: str) -> None:
        """Add one argument per options field to ``parser``.

        Fields whose metadata marks them ``"importance": "advanced"`` go to a
        separate "Advanced ..." group so that ``--help`` lists the common
        switches first.

        """
        groups: Dict[str, argparse._ArgumentGroup] = {"core": parser.add_argument_group(group_name)}
        type_hints = get_type_hints(self.options_class)

        for field in fields(self.options_class):
            importance = field.metadata.get("importance", "core")
            if importance not in groups:
                groups[importance] = parser.add_argument_group(f"{importance.capitalize()} {group_name.lower()}")

            default = field.default if field.default is not MISSING else None
            cli_name = self.infer_cli_name(field, default)
            kwargs = self.get_argument_kwargs(field, type_hints[field.name], default)
            groups[importance].add_argument(cli_name, **kwargs)
            self.dest_to_cli_flag[field.name] = cli_name

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the complete argument parser.

        Returns
        -------
        ArgumentParser
            Configured parser

        """
        parser = argparse.ArgumentParser(
            prog="chatmark",
            description="Parse chat Markdown into a renderable document tree",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  chatmark reply.md
  cat reply.md | chatmark - --format tree --rich
  chatmark reply.md --no-galleries --link-scheme note
  chatmark reply.md --config .chatmark.toml --format text
""",
        )

        parser.add_argument("input", nargs="?", default="-", help="Input file (default or '-': read stdin)")
        parser.add_argument(
            "--format",
            "-f",
            dest="output_format",
            choices=["json", "tree", "text"],
            default="json",
            help="Output format (default: json)",
        )
        parser.add_argument(
            "--indent", type=int, default=None, metavar="N", help="Indentation for JSON output (default: compact)"
        )
        parser.add_argument("--config", type=str, metavar="PATH", help="Configuration file (TOML, YAML or JSON)")
        parser.add_argument("--rich", action="store_true", help="Draw tree output with rich when stdout is a TTY")
        parser.add_argument(
            "--force-rich",
            action="store_true",
            help="Use rich output even when stdout is piped or redirected",
        )
        parser.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            default="WARNING",
            help="Set logging level (default: WARNING)",
        )
        parser.add_argument(
            "--log-file",
            type=str,
            metavar="PATH",
            help="Write log messages to specified file in addition to console output",
        )
        parser.add_argument(
            "--trace",
            action="store_true",
            help="Enable trace mode with debug logging, timestamps and logger names",
        )

        from chatmark import __version__

        parser.add_argument("--version", "-V", action="version", version=f"chatmark {__version__}")

        self.add_options_class_arguments(parser, group_name="Parser options")
        return parser

    def map_args_to_options(
        self, parsed_args: argparse.Namespace, config: Optional[Dict[str, Any]] = None
    ) -> ChatMarkdownOptions:
        """Combine configuration file values and CLI flags into options.

        CLI flags override configuration values, which override defaults.

        Raises
        ------
        argparse.ArgumentTypeError
            If the combined values fail option validation

        """
        values: Dict[str, Any] = dict(config or {})
        for dest in self.dest_to_cli_flag:
            if hasattr(parsed_args, dest):
                values[dest] = getattr(parsed_args, dest)

        try:
            return self.options_class(**values)
        except (TypeError, ValueError) as e:
            raise argparse.ArgumentTypeError(f"Invalid parser options: {e}") from e


def create_parser() -> argparse.ArgumentParser:
    """Create the chatmark argument parser."""
    return DynamicCLIBuilder().build_parser()


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code."""
    if isinstance(exception, (ParsingError, OSError)):
        return EXIT_FILE_ERROR
    # Options, config and argument problems
    return EXIT_VALIDATION_ERROR


__all__ = [
    "EXIT_FILE_ERROR",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "DynamicCLIBuilder",
    "create_parser",
    "get_exit_code_for_exception",
    "positive_int",
]
