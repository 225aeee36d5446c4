"""Command-line interface for the chatmark parser.

Reads chat Markdown from a file or stdin, parses it and prints the
resulting document tree as JSON (the renderer wire format), as an outline,
or as flattened plain text.

Configuration files (.chatmark.toml, .chatmark.yaml, .chatmark.yml,
.chatmark.json, or a [tool.chatmark] table in pyproject.toml) are discovered
from the working directory upwards, then in the home directory. CLI flags
override configuration values.

Examples
--------
Print the wire format::

    $ chatmark reply.md --indent 2

Show the tree of a streamed reply::

    $ cat reply.md | chatmark --format tree --rich

Disable heuristics::

    $ chatmark reply.md --no-references --no-diagram-interception

"""

import argparse
import logging
import sys
from pathlib import Path

from chatmark.cli.builder import EXIT_SUCCESS, DynamicCLIBuilder, create_parser, get_exit_code_for_exception
from chatmark.cli.config import load_config_with_priority
from chatmark.cli.output import write_document
from chatmark.exceptions import ParsingError
from chatmark.logging_utils import configure_logging
from chatmark.parsers.markdown import ChatMarkdownParser

logger = logging.getLogger(__name__)

__all__ = [
    "main",
    "DynamicCLIBuilder",
    "create_parser",
]


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging based on command-line arguments.

    ``--trace`` takes precedence over ``--log-level``.

    """
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(input_arg: str) -> str | Path:
    """Return stdin text for ``-`` or the input path otherwise."""
    if input_arg == "-":
        return sys.stdin.read()
    path = Path(input_arg)
    if not path.is_file():
        raise ParsingError(f"Input file does not exist: {input_arg}", parsing_stage="input_loading", source=input_arg)
    return path


def main(args: list[str] | None = None) -> int:
    """Execute the chatmark CLI.

    Parameters
    ----------
    args : list of str, optional
        Command-line arguments (defaults to ``sys.argv[1:]``)

    Returns
    -------
    int
        Exit code: 0 on success, 2 for configuration or argument errors,
        3 when the input cannot be read

    """
    builder = DynamicCLIBuilder()
    parser = builder.build_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        config = load_config_with_priority(parsed_args.config)
        options = builder.map_args_to_options(parsed_args, config)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    try:
        source = _read_input(parsed_args.input)
        document = ChatMarkdownParser(options).parse(source)
    except ParsingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    logger.debug("Parsed %d top-level blocks", len(document.children))
    write_document(document, parsed_args)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
