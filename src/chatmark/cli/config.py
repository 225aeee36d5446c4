#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the chatmark CLI.

This module finds configuration files, loads them from TOML, YAML or JSON,
and validates their keys against ``ChatMarkdownOptions``.
"""

import argparse
import json
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from chatmark.constants import CONFIG_FILENAMES, PYPROJECT_TOOL_SECTION
from chatmark.options.markdown import ChatMarkdownOptions


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the [tool.chatmark] section from a pyproject.toml file.

    Returns
    -------
    dict
        The section, or an empty dict if the file has none

    Raises
    ------
    argparse.ArgumentTypeError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading pyproject.toml {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Walks up from ``start_dir`` to the filesystem root. In each directory the
    dedicated files (.chatmark.toml, .chatmark.yaml, .chatmark.yml,
    .chatmark.json) are checked first, then a pyproject.toml that carries a
    [tool.chatmark] section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        First configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except argparse.ArgumentTypeError:
                # Invalid pyproject.toml, keep searching
                pass

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    Parent directories are searched first (see ``find_config_in_parents``),
    then the dedicated config files in the user's home directory.

    Returns
    -------
    Path or None
        Path to the discovered config file

    """
    found = find_config_in_parents(start_dir)
    if found:
        return found

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, parsed, or has an unsupported format

    Examples
    --------
    >>> config = load_config_file(".chatmark.toml")
    >>> config.get("block_link_scheme")
    'orca-block'

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        return _load_pyproject_section(config_path)
    if ext == ".toml":
        return _load_toml_config(config_path)
    if ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)
    if ext == ".json":
        return _load_json_config(config_path)
    raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml")


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading TOML config {config_path}: {e}") from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid JSON in config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading JSON config {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(f"JSON config file must contain an object, got {type(config).__name__}")
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise argparse.ArgumentTypeError(f"Invalid YAML in config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading YAML config {config_path}: {e}") from e

    # An empty YAML file loads as None
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(f"YAML config file must contain a mapping, got {type(config).__name__}")
    return config


def normalize_config_keys(config: Dict[str, Any]) -> Dict[str, Any]:
    """Convert kebab-case keys to option field names and reject unknown keys.

    Raises
    ------
    argparse.ArgumentTypeError
        If a key does not name a ``ChatMarkdownOptions`` field

    """
    known = ChatMarkdownOptions.field_names()
    normalized: Dict[str, Any] = {}
    for key, value in config.items():
        name = str(key).replace("-", "_")
        if name not in known:
            raise argparse.ArgumentTypeError(
                f"Unknown configuration key '{key}'. Valid keys: {', '.join(sorted(known))}"
            )
        normalized[name] = value
    return normalized


def load_config_with_priority(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    An explicit ``--config`` path wins over discovery. Keys are normalized
    with ``normalize_config_keys``.

    Returns
    -------
    dict
        Validated configuration (empty when no file is found)

    Raises
    ------
    argparse.ArgumentTypeError
        If a config file is found or given but cannot be loaded

    """
    if explicit_path:
        return normalize_config_keys(load_config_file(explicit_path))

    discovered_path = discover_config_file()
    if discovered_path:
        return normalize_config_keys(load_config_file(discovered_path))

    return {}


__all__ = [
    "discover_config_file",
    "find_config_in_parents",
    "load_config_file",
    "load_config_with_priority",
    "normalize_config_keys",
]
