#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for configuration file discovery and loading."""

import argparse
import json

import pytest

from chatmark.cli.config import (
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_config_with_priority,
    normalize_config_keys,
)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the home directory at an empty temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.mark.unit
@pytest.mark.cli
class TestLoadConfigFile:
    """Tests for loading each supported format."""

    def test_toml(self, tmp_path) -> None:
        """Test a TOML config file."""
        path = tmp_path / ".chatmark.toml"
        path.write_text('block-link-scheme = "note"\nparse-tables = false\n', encoding="utf-8")

        assert load_config_file(path) == {"block-link-scheme": "note", "parse-tables": False}

    def test_yaml(self, tmp_path) -> None:
        """Test a YAML config file with a list value."""
        path = tmp_path / ".chatmark.yaml"
        path.write_text("reference_keywords:\n  - note\n  - card\n", encoding="utf-8")

        assert load_config_file(path) == {"reference_keywords": ["note", "card"]}

    def test_empty_yaml(self, tmp_path) -> None:
        """Test that an empty YAML file is an empty config."""
        path = tmp_path / ".chatmark.yml"
        path.write_text("", encoding="utf-8")

        assert load_config_file(path) == {}

    def test_json(self, tmp_path) -> None:
        """Test a JSON config file."""
        path = tmp_path / ".chatmark.json"
        path.write_text(json.dumps({"max_quote_depth": 4}), encoding="utf-8")

        assert load_config_file(str(path)) == {"max_quote_depth": 4}

    def test_pyproject_section(self, tmp_path) -> None:
        """Test the [tool.chatmark] table of pyproject.toml."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.chatmark]\nparse-extensions = false\n', encoding="utf-8")

        assert load_config_file(path) == {"parse-extensions": False}

    @pytest.mark.parametrize(
        "filename,content",
        [
            (".chatmark.json", "[1, 2]"),
            (".chatmark.json", "{not json"),
            (".chatmark.yaml", "- a\n- b\n"),
            (".chatmark.toml", "= broken"),
            ("config.ini", "[section]"),
        ],
    )
    def test_invalid_files(self, tmp_path, filename: str, content: str) -> None:
        """Test malformed content and unsupported formats."""
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")

        with pytest.raises(argparse.ArgumentTypeError):
            load_config_file(path)

    def test_missing_file(self, tmp_path) -> None:
        """Test a path that does not exist."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(tmp_path / "nope.toml")

    def test_directory(self, tmp_path) -> None:
        """Test a path that is a directory."""
        with pytest.raises(argparse.ArgumentTypeError, match="not a file"):
            load_config_file(tmp_path)


@pytest.mark.unit
@pytest.mark.cli
class TestNormalizeConfigKeys:
    """Tests for key normalization."""

    def test_kebab_case_converted(self) -> None:
        """Test that kebab-case keys map to option fields."""
        assert normalize_config_keys({"block-link-scheme": "note", "parse_tables": False}) == {
            "block_link_scheme": "note",
            "parse_tables": False,
        }

    def test_unknown_key_rejected(self) -> None:
        """Test that typos are reported."""
        with pytest.raises(argparse.ArgumentTypeError, match="Unknown configuration key 'parse-table'"):
            normalize_config_keys({"parse-table": False})


@pytest.mark.unit
@pytest.mark.cli
class TestConfigDiscovery:
    """Tests for locating configuration files."""

    def test_found_in_parent(self, tmp_path) -> None:
        """Test that a config in a parent directory is found."""
        config = tmp_path / ".chatmark.toml"
        config.write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_in_parents(nested) == config.resolve()

    def test_dedicated_file_before_pyproject(self, tmp_path) -> None:
        """Test that dedicated files win in the same directory."""
        (tmp_path / "pyproject.toml").write_text("[tool.chatmark]\nparse-tables = false\n", encoding="utf-8")
        dedicated = tmp_path / ".chatmark.json"
        dedicated.write_text("{}", encoding="utf-8")

        assert find_config_in_parents(tmp_path) == dedicated.resolve()

    def test_pyproject_without_section_skipped(self, tmp_path) -> None:
        """Test that a pyproject.toml without our table is not a config."""
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "outer"\n[tool.chatmark]\nparse-tables = false\n', encoding="utf-8"
        )
        inner = tmp_path / "inner"
        inner.mkdir()
        (inner / "pyproject.toml").write_text('[project]\nname = "inner"\n', encoding="utf-8")

        assert find_config_in_parents(inner) == (tmp_path / "pyproject.toml").resolve()

    def test_home_fallback(self, tmp_path, isolated_home) -> None:
        """Test the home directory fallback."""
        work = tmp_path / "work"
        work.mkdir()
        home_config = isolated_home / ".chatmark.yaml"
        home_config.write_text("parse_tables: false\n", encoding="utf-8")

        found = discover_config_file(work)

        # A config further up the real tree would shadow the home file
        if found != home_config:
            pytest.skip("A configuration file exists above the temporary directory")
        assert found == home_config


@pytest.mark.unit
@pytest.mark.cli
class TestLoadConfigWithPriority:
    """Tests for the combined loading entry point."""

    def test_explicit_path_wins(self, tmp_path, monkeypatch, isolated_home) -> None:
        """Test that --config beats discovery."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".chatmark.toml").write_text("parse-tables = false\n", encoding="utf-8")
        explicit = tmp_path / "explicit.json"
        explicit.write_text('{"max-quote-depth": 3}', encoding="utf-8")

        assert load_config_with_priority(str(explicit)) == {"max_quote_depth": 3}

    def test_discovered_config(self, tmp_path, monkeypatch, isolated_home) -> None:
        """Test discovery from the working directory."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".chatmark.toml").write_text("parse-tables = false\n", encoding="utf-8")

        assert load_config_with_priority() == {"parse_tables": False}

    def test_unknown_key_in_file(self, tmp_path) -> None:
        """Test that invalid keys in a file are reported."""
        path = tmp_path / "bad.toml"
        path.write_text("colour = true\n", encoding="utf-8")

        with pytest.raises(argparse.ArgumentTypeError, match="colour"):
            load_config_with_priority(str(path))
