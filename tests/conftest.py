"""Pytest configuration and shared fixtures for the chatmark test suite.

This module registers Hypothesis profiles and custom markers, and provides
sample messages used across the suite.
"""

import logging
import os

import pytest

from chatmark.options import ChatMarkdownOptions
from chatmark.parsers import ChatMarkdownParser

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def parser() -> ChatMarkdownParser:
    """Provide a parser with default options."""
    return ChatMarkdownParser(ChatMarkdownOptions())


@pytest.fixture
def sample_message() -> str:
    """Provide a chat reply mixing core Markdown and extension fences.

    Returns
    -------
    str
        Message text used by integration-style tests.

    """
    return """# Project summary

The launch went well, see blockid:42 for details.

- Planning
  - Budget
- Delivery

- [x] Write notes
- [ ] Send follow-up

```timeline
2024-01-01 | Kickoff | First meeting
2024-03-15 | [Launch](orca-block:77) | v1 release | milestone
```

| Name | Status |
|:-----|-------:|
| Alpha | done |

> Quoted **remark**
"""


@pytest.fixture
def restore_root_logging():
    """Remove the console and file handlers a CLI run adds to the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        # pytest's own capture handlers are subclasses and stay in place
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
