"""Shared fixtures for CLI tests.

Provides temporary source trees: an empty one, a clean one, and one with
known critical and high findings.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def empty_dir(tmp_path: Path) -> Path:
    """A directory with no code files."""
    root = tmp_path / "empty"
    root.mkdir()
    (root / "README.md").write_text("# Nothing here\n")
    return root


@pytest.fixture
def clean_project(tmp_path: Path) -> Path:
    """A directory whose only code file triggers no rule."""
    root = tmp_path / "clean"
    root.mkdir()
    (root / "util.py").write_text("def add(a, b):\n    return a + b\n")
    return root


@pytest.fixture
def vulnerable_project(tmp_path: Path) -> Path:
    """A directory with one critical and one high finding.

    - ``config.js`` hardcodes a password (critical, V2.1.1).
    - ``client.js`` calls a plain-HTTP endpoint (high, V9.1.1).
    """
    root = tmp_path / "vulnerable"
    root.mkdir()
    (root / "config.js").write_text('const password = "SuperSecret123";\n')
    (root / "client.js").write_text("fetch('http://api.prod.net/items');\n")
    return root
