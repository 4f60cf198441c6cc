"""Shared fixtures for asvs-review tests."""

from __future__ import annotations

import pytest

from asvsreview.config import ScanConfig
from asvsreview.core.analyzer import CodeAnalyzer
from asvsreview.core.models import FileRecord


@pytest.fixture
def analyzer() -> CodeAnalyzer:
    """Analyzer with the default configuration (ASVS level 3)."""
    return CodeAnalyzer(ScanConfig())


@pytest.fixture
def vulnerable_js() -> FileRecord:
    """A small Express handler with one hardcoded secret and one SQL injection."""
    return FileRecord(
        path="src/routes/users.js",
        content=(
            "const express = require('express');\n"
            "const password = \"SuperSecret123\";\n"
            "\n"
            "function getUser(req, res) {\n"
            "  db.query(\"SELECT * FROM users WHERE id=\" + req.query.id);\n"
            "}\n"
        ),
    )


@pytest.fixture
def clean_py() -> FileRecord:
    """A harmless Python module."""
    return FileRecord(
        path="app/util.py",
        content=(
            "def add(a, b):\n"
            "    return a + b\n"
            "\n"
            "\n"
            "def greet(name):\n"
            "    return 'Hello ' + name\n"
        ),
    )
