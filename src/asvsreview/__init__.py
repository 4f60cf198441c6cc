"""asvs-review: First-pass security code review mapped to OWASP ASVS 4.0."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
