"""Context-window heuristics shared by the contextual detectors.

Both checks are textual approximations, not data-flow analysis:

- ``is_user_input`` holds when the window mentions the variable name *and*
  contains any taint-source signature. It does not verify that the variable
  is actually bound by the tainted expression.
- ``is_sanitized`` holds when the window contains any mitigation signature,
  wherever it appears.

They trade soundness for a low false-positive rate on typical web code.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

# Signatures of externally controlled data (request fields, interactive
# input, DOM values, argv, environment).
TAINT_SOURCES: tuple[re.Pattern[str], ...] = (
    re.compile(r"req\.(body|query|params|headers)"),
    re.compile(r"request\.(form|args|values|json|data)"),
    re.compile(r"input\("),
    re.compile(r"scanf|gets|fgets"),
    re.compile(r"readLine|readline"),
    re.compile(r"document\.(getElementById|querySelector).*\.value"),
    re.compile(r"prompt\("),
    re.compile(r"process\.argv"),
    re.compile(r"sys\.argv"),
    re.compile(r"os\.Getenv"),
)

# Signatures of sanitization, escaping, or parameterized queries.
MITIGATIONS: tuple[re.Pattern[str], ...] = (
    re.compile(r"escape|sanitize|clean|validate|filter", re.IGNORECASE),
    re.compile(r"DOMPurify"),
    re.compile(r"prepared.*statement", re.IGNORECASE),
    re.compile(r"parameterized", re.IGNORECASE),
    re.compile(r"\.prepare\("),
    re.compile(r"\?\s*,"),  # positional placeholders
    re.compile(r":\w+"),  # named placeholders
)


def context_window(lines: Sequence[str], index: int, half_width: int) -> str:
    """Return the lines around ``index`` joined with newlines.

    The window spans ``half_width`` lines on each side of the 0-based
    ``index``, clipped at the start and end of the file. A half-width of 0
    yields the line itself.
    """
    start = max(0, index - half_width)
    end = min(len(lines), index + half_width + 1)
    return "\n".join(lines[start:end])


def is_user_input(context: str, var_name: str) -> bool:
    """Check whether ``var_name`` plausibly carries user-controlled data."""
    if var_name not in context:
        return False
    return any(pattern.search(context) for pattern in TAINT_SOURCES)


def is_sanitized(context: str) -> bool:
    """Check whether the window shows any sign of mitigation."""
    return any(pattern.search(context) for pattern in MITIGATIONS)
