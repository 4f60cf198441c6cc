"""Data models for the rule catalog: Severity, DetectionStrategy, Rule.

These types are shared by the pattern matcher, the contextual detectors,
the aggregator and the report generator. They carry no matching logic so
that output formatters can import them without pulling in the catalog.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, IntEnum


# A `//` comment marker followed only by whitespace up to the end of the searched text.
_COMMENT_MARKER = re.compile(r"//\s*\Z")


# ---------------------------------------------------------------------------
# Severity: Ordered finding severity levels
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Four-level severity scale for rules and findings.

    The integer encoding enables direct comparison: LOW < MEDIUM < HIGH < CRITICAL.
    Reports list the most severe findings first, so sorting uses ``rank``
    (0 for CRITICAL through 3 for LOW) rather than the raw value.
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """Lower-case name used in reports and JSON output."""
        return self.name.lower()

    @property
    def rank(self) -> int:
        """Sort rank: 0 for CRITICAL, 3 for LOW."""
        return Severity.CRITICAL - self

    @classmethod
    def from_label(cls, label: str) -> Severity:
        """Parse a case-insensitive severity label such as ``"high"``."""
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {label!r}") from None


# Critical first; the order every summary uses.
SEVERITY_ORDER: tuple[Severity, ...] = tuple(sorted(Severity, key=lambda s: s.rank))


# ---------------------------------------------------------------------------
# DetectionStrategy: which pass owns a rule
# ---------------------------------------------------------------------------


class DetectionStrategy(Enum):
    """How a rule is detected.

    ``PATTERN`` rules are matched line by line by the pattern matcher.
    ``CONTEXTUAL`` rules are owned by a contextual detector, which uses the
    rule's pattern as its trigger and then inspects surrounding lines. A rule
    is owned by exactly one strategy, so the two passes never report the
    same rule id.
    """

    PATTERN = "pattern"
    CONTEXTUAL = "contextual"


# ---------------------------------------------------------------------------
# Rule: A single catalog entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rule:
    """A named detection rule mapped to an ASVS requirement.

    Attributes:
        id: ASVS requirement identifier, e.g. ``"V5.1.1"``. Stable.
        category: ASVS chapter name used for grouping (free text).
        title: Short human-readable rule name.
        description: What the rule flags and why it matters.
        severity: Severity of every finding the rule produces.
        pattern: Compiled regex. For contextual rules this is the
            detector's trigger expression.
        level: ASVS verification level (1, 2 or 3).
        standard_tags: OWASP Top 10 (2021) references.
        strategy: Which detection pass owns the rule.
        skip_after_comment: Ignore matches that directly follow a ``//``
            comment marker (plus any whitespace).
    """

    id: str
    category: str
    title: str
    description: str
    severity: Severity
    pattern: re.Pattern[str]
    level: int
    standard_tags: tuple[str, ...]
    strategy: DetectionStrategy = DetectionStrategy.PATTERN
    skip_after_comment: bool = False

    @property
    def is_contextual(self) -> bool:
        return self.strategy is DetectionStrategy.CONTEXTUAL

    def finditer(self, line: str) -> Iterator[re.Match[str]]:
        """Yield the non-overlapping matches of ``pattern`` on one line."""
        for match in self.pattern.finditer(line):
            if self.skip_after_comment and _COMMENT_MARKER.search(line, 0, match.start()):
                continue
            yield match
