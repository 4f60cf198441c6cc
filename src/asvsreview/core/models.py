"""Data models for a scan: FileRecord, Finding, LanguageStat, FrameworkInfo, AnalysisResult.

These are the input and output shapes of the detection engine. They are
kept apart from the matchers so that the CLI and report generator can
import them without pulling in the rule patterns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from asvsreview.core.rules.models import SEVERITY_ORDER, Rule, Severity


# ---------------------------------------------------------------------------
# FileRecord: One input file
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileRecord:
    """A single source file handed to the engine.

    Attributes:
        path: Forward-slash separated path relative to the bundle root.
        content: Decoded file text.
    """

    path: str
    content: str


# ---------------------------------------------------------------------------
# Finding: A single rule match
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Finding:
    """One occurrence of a rule matching a file line.

    Attributes:
        rule: The catalog rule that produced the finding.
        file: Path of the file, as given in the ``FileRecord``.
        line: 1-based line number.
        code: The full source line, stripped.
        match: The matched substring, stripped.
    """

    rule: Rule
    file: str
    line: int
    code: str
    match: str

    @property
    def severity(self) -> Severity:
        return self.rule.severity

    @property
    def category(self) -> str:
        return self.rule.category

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule.id,
            "title": self.rule.title,
            "category": self.rule.category,
            "severity": self.rule.severity.label,
            "level": self.rule.level,
            "standard_tags": list(self.rule.standard_tags),
            "file": self.file,
            "line": self.line,
            "code": self.code,
            "match": self.match,
        }


# ---------------------------------------------------------------------------
# Aggregate statistics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LanguageStat:
    """Share of scanned lines written in one language."""

    language: str
    files: int
    lines: int
    percentage: float


@dataclass(frozen=True)
class FrameworkInfo:
    """A detected framework or library.

    ``confidence`` is ``"high"`` when a config file or manifest names the
    framework, ``"medium"`` or ``"low"`` when only a content signature hit.
    """

    name: str
    confidence: str


def empty_severity_counts() -> dict[Severity, int]:
    """Return a zero count for every severity, critical first."""
    return {severity: 0 for severity in SEVERITY_ORDER}


# ---------------------------------------------------------------------------
# AnalysisResult: Complete output of a scan
# ---------------------------------------------------------------------------


@dataclass
class AnalysisResult:
    """The complete result of scanning one bundle of files.

    Attributes:
        total_files: Number of code files scanned.
        total_findings: Length of ``findings``.
        findings: All findings, most severe first.
        severity_counts: Findings per severity (all four keys present).
        category_counts: Findings per rule category.
        language_stats: Per-language line statistics, largest first.
        frameworks: Detected frameworks, most confident first.
        total_lines: Lines across all code files.
    """

    total_files: int
    total_findings: int
    findings: list[Finding] = field(default_factory=list)
    severity_counts: dict[Severity, int] = field(default_factory=empty_severity_counts)
    category_counts: dict[str, int] = field(default_factory=dict)
    language_stats: list[LanguageStat] = field(default_factory=list)
    frameworks: list[FrameworkInfo] = field(default_factory=list)
    total_lines: int = 0

    @property
    def is_clean(self) -> bool:
        """True if the scan produced no findings."""
        return self.total_findings == 0

    @property
    def max_severity(self) -> Severity | None:
        """Return the highest severity among all findings, or None if clean."""
        if not self.findings:
            return None
        return max(f.severity for f in self.findings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "total_findings": self.total_findings,
            "severity_counts": {
                severity.label: count for severity, count in self.severity_counts.items()
            },
            "category_counts": dict(self.category_counts),
            "language_stats": [
                {
                    "language": stat.language,
                    "files": stat.files,
                    "lines": stat.lines,
                    "percentage": round(stat.percentage, 2),
                }
                for stat in self.language_stats
            ],
            "frameworks": [
                {"name": fw.name, "confidence": fw.confidence}
                for fw in self.frameworks
            ],
            "findings": [f.to_dict() for f in self.findings],
        }
