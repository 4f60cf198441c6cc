"""Aggregation engine: runs both detection passes and builds the result.

``CodeAnalyzer.analyze`` proceeds in four steps:

1. **Contextual pass** -- the context-aware detectors run over all code
   files (detector by detector, file by file, line by line).
2. **Pattern pass** -- every remaining rule is matched line by line
   (file by file, rule by rule, line by line). Contextual rule ids are
   excluded, so each rule id comes from exactly one pass.
3. **Merge** -- contextual findings followed by pattern findings, stably
   sorted by severity (critical first); counts are recomputed from the
   merged list.
4. **Statistics** -- per-language line counts over code files and
   framework detection over all files.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from asvsreview.config import ScanConfig
from asvsreview.core.analyzer.frameworks import detect_frameworks
from asvsreview.core.analyzer.languages import compute_language_stats
from asvsreview.core.contextual import run_contextual_scan
from asvsreview.core.matcher import is_code_file, run_pattern_scan
from asvsreview.core.models import AnalysisResult, FileRecord, Finding, empty_severity_counts
from asvsreview.core.rules import Rule, Severity, contextual_rule_ids, rules_for_level

logger = logging.getLogger(__name__)


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Stable sort by severity, critical first."""
    return sorted(findings, key=lambda f: f.severity.rank)


def count_findings(findings: Sequence[Finding]) -> tuple[dict[Severity, int], dict[str, int]]:
    """Count findings per severity and per category.

    Categories appear in order of first occurrence in ``findings``.
    """
    severity_counts = empty_severity_counts()
    category_counts: dict[str, int] = {}
    for finding in findings:
        severity_counts[finding.severity] += 1
        category_counts[finding.category] = category_counts.get(finding.category, 0) + 1
    return severity_counts, category_counts


class CodeAnalyzer:
    """Scans a bundle of files against the ASVS rule catalog.

    The analyzer holds only its configuration; each ``analyze()`` call is
    independent and deterministic for identical input.

    Usage::

        analyzer = CodeAnalyzer(ScanConfig(level=2))
        result = analyzer.analyze([FileRecord("app.js", source)])
        for finding in result.findings:
            print(f"[{finding.severity.label}] {finding.rule.id} {finding.file}:{finding.line}")
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()

    def select_rules(self) -> list[Rule]:
        """Return the catalog rules for the configured ASVS level."""
        return rules_for_level(self.config.level)

    def analyze(
        self,
        files: Sequence[FileRecord],
        rules: Sequence[Rule] | None = None,
    ) -> AnalysisResult:
        """Scan ``files`` and return the aggregated result.

        Args:
            files: Input records; only code files are scanned and counted,
                but all files feed framework detection.
            rules: Rules to apply. Defaults to the configured level's rules.

        Returns:
            An ``AnalysisResult`` with findings sorted critical first.
        """
        if rules is None:
            rules = self.select_rules()

        code_files = [record for record in files if is_code_file(record.path)]
        logger.debug(
            "Scanning %d code files (%d inputs) with %d rules",
            len(code_files), len(files), len(rules),
        )

        contextual = run_contextual_scan(
            code_files,
            rules,
            context_widths=self.config.effective_context_widths(),
            credential_filters=self.config.enabled_credential_filters(),
        )
        owned = contextual_rule_ids(rules)
        pattern = run_pattern_scan(
            code_files,
            [rule for rule in rules if rule.id not in owned],
        )
        logger.debug(
            "Contextual pass: %d findings, pattern pass: %d findings",
            len(contextual), len(pattern),
        )

        findings = sort_findings([*contextual, *pattern])
        severity_counts, category_counts = count_findings(findings)
        language_stats, total_lines = compute_language_stats(code_files)

        return AnalysisResult(
            total_files=len(code_files),
            total_findings=len(findings),
            findings=findings,
            severity_counts=severity_counts,
            category_counts=category_counts,
            language_stats=language_stats,
            frameworks=detect_frameworks(files, strict_manifests=self.config.strict_manifests),
            total_lines=total_lines,
        )


def filter_by_severity(result: AnalysisResult, threshold: Severity) -> AnalysisResult:
    """Return a copy of ``result`` keeping findings at or above ``threshold``.

    Severity and category counts are recomputed, so the count invariants
    still hold for the filtered result.
    """
    kept = [f for f in result.findings if f.severity >= threshold]
    severity_counts, category_counts = count_findings(kept)
    return AnalysisResult(
        total_files=result.total_files,
        total_findings=len(kept),
        findings=kept,
        severity_counts=severity_counts,
        category_counts=category_counts,
        language_stats=list(result.language_stats),
        frameworks=list(result.frameworks),
        total_lines=result.total_lines,
    )


def analyze_files(
    files: Sequence[FileRecord],
    config: ScanConfig | None = None,
) -> AnalysisResult:
    """Convenience wrapper: ``CodeAnalyzer(config).analyze(files)``."""
    return CodeAnalyzer(config).analyze(files)
