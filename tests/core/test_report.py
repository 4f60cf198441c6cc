"""Tests for Markdown report rendering.

Verifies:
    - Section order and omission of empty sections.
    - Thousands separators in totals.
    - Grouping by severity rank, then category.
    - The success message on a clean scan.
    - Code spans survive embedded backticks.
"""

from __future__ import annotations

from asvsreview.core.analyzer import CodeAnalyzer
from asvsreview.core.models import AnalysisResult, FileRecord, FrameworkInfo, LanguageStat
from asvsreview.core.report import (
    NO_FINDINGS_MESSAGE,
    REPORT_TITLE,
    generate_report,
    group_findings,
)
from asvsreview.core.rules import Severity


def _report_for(analyzer: CodeAnalyzer, *records: FileRecord) -> str:
    return generate_report(analyzer.analyze(list(records)))


class TestReportStructure:
    """Tests for section layout."""

    def test_title_and_totals(self, analyzer: CodeAnalyzer, vulnerable_js: FileRecord) -> None:
        report = _report_for(analyzer, vulnerable_js)
        lines = report.split("\n")
        assert lines[0] == REPORT_TITLE
        assert "**Total Files Analyzed:** 1" in lines
        assert "**Total Lines of Code:** 7" in lines
        assert "**Total Findings:** 2" in lines

    def test_section_order(self, analyzer: CodeAnalyzer, vulnerable_js: FileRecord) -> None:
        report = _report_for(analyzer, vulnerable_js)
        positions = [
            report.index(heading)
            for heading in (
                "## Language Breakdown",
                "## Frameworks & Libraries Detected",
                "## Severity Summary",
                "## Category Summary",
                "## Detailed Findings",
            )
        ]
        assert positions == sorted(positions)

    def test_severity_summary_lists_all_four(
        self, analyzer: CodeAnalyzer, vulnerable_js: FileRecord
    ) -> None:
        report = _report_for(analyzer, vulnerable_js)
        assert "- Critical: 2\n- High: 0\n- Medium: 0\n- Low: 0" in report

    def test_language_and_framework_lines(
        self, analyzer: CodeAnalyzer, vulnerable_js: FileRecord
    ) -> None:
        report = _report_for(analyzer, vulnerable_js)
        assert "- JavaScript: 100.0% (1 file, 7 lines)" in report
        assert "- Express (medium confidence)" in report

    def test_thousands_separator(self) -> None:
        result = AnalysisResult(
            total_files=3,
            total_findings=0,
            language_stats=[LanguageStat("Python", 3, 12345, 100.0)],
            total_lines=12345,
        )
        report = generate_report(result)
        assert "**Total Lines of Code:** 12,345" in report
        assert "- Python: 100.0% (3 files, 12,345 lines)" in report


class TestCleanReport:
    """A scan without findings."""

    def test_success_message_replaces_details(
        self, analyzer: CodeAnalyzer, clean_py: FileRecord
    ) -> None:
        report = _report_for(analyzer, clean_py)
        assert NO_FINDINGS_MESSAGE in report
        assert "No issues found" in report
        assert "## Detailed Findings" not in report
        assert "## Category Summary" not in report

    def test_empty_sections_omitted(self) -> None:
        report = generate_report(AnalysisResult(total_files=0, total_findings=0))
        assert "## Language Breakdown" not in report
        assert "## Frameworks & Libraries Detected" not in report
        assert "## Severity Summary" in report


class TestDetailedFindings:
    """Tests for the grouped finding listing."""

    def test_group_headings_and_entries(
        self, analyzer: CodeAnalyzer, vulnerable_js: FileRecord
    ) -> None:
        report = _report_for(analyzer, vulnerable_js)
        assert "### [CRITICAL] Authentication\n**1 finding**" in report
        assert "#### V2.1.1: Hardcoded Credentials" in report
        assert "- **File:** `src/routes/users.js`" in report
        assert "- **Line:** 2" in report
        assert '- **Code:** `const password = "SuperSecret123";`' in report

    def test_groups_ordered_by_rank_then_category(self, analyzer: CodeAnalyzer) -> None:
        source = (
            "fetch('http://api.prod.net/x');\n"
            "console.log('token', token);\n"
            'query("SELECT * FROM t WHERE id=" + req.query.id);\n'
            'const password = "SuperSecret123";\n'
        )
        result = analyzer.analyze([FileRecord("app.js", source)])
        groups = [(severity, category) for severity, category, _ in group_findings(result.findings)]
        assert groups == [
            (Severity.CRITICAL, "Authentication"),
            (Severity.CRITICAL, "Input Validation"),
            (Severity.HIGH, "Communications"),
            (Severity.MEDIUM, "Error Handling"),
        ]

    def test_backticks_in_code(self, analyzer: CodeAnalyzer) -> None:
        source = "const url = `http://api.prod.net/${path}`;"
        report = _report_for(analyzer, FileRecord("a.js", source))
        assert "- **Code:** `` const url = `http://api.prod.net/${path}`; ``" in report

    def test_report_is_deterministic(
        self, analyzer: CodeAnalyzer, vulnerable_js: FileRecord
    ) -> None:
        result = analyzer.analyze([vulnerable_js])
        assert generate_report(result) == generate_report(result)


def test_frameworks_section_uses_confidence() -> None:
    result = AnalysisResult(
        total_files=1,
        total_findings=0,
        frameworks=[FrameworkInfo("Django", "high")],
    )
    assert "- Django (high confidence)" in generate_report(result)
