"""Property-based tests for the aggregation invariants.

Verifies, for arbitrary bundles assembled from vulnerable and harmless
source lines:
- Determinism: identical input yields identical results and reports.
- Count invariant: severity and category counts sum to total_findings.
- Sort invariant: findings are ordered by severity rank.
- Mutual exclusion: contextual rule ids only come from the contextual pass.
- Percentage invariant: language shares sum to 100 when any line is scanned.
- Threshold filtering keeps the count invariant.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from asvsreview.config import ScanConfig
from asvsreview.core.analyzer import CodeAnalyzer, filter_by_severity
from asvsreview.core.contextual import run_contextual_scan
from asvsreview.core.matcher import run_pattern_scan
from asvsreview.core.models import FileRecord
from asvsreview.core.report import generate_report
from asvsreview.core.rules import Severity, all_rules, contextual_rule_ids

EVAL = "ev" + "al"

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

SNIPPETS = [
    'const password = "SuperSecret123";',
    'db.query("SELECT * FROM t WHERE id=" + req.query.id);',
    'exec("ping " + host);',
    "const host = req.query.host;",
    "out.innerHTML = comment;",
    "const comment = document.getElementById('c').value;",
    f"{EVAL}(userCode);",
    f"model.{EVAL}();",
    "fetch('http://api.prod.net/items');",
    "res.setHeader('Access-Control-Allow-Origin', '*');",
    "console.log('token', token);",
    "const DEBUG = 'true';",
    "digest = md5(data)",
    "const stmt = db.prepare(sql);",
    "return a + b;",
    "",
    "// nothing to see here",
]

EXTENSIONS = [".js", ".py", ".ts", ".go", ".md", ".txt", ".yaml"]

line_lists = st.lists(st.sampled_from(SNIPPETS), min_size=0, max_size=15)


@st.composite
def file_records(draw: st.DrawFn) -> FileRecord:
    """Generate a FileRecord with a random extension and snippet lines."""
    stem = draw(st.sampled_from(["app", "lib/util", "src/db", "ui/view"]))
    ext = draw(st.sampled_from(EXTENSIONS))
    lines = draw(line_lists)
    return FileRecord(path=stem + ext, content="\n".join(lines))


bundles = st.lists(file_records(), min_size=0, max_size=6)
levels = st.sampled_from([1, 2, 3])

ANALYZER = CodeAnalyzer()


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


class TestDeterminism:
    """Identical input always yields identical output."""

    @given(files=bundles)
    @settings(max_examples=50)
    def test_analyze_is_deterministic(self, files: list[FileRecord]) -> None:
        first = ANALYZER.analyze(files)
        second = ANALYZER.analyze(files)
        assert first == second
        assert generate_report(first) == generate_report(second)


class TestCountInvariant:
    """Counts always agree with the findings list."""

    @given(files=bundles)
    @settings(max_examples=75)
    def test_counts_sum_to_total(self, files: list[FileRecord]) -> None:
        result = ANALYZER.analyze(files)
        assert result.total_findings == len(result.findings)
        assert sum(result.severity_counts.values()) == result.total_findings
        assert sum(result.category_counts.values()) == result.total_findings
        assert set(result.severity_counts) == set(Severity)

    @given(files=bundles, threshold=st.sampled_from(list(Severity)))
    @settings(max_examples=50)
    def test_filtered_counts_sum_to_total(
        self, files: list[FileRecord], threshold: Severity
    ) -> None:
        filtered = filter_by_severity(ANALYZER.analyze(files), threshold)
        assert sum(filtered.severity_counts.values()) == filtered.total_findings
        assert all(f.severity >= threshold for f in filtered.findings)


class TestSortInvariant:
    """Findings are ordered critical first."""

    @given(files=bundles)
    @settings(max_examples=75)
    def test_sorted_by_rank(self, files: list[FileRecord]) -> None:
        ranks = [f.severity.rank for f in ANALYZER.analyze(files).findings]
        assert ranks == sorted(ranks)


class TestMutualExclusion:
    """Each rule id is reported by exactly one pass."""

    @given(files=bundles)
    @settings(max_examples=50)
    def test_pattern_pass_never_reports_contextual_ids(
        self, files: list[FileRecord]
    ) -> None:
        owned = contextual_rule_ids()
        assert all(f.rule.id not in owned for f in run_pattern_scan(files, all_rules()))
        assert all(f.rule.id in owned for f in run_contextual_scan(files, all_rules()))


class TestPercentageInvariant:
    """Language shares cover all scanned lines."""

    @given(files=bundles)
    @settings(max_examples=75)
    def test_percentages_sum_to_hundred(self, files: list[FileRecord]) -> None:
        result = ANALYZER.analyze(files)
        if result.total_lines == 0:
            assert result.language_stats == []
        else:
            total = sum(stat.percentage for stat in result.language_stats)
            assert total == pytest.approx(100.0, abs=0.01)
            assert sum(stat.lines for stat in result.language_stats) == result.total_lines


class TestLevelMonotonicity:
    """Raising the level never removes findings."""

    @given(files=bundles, level=levels)
    @settings(max_examples=40)
    def test_higher_level_finds_superset(self, files: list[FileRecord], level: int) -> None:
        lower = CodeAnalyzer(ScanConfig(level=level)).analyze(files)
        full = CodeAnalyzer(ScanConfig(level=3)).analyze(files)
        assert lower.total_findings <= full.total_findings
