"""Markdown report rendering.

``generate_report`` is a pure function of an ``AnalysisResult``. Sections
always appear in the same order:

1. Title and totals (files, lines, findings).
2. Language breakdown (omitted if no code lines were scanned).
3. Detected frameworks (omitted if none).
4. Severity summary (always, all four severities).
5. Category summary (omitted if no findings).
6. Detailed findings, grouped by severity then category. A clean scan
   gets a short success message instead.
"""

from __future__ import annotations

from asvsreview.core.models import AnalysisResult, Finding
from asvsreview.core.rules import SEVERITY_ORDER, Severity

REPORT_TITLE = "# ASVS Security Code Review Report"
NO_FINDINGS_MESSAGE = "No issues found. None of the applied rules matched the scanned code."


def _inline_code(text: str) -> str:
    """Wrap ``text`` in a Markdown code span that survives embedded backticks."""
    if "`" in text:
        return f"`` {text} ``"
    return f"`{text}`"


def _plural(count: int, word: str) -> str:
    return f"{count:,} {word}{'' if count == 1 else 's'}"


def group_findings(findings: list[Finding]) -> list[tuple[Severity, str, list[Finding]]]:
    """Group findings by (severity, category).

    Groups are ordered critical first, then by category name; findings
    keep their order within a group.
    """
    groups: dict[tuple[Severity, str], list[Finding]] = {}
    for finding in findings:
        groups.setdefault((finding.severity, finding.category), []).append(finding)
    ordered = sorted(groups.items(), key=lambda item: (item[0][0].rank, item[0][1]))
    return [(severity, category, members) for (severity, category), members in ordered]


def _render_finding(finding: Finding) -> list[str]:
    rule = finding.rule
    return [
        f"#### {rule.id}: {rule.title}",
        f"- **Description:** {rule.description}",
        f"- **File:** {_inline_code(finding.file)}",
        f"- **Line:** {finding.line}",
        f"- **Code:** {_inline_code(finding.code)}",
        "",
    ]


def generate_report(result: AnalysisResult) -> str:
    """Render ``result`` as a Markdown document.

    Args:
        result: The aggregated scan result.

    Returns:
        The report text. Identical results always render identically.
    """
    lines: list[str] = [REPORT_TITLE, ""]
    lines.append(f"**Total Files Analyzed:** {result.total_files}")
    lines.append(f"**Total Lines of Code:** {result.total_lines:,}")
    lines.append(f"**Total Findings:** {result.total_findings}")
    lines.append("")

    if result.language_stats:
        lines.append("## Language Breakdown")
        for stat in result.language_stats:
            lines.append(
                f"- {stat.language}: {stat.percentage:.1f}% "
                f"({_plural(stat.files, 'file')}, {_plural(stat.lines, 'line')})"
            )
        lines.append("")

    if result.frameworks:
        lines.append("## Frameworks & Libraries Detected")
        for framework in result.frameworks:
            lines.append(f"- {framework.name} ({framework.confidence} confidence)")
        lines.append("")

    lines.append("## Severity Summary")
    for severity in SEVERITY_ORDER:
        lines.append(f"- {severity.label.capitalize()}: {result.severity_counts.get(severity, 0)}")
    lines.append("")

    if result.category_counts:
        lines.append("## Category Summary")
        for category, count in result.category_counts.items():
            lines.append(f"- {category}: {count}")
        lines.append("")

    if not result.findings:
        lines.append(NO_FINDINGS_MESSAGE)
        lines.append("")
        return "\n".join(lines)

    lines.append("## Detailed Findings")
    lines.append("")
    for severity, category, members in group_findings(result.findings):
        lines.append(f"### [{severity.name}] {category}")
        lines.append(f"**{_plural(len(members), 'finding')}**")
        lines.append("")
        for finding in members:
            lines.extend(_render_finding(finding))

    return "\n".join(lines)
