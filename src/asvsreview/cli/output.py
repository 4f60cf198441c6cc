"""Rich output formatting helpers for the asvs-review CLI.

Provides consistent, severity-colored terminal output for scan results
and the rule catalog.

Severity Color Mapping:
    CRITICAL = bold red, HIGH = yellow, MEDIUM = cyan, LOW = green
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from asvsreview.core.models import AnalysisResult
from asvsreview.core.rules import SEVERITY_ORDER, Rule, Severity
from asvsreview.ingest import IngestStats, format_file_size

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "yellow",
    Severity.MEDIUM: "cyan",
    Severity.LOW: "green",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def severity_text(severity: Severity) -> Text:
    return Text(severity.name, style=severity_style(severity))


def print_ingest_warnings(stats: IngestStats) -> None:
    """Print per-file problems met while loading the bundle."""
    for error in stats.errors:
        console.print(f"[yellow]warning:[/yellow] {escape(error)}")


def print_scan_results(result: AnalysisResult, stats: IngestStats | None = None) -> None:
    """Print the full scan result: overview, statistics and findings.

    Args:
        result: Aggregated analysis result.
        stats: Optional ingestion statistics for the overview panel.
    """
    overview = Text.assemble(
        ("Files: ", "bold"), (str(result.total_files), ""),
        ("  Lines: ", "bold"), (f"{result.total_lines:,}", ""),
        ("  Findings: ", "bold"), (str(result.total_findings), ""),
    )
    if stats is not None:
        overview.append(f"  Loaded: {format_file_size(stats.total_size)}", style="dim")
    console.print(Panel(overview, title="ASVS Security Code Review"))

    if result.language_stats:
        lang_table = Table(title="Languages", show_header=True)
        lang_table.add_column("Language", style="bold")
        lang_table.add_column("Files", justify="right")
        lang_table.add_column("Lines", justify="right")
        lang_table.add_column("Share", justify="right")
        for stat in result.language_stats:
            lang_table.add_row(
                stat.language, str(stat.files), f"{stat.lines:,}", f"{stat.percentage:.1f}%",
            )
        console.print(lang_table)

    if result.frameworks:
        names = ", ".join(f"{fw.name} ({fw.confidence})" for fw in result.frameworks)
        console.print(f"[bold]Frameworks:[/bold] {names}")

    if result.findings:
        findings_table = Table(title="Findings", show_header=True)
        findings_table.add_column("Severity", justify="center")
        findings_table.add_column("Rule")
        findings_table.add_column("Category")
        findings_table.add_column("Location")
        findings_table.add_column("Match", style="dim")
        for f in result.findings:
            findings_table.add_row(
                severity_text(f.severity),
                Text(f"{f.rule.id} {f.rule.title}"),
                Text(f.category),
                Text(f"{f.file}:{f.line}"),
                Text(f.match[:80]),
            )
        console.print(findings_table)
    else:
        console.print("[green]No issues found. Code passed all checks.[/green]")

    _print_severity_summary(result)


def _print_severity_summary(result: AnalysisResult) -> None:
    """Print a one-line severity summary after the findings table."""
    parts = [f"[bold]{result.total_findings}[/bold] total findings"]
    for severity in SEVERITY_ORDER:
        count = result.severity_counts.get(severity, 0)
        if count > 0:
            style = severity_style(severity)
            parts.append(f"[{style}]{count} {severity.label}[/{style}]")
    console.print(" | ".join(parts))


def print_rules(rules: Sequence[Rule]) -> None:
    """Print the rule catalog as a table.

    Args:
        rules: Rules to list, in catalog order.
    """
    if not rules:
        console.print("[dim]No rules match the given filters.[/dim]")
        return

    table = Table(title="ASVS Rule Catalog", show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Severity", justify="center")
    table.add_column("Level", justify="center")
    table.add_column("Category")
    table.add_column("Title")
    table.add_column("Strategy", style="dim")
    for rule in rules:
        table.add_row(
            rule.id,
            severity_text(rule.severity),
            str(rule.level),
            rule.category,
            rule.title,
            rule.strategy.value,
        )
    console.print(table)
    console.print(f"{len(rules)} rules")
