"""``asvs-review scan <path>`` -- Review a source bundle against OWASP ASVS.

PATH may be a directory, a zip archive or a single file. Files are loaded with the
ingestion limits, scanned by both detection passes, and reported as a
terminal summary, JSON, or the Markdown report.

Exit Codes:
    0 -- No findings at or above the severity threshold.
    1 -- One or more findings at or above the severity threshold.
    2 -- No code files found, or the bundle/config could not be loaded.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from asvsreview.config import ScanConfig, load_config
from asvsreview.core.analyzer import CodeAnalyzer, filter_by_severity
from asvsreview.core.models import AnalysisResult
from asvsreview.core.report import generate_report
from asvsreview.core.rules import Severity
from asvsreview.exceptions import ConfigError, IngestError
from asvsreview.ingest import IngestStats, load_path


def _stats_to_json(stats: IngestStats) -> dict:
    return {
        "total_files": stats.total_files,
        "processed_files": stats.processed_files,
        "skipped_files": stats.skipped_files,
        "total_size": stats.total_size,
        "errors": list(stats.errors),
    }


def _fail(message: str, output_format: str) -> NoReturn:
    """Report a load failure and exit with code 2."""
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}")
    sys.exit(2)


def _resolve_config(config_path: Path | None, level: int | None) -> ScanConfig:
    config = load_config(config_path) if config_path else ScanConfig()
    if level is not None:
        config = ScanConfig(
            level=level,
            context_widths=config.context_widths,
            credential_filters=config.credential_filters,
            strict_manifests=config.strict_manifests,
        )
    return config


def _output_result(
    result: AnalysisResult,
    stats: IngestStats,
    output_format: str,
    output: Path | None,
) -> None:
    """Dispatch the result to the requested formatter.

    Args:
        result: Filtered analysis result.
        stats: Ingestion statistics.
        output_format: One of "text", "json", "markdown".
        output: File to write instead of stdout (json/markdown only).
    """
    if output_format == "text":
        from asvsreview.cli.output import print_ingest_warnings, print_scan_results
        print_ingest_warnings(stats)
        print_scan_results(result, stats)
        return

    if output_format == "json":
        payload = result.to_dict()
        payload["ingest"] = _stats_to_json(stats)
        rendered = json.dumps(payload, indent=2)
    else:
        rendered = generate_report(result)

    if output is None:
        click.echo(rendered)
    else:
        output.write_text(rendered + "\n", encoding="utf-8")
        click.echo(f"Report written to: {output.resolve()}")


@click.command("scan")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--level",
    type=click.IntRange(1, 3),
    default=None,
    help="ASVS level (1-3). Overrides the config file; default 3.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (level, context_widths, credential_filters, strict_manifests).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "markdown"]),
    default="text",
    help="Output format: text (default), json, or markdown.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the json/markdown output to a file.",
)
@click.option(
    "--severity-threshold",
    type=click.Choice(["low", "medium", "high", "critical"]),
    default="low",
    help="Minimum severity to report (default: low).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def scan_command(
    path: Path,
    level: int | None,
    config_path: Path | None,
    output_format: str,
    output: Path | None,
    severity_threshold: str,
    verbose: bool,
) -> None:
    """Review the source bundle at PATH (directory or zip archive).

    Exit code 0 if no findings remain after the severity threshold,
    1 if findings exist, 2 if nothing could be scanned.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = _resolve_config(config_path, level)
    except ConfigError as exc:
        _fail(str(exc), output_format)

    try:
        loaded = load_path(path)
    except IngestError as exc:
        _fail(str(exc), output_format)

    analyzer = CodeAnalyzer(config)
    result = analyzer.analyze(loaded.files)

    if result.total_files == 0:
        if output_format == "json":
            click.echo(json.dumps({
                "findings": [],
                "ingest": _stats_to_json(loaded.stats),
                "summary": "No code files found",
            }))
        else:
            click.echo("No code files found in the target.")
        sys.exit(2)

    result = filter_by_severity(result, Severity.from_label(severity_threshold))
    _output_result(result, loaded.stats, output_format, output)

    sys.exit(0 if result.is_clean else 1)
