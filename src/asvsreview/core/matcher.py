"""Line-oriented pattern matcher.

Runs every ``PATTERN`` rule against each physical line of every code file.
Each non-overlapping match on a line yields one ``Finding``.

Matching is strictly line-local: a construct split across several lines
(a query string continued on the next line, a multi-line call) is not
seen. This is a known detection gap of a first-pass screening tool.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath

from asvsreview.core.models import FileRecord, Finding
from asvsreview.core.rules import Rule

CODE_FILE_EXTENSIONS: frozenset[str] = frozenset({
    ".js", ".jsx", ".ts", ".tsx", ".vue", ".py", ".java", ".cs", ".php",
    ".rb", ".go", ".rs", ".swift", ".kt", ".scala", ".cpp", ".c", ".h",
    ".sql", ".sh", ".bash", ".ps1", ".yaml", ".yml", ".json", ".xml",
    ".html", ".css", ".scss", ".sass", ".less",
})


def file_extension(path: str) -> str:
    """Return the lower-cased extension of ``path`` (``""`` if none)."""
    return PurePosixPath(path).suffix.lower()


def is_code_file(path: str) -> bool:
    """Check whether ``path`` has a recognized code/config/markup extension."""
    return file_extension(path) in CODE_FILE_EXTENSIONS


def split_lines(content: str) -> list[str]:
    """Split file content into physical lines.

    Only ``\\n`` separates lines, so a trailing newline yields a final empty
    line. Line numbers and line counts both derive from this split.
    """
    return content.split("\n")


def match_lines(
    path: str,
    lines: Sequence[str],
    rules: Iterable[Rule],
) -> list[Finding]:
    """Match ``rules`` against pre-split ``lines`` of one file.

    Iterates rule by rule, then line by line, then match by match.
    """
    findings: list[Finding] = []
    for rule in rules:
        for index, line in enumerate(lines):
            for match in rule.finditer(line):
                findings.append(Finding(
                    rule=rule,
                    file=path,
                    line=index + 1,
                    code=line.strip(),
                    match=match.group(0).strip(),
                ))
    return findings


def match_file(record: FileRecord, rules: Iterable[Rule]) -> list[Finding]:
    """Match ``rules`` against every line of a single file."""
    return match_lines(record.path, split_lines(record.content), rules)


def run_pattern_scan(
    files: Iterable[FileRecord],
    rules: Iterable[Rule],
) -> list[Finding]:
    """Scan code files with every pattern-strategy rule.

    Non-code files are ignored. Rules owned by the contextual analyzer are
    skipped here so that no rule id is reported by both passes.

    Args:
        files: Input files, scanned in order (duplicates scanned again).
        rules: Candidate rules; contextual ones are filtered out.

    Returns:
        Findings ordered file by file, rule by rule, line by line.
    """
    pattern_rules = [rule for rule in rules if not rule.is_contextual]
    findings: list[Finding] = []
    for record in files:
        if not is_code_file(record.path):
            continue
        findings.extend(match_file(record, pattern_rules))
    return findings
