"""Per-language line statistics for scanned code files."""

from __future__ import annotations

from collections.abc import Iterable

from asvsreview.core.matcher import file_extension, split_lines
from asvsreview.core.models import FileRecord, LanguageStat

OTHER_LANGUAGE = "Other"

LANGUAGE_MAP: dict[str, str] = {
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".vue": "Vue",
    ".py": "Python",
    ".java": "Java",
    ".cs": "C#",
    ".php": "PHP",
    ".rb": "Ruby",
    ".go": "Go",
    ".rs": "Rust",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".scala": "Scala",
    ".cpp": "C++",
    ".c": "C",
    ".h": "C/C++",
    ".sql": "SQL",
    ".sh": "Shell",
    ".bash": "Shell",
    ".ps1": "PowerShell",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".json": "JSON",
    ".xml": "XML",
    ".html": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".sass": "Sass",
    ".less": "Less",
}


def language_for(path: str) -> str:
    """Map a file path to its language name (``"Other"`` if unmapped)."""
    return LANGUAGE_MAP.get(file_extension(path), OTHER_LANGUAGE)


def count_lines(content: str) -> int:
    return len(split_lines(content))


def compute_language_stats(files: Iterable[FileRecord]) -> tuple[list[LanguageStat], int]:
    """Aggregate file and line counts per language.

    Args:
        files: Code files to count (every record counts, duplicates too).

    Returns:
        ``(stats, total_lines)``. Stats are sorted by line count, largest
        first, ties in first-seen order. Percentages sum to 100 whenever
        ``total_lines > 0``; with no lines the list is empty.
    """
    totals: dict[str, list[int]] = {}
    total_lines = 0
    for record in files:
        lines = count_lines(record.content)
        bucket = totals.setdefault(language_for(record.path), [0, 0])
        bucket[0] += 1
        bucket[1] += lines
        total_lines += lines

    if total_lines == 0:
        return [], 0

    stats = [
        LanguageStat(
            language=language,
            files=file_count,
            lines=line_count,
            percentage=line_count / total_lines * 100,
        )
        for language, (file_count, line_count) in totals.items()
    ]
    stats.sort(key=lambda stat: stat.lines, reverse=True)
    return stats, total_lines
