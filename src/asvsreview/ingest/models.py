"""Data models for bundle ingestion: limits, statistics, and the load result."""

from __future__ import annotations

from dataclasses import dataclass, field

from asvsreview.core.models import FileRecord

MEGABYTE = 1024 * 1024


@dataclass(frozen=True)
class IngestLimits:
    """Bounds applied while loading a bundle.

    Attributes:
        max_file_size: Largest single file kept, in bytes.
        max_total_size: Largest archive (or directory total), in bytes.
        max_entries: Most entries a bundle may contain.
    """

    max_file_size: int = 10 * MEGABYTE
    max_total_size: int = 50 * MEGABYTE
    max_entries: int = 1000


@dataclass
class IngestStats:
    """Counters and per-file problems collected while loading."""

    total_files: int = 0
    processed_files: int = 0
    skipped_files: int = 0
    total_size: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class IngestResult:
    """Loaded files plus the statistics describing how they were loaded."""

    files: list[FileRecord]
    stats: IngestStats
