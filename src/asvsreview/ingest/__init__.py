"""Bundle ingestion: turn a zip archive or directory into ``FileRecord``s.

The detection engine itself never touches the filesystem; this package is
the thin layer that enforces size and count limits before handing it a
flat list of records.
"""

from asvsreview.ingest.loader import (
    format_file_size,
    is_skipped_path,
    load_archive,
    load_directory,
    load_file,
    load_path,
)
from asvsreview.ingest.models import IngestLimits, IngestResult, IngestStats

__all__ = [
    "IngestLimits",
    "IngestResult",
    "IngestStats",
    "format_file_size",
    "is_skipped_path",
    "load_archive",
    "load_directory",
    "load_file",
    "load_path",
]
