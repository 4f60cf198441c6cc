"""Load a source bundle (zip archive or directory) into ``FileRecord``s.

Loading enforces the bundle limits the detection engine relies on:

- The archive (or directory total) must not exceed ``max_total_size``.
- The bundle must not hold more than ``max_entries`` entries.
- Individual files over ``max_file_size`` are skipped and recorded. Zip
  entries are rejected on their declared size before any decompression.

Hidden paths and dependency/build directories (``node_modules/``,
``dist/``, ``build/``, ``.git/``, ``vendor/``, ``venv/``) are skipped.
A file that cannot be decoded is recorded in ``IngestStats.errors`` and
skipped; it never aborts loading of the remaining files.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from asvsreview.core.models import FileRecord
from asvsreview.exceptions import IngestError
from asvsreview.ingest.models import IngestLimits, IngestResult, IngestStats

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES: tuple[str, ...] = (
    "node_modules/",
    "dist/",
    "build/",
    ".git/",
    "vendor/",
    "venv/",
)


def format_file_size(size: int) -> str:
    """Render a byte count for humans, e.g. ``1.5 KB``."""
    if size == 0:
        return "0 Bytes"
    units = ("Bytes", "KB", "MB", "GB")
    exponent = 0
    while exponent < len(units) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / 1024 ** exponent, 2)
    return f"{value:g} {units[exponent]}"


def is_skipped_path(name: str) -> bool:
    """Check whether a bundle-relative path is hidden or in a skipped directory."""
    if name.startswith(".") or "/." in name:
        return True
    return any(directory in name for directory in SKIPPED_DIRECTORIES)


def _decode(name: str, data: bytes, stats: IngestStats) -> str | None:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        stats.errors.append(f"Error processing {name}: {exc}")
        stats.skipped_files += 1
        logger.warning("Cannot decode %s as UTF-8, skipping", name)
        return None


def _skip_oversized(name: str, limits: IngestLimits, stats: IngestStats) -> None:
    stats.errors.append(
        f"File {name} exceeds maximum size ({format_file_size(limits.max_file_size)})"
    )
    stats.skipped_files += 1
    logger.warning("Skipping oversized file: %s", name)


def _accept(
    name: str,
    data: bytes,
    limits: IngestLimits,
    stats: IngestStats,
    files: list[FileRecord],
) -> None:
    """Size-check, decode and record one bundle entry."""
    if len(data) > limits.max_file_size:
        _skip_oversized(name, limits, stats)
        return

    content = _decode(name, data, stats)
    if content is None:
        return

    stats.total_size += len(data)
    stats.processed_files += 1
    files.append(FileRecord(path=name, content=content))


def load_archive(path: Path, limits: IngestLimits | None = None) -> IngestResult:
    """Load every eligible text file from a zip archive.

    Args:
        path: Path to the ``.zip`` file.
        limits: Bundle limits (defaults to ``IngestLimits()``).

    Returns:
        The loaded records (in archive order) and loading statistics.

    Raises:
        IngestError: If the archive is too large, has too many entries,
            or is not a readable zip file.
    """
    limits = limits or IngestLimits()
    archive_size = path.stat().st_size
    if archive_size > limits.max_total_size:
        raise IngestError(
            f"File size exceeds maximum allowed size of {format_file_size(limits.max_total_size)}"
        )

    stats = IngestStats()
    files: list[FileRecord] = []
    try:
        with zipfile.ZipFile(path) as archive:
            entries = archive.infolist()
            stats.total_files = len(entries)
            if stats.total_files > limits.max_entries:
                raise IngestError(
                    f"Archive contains too many files ({stats.total_files}). "
                    f"Maximum allowed: {limits.max_entries}"
                )
            for entry in entries:
                if entry.is_dir():
                    continue
                if is_skipped_path(entry.filename):
                    stats.skipped_files += 1
                    continue
                # Entries are never decompressed past max_file_size + 1 bytes,
                # whatever size their header declares.
                if entry.file_size > limits.max_file_size:
                    _skip_oversized(entry.filename, limits, stats)
                    continue
                try:
                    with archive.open(entry) as handle:
                        data = handle.read(limits.max_file_size + 1)
                except (zipfile.BadZipFile, OSError, RuntimeError) as exc:
                    stats.errors.append(f"Error processing {entry.filename}: {exc}")
                    stats.skipped_files += 1
                    logger.warning("Failed to read archive entry: %s", entry.filename, exc_info=True)
                    continue
                _accept(entry.filename, data, limits, stats, files)
    except zipfile.BadZipFile as exc:
        raise IngestError(f"Failed to process zip file: {exc}") from exc

    logger.debug("Loaded %d of %d archive entries from %s", stats.processed_files, stats.total_files, path)
    return IngestResult(files=files, stats=stats)


def load_directory(root: Path, limits: IngestLimits | None = None) -> IngestResult:
    """Load every eligible text file below ``root``.

    Paths are relative to ``root`` with forward slashes, in sorted order so
    that repeated scans see the same sequence.

    Raises:
        IngestError: If the directory holds too many files or more bytes
            than ``max_total_size``.
    """
    limits = limits or IngestLimits()
    candidates = sorted(p for p in root.rglob("*") if p.is_file())

    stats = IngestStats(total_files=len(candidates))
    eligible: list[tuple[str, Path]] = []
    for candidate in candidates:
        name = candidate.relative_to(root).as_posix()
        if is_skipped_path(name):
            stats.skipped_files += 1
        else:
            eligible.append((name, candidate))

    # Skipped directories such as .git/ or node_modules/ do not count.
    if len(eligible) > limits.max_entries:
        raise IngestError(
            f"Directory contains too many files ({len(eligible)}). "
            f"Maximum allowed: {limits.max_entries}"
        )

    files: list[FileRecord] = []
    for name, candidate in eligible:
        try:
            data = candidate.read_bytes()
        except OSError as exc:
            stats.errors.append(f"Error processing {name}: {exc}")
            stats.skipped_files += 1
            logger.warning("Permission denied or unreadable: %s", name)
            continue
        _accept(name, data, limits, stats, files)
        if stats.total_size > limits.max_total_size:
            raise IngestError(
                f"Directory exceeds maximum allowed size of {format_file_size(limits.max_total_size)}"
            )

    logger.debug("Loaded %d of %d files from %s", stats.processed_files, stats.total_files, root)
    return IngestResult(files=files, stats=stats)


def load_file(path: Path, limits: IngestLimits | None = None) -> IngestResult:
    """Load a single source file as a one-record bundle named by its basename."""
    limits = limits or IngestLimits()
    stats = IngestStats(total_files=1)
    files: list[FileRecord] = []
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise IngestError(f"Cannot read {path}: {exc}") from exc
    _accept(path.name, data, limits, stats, files)
    return IngestResult(files=files, stats=stats)


def load_path(path: Path, limits: IngestLimits | None = None) -> IngestResult:
    """Load a bundle from a directory, a zip archive, or a single file."""
    if path.is_dir():
        return load_directory(path, limits)
    if zipfile.is_zipfile(path):
        return load_archive(path, limits)
    if path.is_file():
        return load_file(path, limits)
    raise IngestError(f"Not a directory, zip archive or file: {path}")
