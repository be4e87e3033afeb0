"""Collecting report files: copying them to an export folder or packing them into a tar.gz."""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def is_export_candidate(file_name: str) -> bool:
    """Whether a file is a report, dialog export or batch result worth exporting."""
    return (
        (file_name.startswith("pdf_report_") and file_name.endswith(".md"))
        or (file_name.startswith("dialog_") and file_name.endswith(".md"))
        or (
            file_name.startswith("batch_results_")
            and (file_name.endswith(".json") or file_name.endswith(".csv"))
        )
    )


def is_archive_candidate(file_name: str) -> bool:
    """Whether a file belongs in an archive: every export candidate plus batch progress files."""
    return is_export_candidate(file_name) or (
        file_name.startswith(".batch_progress_") and file_name.endswith(".json")
    )


def _entries(source_dir: PathLike) -> List[Path]:
    try:
        return sorted(Path(source_dir).iterdir())
    except OSError as exc:
        log.warning("cannot list %s: %s", source_dir, exc)
        return []


def export_all(source_dir: PathLike, export_dir: PathLike) -> int:
    """Copy every export candidate in ``source_dir`` into ``export_dir``.

    The export directory is created if needed. Files that cannot be copied
    are logged and skipped. Returns the number of files copied.
    """
    destination = Path(export_dir)
    destination.mkdir(parents=True, exist_ok=True)

    exported = 0
    for entry in _entries(source_dir):
        if not is_export_candidate(entry.name):
            continue
        try:
            shutil.copy(entry, destination / entry.name)
        except OSError as exc:
            log.warning("failed to copy %s: %s", entry.name, exc)
        else:
            exported += 1
    log.info("exported %d files to %s", exported, destination)
    return exported


def create_tar_gz_archive(archive_path: PathLike, files: Iterable[PathLike]) -> int:
    """Write the regular files among ``files`` into a flat tar.gz; return its size in bytes."""
    with tarfile.open(Path(archive_path), "w:gz") as tar:
        for file_path in map(Path, files):
            if file_path.is_file():
                tar.add(file_path, arcname=file_path.name or "unknown")
    return Path(archive_path).stat().st_size


def archive_reports(source_dir: PathLike, archive_path: PathLike) -> Optional[Tuple[int, int]]:
    """Archive every archive candidate in ``source_dir`` into ``archive_path``.

    Returns ``(file_count, archive_size_bytes)``, or ``None`` when there is
    nothing to archive (no archive is written then).
    """
    files = [entry for entry in _entries(source_dir) if is_archive_candidate(entry.name)]
    if not files:
        log.warning("no files to archive in %s", source_dir)
        return None
    size = create_tar_gz_archive(archive_path, files)
    log.info("archive created: %s (%d files, %.2f KB)", archive_path, len(files), size / 1024.0)
    return len(files), size