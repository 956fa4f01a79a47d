# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Zip writer for the staged repository tree.

Entries are stored relative to the staging root in sorted order, so the
archive unpacks to `com/example/lib/<artifact>/<version>/...`, which is the
layout the Central Portal's "upload bundle" form expects.
"""

import logging
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from centralpack.logging.logger import get_logger
from centralpack.utils.filesystem import TEMP_PREFIX, list_files

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class ArchiveResult:
    path: Path
    entry_count: int
    size_bytes: int


def write_archive(
    source_dir: Path,
    archive_path: Path,
    exclude: Iterable[Path] = (),
) -> ArchiveResult:
    """
    Zip every file under source_dir into archive_path.

    The archive itself (when it lives inside source_dir) and any path in
    `exclude` are left out.

    Raises:
        OSError: If the archive cannot be written. A partial archive is removed.
    """
    skipped = {p.resolve() for p in exclude} | {archive_path.resolve()}
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = archive_path.with_name(f"{TEMP_PREFIX}{archive_path.name}")

    entries = 0
    try:
        with zipfile.ZipFile(temp_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for file_path in list_files(source_dir):
                if file_path.resolve() in skipped:
                    continue
                archive.write(file_path, file_path.relative_to(source_dir).as_posix())
                entries += 1
        temp_path.replace(archive_path)
    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise

    result = ArchiveResult(
        path=archive_path,
        entry_count=entries,
        size_bytes=archive_path.stat().st_size,
    )
    _logger.info(
        "Archive written",
        extra={"path": str(archive_path), "entries": entries, "size_bytes": result.size_bytes},
    )
    return result
