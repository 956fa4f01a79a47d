# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers shared by the release stages.

Checksums, signatures and placeholders are written atomically: the content
goes to a temp file in the target directory and is renamed into place, so a
crash leaves a stray temp file rather than a truncated artifact that the
archive step would happily pick up.
"""

import shutil
import tempfile
from pathlib import Path

TEMP_PREFIX = ".centralpack_tmp_"


def atomic_write_bytes(target_path: Path, data: bytes) -> None:
    """
    Write bytes to target_path via temp file + rename.

    Raises:
        OSError: If the write or rename fails. The target is left untouched.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd = tempfile.NamedTemporaryFile(
        mode="wb",
        dir=str(target_path.parent),
        prefix=TEMP_PREFIX,
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(data)
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """Text variant of atomic_write_bytes."""
    atomic_write_bytes(target_path, content.encode(encoding))


def reset_directory(path: Path) -> Path:
    """
    Delete path and everything under it, then recreate it empty.

    Raises:
        OSError: If removal or creation fails.
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=False)
    return path


def list_files(root: Path) -> list[Path]:
    """All regular files under root, sorted, skipping in-flight temp files."""
    return sorted(
        p for p in root.rglob("*")
        if p.is_file() and not p.name.startswith(TEMP_PREFIX)
    )
