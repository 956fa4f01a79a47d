# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Sibling checksum files.

Repository tooling expects, next to every artifact, one file per algorithm:

    library-1.0.1.aar
    library-1.0.1.aar.md5     9e107d9d372bb6826bd81d3542a419d6
    library-1.0.1.aar.sha1    2fd4e1c67a2d28fced849ee1bb76e7391b93eb12

The file holds the lowercase hex digest and nothing else: no file name, no
trailing newline. Verifiers compare it byte for byte.

If a digest cannot be computed, or the file is a placeholder, an all-zero
digest of the right width is written instead. At this stage completeness is
judged by which files exist, so the sibling must exist even when its value is
meaningless. Checksum files are never themselves checksummed.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from centralpack.logging.logger import get_logger
from centralpack.utils.filesystem import atomic_write
from centralpack.utils.hashing import compute_digest

_logger: logging.Logger = get_logger(__name__)

# algorithm → file extension
CHECKSUM_EXTENSIONS: dict[str, str] = {
    "md5": "md5",
    "sha1": "sha1",
    "sha256": "sha256",
    "sha512": "sha512",
}

# Fixed here rather than asked of hashlib so a dummy can still be sized when
# the interpreter cannot provide the algorithm at all.
DIGEST_HEX_LENGTHS: dict[str, int] = {
    "md5": 32,
    "sha1": 40,
    "sha256": 64,
    "sha512": 128,
}

DEFAULT_ALGORITHMS: tuple[str, ...] = ("md5", "sha1")


@dataclass(frozen=True)
class ChecksumRecord:
    """One (artifact, algorithm) digest and where it was written."""

    artifact_path: Path
    algorithm: str
    digest: str
    checksum_path: Path
    is_placeholder: bool = False


def checksum_path_for(file_path: Path, algorithm: str) -> Path:
    return file_path.with_name(f"{file_path.name}.{CHECKSUM_EXTENSIONS[algorithm]}")


def is_checksum_file(path: Path) -> bool:
    return path.suffix.lstrip(".") in CHECKSUM_EXTENSIONS.values()


def dummy_digest(algorithm: str) -> str:
    """All-zero hex string as wide as a real digest of `algorithm`."""
    try:
        return "0" * DIGEST_HEX_LENGTHS[algorithm]
    except KeyError:
        raise ValueError(f"Unsupported checksum algorithm: {algorithm}") from None


def is_dummy_digest(digest: str) -> bool:
    return bool(digest) and set(digest) == {"0"}


def write_checksum(file_path: Path, algorithm: str, dummy: bool = False) -> Optional[ChecksumRecord]:
    """
    Write the `algorithm` sibling for file_path.

    With dummy=True the all-zero digest is written without reading the file;
    the pipeline does this for placeholders so they never carry a digest that
    would verify.

    Returns None without writing anything when file_path is itself a checksum
    file, or when the sibling could not be written at all.
    """
    if is_checksum_file(file_path):
        return None

    target = checksum_path_for(file_path, algorithm)
    is_placeholder = dummy
    if dummy:
        digest = dummy_digest(algorithm)
    else:
        try:
            digest = compute_digest(file_path, algorithm)
        except (OSError, ValueError) as err:
            digest = dummy_digest(algorithm)
            is_placeholder = True
            _logger.warning(
                "Checksum failed, writing dummy digest",
                extra={"file": file_path.name, "algorithm": algorithm, "error": str(err)},
            )

    try:
        atomic_write(target, digest)
    except OSError as err:
        _logger.error(
            "Could not write checksum file",
            extra={"path": str(target), "error": str(err)},
        )
        return None

    _logger.debug(
        "Checksum written",
        extra={"file": file_path.name, "algorithm": algorithm, "digest": digest[:16] + "..."},
    )
    return ChecksumRecord(
        artifact_path=file_path,
        algorithm=algorithm,
        digest=digest,
        checksum_path=target,
        is_placeholder=is_placeholder,
    )


def write_checksums(
    file_path: Path,
    algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
    dummy: bool = False,
) -> list[ChecksumRecord]:
    """Write one sibling per algorithm. Checksum files are skipped entirely."""
    if is_checksum_file(file_path):
        _logger.debug("Skipping checksum of checksum file", extra={"file": file_path.name})
        return []

    records: list[ChecksumRecord] = []
    for algorithm in algorithms:
        record = write_checksum(file_path, algorithm, dummy=dummy)
        if record is not None:
            records.append(record)
    return records


def checksum_files(
    paths: Iterable[Path],
    algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
    dummy_for: Iterable[Path] = (),
) -> list[ChecksumRecord]:
    """Checksum every path; paths in dummy_for get all-zero digests."""
    dummies = set(dummy_for)
    records: list[ChecksumRecord] = []
    for path in paths:
        records.extend(write_checksums(path, algorithms, dummy=path in dummies))

    _logger.info(
        "Checksums generated",
        extra={
            "records": len(records),
            "dummy": sum(1 for r in records if r.is_placeholder),
            "algorithms": list(algorithms),
        },
    )
    return records


def read_checksum_file(checksum_path: Path) -> str:
    """
    Read a sibling checksum file.

    Accepts the bare-digest format written here and the `<digest>  <name>`
    format some tools produce.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If it holds no digest.
    """
    content = checksum_path.read_text(encoding="utf-8").strip()
    if not content:
        raise ValueError(f"Empty checksum file: {checksum_path}")
    return content.split()[0].lower()


def verify_checksum_file(file_path: Path, algorithm: str) -> bool:
    """True if the recorded digest matches a fresh one. Dummy digests never match."""
    expected = read_checksum_file(checksum_path_for(file_path, algorithm))
    if is_dummy_digest(expected):
        return False
    return compute_digest(file_path, algorithm) == expected
