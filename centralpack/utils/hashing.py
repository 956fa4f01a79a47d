# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Hashing utilities.

Repository checksums are plain hex digests of a file's bytes. md5 and sha1
are integrity markers here, not security primitives, so they are requested
with usedforsecurity=False and still work on FIPS-restricted interpreters.
"""

import hashlib
from pathlib import Path

HASH_BUFFER_SIZE = 65536  # 64 KiB


def compute_digest(file_path: Path, algorithm: str) -> str:
    """
    Compute the lowercase hex digest of a file, reading it in chunks.

    Raises:
        OSError: If the file can't be read.
        ValueError: If the algorithm is unknown or disabled.
    """
    hasher = hashlib.new(algorithm, usedforsecurity=False)
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_BUFFER_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()
