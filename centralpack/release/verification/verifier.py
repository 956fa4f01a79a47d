# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Bundle verification: is a staged component directory complete, intact and
free of placeholders?

Checks, in order:
  1. directory exists
  2. the four canonical artifacts are present
  3. every artifact has a .asc
  4. every non-checksum file has one checksum sibling per algorithm
     (.asc files only when signature checksums were enabled)
  5. every real checksum matches a freshly computed digest
  6. optionally, every real signature verifies with gpg

Placeholders (empty primary, placeholder POM/jars, placeholder signatures,
dummy digests) are listed separately. They do not fail the structural
checks by themselves; the CLI's --strict flag turns them into a failure.
A tampered file with a real digest still fails check 5.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from centralpack.config.schema import CoordinatesConfig
from centralpack.logging.logger import get_logger
from centralpack.release.artifacts.placeholders import is_placeholder_artifact
from centralpack.release.artifacts.resolver import ARTIFACT_TABLE, canonical_file_name
from centralpack.release.checksums.integrity import (
    DEFAULT_ALGORITHMS,
    checksum_path_for,
    is_checksum_file,
    is_dummy_digest,
    read_checksum_file,
    verify_checksum_file,
)
from centralpack.release.signing.signer import (
    Signer,
    is_placeholder_signature,
    is_signature_file,
    signature_path_for,
)
from centralpack.utils.filesystem import list_files

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationReport:
    """Complete outcome of a bundle verification."""

    is_valid: bool
    bundle_dir: str
    checks_passed: list[str] = field(default_factory=list)
    checks_failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    placeholders: list[str] = field(default_factory=list)

    @property
    def is_publishable(self) -> bool:
        return self.is_valid and not self.placeholders


def _check_required_files(version_dir: Path, coords: CoordinatesConfig) -> list[str]:
    missing: list[str] = []
    for row in ARTIFACT_TABLE:
        name = canonical_file_name(coords, row.suffix)
        if not (version_dir / name).is_file():
            missing.append(f"Missing required file: {name}")
    return missing


def _check_signatures_present(files: list[Path]) -> list[str]:
    return [
        f"Missing signature: {signature_path_for(f).name}"
        for f in files
        if not is_checksum_file(f) and not is_signature_file(f) and not signature_path_for(f).is_file()
    ]


def _check_checksums_present(
    files: list[Path], algorithms: Sequence[str], checksum_signatures: bool = True
) -> list[str]:
    errors: list[str] = []
    for f in files:
        if is_checksum_file(f):
            continue
        if not checksum_signatures and is_signature_file(f):
            continue
        for algorithm in algorithms:
            if not checksum_path_for(f, algorithm).is_file():
                errors.append(f"Missing checksum: {checksum_path_for(f, algorithm).name}")
    return errors


def _check_checksums_valid(files: list[Path], algorithms: Sequence[str]) -> list[str]:
    errors: list[str] = []
    for f in files:
        if is_checksum_file(f):
            continue
        for algorithm in algorithms:
            sibling = checksum_path_for(f, algorithm)
            if not sibling.is_file():
                continue
            try:
                # Dummy digests are reported through find_placeholders.
                if is_dummy_digest(read_checksum_file(sibling)):
                    continue
                if not verify_checksum_file(f, algorithm):
                    errors.append(f"Checksum mismatch: {sibling.name}")
            except (OSError, ValueError) as err:
                errors.append(f"Cannot verify {sibling.name}: {err}")
    return errors


def _check_signatures_valid(files: list[Path], signer: Signer) -> list[str]:
    errors: list[str] = []
    for f in files:
        if is_checksum_file(f) or is_signature_file(f):
            continue
        signature = signature_path_for(f)
        if not signature.is_file() or is_placeholder_signature(signature):
            continue
        if not signer.verify(f):
            errors.append(f"Signature does not verify: {signature.name}")
    return errors


def find_placeholders(version_dir: Path, coords: CoordinatesConfig) -> list[str]:
    """Names of every placeholder artifact, signature and dummy digest."""
    found: list[str] = []
    for row in ARTIFACT_TABLE:
        path = version_dir / canonical_file_name(coords, row.suffix)
        if path.is_file() and is_placeholder_artifact(path, row.kind):
            found.append(path.name)

    for path in list_files(version_dir):
        if is_signature_file(path) and is_placeholder_signature(path):
            found.append(path.name)
        elif is_checksum_file(path):
            try:
                if is_dummy_digest(read_checksum_file(path)):
                    found.append(path.name)
            except (OSError, ValueError):
                continue
    return sorted(found)


def verify_bundle(
    version_dir: Path,
    coordinates: CoordinatesConfig,
    algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
    signer: Optional[Signer] = None,
    checksum_signatures: bool = True,
) -> VerificationReport:
    """
    Run the verification suite on one component version directory.

    Args:
        version_dir: e.g. publish/com/example/lib/library/1.0.1
        coordinates: Coordinates the directory should hold.
        algorithms: Checksum algorithms every file must carry.
        signer: When given, real signatures are checked with gpg --verify.
        checksum_signatures: Whether .asc files must carry checksum siblings
            too. Mirrors signing.checksum_signatures of the run that built
            the bundle.
    """
    if not version_dir.is_dir():
        return VerificationReport(
            is_valid=False,
            bundle_dir=str(version_dir),
            checks_failed=["directory_exists"],
            errors=[f"Bundle directory not found: {version_dir}"],
        )

    files = list_files(version_dir)
    checks = [
        ("required_files", lambda: _check_required_files(version_dir, coordinates)),
        ("signatures_present", lambda: _check_signatures_present(files)),
        ("checksums_present", lambda: _check_checksums_present(files, algorithms, checksum_signatures)),
        ("checksums_valid", lambda: _check_checksums_valid(files, algorithms)),
    ]
    if signer is not None:
        checks.append(("signatures_valid", lambda: _check_signatures_valid(files, signer)))

    passed: list[str] = []
    failed: list[str] = []
    all_errors: list[str] = []
    for name, run_check in checks:
        errors = run_check()
        if errors:
            failed.append(name)
            all_errors.extend(errors)
        else:
            passed.append(name)

    placeholders = find_placeholders(version_dir, coordinates)
    is_valid = not failed

    if is_valid:
        _logger.info(
            "Bundle verification passed",
            extra={"bundle_dir": str(version_dir), "checks_passed": len(passed), "placeholders": len(placeholders)},
        )
    else:
        _logger.error(
            "Bundle verification FAILED",
            extra={
                "bundle_dir": str(version_dir),
                "checks_failed": failed,
                "errors": all_errors,
            },
        )

    return VerificationReport(
        is_valid=is_valid,
        bundle_dir=str(version_dir),
        checks_passed=passed,
        checks_failed=failed,
        errors=all_errors,
        placeholders=placeholders,
    )
