# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release bundle assembler, the driver of the whole pipeline.

A run moves through fixed phases, each over the full set of files before
the next begins:

    INIT → STAGE → RESOLVE → LAYOUT → CHECKSUM → SIGN → ARCHIVE → REPORT → DONE

    publish/
    ├─ com/example/lib/library/1.0.1/
    │   ├─ library-1.0.1.aar            (+ .asc .md5 .sha1, .asc.md5 .asc.sha1)
    │   ├─ library-1.0.1.pom            (+ ...)
    │   ├─ library-1.0.1-javadoc.jar    (+ ...)
    │   └─ library-1.0.1-sources.jar    (+ ...)
    ├─ com-example-lib.zip
    └─ bundle-report.txt

SIGN runs only once every artifact sits in its final place, and signature
checksums are written inside SIGN, after the .asc files exist.

Failure policy: a missing input, a failed copy, a failed digest, a missing
or failing gpg all degrade to placeholders and a warning on the Bundle. The
run always reaches ARCHIVE. Only a StagingError (cannot clear or create the
staging directory) stops it, and it propagates to the caller. Placeholder
artifacts and placeholder signatures get all-zero checksum siblings, so a
placeholder bundle is never reported as publishable.
"""

import logging
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from centralpack.config.schema import BundleConfig
from centralpack.logging.logger import get_logger
from centralpack.release.artifacts.models import ResolvedArtifact
from centralpack.release.artifacts.placeholders import PlaceholderContext
from centralpack.release.artifacts.resolver import build_artifact_specs, resolve_artifacts
from centralpack.release.checksums.integrity import ChecksumRecord, checksum_files
from centralpack.release.layout.builder import (
    check_staging_root,
    place_artifacts,
    prepare_staging,
    repository_path,
)
from centralpack.release.packaging.archive import ArchiveResult, write_archive
from centralpack.release.reporting.report import (
    BundleReport,
    build_report,
    log_report,
    write_report,
)
from centralpack.release.signing.signer import Signature, Signer, SigningCredentials, sign_files
from centralpack.utils.paths import resolve_path, validate_path_within
from centralpack.utils.process import ToolRunner, run_external_tool

_logger: logging.Logger = get_logger(__name__)


class Phase(str, Enum):
    INIT = "init"
    STAGE = "stage"
    RESOLVE = "resolve"
    LAYOUT = "layout"
    CHECKSUM = "checksum"
    SIGN = "sign"
    ARCHIVE = "archive"
    REPORT = "report"
    DONE = "done"


PHASE_ORDER: tuple[Phase, ...] = tuple(Phase)


@dataclass(frozen=True)
class BundlePaths:
    staging_dir: Path
    version_dir: Path
    archive_path: Path
    report_path: Path


@dataclass
class Bundle:
    """Everything one run produced. Owned by the run that created it."""

    paths: BundlePaths
    artifacts: list[ResolvedArtifact] = field(default_factory=list)
    checksums: list[ChecksumRecord] = field(default_factory=list)
    signatures: list[Signature] = field(default_factory=list)
    archive: Optional[ArchiveResult] = None
    report: Optional[BundleReport] = None
    phases: list[Phase] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def staging_dir(self) -> Path:
        return self.paths.staging_dir

    @property
    def version_dir(self) -> Path:
        return self.paths.version_dir

    @property
    def archive_path(self) -> Optional[Path]:
        return self.archive.path if self.archive else None

    @property
    def placeholder_paths(self) -> set[Path]:
        paths = {a.path for a in self.artifacts if a.is_placeholder}
        paths |= {c.checksum_path for c in self.checksums if c.is_placeholder}
        paths |= {s.signature_path for s in self.signatures if s.is_placeholder}
        return paths

    def enter(self, phase: Phase) -> None:
        """Advance to the next phase. Phases are never skipped or re-entered."""
        expected = PHASE_ORDER[len(self.phases)]
        if phase is not expected:
            raise RuntimeError(f"Phase {phase.value} out of order; expected {expected.value}")
        self.phases.append(phase)
        _logger.debug("Entering phase", extra={"phase": phase.value})


def archive_file_name(bundle: BundleConfig) -> str:
    """Configured name, or the group id with dots as dashes: com-example-lib.zip."""
    if bundle.output.archive_name:
        return bundle.output.archive_name
    return bundle.coordinates.group_id.replace(".", "-") + ".zip"


def bundle_paths(bundle: BundleConfig, project_root: Path) -> BundlePaths:
    """
    Where this run will write.

    Raises:
        ValueError: If the archive or report name escapes the staging root,
            or if wiping the staging root would delete the project, the build
            outputs or the signing properties file.
    """
    coords = bundle.coordinates
    staging_dir = resolve_path(bundle.output.publish_dir, project_root)
    archive_path = staging_dir / archive_file_name(bundle)
    report_path = staging_dir / bundle.output.report_name
    validate_path_within(archive_path, staging_dir)
    validate_path_within(report_path, staging_dir)

    protected = {
        "project root": project_root,
        "build directory": resolve_path(bundle.inputs.build_dir, project_root),
    }
    for spec in build_artifact_specs(bundle, project_root):
        protected[f"{spec.name} input"] = spec.source_path
    if bundle.signing.properties_file:
        protected["signing properties file"] = resolve_path(bundle.signing.properties_file, project_root)
    check_staging_root(staging_dir, protected)

    return BundlePaths(
        staging_dir=staging_dir,
        version_dir=repository_path(staging_dir, coords.group_id, coords.artifact_id, coords.version),
        archive_path=archive_path,
        report_path=report_path,
    )


def assemble_bundle(
    bundle_config: BundleConfig,
    project_root: Path,
    *,
    credentials: Optional[SigningCredentials] = None,
    runner: ToolRunner = run_external_tool,
) -> Bundle:
    """
    Run the full pipeline once.

    Args:
        bundle_config: The `bundle:` config section.
        project_root: Anchor for every relative path in the config.
        credentials: Signing key and passphrase; None signs with gpg's
            default identity.
        runner: External tool runner, replaced in tests.

    Returns:
        The Bundle, including warnings for every placeholder substitution.

    Raises:
        ValueError: If the configured paths are unsafe (see bundle_paths).
            Raised before anything is deleted.
        StagingError: If the staging directory cannot be prepared.
    """
    bundle = Bundle(paths=bundle_paths(bundle_config, project_root))
    bundle.enter(Phase.INIT)
    coords = bundle_config.coordinates
    context = PlaceholderContext(coordinates=coords, pom=bundle_config.pom)
    algorithms = list(bundle_config.checksums.algorithms)

    _logger.info(
        "Assembling release bundle",
        extra={
            "group_id": coords.group_id,
            "artifact_id": coords.artifact_id,
            "version": coords.version,
            "staging_dir": str(bundle.staging_dir),
        },
    )

    bundle.enter(Phase.STAGE)
    prepare_staging(bundle.staging_dir, bundle.version_dir)

    with tempfile.TemporaryDirectory(prefix="centralpack_") as scratch:
        bundle.enter(Phase.RESOLVE)
        specs = build_artifact_specs(bundle_config, project_root)
        resolved = resolve_artifacts(specs, Path(scratch), context)

        bundle.enter(Phase.LAYOUT)
        bundle.artifacts = place_artifacts(resolved, bundle.version_dir, context)

    for artifact in bundle.artifacts:
        if artifact.is_placeholder:
            bundle.warnings.append(
                f"{artifact.spec.destination_name}: placeholder used "
                f"(expected {artifact.spec.source_path})"
            )

    bundle.enter(Phase.CHECKSUM)
    bundle.checksums = checksum_files(
        [a.path for a in bundle.artifacts],
        algorithms,
        dummy_for=[a.path for a in bundle.artifacts if a.is_placeholder],
    )

    bundle.enter(Phase.SIGN)
    signer = Signer.from_config(bundle_config.signing, project_root, credentials, runner)
    bundle.signatures = sign_files([a.path for a in bundle.artifacts], signer)
    if bundle_config.signing.checksum_signatures:
        bundle.checksums += checksum_files(
            [s.signature_path for s in bundle.signatures if s.signature_path.is_file()],
            algorithms,
            dummy_for=[s.signature_path for s in bundle.signatures if s.is_placeholder],
        )

    for record in bundle.checksums:
        if record.is_placeholder:
            bundle.warnings.append(f"{record.checksum_path.name}: dummy digest")
    for signature in bundle.signatures:
        if signature.is_placeholder:
            bundle.warnings.append(f"{signature.signature_path.name}: placeholder signature")

    bundle.enter(Phase.ARCHIVE)
    try:
        bundle.archive = write_archive(
            bundle.staging_dir,
            bundle.paths.archive_path,
            exclude=[bundle.paths.report_path],
        )
    except OSError as err:
        _logger.error(
            "Archive could not be written",
            extra={"path": str(bundle.paths.archive_path), "error": str(err)},
        )
        bundle.warnings.append(f"archive not created: {err}")

    bundle.enter(Phase.REPORT)
    bundle.report = build_report(
        bundle.staging_dir,
        bundle.version_dir,
        coords,
        bundle.placeholder_paths,
        bundle.archive_path,
        bundle_config.repository.portal_url,
        bundle.warnings,
    )
    log_report(bundle.report)
    try:
        write_report(bundle.report, bundle.paths.report_path)
    except OSError as err:
        _logger.error(
            "Report could not be written",
            extra={"path": str(bundle.paths.report_path), "error": str(err)},
        )

    bundle.enter(Phase.DONE)
    _logger.info(
        "Release bundle assembled",
        extra={
            "archive": str(bundle.archive_path) if bundle.archive_path else None,
            "artifacts": len(bundle.artifacts),
            "checksums": len(bundle.checksums),
            "signatures": len(bundle.signatures),
            "warnings": len(bundle.warnings),
        },
    )
    return bundle
