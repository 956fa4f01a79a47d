# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
End-of-run report: what is in the bundle and what to do with it.

Every staged file is classified from its name suffix and tagged real or
placeholder. The rendered text lists the files, any warnings collected during
the run, and the manual upload steps.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from centralpack.config.schema import CoordinatesConfig
from centralpack.logging.logger import get_logger
from centralpack.utils.filesystem import atomic_write, list_files

_logger: logging.Logger = get_logger(__name__)


class ArtifactClass(str, Enum):
    PRIMARY = "primary-artifact"
    DESCRIPTOR = "metadata-descriptor"
    DOCUMENTATION = "documentation-archive"
    SOURCES = "source-archive"
    SIGNATURE = "signature"
    CHECKSUM_128 = "checksum(128-bit)"
    CHECKSUM_160 = "checksum(160-bit)"
    CHECKSUM_256 = "checksum(256-bit)"
    CHECKSUM_512 = "checksum(512-bit)"
    UNKNOWN = "unknown"


def _suffix_table(packaging: str) -> tuple[tuple[str, ArtifactClass], ...]:
    # Order matters: x.aar.asc is a signature and x-sources.jar is not a
    # primary even when packaging is "jar".
    return (
        (".asc", ArtifactClass.SIGNATURE),
        (".md5", ArtifactClass.CHECKSUM_128),
        (".sha1", ArtifactClass.CHECKSUM_160),
        (".sha256", ArtifactClass.CHECKSUM_256),
        (".sha512", ArtifactClass.CHECKSUM_512),
        ("-javadoc.jar", ArtifactClass.DOCUMENTATION),
        ("-sources.jar", ArtifactClass.SOURCES),
        (".pom", ArtifactClass.DESCRIPTOR),
        (f".{packaging}", ArtifactClass.PRIMARY),
    )


def classify_file(name: str, packaging: str = "aar") -> ArtifactClass:
    for suffix, kind in _suffix_table(packaging):
        if name.endswith(suffix):
            return kind
    return ArtifactClass.UNKNOWN


@dataclass(frozen=True)
class ReportEntry:
    name: str
    classification: ArtifactClass
    placeholder: bool


@dataclass(frozen=True)
class BundleReport:
    coordinates: CoordinatesConfig
    layout_path: str
    entries: list[ReportEntry]
    archive_path: Optional[Path]
    portal_url: str
    warnings: list[str] = field(default_factory=list)

    @property
    def deployment_name(self) -> str:
        c = self.coordinates
        return f"{c.group_id}:{c.artifact_id}:{c.version}"

    @property
    def placeholder_count(self) -> int:
        return sum(1 for e in self.entries if e.placeholder)


def build_report(
    staging_dir: Path,
    version_dir: Path,
    coordinates: CoordinatesConfig,
    placeholder_paths: set[Path],
    archive_path: Optional[Path],
    portal_url: str,
    warnings: Optional[list[str]] = None,
) -> BundleReport:
    """Classify every file in version_dir."""
    entries = [
        ReportEntry(
            name=path.name,
            classification=classify_file(path.name, coordinates.packaging),
            placeholder=path in placeholder_paths,
        )
        for path in list_files(version_dir)
    ]
    return BundleReport(
        coordinates=coordinates,
        layout_path=version_dir.relative_to(staging_dir).as_posix() + "/",
        entries=entries,
        archive_path=archive_path,
        portal_url=portal_url,
        warnings=list(warnings or []),
    )


def render_report(report: BundleReport) -> str:
    bundle = str(report.archive_path) if report.archive_path else "NOT CREATED"
    lines = [
        "=== Release Bundle Contents ===",
        f"Bundle: {bundle}",
        f"Repository layout: {report.layout_path}",
        "",
        "Files:",
    ]
    for entry in report.entries:
        status = "placeholder" if entry.placeholder else "real"
        lines.append(f"  - {entry.name} ({entry.classification.value}) [{status}]")

    if report.warnings:
        lines += ["", f"Warnings ({len(report.warnings)}):"]
        lines += [f"  - {w}" for w in report.warnings]

    if report.placeholder_count:
        lines += [
            "",
            f"WARNING: {report.placeholder_count} placeholder file(s) in this bundle. "
            "Do not publish it as-is.",
        ]

    lines += [
        "",
        "To publish:",
        f"  1. Open {report.portal_url}",
        "  2. Choose 'Publish Component'",
        f"  3. Deployment name: {report.deployment_name}",
        f"  4. Upload the bundle: {bundle}",
    ]
    return "\n".join(lines) + "\n"


def write_report(report: BundleReport, path: Path) -> Path:
    atomic_write(path, render_report(report))
    _logger.info("Report written", extra={"path": str(path)})
    return path


def log_report(report: BundleReport) -> None:
    """One structured line per staged file, then a summary line."""
    for entry in report.entries:
        _logger.info(
            "Bundle file",
            extra={
                "file": entry.name,
                "classification": entry.classification.value,
                "origin": "placeholder" if entry.placeholder else "real",
            },
        )
    _logger.info(
        "Bundle summary",
        extra={
            "deployment": report.deployment_name,
            "archive": str(report.archive_path) if report.archive_path else None,
            "files": len(report.entries),
            "placeholders": report.placeholder_count,
            "warnings": len(report.warnings),
        },
    )
