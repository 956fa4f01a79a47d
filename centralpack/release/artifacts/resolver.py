# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Artifact resolver. Maps each expected build output to a file on disk.

The set of deliverables is a table, not code: one row per artifact kind with
its input path template, its destination suffix and whether the repository
requires it. The resolver walks that table once. A missing or unreadable
input is not an error here; a placeholder is written to the run's scratch
directory instead and marked PLACEHOLDER, so later stages always have a file.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from centralpack.config.schema import BundleConfig, CoordinatesConfig
from centralpack.logging.logger import get_logger
from centralpack.release.artifacts.models import (
    ArtifactKind,
    ArtifactSpec,
    Origin,
    ResolvedArtifact,
)
from centralpack.release.artifacts.placeholders import PlaceholderContext, write_placeholder
from centralpack.utils.paths import resolve_path

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class ArtifactRow:
    name: str
    kind: ArtifactKind
    input_field: str
    suffix: str
    required: bool


# Maven Central rejects a component missing any of these.
ARTIFACT_TABLE: tuple[ArtifactRow, ...] = (
    ArtifactRow("primary", ArtifactKind.PRIMARY, "primary", ".{packaging}", True),
    ArtifactRow("pom", ArtifactKind.DESCRIPTOR, "descriptor", ".pom", True),
    ArtifactRow("javadoc", ArtifactKind.DOCUMENTATION, "documentation", "-javadoc.jar", True),
    ArtifactRow("sources", ArtifactKind.SOURCES, "sources", "-sources.jar", True),
)


def _template_values(coords: CoordinatesConfig) -> dict[str, str]:
    return {
        "artifact_id": coords.artifact_id,
        "version": coords.version,
        "packaging": coords.packaging,
    }


def canonical_file_name(coords: CoordinatesConfig, suffix: str) -> str:
    """`<artifactId>-<version><suffix>`, e.g. library-1.0.1-sources.jar."""
    return f"{coords.artifact_id}-{coords.version}{suffix.format(**_template_values(coords))}"


def build_artifact_specs(bundle: BundleConfig, project_root: Path) -> list[ArtifactSpec]:
    """Expand ARTIFACT_TABLE into concrete specs for this release."""
    coords = bundle.coordinates
    values = _template_values(coords)
    build_dir = resolve_path(bundle.inputs.build_dir, project_root)

    specs: list[ArtifactSpec] = []
    for row in ARTIFACT_TABLE:
        template: str = getattr(bundle.inputs, row.input_field)
        specs.append(
            ArtifactSpec(
                name=row.name,
                kind=row.kind,
                source_path=resolve_path(template.format(**values), build_dir),
                destination_name=canonical_file_name(coords, row.suffix),
                required=row.required,
            )
        )
    return specs


def _is_readable(path: Path) -> bool:
    try:
        return path.is_file() and os.access(path, os.R_OK)
    except OSError:
        return False


def resolve_artifact(
    spec: ArtifactSpec,
    scratch_dir: Path,
    context: PlaceholderContext,
) -> ResolvedArtifact:
    """
    Return the real file for spec, or a freshly written placeholder.

    Never raises. If even the placeholder cannot be written, the result still
    points at the intended scratch path and is marked PLACEHOLDER; the layout
    builder writes it again when the copy fails.
    """
    if _is_readable(spec.source_path):
        _logger.info(
            "Resolved artifact",
            extra={"artifact": spec.name, "source": str(spec.source_path), "origin": Origin.REAL.value},
        )
        return ResolvedArtifact(spec=spec, path=spec.source_path, origin=Origin.REAL)

    target = scratch_dir / spec.destination_name
    try:
        write_placeholder(spec.kind, target, context)
    except OSError as err:
        _logger.error(
            "Could not write placeholder in scratch directory",
            extra={"artifact": spec.name, "path": str(target), "error": str(err)},
        )

    log_fn = _logger.warning if spec.required else _logger.info
    log_fn(
        "Artifact not found, using placeholder",
        extra={
            "artifact": spec.name,
            "expected": str(spec.source_path),
            "required": spec.required,
            "origin": Origin.PLACEHOLDER.value,
        },
    )
    return ResolvedArtifact(spec=spec, path=target, origin=Origin.PLACEHOLDER)


def resolve_artifacts(
    specs: list[ArtifactSpec],
    scratch_dir: Path,
    context: PlaceholderContext,
) -> list[ResolvedArtifact]:
    return [resolve_artifact(spec, scratch_dir, context) for spec in specs]
