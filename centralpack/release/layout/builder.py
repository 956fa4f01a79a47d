# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Repository layout builder.

Maven repositories store a component at

    <group path>/<artifactId>/<version>/<artifactId>-<version>[-classifier].<ext>

where the group path is the dotted group id split into directories
(com.example.lib → com/example/lib).

The staging root is wiped and recreated on every run. Nothing from a previous
run survives into a new bundle, which also means two runs pointed at the same
staging root will destroy each other's work; there is no lock.
"""

import logging
import shutil
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from centralpack.logging.logger import get_logger
from centralpack.release.artifacts.models import Origin, ResolvedArtifact
from centralpack.release.artifacts.placeholders import PlaceholderContext, write_placeholder
from centralpack.release.exceptions import StagingError
from centralpack.utils.filesystem import reset_directory
from centralpack.utils.paths import validate_path_within

_logger: logging.Logger = get_logger(__name__)


def _check_segment(segment: str, what: str) -> str:
    if not segment or segment in (".", "..") or "/" in segment or "\\" in segment:
        raise ValueError(f"Invalid {what} path segment: {segment!r}")
    return segment


def repository_path(base_dir: Path, group_id: str, artifact_id: str, version: str) -> Path:
    """
    Directory that holds one component version.

    Raises:
        ValueError: If any segment is empty or contains a path separator.
    """
    parts = [_check_segment(p, "group id") for p in group_id.split(".")]
    parts.append(_check_segment(artifact_id, "artifact id"))
    parts.append(_check_segment(version, "version"))
    return base_dir.joinpath(*parts)


def check_staging_root(staging_dir: Path, protected: Mapping[str, Path]) -> None:
    """
    Refuse a staging root whose reset would delete something the run needs.

    Args:
        staging_dir: The directory prepare_staging will wipe.
        protected: Label -> path for everything that must survive the wipe
            (project root, build directory, inputs, properties file).

    Raises:
        ValueError: If staging_dir is, or contains, any protected path.
    """
    root = staging_dir.resolve()
    for what, path in protected.items():
        target = path.resolve()
        if target == root or root in target.parents:
            raise ValueError(
                f"Staging directory '{staging_dir}' would delete the {what} at '{path}'. "
                f"Point output.publish_dir somewhere else."
            )


def prepare_staging(staging_dir: Path, version_dir: Path) -> Path:
    """
    Wipe staging_dir and create version_dir beneath it.

    Raises:
        StagingError: If the directory cannot be removed or created.
    """
    try:
        validate_path_within(version_dir, staging_dir)
    except ValueError as err:
        raise StagingError(str(err)) from err

    existed = staging_dir.exists()
    try:
        reset_directory(staging_dir)
        version_dir.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise StagingError(f"Cannot prepare staging directory {staging_dir}: {err}") from err

    _logger.info(
        "Staging directory ready",
        extra={"staging_dir": str(staging_dir), "version_dir": str(version_dir), "reset": existed},
    )
    return version_dir


def place_artifact(
    artifact: ResolvedArtifact,
    version_dir: Path,
    context: PlaceholderContext,
) -> ResolvedArtifact:
    """
    Copy one artifact into version_dir under its canonical name.

    A failed copy is replaced by a placeholder at the destination and the
    returned artifact is marked PLACEHOLDER. Only a destination name that
    escapes version_dir raises (ValueError); that is a programming error.
    """
    destination = version_dir / artifact.spec.destination_name
    validate_path_within(destination, version_dir)

    try:
        shutil.copy2(str(artifact.path), str(destination))
        return replace(artifact, path=destination)
    except OSError as err:
        _logger.warning(
            "Copy into layout failed, writing placeholder",
            extra={"artifact": artifact.spec.name, "source": str(artifact.path), "error": str(err)},
        )

    try:
        write_placeholder(artifact.spec.kind, destination, context)
    except OSError as err:
        _logger.error(
            "Could not write placeholder into layout",
            extra={"artifact": artifact.spec.name, "path": str(destination), "error": str(err)},
        )
    return replace(artifact, path=destination, origin=Origin.PLACEHOLDER)


def place_artifacts(
    artifacts: list[ResolvedArtifact],
    version_dir: Path,
    context: PlaceholderContext,
) -> list[ResolvedArtifact]:
    placed = [place_artifact(a, version_dir, context) for a in artifacts]
    _logger.info(
        "Artifacts placed",
        extra={
            "version_dir": str(version_dir),
            "count": len(placed),
            "placeholders": sum(1 for a in placed if a.is_placeholder),
        },
    )
    return placed
