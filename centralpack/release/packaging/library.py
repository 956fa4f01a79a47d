# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Local library drop: copy the primary build output into lib/ under a
release file name, e.g. lib/library-release-1.0.1.aar.

This is for consumers that vendor the binary directly. Unlike the bundle
pipeline it does not substitute placeholders: copying an empty file into a
consumer's lib/ folder would only move the failure somewhere harder to see.
"""

import logging
import shutil
from pathlib import Path

from centralpack.config.schema import BundleConfig
from centralpack.logging.logger import get_logger
from centralpack.release.artifacts.models import ArtifactKind
from centralpack.release.artifacts.resolver import build_artifact_specs
from centralpack.utils.paths import ensure_directory, resolve_path, validate_path_within

_logger: logging.Logger = get_logger(__name__)


def library_destination(bundle: BundleConfig, project_root: Path) -> Path:
    coords = bundle.coordinates
    output_dir = resolve_path(bundle.library.output_dir, project_root)
    name = bundle.library.file_name.format(
        artifact_id=coords.artifact_id,
        version=coords.version,
        packaging=coords.packaging,
    )
    destination = output_dir / name
    validate_path_within(destination, output_dir)
    return destination


def copy_library_artifact(bundle: BundleConfig, project_root: Path) -> Path:
    """
    Copy the primary artifact to the library folder.

    Returns:
        The destination path.

    Raises:
        FileNotFoundError: If the primary build output does not exist.
        OSError: If the copy fails.
    """
    primary = next(s for s in build_artifact_specs(bundle, project_root) if s.kind is ArtifactKind.PRIMARY)
    if not primary.source_path.is_file():
        raise FileNotFoundError(
            f"Primary artifact not found at {primary.source_path}. Build the release variant first."
        )

    destination = library_destination(bundle, project_root)
    ensure_directory(destination.parent)
    shutil.copy2(str(primary.source_path), str(destination))

    _logger.info(
        "Library artifact copied",
        extra={"source": str(primary.source_path), "destination": str(destination)},
    )
    return destination
