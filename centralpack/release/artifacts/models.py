# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data types for release artifacts.

An ArtifactSpec says what the bundle expects; a ResolvedArtifact says what
the resolver (and later the layout builder) actually used for it.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ArtifactKind(str, Enum):
    PRIMARY = "primary"
    DESCRIPTOR = "descriptor"
    DOCUMENTATION = "documentation"
    SOURCES = "sources"


class Origin(str, Enum):
    REAL = "real"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class ArtifactSpec:
    """One deliverable of the bundle."""

    name: str
    kind: ArtifactKind
    source_path: Path
    destination_name: str
    required: bool = True


@dataclass(frozen=True)
class ResolvedArtifact:
    """
    The file standing in for a spec at some stage of the run.

    origin is PLACEHOLDER only when the real source was missing or
    unreadable, or the copy into the layout failed.
    """

    spec: ArtifactSpec
    path: Path
    origin: Origin

    @property
    def is_placeholder(self) -> bool:
        return self.origin is Origin.PLACEHOLDER
