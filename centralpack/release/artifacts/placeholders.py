# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Placeholder artifacts.

When a build output is missing we still need a file of the right kind so
checksumming, signing and archiving have something valid to work on:

  primary        zero-byte file
  descriptor     minimal well-formed POM from the coordinates and pom config
  documentation  jar holding META-INF/MANIFEST.MF and placeholder.txt
  sources        same as documentation

Every placeholder is recognisable after the fact (empty primary, marker
comment in the POM, placeholder.txt as the jar's only content), which is what
`is_placeholder_artifact` checks before a bundle gets uploaded.
"""

import io
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from xml.sax.saxutils import escape

from centralpack.config.schema import CoordinatesConfig, PomConfig
from centralpack.release.artifacts.models import ArtifactKind
from centralpack.utils.filesystem import atomic_write_bytes

PLACEHOLDER_POM_MARKER = "centralpack placeholder descriptor"
PLACEHOLDER_ENTRY = "placeholder.txt"
_MANIFEST_ENTRY = "META-INF/MANIFEST.MF"
_MANIFEST_TEXT = "Manifest-Version: 1.0\r\nCreated-By: centralpack\r\n\r\n"

_JAR_LABELS = {
    ArtifactKind.DOCUMENTATION: "Javadoc",
    ArtifactKind.SOURCES: "Sources",
}


@dataclass(frozen=True)
class PlaceholderContext:
    """What placeholder synthesis needs to know about the release."""

    coordinates: CoordinatesConfig
    pom: PomConfig


def _optional_block(tag: str, inner: list[str], indent: str) -> list[str]:
    if not inner:
        return []
    return [f"{indent}<{tag}>", *inner, f"{indent}</{tag}>"]


def placeholder_pom(context: PlaceholderContext) -> str:
    """Render a minimal POM for the configured coordinates."""
    coords = context.coordinates
    pom = context.pom

    def element(tag: str, value: str | None, indent: str = "  ") -> list[str]:
        if not value:
            return []
        return [f"{indent}<{tag}>{escape(value)}</{tag}>"]

    developer = (
        element("id", pom.developer_id, "      ")
        + element("name", pom.developer_name, "      ")
        + element("email", pom.developer_email, "      ")
    )
    scm = (
        element("connection", pom.scm_connection, "    ")
        + element("developerConnection", pom.scm_developer_connection, "    ")
        + element("url", pom.scm_url, "    ")
    )

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f"<!-- {PLACEHOLDER_POM_MARKER} -->",
        '<project xmlns="http://maven.apache.org/POM/4.0.0" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 '
        'https://maven.apache.org/xsd/maven-4.0.0.xsd">',
        "  <modelVersion>4.0.0</modelVersion>",
        *element("groupId", coords.group_id),
        *element("artifactId", coords.artifact_id),
        *element("version", coords.version),
        *element("packaging", coords.packaging),
        *element("name", pom.name or coords.artifact_id),
        *element("description", pom.description),
        *element("url", pom.url),
        "  <licenses>",
        "    <license>",
        *element("name", pom.license_name, "      "),
        *element("url", pom.license_url, "      "),
        "    </license>",
        "  </licenses>",
        *_optional_block("developers", _optional_block("developer", developer, "    "), "  "),
        *_optional_block("scm", scm, "  "),
        "</project>",
    ]
    return "\n".join(lines) + "\n"


def placeholder_jar(label: str) -> bytes:
    """A valid, non-empty jar whose only content says it is a placeholder."""
    generated = datetime.now(tz=timezone.utc).isoformat()
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as jar:
        jar.writestr(_MANIFEST_ENTRY, _MANIFEST_TEXT)
        jar.writestr(
            PLACEHOLDER_ENTRY,
            f"This is a placeholder for {label}. Generated on {generated}\n",
        )
    return buffer.getvalue()


def placeholder_bytes(kind: ArtifactKind, context: PlaceholderContext) -> bytes:
    if kind is ArtifactKind.PRIMARY:
        return b""
    if kind is ArtifactKind.DESCRIPTOR:
        return placeholder_pom(context).encode("utf-8")
    return placeholder_jar(_JAR_LABELS[kind])


def write_placeholder(kind: ArtifactKind, target: Path, context: PlaceholderContext) -> Path:
    """
    Write the placeholder for `kind` at target.

    Raises:
        OSError: If the file cannot be written.
    """
    atomic_write_bytes(target, placeholder_bytes(kind, context))
    return target


def is_placeholder_artifact(path: Path, kind: ArtifactKind) -> bool:
    """
    Recognise a placeholder written by this module. Unreadable files are
    reported as not-a-placeholder; the verifier flags them separately.
    """
    try:
        if kind is ArtifactKind.PRIMARY:
            return path.stat().st_size == 0
        if kind is ArtifactKind.DESCRIPTOR:
            head = path.read_bytes()[:512].decode("utf-8", errors="replace")
            return PLACEHOLDER_POM_MARKER in head
        if not zipfile.is_zipfile(path):
            return False
        with zipfile.ZipFile(path) as jar:
            names = {n for n in jar.namelist() if not n.endswith("/")}
        return PLACEHOLDER_ENTRY in names and names <= {PLACEHOLDER_ENTRY, _MANIFEST_ENTRY}
    except (OSError, zipfile.BadZipFile):
        return False
