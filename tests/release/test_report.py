# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for file classification and the end-of-run report.
"""

from pathlib import Path

import pytest

from centralpack.config.schema import BundleConfig
from centralpack.release.reporting.report import (
    ArtifactClass,
    build_report,
    classify_file,
    render_report,
    write_report,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("library-1.0.1.aar", ArtifactClass.PRIMARY),
        ("library-1.0.1.pom", ArtifactClass.DESCRIPTOR),
        ("library-1.0.1-javadoc.jar", ArtifactClass.DOCUMENTATION),
        ("library-1.0.1-sources.jar", ArtifactClass.SOURCES),
        ("library-1.0.1.aar.asc", ArtifactClass.SIGNATURE),
        ("library-1.0.1.aar.md5", ArtifactClass.CHECKSUM_128),
        ("library-1.0.1.pom.sha1", ArtifactClass.CHECKSUM_160),
        ("library-1.0.1.aar.asc.md5", ArtifactClass.CHECKSUM_128),
        ("library-1.0.1.aar.sha256", ArtifactClass.CHECKSUM_256),
        ("library-1.0.1.aar.sha512", ArtifactClass.CHECKSUM_512),
        ("notes.txt", ArtifactClass.UNKNOWN),
    ],
)
def test_classify_file(name: str, expected: ArtifactClass) -> None:
    assert classify_file(name) is expected


def test_jar_packaging_does_not_swallow_classified_jars() -> None:
    assert classify_file("library-1.0-sources.jar", "jar") is ArtifactClass.SOURCES
    assert classify_file("library-1.0-javadoc.jar", "jar") is ArtifactClass.DOCUMENTATION
    assert classify_file("library-1.0.jar", "jar") is ArtifactClass.PRIMARY
    assert classify_file("library-1.0.aar", "jar") is ArtifactClass.UNKNOWN


def test_class_labels() -> None:
    assert ArtifactClass.CHECKSUM_128.value == "checksum(128-bit)"
    assert ArtifactClass.CHECKSUM_160.value == "checksum(160-bit)"
    assert ArtifactClass.PRIMARY.value == "primary-artifact"


@pytest.fixture()
def staged(tmp_path: Path) -> tuple[Path, Path]:
    staging = tmp_path / "publish"
    version_dir = staging / "com" / "example" / "lib" / "library" / "1.0.1"
    version_dir.mkdir(parents=True)
    for name in ["library-1.0.1.aar", "library-1.0.1.aar.asc", "library-1.0.1.pom"]:
        (version_dir / name).write_text("x")
    return staging, version_dir


def test_build_report_marks_placeholders(staged: tuple[Path, Path], bundle_config: BundleConfig) -> None:
    staging, version_dir = staged
    report = build_report(
        staging,
        version_dir,
        bundle_config.coordinates,
        {version_dir / "library-1.0.1.aar.asc"},
        staging / "com-example-lib.zip",
        bundle_config.repository.portal_url,
    )
    assert report.layout_path == "com/example/lib/library/1.0.1/"
    assert report.placeholder_count == 1
    assert report.deployment_name == "com.example.lib:library:1.0.1"
    assert [(e.name, e.placeholder) for e in report.entries] == [
        ("library-1.0.1.aar", False),
        ("library-1.0.1.aar.asc", True),
        ("library-1.0.1.pom", False),
    ]


def test_render_report(staged: tuple[Path, Path], bundle_config: BundleConfig) -> None:
    staging, version_dir = staged
    report = build_report(
        staging,
        version_dir,
        bundle_config.coordinates,
        {version_dir / "library-1.0.1.aar.asc"},
        staging / "com-example-lib.zip",
        "https://central.sonatype.com/",
        warnings=["library-1.0.1.aar.asc: placeholder signature"],
    )
    text = render_report(report)

    assert text.startswith("=== Release Bundle Contents ===\n")
    assert "  - library-1.0.1.aar (primary-artifact) [real]" in text
    assert "  - library-1.0.1.aar.asc (signature) [placeholder]" in text
    assert "Warnings (1):" in text
    assert "WARNING: 1 placeholder file(s) in this bundle." in text
    assert "  1. Open https://central.sonatype.com/" in text
    assert "  3. Deployment name: com.example.lib:library:1.0.1" in text
    assert f"  4. Upload the bundle: {staging / 'com-example-lib.zip'}" in text


def test_render_without_archive(staged: tuple[Path, Path], bundle_config: BundleConfig) -> None:
    staging, version_dir = staged
    report = build_report(staging, version_dir, bundle_config.coordinates, set(), None, "https://x/")
    text = render_report(report)
    assert "Bundle: NOT CREATED" in text
    assert "placeholder file(s)" not in text


def test_write_report(staged: tuple[Path, Path], bundle_config: BundleConfig) -> None:
    staging, version_dir = staged
    report = build_report(staging, version_dir, bundle_config.coordinates, set(), None, "https://x/")
    path = write_report(report, staging / "bundle-report.txt")
    assert path.read_text(encoding="utf-8") == render_report(report)
