# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for centralpack.

Every section of the YAML file gets its own frozen pydantic model:
  - frozen=True: the pipeline receives one immutable settings object per run
  - extra="forbid": a typo in a key fails loudly instead of being ignored
  - validate_default=True: defaults go through the same checks as user values

The whole release run is a function of this object plus the filesystem, so
tests point it at a temporary directory and nothing else.
"""

import string
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

ChecksumAlgorithm = Literal["md5", "sha1", "sha256", "sha512"]

# Names that input and library file templates may reference.
TEMPLATE_FIELDS: frozenset[str] = frozenset({"artifact_id", "version", "packaging"})


def _check_template(value: str) -> str:
    for _, field_name, _, _ in string.Formatter().parse(value):
        if field_name is not None and field_name not in TEMPLATE_FIELDS:
            raise ValueError(
                f"Unknown template field '{{{field_name}}}' in '{value}'. "
                f"Allowed: {', '.join(sorted(TEMPLATE_FIELDS))}"
            )
    return value


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version, e.g. '1.0.0'")
    project_name: str = Field(default="centralpack", description="Human-readable identifier")
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional JSON log file, relative to the project root",
    )


class CoordinatesConfig(BaseModel):
    """Repository coordinates of the library being released."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    group_id: str = Field(
        pattern=r"^[A-Za-z0-9_\-]+(\.[A-Za-z0-9_\-]+)*$",
        description="Dotted namespace, e.g. com.example.lib",
    )
    artifact_id: str = Field(pattern=r"^[A-Za-z0-9_\-][A-Za-z0-9_.\-]*$")
    version: str = Field(pattern=r"^[A-Za-z0-9_\-][A-Za-z0-9_.\-+]*$")
    packaging: str = Field(
        default="aar",
        pattern=r"^[a-z0-9]+$",
        description="Extension of the primary artifact (aar, jar, ...)",
    )


class InputsConfig(BaseModel):
    """
    Where the build left its outputs. Each path is a template relative to
    build_dir and may use {artifact_id}, {version} and {packaging}.
    Defaults follow the Android Gradle plugin output layout.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    build_dir: str = Field(default="build", description="Build output root, relative to the project root")
    primary: str = Field(default="outputs/aar/{artifact_id}-release.{packaging}")
    descriptor: str = Field(default="publications/release/pom-default.xml")
    documentation: str = Field(default="libs/{artifact_id}-{version}-javadoc.jar")
    sources: str = Field(default="libs/{artifact_id}-{version}-sources.jar")

    @field_validator("primary", "descriptor", "documentation", "sources")
    @classmethod
    def _known_template_fields(cls, value: str) -> str:
        return _check_template(value)


class OutputConfig(BaseModel):
    """Where the staged repository tree, archive and report go."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    publish_dir: str = Field(
        default="publish",
        description="Staging root. Deleted and recreated on every run.",
    )
    archive_name: Optional[str] = Field(
        default=None,
        description="Archive file name inside publish_dir; defaults to the group id with dashes, plus .zip",
    )
    report_name: str = Field(default="bundle-report.txt")


class ChecksumConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    algorithms: list[ChecksumAlgorithm] = Field(
        default_factory=lambda: ["md5", "sha1"],
        min_length=1,
        description="One sibling checksum file per algorithm for every artifact",
    )


class SigningConfig(BaseModel):
    """
    Detached-signature settings. Credentials are optional: without them the
    signing tool uses the operator's default identity, and without the tool
    placeholder signatures are written.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    enabled: bool = Field(default=True, description="False writes placeholder signatures only")
    gpg_binary: str = Field(default="gpg")
    gnupg_home: Optional[str] = Field(default=None, description="Passed to gpg as --homedir")
    key_id: Optional[str] = Field(default=None)
    passphrase: Optional[SecretStr] = Field(default=None)
    properties_file: Optional[str] = Field(
        default="local.properties",
        description="Java .properties file with signing.keyId / signing.password",
    )
    checksum_signatures: bool = Field(
        default=True,
        description="Write checksum siblings for the .asc files too",
    )
    timeout_seconds: Optional[float] = Field(default=None, gt=0)


class PomConfig(BaseModel):
    """Metadata used when a placeholder POM has to be synthesized."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    name: Optional[str] = Field(default=None, description="Defaults to the artifact id")
    description: str = Field(default="")
    url: str = Field(default="")
    license_name: str = Field(default="MIT License")
    license_url: str = Field(default="https://opensource.org/licenses/MIT")
    developer_id: Optional[str] = Field(default=None)
    developer_name: Optional[str] = Field(default=None)
    developer_email: Optional[str] = Field(default=None)
    scm_url: Optional[str] = Field(default=None)
    scm_connection: Optional[str] = Field(default=None)
    scm_developer_connection: Optional[str] = Field(default=None)


class RepositoryConfig(BaseModel):
    """Remote repository details. Only the portal URL is used, for the report."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    portal_url: str = Field(default="https://central.sonatype.com/")
    username: Optional[str] = Field(default=None)
    password: Optional[SecretStr] = Field(default=None)


class LibraryConfig(BaseModel):
    """Plain copy of the primary artifact into a local lib/ folder."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    output_dir: str = Field(default="lib")
    file_name: str = Field(default="{artifact_id}-release-{version}.{packaging}")

    @field_validator("file_name")
    @classmethod
    def _known_template_fields(cls, value: str) -> str:
        return _check_template(value)


class BundleConfig(BaseModel):
    """Everything one release-bundle run needs."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    coordinates: CoordinatesConfig
    inputs: InputsConfig = Field(default_factory=InputsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    checksums: ChecksumConfig = Field(default_factory=ChecksumConfig)
    signing: SigningConfig = Field(default_factory=SigningConfig)
    pom: PomConfig = Field(default_factory=PomConfig)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    library: LibraryConfig = Field(default_factory=LibraryConfig)


class CentralPackConfig(BaseModel):
    """
    Top-level container. `global:` is required; `bundle:` is required by the
    commands that touch artifacts and checked there.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    bundle: Optional[BundleConfig] = Field(default=None)
