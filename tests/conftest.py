# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for centralpack tests.

Fixtures here are available to every test file automatically. The release
pipeline is a function of a BundleConfig, a project root and a tool runner,
so most tests point it at tmp_path and swap gpg for FakeRunner.
"""

import io
import textwrap
import zipfile
from pathlib import Path
from typing import Any, Optional

import pytest

from centralpack.config.schema import BundleConfig
from centralpack.logging.logger import configure_logging
from centralpack.utils.process import ToolError, ToolResult

GROUP_ID = "com.example.lib"
ARTIFACT_ID = "library"
VERSION = "1.0.1"


class FakeRunner:
    """
    Stand-in for run_external_tool.

    Records every call. When available, `--detach-sign` writes a fake armored
    signature to the `--output` path and `--verify` succeeds unless
    fail_verify is set.
    """

    def __init__(
        self,
        available: bool = True,
        fail_sign: bool = False,
        write_output: bool = True,
        fail_verify: bool = False,
    ) -> None:
        self.available = available
        self.fail_sign = fail_sign
        self.write_output = write_output
        self.fail_verify = fail_verify
        self.calls: list[dict[str, Any]] = []

    def __call__(
        self,
        name: str,
        args: list[str],
        *,
        input_text: Optional[str] = None,
        env: Optional[dict[str, str]] = None,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ) -> ToolResult:
        args = list(args)
        self.calls.append({"name": name, "args": args, "input_text": input_text, "timeout": timeout})
        if not self.available:
            raise ToolError(name, "not found on PATH")

        if "--detach-sign" in args:
            if self.fail_sign:
                raise ToolError(name, "exited with status 2: no secret key")
            if self.write_output:
                output = Path(args[args.index("--output") + 1])
                output.write_text(
                    "-----BEGIN PGP SIGNATURE-----\n\nZmFrZQ==\n-----END PGP SIGNATURE-----\n",
                    encoding="utf-8",
                )
        if "--verify" in args and self.fail_verify:
            raise ToolError(name, "exited with status 1: BAD signature")

        return ToolResult(
            tool=name,
            args=tuple(args),
            returncode=0,
            stdout="gpg (GnuPG) 2.4.4\nlibgcrypt 1.10.3\n",
            stderr="",
        )

    def sign_calls(self) -> list[dict[str, Any]]:
        return [c for c in self.calls if "--detach-sign" in c["args"]]


@pytest.fixture(autouse=True)
def _reset_logging() -> Any:
    """Rebind the package handlers after each test so none keeps a closed capture stream."""
    yield
    configure_logging("INFO")


@pytest.fixture()
def make_runner() -> Any:
    return FakeRunner


@pytest.fixture()
def fake_gpg() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def missing_gpg() -> FakeRunner:
    return FakeRunner(available=False)


def _jar_bytes(entries: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as jar:
        jar.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\r\n\r\n")
        for name, content in entries.items():
            jar.writestr(name, content)
    return buffer.getvalue()


def write_build_outputs(project_root: Path, skip: tuple[str, ...] = ()) -> dict[str, Path]:
    """
    Lay out the four build outputs where the default input templates expect
    them. Names in `skip` (primary, pom, javadoc, sources) are left out.
    """
    build = project_root / "build"
    files = {
        "primary": (build / "outputs" / "aar" / f"{ARTIFACT_ID}-release.aar", b"PK-fake-aar-content"),
        "pom": (
            build / "publications" / "release" / "pom-default.xml",
            b'<?xml version="1.0" encoding="UTF-8"?>\n<project><artifactId>library</artifactId></project>\n',
        ),
        "javadoc": (
            build / "libs" / f"{ARTIFACT_ID}-{VERSION}-javadoc.jar",
            _jar_bytes({"index.html": "<html>docs</html>"}),
        ),
        "sources": (
            build / "libs" / f"{ARTIFACT_ID}-{VERSION}-sources.jar",
            _jar_bytes({"com/example/lib/Library.kt": "class Library"}),
        ),
    }
    written: dict[str, Path] = {}
    for name, (path, content) in files.items():
        if name in skip:
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        written[name] = path
    return written


@pytest.fixture()
def build_outputs(tmp_path: Path) -> dict[str, Path]:
    return write_build_outputs(tmp_path)


@pytest.fixture()
def make_build_outputs() -> Any:
    return write_build_outputs


@pytest.fixture()
def bundle_data() -> dict[str, Any]:
    """Raw `bundle:` mapping; tests copy and tweak it before validating."""
    return {
        "coordinates": {
            "group_id": GROUP_ID,
            "artifact_id": ARTIFACT_ID,
            "version": VERSION,
            "packaging": "aar",
        },
        "signing": {"properties_file": None},
        "pom": {"description": "Test library", "url": "https://example.com/library"},
    }


@pytest.fixture()
def bundle_config(bundle_data: dict[str, Any]) -> BundleConfig:
    return BundleConfig.model_validate(bundle_data)


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    A complete config file with signing disabled, so CLI runs never touch a
    real gpg keyring.
    """
    config_content = textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          project_name: "centralpack-test"
          log_level: "DEBUG"

        bundle:
          coordinates:
            group_id: "{GROUP_ID}"
            artifact_id: "{ARTIFACT_ID}"
            version: "{VERSION}"
          signing:
            enabled: false
            properties_file: null
    """)
    config_file = tmp_path / "centralpack.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def global_only_config_file(tmp_path: Path) -> Path:
    """Smallest config that passes schema validation: no bundle section."""
    config_file = tmp_path / "global.yaml"
    config_file.write_text(
        textwrap.dedent("""\
            global:
              config_version: "1.0.0"
        """),
        encoding="utf-8",
    )
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (missing config_version)."""
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(
        textwrap.dedent("""\
            global:
              project_name: "centralpack-test"
        """),
        encoding="utf-8",
    )
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
