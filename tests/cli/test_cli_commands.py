# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
In-process tests for the subcommand handlers and their exit codes.

The config fixture disables signing, so no run touches a real gpg keyring.
"""

import textwrap
from pathlib import Path

import pytest

from centralpack.cli.exit_codes import (
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
)
from centralpack.cli.main import main

VERSION_DIR = Path("publish") / "com" / "example" / "lib" / "library" / "1.0.1"


def _exit_code(*argv: str) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(list(argv))
    return int(excinfo.value.code or 0)


class TestBundle:
    def test_bundle_with_placeholders_succeeds(self, tmp_config_file: Path) -> None:
        assert _exit_code("bundle", "--config", str(tmp_config_file)) == SUCCESS
        root = tmp_config_file.parent
        assert (root / VERSION_DIR / "library-1.0.1.aar").is_file()
        assert (root / "publish" / "bundle-report.txt").is_file()

    def test_dry_run_writes_nothing(self, tmp_config_file: Path, build_outputs: dict[str, Path]) -> None:
        assert _exit_code("bundle", "--config", str(tmp_config_file), "--dry-run") == SUCCESS
        assert not (tmp_config_file.parent / "publish").exists()

    def test_project_root_override(self, tmp_config_file: Path, tmp_path: Path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        code = _exit_code("bundle", "--config", str(tmp_config_file), "--project-root", str(other))
        assert code == SUCCESS
        assert (other / VERSION_DIR).is_dir()

    def test_global_only_config_is_user_error(self, global_only_config_file: Path) -> None:
        assert _exit_code("bundle", "--config", str(global_only_config_file)) == USER_ERROR

    def test_broken_yaml_is_config_error(self, broken_yaml_file: Path) -> None:
        assert _exit_code("bundle", "--config", str(broken_yaml_file)) == CONFIG_ERROR

    def test_staging_failure_is_runtime_error(self, tmp_path: Path) -> None:
        (tmp_path / "blocker").write_text("file in the way")
        config = tmp_path / "blocked.yaml"
        config.write_text(
            textwrap.dedent("""\
                global:
                  config_version: "1.0.0"
                bundle:
                  coordinates:
                    group_id: "com.example.lib"
                    artifact_id: "library"
                    version: "1.0.1"
                  output:
                    publish_dir: "blocker/publish"
                  signing:
                    enabled: false
                    properties_file: null
            """),
            encoding="utf-8",
        )
        assert _exit_code("bundle", "--config", str(config)) == RUNTIME_ERROR

    def test_publish_dir_at_project_root_is_config_error(
        self, tmp_path: Path, build_outputs: dict[str, Path]
    ) -> None:
        config = tmp_path / "in-place.yaml"
        config.write_text(
            textwrap.dedent("""\
                global:
                  config_version: "1.0.0"
                bundle:
                  coordinates:
                    group_id: "com.example.lib"
                    artifact_id: "library"
                    version: "1.0.1"
                  output:
                    publish_dir: "."
                  signing:
                    enabled: false
                    properties_file: null
            """),
            encoding="utf-8",
        )
        assert _exit_code("bundle", "--config", str(config)) == CONFIG_ERROR
        assert config.is_file()
        for path in build_outputs.values():
            assert path.is_file()


class TestVerify:
    def test_verify_after_real_bundle(self, tmp_config_file: Path, build_outputs: dict[str, Path]) -> None:
        assert _exit_code("bundle", "--config", str(tmp_config_file)) == SUCCESS
        # Signing is disabled, so signatures are placeholders: valid but not strict.
        assert _exit_code("verify", "--config", str(tmp_config_file)) == SUCCESS
        assert _exit_code("verify", "--config", str(tmp_config_file), "--strict") == VALIDATION_ERROR

    def test_verify_tampered_bundle(self, tmp_config_file: Path, build_outputs: dict[str, Path]) -> None:
        assert _exit_code("bundle", "--config", str(tmp_config_file)) == SUCCESS
        (tmp_config_file.parent / VERSION_DIR / "library-1.0.1.pom").write_text("<project>edited</project>")
        assert _exit_code("verify", "--config", str(tmp_config_file)) == VALIDATION_ERROR

    def test_verify_explicit_bundle_dir(self, tmp_config_file: Path, tmp_path: Path) -> None:
        code = _exit_code("verify", "--config", str(tmp_config_file), "--bundle-dir", str(tmp_path / "missing"))
        assert code == VALIDATION_ERROR

    def test_verify_without_signature_checksums(self, tmp_path: Path, build_outputs: dict[str, Path]) -> None:
        config = tmp_path / "no-asc-checksums.yaml"
        config.write_text(
            textwrap.dedent("""\
                global:
                  config_version: "1.0.0"
                bundle:
                  coordinates:
                    group_id: "com.example.lib"
                    artifact_id: "library"
                    version: "1.0.1"
                  signing:
                    enabled: false
                    properties_file: null
                    checksum_signatures: false
            """),
            encoding="utf-8",
        )
        assert _exit_code("bundle", "--config", str(config)) == SUCCESS
        assert not (tmp_path / VERSION_DIR / "library-1.0.1.aar.asc.md5").exists()
        assert _exit_code("verify", "--config", str(config)) == SUCCESS

    def test_verify_without_config(self) -> None:
        assert _exit_code("verify") == USER_ERROR


class TestLib:
    def test_lib_copies_primary(self, tmp_config_file: Path, build_outputs: dict[str, Path]) -> None:
        assert _exit_code("lib", "--config", str(tmp_config_file)) == SUCCESS
        assert (tmp_config_file.parent / "lib" / "library-release-1.0.1.aar").is_file()

    def test_lib_without_build_output(self, tmp_config_file: Path) -> None:
        assert _exit_code("lib", "--config", str(tmp_config_file)) == USER_ERROR

    def test_lib_dry_run(self, tmp_config_file: Path, build_outputs: dict[str, Path]) -> None:
        assert _exit_code("lib", "--config", str(tmp_config_file), "--dry-run") == SUCCESS
        assert not (tmp_config_file.parent / "lib").exists()


class TestCheckAndInfo:
    def test_check_tolerates_missing_gpg(self, tmp_path: Path) -> None:
        config = tmp_path / "check.yaml"
        config.write_text(
            textwrap.dedent("""\
                global:
                  config_version: "1.0.0"
                bundle:
                  coordinates:
                    group_id: "com.example.lib"
                    artifact_id: "library"
                    version: "1.0.1"
                  signing:
                    gpg_binary: "centralpack-no-such-gpg"
            """),
            encoding="utf-8",
        )
        assert _exit_code("check", "--config", str(config)) == SUCCESS

    def test_info(self) -> None:
        assert _exit_code("info", "--log-level", "WARNING") == SUCCESS
