# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for runtime bootstrap and system info."""

import logging
from pathlib import Path

import pytest

from centralpack.config.schema import GlobalConfig
from centralpack.logging.logger import PACKAGE_LOGGER
from centralpack.runtime.bootstrap import bootstrap
from centralpack.runtime.environment import get_system_info


def test_system_info_fields() -> None:
    info = get_system_info()
    assert info.python_version.count(".") == 2
    assert info.platform
    assert isinstance(info.hostname, str)


def test_bootstrap_applies_config_level(tmp_path: Path) -> None:
    bootstrap(GlobalConfig(config_version="1.0.0", log_level="WARNING"), tmp_path)
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING


def test_cli_level_overrides_config(tmp_path: Path) -> None:
    bootstrap(GlobalConfig(config_version="1.0.0", log_level="WARNING"), tmp_path, log_level="DEBUG")
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG


def test_relative_log_file_anchors_at_project_root(tmp_path: Path) -> None:
    bootstrap(GlobalConfig(config_version="1.0.0", log_file="logs/run.log"), tmp_path)
    for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
        handler.flush()
    assert (tmp_path / "logs" / "run.log").read_text(encoding="utf-8").strip()


def test_invalid_level_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        bootstrap(GlobalConfig(config_version="1.0.0", log_level="LOUD"), tmp_path)
