# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader. Reads YAML from disk and produces a validated, frozen
CentralPackConfig.

The pipeline is linear:
  1. Read the file
  2. Parse it as YAML into a plain dict
  3. Validate with pydantic
  4. Return the frozen config

Unlike the release run itself, config loading never falls back to defaults
on error. A broken config stops the command before anything is staged.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from centralpack.config.exceptions import ConfigLoadError, ConfigValidationError
from centralpack.config.schema import CentralPackConfig


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    Raises:
        ConfigLoadError: If the file is missing, unreadable, or not a YAML mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def load_config(config_path: Path) -> CentralPackConfig:
    """
    Load and validate a config file.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        A frozen CentralPackConfig.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations.
    """
    raw_data = _read_yaml_file(config_path)

    try:
        return CentralPackConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err
