# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap.

Runs once per CLI command after the config is loaded:
  1. Refuse to run on an unsupported Python
  2. Point the JSON logger at the configured level and log file
  3. Log a startup line with basic system info
"""

from pathlib import Path

from centralpack.config.schema import GlobalConfig
from centralpack.logging.logger import configure_logging, get_logger
from centralpack.release.environment.validator import check_python_version
from centralpack.runtime.environment import get_system_info
from centralpack.utils.paths import resolve_path


def bootstrap(config: GlobalConfig, project_root: Path, log_level: str | None = None) -> None:
    """
    Args:
        config: The validated `global:` section.
        project_root: Anchor for a relative log_file.
        log_level: CLI override for config.log_level.

    Raises:
        RuntimeError: If the interpreter is older than the supported minimum.
    """
    python_check = check_python_version()
    if not python_check.passed:
        raise RuntimeError(python_check.message)

    log_file = resolve_path(config.log_file, project_root) if config.log_file else None
    configure_logging(log_level or config.log_level, log_file=log_file)

    system_info = get_system_info()
    get_logger("centralpack.runtime").info(
        "centralpack bootstrap complete",
        extra={
            "project": config.project_name,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
        },
    )
