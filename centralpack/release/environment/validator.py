# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pre-flight checks for a release run.

The bundle pipeline tolerates a missing gpg or a missing build output, but an
operator would rather know before staging than read it in the report. These
checks report; they never raise and never block the run.
"""

import logging
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from centralpack.logging.logger import get_logger
from centralpack.utils.process import ToolError, ToolRunner, run_external_tool

_logger: logging.Logger = get_logger(__name__)

MIN_PYTHON_MAJOR: int = 3
MIN_PYTHON_MINOR: int = 11
MIN_DISK_SPACE_BYTES: int = 104_857_600  # 100 MB


@dataclass(frozen=True)
class EnvironmentCheck:
    """Result of a single environment check."""

    name: str
    passed: bool
    message: str
    value: str


def check_python_version() -> EnvironmentCheck:
    major, minor, micro = sys.version_info[:3]
    version_str = f"{major}.{minor}.{micro}"
    passed = (major, minor) >= (MIN_PYTHON_MAJOR, MIN_PYTHON_MINOR)
    if passed:
        msg = f"Python {version_str} meets minimum {MIN_PYTHON_MAJOR}.{MIN_PYTHON_MINOR}"
    else:
        msg = f"Python {version_str} does NOT meet minimum {MIN_PYTHON_MAJOR}.{MIN_PYTHON_MINOR}"
    return EnvironmentCheck(name="python_version", passed=passed, message=msg, value=version_str)


def _existing_ancestor(path: Path) -> Path:
    current = path
    while not current.exists() and current != current.parent:
        current = current.parent
    return current


def check_disk_space(path: Optional[Path] = None) -> EnvironmentCheck:
    """Free space where the staging directory will be created."""
    check_path = _existing_ancestor(path or Path.cwd())
    try:
        usage = shutil.disk_usage(str(check_path))
    except OSError as err:
        return EnvironmentCheck(
            name="disk_space",
            passed=False,
            message=f"Cannot check disk space: {err}",
            value="error",
        )

    free_mb = usage.free / (1024**2)
    passed = usage.free >= MIN_DISK_SPACE_BYTES
    minimum_mb = MIN_DISK_SPACE_BYTES / (1024**2)
    if passed:
        msg = f"{free_mb:.0f} MB free at {check_path} (minimum {minimum_mb:.0f} MB)"
    else:
        msg = f"Only {free_mb:.0f} MB free at {check_path}; need at least {minimum_mb:.0f} MB"
    return EnvironmentCheck(name="disk_space", passed=passed, message=msg, value=f"{free_mb:.0f}MB")


def check_signing_tool(gpg_binary: str = "gpg", runner: ToolRunner = run_external_tool) -> EnvironmentCheck:
    """
    gpg is optional; without it every signature is a placeholder. Reported
    as a failed check so `centralpack check` makes that visible.
    """
    try:
        result = runner(gpg_binary, ["--version"])
    except ToolError as err:
        return EnvironmentCheck(
            name="signing_tool",
            passed=False,
            message=f"{gpg_binary} unavailable ({err.reason}); signatures will be placeholders",
            value="not_available",
        )
    first_line = result.stdout.strip().splitlines()[0] if result.stdout.strip() else gpg_binary
    return EnvironmentCheck(
        name="signing_tool",
        passed=True,
        message=f"{first_line} available",
        value=first_line,
    )


def check_compression() -> EnvironmentCheck:
    """Deflate-compressed archives need zlib."""
    try:
        import zlib

        return EnvironmentCheck(
            name="compression",
            passed=True,
            message=f"zlib {zlib.ZLIB_VERSION} available",
            value=zlib.ZLIB_VERSION,
        )
    except ImportError:
        return EnvironmentCheck(
            name="compression",
            passed=False,
            message="zlib not available; archives cannot be deflated",
            value="not_available",
        )


def validate_environment(
    output_dir: Optional[Path] = None,
    gpg_binary: str = "gpg",
    runner: ToolRunner = run_external_tool,
) -> list[EnvironmentCheck]:
    """Run every pre-flight check and log each result."""
    checks = [
        check_python_version(),
        check_disk_space(output_dir),
        check_signing_tool(gpg_binary, runner),
        check_compression(),
    ]

    for check in checks:
        log_fn = _logger.info if check.passed else _logger.warning
        log_fn(
            "Environment check",
            extra={"check": check.name, "passed": check.passed, "check_message": check.message},
        )

    passed_count = sum(1 for c in checks if c.passed)
    _logger.info(
        "Environment validation complete",
        extra={"passed": passed_count, "failed": len(checks) - passed_count},
    )
    return checks
