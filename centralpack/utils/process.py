# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
External tool invocation.

This is the only module that spawns processes. Every failure mode (binary
missing, cannot start, timed out, non-zero exit) is raised as one
ToolError, so call sites need a single `except ToolError` to apply their
fallback policy.

No shell=True: arguments are passed as a list. Secrets such as signing
passphrases go through stdin (input_text), never argv, and are never logged.
"""

import logging
import os
import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from centralpack.logging.logger import get_logger

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolResult:
    """Captured output of a successful tool run."""

    tool: str
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


class ToolError(Exception):
    """A tool could not be run or finished unsuccessfully."""

    def __init__(self, tool: str, reason: str, result: Optional[ToolResult] = None) -> None:
        super().__init__(f"{tool}: {reason}")
        self.tool = tool
        self.reason = reason
        self.result = result


# Signature shared by run_external_tool and the fakes used in tests.
ToolRunner = Callable[..., ToolResult]


def run_external_tool(
    name: str,
    args: Sequence[str],
    *,
    input_text: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> ToolResult:
    """
    Run `name args...` synchronously and capture its output.

    Args:
        name: Executable name or path.
        args: Arguments, without the executable.
        input_text: Optional text fed to stdin.
        env: Extra environment variables, layered over os.environ.
        cwd: Working directory.
        timeout: Seconds before giving up; None waits for the tool.

    Returns:
        ToolResult for a zero exit status.

    Raises:
        ToolError: For every failure mode.
    """
    command = [name, *args]
    full_env = None
    if env:
        full_env = {**os.environ, **env}

    try:
        completed = subprocess.run(
            command,
            input=input_text,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(cwd) if cwd is not None else None,
            env=full_env,
            check=False,
        )
    except FileNotFoundError as err:
        raise ToolError(name, "not found on PATH") from err
    except subprocess.TimeoutExpired as err:
        raise ToolError(name, f"timed out after {timeout}s") from err
    except OSError as err:
        raise ToolError(name, f"could not be started: {err}") from err

    result = ToolResult(
        tool=name,
        args=tuple(args),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )

    _logger.debug(
        "Tool finished",
        extra={"tool": name, "tool_args": list(args), "exit_code": completed.returncode},
    )

    if completed.returncode != 0:
        raise ToolError(
            name,
            f"exited with status {completed.returncode}: {result.stderr.strip()[:200]}",
            result=result,
        )
    return result


def probe_tool(
    name: str,
    args: Sequence[str] = ("--version",),
    runner: ToolRunner = run_external_tool,
) -> bool:
    """True if `name --version` (or the given query) runs cleanly."""
    try:
        runner(name, list(args))
    except ToolError as err:
        _logger.info("Tool unavailable", extra={"tool": name, "reason": err.reason})
        return False
    return True
