# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""System information for startup logging and `centralpack info`."""

import platform
from typing import NamedTuple


class SystemInfo(NamedTuple):
    """Snapshot of the current system environment."""

    python_version: str
    platform: str
    architecture: str
    hostname: str


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
    )
