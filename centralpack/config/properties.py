# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Reader for Java-style .properties files.

Gradle projects keep signing and repository credentials in an untracked
`local.properties` next to the build script. We read the same file so a
project does not need to duplicate secrets into the YAML config.

Parsing is done by javaproperties, which follows java.util.Properties: the
file is read as Latin-1, with `\\uXXXX` escapes for anything else.
"""

from pathlib import Path

import javaproperties

from centralpack.config.exceptions import ConfigLoadError


def parse_properties(text: str) -> dict[str, str]:
    """
    Parse .properties content. Later keys override earlier ones.

    Raises:
        ValueError: On a malformed \\uXXXX escape.
    """
    return dict(javaproperties.loads(text))


def load_properties(path: Path) -> dict[str, str]:
    """
    Read a .properties file. A missing file is an empty mapping, not an error,
    because local.properties is optional by convention.

    Raises:
        ConfigLoadError: If the file exists but cannot be read or parsed.
    """
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as fp:
            return dict(javaproperties.load(fp))
    except OSError as err:
        raise ConfigLoadError(f"Cannot read properties file {path}: {err}") from err
    except ValueError as err:
        raise ConfigLoadError(f"Malformed properties file {path}: {err}") from err
