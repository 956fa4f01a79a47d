# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Configuration errors.

Kept apart from the loader so the CLI can catch them without importing
pydantic or PyYAML.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """The YAML or .properties file could not be read or parsed."""


class ConfigValidationError(ConfigError):
    """
    The file parsed but the content does not match the schema: missing
    coordinates, unknown keys, unsupported checksum algorithms and so on.
    """
