# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path helpers.

Config paths are relative to a project root (the directory holding the
Gradle build, usually where the config file lives). Absolute paths in the
config are used as-is.
"""

from pathlib import Path


def resolve_path(value: str, project_root: Path) -> Path:
    """Anchor a config path at the project root unless it is already absolute."""
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return project_root / path


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if missing. Returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def validate_path_within(target: Path, root: Path) -> Path:
    """
    Make sure target does not escape root.

    Both paths are resolved first, so `../` segments and symlinks are caught.

    Returns:
        The resolved target.

    Raises:
        ValueError: If target resolves outside root.
    """
    resolved_target = target.resolve()
    resolved_root = root.resolve()

    if resolved_target != resolved_root and resolved_root not in resolved_target.parents:
        raise ValueError(
            f"Path '{target}' resolves to '{resolved_target}' which is outside "
            f"'{resolved_root}'. This is not allowed."
        )

    return resolved_target
