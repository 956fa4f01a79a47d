# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for path helpers."""

from pathlib import Path

import pytest

from centralpack.utils.paths import ensure_directory, resolve_path, validate_path_within


def test_relative_paths_anchor_at_project_root(tmp_path: Path) -> None:
    assert resolve_path("build/outputs", tmp_path) == tmp_path / "build" / "outputs"


def test_absolute_paths_are_kept(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere"
    assert resolve_path(str(absolute), Path("/unused")) == absolute


def test_ensure_directory_creates_parents(tmp_path: Path) -> None:
    target = ensure_directory(tmp_path / "a" / "b" / "c")
    assert target.is_dir()


def test_path_within_root_is_accepted(tmp_path: Path) -> None:
    assert validate_path_within(tmp_path / "a" / "b.txt", tmp_path) == (tmp_path / "a" / "b.txt").resolve()


def test_root_itself_is_accepted(tmp_path: Path) -> None:
    assert validate_path_within(tmp_path, tmp_path) == tmp_path.resolve()


def test_parent_traversal_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="outside"):
        validate_path_within(tmp_path / "a" / ".." / ".." / "escape.txt", tmp_path)
