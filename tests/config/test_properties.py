# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for the Java .properties reader used for local.properties credentials."""

from pathlib import Path

import pytest

from centralpack.config.exceptions import ConfigLoadError
from centralpack.config.properties import load_properties, parse_properties


class TestParseProperties:
    def test_separators(self) -> None:
        props = parse_properties("a=1\nb: 2\nc 3\nd = 4\n")
        assert props == {"a": "1", "b": "2", "c": "3", "d": "4"}

    def test_comments_and_blank_lines_are_skipped(self) -> None:
        props = parse_properties("# comment\n! also a comment\n\n   \nkey=value\n")
        assert props == {"key": "value"}

    def test_gradle_signing_keys(self) -> None:
        text = "sdk.dir=/opt/android\nsigning.keyId=ABCD1234\nsigning.password=s3cret\n"
        props = parse_properties(text)
        assert props["signing.keyId"] == "ABCD1234"
        assert props["signing.password"] == "s3cret"

    def test_line_continuation(self) -> None:
        props = parse_properties("long=first \\\n    second\n")
        assert props == {"long": "first second"}

    def test_escapes(self) -> None:
        props = parse_properties("path=C\\:\\\\tools\nkey\\=with\\=equals=v\nsnow=\\u2603\n")
        assert props["path"] == "C:\\tools"
        assert props["key=with=equals"] == "v"
        assert props["snow"] == "\u2603"

    def test_value_keeps_inner_separators(self) -> None:
        props = parse_properties("url=https://example.com:8080/a=b\n")
        assert props["url"] == "https://example.com:8080/a=b"

    def test_empty_value(self) -> None:
        assert parse_properties("empty=\n") == {"empty": ""}

    def test_later_keys_override(self) -> None:
        assert parse_properties("k=1\nk=2\n") == {"k": "2"}

    def test_malformed_escape_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_properties("snow=\\u26\n")


class TestLoadProperties:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_properties(tmp_path / "local.properties") == {}

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "local.properties"
        path.write_text("signing.keyId=FEEDBEEF\n", encoding="utf-8")
        assert load_properties(path) == {"signing.keyId": "FEEDBEEF"}

    def test_file_is_read_as_latin1(self, tmp_path: Path) -> None:
        path = tmp_path / "local.properties"
        path.write_bytes("owner=J\u00f6rg\n".encode("latin-1"))
        assert load_properties(path) == {"owner": "J\u00f6rg"}

    def test_malformed_escape_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "local.properties"
        path.write_text("signing.keyId=\\u12\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            load_properties(path)
