"""Tests for archive entry extraction and composite locations."""

import pytest

from jdecomp_mcp.core.archive import (
    composite_location,
    extract_entry,
    split_composite_location,
)
from jdecomp_mcp.core.exceptions import ExtractionError


class TestCompositeLocation:
    def test_build(self):
        assert composite_location("/libs/app.jar", "com/x/Foo.class") == "/libs/app.jar:com/x/Foo.class"

    def test_split(self):
        assert split_composite_location("/libs/app.jar:com/x/Foo.class") == (
            "/libs/app.jar",
            "com/x/Foo.class",
        )

    def test_split_is_case_insensitive(self):
        assert split_composite_location("/libs/APP.JAR:Foo.class") == ("/libs/APP.JAR", "Foo.class")

    def test_plain_path(self):
        assert split_composite_location("/proj/Foo.class") == (None, "/proj/Foo.class")

    def test_windows_drive_is_not_an_archive(self):
        assert split_composite_location("C:/proj/Foo.class") == (None, "C:/proj/Foo.class")


class TestExtractEntry:
    def test_extracts_to_private_directory(self, toolchain, patched_config, tmp_path):
        archive = tmp_path / "app.jar"

        extracted = extract_entry(archive, "com/example/Foo.class")

        assert extracted.name == "Foo.class"
        assert extracted.read_bytes() == toolchain.extracted_bytes
        assert extracted.parent.parent == patched_config.temp_root / "jdecomp"
        assert extracted.parent.name.startswith("Foo")
        (cmd,) = toolchain.calls_for("extract")
        assert cmd == ["unzip", "-p", str(archive), "com/example/Foo.class"]

    def test_each_extraction_gets_its_own_directory(self, toolchain, tmp_path):
        first = extract_entry(tmp_path / "app.jar", "Foo.class")
        second = extract_entry(tmp_path / "app.jar", "Foo.class")

        assert first != second

    def test_failure_becomes_extraction_error(self, toolchain, tmp_path):
        toolchain.failures["extract"] = 11

        with pytest.raises(ExtractionError) as exc_info:
            extract_entry(tmp_path / "app.jar", "Missing.class")

        assert "extract failed" in exc_info.value.message

    def test_missing_tool_becomes_extraction_error(self, toolchain, tmp_path):
        toolchain.missing.add("extract")

        with pytest.raises(ExtractionError):
            extract_entry(tmp_path / "app.jar", "Foo.class")
