"""Tests for the MCP decompile tools."""

from jdecomp_mcp.core.config import Decompiler
from jdecomp_mcp.core.file_classifier import JAR_MIME_TYPE
from jdecomp_mcp.core.hooks import auto_decompile_hook
from jdecomp_mcp.core.result import ToolError, ToolSuccess
from jdecomp_mcp.core.sessions import session_registry
from jdecomp_mcp.core.settings_manager import get_settings
from jdecomp_mcp.tools import decompile_tools
from jdecomp_mcp.tools.decompile_tools import (
    close_session,
    configure_decompiler,
    decompile_class,
    decompiler_status,
    list_sessions,
    open_class_file,
    show_decompiled,
)


class TestDecompileClass:
    def test_success(self, toolchain, live_settings, class_file):
        result = decompile_class(str(class_file))

        assert isinstance(result, ToolSuccess)
        assert result.data["source_code"] == toolchain.cfr_output
        assert result.data["decompiler"] == "cfr"
        assert "jar" not in result.data
        assert result.metadata["length"] == len(toolchain.cfr_output)
        assert "execution_time_ms" in result.metadata

    def test_jar_entry(self, toolchain, live_settings, tmp_path):
        archive = str(tmp_path / "app.jar")

        result = decompile_class("com/example/Foo.class", jar=archive)

        assert result.status == "success"
        assert result.data["jar"] == archive

    def test_not_a_class_file(self, toolchain, live_settings):
        result = decompile_class("Foo.java")

        assert isinstance(result, ToolError)
        assert result.error_code == "VALIDATION_ERROR"
        assert result.details["file"] == "Foo.java"
        assert toolchain.calls == []

    def test_empty_file_argument(self, toolchain, live_settings):
        result = decompile_class("  ")

        assert result.error_code == "VALIDATION_ERROR"

    def test_decompiler_not_available(self, toolchain, live_settings, class_file, decompiler_jars):
        toolchain.set_mime(decompiler_jars[Decompiler.CFR], "text/plain")

        result = decompile_class(str(class_file))

        assert result.error_code == "DECOMPILER_NOT_AVAILABLE"
        assert "JDECOMP_CFR_PATH" in result.hint

    def test_unknown_decompiler(self, toolchain, live_settings, class_file):
        decompile_tools.set_settings(live_settings.updated(decompiler="jad"))

        result = decompile_class(str(class_file))

        assert result.error_code == "UNKNOWN_DECOMPILER"

    def test_decompiler_failure(self, toolchain, live_settings, class_file):
        toolchain.failures["cfr"] = 3

        result = decompile_class(str(class_file))

        assert result.error_code == "DECOMPILATION_FAILED"
        assert result.details["returncode"] == 3

    def test_missing_java(self, toolchain, live_settings, class_file):
        toolchain.missing.add("cfr")

        result = decompile_class(str(class_file))

        assert result.error_code == "TOOL_NOT_FOUND"

    def test_fernflower_without_output(self, toolchain, live_settings, class_file):
        decompile_tools.set_settings(live_settings.updated(decompiler="fernflower"))
        toolchain.fernflower_writes_source = False

        result = decompile_class(str(class_file))

        assert result.error_code == "NO_DECOMPILED_FILE"

    def test_extraction_failure(self, toolchain, live_settings, tmp_path):
        decompile_tools.set_settings(live_settings.updated(decompiler="fernflower"))
        toolchain.failures["extract"] = 11

        result = decompile_class("Foo.class", jar=str(tmp_path / "app.jar"))

        assert result.error_code == "EXTRACTION_FAILED"
        assert result.details["entry"] == "Foo.class"

    def test_reports_decompiler_that_ran(self, toolchain, live_settings, class_file, monkeypatch):
        later = live_settings.updated(decompiler="fernflower")
        reads = iter([live_settings])
        monkeypatch.setattr(
            "jdecomp_mcp.core.sessions.get_settings", lambda: next(reads, later)
        )

        result = decompile_class(str(class_file))

        assert result.data["source_code"] == toolchain.cfr_output
        assert result.data["decompiler"] == "cfr"


class TestSessionTools:
    def test_show_list_and_close(self, toolchain, live_settings, class_file):
        shown = show_decompiled(str(class_file))

        assert shown.status == "success"
        assert shown.metadata["uri"] == "jdecomp://sessions/Foo.class"
        assert shown.data["read_only"] is True
        assert shown.data["modified"] is False
        assert shown.data["length"] == len(toolchain.cfr_output)

        listed = list_sessions()
        assert [s["name"] for s in listed.data] == ["Foo.class"]
        assert listed.metadata["session_count"] == 1

        closed = close_session("Foo.class")
        assert closed.status == "success"
        assert len(session_registry) == 0

    def test_close_unknown_session(self):
        result = close_session("Nope.class")

        assert result.error_code == "VALIDATION_ERROR"


class TestOpenClassFile:
    def test_raw_when_auto_decompile_disabled(self, toolchain, live_settings, class_file):
        result = open_class_file(str(class_file))

        assert result.data["auto_decompiled"] is False
        assert result.data["size"] == class_file.stat().st_size
        assert toolchain.calls == []

    def test_decompiles_when_enabled(self, toolchain, live_settings, class_file):
        auto_decompile_hook.enable()

        result = open_class_file(str(class_file))

        assert result.metadata["auto_decompiled"] is True
        assert result.data["name"] == "Foo.class"
        assert "Foo.class" in session_registry

    def test_archive_location(self, toolchain, live_settings, tmp_path):
        auto_decompile_hook.enable()
        location = f"{tmp_path / 'app.jar'}:com/example/Foo.class"

        result = open_class_file(location)

        assert result.data["origin"] == location

    def test_archive_location_disabled(self, toolchain, live_settings, tmp_path):
        archive = str(tmp_path / "app.jar")

        result = open_class_file(f"{archive}:META-INF/MANIFEST.MF")

        assert result.data == {
            "path": f"{archive}:META-INF/MANIFEST.MF",
            "auto_decompiled": False,
            "archive": archive,
            "entry": "META-INF/MANIFEST.MF",
        }

    def test_missing_file(self, tmp_path):
        result = open_class_file(str(tmp_path / "Gone.class"))

        assert result.error_code == "VALIDATION_ERROR"


class TestConfigureDecompiler:
    def test_switch_decompiler_and_options(self, toolchain, live_settings, decompiler_jars):
        result = configure_decompiler(decompiler="fernflower", options=["-dgs=1"])

        assert result.data == {
            "decompiler": "fernflower",
            "path": str(decompiler_jars[Decompiler.FERNFLOWER]),
            "options": ["-dgs=1"],
            "auto_decompile": False,
        }
        assert get_settings().decompiler == "fernflower"

    def test_toggle_auto_decompile(self, live_settings):
        configure_decompiler(auto_decompile=True)

        assert auto_decompile_hook.enabled is True
        assert get_settings().auto_decompile is True

    def test_unknown_decompiler(self, live_settings):
        result = configure_decompiler(decompiler="jad")

        assert result.error_code == "UNKNOWN_DECOMPILER"
        assert get_settings().decompiler == "cfr"

    def test_bad_options_type(self, live_settings):
        result = configure_decompiler(options="--comments false")  # type: ignore[arg-type]

        assert result.error_code == "VALIDATION_ERROR"

    def test_next_request_uses_new_settings(self, toolchain, live_settings, class_file):
        configure_decompiler(decompiler="fernflower")

        result = decompile_class(str(class_file))

        assert result.data["source_code"] == toolchain.fernflower_output
        assert result.data["decompiler"] == "fernflower"

    def test_unusable_jar_path_reports_not_available(self, toolchain, live_settings, class_file):
        configure_decompiler(path="cfr\x00.jar")

        result = decompile_class(str(class_file))

        assert result.error_code == "DECOMPILER_NOT_AVAILABLE"


class TestDecompilerStatus:
    def test_reports_availability(self, toolchain, live_settings, decompiler_jars):
        toolchain.set_mime(decompiler_jars[Decompiler.FERNFLOWER], "application/zip")

        result = decompiler_status()

        statuses = {s["decompiler"]: s for s in result.data["decompilers"]}
        assert result.data["selected"] == "cfr"
        assert statuses["cfr"]["available"] is True
        assert statuses["cfr"]["selected"] is True
        assert statuses["fernflower"]["available"] is False
        assert result.data["sessions"] == 0

    def test_availability_is_not_cached(self, toolchain, live_settings, decompiler_jars):
        jar = decompiler_jars[Decompiler.CFR]
        decompiler_status()
        toolchain.set_mime(jar, "text/plain")

        result = decompiler_status()

        cfr = next(s for s in result.data["decompilers"] if s["decompiler"] == "cfr")
        assert cfr["available"] is False
        toolchain.set_mime(jar, JAR_MIME_TYPE)

