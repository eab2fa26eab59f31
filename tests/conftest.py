"""Pytest configuration and shared fixtures with explicit dependency injection."""

import subprocess
from pathlib import Path

import pytest

from jdecomp_mcp.core.config import Config, Decompiler, DecompilerSettings
from jdecomp_mcp.core.exceptions import ToolNotFoundError
from jdecomp_mcp.core.hooks import auto_decompile_hook
from jdecomp_mcp.core.metrics import metrics_collector
from jdecomp_mcp.core.sessions import session_registry
from jdecomp_mcp.core.settings_manager import SettingsManager

JAR_MIME = "application/java-archive"


class FakeToolchain:
    """Stand-in for file, unzip and the two decompilers.

    Replaces ``execute_subprocess_streaming`` wherever the pipeline imports
    it, records every command and mimics what each program writes.
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self.mime_types: dict[str, str] = {}
        self.cfr_output = "public class Foo {\n}\n"
        self.fernflower_output = "public class Foo {\n   // fernflower\n}\n"
        self.fernflower_writes_source = True
        self.extracted_bytes = b"\xca\xfe\xba\xbe"
        self.failures: dict[str, int] = {}
        self.missing: set[str] = set()

    def set_mime(self, path, mime: str) -> None:
        self.mime_types[str(Path(path).resolve())] = mime

    @staticmethod
    def role(cmd: list[str]) -> str:
        if cmd[0] == "file":
            return "probe"
        if cmd[0] == "unzip":
            return "extract"
        if cmd[0] == "java" and "-jar" in cmd:
            return "cfr"
        if cmd[0] == "java":
            return "fernflower"
        return "unknown"

    def calls_for(self, role: str) -> list[list[str]]:
        return [cmd for cmd in self.calls if self.role(cmd) == role]

    def __call__(
        self,
        cmd,
        timeout=None,
        encoding="utf-8",
        errors="replace",
        stdout_path=None,
        discard_output=False,
    ):
        cmd = [str(part) for part in cmd]
        self.calls.append(cmd)
        role = self.role(cmd)

        if role in self.missing:
            raise ToolNotFoundError(cmd[0])
        if role in self.failures:
            raise subprocess.CalledProcessError(
                self.failures[role], cmd, output="", stderr=f"{role} failed"
            )

        if role == "probe":
            output = self.mime_types.get(cmd[-1], "application/octet-stream") + "\n"
            return output, len(output)
        if role == "extract":
            Path(stdout_path).write_bytes(self.extracted_bytes)
            return "", len(self.extracted_bytes)
        if role == "cfr":
            return self.cfr_output, len(self.cfr_output)
        if role == "fernflower":
            if self.fernflower_writes_source:
                destination = Path(cmd[-1])
                source = destination / (Path(cmd[-2]).stem + ".java")
                source.write_text(self.fernflower_output, encoding="utf-8")
            return "", 0
        raise AssertionError(f"Unexpected command: {cmd}")


@pytest.fixture
def config(tmp_path) -> Config:
    """Provide a Config instance with a private temp root."""
    return Config(
        log_level="INFO",
        log_file=tmp_path / "logs" / "jdecomp.log",
        log_format="human",
        structured_errors=False,
        mcp_transport="stdio",
        default_tool_timeout=0,
        temp_root=tmp_path / "tmp",
        java_command="java",
        file_command=("file", "--brief", "--mime-type"),
        extract_command=("unzip", "-p"),
    )


@pytest.fixture
def patched_config(config, monkeypatch):
    """Ensure get_config() calls inside modules return the test Config."""
    monkeypatch.setattr("jdecomp_mcp.core.config._CONFIG", config)
    return config


@pytest.fixture
def decompiler_jars(tmp_path):
    """Create placeholder decompiler jars."""
    tools = tmp_path / "tools"
    tools.mkdir()
    cfr = tools / "cfr-0.152.jar"
    fernflower = tools / "fernflower.jar"
    cfr.write_bytes(b"PK\x03\x04cfr")
    fernflower.write_bytes(b"PK\x03\x04fernflower")
    return {Decompiler.CFR: cfr, Decompiler.FERNFLOWER: fernflower}


@pytest.fixture
def settings(decompiler_jars) -> DecompilerSettings:
    """CFR selected, both decompilers configured."""
    return DecompilerSettings(
        decompiler="cfr",
        paths=dict(decompiler_jars),
        options={Decompiler.CFR: (), Decompiler.FERNFLOWER: ()},
    )


@pytest.fixture
def live_settings(settings):
    """Install ``settings`` as the process-wide decompiler settings."""
    SettingsManager.set(settings)
    yield settings
    SettingsManager.clear()


@pytest.fixture
def toolchain(monkeypatch, patched_config, decompiler_jars):
    """Fake external programs; decompiler jars probe as Java archives."""
    fake = FakeToolchain()
    for jar in decompiler_jars.values():
        fake.set_mime(jar, JAR_MIME)
    for module in ("file_classifier", "archive", "decompilers"):
        monkeypatch.setattr(f"jdecomp_mcp.core.{module}.execute_subprocess_streaming", fake)
    return fake


@pytest.fixture
def class_file(tmp_path):
    """A class file sitting in its own project directory."""
    project = tmp_path / "proj"
    project.mkdir()
    path = project / "Foo.class"
    path.write_bytes(b"\xca\xfe\xba\xbe\x00\x00\x00\x34")
    return path


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Sessions, hook flag, settings and metrics are process-wide."""
    session_registry.clear()
    auto_decompile_hook.enabled = False
    SettingsManager.clear()
    metrics_collector.reset()
    yield
    session_registry.clear()
    auto_decompile_hook.enabled = False
    SettingsManager.clear()
