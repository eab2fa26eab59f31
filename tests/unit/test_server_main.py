"""
Unit tests for server dependency checks and transport selection.
"""

import pytest


@pytest.fixture
def server(patched_config):
    from jdecomp_mcp import server

    return server


def test_dependency_report(server, monkeypatch):
    located = {"java": "/usr/bin/java", "file": "/usr/bin/file"}
    monkeypatch.setattr(server.shutil, "which", lambda command: located.get(command))

    report = server.dependency_report()

    assert report["java"] == {"status": "available", "path": "/usr/bin/java"}
    assert report["content_probe"]["status"] == "available"
    assert report["extractor"] == {"status": "unavailable", "command": "unzip"}


def test_main_stdio(server, monkeypatch):
    called = {}

    def _run(transport: str = "stdio"):
        called["transport"] = transport

    monkeypatch.setattr(server.mcp, "run", _run, raising=True)

    server.main()

    assert called == {"transport": "stdio"}


@pytest.mark.asyncio
async def test_lifespan_applies_auto_decompile(server, live_settings, monkeypatch):
    from jdecomp_mcp.core.hooks import auto_decompile_hook
    from jdecomp_mcp.core.settings_manager import set_settings

    monkeypatch.setattr(server.shutil, "which", lambda command: None)
    set_settings(live_settings.updated(auto_decompile=True))

    async with server.server_lifespan(server.mcp):
        assert auto_decompile_hook.enabled is True
