"""MCP tools for decompiling Java class files and managing their sessions."""

from pathlib import Path
from typing import Optional

from fastmcp import FastMCP

from jdecomp_mcp.core.archive import split_composite_location
from jdecomp_mcp.core.config import Decompiler
from jdecomp_mcp.core.decorators import log_execution
from jdecomp_mcp.core.decompilers import check_available, resolve_decompiler
from jdecomp_mcp.core.error_handling import handle_tool_errors
from jdecomp_mcp.core.exceptions import JdecompError, ValidationError
from jdecomp_mcp.core.hooks import (
    ARCHIVE_ENTRY_EXTRACTED,
    FILE_OPENED,
    auto_decompile_hook,
    lifecycle_events,
)
from jdecomp_mcp.core.metrics import metrics_collector, track_metrics
from jdecomp_mcp.core.result import ToolResult, success
from jdecomp_mcp.core.sessions import decompile_and_present, run_decompile, session_registry
from jdecomp_mcp.core.settings_manager import get_settings, set_settings
from jdecomp_mcp.core.validators import validate_tool_parameters

__all__ = [
    "decompile_class",
    "show_decompiled",
    "open_class_file",
    "list_sessions",
    "close_session",
    "configure_decompiler",
    "decompiler_status",
    "register_decompile_tools",
]


@log_execution(tool_name="decompile_class")
@track_metrics("decompile_class")
@handle_tool_errors
def decompile_class(file: str, jar: Optional[str] = None) -> ToolResult:
    """
    Decompile a Java class file and return its source.

    Args:
        file: Path to a .class file, or the entry name inside ``jar``
              (e.g. ``com/example/Foo.class``)
        jar: Optional path to the JAR archive that contains ``file``

    Returns:
        ToolResult with the decompiled Java source
    """
    validate_tool_parameters("decompile_class", {"file": file, "jar": jar})
    text, decompiler = run_decompile(file, jar)
    data = {"file": file, "source_code": text, "decompiler": decompiler}
    if jar:
        data["jar"] = jar
    return success(data, length=len(text))


@log_execution(tool_name="show_decompiled")
@track_metrics("show_decompiled")
@handle_tool_errors
def show_decompiled(file: str, jar: Optional[str] = None) -> ToolResult:
    """
    Decompile a class file into a read-only session.

    The session is named after the class file's base name and replaces any
    earlier session of that name. Read it from the returned ``uri``.
    """
    validate_tool_parameters("show_decompiled", {"file": file, "jar": jar})
    session = decompile_and_present(file, jar)
    return success(session.to_dict(), uri=session.uri)


@log_execution(tool_name="open_class_file")
@track_metrics("open_class_file")
@handle_tool_errors
def open_class_file(path: str) -> ToolResult:
    """
    Open a file the way an editor would.

    With auto-decompile enabled, class files (including ``archive.jar:entry``
    locations) open as decompiled sessions. Otherwise the raw file is
    described without decompiling it.
    """
    validate_tool_parameters("open_class_file", {"path": path})
    archive, entry = split_composite_location(path)
    if archive:
        session = lifecycle_events.emit(ARCHIVE_ENTRY_EXTRACTED, archive, entry)
    else:
        session = lifecycle_events.emit(FILE_OPENED, path)

    if session is not None:
        return success(session.to_dict(), uri=session.uri, auto_decompiled=True)

    raw = {"path": path, "auto_decompiled": False}
    if not archive:
        target = Path(path)
        if not target.is_file():
            raise ValidationError(f"File not found: {path}", details={"path": path})
        raw["size"] = target.stat().st_size
    else:
        raw.update({"archive": archive, "entry": entry})
    return success(raw, auto_decompiled=False)


@log_execution(tool_name="list_sessions")
@track_metrics("list_sessions")
@handle_tool_errors
def list_sessions() -> ToolResult:
    """List decompiled sessions (without their text)."""
    sessions = [s.to_dict() for s in session_registry.list()]
    return success(sessions, session_count=len(sessions))


@log_execution(tool_name="close_session")
@track_metrics("close_session")
@handle_tool_errors
def close_session(name: str) -> ToolResult:
    """Close (discard) the decompiled session called ``name``."""
    if not session_registry.close(name):
        raise ValidationError(f"No session named {name}", details={"name": name})
    return success(f"Closed session {name}", name=name)


@log_execution(tool_name="configure_decompiler")
@track_metrics("configure_decompiler")
@handle_tool_errors
def configure_decompiler(
    decompiler: Optional[str] = None,
    path: Optional[str] = None,
    options: Optional[list[str]] = None,
    auto_decompile: Optional[bool] = None,
) -> ToolResult:
    """
    Change decompiler settings for this server process.

    Args:
        decompiler: ``cfr`` or ``fernflower``; becomes the selected decompiler
        path: Jar file of the selected decompiler
        options: Option strings for the selected decompiler, e.g. ``["--comments false"]``
        auto_decompile: Turn automatic decompilation of opened class files on or off

    Changes apply to the next request.
    """
    params = {
        "decompiler": decompiler,
        "path": path,
        "options": options,
        "auto_decompile": auto_decompile,
    }
    validate_tool_parameters("configure_decompiler", params)

    settings = get_settings().updated(
        decompiler=decompiler,
        path=path,
        options=options,
        auto_decompile=auto_decompile,
    )
    set_settings(settings)
    if auto_decompile is not None:
        auto_decompile_hook.enabled = auto_decompile

    selected = resolve_decompiler(settings.decompiler)
    jar_path = settings.path_for(selected)
    return success(
        {
            "decompiler": settings.decompiler,
            "path": str(jar_path) if jar_path else None,
            "options": list(settings.options_for(selected)),
            "auto_decompile": auto_decompile_hook.enabled,
        }
    )


@log_execution(tool_name="decompiler_status")
@track_metrics("decompiler_status")
@handle_tool_errors
def decompiler_status() -> ToolResult:
    """Report which decompilers are configured and usable right now."""
    settings = get_settings()
    statuses = []
    for decompiler in Decompiler:
        jar_path = settings.path_for(decompiler)
        try:
            check_available(decompiler.value, settings)
            available = True
        except JdecompError:
            available = False
        statuses.append(
            {
                "decompiler": decompiler.value,
                "path": str(jar_path) if jar_path else None,
                "options": list(settings.options_for(decompiler)),
                "available": available,
                "selected": decompiler.value == settings.decompiler,
            }
        )
    return success(
        {
            "selected": settings.decompiler,
            "decompilers": statuses,
            "auto_decompile": auto_decompile_hook.enabled,
            "sessions": len(session_registry),
            "metrics": metrics_collector.get_metrics(),
        }
    )


def register_decompile_tools(mcp: FastMCP) -> None:
    """
    Register the decompile tools with the FastMCP server.

    Args:
        mcp: The FastMCP server instance to register tools with
    """
    mcp.tool(decompile_class)
    mcp.tool(show_decompiled)
    mcp.tool(open_class_file)
    mcp.tool(list_sessions)
    mcp.tool(close_session)
    mcp.tool(configure_decompiler)
    mcp.tool(decompiler_status)
