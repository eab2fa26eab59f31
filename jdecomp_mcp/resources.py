"""
MCP resources: decompiled sessions and server logs.

A session is the read-only viewer for one decompiled class. Clients list
them at ``jdecomp://sessions`` and read the Java source at
``jdecomp://sessions/{name}``.
"""

from collections import deque

import orjson
from fastmcp import FastMCP

from jdecomp_mcp.core.config import get_config
from jdecomp_mcp.core.error_formatting import format_error
from jdecomp_mcp.core.exceptions import ValidationError
from jdecomp_mcp.core.sessions import session_registry

LOG_TAIL_LINES = 100


def read_session(name: str) -> str:
    """Return the text of session ``name``, or a formatted error."""
    session = session_registry.get(name)
    if session is None:
        error = format_error(
            ValidationError(f"No session named {name}", details={"name": name}),
            hint="Call show_decompiled first",
        )
        return error if isinstance(error, str) else orjson.dumps(error, default=str).decode("utf-8")
    return session.text


def list_session_summaries() -> list[dict]:
    return [session.to_dict() for session in session_registry.list()]


def tail_log() -> str:
    log_file = get_config().log_file
    if not log_file.exists():
        return "No logs found."
    with open(log_file, encoding="utf-8", errors="replace") as f:
        return "".join(deque(f, maxlen=LOG_TAIL_LINES))


def register_resources(mcp: FastMCP):
    """Register MCP resources for decompiled sessions and logs."""

    @mcp.resource("jdecomp://sessions")
    def get_sessions() -> list[dict]:
        """Decompiled sessions (names, origins, sizes)"""
        return list_session_summaries()

    @mcp.resource("jdecomp://sessions/{name}", mime_type="text/x-java")
    def get_session(name: str) -> str:
        """Decompiled Java source of one session (read-only)"""
        return read_session(name)

    @mcp.resource("jdecomp://logs")
    def get_logs() -> str:
        """Application logs (last 100 lines)"""
        return tail_log()
