"""
Error formatting utilities for structured error responses.
"""

from typing import Any, Dict, Optional

from jdecomp_mcp.core.config import get_config
from jdecomp_mcp.core.exceptions import JdecompError

_DETAIL_ATTRIBUTES = (
    "tool_name",
    "timeout_seconds",
    "decompiler",
    "path",
    "archive",
    "entry",
    "directory",
    "returncode",
)


def format_error(
    error: Exception, tool_name: Optional[str] = None, hint: Optional[str] = None
) -> str | Dict[str, Any]:
    """
    Format an error as string or structured JSON based on configuration.

    Args:
        error: The exception to format
        tool_name: Name of the tool that raised the error
        hint: Optional hint message for resolving the error

    Returns:
        Error message as string (default) or structured dict (if STRUCTURED_ERRORS=true)
    """
    if isinstance(error, JdecompError):
        error_code = error.error_code
        error_type = error.error_type
        message = error.message
        details: Dict[str, Any] = {}
        for attr in _DETAIL_ATTRIBUTES:
            if getattr(error, attr, None) is not None:
                details[attr] = getattr(error, attr)
        details.update(getattr(error, "details", {}))
    else:
        error_code = "JDMCP-E000"
        error_type = "SYSTEM_ERROR"
        message = str(error)
        details = {"exception_type": type(error).__name__}

    if tool_name:
        details["tool_name"] = tool_name

    if get_config().structured_errors:
        result: Dict[str, Any] = {
            "error_code": error_code,
            "error_type": error_type,
            "message": message,
            "details": details,
        }
        if hint:
            result["hint"] = hint
        return result

    error_str = f"Error: {message}"
    if hint:
        error_str += f" Hint: {hint}"
    return error_str
