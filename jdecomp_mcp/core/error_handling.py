"""Shared error handling utilities for tool wrappers."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from jdecomp_mcp.core.exceptions import (
    DecompilationError,
    DecompiledFileNotFoundError,
    DecompilerNotAvailableError,
    ExecutionTimeoutError,
    ExtractionError,
    ToolNotFoundError,
    UnknownDecompilerError,
    ValidationError,
)
from jdecomp_mcp.core.logging_config import get_logger
from jdecomp_mcp.core.result import ToolResult, failure

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., ToolResult])


def _handle_exception(exc: Exception, tool_name: str) -> ToolResult:
    """Convert common exceptions into ToolResult failures.

    Args:
        exc: The exception to handle
        tool_name: Name of the tool that raised the exception

    Returns:
        ToolResult with appropriate error code and message
    """
    if isinstance(exc, ValidationError):
        return failure(
            "VALIDATION_ERROR",
            str(exc),
            hint="Pass the path of a .class file (or a .class entry together with its jar)",
            **exc.details,
        )

    if isinstance(exc, UnknownDecompilerError):
        return failure(
            "UNKNOWN_DECOMPILER",
            str(exc),
            hint="Supported decompilers: cfr, fernflower",
            decompiler=exc.decompiler,
        )

    if isinstance(exc, DecompilerNotAvailableError):
        env_var = f"JDECOMP_{exc.decompiler.upper()}_PATH"
        return failure(
            "DECOMPILER_NOT_AVAILABLE",
            str(exc),
            hint=f"Set {env_var} (or call configure_decompiler) to the decompiler's jar file",
            decompiler=exc.decompiler,
            path=exc.path,
        )

    if isinstance(exc, ToolNotFoundError):
        return failure(
            "TOOL_NOT_FOUND",
            str(exc),
            hint=f"Make sure '{exc.tool_name}' is installed and on PATH",
            tool_name=exc.tool_name,
        )

    if isinstance(exc, ExecutionTimeoutError):
        return failure(
            "TIMEOUT",
            f"Command timed out after {exc.timeout_seconds} seconds",
            timeout_seconds=exc.timeout_seconds,
        )

    if isinstance(exc, ExtractionError):
        return failure(
            "EXTRACTION_FAILED",
            str(exc),
            hint="Check that the entry name matches the archive listing",
            archive=exc.archive,
            entry=exc.entry,
        )

    if isinstance(exc, DecompiledFileNotFoundError):
        return failure(
            "NO_DECOMPILED_FILE",
            str(exc),
            hint="The decompiler ran but wrote no .java file; check its options",
            directory=exc.directory,
        )

    if isinstance(exc, DecompilationError):
        return failure(
            "DECOMPILATION_FAILED",
            str(exc),
            returncode=exc.returncode,
        )

    logger.exception("Unexpected error in tool '%s'", tool_name)
    return failure(
        "INTERNAL_ERROR",
        f"{tool_name} failed: {exc}",
        exception_type=exc.__class__.__name__,
    )


def handle_tool_errors(func: F) -> F:
    """Turn exceptions raised by a sync or async tool into ``ToolError`` results."""
    tool_name = func.__name__

    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args, **kwargs) -> ToolResult:
            try:
                return await func(*args, **kwargs)
            except Exception as exc:
                return _handle_exception(exc, tool_name)

        return async_wrapper  # type: ignore

    @wraps(func)
    def sync_wrapper(*args, **kwargs) -> ToolResult:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            return _handle_exception(exc, tool_name)

    return sync_wrapper  # type: ignore
