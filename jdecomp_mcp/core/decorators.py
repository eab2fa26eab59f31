"""
Decorators for common tool execution patterns.

``log_execution`` logs the start and end of every tool call with the tool
name, the class file involved and the elapsed time, and stamps the elapsed
time onto the result metadata.
"""

import functools
import inspect
import time
from pathlib import PurePath
from typing import Any, Callable, Dict, Optional, TypeVar

from jdecomp_mcp.core.logging_config import get_logger
from jdecomp_mcp.core.result import ToolResult, failure

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_FILE_ARGUMENTS = ("file", "path", "file_path", "name")


def _file_name(args: tuple, kwargs: Dict[str, Any]) -> Optional[str]:
    for arg_name in _FILE_ARGUMENTS:
        if isinstance(kwargs.get(arg_name), str):
            return PurePath(kwargs[arg_name]).name
    if args and isinstance(args[0], str):
        return PurePath(args[0]).name
    return None


def _finish(result: Any, tool_name: str, log_extra: Dict[str, Any], start_time: float) -> Any:
    execution_time = int((time.time() - start_time) * 1000)
    if hasattr(result, "metadata"):
        if result.metadata is None:
            result.metadata = {}
        result.metadata["execution_time_ms"] = execution_time

    log_extra["execution_time_ms"] = execution_time
    if getattr(result, "status", "success") == "success":
        logger.info(f"{tool_name} completed successfully", extra=log_extra)
    else:
        log_extra["error_code"] = getattr(result, "error_code", None)
        logger.warning(f"{tool_name} returned an error: {result.message}", extra=log_extra)
    return result


def _crash(exc: Exception, tool_name: str, log_extra: Dict[str, Any], start_time: float) -> ToolResult:
    log_extra["execution_time_ms"] = int((time.time() - start_time) * 1000)
    logger.error(f"{tool_name} failed", extra=log_extra, exc_info=True)
    return failure(
        "INTERNAL_ERROR",
        f"{tool_name} failed: {exc}",
        exception_type=type(exc).__name__,
    )


def log_execution(tool_name: Optional[str] = None) -> Callable[[F], F]:
    """
    Decorator to add logging and error handling to tool functions.

    Args:
        tool_name: Name of the tool (defaults to function name)

    Returns:
        Decorated function
    """

    def decorator(func: F) -> F:
        actual_tool_name = tool_name or func.__name__

        def _start(args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
            log_extra: Dict[str, Any] = {"tool_name": actual_tool_name}
            file_name = _file_name(args, kwargs)
            if file_name:
                log_extra["file_name"] = file_name
            logger.info(f"Starting {actual_tool_name}", extra=log_extra)
            return log_extra

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> ToolResult:
                start_time = time.time()
                log_extra = _start(args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    return _crash(exc, actual_tool_name, log_extra, start_time)
                return _finish(result, actual_tool_name, log_extra, start_time)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> ToolResult:
            start_time = time.time()
            log_extra = _start(args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                return _crash(exc, actual_tool_name, log_extra, start_time)
            return _finish(result, actual_tool_name, log_extra, start_time)

        return wrapper  # type: ignore

    return decorator
