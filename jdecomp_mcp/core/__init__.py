"""
Core utilities for jdecomp_mcp.

This package contains configuration, execution, exception handling and the
decompile pipeline itself (classification, temp space, extraction, backends,
sessions and the auto-decompile hook).
"""

from jdecomp_mcp.core.decorators import log_execution
from jdecomp_mcp.core.exceptions import (
    DecompilationError,
    DecompiledFileNotFoundError,
    DecompilerNotAvailableError,
    ExecutionTimeoutError,
    ExtractionError,
    JdecompError,
    ToolNotFoundError,
    UnknownDecompilerError,
    ValidationError,
)
from jdecomp_mcp.core.execution import (
    execute_subprocess_async,
    execute_subprocess_streaming,
)
from jdecomp_mcp.core.logging_config import get_logger, setup_logging
from jdecomp_mcp.core.sessions import (
    DecompiledSession,
    decompile,
    decompile_and_present,
    run_decompile,
    session_registry,
)

__all__ = [
    "JdecompError",
    "ValidationError",
    "UnknownDecompilerError",
    "DecompilerNotAvailableError",
    "ToolNotFoundError",
    "ExecutionTimeoutError",
    "DecompilationError",
    "ExtractionError",
    "DecompiledFileNotFoundError",
    "execute_subprocess_streaming",
    "execute_subprocess_async",
    "get_logger",
    "setup_logging",
    "log_execution",
    "DecompiledSession",
    "decompile",
    "decompile_and_present",
    "run_decompile",
    "session_registry",
]
