"""
Custom exception classes for jdecomp_mcp.

All exceptions inherit from JdecompError to allow for centralized
exception handling at the MCP server level.
"""

from typing import Optional


class JdecompError(Exception):
    """Base exception for all jdecomp_mcp errors."""

    error_code: str = "JDMCP-E000"
    error_type: str = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        self.message = message
        if error_code:
            self.error_code = error_code
        if error_type:
            self.error_type = error_type
        super().__init__(message)


class ValidationError(JdecompError):
    """Raised when caller input is unusable (e.g. not a .class file)."""

    error_code = "JDMCP-E001"
    error_type = "VALIDATION_ERROR"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.details = details or {}
        super().__init__(message, self.error_code, self.error_type)


class ExecutionTimeoutError(JdecompError):
    """Raised when a subprocess execution exceeds the timeout limit."""

    error_code = "JDMCP-E002"
    error_type = "TIMEOUT_ERROR"

    def __init__(self, timeout_seconds: int):
        self.timeout_seconds = timeout_seconds
        message = f"Operation timed out after {timeout_seconds} seconds."
        super().__init__(message, self.error_code, self.error_type)


class ToolNotFoundError(JdecompError):
    """Raised when a required CLI tool is not found in the system."""

    error_code = "JDMCP-E003"
    error_type = "TOOL_ERROR"

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        message = f"Tool '{tool_name}' not found. Please install it."
        super().__init__(message, self.error_code, self.error_type)


class DecompilationError(JdecompError):
    """Raised when the decompiler process exits with a failure."""

    error_code = "JDMCP-E005"
    error_type = "EXECUTION_ERROR"

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, self.error_code, self.error_type)


class UnknownDecompilerError(JdecompError):
    """Raised when the selected decompiler is not one we know how to run."""

    error_code = "JDMCP-E006"
    error_type = "VALIDATION_ERROR"

    def __init__(self, decompiler: str):
        self.decompiler = decompiler
        message = f"'{decompiler}' is not a known decompiler."
        super().__init__(message, self.error_code, self.error_type)


class DecompilerNotAvailableError(JdecompError):
    """Raised when the configured decompiler jar is missing or is not a jar."""

    error_code = "JDMCP-E007"
    error_type = "CONFIGURATION_ERROR"

    def __init__(self, decompiler: str, path: Optional[str] = None):
        self.decompiler = decompiler
        self.path = path
        message = f"Decompiler {decompiler} not available (path: {path or 'unset'})."
        super().__init__(message, self.error_code, self.error_type)


class ExtractionError(JdecompError):
    """Raised when an entry cannot be extracted from an archive."""

    error_code = "JDMCP-E008"
    error_type = "EXTRACTION_ERROR"

    def __init__(self, archive: str, entry: str, reason: str = ""):
        self.archive = archive
        self.entry = entry
        message = f"Failed to extract '{entry}' from {archive}"
        if reason:
            message += f": {reason}"
        super().__init__(message, self.error_code, self.error_type)


class DecompiledFileNotFoundError(JdecompError):
    """Raised when a directory-output decompiler left no source file behind."""

    error_code = "JDMCP-E009"
    error_type = "LOOKUP_ERROR"

    def __init__(self, directory: str):
        self.directory = directory
        message = f"No decompiled file found in {directory}"
        super().__init__(message, self.error_code, self.error_type)
