"""
Input validators for tool-specific parameters.
"""

from typing import Any, Dict

from jdecomp_mcp.core.config import Decompiler
from jdecomp_mcp.core.exceptions import UnknownDecompilerError, ValidationError


def validate_tool_parameters(tool_name: str, params: Dict[str, Any]) -> None:
    """
    Validate tool-specific parameters.

    Args:
        tool_name: Name of the tool
        params: Parameters to validate

    Raises:
        ValidationError: If parameters are invalid
        UnknownDecompilerError: If a decompiler name is not supported
    """
    validators = {
        "decompile_class": _validate_decompile_params,
        "show_decompiled": _validate_decompile_params,
        "open_class_file": _validate_open_params,
        "configure_decompiler": _validate_configure_params,
    }

    if tool_name in validators:
        validators[tool_name](params)


def _validate_decompile_params(params: Dict[str, Any]) -> None:
    """Validate decompile_class / show_decompiled parameters."""
    file = params.get("file")
    if not isinstance(file, str) or not file.strip():
        raise ValidationError("file must be a non-empty string")

    jar = params.get("jar")
    if jar is not None and (not isinstance(jar, str) or not jar.strip()):
        raise ValidationError("jar must be a non-empty string when given")


def _validate_open_params(params: Dict[str, Any]) -> None:
    """Validate open_class_file parameters."""
    path = params.get("path")
    if not isinstance(path, str) or not path.strip():
        raise ValidationError("path must be a non-empty string")


def _validate_configure_params(params: Dict[str, Any]) -> None:
    """Validate configure_decompiler parameters."""
    decompiler = params.get("decompiler")
    if decompiler is not None:
        if not isinstance(decompiler, str):
            raise ValidationError("decompiler must be a string")
        if decompiler.strip().lower() not in {d.value for d in Decompiler}:
            raise UnknownDecompilerError(decompiler)

    path = params.get("path")
    if path is not None and not isinstance(path, str):
        raise ValidationError("path must be a string")

    options = params.get("options")
    if options is not None:
        if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
            raise ValidationError("options must be a list of strings")

    auto_decompile = params.get("auto_decompile")
    if auto_decompile is not None and not isinstance(auto_decompile, bool):
        raise ValidationError("auto_decompile must be a boolean")
