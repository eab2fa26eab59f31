"""Classify paths as JAR archives or class files, and find decompiler output."""

import subprocess
from pathlib import Path
from typing import List, Union

from jdecomp_mcp.core.config import get_config
from jdecomp_mcp.core.exceptions import JdecompError
from jdecomp_mcp.core.execution import execute_subprocess_streaming
from jdecomp_mcp.core.logging_config import get_logger

logger = get_logger(__name__)

JAR_MIME_TYPE = "application/java-archive"
CLASS_EXTENSION = "class"
SOURCE_EXTENSION = ".java"

PathLike = Union[str, Path]


def is_archive(path: PathLike) -> bool:
    """Return True if the content-type probe reports a Java archive.

    The decision is made on file content, never on the file name. Any probe
    failure counts as "not an archive".
    """
    config = get_config()
    try:
        target = Path(path).expanduser().resolve()
        cmd = [*config.file_command, str(target)]
        output, _ = execute_subprocess_streaming(cmd, timeout=config.timeout)
    except (JdecompError, subprocess.CalledProcessError, OSError, RuntimeError, ValueError) as exc:
        logger.debug(f"Content-type probe failed for {path}: {exc}")
        return False
    return output.strip() == JAR_MIME_TYPE


def is_classfile(path: PathLike) -> bool:
    """Return True if ``path`` has the ``.class`` extension."""
    return Path(path).suffix == f".{CLASS_EXTENSION}"


def list_source_files(directory: PathLike) -> List[Path]:
    """List immediate children of ``directory`` that are decompiled sources."""
    root = Path(directory)
    if not root.is_dir():
        return []
    return sorted(
        child for child in root.iterdir() if child.name.endswith(SOURCE_EXTENSION)
    )
