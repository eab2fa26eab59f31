"""Extract single entries from JAR archives into private temp directories."""

import subprocess
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple, Union

from jdecomp_mcp.core.config import get_config
from jdecomp_mcp.core.exceptions import ExtractionError, ToolNotFoundError
from jdecomp_mcp.core.execution import execute_subprocess_streaming
from jdecomp_mcp.core.logging_config import get_logger
from jdecomp_mcp.core.temp_workspace import make_temp

logger = get_logger(__name__)

TEMP_PREFIX = "jdecomp/"
LOCATION_SEPARATOR = ":"


def composite_location(archive_path: Union[str, Path], entry_path: str) -> str:
    """Build the ``archive:entry`` location string for an archive entry."""
    return f"{archive_path}{LOCATION_SEPARATOR}{entry_path}"


def split_composite_location(location: str) -> Tuple[Optional[str], str]:
    """
    Split an ``archive:entry`` location into its parts.

    The separator is the last ``:`` that follows a ``.jar`` name, so Windows
    drive letters and plain paths come back as ``(None, location)``.
    """
    marker = f".jar{LOCATION_SEPARATOR}"
    index = location.lower().rfind(marker)
    if index == -1:
        return None, location
    split_at = index + len(".jar")
    return location[:split_at], location[split_at + 1 :]


def extract_entry(archive_path: Union[str, Path], entry_path: str) -> Path:
    """
    Extract one entry of ``archive_path`` into a fresh temp directory.

    The entry lands directly in the new directory under its own file name;
    the archive's directory structure is not recreated.

    Raises:
        ExtractionError: The extraction tool is missing or failed
    """
    config = get_config()
    entry_name = PurePosixPath(entry_path).name
    target_dir = make_temp(TEMP_PREFIX + PurePosixPath(entry_path).stem, is_directory=True)
    target = target_dir / entry_name

    cmd = [*config.extract_command, str(archive_path), entry_path]
    logger.info(f"Extracting {entry_path} from {archive_path} to {target}")
    try:
        execute_subprocess_streaming(cmd, timeout=config.timeout, stdout_path=target)
    except ToolNotFoundError as exc:
        raise ExtractionError(str(archive_path), entry_path, str(exc)) from exc
    except subprocess.CalledProcessError as exc:
        reason = (exc.stderr or "").strip() or f"exit code {exc.returncode}"
        raise ExtractionError(str(archive_path), entry_path, reason) from exc

    return target
