"""
Private scratch space for extracted entries and decompiler output.

``make_temp`` is the only way this package creates temporary files. Paths
are built from a caller prefix (which may contain ``/`` to nest under
subdirectories) plus a random token, under the configured temp root. Everything created
here, including missing parent directories, is owner-only; the process umask
is never touched. Nothing here deletes what it created.
"""

import os
import uuid
from pathlib import Path
from typing import List, Optional

from jdecomp_mcp.core.config import get_config
from jdecomp_mcp.core.logging_config import get_logger

logger = get_logger(__name__)

PRIVATE_DIR_MODE = 0o700
PRIVATE_FILE_MODE = 0o600


def _make_parents(directory: Path) -> None:
    missing: List[Path] = []
    while not directory.exists():
        missing.append(directory)
        directory = directory.parent
    for parent in reversed(missing):
        try:
            parent.mkdir(mode=PRIVATE_DIR_MODE)
        except FileExistsError:
            if not parent.is_dir():
                raise
            continue
        os.chmod(parent, PRIVATE_DIR_MODE)


def _candidate(root: Path, prefix: str, suffix: str) -> Path:
    return root / f"{prefix}{uuid.uuid4().hex[:10]}{suffix}"


def make_temp(
    prefix: str,
    is_directory: bool = False,
    suffix: str = "",
    root: Optional[Path] = None,
) -> Path:
    """
    Create a new, owner-only temporary file or directory.

    Args:
        prefix: Name prefix relative to the temp root, e.g. ``"jdecomp/Foo"``
        is_directory: Create a directory (with parents) instead of an empty file
        suffix: Appended after the uniqueness token
        root: Temp root override; defaults to the configured temp root

    Returns:
        Path of the created file or directory

    Raises:
        OSError: Any creation failure other than a name collision
    """
    base = root if root is not None else get_config().temp_root

    while True:
        path = _candidate(base, prefix, suffix)
        # Only a collision on the leaf itself may trigger a retry
        _make_parents(path.parent)
        try:
            if is_directory:
                path.mkdir(mode=PRIVATE_DIR_MODE)
            else:
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, PRIVATE_FILE_MODE)
                os.close(fd)
        except FileExistsError:
            logger.debug(f"Temp name collision, retrying: {path}")
            continue
        os.chmod(path, PRIVATE_DIR_MODE if is_directory else PRIVATE_FILE_MODE)
        logger.debug(f"Created temp {'directory' if is_directory else 'file'}: {path}")
        return path
