"""
Decompiler backends.

Two external decompilers are supported behind one contract,
``decompile(classfile, archive=None) -> str``:

- CFR streams the decompiled source to standard output.
- Fernflower writes ``.java`` files into a destination directory, which we
  then read back.

``get_backend`` checks that the configured jar is really a Java archive
before every call and returns a ready backend for the selected decompiler.
"""

import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Dict, Iterable, List, Optional, Type

from jdecomp_mcp.core.archive import TEMP_PREFIX, extract_entry
from jdecomp_mcp.core.config import Config, Decompiler, DecompilerSettings, get_config
from jdecomp_mcp.core.exceptions import (
    DecompilationError,
    DecompiledFileNotFoundError,
    DecompilerNotAvailableError,
    UnknownDecompilerError,
)
from jdecomp_mcp.core.execution import execute_subprocess_streaming
from jdecomp_mcp.core.file_classifier import is_archive, list_source_files
from jdecomp_mcp.core.logging_config import get_logger
from jdecomp_mcp.core.settings_manager import get_settings
from jdecomp_mcp.core.temp_workspace import make_temp

logger = get_logger(__name__)

FERNFLOWER_MAIN_CLASS = "org.jetbrains.java.decompiler.main.decompiler.ConsoleDecompiler"


def normalize_options(options: Iterable[str]) -> List[str]:
    """
    Flatten option strings into an argument vector.

    Each entry may hold several space separated tokens (``"--level 5"``).
    Entries are joined with single spaces and split again on spaces, so an
    option value that itself contains a space cannot be expressed.
    """
    return [token for token in " ".join(options).split(" ") if token]


def resolve_decompiler(identity: str) -> Decompiler:
    """Map a decompiler name onto ``Decompiler`` or raise ``UnknownDecompilerError``."""
    try:
        return Decompiler(str(identity).strip().lower())
    except ValueError:
        raise UnknownDecompilerError(str(identity)) from None


def check_available(identity: str, settings: Optional[DecompilerSettings] = None) -> Path:
    """
    Return the jar path of ``identity`` if it is usable.

    Runs on every request; nothing about availability is remembered.

    Raises:
        UnknownDecompilerError: ``identity`` is not a supported decompiler
        DecompilerNotAvailableError: No jar configured, or it is not a Java archive
    """
    decompiler = resolve_decompiler(identity)
    settings = settings or get_settings()
    jar_path = settings.path_for(decompiler)
    if jar_path is None or not is_archive(jar_path):
        raise DecompilerNotAvailableError(
            decompiler.value, str(jar_path) if jar_path else None
        )
    return jar_path


def _containing_directory(path: str) -> str:
    return os.path.dirname(os.path.abspath(path)) + os.sep


class DecompilerBackend(ABC):
    """Base class for the external decompiler wrappers."""

    decompiler: ClassVar[Decompiler]

    def __init__(
        self,
        jar_path: Path,
        options: Iterable[str] = (),
        config: Optional[Config] = None,
    ) -> None:
        self.jar_path = Path(jar_path)
        self.options = normalize_options(options)
        self.config = config or get_config()

    @abstractmethod
    def build_command(self, classfile: str, *args: str) -> List[str]:
        """Return the argument vector for one decompiler run."""

    @abstractmethod
    def decompile(self, classfile: str, archive: Optional[str] = None) -> str:
        """Decompile ``classfile`` (an entry of ``archive`` when given) to text."""

    def _run(self, cmd: List[str], discard_output: bool = False) -> str:
        logger.info(
            f"Running {self.decompiler.value}: {' '.join(cmd)}",
            extra={"decompiler": self.decompiler.value},
        )
        try:
            output, _ = execute_subprocess_streaming(
                cmd, timeout=self.config.timeout, discard_output=discard_output
            )
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            message = f"{self.decompiler.value} exited with code {exc.returncode}"
            if stderr:
                message += f": {stderr}"
            raise DecompilationError(message, returncode=exc.returncode, stderr=stderr) from exc
        return output


class CfrBackend(DecompilerBackend):
    """CFR prints the decompiled class to standard output."""

    decompiler = Decompiler.CFR

    def build_command(self, classfile: str, classpath: str) -> List[str]:
        return [
            self.config.java_command,
            "-jar",
            str(self.jar_path),
            "--extraclasspath",
            classpath,
            *self.options,
            classfile,
        ]

    def decompile(self, classfile: str, archive: Optional[str] = None) -> str:
        classpath = str(archive) if archive else _containing_directory(classfile)
        return self._run(self.build_command(classfile, classpath))


class FernflowerBackend(DecompilerBackend):
    """Fernflower writes ``.java`` files into a destination directory."""

    decompiler = Decompiler.FERNFLOWER

    def build_command(self, classfile: str, destination: str) -> List[str]:
        return [
            self.config.java_command,
            "-cp",
            str(self.jar_path),
            FERNFLOWER_MAIN_CLASS,
            *self.options,
            classfile,
            destination,
        ]

    def decompile(
        self,
        classfile: str,
        archive: Optional[str] = None,
        extracted: bool = False,
    ) -> str:
        """
        Decompile into a directory and return the first source file found.

        An archive entry is extracted first and then handled as an already
        extracted file, whose own directory doubles as the destination.
        """
        if archive:
            extracted_file = extract_entry(archive, classfile)
            return self.decompile(str(extracted_file), extracted=True)

        if extracted:
            destination = Path(classfile).parent
        else:
            destination = make_temp(TEMP_PREFIX + Path(classfile).stem, is_directory=True)

        self._run(self.build_command(classfile, str(destination)), discard_output=True)

        sources = list_source_files(destination)
        if not sources:
            raise DecompiledFileNotFoundError(str(destination))
        logger.debug(f"Reading decompiled source {sources[0]}")
        return sources[0].read_text(encoding="utf-8", errors="replace")


_BACKENDS: Dict[Decompiler, Type[DecompilerBackend]] = {
    Decompiler.CFR: CfrBackend,
    Decompiler.FERNFLOWER: FernflowerBackend,
}


def get_backend(
    identity: Optional[str] = None,
    settings: Optional[DecompilerSettings] = None,
) -> DecompilerBackend:
    """Check availability and build the backend for ``identity``.

    Without ``identity`` the currently selected decompiler is used.
    """
    settings = settings or get_settings()
    identity = identity if identity is not None else settings.decompiler
    jar_path = check_available(identity, settings)
    decompiler = resolve_decompiler(identity)
    return _BACKENDS[decompiler](jar_path, settings.options_for(decompiler))
