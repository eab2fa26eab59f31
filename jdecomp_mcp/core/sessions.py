"""
Decompile entry points and the read-only sessions that present their output.

``decompile`` returns text. ``decompile_and_present`` stores that text in a
``DecompiledSession`` named after the class file's base name, which MCP
clients read through the ``jdecomp://sessions/{name}`` resource. Two class
files with the same base name share a session; the last one decompiled wins.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any, Dict, List, Optional, Tuple

from jdecomp_mcp.core.archive import composite_location
from jdecomp_mcp.core.decompilers import get_backend
from jdecomp_mcp.core.exceptions import ValidationError
from jdecomp_mcp.core.file_classifier import is_classfile
from jdecomp_mcp.core.logging_config import get_logger
from jdecomp_mcp.core.settings_manager import get_settings

logger = get_logger(__name__)

SESSION_LANGUAGE = "java"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def session_name_for(file: str) -> str:
    """Session name for a class file: its base name."""
    return PurePath(file.replace("\\", "/")).name


@dataclass
class DecompiledSession:
    """A named, read-only view of one decompiled class."""

    name: str
    text: str = ""
    origin: str = ""
    decompiler: str = ""
    language: str = SESSION_LANGUAGE
    read_only: bool = False
    modified: bool = False
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    @property
    def uri(self) -> str:
        return f"jdecomp://sessions/{self.name}"

    def erase(self) -> None:
        self.text = ""
        self.modified = True

    def insert(self, text: str) -> None:
        if self.read_only:
            raise ValidationError(f"Session {self.name} is read-only")
        self.text += text
        self.modified = True

    def to_dict(self, include_text: bool = False) -> Dict[str, Any]:
        data = asdict(self)
        data["uri"] = self.uri
        if not include_text:
            data.pop("text")
            data["length"] = len(self.text)
        return data


class SessionRegistry:
    """Session store keyed by name. Lives for the lifetime of the process."""

    def __init__(self) -> None:
        self._sessions: Dict[str, DecompiledSession] = {}

    def get(self, name: str) -> Optional[DecompiledSession]:
        return self._sessions.get(name)

    def get_or_create(self, name: str) -> DecompiledSession:
        session = self._sessions.get(name)
        if session is None:
            session = DecompiledSession(name=name)
            self._sessions[name] = session
        return session

    def list(self) -> List[DecompiledSession]:
        return sorted(self._sessions.values(), key=lambda s: s.name)

    def close(self, name: str) -> bool:
        """Drop a session. Returns False if there was none."""
        return self._sessions.pop(name, None) is not None

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, name: object) -> bool:
        return name in self._sessions


session_registry = SessionRegistry()


def run_decompile(file: str, jar: Optional[str] = None) -> Tuple[str, str]:
    """
    Decompile a class file with the currently selected decompiler.

    Returns:
        Tuple of (source text, name of the decompiler that produced it)

    Args:
        file: Path of a ``.class`` file, or an entry name inside ``jar``
        jar: Optional path of the JAR holding ``file``

    Raises:
        ValidationError: ``file`` is not a class file; raised before any
            external process is started
        UnknownDecompilerError, DecompilerNotAvailableError: bad configuration
        DecompilationError, ExtractionError, DecompiledFileNotFoundError,
        ToolNotFoundError: the external tools failed
    """
    if not is_classfile(file):
        raise ValidationError(
            f"{file} is not a class file",
            details={"file": file, "expected_extension": ".class"},
        )
    backend = get_backend(settings=get_settings())
    logger.info(
        f"Decompiling {file}" + (f" from {jar}" if jar else ""),
        extra={"decompiler": backend.decompiler.value, "file_name": session_name_for(file)},
    )
    return backend.decompile(file, jar), backend.decompiler.value


def decompile(file: str, jar: Optional[str] = None) -> str:
    """Decompile a class file and return the source text (see ``run_decompile``)."""
    text, _ = run_decompile(file, jar)
    return text


def decompile_and_present(
    file: str,
    jar: Optional[str] = None,
    registry: Optional[SessionRegistry] = None,
) -> DecompiledSession:
    """
    Decompile ``file`` and show the result in its session.

    Any previous content of the session is replaced. The session comes back
    read-only and unmodified, with ``origin`` set to ``jar:file`` for archive
    entries and to ``file`` otherwise.
    """
    registry = registry if registry is not None else session_registry
    text, decompiler = run_decompile(file, jar)

    session = registry.get_or_create(session_name_for(file))
    session.read_only = False
    session.erase()
    session.insert(text)
    session.read_only = True
    session.modified = False
    session.origin = composite_location(jar, file) if jar else file
    session.decompiler = decompiler
    session.language = SESSION_LANGUAGE
    session.updated_at = _now()

    logger.info(f"Session {session.name} updated ({len(text)} chars) from {session.origin}")
    return session
