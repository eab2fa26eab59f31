"""Lightweight configuration loader for jdecomp_mcp.

Two snapshots live here. ``Config`` holds process settings (logging, external
tool commands, temp root) and is loaded once from environment variables;
call ``get_config()`` for the cached singleton and ``reset_config()`` in tests.
``DecompilerSettings`` holds the decompiler selection, jar paths and options.
It is never cached here: the live copy is owned by ``settings_manager`` and
read again on every decompile request.
"""

from __future__ import annotations

import os
import shlex
import tempfile
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

from jdecomp_mcp.core.exceptions import UnknownDecompilerError

load_dotenv()


class Decompiler(str, Enum):
    """Supported external decompilers."""

    CFR = "cfr"
    FERNFLOWER = "fernflower"


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def _parse_command(value: str | None, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not value or not value.strip():
        return default
    return tuple(shlex.split(value))


def _split_options(raw: str | None) -> Tuple[str, ...]:
    if not raw:
        return tuple()
    return tuple(segment.strip() for segment in raw.split(",") if segment.strip())


def _optional_path(raw: str | None) -> Optional[Path]:
    if not raw or not raw.strip():
        return None
    return Path(raw.strip()).expanduser()


@dataclass(frozen=True)
class Config:
    """Immutable snapshot of runtime configuration."""

    log_level: str
    log_file: Path
    log_format: str
    structured_errors: bool
    mcp_transport: str
    default_tool_timeout: int
    temp_root: Path
    java_command: str
    file_command: Tuple[str, ...]
    extract_command: Tuple[str, ...]

    @classmethod
    def from_env(cls) -> "Config":
        """Build a configuration object from environment variables."""
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_file = Path(os.getenv("LOG_FILE", "/tmp/jdecomp/app.log")).expanduser()
        log_format = os.getenv("LOG_FORMAT", "human").lower()
        structured_errors = _parse_bool(os.getenv("STRUCTURED_ERRORS"), default=False)
        mcp_transport = os.getenv("MCP_TRANSPORT", "stdio").lower()
        # 0 means "wait for the decompiler as long as it takes"
        default_tool_timeout = _parse_int(os.getenv("DEFAULT_TOOL_TIMEOUT"), default=0)
        temp_root = Path(
            os.getenv("JDECOMP_TEMP_DIR") or tempfile.gettempdir()
        ).expanduser()
        java_command = os.getenv("JDECOMP_JAVA", "java")
        file_command = _parse_command(
            os.getenv("JDECOMP_FILE_COMMAND"), ("file", "--brief", "--mime-type")
        )
        extract_command = _parse_command(os.getenv("JDECOMP_EXTRACT_COMMAND"), ("unzip", "-p"))

        return cls(
            log_level=log_level,
            log_file=log_file,
            log_format=log_format,
            structured_errors=structured_errors,
            mcp_transport=mcp_transport,
            default_tool_timeout=default_tool_timeout,
            temp_root=temp_root,
            java_command=java_command,
            file_command=file_command,
            extract_command=extract_command,
        )

    @property
    def timeout(self) -> Optional[int]:
        """Subprocess timeout in seconds, or None to wait indefinitely."""
        return self.default_tool_timeout if self.default_tool_timeout > 0 else None


@dataclass(frozen=True)
class DecompilerSettings:
    """Which decompiler to run, where its jar lives and what options to pass."""

    decompiler: str = Decompiler.CFR.value
    paths: Dict[Decompiler, Optional[Path]] = field(default_factory=dict)
    options: Dict[Decompiler, Tuple[str, ...]] = field(default_factory=dict)
    auto_decompile: bool = False

    @classmethod
    def from_env(cls) -> "DecompilerSettings":
        """Build decompiler settings from ``JDECOMP_*`` environment variables."""
        return cls(
            decompiler=os.getenv("JDECOMP_DECOMPILER", Decompiler.CFR.value).strip().lower(),
            paths={
                Decompiler.CFR: _optional_path(os.getenv("JDECOMP_CFR_PATH")),
                Decompiler.FERNFLOWER: _optional_path(os.getenv("JDECOMP_FERNFLOWER_PATH")),
            },
            options={
                Decompiler.CFR: _split_options(os.getenv("JDECOMP_CFR_OPTIONS")),
                Decompiler.FERNFLOWER: _split_options(os.getenv("JDECOMP_FERNFLOWER_OPTIONS")),
            },
            auto_decompile=_parse_bool(os.getenv("JDECOMP_AUTO_DECOMPILE"), default=False),
        )

    def path_for(self, decompiler: Decompiler) -> Optional[Path]:
        return self.paths.get(decompiler)

    def options_for(self, decompiler: Decompiler) -> Tuple[str, ...]:
        return tuple(self.options.get(decompiler, ()))

    def updated(
        self,
        decompiler: Optional[str] = None,
        path: Optional[str] = None,
        options: Optional[list[str]] = None,
        auto_decompile: Optional[bool] = None,
    ) -> "DecompilerSettings":
        """Return a copy with the given fields changed.

        ``path`` and ``options`` apply to the selected decompiler (the new one
        if ``decompiler`` is also given).
        """
        selected = decompiler.strip().lower() if decompiler is not None else self.decompiler
        paths = dict(self.paths)
        opts = dict(self.options)
        if path is not None or options is not None:
            try:
                target = Decompiler(selected)
            except ValueError:
                raise UnknownDecompilerError(selected) from None
            if path is not None:
                paths[target] = _optional_path(path)
            if options is not None:
                opts[target] = tuple(options)
        return replace(
            self,
            decompiler=selected,
            paths=paths,
            options=opts,
            auto_decompile=self.auto_decompile if auto_decompile is None else auto_decompile,
        )


_CONFIG: Config | None = None


def get_config() -> Config:
    """Return the cached Config instance, loading it on first access."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = Config.from_env()
    return _CONFIG


def reset_config() -> Config:
    """Reload configuration from the current environment (primarily for tests)."""
    global _CONFIG
    _CONFIG = Config.from_env()
    return _CONFIG
