"""
Context-based decompiler settings using contextvars.

The decompile path never caches which decompiler is selected or whether its
jar is valid. It asks this manager for the current ``DecompilerSettings`` on
every request, so a change made through ``configure_decompiler`` (or a test
swapping settings) takes effect on the very next call.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from jdecomp_mcp.core.config import DecompilerSettings

_settings_context: ContextVar[Optional[DecompilerSettings]] = ContextVar(
    "decompiler_settings", default=None
)
# Fallback shared by contexts that never called set(); the MCP server runs
# sync tools in worker threads, each with a fresh context.
_process_settings: Optional[DecompilerSettings] = None


class SettingsManager:
    """Holds the live decompiler settings for the current context."""

    @staticmethod
    def get() -> DecompilerSettings:
        """
        Get the current settings for this context.

        Falls back to the process-wide settings, loading them from the
        environment on first use.
        """
        global _process_settings
        settings = _settings_context.get()
        if settings is not None:
            return settings
        if _process_settings is None:
            _process_settings = DecompilerSettings.from_env()
        return _process_settings

    @staticmethod
    def set(settings: DecompilerSettings) -> None:
        """Replace the process-wide settings."""
        global _process_settings
        _process_settings = settings
        _settings_context.set(None)

    @staticmethod
    def clear() -> None:
        """Forget all settings so the next get() re-reads the environment."""
        global _process_settings
        _process_settings = None
        _settings_context.set(None)

    @staticmethod
    @contextmanager
    def with_settings(settings: DecompilerSettings) -> Iterator[DecompilerSettings]:
        """
        Temporarily override settings for the current context.

        Example:
            >>> with SettingsManager.with_settings(DecompilerSettings(decompiler="fernflower")):
            ...     text = decompile("Foo.class")
        """
        token = _settings_context.set(settings)
        try:
            yield settings
        finally:
            _settings_context.reset(token)


def get_settings() -> DecompilerSettings:
    """Return the live decompiler settings."""
    return SettingsManager.get()


def set_settings(settings: DecompilerSettings) -> None:
    SettingsManager.set(settings)


def clear_settings() -> None:
    SettingsManager.clear()
