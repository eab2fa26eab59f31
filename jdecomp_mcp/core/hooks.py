"""
Automatic decompilation when class files are opened.

Hosts announce two lifecycle events on ``LifecycleEvents``:

- ``file_opened(path)`` for a class file opened from disk
- ``archive_entry_extracted(archive, entry)`` for an entry pulled out of a JAR

``AutoDecompileHook`` subscribes to both. While enabled it replaces the raw
bytecode view with a decompiled session; the handler's return value is that
session, or None when the host should show the file as usual.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from jdecomp_mcp.core.file_classifier import is_classfile
from jdecomp_mcp.core.logging_config import get_logger
from jdecomp_mcp.core.sessions import DecompiledSession, decompile_and_present

logger = get_logger(__name__)

FILE_OPENED = "file_opened"
ARCHIVE_ENTRY_EXTRACTED = "archive_entry_extracted"

Handler = Callable[..., Any]


class LifecycleEvents:
    """Minimal publish/subscribe channel for host file events."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> None:
        if handler not in self._subscribers[event]:
            self._subscribers[event].append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        if handler in self._subscribers.get(event, []):
            self._subscribers[event].remove(handler)

    def emit(self, event: str, *args: Any) -> Optional[Any]:
        """Call subscribers in order; the first non-None result wins."""
        for handler in list(self._subscribers.get(event, [])):
            result = handler(*args)
            if result is not None:
                return result
        return None


class AutoDecompileHook:
    """Redirects class file opens to ``decompile_and_present`` while enabled."""

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def install(self, events: LifecycleEvents) -> None:
        events.subscribe(FILE_OPENED, self.on_file_opened)
        events.subscribe(ARCHIVE_ENTRY_EXTRACTED, self.on_archive_entry_extracted)

    def uninstall(self, events: LifecycleEvents) -> None:
        events.unsubscribe(FILE_OPENED, self.on_file_opened)
        events.unsubscribe(ARCHIVE_ENTRY_EXTRACTED, self.on_archive_entry_extracted)

    def on_file_opened(self, path: str) -> Optional[DecompiledSession]:
        if not (self.enabled and is_classfile(path)):
            return None
        logger.debug(f"Auto-decompiling opened file {path}")
        return decompile_and_present(path)

    def on_archive_entry_extracted(self, archive: str, entry: str) -> Optional[DecompiledSession]:
        if not (self.enabled and is_classfile(entry)):
            return None
        logger.debug(f"Auto-decompiling {entry} from {archive}")
        return decompile_and_present(entry, archive)


lifecycle_events = LifecycleEvents()
auto_decompile_hook = AutoDecompileHook()
auto_decompile_hook.install(lifecycle_events)
