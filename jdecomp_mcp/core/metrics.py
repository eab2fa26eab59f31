"""
Per-tool call metrics, reported by ``decompiler_status`` and ``/metrics``.
"""

import inspect
import threading
import time
from dataclasses import asdict, dataclass
from functools import wraps
from typing import Any

from jdecomp_mcp.core.result import ToolError


@dataclass
class ToolStats:
    """Call counters and timings (seconds) for one tool."""

    calls: int = 0
    errors: int = 0
    total_time: float = 0.0
    min_time: float = 0.0
    max_time: float = 0.0

    def add(self, elapsed: float, ok: bool) -> None:
        self.min_time = elapsed if self.calls == 0 else min(self.min_time, elapsed)
        self.max_time = max(self.max_time, elapsed)
        self.calls += 1
        self.total_time += elapsed
        if not ok:
            self.errors += 1

    @property
    def avg_time(self) -> float:
        return self.total_time / self.calls if self.calls else 0.0

    def snapshot(self) -> dict[str, Any]:
        data = asdict(self)
        data["avg_time"] = self.avg_time
        return data


class MetricsCollector:
    """
    Thread-safe metrics store.

    Sync tools run in worker threads while the HTTP app serves /metrics.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tools: dict[str, ToolStats] = {}

    def record_tool_execution(self, tool_name: str, execution_time: float, success: bool = True):
        with self._lock:
            self._tools.setdefault(tool_name, ToolStats()).add(execution_time, success)

    def get_metrics(self) -> dict[str, Any]:
        with self._lock:
            return {"tools": {name: stats.snapshot() for name, stats in self._tools.items()}}

    def reset(self):
        with self._lock:
            self._tools.clear()


metrics_collector = MetricsCollector()


def _succeeded(result: Any) -> bool:
    if isinstance(result, ToolError):
        return False
    return getattr(result, "status", "success") == "success"


def track_metrics(tool_name: str):
    """Record call count, error count and duration of a sync or async tool."""

    def decorator(func):
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                started = time.perf_counter()
                ok = False
                try:
                    result = await func(*args, **kwargs)
                    ok = _succeeded(result)
                    return result
                finally:
                    metrics_collector.record_tool_execution(
                        tool_name, time.perf_counter() - started, ok
                    )

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            started = time.perf_counter()
            ok = False
            try:
                result = func(*args, **kwargs)
                ok = _succeeded(result)
                return result
            finally:
                metrics_collector.record_tool_execution(tool_name, time.perf_counter() - started, ok)

        return sync_wrapper

    return decorator
