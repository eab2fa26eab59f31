"""
Subprocess execution for the external tools (java, file, unzip).

Every external program goes through ``execute_subprocess_async`` or its
blocking wrapper ``execute_subprocess_streaming``. Output can be captured,
redirected into a file, or discarded. A missing executable becomes
``ToolNotFoundError``, an elapsed timeout ``ExecutionTimeoutError`` and a
non-zero exit ``subprocess.CalledProcessError`` carrying stderr.
"""

import asyncio
import subprocess
import threading
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, Optional

from jdecomp_mcp.core.exceptions import (
    ExecutionTimeoutError,
    ToolNotFoundError,
)
from jdecomp_mcp.core.logging_config import get_logger

logger = get_logger(__name__)


class _BackgroundLoopRunner:
    """Run asyncio coroutines on a dedicated background event loop."""

    def __init__(self) -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="JdecompAsyncLoop",
            daemon=True,
        )
        self._thread.start()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def run(self, coro: Coroutine[Any, Any, tuple[str, int]]) -> tuple[str, int]:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()


_BACKGROUND_LOOP_LOCK = threading.Lock()
_BACKGROUND_LOOP_RUNNER: _BackgroundLoopRunner | None = None


def _get_background_runner() -> _BackgroundLoopRunner:
    global _BACKGROUND_LOOP_RUNNER
    with _BACKGROUND_LOOP_LOCK:
        if _BACKGROUND_LOOP_RUNNER is None:
            _BACKGROUND_LOOP_RUNNER = _BackgroundLoopRunner()
        return _BACKGROUND_LOOP_RUNNER


async def execute_subprocess_async(
    cmd: list[str],
    timeout: Optional[int] = None,
    encoding: str = "utf-8",
    errors: str = "replace",
    stdout_path: Optional[Path] = None,
    discard_output: bool = False,
) -> tuple[str, int]:
    """
    Execute a subprocess command asynchronously and wait for it to exit.

    Args:
        cmd: Command and arguments as a list (e.g., ["java", "-jar", "cfr.jar", "Foo.class"])
        timeout: Maximum execution time in seconds; None waits indefinitely
        encoding: Text encoding for output (default: "utf-8")
        errors: Error handling for encoding (default: "replace")
        stdout_path: Write raw stdout bytes to this file instead of capturing them
        discard_output: Send both stdout and stderr to /dev/null

    Returns:
        Tuple of (output_text, bytes_read)
        - output_text: The captured stdout ("" when redirected or discarded)
        - bytes_read: Number of stdout bytes produced (0 when discarded)

    Raises:
        ToolNotFoundError: If the command executable is not found
        ExecutionTimeoutError: If the command exceeds the timeout
        subprocess.CalledProcessError: If the command returns non-zero exit code
    """
    sink = None
    if stdout_path is not None:
        sink = open(stdout_path, "wb")
        stdout: Any = sink
    elif discard_output:
        stdout = asyncio.subprocess.DEVNULL
    else:
        stdout = asyncio.subprocess.PIPE
    stderr = asyncio.subprocess.DEVNULL if discard_output else asyncio.subprocess.PIPE

    logger.debug(f"Running: {' '.join(str(part) for part in cmd)}")
    try:
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=stdout,
                stderr=stderr,
            )
        except FileNotFoundError:
            tool_name = cmd[0] if cmd else "unknown"
            raise ToolNotFoundError(tool_name)

        try:
            stdout_data, stderr_data = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Command timed out after {timeout}s: {' '.join(cmd)}")
            if process.returncode is None:
                try:
                    process.kill()
                    await asyncio.wait_for(process.wait(), timeout=2.0)
                except (ProcessLookupError, asyncio.TimeoutError) as e:
                    logger.error(f"Failed to reap process {process.pid}: {e}")
            raise ExecutionTimeoutError(timeout or 0)
    finally:
        if sink is not None:
            sink.close()

    output_text = stdout_data.decode(encoding, errors=errors) if stdout_data else ""
    stderr_text = stderr_data.decode(encoding, errors=errors) if stderr_data else ""
    if stdout_path is not None:
        bytes_read = stdout_path.stat().st_size
    else:
        bytes_read = len(stdout_data) if stdout_data else 0

    if process.returncode != 0:
        raise subprocess.CalledProcessError(
            process.returncode, cmd, output=output_text, stderr=stderr_text
        )

    return output_text, bytes_read


def execute_subprocess_streaming(
    cmd: list[str],
    timeout: Optional[int] = None,
    encoding: str = "utf-8",
    errors: str = "replace",
    stdout_path: Optional[Path] = None,
    discard_output: bool = False,
) -> tuple[str, int]:
    """
    Blocking wrapper around execute_subprocess_async.

    Runs the coroutine with asyncio.run(), or on a background loop when
    called from inside a running event loop (e.g. a sync MCP tool).
    Arguments, return value and exceptions are those of
    ``execute_subprocess_async``.
    """
    coro = execute_subprocess_async(
        cmd,
        timeout=timeout,
        encoding=encoding,
        errors=errors,
        stdout_path=stdout_path,
        discard_output=discard_output,
    )

    try:
        running_loop = asyncio.get_running_loop()
    except RuntimeError:
        running_loop = None

    if running_loop and running_loop.is_running():
        return _get_background_runner().run(coro)

    return asyncio.run(coro)
