"""Encoding process spawning and supervision.

A job's ffmpeg process is started with stderr piped. A reader thread feeds
each stderr line into a bounded buffer and a progress callback while the
supervisor blocks on the process exit.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
from collections import deque
from collections.abc import Callable

from vrs.core.errors import SpawnError
from vrs.core.subprocess_utils import command_name
from vrs.jobs.progress import FFmpegProgress, parse_stderr_progress

logger = logging.getLogger(__name__)

MAX_STDERR_LINES = 200
MAX_STDERR_BYTES = 64 * 1024
# Timeout for draining stderr after the process ends
STDERR_DRAIN_TIMEOUT = 5.0


class StderrBuffer:
    """Thread-safe tail of a process's stderr.

    Keeps at most max_lines lines and roughly max_bytes characters; older
    lines are discarded first.
    """

    def __init__(
        self, max_lines: int = MAX_STDERR_LINES, max_bytes: int = MAX_STDERR_BYTES
    ) -> None:
        self._lines: deque[str] = deque(maxlen=max_lines)
        self._max_bytes = max_bytes
        self._size = 0
        self._lock = threading.Lock()

    def append(self, line: str) -> None:
        line = line.rstrip("\r\n")
        if not line:
            return
        if len(line) > self._max_bytes:
            line = line[-self._max_bytes :]
        with self._lock:
            if len(self._lines) == self._lines.maxlen:
                self._size -= len(self._lines[0])
            self._lines.append(line)
            self._size += len(line)
            while self._size > self._max_bytes and len(self._lines) > 1:
                self._size -= len(self._lines.popleft())

    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def text(self) -> str:
        return "\n".join(self.lines())

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)


def spawn_ffmpeg(cmd: list[str]) -> subprocess.Popen[str]:
    """Start an ffmpeg process with stderr piped as text.

    Raises:
        SpawnError: If the executable cannot be started.
    """
    try:
        return subprocess.Popen(  # nosec B603 - cmd built from a validated plan
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise SpawnError(command_name(list(cmd)), str(e)) from e


def supervise(
    process: subprocess.Popen[str],
    buffer: StderrBuffer,
    progress_callback: Callable[[FFmpegProgress], None] | None = None,
) -> int:
    """Collect stderr until the process exits and return its exit code.

    Blocks the calling thread. The process handle's pipes are closed on
    every path.
    """

    def read_stderr() -> None:
        """Feed stderr lines into the buffer and progress callback."""
        try:
            assert process.stderr is not None
            for line in process.stderr:
                buffer.append(line)
                if progress_callback is None:
                    continue
                progress = parse_stderr_progress(line)
                if progress is not None:
                    try:
                        progress_callback(progress)
                    except Exception as e:
                        logger.warning("Progress callback error: %s", e)
        except (ValueError, OSError) as e:
            # Pipe closed or process terminated
            logger.debug("Stderr reader stopped: %s", e)

    reader_thread = threading.Thread(
        target=read_stderr, name=f"ffmpeg-stderr-{process.pid}", daemon=True
    )
    reader_thread.start()

    try:
        returncode = process.wait()
        reader_thread.join(timeout=STDERR_DRAIN_TIMEOUT)
        if reader_thread.is_alive():
            logger.warning(
                "Stderr reader still running %.0fs after exit; abandoning it",
                STDERR_DRAIN_TIMEOUT,
            )
    finally:
        if process.stderr is not None:
            try:
                process.stderr.close()
            except OSError as e:
                logger.debug("Could not close stderr pipe: %s", e)
    return returncode
