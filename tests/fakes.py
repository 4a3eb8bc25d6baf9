"""Test doubles shared across test modules."""

from __future__ import annotations

import io
import subprocess
import threading
import time
from pathlib import Path

# Enough of an MP4 header for range tests to recognise the box
MP4_BYTES = b"\x00\x00\x00\x18ftypisom\x00\x00\x02\x00isomiso2mp41"


class FakeProcess:
    """Stands in for a Popen handle; exits when released or terminated.

    Patch ``spawn_ffmpeg`` with ``side_effect=process.spawn`` so the fake
    learns its output argument. Like ffmpeg it writes ``writes`` there when
    it exits on its own (MP4_BYTES by default for a clean exit), and
    ``writes_on_term`` shortly after receiving SIGTERM.
    """

    def __init__(
        self,
        returncode: int = 0,
        stderr: str = "",
        block: bool = False,
        writes: bytes | None = None,
        writes_on_term: bytes | None = None,
        ignores_term: bool = False,
    ):
        self.pid = 4242
        self.stderr = io.StringIO(stderr)
        self.cmd: list[str] = []
        self.output: Path | None = None
        self._exit_code = returncode
        self._writes = MP4_BYTES if writes is None and returncode == 0 else writes
        self._writes_on_term = writes_on_term
        self._ignores_term = ignores_term
        self._block = block
        self._exited = threading.Event()
        self.terminated = False
        self.killed = False

    def spawn(self, cmd: list[str]) -> FakeProcess:
        self.cmd = list(cmd)
        self.output = Path(cmd[-1])
        if not self._block:
            self.release()
        return self

    def wait(self, timeout: float | None = None) -> int:
        if not self._exited.wait(timeout):
            raise subprocess.TimeoutExpired("ffmpeg", timeout)
        return self._exit_code

    def poll(self) -> int | None:
        return self._exit_code if self._exited.is_set() else None

    def terminate(self) -> None:
        self.terminated = True
        if self._ignores_term:
            return
        if self._writes_on_term is None:
            self._exit(-15)
            return

        def finish() -> None:
            # The encoder flushes its trailer after the signal arrives
            time.sleep(0.05)
            self._write(self._writes_on_term)
            self._exit(-15)

        threading.Thread(target=finish, daemon=True).start()

    def kill(self) -> None:
        self.killed = True
        self._exit(-9)

    def release(self) -> None:
        """Let the process exit with its configured code."""
        self._write(self._writes)
        self._exited.set()

    def _exit(self, code: int) -> None:
        self._exit_code = code
        self._exited.set()

    def _write(self, data: bytes | None) -> None:
        if data is not None and self.output is not None:
            self.output.write_bytes(data)
