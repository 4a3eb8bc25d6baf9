"""Exception hierarchy for VRS.

Every error raised by the core derives from VRSError so the HTTP and CLI
layers can catch the whole family with a single except clause.
"""

from __future__ import annotations

# Cap on diagnostic text carried by process-related errors
MAX_DIAGNOSTIC_CHARS = 4000


def truncate_diagnostics(text: str | None, limit: int = MAX_DIAGNOSTIC_CHARS) -> str:
    """Keep the tail of diagnostic output, which holds the actual failure."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return "..." + text[-limit:]


class VRSError(Exception):
    """Base exception for all VRS errors."""


class ConfigError(VRSError):
    """Raised when configuration cannot be loaded or is invalid."""


class ProbeError(VRSError):
    """Raised when stream inspection fails.

    Attributes:
        path: File that was being probed.
        diagnostics: Captured stderr of the probing process (bounded).
    """

    def __init__(self, message: str, path: str | None = None, diagnostics: str = ""):
        self.path = path
        self.diagnostics = truncate_diagnostics(diagnostics)
        super().__init__(message)


class SpawnError(VRSError):
    """Raised when the encoding process cannot be started."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Could not start {command}: {reason}")


class TranscodeFailure(VRSError):
    """Raised when the encoding process exits with a non-zero code.

    Attributes:
        returncode: Exit code of the process.
        diagnostics: Tail of the process's stderr output.
    """

    def __init__(self, job_id: str, returncode: int, diagnostics: str = ""):
        self.job_id = job_id
        self.returncode = returncode
        self.diagnostics = truncate_diagnostics(diagnostics)
        message = f"Transcode job {job_id} failed with code {returncode}"
        if self.diagnostics:
            message = f"{message}: {self.diagnostics}"
        super().__init__(message)


class JobCancelledError(VRSError):
    """Raised from a job's result when the job was cancelled."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Transcode job {job_id} was cancelled")


class RangeError(VRSError):
    """Base class for byte-range request errors."""


class RangeNotSatisfiableError(RangeError):
    """Raised for malformed or out-of-bounds range requests (HTTP 416)."""

    def __init__(self, header: str | None, file_size: int, reason: str = ""):
        self.header = header
        self.file_size = file_size
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f"Range {header!r} not satisfiable for size {file_size}{detail}"
        )

    @property
    def content_range(self) -> str:
        """Value for the Content-Range header of the 416 response."""
        return f"bytes */{self.file_size}"


class CacheIOError(VRSError):
    """Raised when a single cache entry cannot be read or deleted."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cache entry {path}: {reason}")
