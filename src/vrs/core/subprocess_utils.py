"""Subprocess helpers for short-lived external tool invocations.

Used for ffprobe and tool version checks. Long-running encodes go through
vrs.jobs.process instead, which supervises the process asynchronously.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of a finished command."""

    stdout: str
    stderr: str
    returncode: int
    elapsed_seconds: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def command_name(args: list[str | Path]) -> str:
    """Return the basename of the executable in an argument list."""
    if not args:
        return "unknown"
    return Path(str(args[0])).name


def run_command(args: list[str | Path], timeout: float = 120) -> CommandResult:
    """Run a command to completion and capture its output as text.

    Non-UTF8 bytes are replaced rather than raising, since media metadata
    routinely contains mis-encoded titles.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds.

    Returns:
        CommandResult with stdout, stderr and return code.

    Raises:
        subprocess.TimeoutExpired: If the command times out. The child is
            killed by subprocess.run before this propagates.
        OSError: If the executable cannot be started.
    """
    str_args = [str(arg) for arg in args]
    name = command_name(args)

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    try:
        result = subprocess.run(  # nosec B603 - caller validates args
            str_args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={"command": name, "timeout_seconds": timeout},
        )
        raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )
    return CommandResult(
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        returncode=result.returncode,
        elapsed_seconds=elapsed,
    )
