"""Job context for structured logging.

Propagates the id of the transcode job being supervised through contextvars
so every log record emitted on a job's behalf carries it automatically.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_input_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "input_path", default=None
)


def set_job_context(job_id: str, input_path: Path | str | None = None) -> None:
    """Set the current job context."""
    _job_id.set(job_id)
    _input_path.set(str(input_path) if input_path is not None else None)


def clear_job_context() -> None:
    """Clear the current job context."""
    _job_id.set(None)
    _input_path.set(None)


def get_job_context() -> tuple[str | None, str | None]:
    """Return (job_id, input_path) for the current context."""
    return _job_id.get(), _input_path.get()


@contextmanager
def job_context(
    job_id: str, input_path: Path | str | None = None
) -> Generator[None, None, None]:
    """Set job context on entry and restore the previous one on exit.

    Example:
        with job_context("3f2a", "/media/movie.mkv"):
            logger.info("ffmpeg exited")  # record carries job_id
    """
    old_job_id = _job_id.get()
    old_input_path = _input_path.get()
    try:
        set_job_context(job_id, input_path)
        yield
    finally:
        _job_id.set(old_job_id)
        _input_path.set(old_input_path)


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_id and input_path attributes for the JSON formatter, and a
    short job_tag such as "[J3f2a9c1d] " for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        job_id, input_path = get_job_context()
        record.job_id = job_id
        record.input_path = input_path
        record.job_tag = f"[J{job_id[:8]}] " if job_id else ""
        return True
