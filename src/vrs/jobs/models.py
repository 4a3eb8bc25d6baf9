"""Job data models."""

from __future__ import annotations

import subprocess  # nosec B404 - type of the supervised process handle
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from vrs.jobs.process import StderrBuffer
from vrs.jobs.progress import FFmpegProgress
from vrs.transcode.types import PlanKind, TranscodePlan

PARTIAL_SUFFIX = ".part"


class JobStatus(str, Enum):
    """Lifecycle state of a transcode job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED)


@dataclass
class Job:
    """One encoding process and its bookkeeping.

    Jobs live in the manager's table only while running. ffmpeg writes to
    ``partial_path``, which is renamed to ``output_path`` only after a clean
    exit. Completion is observed through ``future``, which resolves with
    ``output_path`` on a clean exit and raises TranscodeFailure or
    JobCancelledError otherwise.
    """

    id: str
    input_path: Path
    output_path: Path
    plan: TranscodePlan
    started_at: float = field(default_factory=time.time)
    status: JobStatus = JobStatus.PENDING
    process: subprocess.Popen[str] | None = field(default=None, repr=False)
    future: Future[Path] = field(default_factory=Future, repr=False)
    stderr: StderrBuffer = field(default_factory=StderrBuffer, repr=False)
    progress: FFmpegProgress | None = None
    error: str | None = None
    supervisor: threading.Thread | None = field(default=None, repr=False)

    @property
    def elapsed_seconds(self) -> float:
        return max(0.0, time.time() - self.started_at)

    @property
    def partial_path(self) -> Path:
        """Where ffmpeg writes while the job runs."""
        return self.output_path.with_name(self.output_path.name + PARTIAL_SUFFIX)

    @property
    def diagnostics(self) -> str:
        """Tail of the process's stderr."""
        return self.stderr.text()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: float | None = None) -> Path:
        """Block until the job finishes and return the output path.

        Raises:
            TranscodeFailure: If ffmpeg exited non-zero.
            JobCancelledError: If the job was cancelled.
            concurrent.futures.TimeoutError: If timeout elapses first.
        """
        return self.future.result(timeout=timeout)

    def snapshot(self) -> ActiveJobInfo:
        progress = self.progress.out_time_seconds if self.progress else None
        return ActiveJobInfo(
            id=self.id,
            input_path=self.input_path,
            output_path=self.output_path,
            elapsed_seconds=round(self.elapsed_seconds, 3),
            plan_kind=self.plan.kind,
            progress_seconds=progress,
        )


@dataclass(frozen=True)
class ActiveJobInfo:
    """Point-in-time view of a running job."""

    id: str
    input_path: Path
    output_path: Path
    elapsed_seconds: float
    plan_kind: PlanKind
    progress_seconds: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "input_path": str(self.input_path),
            "output_path": str(self.output_path),
            "elapsed_seconds": self.elapsed_seconds,
            "plan_kind": self.plan_kind.value,
            "progress_seconds": self.progress_seconds,
        }
