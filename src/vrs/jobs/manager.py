"""Transcode job manager.

Owns the table of running encodes. Each job is one ffmpeg process watched
by one supervisor thread; the table is guarded by a single lock and a job
leaves it exactly once, either on process exit or on cancellation,
whichever gets there first.
"""

from __future__ import annotations

import logging
import os
import subprocess  # nosec B404 - TimeoutExpired from Popen.wait
import threading
import uuid
from pathlib import Path

from vrs.core.errors import JobCancelledError, SpawnError, TranscodeFailure
from vrs.jobs.models import ActiveJobInfo, Job, JobStatus
from vrs.jobs.process import spawn_ffmpeg, supervise
from vrs.jobs.progress import FFmpegProgress
from vrs.logging.context import job_context
from vrs.tools.detection import find_tool
from vrs.transcode.command import build_ffmpeg_command
from vrs.transcode.planner import TranscodePlanner
from vrs.transcode.presets import BALANCED, HIGH_QUALITY, QUICK_STREAM, get_preset
from vrs.transcode.types import TranscodeOptions, TranscodePlan

logger = logging.getLogger(__name__)


class TranscodeJobManager:
    """Runs transcode plans as supervised ffmpeg processes."""

    SHUTDOWN_JOIN_TIMEOUT: float = 5.0
    # Grace period between SIGTERM and SIGKILL on cancel
    CANCEL_WAIT_TIMEOUT: float = 5.0

    def __init__(
        self,
        planner: TranscodePlanner,
        ffmpeg_path: Path | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            planner: Planner used by the convenience entry points.
            ffmpeg_path: Optional explicit path to ffmpeg; PATH otherwise.
        """
        self._planner = planner
        self._configured_path = ffmpeg_path
        self._ffmpeg_path: Path | None = None
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()

    @property
    def planner(self) -> TranscodePlanner:
        return self._planner

    @property
    def ffmpeg_path(self) -> Path:
        """Resolve ffmpeg lazily.

        Raises:
            SpawnError: If ffmpeg cannot be found.
        """
        if self._ffmpeg_path is None:
            path = find_tool("ffmpeg", self._configured_path)
            if path is None:
                raise SpawnError("ffmpeg", "not installed or not in PATH")
            self._ffmpeg_path = path
        return self._ffmpeg_path

    # Execution

    def execute(self, plan: TranscodePlan, input_path: Path, output_path: Path) -> Job:
        """Start one ffmpeg process for a plan and return immediately.

        Args:
            plan: Decided transcode plan.
            input_path: Source media file.
            output_path: Destination MP4.

        Returns:
            The running Job. Use ``job.result()`` or ``job.future`` to wait.

        Raises:
            SpawnError: If ffmpeg cannot be started. The job is not tracked.
        """
        job = Job(
            id=uuid.uuid4().hex,
            input_path=input_path,
            output_path=output_path,
            plan=plan,
        )
        # Keep the future out of reach of Future.cancel(); cancellation
        # goes through the manager so the process is signalled too.
        job.future.set_running_or_notify_cancel()

        cmd = build_ffmpeg_command(plan, input_path, job.partial_path, self.ffmpeg_path)

        with job_context(job.id, input_path):
            try:
                output_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SpawnError("ffmpeg", f"cannot create {output_path.parent}: {e}") from e

            job.process = spawn_ffmpeg(cmd)
            job.status = JobStatus.RUNNING
            with self._lock:
                self._jobs[job.id] = job

            logger.info(
                "Started %s: %s -> %s",
                plan.kind.value,
                input_path,
                output_path,
                extra={"pid": job.process.pid, "plan": plan.describe()},
            )

        job.supervisor = threading.Thread(
            target=self._supervise,
            args=(job,),
            name=f"transcode-{job.id[:8]}",
            daemon=True,
        )
        job.supervisor.start()
        return job

    def _supervise(self, job: Job) -> None:
        """Wait for a job's process and settle its future."""
        assert job.process is not None

        def on_progress(progress: FFmpegProgress) -> None:
            job.progress = progress

        with job_context(job.id, job.input_path):
            returncode = supervise(job.process, job.stderr, on_progress)

            with self._lock:
                owned = self._jobs.pop(job.id, None) is not None
            if not owned:
                # Cancelled while running; cancel() settled the future
                logger.debug("ffmpeg exited with %s after cancellation", returncode)
                return

            if returncode != 0:
                self._fail(job, TranscodeFailure(job.id, returncode, job.diagnostics))
                return

            try:
                os.replace(job.partial_path, job.output_path)
            except OSError as e:
                self._fail(job, TranscodeFailure(job.id, 0, f"cannot finalize output: {e}"))
                return

            job.status = JobStatus.COMPLETED
            logger.info(
                "Completed in %.1fs: %s",
                job.elapsed_seconds,
                job.output_path,
            )
            job.future.set_result(job.output_path)

    def _fail(self, job: Job, failure: TranscodeFailure) -> None:
        """Settle a job as failed. The partial output stays for inspection."""
        job.status = JobStatus.FAILED
        job.error = str(failure)
        logger.error(
            "Transcode failed (exit code %d) for %s",
            failure.returncode,
            job.input_path,
            extra={
                "returncode": failure.returncode,
                "diagnostics": failure.diagnostics,
                "partial_output": str(job.partial_path),
            },
        )
        job.future.set_exception(failure)

    # Entry points

    def fast_remux(self, input_path: Path, output_path: Path) -> Job:
        """Copy every stream into an MP4 container without probing."""
        return self.execute(
            TranscodePlan.fast_remux("remux requested"), input_path, output_path
        )

    def transcode(
        self,
        input_path: Path,
        output_path: Path,
        options: TranscodeOptions | None = None,
    ) -> Job:
        """Plan the input with the given options and execute the plan."""
        plan = self._planner.plan(input_path, options)
        return self.execute(plan, input_path, output_path)

    def transcode_with_preset(
        self,
        input_path: Path,
        output_path: Path,
        preset_name: str,
        overrides: TranscodeOptions | None = None,
    ) -> Job:
        """Transcode with a named quality preset, then per-call overrides."""
        options = get_preset(preset_name)
        if overrides is not None:
            options = options.merged_with(overrides)
        return self.transcode(input_path, output_path, options)

    def smart_transcode(self, input_path: Path, output_path: Path) -> Job:
        """Cheapest path to a playable MP4 at balanced settings."""
        return self.transcode_with_preset(input_path, output_path, BALANCED)

    def quick_transcode_for_streaming(self, input_path: Path, output_path: Path) -> Job:
        """Fast, lower-quality encode capped at 1080p width."""
        return self.transcode_with_preset(input_path, output_path, QUICK_STREAM)

    def high_quality_transcode(self, input_path: Path, output_path: Path) -> Job:
        return self.transcode_with_preset(input_path, output_path, HIGH_QUALITY)

    # Lifecycle

    def cancel(self, job_id: str) -> bool:
        """Cancel a running job.

        Terminates the process, waits for it to exit (killing it after
        CANCEL_WAIT_TIMEOUT), removes the job from the table and deletes the
        partial output. Signal and deletion failures are logged, not raised.

        Returns:
            False if no such job is running, True otherwise.
        """
        with self._lock:
            job = self._jobs.pop(job_id, None)
        if job is None:
            return False

        with job_context(job.id, job.input_path):
            job.status = JobStatus.CANCELLED
            if job.process is not None:
                self._stop_process(job.process)

            try:
                job.partial_path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Could not remove partial output %s: %s", job.partial_path, e)

            logger.info("Cancelled after %.1fs", job.elapsed_seconds)
            job.future.set_exception(JobCancelledError(job.id))
        return True

    def _stop_process(self, process: subprocess.Popen[str]) -> None:
        """SIGTERM, then SIGKILL if the process outlives the grace period."""
        if process.poll() is not None:
            return
        try:
            process.terminate()
            process.wait(timeout=self.CANCEL_WAIT_TIMEOUT)
            return
        except subprocess.TimeoutExpired:
            logger.warning(
                "ffmpeg ignored SIGTERM for %.1fs; killing it", self.CANCEL_WAIT_TIMEOUT
            )
        except OSError as e:
            logger.warning("Could not signal ffmpeg: %s", e)
            return

        try:
            process.kill()
            process.wait(timeout=self.CANCEL_WAIT_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not kill ffmpeg: %s", e)

    def get(self, job_id: str) -> Job | None:
        with self._lock:
            return self._jobs.get(job_id)

    def find_by_output(self, output_path: Path) -> Job | None:
        """Running job writing to output_path, if any."""
        with self._lock:
            for job in self._jobs.values():
                if job.output_path == output_path:
                    return job
        return None

    def list_active(self) -> list[ActiveJobInfo]:
        """Snapshot of every running job."""
        with self._lock:
            jobs = list(self._jobs.values())
        return [job.snapshot() for job in jobs]

    def active_count(self) -> int:
        with self._lock:
            return len(self._jobs)

    def shutdown(self, wait: bool = True) -> int:
        """Cancel every running job.

        Args:
            wait: Join supervisor threads so processes are reaped.

        Returns:
            Number of jobs cancelled.
        """
        with self._lock:
            jobs = list(self._jobs.values())

        cancelled = [job for job in jobs if self.cancel(job.id)]
        if cancelled:
            logger.info("Cancelled %d running job(s) on shutdown", len(cancelled))

        if wait:
            for job in cancelled:
                if job.supervisor is not None:
                    job.supervisor.join(timeout=self.SHUTDOWN_JOIN_TIMEOUT)
        return len(cancelled)
