"""Transcode job execution and lifecycle."""

from vrs.jobs.manager import TranscodeJobManager
from vrs.jobs.models import ActiveJobInfo, Job, JobStatus
from vrs.jobs.process import StderrBuffer
from vrs.jobs.progress import FFmpegProgress, parse_stderr_progress

__all__ = [
    "ActiveJobInfo",
    "FFmpegProgress",
    "Job",
    "JobStatus",
    "StderrBuffer",
    "TranscodeJobManager",
    "parse_stderr_progress",
]
