"""Core utilities package.

Pure helpers shared across VRS: the error hierarchy, codec rules and the
short-lived subprocess wrapper.
"""

from vrs.core.codecs import (
    COPYABLE_AUDIO_CODECS,
    COPYABLE_H264_PROFILES,
    MAX_COPYABLE_H264_LEVEL,
    is_copyable_audio_codec,
    is_h264,
    is_hevc,
    normalize_codec,
    parse_level,
)
from vrs.core.errors import (
    CacheIOError,
    ConfigError,
    JobCancelledError,
    ProbeError,
    RangeError,
    RangeNotSatisfiableError,
    SpawnError,
    TranscodeFailure,
    VRSError,
    truncate_diagnostics,
)
from vrs.core.subprocess_utils import CommandResult, run_command

__all__ = [
    # Codecs
    "COPYABLE_AUDIO_CODECS",
    "COPYABLE_H264_PROFILES",
    "MAX_COPYABLE_H264_LEVEL",
    "is_copyable_audio_codec",
    "is_h264",
    "is_hevc",
    "normalize_codec",
    "parse_level",
    # Errors
    "CacheIOError",
    "ConfigError",
    "JobCancelledError",
    "ProbeError",
    "RangeError",
    "RangeNotSatisfiableError",
    "SpawnError",
    "TranscodeFailure",
    "VRSError",
    "truncate_diagnostics",
    # Subprocess
    "CommandResult",
    "run_command",
]
