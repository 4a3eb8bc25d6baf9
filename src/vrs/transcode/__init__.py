"""Transcode planning for Video Range Server.

- TranscodePlanner: probe + classify + decide
- decide_plan: pure decision table
- build_ffmpeg_command: plan to ffmpeg argv
- Quality presets and planning helpers
"""

from vrs.transcode.command import build_ffmpeg_command
from vrs.transcode.planner import TranscodePlanner, decide_plan, full_transcode_plan
from vrs.transcode.presets import (
    BALANCED,
    HIGH_QUALITY,
    QUALITY_PRESETS,
    QUICK_STREAM,
    get_preset,
    preset_names,
)
from vrs.transcode.types import (
    COPY,
    AudioEncodeParams,
    CopyAction,
    PlanKind,
    TranscodeOptions,
    TranscodePlan,
    VideoEncodeParams,
)
from vrs.transcode.utils import estimate_transcode_minutes, needs_transcoding

__all__ = [
    "BALANCED",
    "COPY",
    "HIGH_QUALITY",
    "QUALITY_PRESETS",
    "QUICK_STREAM",
    "AudioEncodeParams",
    "CopyAction",
    "PlanKind",
    "TranscodeOptions",
    "TranscodePlan",
    "TranscodePlanner",
    "VideoEncodeParams",
    "build_ffmpeg_command",
    "decide_plan",
    "estimate_transcode_minutes",
    "full_transcode_plan",
    "get_preset",
    "needs_transcoding",
    "preset_names",
]
