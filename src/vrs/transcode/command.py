"""ffmpeg command construction for transcode plans."""

from __future__ import annotations

from pathlib import Path

from vrs.transcode.types import (
    AudioAction,
    AudioEncodeParams,
    PlanKind,
    TranscodePlan,
    VideoAction,
    VideoEncodeParams,
)

OUTPUT_FLAGS = ("-f", "mp4", "-movflags", "+faststart")


def video_args(action: VideoAction) -> list[str]:
    """Arguments for the video stream directive."""
    if not isinstance(action, VideoEncodeParams):
        return ["-c:v", "copy"]

    args = [
        "-c:v",
        action.encoder,
        "-preset",
        action.preset,
        "-crf",
        str(action.crf),
        "-profile:v",
        action.profile,
        "-level",
        action.level,
        "-pix_fmt",
        action.pix_fmt,
    ]
    scale = action.scale_filter
    if scale is not None:
        args.extend(["-vf", scale])
    return args


def audio_args(action: AudioAction) -> list[str]:
    """Arguments for the audio stream directive."""
    if not isinstance(action, AudioEncodeParams):
        return ["-c:a", "copy"]
    return ["-c:a", action.encoder, "-b:a", action.bitrate]


def build_ffmpeg_command(
    plan: TranscodePlan,
    input_path: Path,
    output_path: Path,
    ffmpeg_path: Path | str = "ffmpeg",
) -> list[str]:
    """Build the ffmpeg argv for a plan.

    The output is always a fragment-free MP4 with the moov atom moved to
    the front so browsers can start playback before the download ends.

    Args:
        plan: Decided transcode plan.
        input_path: Source media file.
        output_path: Destination MP4, overwritten if present.
        ffmpeg_path: ffmpeg executable.

    Returns:
        List of command line arguments.
    """
    cmd = [str(ffmpeg_path), "-hide_banner", "-i", str(input_path)]

    if plan.kind is PlanKind.FAST_REMUX:
        # Lossless stream copy of everything
        cmd.extend(["-c", "copy"])
    else:
        cmd.extend(video_args(plan.video))
        cmd.extend(audio_args(plan.audio))

    cmd.extend(OUTPUT_FLAGS)
    # Output file (overwrite if exists)
    cmd.extend(["-y", str(output_path)])
    return cmd
