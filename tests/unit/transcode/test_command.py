"""Tests for ffmpeg command construction."""

from pathlib import Path

from vrs.transcode.command import audio_args, build_ffmpeg_command, video_args
from vrs.transcode.types import (
    COPY,
    AudioEncodeParams,
    PlanKind,
    TranscodePlan,
    VideoEncodeParams,
)

SRC = Path("/media/in.mkv")
DST = Path("/cache/out.mp4")


class TestBuildFFmpegCommand:
    def test_fast_remux(self) -> None:
        cmd = build_ffmpeg_command(TranscodePlan.fast_remux(), SRC, DST, "/usr/bin/ffmpeg")
        assert cmd == [
            "/usr/bin/ffmpeg",
            "-hide_banner",
            "-i",
            "/media/in.mkv",
            "-c",
            "copy",
            "-f",
            "mp4",
            "-movflags",
            "+faststart",
            "-y",
            "/cache/out.mp4",
        ]

    def test_selective_copy(self) -> None:
        plan = TranscodePlan(
            PlanKind.SELECTIVE_COPY, COPY, AudioEncodeParams(bitrate="128k")
        )
        cmd = build_ffmpeg_command(plan, SRC, DST)
        assert cmd[0] == "ffmpeg"
        assert cmd[4:10] == ["-c:v", "copy", "-c:a", "aac", "-b:a", "128k"]
        assert cmd[-2:] == ["-y", "/cache/out.mp4"]

    def test_full_transcode_with_scaling(self) -> None:
        plan = TranscodePlan(
            PlanKind.FULL_TRANSCODE,
            VideoEncodeParams(preset="ultrafast", crf=28, max_width=1920),
            AudioEncodeParams(bitrate="128k"),
        )
        cmd = build_ffmpeg_command(plan, SRC, DST)
        assert "-vf" in cmd
        assert cmd[cmd.index("-vf") + 1] == "scale='min(1920,iw)':-2"
        assert cmd[cmd.index("-preset") + 1] == "ultrafast"
        assert cmd[cmd.index("-crf") + 1] == "28"
        assert "+faststart" in cmd


class TestStreamArgs:
    def test_video_encode_settings(self) -> None:
        assert video_args(VideoEncodeParams(preset="fast", crf=23)) == [
            "-c:v",
            "libx264",
            "-preset",
            "fast",
            "-crf",
            "23",
            "-profile:v",
            "high",
            "-level",
            "4.1",
            "-pix_fmt",
            "yuv420p",
        ]

    def test_copy(self) -> None:
        assert video_args(COPY) == ["-c:v", "copy"]
        assert audio_args(COPY) == ["-c:a", "copy"]
