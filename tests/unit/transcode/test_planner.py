"""Tests for TranscodePlanner."""

import logging
from pathlib import Path

import pytest

from vrs.config.models import TranscodeDefaults
from vrs.introspector.stub import StubInspector
from vrs.introspector.types import MediaStreamInfo
from vrs.transcode.planner import TranscodePlanner
from vrs.transcode.types import PlanKind, TranscodeOptions, VideoEncodeParams

SOURCE = Path("/media/movie.mkv")


class TestTranscodePlanner:
    def test_copyable_file_is_remuxed(self, h264_aac_info: MediaStreamInfo) -> None:
        inspector = StubInspector({SOURCE: h264_aac_info})
        plan = TranscodePlanner(inspector).plan(SOURCE)
        assert plan.kind == PlanKind.FAST_REMUX
        assert inspector.calls == [SOURCE]

    def test_incompatible_file(self, h264_ac3_info: MediaStreamInfo) -> None:
        plan = TranscodePlanner(StubInspector({SOURCE: h264_ac3_info})).plan(SOURCE)
        assert plan.kind == PlanKind.FULL_TRANSCODE

    def test_cover_art_file_copies_video(self, cover_art_info: MediaStreamInfo) -> None:
        plan = TranscodePlanner(StubInspector({SOURCE: cover_art_info})).plan(SOURCE)
        assert plan.kind == PlanKind.SELECTIVE_COPY
        assert plan.copies_video

    def test_hevc_policy_from_defaults(self, hevc_aac_info: MediaStreamInfo) -> None:
        inspector = StubInspector({SOURCE: hevc_aac_info})
        strict = TranscodePlanner(inspector)
        relaxed = TranscodePlanner(inspector, TranscodeDefaults(allow_hevc_copy=True))
        assert strict.plan(SOURCE).kind == PlanKind.SELECTIVE_COPY
        assert relaxed.plan(SOURCE).kind == PlanKind.FAST_REMUX

    def test_hevc_policy_per_call(self, hevc_aac_info: MediaStreamInfo) -> None:
        planner = TranscodePlanner(StubInspector({SOURCE: hevc_aac_info}))
        plan = planner.plan(SOURCE, TranscodeOptions(allow_hevc_copy=True))
        assert plan.kind == PlanKind.FAST_REMUX

    def test_probe_failure_falls_back_to_full_transcode(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        planner = TranscodePlanner(StubInspector(), TranscodeDefaults(crf=26))
        with caplog.at_level(logging.WARNING):
            plan = planner.plan(SOURCE, TranscodeOptions(max_width=1280))

        assert plan.kind == PlanKind.FULL_TRANSCODE
        assert plan.reason == "probe failed; full transcode"
        assert plan.video == VideoEncodeParams(preset="fast", crf=26, max_width=1280)
        assert "falling back to full transcode" in caplog.text

    def test_default_options_carry_hevc_policy(self) -> None:
        planner = TranscodePlanner(StubInspector(), TranscodeDefaults(allow_hevc_copy=True))
        assert planner.default_options() == TranscodeOptions(allow_hevc_copy=True)


class TestMergeOptions:
    def test_overrides_win(self) -> None:
        base = TranscodeOptions(preset="fast", crf=23)
        merged = base.merged_with(TranscodeOptions(crf=18, force_encode=True))
        assert merged == TranscodeOptions(preset="fast", crf=18, force_encode=True)

    def test_unset_overrides_keep_base(self) -> None:
        base = TranscodeOptions(max_width=1920, allow_hevc_copy=True)
        assert base.merged_with(TranscodeOptions()) == base

    def test_invalid_options_rejected(self) -> None:
        with pytest.raises(ValueError):
            TranscodeOptions(max_width=0)
        with pytest.raises(ValueError):
            TranscodeOptions(preset="turbo")
        with pytest.raises(ValueError):
            TranscodeOptions(crf=-1)
