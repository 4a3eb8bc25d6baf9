"""Tests for ffprobe JSON parsing."""

from vrs.introspector.parsers import (
    map_codec_type,
    parse_duration,
    parse_ffprobe_output,
    parse_stream,
)
from vrs.introspector.types import CodecType, MediaStreamInfo


class TestParseStream:
    def test_video_stream(self) -> None:
        stream = parse_stream(
            {
                "index": 0,
                "codec_type": "video",
                "codec_name": "h264",
                "profile": "High",
                "level": 41,
                "width": 1920,
                "height": 1080,
            }
        )
        assert stream.codec_type == CodecType.VIDEO
        assert stream.codec_name == "h264"
        assert stream.level == 41
        assert (stream.width, stream.height) == (1920, 1080)
        assert stream.is_attached_pic is False

    def test_attached_pic_flag(self) -> None:
        stream = parse_stream(
            {"index": 0, "codec_type": "video", "disposition": {"attached_pic": 1}}
        )
        assert stream.is_attached_pic is True

    def test_missing_index_uses_position(self) -> None:
        assert parse_stream({"codec_type": "audio"}, position=3).index == 3

    def test_invalid_dimensions_dropped(self) -> None:
        stream = parse_stream(
            {"index": 0, "codec_type": "video", "width": 0, "height": "720"}
        )
        assert stream.width is None
        assert stream.height is None

    def test_unknown_codec_type_is_other(self) -> None:
        assert map_codec_type("subtitle") == CodecType.OTHER
        assert map_codec_type(None) == CodecType.OTHER


class TestParseDuration:
    def test_parses_string(self) -> None:
        assert parse_duration("5421.333000") == 5421.333

    def test_invalid_is_none(self) -> None:
        assert parse_duration("N/A") is None
        assert parse_duration(None) is None


class TestParseFFprobeOutput:
    def test_fixture(self, h264_aac_info: MediaStreamInfo) -> None:
        assert len(h264_aac_info.streams) == 2
        assert h264_aac_info.format_name == "mov,mp4,m4a,3gp,3g2,mj2"
        assert h264_aac_info.duration_seconds == 5421.333
        assert [s.codec_name for s in h264_aac_info.audio_streams] == ["aac"]

    def test_subtitles_are_other(self, h264_ac3_info: MediaStreamInfo) -> None:
        assert h264_ac3_info.streams[2].codec_type == CodecType.OTHER

    def test_primary_video_skips_cover_art(self, cover_art_info: MediaStreamInfo) -> None:
        assert len(cover_art_info.video_streams) == 2
        assert cover_art_info.primary_video is not None
        assert cover_art_info.primary_video.codec_name == "h264"

    def test_malformed_stream_entries_skipped(self) -> None:
        info = parse_ffprobe_output(
            {"streams": ["garbage", {"index": 1, "codec_type": "audio"}]}
        )
        assert len(info.streams) == 1
        assert info.streams[0].index == 1

    def test_empty_output(self) -> None:
        info = parse_ffprobe_output({})
        assert info.streams == ()
        assert info.format_name is None
        assert info.primary_video is None
