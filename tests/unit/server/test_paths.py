"""Tests for path resolution under the media root."""

from pathlib import Path

import pytest

from vrs.server.api.models import CacheCleanupRequest, TranscodeRequest
from vrs.server.paths import PathNotAllowed, resolve_under_root


class TestResolveUnderRoot:
    def test_relative_path(self, media_root: Path) -> None:
        assert resolve_under_root(media_root, "season1/episode.mkv") == (
            media_root.resolve() / "season1" / "episode.mkv"
        )

    def test_leading_slash_stays_inside(self, media_root: Path) -> None:
        assert resolve_under_root(media_root, "/movie.mp4") == (
            media_root.resolve() / "movie.mp4"
        )

    @pytest.mark.parametrize("relative", ["../x", "season1/../../x", "a/../../../etc/passwd"])
    def test_traversal_refused(self, media_root: Path, relative: str) -> None:
        with pytest.raises(PathNotAllowed):
            resolve_under_root(media_root, relative)

    def test_symlink_escape_refused(self, media_root: Path, tmp_path: Path) -> None:
        outside = tmp_path / "outside.mp4"
        outside.write_bytes(b"x")
        (media_root / "link.mp4").symlink_to(outside)
        with pytest.raises(PathNotAllowed):
            resolve_under_root(media_root, "link.mp4")


class TestRequestModels:
    def test_defaults(self) -> None:
        request = TranscodeRequest(path="a.mkv")
        assert request.mode == "smart"
        assert request.refresh is False
        options = request.to_options()
        assert options.max_width is None
        assert options.force_encode is False

    def test_options_carry_overrides(self) -> None:
        request = TranscodeRequest(
            path="a.mkv", preset="veryfast", crf=18, audio_bitrate="192k", allow_hevc_copy=True
        )
        options = request.to_options()
        assert (options.preset, options.crf, options.audio_bitrate) == ("veryfast", 18, "192k")
        assert options.allow_hevc_copy

    @pytest.mark.parametrize(
        "body",
        [
            {"path": ""},
            {"path": "a.mkv", "max_width": 0},
            {"path": "a.mkv", "audio_bitrate": "loud"},
            {"path": "a.mkv", "crf": -1},
        ],
    )
    def test_invalid(self, body: dict) -> None:
        with pytest.raises(ValueError):
            TranscodeRequest.model_validate(body)

    def test_cleanup_request(self) -> None:
        assert CacheCleanupRequest().max_age_hours is None
        assert CacheCleanupRequest(max_age_hours=1.5).max_age_hours == 1.5
