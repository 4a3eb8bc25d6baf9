"""Tests for the vrs command line."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from fakes import FakeProcess

from vrs.cache.store import TranscodeCache
from vrs.cli import main
from vrs.cli.exit_codes import ExitCode
from vrs.core.errors import ProbeError
from vrs.introspector.stub import StubInspector
from vrs.introspector.types import MediaStreamInfo
from vrs.jobs.manager import TranscodeJobManager
from vrs.transcode.planner import TranscodePlanner


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("vrs.cli._configure_logging"):
        yield


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cache_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "cache"
    monkeypatch.setenv("VRS_CACHE_DIR", str(path))
    return path


@pytest.fixture
def movie(tmp_path: Path) -> Path:
    path = tmp_path / "movie.mkv"
    path.write_bytes(b"\x00" * 2048)
    return path


class TestProbeCommand:
    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["probe", str(tmp_path / "nope.mkv")])
        assert result.exit_code == ExitCode.TARGET_NOT_FOUND

    def test_human_output(
        self, runner: CliRunner, movie: Path, cover_art_info: MediaStreamInfo
    ) -> None:
        with patch(
            "vrs.cli.inspect.FFprobeInspector",
            return_value=StubInspector(default=cover_art_info),
        ):
            result = runner.invoke(main, ["probe", str(movie)])
        assert result.exit_code == 0, result.output
        assert "[cover art]" in result.output
        assert "video: yes" in result.output
        assert "audio: no" in result.output

    def test_json_output(
        self, runner: CliRunner, movie: Path, hevc_aac_info: MediaStreamInfo
    ) -> None:
        with patch(
            "vrs.cli.inspect.FFprobeInspector",
            return_value=StubInspector(default=hevc_aac_info),
        ):
            result = runner.invoke(main, ["probe", "--json", "--allow-hevc-copy", str(movie)])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["copy_capability"] == {"video": True, "audio": True}

    def test_probe_failure(self, runner: CliRunner, movie: Path) -> None:
        with patch("vrs.cli.inspect.FFprobeInspector") as mock_cls:
            mock_cls.return_value.probe.side_effect = ProbeError(
                "ffprobe failed", diagnostics="moov atom not found"
            )
            result = runner.invoke(main, ["probe", str(movie)])
        assert result.exit_code == ExitCode.PROBE_FAILED
        assert "moov atom not found" in result.output


class TestPlanCommand:
    def test_full_transcode_plan(
        self, runner: CliRunner, movie: Path, h264_ac3_info: MediaStreamInfo
    ) -> None:
        with patch(
            "vrs.cli.inspect.FFprobeInspector",
            return_value=StubInspector(default=h264_ac3_info),
        ):
            result = runner.invoke(main, ["plan", str(movie)])
        assert result.exit_code == 0, result.output
        assert "Plan: full_transcode" in result.output
        assert "Reason: no stream copyable" in result.output
        assert "Container: not browser-playable as-is" in result.output
        assert "Estimated encode time: ~1 min" in result.output

    def test_remux_plan(
        self, runner: CliRunner, movie: Path, h264_aac_info: MediaStreamInfo
    ) -> None:
        with patch(
            "vrs.cli.inspect.FFprobeInspector",
            return_value=StubInspector(default=h264_aac_info),
        ):
            result = runner.invoke(main, ["plan", str(movie)])
        assert "Plan: fast_remux" in result.output
        assert "video: copy" in result.output
        assert "Estimated encode time" not in result.output

    def test_options_are_applied(
        self, runner: CliRunner, movie: Path, h264_aac_info: MediaStreamInfo
    ) -> None:
        with patch(
            "vrs.cli.inspect.FFprobeInspector",
            return_value=StubInspector(default=h264_aac_info),
        ):
            result = runner.invoke(main, ["plan", "--max-width", "1280", str(movie)])
        assert "Plan: selective_copy" in result.output
        assert "max_width=1280" in result.output


class TestCacheCommands:
    def test_path_prints_root(self, runner: CliRunner, cache_dir: Path) -> None:
        result = runner.invoke(main, ["cache", "path"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == str(cache_dir)

    def test_path_for_source(
        self, runner: CliRunner, cache_dir: Path, movie: Path
    ) -> None:
        result = runner.invoke(main, ["cache", "path", str(movie)])
        expected = TranscodeCache(cache_dir).resolve(movie.resolve())
        assert str(expected) in result.output
        assert "(not cached)" in result.output

    def test_cleanup(self, runner: CliRunner, cache_dir: Path) -> None:
        cache = TranscodeCache(cache_dir)
        cache.resolve("/media/a.mkv").write_bytes(b"x")
        result = runner.invoke(main, ["cache", "cleanup", "--max-age-hours", "0"])
        assert result.exit_code == 0, result.output
        assert "Removed 1 file(s)" in result.output
        assert cache.entries() == []

    def test_bad_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.toml"
        bad.write_text("[cache\n")
        result = runner.invoke(main, ["--config", str(bad), "cache", "path"])
        assert result.exit_code == ExitCode.CONFIG_ERROR


class TestTranscodeCommand:
    @pytest.fixture
    def manager(self, tmp_path: Path) -> TranscodeJobManager:
        ffmpeg = tmp_path / "ffmpeg"
        ffmpeg.write_text("")
        manager = TranscodeJobManager(TranscodePlanner(StubInspector()), ffmpeg)
        with patch("vrs.cli.transcode.build_job_manager", return_value=manager):
            yield manager

    def test_success_prints_output(
        self, runner: CliRunner, manager, movie: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out.mp4"
        with patch("vrs.jobs.manager.spawn_ffmpeg", side_effect=FakeProcess().spawn):
            result = runner.invoke(main, ["transcode", "--remux", "-q", str(movie), str(out)])
        assert result.exit_code == 0, result.output
        assert str(out) in result.output
        assert "fast_remux" in result.output

    def test_defaults_to_cache(
        self, runner: CliRunner, manager, movie: Path, cache_dir: Path
    ) -> None:
        with patch("vrs.jobs.manager.spawn_ffmpeg", side_effect=FakeProcess().spawn):
            result = runner.invoke(main, ["transcode", "-q", str(movie)])
        assert result.exit_code == 0, result.output
        assert str(TranscodeCache(cache_dir).resolve(movie.resolve())) in result.output

    def test_ffmpeg_failure(
        self, runner: CliRunner, manager, movie: Path, tmp_path: Path
    ) -> None:
        process = FakeProcess(returncode=1, stderr="Conversion failed!\n")
        with patch("vrs.jobs.manager.spawn_ffmpeg", side_effect=process.spawn):
            result = runner.invoke(
                main, ["transcode", "-q", str(movie), str(tmp_path / "out.mp4")]
            )
        assert result.exit_code == ExitCode.OPERATION_FAILED
        assert "Conversion failed!" in result.output

    def test_invalid_x264_preset(
        self, runner: CliRunner, manager, movie: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            main,
            ["transcode", "--x264-preset", "warp", str(movie), str(tmp_path / "o.mp4")],
        )
        assert result.exit_code == ExitCode.INVALID_ARGUMENTS


class TestServeCommand:
    def test_invalid_port(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["serve", "--port", "70000"])
        assert result.exit_code == ExitCode.INVALID_ARGUMENTS

    def test_runs_server(self, runner: CliRunner, tmp_path: Path, cache_dir: Path) -> None:
        def fake_run(coro):
            coro.close()
            return 0

        with (
            patch("vrs.cli.serve.is_ffmpeg_available", return_value=True),
            patch("vrs.cli.serve.asyncio.run", side_effect=fake_run) as mock_run,
        ):
            result = runner.invoke(
                main, ["serve", "--media-root", str(tmp_path), "--port", "9000"]
            )
        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
