"""Tests for FFprobeInspector."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from vrs.core.errors import ProbeError
from vrs.core.subprocess_utils import CommandResult
from vrs.introspector.ffprobe import FFprobeInspector
from vrs.introspector.types import CodecType

FAKE_FFPROBE = Path("/opt/ffmpeg/bin/ffprobe")


@pytest.fixture
def media_file(tmp_path: Path) -> Path:
    path = tmp_path / "movie.mkv"
    path.write_bytes(b"\x00" * 16)
    return path


@pytest.fixture
def inspector() -> FFprobeInspector:
    return FFprobeInspector(ffprobe_path=FAKE_FFPROBE, timeout=5)


def _result(stdout: str = "", stderr: str = "", returncode: int = 0) -> CommandResult:
    return CommandResult(
        stdout=stdout, stderr=stderr, returncode=returncode, elapsed_seconds=0.1
    )


@pytest.fixture(autouse=True)
def found_tool():
    with patch("vrs.introspector.ffprobe.find_tool", return_value=FAKE_FFPROBE) as m:
        yield m


class TestBuildCommand:
    def test_command_shape(self, inspector: FFprobeInspector, media_file: Path) -> None:
        assert inspector.build_command(media_file) == [
            str(FAKE_FFPROBE),
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(media_file),
        ]

    def test_missing_ffprobe(self, found_tool, media_file: Path) -> None:
        found_tool.return_value = None
        with pytest.raises(ProbeError, match="ffprobe is not installed"):
            FFprobeInspector().build_command(media_file)


class TestProbe:
    def test_success(
        self,
        inspector: FFprobeInspector,
        media_file: Path,
        ffprobe_fixtures_dir: Path,
    ) -> None:
        stdout = (ffprobe_fixtures_dir / "h264_high_41_aac.json").read_text()
        with patch(
            "vrs.introspector.ffprobe.run_command", return_value=_result(stdout)
        ) as mock_run:
            info = inspector.probe(media_file)

        assert mock_run.call_args.kwargs["timeout"] == 5
        assert [s.codec_type for s in info.streams] == [
            CodecType.VIDEO,
            CodecType.AUDIO,
        ]

    def test_missing_file(self, inspector: FFprobeInspector, tmp_path: Path) -> None:
        with patch("vrs.introspector.ffprobe.run_command") as mock_run:
            with pytest.raises(ProbeError, match="File not found"):
                inspector.probe(tmp_path / "missing.mkv")
        mock_run.assert_not_called()

    def test_nonzero_exit_carries_stderr(
        self, inspector: FFprobeInspector, media_file: Path
    ) -> None:
        failed = _result(stderr="Invalid data found when processing input", returncode=1)
        with patch("vrs.introspector.ffprobe.run_command", return_value=failed):
            with pytest.raises(ProbeError) as exc_info:
                inspector.probe(media_file)
        assert "Invalid data found" in exc_info.value.diagnostics
        assert exc_info.value.path == str(media_file)

    def test_timeout(self, inspector: FFprobeInspector, media_file: Path) -> None:
        with patch(
            "vrs.introspector.ffprobe.run_command",
            side_effect=subprocess.TimeoutExpired(cmd="ffprobe", timeout=5),
        ):
            with pytest.raises(ProbeError, match="timed out"):
                inspector.probe(media_file)

    def test_spawn_failure(self, inspector: FFprobeInspector, media_file: Path) -> None:
        with patch(
            "vrs.introspector.ffprobe.run_command",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(ProbeError, match="Could not run ffprobe"):
                inspector.probe(media_file)

    def test_invalid_json(self, inspector: FFprobeInspector, media_file: Path) -> None:
        with patch(
            "vrs.introspector.ffprobe.run_command", return_value=_result("not json")
        ):
            with pytest.raises(ProbeError, match="Invalid ffprobe output"):
                inspector.probe(media_file)

    def test_missing_streams(
        self, inspector: FFprobeInspector, media_file: Path
    ) -> None:
        stdout = json.dumps({"format": {"format_name": "matroska"}})
        with patch("vrs.introspector.ffprobe.run_command", return_value=_result(stdout)):
            with pytest.raises(ProbeError, match="Missing 'streams'"):
                inspector.probe(media_file)
