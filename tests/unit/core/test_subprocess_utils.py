"""Tests for subprocess helpers."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from vrs.core.subprocess_utils import command_name, run_command


class TestCommandName:
    def test_basename(self) -> None:
        assert command_name([Path("/usr/bin/ffprobe"), "-v"]) == "ffprobe"

    def test_empty(self) -> None:
        assert command_name([]) == "unknown"


class TestRunCommand:
    def test_converts_paths_and_captures(self) -> None:
        completed = MagicMock(stdout="out", stderr="", returncode=0)
        with patch(
            "vrs.core.subprocess_utils.subprocess.run", return_value=completed
        ) as mock_run:
            result = run_command([Path("/bin/tool"), "--flag"], timeout=5)

        args, kwargs = mock_run.call_args
        assert args[0] == ["/bin/tool", "--flag"]
        assert kwargs["timeout"] == 5
        assert kwargs["errors"] == "replace"
        assert result.ok
        assert result.stdout == "out"

    def test_none_output_becomes_empty(self) -> None:
        completed = MagicMock(stdout=None, stderr=None, returncode=3)
        with patch("vrs.core.subprocess_utils.subprocess.run", return_value=completed):
            result = run_command(["tool"])
        assert result.stdout == ""
        assert result.stderr == ""
        assert not result.ok

    def test_timeout_propagates(self) -> None:
        with patch(
            "vrs.core.subprocess_utils.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="tool", timeout=1),
        ):
            with pytest.raises(subprocess.TimeoutExpired):
                run_command(["tool"], timeout=1)
