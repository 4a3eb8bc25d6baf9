"""Tests for the VRS exception hierarchy."""

from vrs.core.errors import (
    MAX_DIAGNOSTIC_CHARS,
    CacheIOError,
    ConfigError,
    JobCancelledError,
    ProbeError,
    RangeNotSatisfiableError,
    SpawnError,
    TranscodeFailure,
    VRSError,
    truncate_diagnostics,
)


class TestTruncateDiagnostics:
    def test_empty_input(self) -> None:
        assert truncate_diagnostics(None) == ""
        assert truncate_diagnostics("") == ""

    def test_short_text_unchanged(self) -> None:
        assert truncate_diagnostics("boom") == "boom"

    def test_long_text_keeps_tail(self) -> None:
        text = "a" * MAX_DIAGNOSTIC_CHARS + "END"
        result = truncate_diagnostics(text)
        assert result.startswith("...")
        assert result.endswith("END")
        assert len(result) == MAX_DIAGNOSTIC_CHARS + 3


class TestHierarchy:
    def test_all_derive_from_base(self) -> None:
        errors = [
            ConfigError("x"),
            ProbeError("x"),
            SpawnError("ffmpeg", "not found"),
            TranscodeFailure("job", 1),
            JobCancelledError("job"),
            RangeNotSatisfiableError("bytes=9-", 5),
            CacheIOError("/tmp/x", "denied"),
        ]
        assert all(isinstance(e, VRSError) for e in errors)


class TestMessages:
    def test_probe_error_bounds_diagnostics(self) -> None:
        e = ProbeError("bad", path="/m.mkv", diagnostics="x" * 10000)
        assert e.path == "/m.mkv"
        assert len(e.diagnostics) <= MAX_DIAGNOSTIC_CHARS + 3

    def test_spawn_error_message(self) -> None:
        e = SpawnError("ffmpeg", "No such file")
        assert str(e) == "Could not start ffmpeg: No such file"

    def test_transcode_failure_includes_diagnostics(self) -> None:
        e = TranscodeFailure("abc", 1, "Invalid data found")
        assert e.returncode == 1
        assert "abc" in str(e)
        assert "Invalid data found" in str(e)

    def test_transcode_failure_without_diagnostics(self) -> None:
        assert str(TranscodeFailure("abc", 2)) == "Transcode job abc failed with code 2"

    def test_range_error_content_range(self) -> None:
        e = RangeNotSatisfiableError("bytes=100-", 50, "start beyond end")
        assert e.content_range == "bytes */50"
        assert "start beyond end" in str(e)
