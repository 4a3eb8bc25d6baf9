"""Shared test fixtures for Video Range Server."""

import json
import logging
import os
from pathlib import Path

import pytest

from vrs.introspector.parsers import parse_ffprobe_output
from vrs.introspector.types import MediaStreamInfo

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep tests away from the user's ~/.vrs and VRS_* variables."""
    for var in list(os.environ):
        if var.startswith("VRS_"):
            monkeypatch.delenv(var, raising=False)
    data_dir = tmp_path_factory.mktemp("vrs-data")
    monkeypatch.setenv("VRS_DATA_DIR", str(data_dir))
    monkeypatch.setenv("VRS_CONFIG_PATH", str(data_dir / "config.toml"))
    yield
    # configure_logging() replaces root handlers; do not leak them
    logging.getLogger().handlers.clear()


@pytest.fixture
def ffprobe_fixtures_dir() -> Path:
    """Return the path to the ffprobe fixtures directory."""
    return FIXTURES_DIR / "ffprobe"


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name.

    Args:
        name: Name of the fixture file (without .json extension).

    Returns:
        Parsed JSON data from the fixture.
    """
    fixture_path = FIXTURES_DIR / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


def load_stream_info(name: str) -> MediaStreamInfo:
    """Load an ffprobe fixture and parse it into MediaStreamInfo."""
    return parse_ffprobe_output(load_ffprobe_fixture(name))


@pytest.fixture
def media_root(tmp_path: Path) -> Path:
    """A media directory with a few small files."""
    root = tmp_path / "media"
    root.mkdir()
    (root / "movie.mp4").write_bytes(bytes(range(256)) * 16)  # 4096 bytes
    (root / "show.mkv").write_bytes(b"\x1a\x45\xdf\xa3" + b"\x00" * 1020)
    nested = root / "season1"
    nested.mkdir()
    (nested / "episode.mkv").write_bytes(b"\x00" * 10)
    return root


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def h264_aac_info() -> MediaStreamInfo:
    """1080p H.264 High@4.1 with stereo AAC: fully copyable."""
    return load_stream_info("h264_high_41_aac")


@pytest.fixture
def h264_mp3_info() -> MediaStreamInfo:
    """720p H.264 High@4.0 with MP3 in AVI: fully copyable."""
    return load_stream_info("h264_high_40_mp3")


@pytest.fixture
def h264_ac3_info() -> MediaStreamInfo:
    """4K H.264 High@5.1 with AC-3 and a subtitle track: nothing copyable."""
    return load_stream_info("h264_high_51_ac3")


@pytest.fixture
def hevc_aac_info() -> MediaStreamInfo:
    """4K HEVC Main 10 with AAC."""
    return load_stream_info("hevc_main10_aac")


@pytest.fixture
def cover_art_info() -> MediaStreamInfo:
    """MJPEG cover art, then H.264 Main@4.0, then DTS."""
    return load_stream_info("h264_main_dts_cover")
