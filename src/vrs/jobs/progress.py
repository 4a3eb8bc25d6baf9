"""ffmpeg stderr progress parsing.

ffmpeg reports encode progress on stderr as periodic status lines:

    frame= 1234 fps= 30 q=28.0 size=  10240kB time=00:01:23.45 bitrate=... speed=2.0x
"""

import re
from dataclasses import dataclass


@dataclass
class FFmpegProgress:
    """One parsed ffmpeg status line."""

    frame: int | None = None
    fps: float | None = None
    bitrate: str | None = None
    out_time_us: int | None = None  # Output time in microseconds
    speed: str | None = None

    @property
    def out_time_seconds(self) -> float | None:
        if self.out_time_us is not None:
            return self.out_time_us / 1_000_000
        return None


_FRAME = re.compile(r"frame=\s*(\d+)")
_FPS = re.compile(r"fps=\s*([\d.]+)")
_BITRATE = re.compile(r"bitrate=\s*(\S+)")
_SPEED = re.compile(r"speed=\s*(\S+)")
_TIME = re.compile(r"time=\s*(-?)(\d+):(\d+):(\d+)(?:\.(\d+))?")


def _text_value(pattern: re.Pattern[str], line: str) -> str | None:
    match = pattern.search(line)
    if match is None or match.group(1) == "N/A":
        return None
    return match.group(1)


def parse_time_us(line: str) -> int | None:
    """Extract time=HH:MM:SS.cc from a status line as microseconds."""
    match = _TIME.search(line)
    if match is None or match.group(1):
        # Missing, or negative during the first frames of some inputs
        return None
    hours, minutes, seconds = (int(match.group(i)) for i in (2, 3, 4))
    fraction = match.group(5) or "0"
    micros = int(fraction.ljust(6, "0")[:6])
    return (hours * 3600 + minutes * 60 + seconds) * 1_000_000 + micros


def parse_stderr_progress(line: str) -> FFmpegProgress | None:
    """Parse an ffmpeg stderr status line.

    Args:
        line: A line from ffmpeg stderr.

    Returns:
        Parsed FFmpegProgress, or None if the line is not a status line.
    """
    if "frame=" not in line and "time=" not in line:
        return None

    result = FFmpegProgress()

    frame = _text_value(_FRAME, line)
    if frame is not None:
        result.frame = int(frame)
    fps = _text_value(_FPS, line)
    if fps is not None:
        try:
            result.fps = float(fps)
        except ValueError:
            pass
    result.bitrate = _text_value(_BITRATE, line)
    result.speed = _text_value(_SPEED, line)
    result.out_time_us = parse_time_us(line)

    if result.frame is None and result.out_time_us is None:
        return None
    return result
