"""Codec knowledge used by copy-capability classification.

Single source of truth for which codecs, profiles and levels can be placed
into an MP4 container without re-encoding and still play in browsers.
"""

from __future__ import annotations

# =============================================================================
# Codec Alias Groups
# =============================================================================

VIDEO_CODEC_ALIASES: dict[str, frozenset[str]] = {
    "h264": frozenset({"h264", "h.264", "avc", "avc1", "x264"}),
    "hevc": frozenset({"hevc", "h265", "h.265", "x265", "hvc1", "hev1"}),
}

AUDIO_CODEC_ALIASES: dict[str, frozenset[str]] = {
    "aac": frozenset({"aac", "aac_latm", "mp4a"}),
    "mp3": frozenset({"mp3", "mp3float"}),
}

# =============================================================================
# Browser-safe stream copy rules
# =============================================================================

# H.264 profiles that every mainstream browser decodes
COPYABLE_H264_PROFILES: frozenset[str] = frozenset({"baseline", "main", "high"})

# Highest H.264 level that is copied as-is
MAX_COPYABLE_H264_LEVEL = 4.1

# ffprobe level_idc for level 1b, the only scaled value below 10
H264_LEVEL_1B_IDC = 9

# Audio codecs that are copied into MP4 untouched
COPYABLE_AUDIO_CODECS: frozenset[str] = frozenset({"aac", "mp3"})

# =============================================================================
# Transcode defaults
# =============================================================================

DEFAULT_VIDEO_ENCODER = "libx264"
DEFAULT_VIDEO_PRESET = "fast"
DEFAULT_VIDEO_CRF = 23
DEFAULT_VIDEO_PROFILE = "high"
DEFAULT_VIDEO_LEVEL = "4.1"
DEFAULT_PIXEL_FORMAT = "yuv420p"
DEFAULT_AUDIO_ENCODER = "aac"
DEFAULT_AUDIO_BITRATE = "128k"

X264_PRESETS: tuple[str, ...] = (
    "ultrafast",
    "superfast",
    "veryfast",
    "faster",
    "fast",
    "medium",
    "slow",
    "slower",
    "veryslow",
)

# Container extensions browsers cannot play directly
NEEDS_TRANSCODE_EXTENSIONS: frozenset[str] = frozenset(
    {".mkv", ".avi", ".flv", ".wmv", ".m2ts", ".ts"}
)


def normalize_codec(codec: str | None) -> str:
    """Normalize codec name for comparison."""
    if not codec:
        return ""
    return codec.casefold().strip()


def _matches(codec: str | None, canonical: str, aliases: dict) -> bool:
    normalized = normalize_codec(codec)
    if not normalized:
        return False
    group = aliases.get(canonical)
    if group is None:
        return normalized == canonical
    return normalized in group


def is_h264(codec: str | None) -> bool:
    """True if the codec name denotes H.264/AVC."""
    return _matches(codec, "h264", VIDEO_CODEC_ALIASES)


def is_hevc(codec: str | None) -> bool:
    """True if the codec name denotes HEVC/H.265."""
    return _matches(codec, "hevc", VIDEO_CODEC_ALIASES)


def is_copyable_audio_codec(codec: str | None) -> bool:
    """True if the audio codec can be stream-copied into MP4."""
    return any(
        _matches(codec, canonical, AUDIO_CODEC_ALIASES)
        for canonical in COPYABLE_AUDIO_CODECS
    )


def parse_level(value: object) -> float:
    """Parse an H.264 level best-effort.

    ffprobe reports levels as integers scaled by ten (41 means 4.1, and 9
    means level 1b), while humans write "4.1". Both forms are accepted.
    Unparseable values yield 0.

    Args:
        value: Level as reported by ffprobe or supplied by a caller.

    Returns:
        Level as a float such as 4.1, or 0.0 when unknown.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        level = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if level != level or level < 0:  # NaN or negative
        return 0.0
    if level == H264_LEVEL_1B_IDC:
        return 1.0
    if level >= 10:
        level = level / 10
    return level
