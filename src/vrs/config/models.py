"""Configuration data models.

This module defines dataclasses for VRS configuration options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vrs.core.codecs import (
    DEFAULT_AUDIO_BITRATE,
    DEFAULT_VIDEO_CRF,
    DEFAULT_VIDEO_PRESET,
    X264_PRESETS,
)

MIB = 1024 * 1024
GIB = 1024 * MIB

DEFAULT_CACHE_ROOT = Path.home() / ".vrs" / "cache"


@dataclass(frozen=True)
class ChunkTier:
    """Read/default-window size applied to files larger than a threshold."""

    min_file_size: int
    """Tier applies when the file is strictly larger than this many bytes."""

    chunk_size: int
    """Chunk size in bytes."""


DEFAULT_CHUNK_TIERS: tuple[ChunkTier, ...] = (
    ChunkTier(min_file_size=5 * GIB, chunk_size=5 * MIB),
    ChunkTier(min_file_size=2 * GIB, chunk_size=3 * MIB),
    ChunkTier(min_file_size=500 * MIB, chunk_size=2 * MIB),
)


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class CacheConfig:
    """Configuration for the transcode output cache."""

    root: Path = field(default_factory=lambda: DEFAULT_CACHE_ROOT)
    """Directory holding cached outputs (created if absent)."""

    max_age_hours: float = 24
    """Entries older than this are removed by cleanup."""

    cleanup_interval_minutes: float = 60
    """How often the server runs cleanup. 0 disables the periodic task."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_age_hours < 0:
            raise ValueError(
                f"max_age_hours must be non-negative, got {self.max_age_hours}"
            )
        if self.cleanup_interval_minutes < 0:
            raise ValueError(
                "cleanup_interval_minutes must be non-negative, "
                f"got {self.cleanup_interval_minutes}"
            )


@dataclass
class StreamingConfig:
    """Configuration for byte-range file serving."""

    media_root: Path = field(default_factory=Path.cwd)
    """Directory served under /media. Treated as read-only."""

    default_chunk_size: int = MIB
    """Chunk size for files below every tier threshold."""

    chunk_tiers: tuple[ChunkTier, ...] = DEFAULT_CHUNK_TIERS
    """Size tiers, checked largest threshold first."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.default_chunk_size <= 0:
            raise ValueError(
                f"default_chunk_size must be positive, got {self.default_chunk_size}"
            )
        for tier in self.chunk_tiers:
            if tier.chunk_size <= 0:
                raise ValueError(f"chunk_size must be positive, got {tier}")


@dataclass
class TranscodeDefaults:
    """Default encode parameters, overridable per call."""

    preset: str = DEFAULT_VIDEO_PRESET
    crf: int = DEFAULT_VIDEO_CRF
    audio_bitrate: str = DEFAULT_AUDIO_BITRATE
    allow_hevc_copy: bool = False

    probe_timeout: float = 60
    """Seconds before an ffprobe invocation is abandoned."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.preset not in X264_PRESETS:
            raise ValueError(f"preset must be one of {X264_PRESETS}, got {self.preset}")
        if not 0 <= self.crf <= 51:
            raise ValueError(f"crf must be 0-51, got {self.crf}")
        if self.probe_timeout <= 0:
            raise ValueError(
                f"probe_timeout must be positive, got {self.probe_timeout}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class ServerConfig:
    """Configuration for `vrs serve`."""

    bind: str = "127.0.0.1"
    """Network address to bind to. Default localhost."""

    port: int = 8888
    """Port number for HTTP server."""

    shutdown_timeout: float = 10.0
    """Seconds to wait for graceful shutdown before forcing exit."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")
        if self.shutdown_timeout <= 0:
            raise ValueError(
                f"shutdown_timeout must be positive, got {self.shutdown_timeout}"
            )


@dataclass
class VRSConfig:
    """Main configuration container for VRS.

    Aggregates all configuration sections.
    """

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    streaming: StreamingConfig = field(default_factory=StreamingConfig)
    transcode: TranscodeDefaults = field(default_factory=TranscodeDefaults)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def get_tool_path(self, tool_name: str) -> Path | None:
        """Get configured path for a tool, or None if not configured."""
        return getattr(self.tools, tool_name.lower(), None)
