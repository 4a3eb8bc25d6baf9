"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (VRS_*)
3. Config file (~/.vrs/config.toml)
4. Default values

Environment variables:
- VRS_CONFIG_PATH: Path to config file (overrides default location)
- VRS_DATA_DIR: Path to VRS data directory (overrides ~/.vrs/)
- VRS_FFMPEG_PATH / VRS_FFPROBE_PATH: Tool executables
- VRS_MEDIA_ROOT: Directory served under /media
- VRS_CACHE_DIR: Transcode cache directory
- VRS_CACHE_MAX_AGE_HOURS: Cache entry lifetime
- VRS_SERVER_BIND / VRS_SERVER_PORT: Listen address
- VRS_LOG_LEVEL / VRS_LOG_FILE / VRS_LOG_FORMAT: Logging overrides
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any

from vrs.config.env import EnvReader
from vrs.config.models import (
    CacheConfig,
    ChunkTier,
    LoggingConfig,
    ServerConfig,
    StreamingConfig,
    ToolPathsConfig,
    TranscodeDefaults,
    VRSConfig,
)
from vrs.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".vrs"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Section name -> dataclass, in VRSConfig field order
_SECTIONS: dict[str, type] = {
    "tools": ToolPathsConfig,
    "cache": CacheConfig,
    "streaming": StreamingConfig,
    "transcode": TranscodeDefaults,
    "logging": LoggingConfig,
    "server": ServerConfig,
}

# Fields holding filesystem paths (converted and tilde-expanded)
_PATH_FIELDS: frozenset[tuple[str, str]] = frozenset(
    {
        ("tools", "ffmpeg"),
        ("tools", "ffprobe"),
        ("cache", "root"),
        ("streaming", "media_root"),
        ("logging", "file"),
    }
)

# (section, field) -> (env var, EnvReader getter name)
_ENV_VARS: dict[tuple[str, str], tuple[str, str]] = {
    ("tools", "ffmpeg"): ("VRS_FFMPEG_PATH", "get_path"),
    ("tools", "ffprobe"): ("VRS_FFPROBE_PATH", "get_path"),
    ("cache", "root"): ("VRS_CACHE_DIR", "get_path"),
    ("cache", "max_age_hours"): ("VRS_CACHE_MAX_AGE_HOURS", "get_float"),
    ("streaming", "media_root"): ("VRS_MEDIA_ROOT", "get_path"),
    ("transcode", "preset"): ("VRS_TRANSCODE_PRESET", "get_str"),
    ("transcode", "crf"): ("VRS_TRANSCODE_CRF", "get_int"),
    ("transcode", "audio_bitrate"): ("VRS_TRANSCODE_AUDIO_BITRATE", "get_str"),
    ("transcode", "allow_hevc_copy"): ("VRS_ALLOW_HEVC_COPY", "get_bool"),
    ("logging", "level"): ("VRS_LOG_LEVEL", "get_str"),
    ("logging", "file"): ("VRS_LOG_FILE", "get_path"),
    ("logging", "format"): ("VRS_LOG_FORMAT", "get_str"),
    ("server", "bind"): ("VRS_SERVER_BIND", "get_str"),
    ("server", "port"): ("VRS_SERVER_PORT", "get_int"),
}


def get_data_dir() -> Path:
    """Get the VRS data directory (~/.vrs/ unless VRS_DATA_DIR is set)."""
    env_path = os.environ.get("VRS_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_DIR


def get_default_config_path() -> Path:
    """Get the config file path, honouring VRS_CONFIG_PATH and VRS_DATA_DIR."""
    env_path = os.environ.get("VRS_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / "config.toml"


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses the default location.
        strict: If True, raise ConfigError on parse failures. If False,
            log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, OSError) as e:
        if strict:
            raise ConfigError(f"Cannot parse config file {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def _convert(section: str, name: str, value: Any) -> Any:
    if value is None:
        return None
    if (section, name) in _PATH_FIELDS:
        return Path(str(value)).expanduser()
    if section == "streaming" and name == "chunk_tiers":
        return tuple(
            ChunkTier(
                min_file_size=int(tier["min_file_size"]),
                chunk_size=int(tier["chunk_size"]),
            )
            for tier in value
        )
    return value


def _file_values(file_config: dict) -> dict[str, dict[str, Any]]:
    """Extract known section fields from a parsed config file."""
    values: dict[str, dict[str, Any]] = {}
    for section, model in _SECTIONS.items():
        raw = file_config.get(section) or {}
        known = {f.name for f in fields(model)}
        unknown = set(raw) - known
        if unknown:
            logger.warning(
                "Unknown keys in [%s] config section: %s",
                section,
                ", ".join(sorted(unknown)),
            )
        values[section] = {
            name: _convert(section, name, raw[name]) for name in known if name in raw
        }
    return values


def _env_values(reader: EnvReader) -> dict[str, dict[str, Any]]:
    """Extract configuration values from VRS_* environment variables."""
    values: dict[str, dict[str, Any]] = {section: {} for section in _SECTIONS}
    for (section, name), (var, getter) in _ENV_VARS.items():
        value = getattr(reader, getter)(var)
        if value is not None:
            values[section][name] = value
    return values


def get_config(
    config_path: Path | None = None,
    env_reader: EnvReader | None = None,
    *,
    media_root: Path | None = None,
    cache_root: Path | None = None,
    bind: str | None = None,
    port: int | None = None,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    strict: bool = False,
) -> VRSConfig:
    """Get VRS configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides VRS_CONFIG_PATH).
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        media_root: CLI override for the served media directory.
        cache_root: CLI override for the cache directory.
        bind: CLI override for the server bind address.
        port: CLI override for the server port.
        ffmpeg_path: CLI override for ffmpeg.
        ffprobe_path: CLI override for ffprobe.
        strict: If True, raise ConfigError on config file parse failures.

    Returns:
        VRSConfig with merged configuration.

    Raises:
        ConfigError: If a merged value fails validation, or when strict=True
            and the config file cannot be parsed.
    """
    reader = env_reader or EnvReader()
    file_layer = _file_values(load_config_file(config_path, strict=strict))
    env_layer = _env_values(reader)
    cli_layer: dict[str, dict[str, Any]] = {
        "tools": {"ffmpeg": ffmpeg_path, "ffprobe": ffprobe_path},
        "cache": {"root": cache_root},
        "streaming": {"media_root": media_root},
        "server": {"bind": bind, "port": port},
    }

    sections: dict[str, Any] = {}
    for section, model in _SECTIONS.items():
        merged: dict[str, Any] = {}
        for layer in (file_layer, env_layer, cli_layer):
            merged.update(
                {k: v for k, v in layer.get(section, {}).items() if v is not None}
            )
        try:
            sections[section] = model(**merged)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid [{section}] configuration: {e}") from e

    return VRSConfig(**sections)
