"""Configuration management for Video Range Server.

Precedence (highest first): CLI flags, VRS_* environment variables,
~/.vrs/config.toml, defaults.
"""

from vrs.config.env import EnvReader
from vrs.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from vrs.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
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

__all__ = [
    # Models
    "CacheConfig",
    "ChunkTier",
    "LoggingConfig",
    "ServerConfig",
    "StreamingConfig",
    "ToolPathsConfig",
    "TranscodeDefaults",
    "VRSConfig",
    # Loader
    "EnvReader",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Logging
    "build_logging_config",
    "configure_logging_from_cli",
]
