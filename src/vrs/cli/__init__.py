"""CLI module for Video Range Server."""

import logging
import sys
from pathlib import Path

import click

from vrs.config import get_config
from vrs.config.models import VRSConfig
from vrs.core.errors import ConfigError

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options.

    Args:
        config_path: Config file to read logging settings from.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from vrs.config.logging_factory import configure_logging_from_cli

    configure_logging_from_cli(
        config_path=config_path,
        level=log_level,
        file=log_file,
        format="json" if log_json else None,
    )
    _logging_configured = True


def load_cli_config(ctx: click.Context, **overrides) -> VRSConfig:
    """Load configuration for a subcommand, exiting cleanly on errors.

    Args:
        ctx: Click context carrying the group's --config path.
        **overrides: CLI-level overrides passed to get_config.
    """
    from vrs.cli.exit_codes import ExitCode

    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        return get_config(config_path=config_path, strict=True, **overrides)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)


@click.group()
@click.version_option(package_name="video-range-server")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: ~/.vrs/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Video Range Server - stream video with byte ranges, transcode on demand."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    try:
        _configure_logging(config_path, log_level, log_file, log_json)
    except (ConfigError, ValueError) as e:
        from vrs.cli.exit_codes import ExitCode

        click.echo(f"Error: invalid logging configuration: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)


# Defer import to avoid circular dependency
def _register_commands():
    from vrs.cli.cache import cache_group
    from vrs.cli.inspect import plan_command, probe_command
    from vrs.cli.serve import serve_command
    from vrs.cli.transcode import transcode_command

    main.add_command(cache_group)
    main.add_command(plan_command)
    main.add_command(probe_command)
    main.add_command(serve_command)
    main.add_command(transcode_command)


_register_commands()
