"""CLI serve command.

Runs the range server and transcode API until SIGTERM or SIGINT.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path

import click

from vrs.cli import load_cli_config
from vrs.cli.exit_codes import ExitCode
from vrs.config.models import VRSConfig
from vrs.core.errors import CacheIOError
from vrs.tools.detection import is_ffmpeg_available

logger = logging.getLogger(__name__)


async def run_server(config: VRSConfig) -> int:
    """Run the HTTP server until a shutdown signal arrives.

    Args:
        config: Complete server configuration.

    Returns:
        Exit code (0 for clean shutdown, non-zero for errors).
    """
    from aiohttp import web

    from vrs.server.app import create_app
    from vrs.server.lifecycle import ServerLifecycle
    from vrs.server.signals import remove_signal_handlers, setup_signal_handlers

    bind = config.server.bind
    port = config.server.port

    lifecycle = ServerLifecycle(shutdown_timeout=config.server.shutdown_timeout)
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    setup_signal_handlers(loop, lifecycle, shutdown_event)

    try:
        app = create_app(config)
    except CacheIOError as e:
        logger.error("Cannot use cache directory: %s", e)
        remove_signal_handlers(loop)
        return ExitCode.OPERATION_FAILED
    app["lifecycle"] = lifecycle

    runner = web.AppRunner(app, shutdown_timeout=config.server.shutdown_timeout)
    await runner.setup()

    try:
        site = web.TCPSite(runner, bind, port)
        await site.start()

        logger.info("VRS started on http://%s:%d (PID %d)", bind, port, os.getpid())
        logger.info("Serving media from %s", config.streaming.media_root)
        logger.info("Press Ctrl+C or send SIGTERM to stop")

        await shutdown_event.wait()

        logger.info(
            "Shutdown initiated, waiting up to %.1fs for cleanup",
            config.server.shutdown_timeout,
        )
    except OSError as e:
        if e.errno == 98:
            logger.error("Port %d is already in use", port)
        elif e.errno == 99:
            logger.error("Cannot bind to address %s", bind)
        else:
            logger.error("Server error: %s", e)
        return ExitCode.GENERAL_ERROR
    finally:
        remove_signal_handlers(loop)
        await runner.cleanup()
        logger.info("VRS stopped")

    return ExitCode.SUCCESS


@click.command("serve")
@click.option(
    "--media-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory served under /media (default: current directory).",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Transcode cache directory (default: ~/.vrs/cache).",
)
@click.option(
    "--bind",
    type=str,
    default=None,
    help="Address to bind to (default: 127.0.0.1).",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (default: 8888).",
)
@click.pass_context
def serve_command(
    ctx: click.Context,
    media_root: Path | None,
    cache_dir: Path | None,
    bind: str | None,
    port: int | None,
) -> None:
    """Serve videos over HTTP with byte-range support.

    Configuration precedence (highest to lowest):
      1. CLI flags (--media-root, --port, ...)
      2. Environment variables (VRS_*)
      3. Config file (--config or ~/.vrs/config.toml)
      4. Default values

    \b
    Examples:
        vrs serve --media-root ~/Videos
        vrs serve --bind 0.0.0.0 --port 9000
    """
    if port is not None and not 1 <= port <= 65535:
        click.echo(f"Error: port must be 1-65535, got {port}", err=True)
        sys.exit(ExitCode.INVALID_ARGUMENTS)

    config = load_cli_config(
        ctx,
        media_root=media_root,
        cache_root=cache_dir,
        bind=bind,
        port=port,
    )

    if config.server.port < 1024:
        logger.warning("Port %d is privileged and may require root", config.server.port)

    if not is_ffmpeg_available(config.tools.ffmpeg):
        logger.warning(
            "ffmpeg not found; range serving works but transcode requests will fail"
        )

    try:
        exit_code = asyncio.run(run_server(config))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted before server started")
        sys.exit(ExitCode.INTERRUPTED)
