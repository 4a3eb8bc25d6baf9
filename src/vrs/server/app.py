"""HTTP application for `vrs serve`.

Wires the range server, the job manager and the cache into one aiohttp
Application, plus the health endpoint and background cache cleanup.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass

from aiohttp import web

from vrs import __version__
from vrs.cache.store import TranscodeCache
from vrs.config.models import VRSConfig
from vrs.introspector.ffprobe import FFprobeInspector
from vrs.jobs.manager import TranscodeJobManager
from vrs.server.api import setup_api_routes
from vrs.server.cache_cleanup import CacheCleanupTask
from vrs.server.lifecycle import ServerLifecycle
from vrs.server.media import setup_media_routes
from vrs.transcode.planner import TranscodePlanner

logger = logging.getLogger(__name__)


@dataclass
class HealthStatus:
    """Health check response payload."""

    status: str
    """Overall status: 'healthy' or 'unhealthy'."""

    uptime_seconds: float
    version: str
    shutting_down: bool = False

    active_jobs: int = 0
    """Number of running transcode jobs."""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


def build_job_manager(config: VRSConfig) -> TranscodeJobManager:
    """Construct the production inspector, planner and manager from config."""
    inspector = FFprobeInspector(
        config.tools.ffprobe, timeout=config.transcode.probe_timeout
    )
    planner = TranscodePlanner(inspector, config.transcode)
    return TranscodeJobManager(planner, config.tools.ffmpeg)


def create_app(
    config: VRSConfig,
    *,
    job_manager: TranscodeJobManager | None = None,
    cache: TranscodeCache | None = None,
) -> web.Application:
    """Create and configure the aiohttp Application.

    Args:
        config: Complete server configuration.
        job_manager: Optional pre-built manager; built from config otherwise.
        cache: Optional pre-built cache; built from config otherwise.

    Returns:
        Configured aiohttp Application instance.
    """
    app = web.Application()

    # Store runtime state in app dict
    app["config"] = config
    app["cache"] = cache if cache is not None else TranscodeCache(config.cache.root)
    app["job_manager"] = (
        job_manager if job_manager is not None else build_job_manager(config)
    )
    app["lifecycle"] = None  # Will be set by serve command
    app["cleanup_task"] = None
    app["cleanup_task_handle"] = None

    app.router.add_get("/health", health_handler)
    setup_media_routes(app)
    setup_api_routes(app)

    app.on_startup.append(_start_cleanup_task)
    app.on_shutdown.append(_cancel_running_jobs)
    app.on_cleanup.append(_stop_cleanup_task)

    logger.debug(
        "Application created (media_root=%s, cache_root=%s)",
        config.streaming.media_root,
        app["cache"].root,
    )
    return app


async def _start_cleanup_task(app: web.Application) -> None:
    """Start periodic cache cleanup unless disabled by config."""
    cache_config = app["config"].cache
    if cache_config.cleanup_interval_minutes <= 0:
        logger.debug("Periodic cache cleanup disabled")
        return

    task = CacheCleanupTask(
        app["cache"],
        interval_seconds=cache_config.cleanup_interval_minutes * 60,
        max_age_hours=cache_config.max_age_hours,
    )
    app["cleanup_task"] = task
    app["cleanup_task_handle"] = asyncio.create_task(task.run())


async def _stop_cleanup_task(app: web.Application) -> None:
    """Stop the background cache cleanup task."""
    task: CacheCleanupTask | None = app.get("cleanup_task")
    handle: asyncio.Task[None] | None = app.get("cleanup_task_handle")

    if task is not None:
        task.stop()

    if handle is not None and not handle.done():
        try:
            await asyncio.wait_for(handle, timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning("Cache cleanup task did not stop in time, cancelling")
            handle.cancel()
            try:
                await handle
            except asyncio.CancelledError:
                pass


async def _cancel_running_jobs(app: web.Application) -> None:
    """Terminate every running ffmpeg before the process exits."""
    manager: TranscodeJobManager = app["job_manager"]
    cancelled = await asyncio.to_thread(manager.shutdown)
    if cancelled:
        logger.info("Cancelled %d running job(s)", cancelled)


async def health_handler(request: web.Request) -> web.Response:
    """Handle GET /health requests.

    Returns 200 while serving and 503 once shutdown has begun.
    """
    lifecycle: ServerLifecycle | None = request.app.get("lifecycle")
    manager: TranscodeJobManager = request.app["job_manager"]

    shutting_down = lifecycle.is_shutting_down if lifecycle else False
    uptime = lifecycle.uptime_seconds if lifecycle else 0.0

    health = HealthStatus(
        status="unhealthy" if shutting_down else "healthy",
        uptime_seconds=round(uptime, 1),
        version=__version__,
        shutting_down=shutting_down,
        active_jobs=manager.active_count(),
    )
    return web.json_response(health.to_dict(), status=503 if shutting_down else 200)
