"""API handlers for transcode job endpoints.

Endpoints:
    GET /api/jobs - List running jobs
    POST /api/jobs - Start a job for a file under the media root
    GET /api/jobs/{job_id} - Get a running job
    DELETE /api/jobs/{job_id} - Cancel a running job
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from aiohttp import web
from pydantic import ValidationError

from vrs.cache.store import TranscodeCache
from vrs.core.errors import SpawnError
from vrs.jobs.manager import TranscodeJobManager
from vrs.jobs.models import Job
from vrs.server.api.errors import (
    FORBIDDEN_PATH,
    INVALID_JSON,
    NOT_FOUND,
    RESOURCE_CONFLICT,
    SHUTTING_DOWN,
    SPAWN_FAILED,
    VALIDATION_FAILED,
    api_error,
)
from vrs.server.api.models import TranscodeRequest
from vrs.server.paths import PathNotAllowed, resolve_under_root
from vrs.transcode.presets import BALANCED, HIGH_QUALITY, QUICK_STREAM
from vrs.transcode.types import TranscodeOptions

logger = logging.getLogger(__name__)

_MODE_PRESETS = {
    "smart": BALANCED,
    "quick": QUICK_STREAM,
    "high-quality": HIGH_QUALITY,
}


def validation_details(error: ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into JSON-safe field/message pairs."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
        }
        for err in error.errors()
    ]


def cache_url(output_path: Path) -> str:
    return f"/cache/{output_path.name}"


def job_payload(job: Job) -> dict[str, Any]:
    payload = job.snapshot().to_dict()
    payload["status"] = job.status.value
    payload["reason"] = job.plan.reason
    payload["url"] = cache_url(job.output_path)
    return payload


def start_job(
    manager: TranscodeJobManager,
    mode: str,
    source: Path,
    output: Path,
    options: TranscodeOptions,
) -> Job:
    """Dispatch a request mode to the matching manager entry point.

    Blocking: planning probes the file.
    """
    if mode == "remux":
        return manager.fast_remux(source, output)
    if mode == "transcode":
        return manager.transcode(source, output, options)
    return manager.transcode_with_preset(source, output, _MODE_PRESETS[mode], options)


async def api_jobs_handler(request: web.Request) -> web.Response:
    """Handle GET /api/jobs - list running jobs."""
    manager: TranscodeJobManager = request.app["job_manager"]
    jobs = [info.to_dict() for info in manager.list_active()]
    return web.json_response({"jobs": jobs, "total": len(jobs)})


async def api_job_detail_handler(request: web.Request) -> web.Response:
    """Handle GET /api/jobs/{job_id} - a running job."""
    manager: TranscodeJobManager = request.app["job_manager"]
    job = manager.get(request.match_info["job_id"])
    if job is None:
        return api_error("Job not found", code=NOT_FOUND, status=404)
    return web.json_response(job_payload(job))


async def api_create_job_handler(request: web.Request) -> web.Response:
    """Handle POST /api/jobs - start a transcode.

    Body: TranscodeRequest as JSON.

    Returns:
        200 with the cache URL when a finished output already exists,
        202 with the new job otherwise. 409 when a job is already writing
        the same output.
    """
    lifecycle = request.app.get("lifecycle")
    if lifecycle is not None and lifecycle.is_shutting_down:
        return api_error("Server is shutting down", code=SHUTTING_DOWN, status=503)

    try:
        body = await request.json()
    except json.JSONDecodeError:
        return api_error("Request body must be JSON", code=INVALID_JSON)

    try:
        transcode_request = TranscodeRequest.model_validate(body)
    except ValidationError as e:
        return api_error(
            "Invalid transcode request",
            code=VALIDATION_FAILED,
            details=validation_details(e),
        )

    media_root = request.app["config"].streaming.media_root
    try:
        source = resolve_under_root(media_root, transcode_request.path)
    except PathNotAllowed:
        logger.warning("Refused path outside media root: %s", transcode_request.path)
        return api_error("Access denied", code=FORBIDDEN_PATH, status=403)
    if not await asyncio.to_thread(source.is_file):
        return api_error("File not found", code=NOT_FOUND, status=404)

    cache: TranscodeCache = request.app["cache"]
    manager: TranscodeJobManager = request.app["job_manager"]
    output = cache.resolve(source)

    running = manager.find_by_output(output)
    if running is not None:
        return api_error(
            "A job is already writing this output",
            code=RESOURCE_CONFLICT,
            status=409,
            details={"job_id": running.id},
        )

    if not transcode_request.refresh and await asyncio.to_thread(cache.has, source):
        return web.json_response({"status": "cached", "url": cache_url(output)})

    try:
        job = await asyncio.to_thread(
            start_job,
            manager,
            transcode_request.mode,
            source,
            output,
            transcode_request.to_options(),
        )
    except SpawnError as e:
        logger.error("Could not start transcode for %s: %s", source, e)
        return api_error(str(e), code=SPAWN_FAILED, status=500)

    return web.json_response(job_payload(job), status=202)


async def api_cancel_job_handler(request: web.Request) -> web.Response:
    """Handle DELETE /api/jobs/{job_id} - cancel a running job."""
    manager: TranscodeJobManager = request.app["job_manager"]
    job_id = request.match_info["job_id"]
    cancelled = await asyncio.to_thread(manager.cancel, job_id)
    if not cancelled:
        return api_error("Job not found", code=NOT_FOUND, status=404)
    return web.json_response({"id": job_id, "cancelled": True})


def setup_job_routes(app: web.Application) -> None:
    """Register job API routes with the application."""
    app.router.add_get("/api/jobs", api_jobs_handler)
    app.router.add_post("/api/jobs", api_create_job_handler)
    app.router.add_get("/api/jobs/{job_id}", api_job_detail_handler)
    app.router.add_delete("/api/jobs/{job_id}", api_cancel_job_handler)
