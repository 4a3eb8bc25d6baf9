"""API handlers for cache endpoints.

Endpoints:
    POST /api/cache/cleanup - Delete cached outputs older than a threshold
"""

from __future__ import annotations

import asyncio
import json

from aiohttp import web
from pydantic import ValidationError

from vrs.cache.store import TranscodeCache
from vrs.server.api.errors import INVALID_JSON, VALIDATION_FAILED, api_error
from vrs.server.api.jobs import validation_details
from vrs.server.api.models import CacheCleanupRequest


async def api_cache_cleanup_handler(request: web.Request) -> web.Response:
    """Handle POST /api/cache/cleanup.

    Body (optional): ``{"max_age_hours": <float>}``; defaults to the
    configured cache.max_age_hours.
    """
    body = {}
    if request.can_read_body:
        try:
            body = await request.json()
        except json.JSONDecodeError:
            return api_error("Request body must be JSON", code=INVALID_JSON)

    try:
        cleanup_request = CacheCleanupRequest.model_validate(body or {})
    except ValidationError as e:
        return api_error(
            "Invalid cleanup request",
            code=VALIDATION_FAILED,
            details=validation_details(e),
        )

    max_age_hours = cleanup_request.max_age_hours
    if max_age_hours is None:
        max_age_hours = request.app["config"].cache.max_age_hours

    cache: TranscodeCache = request.app["cache"]
    result = await asyncio.to_thread(cache.cleanup, max_age_hours)
    return web.json_response({"max_age_hours": max_age_hours, **result.to_dict()})


def setup_cache_routes(app: web.Application) -> None:
    app.router.add_post("/api/cache/cleanup", api_cache_cleanup_handler)
