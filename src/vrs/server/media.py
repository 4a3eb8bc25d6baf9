"""Byte-range file handlers.

Endpoints:
    GET/HEAD /media/{path} - Range-served file under the media root
    GET/HEAD /cache/{name} - Range-served completed transcode output
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from aiohttp import hdrs, web

from vrs.config.models import StreamingConfig
from vrs.core.errors import RangeNotSatisfiableError
from vrs.server.api.errors import (
    FORBIDDEN_PATH,
    NOT_FOUND,
    RANGE_NOT_SATISFIABLE,
    RESOURCE_CONFLICT,
    api_error,
)
from vrs.server.paths import PathNotAllowed, resolve_under_root
from vrs.streaming.mime import content_type_for
from vrs.streaming.ranges import chunk_size_for, resolve_range
from vrs.streaming.reader import aiter_file_range

logger = logging.getLogger(__name__)

# Headers sent with every file response
STATIC_HEADERS = {
    "Cache-Control": "public, max-age=31536000",
    "Access-Control-Allow-Origin": "*",
    "X-Content-Type-Options": "nosniff",
}

_CACHE_NAME_RE = re.compile(r"^[0-9a-f]{32}\.mp4$")


async def stream_file(
    request: web.Request, path: Path, config: StreamingConfig
) -> web.StreamResponse:
    """Serve a file honoring the request's Range header.

    Returns 200 for the whole file, 206 for a window and 416 for a range
    that cannot be satisfied. Bytes are read one chunk at a time so memory
    stays bounded on multi-gigabyte files.
    """
    try:
        stat = await asyncio.to_thread(path.stat)
    except FileNotFoundError:
        return api_error("File not found", code=NOT_FOUND, status=404)
    file_size = stat.st_size

    range_header = request.headers.get(hdrs.RANGE)
    try:
        window = resolve_range(
            range_header,
            file_size,
            config.chunk_tiers,
            config.default_chunk_size,
        )
    except RangeNotSatisfiableError as e:
        logger.debug("Rejected range for %s: %s", path.name, e)
        return api_error(
            str(e),
            code=RANGE_NOT_SATISFIABLE,
            status=416,
            headers={"Content-Range": e.content_range, **STATIC_HEADERS},
        )

    headers = {
        **STATIC_HEADERS,
        "Content-Type": content_type_for(path),
        **window.headers(),
    }
    response = web.StreamResponse(status=window.status, headers=headers)
    await response.prepare(request)

    if request.method != hdrs.METH_HEAD and window.length > 0:
        chunk_size = chunk_size_for(
            file_size, config.chunk_tiers, config.default_chunk_size
        )
        try:
            async for data in aiter_file_range(
                path, window.start, window.end, chunk_size
            ):
                await response.write(data)
        except ConnectionResetError:
            # Players routinely abort a range to seek elsewhere
            logger.debug("Client disconnected while streaming %s", path.name)
            return response

    await response.write_eof()
    return response


async def media_handler(request: web.Request) -> web.StreamResponse:
    """Handle GET/HEAD /media/{path} - stream a file from the media root."""
    config: StreamingConfig = request.app["config"].streaming
    relative = request.match_info["path"]

    try:
        path = resolve_under_root(config.media_root, relative)
    except PathNotAllowed:
        logger.warning("Refused path outside media root: %s", relative)
        return api_error("Access denied", code=FORBIDDEN_PATH, status=403)

    if not await asyncio.to_thread(path.is_file):
        return api_error("File not found", code=NOT_FOUND, status=404)

    return await stream_file(request, path, config)


async def cache_handler(request: web.Request) -> web.StreamResponse:
    """Handle GET/HEAD /cache/{name} - stream a finished transcode output.

    Outputs still being written by a running job are not served.
    """
    name = request.match_info["name"]
    if not _CACHE_NAME_RE.match(name):
        return api_error("Cache entry not found", code=NOT_FOUND, status=404)

    cache = request.app["cache"]
    path = cache.root / name

    manager = request.app["job_manager"]
    job = manager.find_by_output(path)
    if job is not None:
        return api_error(
            "Transcode still in progress",
            code=RESOURCE_CONFLICT,
            status=409,
            details={"job_id": job.id},
        )

    if not await asyncio.to_thread(path.is_file):
        return api_error("Cache entry not found", code=NOT_FOUND, status=404)

    return await stream_file(request, path, request.app["config"].streaming)


def setup_media_routes(app: web.Application) -> None:
    """Register file streaming routes. HEAD is registered alongside GET."""
    app.router.add_get("/media/{path:.+}", media_handler)
    app.router.add_get("/cache/{name}", cache_handler)
