"""Standardized API error response helper.

All error responses share one JSON shape:
- ``error``: Human-readable error message
- ``code``: Machine-readable error code string
- ``details`` (optional): Additional context for the error

Usage:
    from vrs.server.api.errors import NOT_FOUND, api_error

    return api_error("Job not found", code=NOT_FOUND, status=404)
"""

from __future__ import annotations

from typing import Any

from aiohttp import web

# --- Error code constants ---

INVALID_JSON = "INVALID_JSON"
VALIDATION_FAILED = "VALIDATION_FAILED"
FORBIDDEN_PATH = "FORBIDDEN_PATH"
NOT_FOUND = "NOT_FOUND"
RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
RANGE_NOT_SATISFIABLE = "RANGE_NOT_SATISFIABLE"
SPAWN_FAILED = "SPAWN_FAILED"
SHUTTING_DOWN = "SHUTTING_DOWN"


def api_error(
    message: str,
    *,
    code: str,
    status: int = 400,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> web.Response:
    """Create a standardized JSON error response.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (use constants from this module).
        status: HTTP status code (default 400).
        details: Optional additional context (string, list, or dict).
        headers: Optional extra response headers.

    Returns:
        aiohttp JSON response with ``{"error": ..., "code": ...}`` body.
    """
    body: dict[str, Any] = {"error": message, "code": code}
    if details is not None:
        body["details"] = details
    return web.json_response(body, status=status, headers=headers)
