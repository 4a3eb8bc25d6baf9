"""JSON API routes for the VRS server.

- jobs.py: Start, list, inspect and cancel transcode jobs
- cache.py: Cache maintenance
"""

from aiohttp import web

from vrs.server.api.cache import setup_cache_routes
from vrs.server.api.jobs import setup_job_routes

__all__ = [
    "setup_api_routes",
]


def setup_api_routes(app: web.Application) -> None:
    """Register all API routes with the application."""
    setup_job_routes(app)
    setup_cache_routes(app)
