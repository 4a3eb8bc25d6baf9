"""Background cache cleanup task for the server.

Runs TranscodeCache.cleanup on a fixed interval. Only one pass runs at a
time: the loop awaits each pass before scheduling the next.

Configured through:
- config.toml: cache.cleanup_interval_minutes (0 disables), cache.max_age_hours
- env var: VRS_CACHE_MAX_AGE_HOURS
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from vrs.cache.store import CleanupResult, TranscodeCache

logger = logging.getLogger(__name__)

# Delay before first cleanup after startup
STARTUP_DELAY_SECONDS = 60


class CacheCleanupTask:
    """Background task that periodically prunes old cached outputs.

    Usage:
        task = CacheCleanupTask(cache, interval_seconds=3600, max_age_hours=24)
        handle = asyncio.create_task(task.run())
        # ... later ...
        task.stop()
    """

    def __init__(
        self,
        cache: TranscodeCache,
        *,
        interval_seconds: float,
        max_age_hours: float,
        startup_delay_seconds: float = STARTUP_DELAY_SECONDS,
    ) -> None:
        self.cache = cache
        self.interval_seconds = interval_seconds
        self.max_age_hours = max_age_hours
        self.startup_delay_seconds = startup_delay_seconds
        self._stop_event = asyncio.Event()
        self._running = False
        self._last_run: datetime | None = None
        self._last_result: CleanupResult | None = None

    async def run(self) -> None:
        """Run the cleanup loop until stop() is called."""
        if self._running:
            logger.warning("Cache cleanup task already running")
            return
        self._running = True

        logger.info(
            "Cache cleanup task started (first run in %.0f seconds, interval %.0f seconds)",
            self.startup_delay_seconds,
            self.interval_seconds,
        )

        try:
            delay = self.startup_delay_seconds
            while not await self._wait_stop(delay):
                await self.run_once()
                delay = self.interval_seconds
        except asyncio.CancelledError:
            pass
        finally:
            self._running = False
            logger.info("Cache cleanup task stopped")

    async def _wait_stop(self, timeout: float) -> bool:
        """Wait up to timeout seconds; True if stop was requested."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False  # Normal case - interval elapsed

    async def run_once(self) -> CleanupResult:
        """Execute a single cleanup pass off the event loop."""
        result = await asyncio.to_thread(self.cache.cleanup, self.max_age_hours)
        self._last_run = datetime.now(timezone.utc)
        self._last_result = result
        return result

    def stop(self) -> None:
        """Signal the cleanup task to stop."""
        self._stop_event.set()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_run(self) -> datetime | None:
        return self._last_run

    @property
    def last_result(self) -> CleanupResult | None:
        return self._last_result
