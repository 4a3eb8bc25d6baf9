"""Server lifecycle state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


@dataclass
class ServerLifecycle:
    """Startup time and shutdown coordination for `vrs serve`."""

    shutdown_timeout: float = 10.0
    """Seconds to wait for running jobs to be reaped on shutdown."""

    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    shutdown_initiated: datetime | None = None

    @property
    def uptime_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self.start_time).total_seconds()

    @property
    def is_shutting_down(self) -> bool:
        return self.shutdown_initiated is not None

    def initiate_shutdown(self) -> None:
        """Mark shutdown as started. Idempotent."""
        if self.shutdown_initiated is None:
            self.shutdown_initiated = datetime.now(timezone.utc)
            logger.info(
                "Shutdown initiated (timeout %.1fs)", self.shutdown_timeout
            )
