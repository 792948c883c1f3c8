"""Single-slot run coordinator.

At most one pipeline run is in flight process-wide. A second trigger while a run
is active is rejected immediately, never queued.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional


class RunAlreadyActiveError(RuntimeError):
    """A run was requested while another run holds the slot."""

    def __init__(self, active_since: Optional[datetime] = None):
        self.active_since = active_since
        super().__init__("Update already running")


class RunCoordinator:
    def __init__(self):
        self._lock = asyncio.Lock()
        self._active_since: Optional[datetime] = None
        self._runs = 0
        self.logger = logging.getLogger("run_coordinator")

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    @property
    def active_since(self) -> Optional[datetime]:
        return self._active_since

    @property
    def completed_runs(self) -> int:
        return self._runs

    @asynccontextmanager
    async def slot(self, trigger: str = "manual") -> AsyncIterator[None]:
        """Hold the run slot for the duration of the block.

        Raises RunAlreadyActiveError without waiting when the slot is taken.
        """
        # locked() and acquire() run without a suspension point in between,
        # so no other task can take the slot between the check and the acquire
        if self._lock.locked():
            self.logger.warning(f"Run rejected ({trigger}): already running since {self._active_since}")
            raise RunAlreadyActiveError(self._active_since)
        async with self._lock:
            self._active_since = datetime.now(timezone.utc)
            self.logger.debug(f"Run slot acquired ({trigger})")
            try:
                yield
            finally:
                self._active_since = None
                self._runs += 1
                self.logger.debug(f"Run slot released ({trigger})")
