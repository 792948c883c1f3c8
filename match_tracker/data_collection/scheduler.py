"""
Tracker Scheduler
Löst den Update-Lauf nach einem festen Wochenkalender aus.

Default calendar (local time of the configured timezone):
  - Saturday 14:00-23:30, every 30 minutes
  - Sunday 11:00-23:30, every 30 minutes
  - Monday to Friday 10:00
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from .run_coordinator import RunAlreadyActiveError

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)


@dataclass(frozen=True)
class ScheduleWindow:
    """Fire times on the given weekdays: every listed minute of hours start..end (inclusive)."""

    name: str
    weekdays: tuple[int, ...]
    start_hour: int
    end_hour: int
    minutes: tuple[int, ...] = (0,)

    def times_on(self, day: datetime) -> list[datetime]:
        if day.weekday() not in self.weekdays:
            return []
        base = day.replace(hour=0, minute=0, second=0, microsecond=0)
        return [
            base.replace(hour=hour, minute=minute)
            for hour in range(self.start_hour, self.end_hour + 1)
            for minute in sorted(self.minutes)
        ]


DEFAULT_WINDOWS: tuple[ScheduleWindow, ...] = (
    ScheduleWindow("saturday", (SATURDAY,), 14, 23, (0, 30)),
    ScheduleWindow("sunday", (SUNDAY,), 11, 23, (0, 30)),
    ScheduleWindow("weekdays", (MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY), 10, 10, (0,)),
)


def next_fire_time(
    after: datetime,
    windows: tuple[ScheduleWindow, ...] = DEFAULT_WINDOWS,
    tz: str = "Europe/Madrid",
) -> datetime:
    """Erster Auslösezeitpunkt strikt nach `after` (zeitzonenbewusst in `tz`)."""
    zone = ZoneInfo(tz)
    if after.tzinfo is None:
        after = after.replace(tzinfo=timezone.utc)
    local = after.astimezone(zone)
    # A weekly calendar always fires within 8 days
    for offset in range(8):
        day = (local + timedelta(days=offset)).replace(tzinfo=zone)
        candidates = sorted(t for window in windows for t in window.times_on(day))
        for candidate in candidates:
            if candidate > local:
                return candidate
    raise ValueError("Schedule has no fire times")


class TrackerScheduler:
    """Scheduler für regelmäßige Update-Läufe"""

    def __init__(
        self,
        trigger: Callable[[], Awaitable[Any]],
        *,
        tz: str = "Europe/Madrid",
        windows: tuple[ScheduleWindow, ...] = DEFAULT_WINDOWS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.trigger = trigger
        self.tz = tz
        self.windows = windows
        self._clock = clock
        self.logger = logging.getLogger("tracker_scheduler")
        self.stop_event = asyncio.Event()
        self.task: Optional[asyncio.Task] = None
        self.next_run: Optional[datetime] = None
        self.triggered_runs = 0

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self) -> asyncio.Task:
        """Startet die Scheduler-Schleife als Task"""
        if self.running:
            return self.task
        self.stop_event.clear()
        self.task = asyncio.create_task(self.run_forever(), name="tracker-scheduler")
        self.logger.info(f"Scheduler started ({self.tz}): {', '.join(w.name for w in self.windows)}")
        return self.task

    async def run_forever(self):
        while not self.stop_event.is_set():
            self.next_run = next_fire_time(self._clock(), self.windows, self.tz)
            self.logger.info(f"Next scheduled update at {self.next_run.isoformat()}")
            if await self._wait_until(self.next_run):
                break
            await self._fire()

    async def _wait_until(self, when: datetime) -> bool:
        """Wartet bis `when`; True wenn währenddessen gestoppt wurde"""
        wait_seconds = max(0.0, (when - self._clock()).total_seconds())
        try:
            await asyncio.wait_for(self.stop_event.wait(), timeout=wait_seconds)
            return True
        except asyncio.TimeoutError:
            return False

    async def _fire(self):
        self.triggered_runs += 1
        try:
            self.logger.info("Scheduled update starting")
            result = await self.trigger()
            self.logger.info(f"Scheduled update finished: {result}")
        except RunAlreadyActiveError:
            self.logger.info("Scheduled update skipped: a run is already active")
        except Exception as e:
            self.logger.error(f"Scheduled update failed: {e}")

    def stop(self):
        """Stoppt den Scheduler"""
        self.stop_event.set()
        if self.task and not self.task.done():
            self.task.cancel()
        self.logger.info("Tracker scheduler stopped")

    def info(self) -> dict[str, Any]:
        return {
            "active": self.running,
            "timezone": self.tz,
            "next_run": self.next_run.isoformat() if self.next_run else None,
            "triggered_runs": self.triggered_runs,
            "tasks": [w.name for w in self.windows],
        }
