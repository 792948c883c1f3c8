"""
Match Tracker App - Hauptanwendungsklasse

Verdrahtet Scraper, Crawl-Orchestrator, Diff, State Store, Run-Koordinator und
Scheduler und bietet einheitliche Operationen für API, CLI und main.py.
"""

import time
from datetime import datetime, timezone
from typing import Any, Optional

from ..common.logging_utils import get_logger
from ..common.rate_limit import MinIntervalRateLimiter
from ..core.config import Settings
from ..data_collection.crawl_orchestrator import CrawlOrchestrator, EmptyTeamListError
from ..data_collection.diff import diff
from ..data_collection.run_coordinator import RunAlreadyActiveError, RunCoordinator
from ..data_collection.scheduler import TrackerScheduler
from ..data_collection.scrapers.basquetcatala.club_scraper import BasquetCatalaConfig, BasquetCatalaScraper
from ..database.state_store import PersistenceError, StateStore
from ..domain.models import ClubSnapshot, Metadata, RunResult
from ..monitoring.prometheus_metrics import PrometheusMetrics


class MatchTrackerApp:
    """Hauptanwendung für den Club Match Tracker"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        store: Optional[StateStore] = None,
        scraper: Optional[BasquetCatalaScraper] = None,
        metrics: Optional[PrometheusMetrics] = None,
    ):
        self.settings = settings or Settings()
        self.metrics = metrics
        if self.metrics is None and self.settings.enable_metrics:
            self.metrics = PrometheusMetrics(self.settings)

        self.rate_limiter = MinIntervalRateLimiter()
        self.scraper = scraper or BasquetCatalaScraper(
            BasquetCatalaConfig.from_settings(self.settings),
            rate_limiter=self.rate_limiter,
            metrics=self.metrics,
        )
        self.orchestrator = CrawlOrchestrator(self.scraper, self.settings)
        self.store = store or StateStore(self.settings.state_file_path, self.settings.history_limit)
        self.coordinator = RunCoordinator()
        self.scheduler = TrackerScheduler(self.run_scheduled_update, tz=self.settings.scheduler_timezone)

        self.last_result: Optional[RunResult] = None
        self.started_at = datetime.now(timezone.utc)

        # Logger (configured globally in main.py)
        self.logger = get_logger("match_tracker_app")

    async def initialize(self):
        """Initialisiert die Anwendung"""
        self.logger.info(
            f"Initializing Match Tracker (club {self.settings.club_id}, season {self.settings.current_season})"
        )
        await self.scraper.initialize()

    async def cleanup(self):
        """Räumt Ressourcen auf"""
        try:
            self.logger.info("Cleaning up Match Tracker...")
            self.scheduler.stop()
            await self.scraper.cleanup()
        except Exception as e:
            self.logger.error(f"Cleanup failed: {e}")

    # -------------------- Update-Lauf --------------------
    async def run_update(self, trigger: str = "manual") -> RunResult:
        """Crawlt, vergleicht und speichert bei Änderungen.

        Raises RunAlreadyActiveError when another run holds the slot and
        PersistenceError when the store cannot be read or written (after
        recording the failure as last result).
        """
        started = time.monotonic()
        try:
            async with self.coordinator.slot(trigger):
                result = await self._execute_run(trigger)
        except RunAlreadyActiveError:
            self._record_metrics(trigger, "rejected", started)
            raise
        except PersistenceError:
            self._record_metrics(trigger, "failed", started)
            raise

        outcome = "failed" if not result.success else "changed" if result.has_changes else "unchanged"
        self._record_metrics(trigger, outcome, started)
        return result

    async def run_scheduled_update(self) -> RunResult:
        return await self.run_update(trigger="scheduled")

    async def _execute_run(self, trigger: str) -> RunResult:
        self.logger.info(f"Update run started ({trigger})")
        try:
            previous, _ = await self.store.load()
            snapshot = await self.orchestrator.crawl()
            report = diff(previous, snapshot)

            if report.has_changes:
                metadata = Metadata.from_snapshot(snapshot)
                metadata.last_check = snapshot.produced_at
                await self.store.save(snapshot, metadata)
                message = (
                    "Initial snapshot saved" if previous is None
                    else f"{len(report.changes)} changes saved"
                )
            else:
                await self.store.touch_last_checked(snapshot.produced_at)
                message = "No changes"

            if self.metrics:
                self.metrics.update_snapshot_metrics(snapshot.total_teams, snapshot.total_matches)

            for change in report.changes:
                self.logger.info(f"Change: {change.kind.value} {change.team} (+{change.count})")
            result = RunResult(
                success=True,
                has_changes=report.has_changes,
                changes=report.changes,
                message=message,
            )
            self.logger.info(f"Update run finished ({trigger}): {message}")

        except PersistenceError as e:
            self.logger.error(f"Update run failed ({trigger}): persistence error: {e}")
            self.last_result = RunResult(success=False, error=str(e))
            raise
        except EmptyTeamListError as e:
            self.logger.error(f"Update run failed ({trigger}): {e}")
            result = RunResult(success=False, error=str(e))
        except Exception as e:
            self.logger.exception(f"Update run failed ({trigger}): {e}")
            result = RunResult(success=False, error=str(e))

        self.last_result = result
        return result

    def _record_metrics(self, trigger: str, outcome: str, started: float):
        if self.metrics:
            self.metrics.record_update_run(trigger, outcome, time.monotonic() - started)

    # -------------------- Bootstrap / Status --------------------
    async def bootstrap(self) -> Optional[RunResult]:
        """Erster Lauf beim Start, wenn noch kein Snapshot gespeichert ist"""
        if not self.settings.bootstrap_on_empty:
            return None
        snapshot, _ = await self.store.load()
        if snapshot is not None:
            if self.metrics:
                self.metrics.update_snapshot_metrics(snapshot.total_teams, snapshot.total_matches)
            return None
        self.logger.info("No stored snapshot, running initial update")
        return await self.run_update(trigger="bootstrap")

    async def current_snapshot(self) -> tuple[Optional[ClubSnapshot], Metadata]:
        return await self.store.load()

    async def get_status(self) -> dict[str, Any]:
        """Holt System Status"""
        now = datetime.now(timezone.utc)
        store_status = await self.store.health_check()
        try:
            _, metadata = await self.store.load()
            metadata_data = metadata.model_dump(mode="json")
        except PersistenceError as e:
            metadata_data = {"error": str(e)}
        return {
            "server": {
                "status": "running",
                "uptime_seconds": round((now - self.started_at).total_seconds(), 1),
                "update_in_progress": self.coordinator.is_running,
                "completed_runs": self.coordinator.completed_runs,
            },
            "scheduler": self.scheduler.info(),
            "metrics": self.metrics.get_metrics_summary() if self.metrics else None,
            "database": store_status,
            "metadata": metadata_data,
            "last_result": self.last_result.model_dump(mode="json") if self.last_result else None,
            "timestamp": now.isoformat(),
        }


# Convenience Functions
async def create_tracker_app(settings: Optional[Settings] = None) -> MatchTrackerApp:
    """Erstellt und initialisiert MatchTrackerApp"""
    app = MatchTrackerApp(settings)
    await app.initialize()
    return app


async def run_update_once(settings: Optional[Settings] = None) -> RunResult:
    """Führt einen einmaligen Update-Lauf aus"""
    app = await create_tracker_app(settings)
    try:
        return await app.run_update(trigger="once")
    finally:
        await app.cleanup()
