"""
Prometheus Metrics für den Match Tracker

Implementiert Metriken-Sammlung und -Export für Monitoring.
"""

import logging
from typing import Any, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)

from .. import __version__
from ..core.config import Settings


class PrometheusMetrics:
    """Prometheus Metriken für den Match Tracker"""

    def __init__(self, settings: Settings, registry: Optional[CollectorRegistry] = None):
        self.settings = settings
        self.logger = logging.getLogger("prometheus_metrics")

        # Custom Registry für bessere Kontrolle
        self.registry = registry or CollectorRegistry()

        # API Metriken
        self.api_requests_total = Counter(
            "api_requests_total",
            "Total number of API requests",
            ["method", "endpoint", "status"],
            registry=self.registry,
        )

        self.api_request_duration = Histogram(
            "api_request_duration_seconds",
            "API request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry,
        )

        # Update-Lauf Metriken
        self.update_runs_total = Counter(
            "tracker_update_runs_total",
            "Total number of update runs",
            ["trigger", "outcome"],
            registry=self.registry,
        )

        self.update_run_duration = Histogram(
            "tracker_update_run_duration_seconds",
            "Update run duration in seconds",
            ["trigger"],
            buckets=(5, 15, 30, 60, 120, 300, 600, 1200),
            registry=self.registry,
        )

        # Scraping Metriken
        self.pages_fetched_total = Counter(
            "tracker_pages_fetched_total",
            "Total number of source pages requested",
            ["scraper", "stage", "outcome"],
            registry=self.registry,
        )

        # Snapshot Metriken
        self.tracked_teams = Gauge(
            "tracker_teams", "Teams in the latest snapshot", registry=self.registry
        )

        self.tracked_matches = Gauge(
            "tracker_matches", "Matches in the latest snapshot", registry=self.registry
        )

        # Application Info
        self.app_info = Info(
            "match_tracker_info",
            "Match Tracker application info",
            registry=self.registry,
        )
        self.app_info.info(
            {
                "version": __version__,
                "environment": self.settings.environment,
                "club_id": str(self.settings.club_id),
                "season": self.settings.current_season,
            }
        )

    def record_api_request(self, method: str, endpoint: str, status: str, duration: float):
        """Zeichnet API Request auf"""
        self.api_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
        self.api_request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_update_run(self, trigger: str, outcome: str, duration: float):
        """Zeichnet einen Update-Lauf auf (outcome: changed, unchanged, failed, rejected)"""
        self.update_runs_total.labels(trigger=trigger, outcome=outcome).inc()
        if outcome != "rejected":
            self.update_run_duration.labels(trigger=trigger).observe(duration)

    def record_page_fetch(self, scraper: str, stage: str, outcome: str):
        """Zeichnet einen Seitenabruf auf"""
        self.pages_fetched_total.labels(scraper=scraper, stage=stage, outcome=outcome).inc()

    def update_snapshot_metrics(self, total_teams: int, total_matches: int):
        self.tracked_teams.set(total_teams)
        self.tracked_matches.set(total_matches)

    def get_metrics_summary(self) -> dict[str, Any]:
        """Holt Metriken-Zusammenfassung"""
        return {
            "tracked_teams": self.tracked_teams._value.get(),
            "tracked_matches": self.tracked_matches._value.get(),
            "metrics_endpoint": "/metrics",
        }

    def export_metrics(self) -> str:
        """Exportiert Metriken im Prometheus Format"""
        try:
            return generate_latest(self.registry).decode("utf-8")
        except Exception as e:
            self.logger.error(f"Failed to export metrics: {e}")
            return f"# Error exporting metrics: {e}\n"
