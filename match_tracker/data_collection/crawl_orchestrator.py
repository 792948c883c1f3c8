"""
Crawl Orchestrator für den Match Tracker

Sequenziert Team Lister → Competition Lister → Match Extractor über alle Teams
und baut daraus einen ClubSnapshot.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..common.team_classifier import TeamClassifier
from ..core.config import Settings
from ..domain.contracts import MatchLocator, TeamRef, dedupe_locators
from ..domain.models import ClubSnapshot, TeamSnapshot
from .scrapers.basquetcatala.club_scraper import BasquetCatalaScraper


class EmptyTeamListError(Exception):
    """The club page yielded no teams; no meaningful crawl is possible."""


class CrawlOrchestrator:
    """Orchestriert einen vollständigen Crawl des Clubs.

    Requests are strictly sequential. Before each team and each competition the
    shared rate limiter enforces the configured politeness interval.
    """

    def __init__(
        self,
        scraper: BasquetCatalaScraper,
        settings: Settings,
        classifier: Optional[TeamClassifier] = None,
    ):
        self.scraper = scraper
        self.settings = settings
        self.classifier = classifier or TeamClassifier.for_club(
            icon=settings.team_icon,
            club_keyword=settings.club_keyword,
        )
        self.logger = logging.getLogger("crawl_orchestrator")

    @property
    def keywords(self) -> list[str]:
        return list(self.settings.attribution_keywords)

    async def crawl(self) -> ClubSnapshot:
        """Führt den Crawl aus und liefert den neuen Snapshot.

        Raises EmptyTeamListError when the club page lists no teams.
        """
        started = datetime.now(timezone.utc)
        self.logger.info(f"Starting crawl for club {self.settings.club_id}")

        teams = await self.scraper.list_teams()
        if not teams:
            raise EmptyTeamListError(f"No teams found for club {self.settings.club_id}")

        snapshots: dict[str, TeamSnapshot] = {}
        for index, team in enumerate(teams, start=1):
            self.logger.info(f"[{index}/{len(teams)}] Processing team {team.id}: {team.name}")
            await self.scraper.rate_limiter.wait(self.settings.team_delay_seconds)

            locators = await self._collect_team_matches(team)
            if not locators:
                self.logger.info(f"Team {team.id} ({team.name}) has no matches, skipped")
                continue

            snapshot = self._seal_team(team, locators)
            if snapshot.key in snapshots:
                self.logger.warning(
                    f"Team {team.id} ({team.name}) classified as '{snapshot.key}', "
                    f"replacing '{snapshots[snapshot.key].name}'"
                )
            snapshots[snapshot.key] = snapshot
            self.logger.info(f"Team {snapshot.key}: {len(snapshot.urls)} matches")

        result = ClubSnapshot(
            teams=snapshots,
            season=self.settings.current_season,
            produced_at=datetime.now(timezone.utc),
            club_id=self.settings.club_id,
        )
        duration = (result.produced_at - started).total_seconds()
        self.logger.info(
            f"Crawl finished in {duration:.1f}s: {result.total_teams} teams, {result.total_matches} matches"
        )
        return result

    async def _collect_team_matches(self, team: TeamRef) -> list[MatchLocator]:
        competitions = await self.scraper.list_competitions(team)
        if not competitions:
            self.logger.warning(f"No competitions for team {team.id} ({team.name}), skipping")
            return []

        collected: list[MatchLocator] = []
        for competition in competitions:
            await self.scraper.rate_limiter.wait(self.settings.competition_delay_seconds)
            try:
                collected.extend(await self.scraper.extract_matches(competition, self.keywords))
            except Exception as e:
                self.logger.error(
                    f"Match extraction failed for team {team.id} competition {competition.id}: {e}"
                )
        return dedupe_locators(collected)

    def _seal_team(self, team: TeamRef, locators: list[MatchLocator]) -> TeamSnapshot:
        key, profile = self.classifier.classify(team.name)
        return TeamSnapshot(
            key=key,
            name=team.name,
            icon=profile.icon,
            keywords=list(profile.keywords),
            urls=[loc.api_url for loc in locators],
        )
