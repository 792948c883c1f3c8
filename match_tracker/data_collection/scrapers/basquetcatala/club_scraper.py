"""Asynchroner Scraper für basquetcatala.cat

Strategie:
 1. Club-Seite laden und Team-Links extrahieren (`/equip/{id}`)
 2. Pro Team die Team-Seite laden und Wettbewerbe sammeln (`/competicions/resultats/{id}`)
 3. Pro Wettbewerb die Ergebnisseiten paginiert durchlaufen und Statistik-Links
    dem Club zuordnen (Seiten-Vorprüfung + Ancestor-Walk, siehe `parsers`)

A failed page never aborts the crawl here: listers return what they have and the
match extractor keeps the ids collected before the failing page.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..base import BaseScraper, FetchError, ScrapingConfig
from . import parsers
from ....common.rate_limit import MinIntervalRateLimiter
from ....domain.contracts import CompetitionRef, MatchLocator, TeamRef, dedupe_locators


# -------------------- Config --------------------
@dataclass
class BasquetCatalaConfig(ScrapingConfig):
    base_url: str = "https://www.basquetcatala.cat"
    club_id: int = 150
    stats_api_base: str = "https://msstats.optimalwayconsulting.com/v1/fcbq/getJsonWithMatchStats/"
    max_result_pages: int = 10
    ancestor_walk_depth: int = parsers.DEFAULT_WALK_DEPTH
    min_team_name_length: int = 3
    page_delay_seconds: float = 1.0

    @classmethod
    def from_settings(cls, settings) -> "BasquetCatalaConfig":
        return cls(
            base_url=settings.base_url,
            timeout=settings.request_timeout_seconds,
            user_agent=settings.user_agent,
            club_id=settings.club_id,
            stats_api_base=settings.stats_api_base,
            max_result_pages=settings.max_result_pages,
            ancestor_walk_depth=settings.ancestor_walk_depth,
            min_team_name_length=settings.min_team_name_length,
            page_delay_seconds=settings.page_delay_seconds,
        )


class BasquetCatalaScraper(BaseScraper):
    name = "basquetcatala"

    def __init__(
        self,
        config: BasquetCatalaConfig | None = None,
        *,
        rate_limiter: MinIntervalRateLimiter | None = None,
        metrics=None,
    ):
        super().__init__(config or BasquetCatalaConfig(), name=self.name, rate_limiter=rate_limiter, metrics=metrics)
        self.config: BasquetCatalaConfig

    @property
    def club_url(self) -> str:
        return parsers.club_url(self.config.base_url, self.config.club_id)

    # -------------------- Team Lister --------------------
    async def list_teams(self) -> list[TeamRef]:
        """Lädt die Club-Seite und liefert die Teams (leer bei Fehler)."""
        try:
            html = await self.fetch_page(self.club_url, stage="teams")
        except FetchError as e:
            self.logger.error(f"[teams] club {self.config.club_id}: {e}")
            return []
        teams = parsers.extract_team_refs(
            self.parse_html(html), self.config.base_url, self.config.min_team_name_length
        )
        if not teams:
            self.logger.warning(f"[teams] club {self.config.club_id}: no team links found on {self.club_url}")
        else:
            self.logger.info(f"[teams] club {self.config.club_id}: {len(teams)} teams")
        return teams

    # -------------------- Competition Lister --------------------
    async def list_competitions(self, team: TeamRef) -> list[CompetitionRef]:
        """Lädt die Team-Seite und liefert die Wettbewerbe des Teams."""
        try:
            html = await self.fetch_page(team.locator, stage="competitions")
        except FetchError as e:
            self.logger.warning(f"[competitions] team {team.id} ({team.name}): {e}")
            return []
        ids = parsers.extract_competition_ids(self.parse_html(html))
        self.logger.info(f"[competitions] team {team.id} ({team.name}): {len(ids)} competitions")
        return [CompetitionRef(id=comp_id, team_id=team.id) for comp_id in ids]

    # -------------------- Match Extractor --------------------
    async def extract_matches(self, competition: CompetitionRef, keywords: Iterable[str]) -> list[MatchLocator]:
        """Durchläuft die Ergebnisseiten eines Wettbewerbs und sammelt die Spiele des Clubs.

        Stops at the first page without statistics links, at the first fetch
        failure or after `max_result_pages` pages, whichever comes first.
        """
        keywords = list(keywords)
        attributed: set[str] = set()
        locators: list[MatchLocator] = []

        for page in range(1, self.config.max_result_pages + 1):
            if page > 1:
                await self.rate_limiter.wait(self.config.page_delay_seconds)
            url = parsers.results_page_url(self.config.base_url, competition.id, page)
            try:
                html = await self.fetch_page(url, stage="matches")
            except FetchError as e:
                self.logger.warning(
                    f"[matches] competition {competition.id} page {page}: {e}; "
                    f"keeping {len(locators)} matches"
                )
                break

            scan = parsers.scan_results_page(html, keywords, attributed, self.config.ancestor_walk_depth)
            if scan.total_links == 0:
                self.logger.debug(f"[matches] competition {competition.id}: no statistics links on page {page}, done")
                break

            for token, level in scan.attributed:
                attributed.add(token)
                locators.append(MatchLocator.from_match_id(token, self.config.stats_api_base))
                self.logger.debug(f"[matches] competition {competition.id}: {token} attributed at level {level}")
            self.logger.debug(
                f"[matches] competition {competition.id} page {page}: {scan.total_links} links, "
                f"{len(scan.attributed)} attributed"
            )
        else:
            self.logger.info(
                f"[matches] competition {competition.id}: page cap {self.config.max_result_pages} reached"
            )

        self.logger.info(f"[matches] competition {competition.id} (team {competition.team_id}): {len(locators)} matches")
        return dedupe_locators(locators)
