"""Shared builders for HTML pages and snapshots used across the test suite."""

from datetime import datetime, timezone

from match_tracker.domain.models import ClubSnapshot, TeamSnapshot

API_BASE = "https://msstats.optimalwayconsulting.com/v1/fcbq/getJsonWithMatchStats/"

TOKEN_A = "a" * 24
TOKEN_B = "0123456789abcdef01234567"
TOKEN_C = "fedcba9876543210fedcba98"
TOKEN_D = "5f0c1d2e3a4b5c6d7e8f9a0b"


def nest(inner: str, levels: int) -> str:
    """Wrap *inner* in `levels` plain divs."""
    for _ in range(levels):
        inner = f"<div>{inner}</div>"
    return inner


def match_card(token: str, home: str, away: str, *, numeric_prefix: bool = False) -> str:
    """One result card; the statistics link sits two levels below the card."""
    path = f"/estadistiques/2025/{token}" if numeric_prefix else f"/estadistiques/{token}"
    return (
        '<div class="card">'
        f'<div class="teams"><span>{home}</span> - <span>{away}</span></div>'
        '<div class="row">'
        f'<span class="stats"><a href="{path}">Estadístiques</a></span>'
        "<span>72 - 65</span>"
        "</div>"
        "</div>"
    )


def results_page(*cards: str) -> str:
    return f'<html><body><div class="results">{"".join(cards)}</div></body></html>'


def api_url(token: str) -> str:
    return f"{API_BASE}{token}?currentSeason=true"


def make_snapshot(teams: dict[str, list[str]], **kwargs) -> ClubSnapshot:
    """ClubSnapshot with one TeamSnapshot per key and the given API urls."""
    return ClubSnapshot(
        teams={
            key: TeamSnapshot(key=key, name=key.upper(), icon="🏀", keywords=["badalones"], urls=urls)
            for key, urls in teams.items()
        },
        season=kwargs.get("season", "2025"),
        produced_at=kwargs.get("produced_at", datetime(2025, 10, 18, 12, 0, tzinfo=timezone.utc)),
        club_id=kwargs.get("club_id", 150),
    )


def fake_scraper(matches: dict[str, list[str]]):
    """Scraper double: one team per name, one competition each, tokens as matches.

    Mutate the returned dict-backed `matches` between runs to simulate new results.
    """
    from unittest.mock import AsyncMock, Mock

    from match_tracker.common.rate_limit import MinIntervalRateLimiter
    from match_tracker.domain.contracts import CompetitionRef, MatchLocator, TeamRef

    scraper = Mock()
    scraper.rate_limiter = MinIntervalRateLimiter()
    scraper.initialize = AsyncMock()
    scraper.cleanup = AsyncMock()
    scraper.list_teams = AsyncMock(
        side_effect=lambda: [
            TeamRef(str(5000 + i), name, f"https://www.basquetcatala.cat/equip/{5000 + i}")
            for i, name in enumerate(matches)
        ]
    )
    scraper.list_competitions = AsyncMock(side_effect=lambda team: [CompetitionRef(team.id, team.id)])

    def extract(competition, keywords):
        name = list(matches)[int(competition.id) - 5000]
        return [MatchLocator.from_match_id(token, API_BASE) for token in matches[name]]

    scraper.extract_matches = AsyncMock(side_effect=extract)
    return scraper
