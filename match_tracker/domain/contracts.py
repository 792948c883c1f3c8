from __future__ import annotations

from dataclasses import dataclass

# Typed crawl-scoped references passed between scraper stages.
# They live for one crawl only and are never persisted.


@dataclass(frozen=True)
class TeamRef:
    id: str
    name: str
    locator: str


@dataclass(frozen=True)
class CompetitionRef:
    id: str
    team_id: str


@dataclass(frozen=True)
class MatchLocator:
    match_id: str
    api_url: str

    @classmethod
    def from_match_id(cls, match_id: str, api_base: str) -> "MatchLocator":
        return cls(match_id=match_id, api_url=f"{api_base}{match_id}?currentSeason=true")


def dedupe_locators(locators: list[MatchLocator]) -> list[MatchLocator]:
    """Drop repeated match ids, keeping the first occurrence and its position."""
    seen: set[str] = set()
    unique: list[MatchLocator] = []
    for loc in locators:
        if loc.match_id in seen:
            continue
        seen.add(loc.match_id)
        unique.append(loc)
    return unique
