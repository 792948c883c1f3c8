"""
Domain models for persisted tracker state using Pydantic.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Snapshot ---

class TeamSnapshot(BaseModel):
    """Sealed crawl result for one team; `urls` keeps discovery order."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    icon: str
    keywords: list[str] = Field(default_factory=list)
    urls: list[str] = Field(default_factory=list)


class ClubSnapshot(BaseModel):
    teams: dict[str, TeamSnapshot] = Field(default_factory=dict)
    season: str
    produced_at: datetime = Field(default_factory=utcnow)
    club_id: int

    @computed_field  # type: ignore[misc]
    @property
    def total_teams(self) -> int:
        return len(self.teams)

    @computed_field  # type: ignore[misc]
    @property
    def total_matches(self) -> int:
        return sum(len(team.urls) for team in self.teams.values())

    def frontend_config(self) -> dict[str, dict]:
        """Teams mapping in the shape the web frontend consumes."""
        return {
            key: team.model_dump(include={"name", "icon", "keywords", "urls"})
            for key, team in self.teams.items()
        }


# --- Change detection ---

class ChangeKind(str, Enum):
    NEW_TEAM = "new_team"
    NEW_MATCHES = "new_matches"


class ChangeEntry(BaseModel):
    kind: ChangeKind
    team: str
    count: int
    matches: Optional[list[str]] = None


class ChangeReport(BaseModel):
    has_changes: bool
    changes: list[ChangeEntry] = Field(default_factory=list)


class RunResult(BaseModel):
    success: bool
    has_changes: bool = False
    changes: Optional[list[ChangeEntry]] = None
    error: Optional[str] = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)


# --- Store records ---

class Metadata(BaseModel):
    last_update: Optional[datetime] = None
    last_check: Optional[datetime] = None
    total_teams: int = 0
    total_matches: int = 0
    season: Optional[str] = None
    club_id: Optional[int] = None

    @classmethod
    def from_snapshot(cls, snapshot: ClubSnapshot) -> "Metadata":
        return cls(
            last_update=snapshot.produced_at,
            total_teams=snapshot.total_teams,
            total_matches=snapshot.total_matches,
            season=snapshot.season,
            club_id=snapshot.club_id,
        )


class HistoryRecord(BaseModel):
    timestamp: datetime = Field(default_factory=utcnow)
    total_teams: int
    total_matches: int
    season: Optional[str] = None
