"""Team name classification.

Maps a raw team display name as published by the federation site (for example
"AE BADALONÈS SÈNIOR A MASCULÍ") to a stable team key plus a display profile.
The key is what snapshots are indexed by, so it must not change between runs
for the same team, whatever accents, punctuation or casing the site uses that day.

Normalisation:
  1. Uppercase and trim
  2. Remove accents (NFKD decomposition, drop combining marks)
  3. Replace punctuation with space and collapse whitespace

Rules are an ordered list of (category token, gender token) pairs and the first
match wins. Order matters: "PREINFANTIL A MASCULI" also contains "INFANTIL A",
and a women's senior team may carry an "A" suffix, so the more specific rules
come first.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from typing import ClassVar, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCT_RE = re.compile(r"[\.,;:_/\\()+\[\]{}'\"]+")
_SLUG_DROP_RE = re.compile(r"[^a-z0-9\s-]")

MASC = "MASCUL"
FEM = "FEMEN"

FALLBACK_KEY_LENGTH = 30


def _strip_accents(value: str) -> str:
    """Return *value* with accents removed (NFKD decomposition -> drop marks)."""
    normalized = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def normalize_team_name(value: str) -> str:
    """Uppercase, accent-free, punctuation-free form of a team name."""
    v = _strip_accents(value.upper().strip())
    v = _PUNCT_RE.sub(" ", v)
    return _WHITESPACE_RE.sub(" ", v).strip()


def fallback_key(name: str) -> str:
    """Slug used when no rule matches: lowercase, [a-z0-9-] only, max 30 chars.

    Punctuation is dropped, not turned into a separator, so "C.E." and "CE"
    give the same key.
    """
    slug = _SLUG_DROP_RE.sub("", _strip_accents(name.upper().strip()).lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    return slug[:FALLBACK_KEY_LENGTH]


@dataclass(frozen=True)
class TeamRule:
    key: str
    category: str
    gender: str

    def matches(self, normalized: str) -> bool:
        return self.category in normalized and self.gender in normalized


@dataclass(frozen=True)
class TeamProfile:
    icon: str
    keywords: tuple[str, ...]


# Precedence order, specific before generic
DEFAULT_RULES: tuple[TeamRule, ...] = (
    TeamRule("senior-a-masc", "SENIOR A", MASC),
    TeamRule("senior-fem", "SENIOR", FEM),
    TeamRule("senior-b-masc", "SENIOR B", MASC),
    TeamRule("senior-c-masc", "SENIOR C", MASC),
    TeamRule("u20-masc", "U20", MASC),
    TeamRule("u20-fem", "U20", FEM),
    TeamRule("junior-masc", "JUNIOR", MASC),
    TeamRule("junior-fem", "JUNIOR", FEM),
    TeamRule("cadet-a-masc", "CADET A", MASC),
    TeamRule("cadet-b-masc", "CADET B", MASC),
    TeamRule("cadet-fem", "CADET", FEM),
    TeamRule("preinfantil-masc", "PREINFANTIL", MASC),
    TeamRule("preinfantil-fem", "PREINFANTIL", FEM),
    TeamRule("infantil-a-masc", "INFANTIL A", MASC),
    TeamRule("infantil-a-fem", "INFANTIL A", FEM),
    TeamRule("infantil-b-masc", "INFANTIL B", MASC),
    TeamRule("infantil-b-fem", "INFANTIL B", FEM),
    TeamRule("alevin-masc", "ALEVI", MASC),
    TeamRule("alevin-fem", "ALEVI", FEM),
)


@dataclass
class TeamClassifier:
    """Ordered rule table plus key -> profile lookup.

    Attributes
    ----------
    rules: tuple[TeamRule, ...]
        Checked in order; the first rule whose tokens both occur wins.
    profiles: dict[str, TeamProfile]
        Display profile per known key.
    default_profile: TeamProfile
        Used for keys produced by the slug fallback.
    """

    rules: tuple[TeamRule, ...] = DEFAULT_RULES
    profiles: dict[str, TeamProfile] = field(default_factory=dict)
    default_profile: TeamProfile = TeamProfile(icon="🏀", keywords=("badalones",))

    @classmethod
    def for_club(
        cls,
        *,
        icon: str = "🏀",
        club_keyword: str = "badalones",
        team_keywords: tuple[str, ...] = ("badalones", "corbacho"),
        rules: tuple[TeamRule, ...] = DEFAULT_RULES,
    ) -> "TeamClassifier":
        """Build a classifier where every rule key shares the club profile."""
        profile = TeamProfile(icon=icon, keywords=tuple(team_keywords))
        return cls(
            rules=rules,
            profiles={rule.key: profile for rule in rules},
            default_profile=TeamProfile(icon=icon, keywords=(club_keyword,)),
        )

    def key_for(self, raw_name: str) -> str:
        normalized = normalize_team_name(raw_name or "")
        for rule in self.rules:
            if rule.matches(normalized):
                return rule.key
        return fallback_key(raw_name or "")

    def profile_for(self, key: str) -> TeamProfile:
        return self.profiles.get(key, self.default_profile)

    def classify(self, raw_name: str) -> tuple[str, TeamProfile]:
        key = self.key_for(raw_name)
        return key, self.profile_for(key)

    # ---------------------------- Default instance ----------------------------
    _DEFAULT_INSTANCE: ClassVar[Optional["TeamClassifier"]] = None

    @classmethod
    def default(cls) -> "TeamClassifier":
        if cls._DEFAULT_INSTANCE is None:
            cls._DEFAULT_INSTANCE = cls.for_club()
        return cls._DEFAULT_INSTANCE


def classify_team(raw_name: str) -> tuple[str, TeamProfile]:
    """Convenience wrapper using the default club classifier."""
    return TeamClassifier.default().classify(raw_name)


__all__ = [
    "TeamClassifier",
    "TeamProfile",
    "TeamRule",
    "DEFAULT_RULES",
    "classify_team",
    "normalize_team_name",
    "fallback_key",
]
