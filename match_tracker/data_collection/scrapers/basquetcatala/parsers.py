"""HTML parsing for basquetcatala.cat pages.

Everything here is pure: functions take markup or parsed soup and return plain
values, so they can be tested against fixture HTML without any network.

Club attribution works in two steps:
  1. Page pre-check: does the raw markup mention any club keyword at all?
     If not, nothing on the page belongs to the club and no link is inspected.
  2. Ancestor walk: for every statistics link, look at the text of its enclosing
     containers from the innermost outwards (max `depth` levels). The first
     container mentioning a keyword attributes the match; the smallest block
     naming the club is taken to be that club's match card.

The decision itself (`first_matching_level`) only sees a sequence of strings,
`ancestor_texts` adapts a BeautifulSoup tag to that sequence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from bs4 import BeautifulSoup, Tag

from ....common.parsing import clean_text, contains_any, first_group, soup_from_html
from ....domain.contracts import TeamRef

TEAM_HREF_RE = re.compile(r"/equip/(\d+)")
COMPETITION_HREF_RE = re.compile(r"/competicions/resultats/(\d+)")
STATS_SEGMENT = "/estadistiques/"
MATCH_TOKEN_RES = (
    re.compile(r"/estadistiques/([a-f0-9]{24,})", re.IGNORECASE),
    re.compile(r"/estadistiques/\d+/([a-f0-9]{24,})", re.IGNORECASE),
)

# Ancestors checked per link, level 1 = direct parent
DEFAULT_WALK_DEPTH = 7


# ----------------------------- URLs -----------------------------

def club_url(base_url: str, club_id: int | str) -> str:
    return f"{base_url.rstrip('/')}/club/{club_id}"


def team_url(base_url: str, team_id: str) -> str:
    return f"{base_url.rstrip('/')}/equip/{team_id}"


def results_page_url(base_url: str, competition_id: str, page: int = 1) -> str:
    """Results address for *page*; page 1 is the bare address."""
    url = f"{base_url.rstrip('/')}/competicions/resultats/{competition_id}"
    return url if page <= 1 else f"{url}/{page}"


# ----------------------------- Team / competition links -----------------------------

def extract_team_refs(soup: BeautifulSoup, base_url: str, min_name_length: int = 3) -> list[TeamRef]:
    """Team links of a club page, deduplicated by team id in first-seen order.

    Links whose visible text has `min_name_length` characters or fewer are
    icon or decoration links and are skipped.
    """
    teams: list[TeamRef] = []
    seen: set[str] = set()
    for a in soup.find_all("a", href=True):
        href = a["href"]
        team_id = first_group((TEAM_HREF_RE,), href)
        if not team_id or team_id in seen:
            continue
        name = clean_text(a.get_text(" "))
        if not name or len(name) <= min_name_length:
            continue
        seen.add(team_id)
        teams.append(TeamRef(id=team_id, name=name, locator=team_url(base_url, team_id)))
    return teams


def extract_competition_ids(soup: BeautifulSoup) -> list[str]:
    ids: list[str] = []
    for a in soup.find_all("a", href=True):
        comp_id = first_group((COMPETITION_HREF_RE,), a["href"])
        if comp_id and comp_id not in ids:
            ids.append(comp_id)
    return ids


def extract_match_token(href: str | None) -> Optional[str]:
    """Hex match token of a statistics link, or None when the href has none."""
    return first_group(MATCH_TOKEN_RES, href)


# ----------------------------- Attribution -----------------------------

def page_mentions_club(markup: str, keywords: Iterable[str]) -> bool:
    return contains_any(markup, keywords)


def ancestor_texts(tag: Tag, depth: int = DEFAULT_WALK_DEPTH) -> Iterator[str]:
    """Yield the full text of *tag*'s ancestors, innermost first (level 1 = parent)."""
    for level, parent in enumerate(tag.parents, start=1):
        if level > depth:
            return
        yield parent.get_text(" ")


def first_matching_level(texts: Iterable[str], keywords: Iterable[str]) -> Optional[int]:
    """1-based index of the first text that contains a keyword, None if none does.

    *texts* is consumed lazily; iteration stops at the first match.
    """
    keywords = [k for k in keywords if k]
    for level, text in enumerate(texts, start=1):
        if contains_any(text, keywords):
            return level
    return None


@dataclass
class PageScan:
    """Result of scanning one results page."""

    total_links: int = 0
    attributed: list[tuple[str, int]] = field(default_factory=list)
    unattributed: int = 0
    mentions_club: bool = False


def scan_results_page(
    markup: str,
    keywords: Iterable[str],
    already_attributed: set[str] | None = None,
    depth: int = DEFAULT_WALK_DEPTH,
) -> PageScan:
    """Find statistics links on a results page and attribute them to the club.

    `total_links` counts statistics links that carry a match token (the
    pagination stop signal). `attributed` lists (match token, ancestor level)
    pairs for tokens that are new relative to *already_attributed*.
    """
    keywords = [k for k in keywords if k]
    known = already_attributed if already_attributed is not None else set()
    soup = soup_from_html(markup)
    # A bare /estadistiques/ link without a match token is navigation, not a result
    links: list[tuple[Tag, str]] = []
    for a in soup.find_all("a", href=True):
        token = extract_match_token(a["href"]) if STATS_SEGMENT in a["href"] else None
        if token:
            links.append((a, token))
    scan = PageScan(total_links=len(links), mentions_club=page_mentions_club(markup, keywords))
    if not links or not scan.mentions_club:
        scan.unattributed = len(links)
        return scan

    found: set[str] = set()
    for a, token in links:
        if token in known or token in found:
            continue
        level = first_matching_level(ancestor_texts(a, depth), keywords)
        if level is None:
            scan.unattributed += 1
            continue
        found.add(token)
        scan.attributed.append((token, level))
    return scan


__all__ = [
    "PageScan",
    "ancestor_texts",
    "club_url",
    "extract_competition_ids",
    "extract_match_token",
    "extract_team_refs",
    "first_matching_level",
    "page_mentions_club",
    "results_page_url",
    "team_url",
    "scan_results_page",
]
