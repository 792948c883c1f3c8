"""Global pytest fixtures.

Centralizes:
 - Project root path insertion (so individual tests don't repeat sys.path hacks)
 - Reusable HTML snippets for basquetcatala.cat club, team and results pages
 - Settings and state store fixtures isolated to a temporary directory
"""

import sys
from pathlib import Path

import pytest

# Ensure project root (containing match_tracker/) is on sys.path once
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from match_tracker.core.config import Settings  # noqa: E402
from match_tracker.database.state_store import StateStore  # noqa: E402
from tests.helpers import (  # noqa: E402
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    match_card,
    nest,
    results_page,
)


# -------------------- Settings / Store Fixtures -------------------- #

@pytest.fixture
def test_settings(tmp_path):
    """Settings with a temporary state file and no politeness delays."""
    return Settings(
        state_file_path=str(tmp_path / "db.json"),
        log_file_path=None,
        team_delay_seconds=0,
        competition_delay_seconds=0,
        page_delay_seconds=0,
        enable_metrics=False,
        bootstrap_on_empty=True,
    )


@pytest.fixture
def state_store(tmp_path):
    return StateStore(tmp_path / "db.json", history_limit=100)


# -------------------- HTML Fixtures -------------------- #

@pytest.fixture
def club_page_html():
    return """
    <html>
    <body>
        <nav><a href="/club/150">Club</a></nav>
        <div class="equips">
            <a href="/equip/5001"><img src="logo.png" /></a>
            <a href="/equip/5001">AE BADALONÈS SÈNIOR A MASCULÍ</a>
            <a href="/equip/5002">AE Badalonès Júnior Femení</a>
            <a href="/equip/5003">ABC</a>
            <a href="https://www.basquetcatala.cat/equip/5004">AE BADALONÈS CADET B MASCULÍ</a>
            <a href="/equip/5002">AE Badalonès Júnior Femení (repetit)</a>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def team_page_html():
    return """
    <html>
    <body>
        <ul class="competicions">
            <li><a href="/competicions/resultats/20101">Primera Catalana</a></li>
            <li><a href="/competicions/resultats/20102">Copa</a></li>
            <li><a href="/competicions/resultats/20101/2">Primera Catalana (pàg. 2)</a></li>
            <li><a href="/competicions/classificacio/20101">Classificació</a></li>
        </ul>
    </body>
    </html>
    """


@pytest.fixture
def level_three_html():
    """Only the card (ancestor level 3 of the link) mentions CORBACHO."""
    return results_page(match_card(TOKEN_A, "CB CORBACHO", "CB SANT JOSEP"))


@pytest.fixture
def mixed_results_html():
    """A club card plus an unrelated card nested deeper than the walk depth."""
    club = match_card(TOKEN_A, "AE BADALONÈS", "CB ARTÉS")
    other = nest(match_card(TOKEN_B, "CB MANRESA", "UE MATARÓ"), 6)
    return results_page(club, other)


@pytest.fixture
def unrelated_results_html():
    return results_page(
        match_card(TOKEN_B, "CB MANRESA", "UE MATARÓ"),
        match_card(TOKEN_C, "CB GRANOLLERS", "CB VIC"),
    )


@pytest.fixture
def duplicate_links_html():
    return results_page(
        match_card(TOKEN_A, "AE BADALONÈS", "CB ARTÉS"),
        match_card(TOKEN_A, "AE BADALONÈS", "CB ARTÉS"),
        match_card(TOKEN_D, "CB CORBACHO", "CB VIC", numeric_prefix=True),
        match_card(TOKEN_A, "AE BADALONÈS", "CB ARTÉS", numeric_prefix=True),
    )


@pytest.fixture
def empty_results_html():
    return results_page('<p class="empty">No hi ha resultats</p>')
