"""
Unit tests for the click CLI (store-only commands, no network)
"""

import asyncio

import pytest
from click.testing import CliRunner

from match_tracker.apps.cli import cli
from match_tracker.database.state_store import StateStore
from match_tracker.domain.models import Metadata
from tests.helpers import make_snapshot


@pytest.fixture
def state_file(tmp_path, monkeypatch):
    path = tmp_path / "db.json"
    monkeypatch.setenv("STATE_FILE_PATH", str(path))
    return path


def test_classify():
    result = CliRunner().invoke(cli, ["classify", "AE BADALONÈS SÈNIOR A MASCULÍ", "AE Badalonès Júnior Femení"])

    assert result.exit_code == 0
    assert "-> senior-a-masc" in result.output
    assert "-> junior-fem" in result.output


def test_snapshot_without_state(state_file):
    result = CliRunner().invoke(cli, ["snapshot"])

    assert result.exit_code == 0
    assert "No snapshot stored yet." in result.output


def test_snapshot_and_history(state_file):
    snapshot = make_snapshot({"senior-a-masc": ["u1", "u2"], "junior-fem": ["u3"]})
    asyncio.run(StateStore(state_file).save(snapshot, Metadata.from_snapshot(snapshot)))

    shown = CliRunner().invoke(cli, ["snapshot", "--team", "senior-a-masc"])
    assert shown.exit_code == 0
    assert "2 teams | 3 matches" in shown.output
    assert "    u1" in shown.output
    assert "junior-fem" not in shown.output

    history = CliRunner().invoke(cli, ["history", "--limit", "5"])
    assert history.exit_code == 0
    assert "teams=2  matches=3  season=2025" in history.output


def test_corrupt_state_is_reported(state_file):
    state_file.write_text("{broken", encoding="utf-8")

    result = CliRunner().invoke(cli, ["history"])

    assert result.exit_code == 1
    assert "Corrupt state file" in result.output
