"""
Unit tests for the snapshot diff
"""

from match_tracker.data_collection.diff import diff
from match_tracker.domain.models import ChangeKind
from tests.helpers import make_snapshot

U1, U2, U3, U4 = (f"https://stats.example/{i}?currentSeason=true" for i in range(1, 5))


def test_identical_snapshots_have_no_changes():
    snapshot = make_snapshot({"senior-a-masc": [U1, U2], "junior-fem": [U3]})

    report = diff(snapshot, snapshot)

    assert report.has_changes is False
    assert report.changes == []


def test_equal_but_separate_snapshots_have_no_changes():
    previous = make_snapshot({"senior-a-masc": [U1, U2]})
    current = make_snapshot({"senior-a-masc": [U1, U2]})

    assert diff(previous, current).has_changes is False


def test_new_team_reported_with_full_count():
    previous = make_snapshot({})
    current = make_snapshot({"team-a": [U1, U2, U3]})

    report = diff(previous, current)

    assert report.has_changes is True
    assert len(report.changes) == 1
    entry = report.changes[0]
    assert entry.kind == ChangeKind.NEW_TEAM
    assert entry.team == "team-a"
    assert entry.count == 3
    assert entry.matches is None


def test_new_matches_reported_incrementally():
    previous = make_snapshot({"team-a": [U1, U2]})
    current = make_snapshot({"team-a": [U1, U2, U3]})

    report = diff(previous, current)

    assert report.has_changes is True
    assert len(report.changes) == 1
    entry = report.changes[0]
    assert entry.kind == ChangeKind.NEW_MATCHES
    assert entry.team == "team-a"
    assert entry.count == 1
    assert entry.matches == [U3]


def test_new_matches_keep_current_order():
    previous = make_snapshot({"team-a": [U2]})
    current = make_snapshot({"team-a": [U4, U2, U1, U3]})

    report = diff(previous, current)

    assert report.changes[0].matches == [U4, U1, U3]


def test_first_run_has_changes_without_entries():
    current = make_snapshot({"team-a": [U1], "team-b": [U2, U3]})

    report = diff(None, current)

    assert report.has_changes is True
    assert report.changes == []


def test_removed_team_is_not_reported():
    previous = make_snapshot({"team-a": [U1], "team-b": [U2]})
    current = make_snapshot({"team-a": [U1]})

    report = diff(previous, current)

    assert report.has_changes is False
    assert report.changes == []


def test_removed_match_is_not_reported():
    previous = make_snapshot({"team-a": [U1, U2]})
    current = make_snapshot({"team-a": [U1]})

    assert diff(previous, current).has_changes is False


def test_entries_follow_current_team_order():
    previous = make_snapshot({"team-b": [U1]})
    current = make_snapshot({"team-c": [U3], "team-b": [U1, U2], "team-a": [U4]})

    report = diff(previous, current)

    assert [(c.kind, c.team) for c in report.changes] == [
        (ChangeKind.NEW_TEAM, "team-c"),
        (ChangeKind.NEW_MATCHES, "team-b"),
        (ChangeKind.NEW_TEAM, "team-a"),
    ]
