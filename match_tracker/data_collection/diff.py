"""Snapshot comparison.

Decides whether a freshly crawled snapshot differs from the persisted one.
Teams that only exist in the previous snapshot are not reported; they simply
drop out when the new snapshot is saved.
"""

from __future__ import annotations

from typing import Optional

from ..domain.models import ChangeEntry, ChangeKind, ChangeReport, ClubSnapshot


def diff(previous: Optional[ClubSnapshot], current: ClubSnapshot) -> ChangeReport:
    """Compare *current* against *previous*.

    Without a previous snapshot the result is a change with no entries: the
    snapshot must be persisted, but there is no baseline to enumerate against.
    """
    if previous is None:
        return ChangeReport(has_changes=True, changes=[])

    changes: list[ChangeEntry] = []
    for key, team in current.teams.items():
        before = previous.teams.get(key)
        if before is None:
            changes.append(ChangeEntry(kind=ChangeKind.NEW_TEAM, team=key, count=len(team.urls)))
            continue
        known = set(before.urls)
        new_urls = [url for url in team.urls if url not in known]
        if new_urls:
            changes.append(
                ChangeEntry(kind=ChangeKind.NEW_MATCHES, team=key, count=len(new_urls), matches=new_urls)
            )

    return ChangeReport(has_changes=bool(changes), changes=changes)


__all__ = ["diff"]
