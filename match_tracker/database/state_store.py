"""
State Store
Persistiert Snapshot, Metadaten und begrenzte Historie als JSON-Dokument.

Layout of the document:

    {
      "snapshot": {...} | null,
      "metadata": {...},
      "history": [{timestamp, total_teams, total_matches, season}, ...]
    }

Writes go to a temporary file next to the target which then replaces it, so a
failed write leaves the previous state untouched.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import aiofiles
from pydantic import ValidationError

from ..domain.models import ClubSnapshot, HistoryRecord, Metadata


class PersistenceError(Exception):
    """Reading or writing the state document failed."""


class StateStore:
    """JSON-Dateibasierter Speicher für den Tracker-Zustand"""

    def __init__(self, path: str | Path, history_limit: int = 100):
        self.path = Path(path)
        self.history_limit = history_limit
        self.logger = logging.getLogger("state_store")
        # Last document read or written; a run loads once and writes from this copy
        self._document: Optional[dict[str, Any]] = None

    # -------------------- Read --------------------
    async def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            self._document = {}
            return {}
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e
        if not raw.strip():
            self._document = {}
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt state file {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise PersistenceError(f"Corrupt state file {self.path}: expected an object")
        self._document = document
        return document

    async def _current_document(self) -> dict[str, Any]:
        if self._document is None:
            return await self._read_document()
        return dict(self._document)

    async def load(self) -> tuple[Optional[ClubSnapshot], Metadata]:
        """Lädt Snapshot und Metadaten (Snapshot None wenn noch nichts gespeichert)"""
        document = await self._read_document()
        try:
            snapshot_data = document.get("snapshot")
            snapshot = ClubSnapshot.model_validate(snapshot_data) if snapshot_data else None
            metadata = Metadata.model_validate(document.get("metadata") or {})
        except ValidationError as e:
            raise PersistenceError(f"Invalid state in {self.path}: {e}") from e
        return snapshot, metadata

    async def history(self) -> list[HistoryRecord]:
        """Historie in chronologischer Reihenfolge (älteste zuerst)"""
        document = await self._read_document()
        try:
            return [HistoryRecord.model_validate(item) for item in document.get("history") or []]
        except ValidationError as e:
            raise PersistenceError(f"Invalid history in {self.path}: {e}") from e

    # -------------------- Write --------------------
    async def _write_document(self, document: dict[str, Any]) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(document, ensure_ascii=False, indent=2))
            os.replace(tmp_path, self.path)
            self._document = document
        except (OSError, TypeError, ValueError) as e:
            if tmp_path.is_file():
                tmp_path.unlink()
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e

    async def save(self, snapshot: ClubSnapshot, metadata: Metadata) -> None:
        """Speichert einen neuen Snapshot und hängt einen Historien-Eintrag an"""
        document = await self._current_document()
        history = list(document.get("history") or [])
        record = HistoryRecord(
            timestamp=metadata.last_update or snapshot.produced_at,
            total_teams=snapshot.total_teams,
            total_matches=snapshot.total_matches,
            season=snapshot.season,
        )
        history.append(record.model_dump(mode="json"))
        if len(history) > self.history_limit:
            history = history[-self.history_limit:]

        await self._write_document({
            "snapshot": snapshot.model_dump(mode="json"),
            "metadata": metadata.model_dump(mode="json"),
            "history": history,
        })
        self.logger.info(
            f"Saved snapshot: {snapshot.total_teams} teams, {snapshot.total_matches} matches "
            f"(history {len(history)}/{self.history_limit})"
        )

    async def touch_last_checked(self, when: Optional[datetime] = None) -> Metadata:
        """Aktualisiert nur `last_check` (Lauf ohne Änderungen)"""
        document = await self._current_document()
        try:
            metadata = Metadata.model_validate(document.get("metadata") or {})
        except ValidationError as e:
            raise PersistenceError(f"Invalid metadata in {self.path}: {e}") from e
        metadata.last_check = when or datetime.now(timezone.utc)
        document["metadata"] = metadata.model_dump(mode="json")
        document.setdefault("snapshot", None)
        document.setdefault("history", [])
        await self._write_document(document)
        self.logger.debug(f"Last check updated to {metadata.last_check.isoformat()}")
        return metadata

    async def health_check(self) -> dict[str, Any]:
        """Einfacher Zustandscheck für /api/status"""
        try:
            snapshot, metadata = await self.load()
        except PersistenceError as e:
            return {"status": "error", "path": str(self.path), "error": str(e)}
        return {
            "status": "ok",
            "path": str(self.path),
            "has_snapshot": snapshot is not None,
            "last_update": metadata.last_update.isoformat() if metadata.last_update else None,
        }
