"""
Snapshot API Endpoints
Teams-Konfiguration, Metadaten und Historie für das Frontend
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...apps.tracker_app import MatchTrackerApp
from ...database.state_store import PersistenceError
from ..dependencies import get_tracker_app
from ..models import APIResponse

router = APIRouter()
logger = logging.getLogger("api.snapshot")


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


def storage_error(e: PersistenceError, start_time: float) -> JSONResponse:
    logger.error(f"State store error: {e}")
    body = APIResponse(success=False, error=str(e), execution_time_ms=_elapsed_ms(start_time))
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


@router.get("/teams-config", response_model=APIResponse)
async def get_teams_config(tracker: MatchTrackerApp = Depends(get_tracker_app)):
    """Teams-Konfiguration plus Metadaten"""
    start_time = time.time()
    try:
        snapshot, metadata = await tracker.current_snapshot()
    except PersistenceError as e:
        return storage_error(e, start_time)

    return APIResponse(
        success=True,
        data={
            "config": snapshot.frontend_config() if snapshot else {},
            "metadata": metadata.model_dump(mode="json"),
        },
        execution_time_ms=_elapsed_ms(start_time),
    )


@router.get("/config")
async def get_config(tracker: MatchTrackerApp = Depends(get_tracker_app)):
    """Nur die Teams-Konfiguration im Frontend-Format (ohne Envelope)"""
    start_time = time.time()
    try:
        snapshot, _ = await tracker.current_snapshot()
    except PersistenceError as e:
        return storage_error(e, start_time)
    return snapshot.frontend_config() if snapshot else {}


@router.get("/metadata", response_model=APIResponse)
async def get_metadata(tracker: MatchTrackerApp = Depends(get_tracker_app)):
    """Metadaten und Ergebnis des letzten Laufs"""
    start_time = time.time()
    try:
        _, metadata = await tracker.current_snapshot()
    except PersistenceError as e:
        return storage_error(e, start_time)

    last_result = tracker.last_result
    return APIResponse(
        success=True,
        data={
            "metadata": metadata.model_dump(mode="json"),
            "last_result": last_result.model_dump(mode="json") if last_result else None,
        },
        execution_time_ms=_elapsed_ms(start_time),
    )


@router.get("/history", response_model=APIResponse)
async def get_history(tracker: MatchTrackerApp = Depends(get_tracker_app)):
    """Historie der gespeicherten Snapshots (älteste zuerst)"""
    start_time = time.time()
    try:
        history = await tracker.store.history()
    except PersistenceError as e:
        return storage_error(e, start_time)

    return APIResponse(
        success=True,
        data=[record.model_dump(mode="json") for record in history],
        execution_time_ms=_elapsed_ms(start_time),
    )
