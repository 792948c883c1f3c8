"""
Admin API Endpoints
Systemstatus und manuelles Auslösen eines Update-Laufs
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...apps.tracker_app import MatchTrackerApp
from ...data_collection.run_coordinator import RunAlreadyActiveError
from ...database.state_store import PersistenceError
from ...domain.models import RunResult
from ..dependencies import get_tracker_app
from ..models import APIResponse
from .snapshot import storage_error

router = APIRouter()
logger = logging.getLogger("admin_endpoint")


@router.get("/status", response_model=APIResponse)
async def get_status(tracker: MatchTrackerApp = Depends(get_tracker_app)):
    """Server-, Scheduler- und Speicherstatus"""
    start_time = time.time()
    status = await tracker.get_status()
    return APIResponse(success=True, data=status, execution_time_ms=(time.time() - start_time) * 1000)


@router.post("/update", response_model=APIResponse)
async def trigger_update(tracker: MatchTrackerApp = Depends(get_tracker_app)):
    """Startet sofort einen Update-Lauf und wartet auf das Ergebnis"""
    start_time = time.time()
    logger.info("Manual update requested via API")
    try:
        result = await tracker.run_update(trigger="api")
    except RunAlreadyActiveError as e:
        rejected = RunResult(success=False, message=str(e))
        body = APIResponse(
            success=False,
            data=rejected.model_dump(mode="json"),
            error=str(e),
            execution_time_ms=(time.time() - start_time) * 1000,
        )
        return JSONResponse(status_code=409, content=body.model_dump(mode="json"))
    except PersistenceError as e:
        return storage_error(e, start_time)

    return APIResponse(
        success=result.success,
        data=result.model_dump(mode="json"),
        error=result.error,
        message=result.message,
        execution_time_ms=(time.time() - start_time) * 1000,
    )
