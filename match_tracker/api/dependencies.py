"""
API Dependencies
Dependency Injection für FastAPI
"""

from fastapi import HTTPException, Request

from ..apps.tracker_app import MatchTrackerApp


async def get_tracker_app(request: Request) -> MatchTrackerApp:
    """Dependency für die MatchTrackerApp (geteilt über App-Lebenszyklus)"""
    tracker_app = getattr(request.app.state, "tracker_app", None)
    if tracker_app is None:
        raise HTTPException(status_code=503, detail="Tracker not initialized")
    return tracker_app
