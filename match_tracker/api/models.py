"""
API Models
Pydantic Models für API Responses
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..domain.models import utcnow


class APIResponse(BaseModel):
    """Standard API Response Model"""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    message: Optional[str] = None
    execution_time_ms: Optional[float] = None
    timestamp: datetime = Field(default_factory=utcnow)


class HealthResponse(BaseModel):
    """Health check response model"""

    status: str
    message: str
    timestamp: datetime = Field(default_factory=utcnow)
