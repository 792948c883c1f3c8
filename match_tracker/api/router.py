"""
Aggregated API router.
"""

from fastapi import APIRouter

from .endpoints import admin, snapshot

api_router = APIRouter()

# Register endpoint routers here to keep create_fastapi_app clean
api_router.include_router(snapshot.router, tags=["snapshot"])
api_router.include_router(admin.router, tags=["admin"])
