"""
Main router for the Thumbnail Service API.
This module includes all the API endpoints from various modules.
"""

from fastapi import APIRouter

from thumbnail_service.api.endpoints import accounts, events, health, thumbnails

# Create main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(thumbnails.router, prefix="/thumbnails", tags=["Thumbnails"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["Accounts"])
