"""
Health check endpoints for the Thumbnail Service API.
"""

from typing import Dict, Any
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from thumbnail_service.api.dependencies import get_storage_service
from thumbnail_service.core.logging import logger
from thumbnail_service.config import get_settings
from thumbnail_service.services.storage.storage_service import StorageService

settings = get_settings()
router = APIRouter()


@router.get("")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns service status and timestamp.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION
    }


@router.get("/storage")
async def storage_health(
    storage_service: StorageService = Depends(get_storage_service)
) -> Dict[str, Any]:
    """
    Check health of storage service.
    """
    try:
        return await storage_service.check_health()
    except Exception as e:
        logger.error(f"Storage health check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage service is not healthy"
        )
