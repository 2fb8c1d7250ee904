"""
Account provisioning endpoints for the Thumbnail Service API.
"""

from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException, status

from thumbnail_service.api.dependencies import get_user_directory_service
from thumbnail_service.api.schemas import DirectoryProvisionResponse
from thumbnail_service.services.accounts.user_directory_service import UserDirectoryService

router = APIRouter()


@router.post("/{user_id}/directory", response_model=DirectoryProvisionResponse)
async def provision_user_directory(
    user_id: str,
    user_directory_service: UserDirectoryService = Depends(get_user_directory_service)
) -> Dict[str, Any]:
    """
    Create the upload directory for a new account and restrict it to its owner.
    """
    try:
        return await user_directory_service.provision(user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
