"""
User directory provisioning for the Thumbnail Service.
"""

from typing import Dict, Any, Optional

from thumbnail_service.config import get_settings
from thumbnail_service.core.logging import logger
from thumbnail_service.services.storage.storage_service import StorageService

settings = get_settings()

USER_DIRECTORY_TEMPLATE = "users/{user_id}"


def build_user_acl(user_id: str) -> str:
    """Read/write for the owner, nothing for everyone else."""
    return f"user:{user_id}:rw-,other::---"


class UserDirectoryService:
    """
    Creates the per-user directory new accounts upload into and locks it
    down to its owner.
    """

    def __init__(self, storage_service: StorageService, container: Optional[str] = None):
        self.storage_service = storage_service
        self.container = container or settings.USER_CONTAINER_NAME

    async def provision(self, user_id: str) -> Dict[str, Any]:
        """
        Create users/<user_id> if missing and apply the owner ACL recursively.

        Args:
            user_id: Identifier of the new account

        Returns:
            Container, path, whether the directory was created and the ACL applied

        Raises:
            ValueError: If user_id is empty or contains a path separator
            StorageError: If the directory or ACL cannot be written
        """
        if not user_id or "/" in user_id:
            raise ValueError(f"Invalid user id: {user_id!r}")

        path = USER_DIRECTORY_TEMPLATE.format(user_id=user_id)
        created = False

        if not await self.storage_service.directory_exists(self.container, path):
            await self.storage_service.create_directory(self.container, path)
            created = True
            logger.info(f"Created directory {self.container}/{path}")

        acl = build_user_acl(user_id)
        await self.storage_service.set_access_control_recursive(self.container, path, acl)
        logger.info(f"Applied ACL to {self.container}/{path}")

        return {
            "container": self.container,
            "path": path,
            "created": created,
            "acl": acl
        }
