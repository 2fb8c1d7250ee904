"""
Storage service for the Thumbnail Service.
This is a facade that abstracts the underlying storage implementation.
"""

from typing import Dict, Any, Optional, Union

from thumbnail_service.config import get_settings
from thumbnail_service.core.logging import logger
from thumbnail_service.api.schemas import FileProperties
from thumbnail_service.services.storage.datalake_service import DataLakeService
from thumbnail_service.services.storage.local_service import LocalService

settings = get_settings()


class StorageService:
    """
    Service for handling storage operations.
    This service provides a unified interface for different storage backends.
    Every path is addressed by container (file system) and a path inside it.
    """

    def __init__(self, backend: Optional[Union[DataLakeService, LocalService]] = None):
        """Initialize the storage service with appropriate backend."""
        if backend is not None:
            self.storage = backend
        # Use local storage for development, Data Lake for production
        elif settings.DEV_MODE:
            self.storage = LocalService()
        else:
            self.storage = DataLakeService()

        logger.debug(f"Storage backend: {type(self.storage).__name__}")

    async def get_properties(self, container: str, path: str) -> FileProperties:
        """
        Get the properties of a file.

        Args:
            container: Container (file system) name
            path: Path inside the container

        Returns:
            Content type, size and metadata of the file

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If there's an error reading the properties
        """
        return await self.storage.get_properties(container, path)

    async def read_file(self, container: str, path: str) -> bytes:
        """
        Read the full content of a file into memory.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If there's an error reading the file
        """
        return await self.storage.read_file(container, path)

    async def delete_file(self, container: str, path: str) -> None:
        """
        Delete a file.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If there's an error deleting the file
        """
        await self.storage.delete_file(container, path)
        logger.info(f"Deleted {container}/{path}")

    async def upload_file(
        self,
        container: str,
        path: str,
        content: bytes,
        overwrite: bool = False,
        content_type: Optional[str] = None
    ) -> None:
        """
        Upload a file.

        Args:
            container: Container (file system) name
            path: Path inside the container
            content: File content as bytes
            overwrite: Replace an existing file instead of failing
            content_type: Content type to store with the file (optional)

        Raises:
            StorageError: If there's an error uploading the file
        """
        await self.storage.upload_file(container, path, content, overwrite=overwrite, content_type=content_type)
        logger.info(f"Uploaded {len(content)} bytes to {container}/{path}")

    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        await self.storage.set_content_type(container, path, content_type)

    async def set_metadata(self, container: str, path: str, metadata: Dict[str, str]) -> None:
        await self.storage.set_metadata(container, path, metadata)

    async def file_exists(self, container: str, path: str) -> bool:
        return await self.storage.file_exists(container, path)

    async def directory_exists(self, container: str, path: str) -> bool:
        return await self.storage.directory_exists(container, path)

    async def create_directory(self, container: str, path: str) -> None:
        await self.storage.create_directory(container, path)

    async def set_access_control_recursive(self, container: str, path: str, acl: str) -> None:
        await self.storage.set_access_control_recursive(container, path, acl)

    async def check_health(self) -> Dict[str, Any]:
        return await self.storage.check_health()

    async def close(self) -> None:
        """Release the backend's client handles."""
        await self.storage.close()
