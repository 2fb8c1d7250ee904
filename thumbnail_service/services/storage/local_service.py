"""
Local filesystem implementation for the Thumbnail Service.
Used primarily for development and testing.
"""

from typing import Dict, Any, Optional
import os
import json
import mimetypes
from pathlib import Path
import aiofiles
import aiofiles.os

from thumbnail_service.config import get_settings
from thumbnail_service.core.logging import logger
from thumbnail_service.core.exceptions import StorageError, BlobNotFoundError
from thumbnail_service.api.schemas import FileProperties

settings = get_settings()

PROPERTIES_DIR = ".properties"


class LocalService:
    """
    Local filesystem implementation for storage operations.
    Containers are directories under the base directory; content type and
    metadata live in JSON sidecar files under a hidden properties directory.
    """

    def __init__(self, base_dir: Optional[str] = None):
        """Initialize the local service with base directory."""
        self.base_dir = Path(base_dir or settings.LOCAL_STORAGE_ROOT).resolve()
        self.properties_dir = self.base_dir / PROPERTIES_DIR

        # Create directories if they don't exist
        os.makedirs(self.properties_dir, exist_ok=True)

    def _file_path(self, container: str, path: str) -> Path:
        full_path = (self.base_dir / container / path.lstrip("/")).resolve()
        if self.base_dir not in full_path.parents:
            raise StorageError("resolve_path", f"Path escapes storage root: {container}/{path}")
        return full_path

    def _properties_path(self, container: str, path: str) -> Path:
        full_path = (self.properties_dir / container / f"{path.lstrip('/')}.json").resolve()
        if self.properties_dir not in full_path.parents:
            raise StorageError("resolve_path", f"Path escapes storage root: {container}/{path}")
        return full_path

    async def _read_properties(self, container: str, path: str) -> Dict[str, Any]:
        properties_path = self._properties_path(container, path)
        if not os.path.exists(properties_path):
            return {}
        async with aiofiles.open(properties_path, "r") as f:
            return json.loads(await f.read())

    async def _write_properties(self, container: str, path: str, properties: Dict[str, Any]) -> None:
        properties_path = self._properties_path(container, path)
        os.makedirs(os.path.dirname(properties_path), exist_ok=True)
        async with aiofiles.open(properties_path, "w") as f:
            await f.write(json.dumps(properties, indent=2))

    async def get_properties(self, container: str, path: str) -> FileProperties:
        """
        Get the content type, size and metadata of a file.

        Files written without an explicit content type report the type
        guessed from their extension.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If the properties cannot be read
        """
        full_path = self._file_path(container, path)
        if not os.path.isfile(full_path):
            raise BlobNotFoundError("get_properties", f"{container}/{path}")

        try:
            properties = await self._read_properties(container, path)
            content_type = properties.get("content_type") or mimetypes.guess_type(full_path.name)[0]
            stat = await aiofiles.os.stat(full_path)

            return FileProperties(
                content_type=content_type,
                size=stat.st_size,
                metadata=properties.get("metadata", {})
            )

        except json.JSONDecodeError as e:
            logger.error(f"Error parsing properties JSON: {str(e)}")
            raise StorageError("get_properties", f"Failed to parse properties JSON: {str(e)}")

        except Exception as e:
            logger.error(f"Error getting properties from local filesystem: {str(e)}")
            raise StorageError("get_properties", f"Failed to get properties: {str(e)}")

    async def read_file(self, container: str, path: str) -> bytes:
        """
        Read the full content of a file.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If there's an error reading the file
        """
        full_path = self._file_path(container, path)
        try:
            async with aiofiles.open(full_path, "rb") as f:
                return await f.read()

        except FileNotFoundError:
            raise BlobNotFoundError("read_file", f"{container}/{path}")

        except Exception as e:
            logger.error(f"Error reading file from local filesystem: {str(e)}")
            raise StorageError("read_file", f"Failed to read file: {str(e)}")

    async def upload_file(
        self,
        container: str,
        path: str,
        content: bytes,
        overwrite: bool = False,
        content_type: Optional[str] = None
    ) -> None:
        """
        Write a file, creating parent directories as needed.

        Raises:
            StorageError: If the file exists and overwrite is False, or the write fails
        """
        full_path = self._file_path(container, path)
        if not overwrite and os.path.exists(full_path):
            raise StorageError("upload_file", f"File already exists: {container}/{path}")

        try:
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            async with aiofiles.open(full_path, "wb") as f:
                await f.write(content)

            # A fresh upload starts without the previous file's properties
            await self._write_properties(container, path, {"content_type": content_type, "metadata": {}})

        except Exception as e:
            logger.error(f"Error saving file to local filesystem: {str(e)}")
            raise StorageError("upload_file", f"Failed to save file: {str(e)}")

    async def delete_file(self, container: str, path: str) -> None:
        """
        Delete a file and its properties.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If there's an error deleting the file
        """
        full_path = self._file_path(container, path)
        try:
            await aiofiles.os.remove(full_path)

            properties_path = self._properties_path(container, path)
            if os.path.exists(properties_path):
                await aiofiles.os.remove(properties_path)

        except FileNotFoundError:
            raise BlobNotFoundError("delete_file", f"{container}/{path}")

        except Exception as e:
            logger.error(f"Error deleting file from local filesystem: {str(e)}")
            raise StorageError("delete_file", f"Failed to delete file: {str(e)}")

    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        """Set the content type header of an existing file."""
        if not os.path.isfile(self._file_path(container, path)):
            raise BlobNotFoundError("set_content_type", f"{container}/{path}")

        properties = await self._read_properties(container, path)
        properties["content_type"] = content_type
        await self._write_properties(container, path, properties)

    async def set_metadata(self, container: str, path: str, metadata: Dict[str, str]) -> None:
        """Replace the metadata of an existing file."""
        if not os.path.isfile(self._file_path(container, path)):
            raise BlobNotFoundError("set_metadata", f"{container}/{path}")

        properties = await self._read_properties(container, path)
        properties["metadata"] = dict(metadata)
        await self._write_properties(container, path, properties)

    async def file_exists(self, container: str, path: str) -> bool:
        return os.path.isfile(self._file_path(container, path))

    async def directory_exists(self, container: str, path: str) -> bool:
        return os.path.isdir(self._file_path(container, path))

    async def create_directory(self, container: str, path: str) -> None:
        """
        Create a directory.

        Raises:
            StorageError: If there's an error creating the directory
        """
        try:
            os.makedirs(self._file_path(container, path), exist_ok=True)

        except Exception as e:
            logger.error(f"Error creating directory in local filesystem: {str(e)}")
            raise StorageError("create_directory", f"Failed to create directory: {str(e)}")

    async def set_access_control_recursive(self, container: str, path: str, acl: str) -> None:
        """
        Record an ACL for a directory.
        The local filesystem has no POSIX ACL support, so the ACL is only stored
        in the directory's properties file.
        """
        if not os.path.isdir(self._file_path(container, path)):
            raise BlobNotFoundError("set_access_control_recursive", f"{container}/{path}")

        await self._write_properties(container, path.rstrip("/") + "/", {"acl": acl})

    async def get_access_control(self, container: str, path: str) -> Optional[str]:
        properties = await self._read_properties(container, path.rstrip("/") + "/")
        return properties.get("acl")

    async def check_health(self) -> Dict[str, Any]:
        """
        Check the health of the local storage service.

        Returns:
            Health information
        """
        try:
            return {
                "backend": "local",
                "path": str(self.base_dir),
                "exists": os.path.isdir(self.base_dir),
                "writable": os.access(self.base_dir, os.W_OK)
            }

        except Exception as e:
            logger.error(f"Local storage health check failed: {str(e)}")
            raise StorageError("check_health", f"Local storage health check failed: {str(e)}")

    async def close(self) -> None:
        """Nothing to release for the local filesystem."""
        return None
