"""
Azure Data Lake Storage (ADLS Gen2) implementation for the Thumbnail Service.
"""

from typing import Dict, Any, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.filedatalake import ContentSettings
from azure.storage.filedatalake.aio import DataLakeServiceClient

from thumbnail_service.config import get_settings
from thumbnail_service.core.logging import logger
from thumbnail_service.core.exceptions import StorageError, BlobNotFoundError
from thumbnail_service.api.schemas import FileProperties

settings = get_settings()


class DataLakeService:
    """
    Azure Data Lake implementation for storage operations.
    One service client is created per process and reused by every call;
    close() releases its transport.
    """

    def __init__(self, connection_string: Optional[str] = None, client: Optional[DataLakeServiceClient] = None):
        """Initialize the Data Lake service from a connection string or an existing client."""
        if client is None:
            client = DataLakeServiceClient.from_connection_string(
                connection_string or settings.STORAGE_CONNECTION_STRING
            )
        self.client = client
        logger.info(f"Using Data Lake account: {self.client.account_name}")

    def _file_client(self, container: str, path: str):
        return self.client.get_file_client(container, path)

    def _directory_client(self, container: str, path: str):
        return self.client.get_directory_client(container, path)

    async def get_properties(self, container: str, path: str) -> FileProperties:
        """
        Get the content type, size and metadata of a file.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If the request fails
        """
        try:
            properties = await self._file_client(container, path).get_file_properties()

            return FileProperties(
                content_type=properties.content_settings.content_type,
                size=properties.size or 0,
                metadata=dict(properties.metadata or {})
            )

        except ResourceNotFoundError:
            raise BlobNotFoundError("get_properties", f"{container}/{path}")

        except AzureError as e:
            logger.error(f"Error getting properties from Data Lake: {str(e)}")
            raise StorageError("get_properties", f"Failed to get properties from Data Lake: {str(e)}")

    async def read_file(self, container: str, path: str) -> bytes:
        """
        Download the full content of a file.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If the download fails
        """
        try:
            downloader = await self._file_client(container, path).download_file()
            return await downloader.readall()

        except ResourceNotFoundError:
            raise BlobNotFoundError("read_file", f"{container}/{path}")

        except AzureError as e:
            logger.error(f"Error downloading file from Data Lake: {str(e)}")
            raise StorageError("read_file", f"Failed to download file from Data Lake: {str(e)}")

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

        Raises:
            StorageError: If the upload fails
        """
        try:
            kwargs = {}
            if content_type:
                kwargs["content_settings"] = ContentSettings(content_type=content_type)

            await self._file_client(container, path).upload_data(content, overwrite=overwrite, **kwargs)

        except AzureError as e:
            logger.error(f"Error uploading file to Data Lake: {str(e)}")
            raise StorageError("upload_file", f"Failed to upload file to Data Lake: {str(e)}")

    async def delete_file(self, container: str, path: str) -> None:
        """
        Delete a file.

        Raises:
            BlobNotFoundError: If the file does not exist
            StorageError: If the delete fails
        """
        try:
            await self._file_client(container, path).delete_file()

        except ResourceNotFoundError:
            raise BlobNotFoundError("delete_file", f"{container}/{path}")

        except AzureError as e:
            logger.error(f"Error deleting file from Data Lake: {str(e)}")
            raise StorageError("delete_file", f"Failed to delete file from Data Lake: {str(e)}")

    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        """Set the content type header of an existing file."""
        try:
            await self._file_client(container, path).set_http_headers(
                content_settings=ContentSettings(content_type=content_type)
            )

        except ResourceNotFoundError:
            raise BlobNotFoundError("set_content_type", f"{container}/{path}")

        except AzureError as e:
            logger.error(f"Error setting content type in Data Lake: {str(e)}")
            raise StorageError("set_content_type", f"Failed to set content type: {str(e)}")

    async def set_metadata(self, container: str, path: str, metadata: Dict[str, str]) -> None:
        """Replace the metadata of an existing file."""
        try:
            await self._file_client(container, path).set_metadata(metadata)

        except ResourceNotFoundError:
            raise BlobNotFoundError("set_metadata", f"{container}/{path}")

        except AzureError as e:
            logger.error(f"Error setting metadata in Data Lake: {str(e)}")
            raise StorageError("set_metadata", f"Failed to set metadata: {str(e)}")

    async def file_exists(self, container: str, path: str) -> bool:
        try:
            return await self._file_client(container, path).exists()

        except AzureError as e:
            logger.error(f"Error checking file existence in Data Lake: {str(e)}")
            raise StorageError("file_exists", f"Failed to check file existence: {str(e)}")

    async def directory_exists(self, container: str, path: str) -> bool:
        try:
            return await self._directory_client(container, path).exists()

        except AzureError as e:
            logger.error(f"Error checking directory existence in Data Lake: {str(e)}")
            raise StorageError("directory_exists", f"Failed to check directory existence: {str(e)}")

    async def create_directory(self, container: str, path: str) -> None:
        """Create a directory (and missing parents)."""
        try:
            await self._directory_client(container, path).create_directory()

        except AzureError as e:
            logger.error(f"Error creating directory in Data Lake: {str(e)}")
            raise StorageError("create_directory", f"Failed to create directory: {str(e)}")

    async def set_access_control_recursive(self, container: str, path: str, acl: str) -> None:
        """
        Apply a POSIX ACL to a directory and everything below it.

        Raises:
            StorageError: If the request fails or any entry could not be updated
        """
        try:
            result = await self._directory_client(container, path).set_access_control_recursive(acl=acl)

        except ResourceNotFoundError:
            raise BlobNotFoundError("set_access_control_recursive", f"{container}/{path}")

        except AzureError as e:
            logger.error(f"Error setting access control in Data Lake: {str(e)}")
            raise StorageError("set_access_control_recursive", f"Failed to set access control: {str(e)}")

        counters = result.counters
        logger.info(
            f"Access control applied to {container}/{path}: "
            f"{counters.directories_successful} directories, {counters.files_successful} files, "
            f"{counters.failure_count} failures"
        )
        if counters.failure_count:
            raise StorageError(
                "set_access_control_recursive",
                f"{counters.failure_count} entries under {container}/{path} could not be updated"
            )

    async def check_health(self) -> Dict[str, Any]:
        """
        Check the health of the Data Lake service.

        Raises:
            StorageError: If the account cannot be reached
        """
        try:
            await self.client.get_service_properties()
            return {
                "backend": "datalake",
                "account": self.client.account_name,
                "reachable": True
            }

        except AzureError as e:
            logger.error(f"Data Lake health check failed: {str(e)}")
            raise StorageError("check_health", f"Data Lake health check failed: {str(e)}")

    async def close(self) -> None:
        await self.client.close()
