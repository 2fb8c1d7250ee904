"""
Custom exceptions for the Thumbnail Service.
"""


class ThumbnailServiceException(Exception):
    """Base exception for all thumbnail service exceptions."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MalformedBlobPathError(ThumbnailServiceException):
    """Exception raised when a blob URL path cannot be mapped to a BlobData."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        message = f"Malformed blob path '{path}': {detail}"
        super().__init__(message)


class InvalidMimeTypeError(ThumbnailServiceException):
    """Exception raised when an upload's content type is not allowed."""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        message = f"Invalid MIME type {mime_type}"
        super().__init__(message)


class ImageValidationError(ThumbnailServiceException):
    """Exception raised when a byte stream does not decode as an image."""

    def __init__(self, detail: str = "Invalid image structure detected"):
        self.detail = detail
        super().__init__(detail)


class InvalidEventError(ThumbnailServiceException):
    """Exception raised when a trigger payload does not have the event shape."""

    def __init__(self, detail: str):
        self.detail = detail
        message = f"Invalid event payload: {detail}"
        super().__init__(message)


class StorageError(ThumbnailServiceException):
    """Exception raised when a storage operation fails."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        message = f"Storage error during {operation}: {detail}"
        super().__init__(message)


class BlobNotFoundError(StorageError):
    """Exception raised when a file does not exist in storage."""

    def __init__(self, operation: str, path: str):
        self.path = path
        super().__init__(operation, f"File not found: {path}")
