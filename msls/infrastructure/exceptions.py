"""Infrastructure exceptions for object storage.

Storage errors extend MslsException so presentation can map them to HTTP
responses consistently.
"""

from msls.domain.exceptions import MslsException


class StorageException(MslsException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """Object not found in storage."""

    def __init__(self, key: str) -> None:
        super().__init__(f"File not found: {key}", "STORAGE_NOT_FOUND", {"key": key})


class StorageUploadError(StorageException):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {key}",
            "STORAGE_UPLOAD_ERROR",
            {"key": key, "reason": reason},
        )


class StorageDownloadError(StorageException):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to read file: {key}",
            "STORAGE_DOWNLOAD_ERROR",
            {"key": key, "reason": reason},
        )


class StorageDeleteError(StorageException):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {key}",
            "STORAGE_DELETE_ERROR",
            {"key": key, "reason": reason},
        )
