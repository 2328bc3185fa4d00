"""Exception hierarchy for the Azure Files datastore."""


class StorageError(Exception):
    """Base exception for all datastore operations."""

    def __init__(self, message: str, key: str | None = None, cause: Exception | None = None):
        self.key = key
        self.cause = cause
        super().__init__(message)


class StorageNotFoundError(StorageError):
    """Raised when a file, directory or share does not exist."""


class StorageConflictError(StorageError):
    """Raised when the resource being created already exists."""


class StoragePermissionError(StorageError):
    """Raised when credentials are invalid or access is denied."""


class StorageConnectionError(StorageError):
    """Raised when the storage backend is unreachable."""


class StorageRetryExhaustedError(StorageConnectionError):
    """Raised when a transient failure persists through every allowed attempt."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        cause: Exception | None = None,
        attempts: int = 0,
    ):
        self.attempts = attempts
        super().__init__(message, key=key, cause=cause)


class MetadataHealError(StorageError):
    """Raised when missing inline metadata could not be backfilled."""
