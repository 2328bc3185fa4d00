"""Azure Files datastore for attachment libraries."""

from .base import Content, ContentLike, DataStore, ReadResult
from .config import AzureFileDataStoreConfig
from .datastore import AzureFileDataStore
from .exceptions import (
    MetadataHealError,
    StorageConflictError,
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageRetryExhaustedError,
)
from .factory import create_data_store, get_data_store_class, register_data_store
from .transport import RetryingTransport, RetryPolicy

__all__ = [
    "AzureFileDataStore",
    "AzureFileDataStoreConfig",
    "Content",
    "ContentLike",
    "DataStore",
    "ReadResult",
    "RetryingTransport",
    "RetryPolicy",
    "StorageError",
    "StorageNotFoundError",
    "StorageConflictError",
    "StoragePermissionError",
    "StorageConnectionError",
    "StorageRetryExhaustedError",
    "MetadataHealError",
    "create_data_store",
    "get_data_store_class",
    "register_data_store",
]
