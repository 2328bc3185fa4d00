"""Retrying access to the Azure Files backend.

Every backend call goes through ``RetryingTransport._execute``, which
translates SDK exceptions into the ``StorageError`` hierarchy and then
asks the ``RetryPolicy`` whether the translated error is worth another
attempt. Only connection-level failures are; protocol errors such as
not-found or conflict surface on the first occurrence.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Optional, TypeVar

from azure.core.credentials import AzureNamedKeyCredential
from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    ServiceRequestError,
    ServiceResponseError,
)
from azure.storage.fileshare import ShareServiceClient

from .config import AzureFileDataStoreConfig
from .exceptions import (
    StorageConflictError,
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageRetryExhaustedError,
)

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Synchronous retry without backoff for a fixed set of error types."""

    max_attempts: int = 2
    retry_on: tuple[type[StorageError], ...] = (StorageConnectionError,)

    def should_retry(self, error: StorageError, attempt: int) -> bool:
        return isinstance(error, self.retry_on) and attempt < self.max_attempts


def translate_error(error: Exception, key: str | None = None) -> StorageError:
    """Map an Azure SDK (or socket) exception onto the StorageError hierarchy."""
    if isinstance(error, ResourceNotFoundError):
        return StorageNotFoundError(str(error), key=key, cause=error)
    if isinstance(error, ResourceExistsError):
        return StorageConflictError(str(error), key=key, cause=error)
    if isinstance(error, ClientAuthenticationError):
        return StoragePermissionError(str(error), key=key, cause=error)
    if isinstance(error, HttpResponseError) and error.status_code == 403:
        return StoragePermissionError(str(error), key=key, cause=error)
    if isinstance(error, (ServiceRequestError, ServiceResponseError, ConnectionError)):
        return StorageConnectionError(str(error), key=key, cause=error)
    return StorageError(str(error), key=key, cause=error)


def _join(directory: str, name: str) -> str:
    return f"{directory}/{name}" if directory else name


class RetryingTransport:
    """Owns the shared share-service client and wraps each backend operation."""

    def __init__(
        self,
        config: AzureFileDataStoreConfig,
        service_client: Optional[ShareServiceClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self._config = config
        self._service_client = service_client
        self._retry_policy = retry_policy or RetryPolicy(max_attempts=config.max_attempts)
        self._client_lock = threading.Lock()
        self._container_lock = threading.Lock()
        self._container_ready = False

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def client(self) -> ShareServiceClient:
        """The shared service client, created on first use."""
        if self._service_client is None:
            with self._client_lock:
                if self._service_client is None:
                    self._service_client = self._create_client()
        return self._service_client

    def _create_client(self) -> ShareServiceClient:
        # The transport's RetryPolicy is the only retry layer.
        if self._config.connection_string:
            log.debug("Creating ShareServiceClient from connection string")
            return ShareServiceClient.from_connection_string(
                self._config.connection_string, retry_total=0
            )
        log.debug("Creating ShareServiceClient for %s", self._config.account_url)
        return ShareServiceClient(
            account_url=self._config.account_url,
            credential=AzureNamedKeyCredential(
                self._config.account_name, self._config.access_key
            ),
            retry_total=0,
        )

    def _share(self):
        return self.client.get_share_client(self._config.container_name)

    def _execute(self, description: str, key: str | None, func: Callable[[], T]) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                return func()
            except (AzureError, ConnectionError) as e:
                error = translate_error(e, key)
            if self._retry_policy.should_retry(error, attempt):
                log.warning(
                    "%s failed on attempt %d/%d, retrying: %s",
                    description,
                    attempt,
                    self._retry_policy.max_attempts,
                    error,
                )
                continue
            if isinstance(error, self._retry_policy.retry_on):
                log.error("%s failed after %d attempts: %s", description, attempt, error)
                raise StorageRetryExhaustedError(
                    f"{description} failed after {attempt} attempts: {error}",
                    key=key,
                    cause=error.cause,
                    attempts=attempt,
                ) from error.cause
            raise error from error.cause

    def create_file(
        self,
        directory: str,
        name: str,
        size: int,
        stream: BinaryIO,
        metadata: dict[str, str] | None = None,
    ) -> None:
        path = _join(directory, name)
        start = stream.tell() if stream.seekable() else None

        def upload() -> None:
            if start is not None:
                stream.seek(start)
            kwargs: dict[str, Any] = {"length": size}
            if metadata is not None:
                kwargs["metadata"] = metadata
            self._share().get_file_client(path).upload_file(stream, **kwargs)

        log.debug("Uploading %s (%d bytes)", path, size)
        self._execute(f"create_file {path}", path, upload)

    def get_file(self, directory: str, name: str) -> tuple[dict[str, str], bytes]:
        """Download a file and return (inline metadata, body)."""
        path = _join(directory, name)

        def download() -> tuple[dict[str, str], bytes]:
            downloader = self._share().get_file_client(path).download_file()
            body = downloader.readall()
            return dict(downloader.properties.metadata or {}), body

        return self._execute(f"get_file {path}", path, download)

    def set_file_metadata(self, directory: str, name: str, metadata: dict[str, str]) -> None:
        path = _join(directory, name)
        self._execute(
            f"set_file_metadata {path}",
            path,
            lambda: self._share().get_file_client(path).set_file_metadata(metadata=metadata),
        )

    def delete_file(self, directory: str, name: str) -> None:
        path = _join(directory, name)
        self._execute(
            f"delete_file {path}",
            path,
            lambda: self._share().get_file_client(path).delete_file(),
        )

    def create_directory(self, path: str) -> None:
        self._execute(
            f"create_directory {path}",
            path,
            lambda: self._share().get_directory_client(path).create_directory(),
        )

    def get_container_properties(self):
        name = self._config.container_name
        return self._execute(
            f"get_container_properties {name}",
            name,
            lambda: self._share().get_share_properties(),
        )

    def create_container(self) -> None:
        name = self._config.container_name
        self._execute(
            f"create_container {name}",
            name,
            lambda: self._share().create_share(),
        )

    def ensure_container(self) -> None:
        """Create the share if it is missing. Checked once per transport."""
        if self._container_ready:
            return
        with self._container_lock:
            if self._container_ready:
                return
            try:
                self.get_container_properties()
            except StorageNotFoundError:
                log.info("Share '%s' not found, creating it", self._config.container_name)
                try:
                    self.create_container()
                except StorageConflictError:
                    log.debug("Share '%s' was created concurrently", self._config.container_name)
            self._container_ready = True
