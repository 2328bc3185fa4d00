"""Azure Files datastore for attachment libraries."""

import logging
from typing import Optional

from .base import ContentLike, DataStore, ReadResult
from .config import AzureFileDataStoreConfig
from .directories import DirectoryEnsurer
from .exceptions import StorageConnectionError, StorageError
from .metadata import MetadataResolver
from .paths import full_path, generate_uid, split_path
from .transport import RetryingTransport

log = logging.getLogger(__name__)


class AzureFileDataStore(DataStore):
    """
    Stores attachment content in an Azure Files share.

    Uids are relative paths such as ``2024/01/31/1x9k2m_report.pdf``.
    The backend path is the uid joined under ``root_path``; the root
    path is a deployment prefix and never part of the uid itself.
    """

    def __init__(
        self,
        config: AzureFileDataStoreConfig,
        transport: Optional[RetryingTransport] = None,
    ):
        self.config = config
        self.transport = transport or RetryingTransport(config)
        self._directories = DirectoryEnsurer(self.transport)
        self._metadata = MetadataResolver(config, self.transport)

    def _full_path(self, uid: str) -> str:
        return full_path(self.config.root_path, uid)

    def write(self, content: ContentLike) -> str:
        uid = generate_uid(content.name or "file")
        directory, filename = split_path(self._full_path(uid))

        if self.config.create_container:
            self.transport.ensure_container()
        self._directories.ensure("", directory)

        metadata = None
        if self.config.store_meta:
            metadata = {str(k): str(v) for k, v in (content.meta or {}).items()}

        with content.open() as stream:
            self.transport.create_file(directory, filename, content.size, stream, metadata)
        log.debug("Stored %s (%d bytes)", uid, content.size)
        return uid

    def read(self, uid: str) -> ReadResult:
        return self._metadata.resolve(self._full_path(uid))

    def update_metadata(self, uid: str) -> bool:
        return self._metadata.migrate(self._full_path(uid))

    def destroy(self, uid: str) -> bool:
        directory, filename = split_path(self._full_path(uid))
        try:
            self.transport.delete_file(directory, filename)
        except StorageConnectionError:
            raise
        except StorageError as e:
            log.warning("Could not delete %s: %s", uid, e)
            return False
        return True

    def url_for(self, uid: str, scheme: str | None = None, host: str | None = None) -> str:
        scheme = scheme or self.config.url_scheme
        host = host or self.config.default_url_host
        return f"{scheme}://{host}/{self.config.container_name}/{self._full_path(uid)}"
