"""
Resolution of object metadata across its two storage generations.

Current objects carry their metadata inline, as Azure Files file
metadata. Older objects kept it in a YAML sidecar file named
``<basename>.meta.yml`` in the same directory. The resolver reads inline
metadata first, falls back to the sidecar when ``legacy_meta`` is on,
and backfills a minimal ``{"name": <basename>}`` mapping when neither
source has anything.
"""

import logging
from datetime import date
from typing import Any

import yaml

from .base import ReadResult
from .config import AzureFileDataStoreConfig
from .exceptions import MetadataHealError, StorageConnectionError, StorageError
from .paths import sidecar_path, split_path, strip_sidecar_suffix
from .transport import RetryingTransport

log = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool, date)


def parse_sidecar(raw: bytes | str) -> dict[str, str]:
    """Parse a sidecar document into a flat string mapping.

    Anything that is not a YAML mapping yields an empty dict. Non-scalar
    values are dropped; scalars are converted to strings because Azure
    file metadata only holds strings.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        document: Any = yaml.safe_load(text)
    except (UnicodeDecodeError, yaml.YAMLError) as e:
        log.warning("Ignoring unreadable sidecar metadata: %s", e)
        return {}

    if not isinstance(document, dict):
        return {}

    metadata: dict[str, str] = {}
    for key, value in document.items():
        if value is None or not isinstance(value, _SCALAR_TYPES):
            log.debug("Skipping non-scalar sidecar entry '%s'", key)
            continue
        metadata[str(key)] = str(value)
    return metadata


class MetadataResolver:
    """Reads, backfills and migrates metadata for stored objects."""

    def __init__(self, config: AzureFileDataStoreConfig, transport: RetryingTransport):
        self._config = config
        self._transport = transport

    def load_sidecar(self, path: str) -> dict[str, str]:
        """Return the legacy sidecar mapping for ``path``, or {} if there is none."""
        directory, filename = split_path(sidecar_path(path))
        try:
            _, raw = self._transport.get_file(directory, filename)
        except StorageConnectionError:
            raise
        except StorageError as e:
            log.debug("No sidecar metadata for %s: %s", path, e)
            return {}
        return parse_sidecar(raw)

    def _fetch(self, path: str) -> ReadResult:
        directory, filename = split_path(path)
        metadata, body = self._transport.get_file(directory, filename)
        if not metadata and self._config.legacy_meta:
            metadata = self.load_sidecar(path)
        return ReadResult(body, metadata)

    def resolve(self, path: str) -> ReadResult:
        """Return the body and metadata of ``path``, healing empty metadata once."""
        result = self._fetch(path)
        if result.metadata:
            return result

        directory, filename = split_path(path)
        log.info("Backfilling missing metadata for %s", path)
        try:
            self._transport.set_file_metadata(directory, filename, {"name": filename})
        except StorageError as e:
            raise MetadataHealError(
                f"Could not write default metadata for {path}", key=path, cause=e
            ) from e

        result = self._fetch(path)
        if not result.metadata:
            raise MetadataHealError(
                f"Metadata for {path} is still empty after backfilling", key=path
            )
        return result

    def migrate(self, path: str) -> bool:
        """Move sidecar metadata inline and delete the sidecar.

        Returns False without changing anything when metadata storage is
        disabled, when the object already has inline metadata, or when
        there is no sidecar to migrate.
        """
        if not self._config.store_meta:
            return False

        path = strip_sidecar_suffix(path)
        directory, filename = split_path(path)
        inline, _ = self._transport.get_file(directory, filename)
        if inline:
            return False

        legacy = self.load_sidecar(path)
        if not legacy:
            return False

        self._transport.set_file_metadata(directory, filename, legacy)
        sidecar_directory, sidecar_name = split_path(sidecar_path(path))
        self._transport.delete_file(sidecar_directory, sidecar_name)
        log.info("Migrated sidecar metadata for %s", path)
        return True
