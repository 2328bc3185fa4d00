"""Factory and name registry for datastores."""

import logging
import os
from typing import Any

from .base import DataStore
from .config import AzureFileDataStoreConfig
from .datastore import AzureFileDataStore

log = logging.getLogger(__name__)

_REGISTRY: dict[str, type[DataStore]] = {}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def register_data_store(name: str, cls: type[DataStore]) -> None:
    """Make a datastore class available under ``name``."""
    _REGISTRY[name.lower()] = cls


def get_data_store_class(name: str) -> type[DataStore]:
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported datastore: {name!r}. Supported: {', '.join(sorted(_REGISTRY))}"
        ) from None


register_data_store("azure", AzureFileDataStore)


def _env_flag(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in _TRUE_VALUES


def create_data_store(container_name: str | None = None, **overrides: Any) -> AzureFileDataStore:
    """Create an AzureFileDataStore from environment variables.

    Keyword overrides take precedence over the environment, and an
    explicit None override clears a value set there. Options unset in
    both keep the defaults of AzureFileDataStoreConfig.

    Args:
        container_name: File share name. Falls back to AZURE_FILE_SHARE_NAME.
        **overrides: Any other AzureFileDataStoreConfig field.

    Raises:
        ValueError: If no container name is available.
        pydantic.ValidationError: If the resulting configuration is invalid.
    """
    resolved_container = container_name or os.getenv("AZURE_FILE_SHARE_NAME")
    if not resolved_container:
        raise ValueError("Container name required: set AZURE_FILE_SHARE_NAME or pass container_name")

    env_settings: dict[str, Any] = {
        "account_name": os.getenv("AZURE_STORAGE_ACCOUNT_NAME"),
        "access_key": os.getenv("AZURE_STORAGE_ACCOUNT_KEY"),
        "connection_string": os.getenv("AZURE_STORAGE_CONNECTION_STRING"),
        "root_path": os.getenv("AZURE_FILE_ROOT_PATH"),
        "url_scheme": os.getenv("AZURE_FILE_URL_SCHEME"),
        "url_host": os.getenv("AZURE_FILE_URL_HOST"),
        "store_meta": _env_flag("AZURE_FILE_STORE_META"),
        "legacy_meta": _env_flag("AZURE_FILE_LEGACY_META"),
    }
    settings = {k: v for k, v in env_settings.items() if v is not None}
    settings.update(overrides)
    settings["container_name"] = resolved_container

    config = AzureFileDataStoreConfig(**settings)
    log.debug("Creating AzureFileDataStore for share '%s'", resolved_container)
    return AzureFileDataStore(config)
