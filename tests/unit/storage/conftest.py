"""In-memory stand-ins for the azure-storage-file-share client surface."""

from types import SimpleNamespace

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError, ServiceRequestError

from azure_file_datastore.config import AzureFileDataStoreConfig
from azure_file_datastore.datastore import AzureFileDataStore
from azure_file_datastore.transport import RetryingTransport


class FakeFileClient:
    def __init__(self, share: "FakeShareClient", path: str):
        self._share = share
        self._path = path

    def upload_file(self, data, length=None, metadata=None):
        parent = self._path.rpartition("/")[0]
        if parent and parent not in self._share.directories:
            raise ResourceNotFoundError(f"ParentNotFound: {parent}")
        body = data.read() if hasattr(data, "read") else bytes(data)
        self._share.files[self._path] = {"body": body, "metadata": dict(metadata or {})}

    def download_file(self):
        if self._path in self._share.unreachable:
            raise ServiceRequestError(f"Connection reset: {self._path}")
        entry = self._entry()
        body = entry["body"]
        return SimpleNamespace(
            readall=lambda: body,
            properties=SimpleNamespace(metadata=dict(entry["metadata"])),
        )

    def set_file_metadata(self, metadata=None):
        self._entry()["metadata"] = dict(metadata or {})

    def delete_file(self):
        self._entry()
        del self._share.files[self._path]

    def _entry(self):
        if self._path not in self._share.files:
            raise ResourceNotFoundError(f"ResourceNotFound: {self._path}")
        return self._share.files[self._path]


class FakeDirectoryClient:
    def __init__(self, share: "FakeShareClient", path: str):
        self._share = share
        self._path = path

    def create_directory(self):
        self._share.directory_calls.append(self._path)
        parent = self._path.rpartition("/")[0]
        if parent and parent not in self._share.directories:
            raise ResourceNotFoundError(f"ParentNotFound: {parent}")
        if self._path in self._share.directories:
            raise ResourceExistsError(f"ResourceAlreadyExists: {self._path}")
        self._share.directories.add(self._path)


class FakeShareClient:
    def __init__(self, exists: bool = True):
        self.exists = exists
        self.files: dict[str, dict] = {}
        self.directories: set[str] = set()
        self.directory_calls: list[str] = []
        self.unreachable: set[str] = set()

    def get_share_properties(self):
        if not self.exists:
            raise ResourceNotFoundError("ShareNotFound")
        return {"name": "attachments"}

    def create_share(self):
        if self.exists:
            raise ResourceExistsError("ShareAlreadyExists")
        self.exists = True

    def get_directory_client(self, path):
        return FakeDirectoryClient(self, path)

    def get_file_client(self, path):
        return FakeFileClient(self, path)

    def put(self, path: str, body: bytes, metadata: dict | None = None) -> None:
        """Seed a file directly, bypassing directory checks."""
        self.files[path] = {"body": body, "metadata": dict(metadata or {})}


class FakeShareServiceClient:
    def __init__(self, share: FakeShareClient):
        self.share = share
        self.requested_shares: list[str] = []

    def get_share_client(self, share_name):
        self.requested_shares.append(share_name)
        return self.share


def make_config(**overrides) -> AzureFileDataStoreConfig:
    settings = {
        "account_name": "myaccount",
        "access_key": "c2VjcmV0",
        "container_name": "attachments",
    }
    settings.update(overrides)
    return AzureFileDataStoreConfig(**settings)


@pytest.fixture()
def share() -> FakeShareClient:
    return FakeShareClient()


@pytest.fixture()
def service(share) -> FakeShareServiceClient:
    return FakeShareServiceClient(share)


@pytest.fixture()
def config() -> AzureFileDataStoreConfig:
    return make_config()


@pytest.fixture()
def transport(config, service) -> RetryingTransport:
    return RetryingTransport(config, service_client=service)


@pytest.fixture()
def store(config, transport) -> AzureFileDataStore:
    return AzureFileDataStore(config, transport=transport)


@pytest.fixture()
def make_store(service):
    """Build a datastore over the shared fake service with config overrides."""

    def _make(**overrides) -> AzureFileDataStore:
        cfg = make_config(**overrides)
        return AzureFileDataStore(cfg, transport=RetryingTransport(cfg, service_client=service))

    return _make


@pytest.fixture()
def config_factory():
    return make_config
