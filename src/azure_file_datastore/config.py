"""Configuration model for the Azure Files datastore."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AzureFileDataStoreConfig(BaseModel):
    """Construction-time settings for an AzureFileDataStore.

    Credentials are given either as a connection string or as an
    account name plus access key. The model is frozen: a datastore
    never changes its configuration after it is built.
    """

    model_config = ConfigDict(frozen=True)

    account_name: Optional[str] = Field(
        default=None, description="Storage account name."
    )
    access_key: Optional[str] = Field(
        default=None, description="Storage account shared access key."
    )
    connection_string: Optional[str] = Field(
        default=None,
        description="Full connection string, used instead of account_name + access_key.",
    )
    container_name: str = Field(
        ..., description="File share that holds every stored object."
    )
    root_path: Optional[str] = Field(
        default=None,
        description="Directory prefix inside the share; not part of the uid.",
    )
    url_scheme: str = Field(default="http", description="Scheme used by url_for.")
    url_host: Optional[str] = Field(
        default=None,
        description="Host used by url_for (defaults to <account>.file.core.windows.net).",
    )
    store_meta: bool = Field(
        default=True, description="Attach content metadata to uploaded files."
    )
    legacy_meta: bool = Field(
        default=False,
        description="Fall back to <name>.meta.yml sidecar files when inline metadata is empty.",
    )
    create_container: bool = Field(
        default=True,
        description="Create the share on first write if it does not exist.",
    )
    max_attempts: int = Field(
        default=2,
        ge=1,
        description="Total attempts for a backend call that fails with a connection error.",
    )

    @model_validator(mode="after")
    def _check_credentials(self) -> "AzureFileDataStoreConfig":
        if self.connection_string:
            return self
        if not (self.account_name and self.access_key):
            raise ValueError(
                "Azure Files requires either connection_string or account_name + access_key"
            )
        return self

    @property
    def resolved_account_name(self) -> Optional[str]:
        """Account name, taken from the connection string when not set directly."""
        if self.account_name:
            return self.account_name
        if not self.connection_string:
            return None
        for part in self.connection_string.split(";"):
            key, _, value = part.partition("=")
            if key.strip().lower() == "accountname" and value.strip():
                return value.strip()
        return None

    @property
    def account_url(self) -> str:
        return f"https://{self.resolved_account_name}.file.core.windows.net"

    @property
    def default_url_host(self) -> str:
        if self.url_host:
            return self.url_host
        account_name = self.resolved_account_name
        if not account_name:
            raise ValueError(
                "url_host is required when the connection string has no AccountName"
            )
        return f"{account_name}.file.core.windows.net"
