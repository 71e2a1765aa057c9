"""Environment configuration: API credentials and gateway selection."""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from latitude_sdk.constants import (
    API_VERSION,
    DEFAULT_GATEWAY_HOST,
    HEAD_COMMIT,
    LOCAL_GATEWAY_HOST,
    LOCAL_GATEWAY_PORT,
)

_LOCAL_ENVIRONMENTS = frozenset({"development", "local"})


class GatewayConfig(BaseModel):
    """Where the Latitude gateway lives."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_GATEWAY_HOST
    port: int | None = None
    ssl: bool = True

    @property
    def base_url(self) -> str:
        """``http[s]://host[:port]/api/v3``."""
        scheme = "https" if self.ssl else "http"
        port = f":{self.port}" if self.port else ""
        return f"{scheme}://{self.host}{port}/api/{API_VERSION}"


class LatitudeSettings(BaseSettings):
    """SDK settings read from the process environment.

    The gateway defaults to production (``gateway.latitude.so`` over TLS).
    Local development is opt-in: ``LATITUDE_ENV=development|local`` or
    ``GATEWAY_HOSTNAME=localhost`` switch the defaults to
    ``localhost:8787`` without TLS.  ``GATEWAY_PORT`` and ``GATEWAY_SSL``
    override either default; a non-numeric port is ignored.
    """

    api_key: str | None = Field(default=None, alias="LATITUDE_API_KEY")
    project_id: int | None = Field(default=None, alias="LATITUDE_PROJECT_ID")
    version_uuid: str = Field(default=HEAD_COMMIT, alias="LATITUDE_VERSION_UUID")
    environment: str | None = Field(default=None, alias="LATITUDE_ENV")

    gateway_hostname: str | None = Field(default=None, alias="GATEWAY_HOSTNAME")
    gateway_port: str | None = Field(default=None, alias="GATEWAY_PORT")
    gateway_ssl: str | None = Field(default=None, alias="GATEWAY_SSL")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_local(self) -> bool:
        return (self.environment or "").lower() in _LOCAL_ENVIRONMENTS or (
            self.gateway_hostname == LOCAL_GATEWAY_HOST
        )

    def gateway(self) -> GatewayConfig:
        """Resolve the effective gateway from the environment overrides."""
        local = self.is_local
        default_host = LOCAL_GATEWAY_HOST if local else DEFAULT_GATEWAY_HOST
        default_port = LOCAL_GATEWAY_PORT if local else None

        port: int | None = default_port
        if self.gateway_port:
            port = int(self.gateway_port) if self.gateway_port.strip().isdigit() else None

        ssl = not local
        if self.gateway_ssl == "false":
            ssl = False
        elif self.gateway_ssl == "true":
            ssl = True

        return GatewayConfig(host=self.gateway_hostname or default_host, port=port or None, ssl=ssl)


@lru_cache
def get_settings() -> LatitudeSettings:
    """Return the process-wide settings, read once."""
    return LatitudeSettings()
