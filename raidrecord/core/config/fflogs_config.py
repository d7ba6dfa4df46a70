"""
FFLogs API configuration for RaidRecord.

Credentials are read from the environment (or a .env-style config source via
pydantic-settings); nothing here is persisted by RaidRecord itself.
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from raidrecord.core.constants import (
    DEFAULT_REGION,
    FFLOGS_API_URL,
    FFLOGS_TOKEN_URL,
)


class FFLogsConfig(BaseSettings):
    """
    FFLogs client configuration.

    Environment Variables:
        RAIDRECORD_FFLOGS_CLIENT_ID=...
        RAIDRECORD_FFLOGS_CLIENT_SECRET=...
        RAIDRECORD_FFLOGS_REGION=KR
    """

    model_config = SettingsConfigDict(
        env_prefix="RAIDRECORD_FFLOGS_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    client_id: str | None = Field(default=None, description="FFLogs API client id")
    client_secret: SecretStr | None = Field(
        default=None, description="FFLogs API client secret"
    )

    api_url: str = Field(default=FFLOGS_API_URL, description="GraphQL endpoint")
    token_url: str = Field(default=FFLOGS_TOKEN_URL, description="OAuth token endpoint")
    region: str = Field(default=DEFAULT_REGION, description="Server region slug")

    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    token_refresh_margin: float = Field(
        default=3600.0,
        ge=0,
        description="Refresh the access token when it expires within this many seconds",
    )

    @field_validator("api_url", "token_url")
    def validate_url(cls, v: str) -> str:  # noqa: N805
        """Validate and normalize endpoint URLs."""
        v = v.rstrip("/")
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @field_validator("region")
    def validate_region(cls, v: str) -> str:  # noqa: N805
        """Region slugs are upper case on FFLogs."""
        return v.strip().upper()

    def is_configured(self) -> bool:
        """Check whether API credentials are present."""
        return bool(self.client_id) and self.client_secret is not None

    def get_client_secret(self) -> str:
        """Return the client secret as plain text (empty if unset)."""
        if self.client_secret is None:
            return ""
        return self.client_secret.get_secret_value()
