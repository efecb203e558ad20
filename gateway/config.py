# gateway/config.py
"""
Configuration management using Pydantic Settings.

Settings are read once at startup into an immutable value that is passed
to the session driver; nothing else reads the environment.
"""
from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gateway.file_access.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # Base URL of the NextCloud instance, e.g. https://cloud.example.com
    NEXTCLOUD_URL: str = Field(..., min_length=1)
    FTP_PORT: int = Field(2121, ge=1, le=65535)
    PASV_MIN_PORT: int = Field(30000, ge=1, le=65535)
    PASV_MAX_PORT: int = Field(30100, ge=1, le=65535)
    # Implicit FTPS with an ephemeral self-signed certificate
    FTP_TLS: bool = False
    # Log every WebDAV request/response
    DEBUG: bool = False
    INSECURE_SKIP_VERIFY: bool = False
    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT: float = Field(30.0, gt=0)

    @model_validator(mode="after")
    def _check_passive_range(self):
        if self.PASV_MIN_PORT > self.PASV_MAX_PORT:
            raise ValueError(
                f"PASV_MIN_PORT ({self.PASV_MIN_PORT}) must not exceed PASV_MAX_PORT ({self.PASV_MAX_PORT})"
            )
        return self


def load_settings(**overrides) -> Settings:
    """
    Build Settings from the environment (and .env), applying overrides.

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
