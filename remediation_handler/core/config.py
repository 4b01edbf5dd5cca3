# remediation_handler/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr, ValidationError, field_validator
from typing import Any, Optional
import logging

from remediation_handler.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ANNOTATION = "io.sensu.remediation.config.actions"
LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    APP_NAME: str = "Sensu Remediation Handler"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Backend API location - either a full URL or a protocol/host/port triple
    SENSU_API_URL: Optional[str] = Field(None, description="Sensu API URL, e.g. https://sensu.example.com:8080")
    SENSU_API_PROTOCOL: str = Field("http", description="Used with SENSU_API_HOST when SENSU_API_URL is unset")
    SENSU_API_HOST: Optional[str] = None
    SENSU_API_PORT: int = 8080

    # Credentials - a static API key, or a user/password pair exchanged at /auth
    SENSU_API_KEY: Optional[SecretStr] = Field(None, description="Sensu API key (sent as 'Key <value>')")
    SENSU_API_USER: Optional[str] = None
    SENSU_API_PASSWORD: Optional[SecretStr] = None

    # Leave blank to use the default trust store
    SENSU_TRUSTED_CA_FILE: Optional[str] = None

    SENSU_REMEDIATION_ANNOTATION: str = Field(DEFAULT_ANNOTATION, description="Check annotation holding the remediation actions")
    REQUEST_TIMEOUT: float = Field(10.0, description="Timeout in seconds for every outbound API call")

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        frozen=True,
    )

    @field_validator('SENSU_API_PROTOCOL')
    @classmethod
    def validate_protocol(cls, v):
        v = v.lower().rstrip(':/')
        if v not in ['http', 'https']:
            raise ValueError("SENSU_API_PROTOCOL must be either 'http' or 'https'")
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return v

    @field_validator('REQUEST_TIMEOUT')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("REQUEST_TIMEOUT must be greater than zero")
        return v

    @field_validator('SENSU_API_URL', 'SENSU_API_HOST', 'SENSU_API_USER', 'SENSU_TRUSTED_CA_FILE')
    @classmethod
    def blank_as_unset(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    @property
    def api_url(self) -> Optional[str]:
        """Base URL of the backend API, without a trailing slash."""
        if self.SENSU_API_URL:
            return self.SENSU_API_URL.rstrip('/')
        if self.SENSU_API_HOST:
            return f"{self.SENSU_API_PROTOCOL}://{self.SENSU_API_HOST}:{self.SENSU_API_PORT}"
        return None

    @property
    def uses_api_key(self) -> bool:
        return bool(self.SENSU_API_KEY and self.SENSU_API_KEY.get_secret_value())

    @property
    def has_user_credentials(self) -> bool:
        return bool(
            self.SENSU_API_USER
            and self.SENSU_API_PASSWORD
            and self.SENSU_API_PASSWORD.get_secret_value()
        )

    def validate_api_access(self) -> None:
        """Raises ConfigurationError unless an API location and credentials are configured."""
        if not self.api_url:
            raise ConfigurationError("--sensu-api-url flag or $SENSU_API_URL environment variable must be set")
        if not self.uses_api_key and not self.has_user_credentials:
            raise ConfigurationError(
                "--sensu-api-key flag or $SENSU_API_KEY environment variable must be set "
                "(or both $SENSU_API_USER and $SENSU_API_PASSWORD)"
            )
        if self.uses_api_key and self.has_user_credentials:
            logger.warning("Both an API key and user credentials are configured; using the API key.")


def load_settings(**overrides: Any) -> Settings:
    """Builds the settings once at startup. Explicit overrides (e.g. CLI flags) win over the environment."""
    # unset flags fall through to the environment; pydantic-settings options (_env_file) pass as given
    overrides = {k: v for k, v in overrides.items() if v is not None or k.startswith('_')}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
