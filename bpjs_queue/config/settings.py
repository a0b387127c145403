"""Typed runtime settings with dotenv support and startup validation."""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bpjs_queue.domain import ConfigurationError, Credentials

DEFAULT_BPJS_QUEUE_BASE_URL = "https://apijkn.bpjs-kesehatan.go.id/antreanrs/antrean/pendaftaran/tanggal"


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and BPJS upstream configuration.

    Environment variable names map directly to field names in uppercase.
    Example: `bpjs_cons_id` reads from `BPJS_CONS_ID`.

    BPJS credentials are optional at load time. An unset credential is
    reported per request as a configuration error instead of preventing
    startup, so health checks stay reachable.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root logging level name.
        bpjs_cons_id: BPJS consumer id (`x-cons-id`).
        bpjs_secret_key: BPJS consumer secret.
        bpjs_user_key: BPJS gateway user key.
        bpjs_base_url: Queue-by-date endpoint; the request date is appended as a path segment.
        bpjs_request_timeout_seconds: Upstream HTTP timeout.
        bpjs_retry_attempts: Total upstream attempts per lookup; each attempt is re-signed.
        bpjs_retry_backoff_seconds: Delay between upstream attempts.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    bpjs_cons_id: str | None = Field(default=None)
    bpjs_secret_key: str | None = Field(default=None, repr=False)
    bpjs_user_key: str | None = Field(default=None, repr=False)
    bpjs_base_url: str = Field(default=DEFAULT_BPJS_QUEUE_BASE_URL, min_length=1)
    bpjs_request_timeout_seconds: float = Field(default=30.0, gt=0)
    bpjs_retry_attempts: int = Field(default=1, ge=1, le=5)
    bpjs_retry_backoff_seconds: float = Field(default=0.5, ge=0)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized_value), int):
            raise ValueError(f"unknown log level: {value}")
        return normalized_value

    @field_validator("bpjs_base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        stripped_value = value.strip().rstrip("/")
        if not stripped_value.startswith(("http://", "https://")):
            raise ValueError("bpjs_base_url must be an http(s) URL")
        return stripped_value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are present but invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_resolve_credentials(settings: AppSettings) -> Credentials:
    """Build immutable BPJS credentials from validated settings.

    Presence is checked, not content: an empty secret key is passed through
    and rejected later by the signer.

    Args:
        settings: Validated application settings.

    Returns:
        Credentials: Immutable credential triple.

    Raises:
        ConfigurationError: Raised when any of the three credentials is unset.
    """

    credential_values = {
        "BPJS_CONS_ID": settings.bpjs_cons_id,
        "BPJS_SECRET_KEY": settings.bpjs_secret_key,
        "BPJS_USER_KEY": settings.bpjs_user_key,
    }
    missing_names = [name for name, value in credential_values.items() if value is None]
    if missing_names:
        raise ConfigurationError(
            f"Missing BPJS API credentials: {', '.join(missing_names)}",
            error_code="missing_credentials",
        )

    return Credentials(
        consumer_id=str(settings.bpjs_cons_id),
        secret_key=str(settings.bpjs_secret_key),
        user_key=str(settings.bpjs_user_key),
    )
