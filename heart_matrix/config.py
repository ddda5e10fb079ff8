"""
Configuration Management

Pydantic-settings based configuration for the Heart Matrix save-response function.
All settings can be overridden via environment variables.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from heart_matrix.exceptions import ConfigurationMissingError

DEFAULT_FROM_ADDRESS = "Heart Matrix <onboarding@resend.dev>"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    RESEND_API_KEY and TO_EMAIL are read unprefixed, as configured on the
    hosting platform. Everything else is prefixed with HEART_MATRIX_ and
    case-insensitive.
    Example: RESEND_API_KEY=re_123 TO_EMAIL=me@example.com HEART_MATRIX_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="HEART_MATRIX_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Required email configuration
    resend_api_key: str | None = Field(
        default=None,
        validation_alias="RESEND_API_KEY",
        description="Resend API key used as the bearer credential",
    )
    to_email: str | None = Field(
        default=None,
        validation_alias="TO_EMAIL",
        description="Destination address for every notification",
    )

    # Email delivery
    email_from: str = Field(
        default=DEFAULT_FROM_ADDRESS,
        description="From header for outbound emails",
    )
    email_provider: Literal["resend", "ses"] = Field(
        default="resend",
        description="Transport used to deliver notifications",
    )
    email_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for the outbound email request",
    )
    resend_api_url: str = Field(
        default="https://api.resend.com",
        description="Resend API base URL",
    )

    # SES Configuration
    ses_endpoint_url: str | None = Field(
        default=None,
        description="SES endpoint URL (for local development)",
    )
    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("HEART_MATRIX_AWS_REGION", "AWS_REGION"),
        description="AWS region for the SES transport",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="production",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def ses_config(self) -> dict:
        """SES client configuration."""
        config = {"region_name": self.aws_region}
        if self.ses_endpoint_url:
            config["endpoint_url"] = self.ses_endpoint_url
        return config

    def email_config(self) -> "EmailConfig":
        """
        Build the validated configuration handed to the request handler.

        Raises:
            ConfigurationMissingError: If a required variable is absent or empty
        """
        missing = []
        if not self.resend_api_key:
            missing.append("RESEND_API_KEY")
        if not self.to_email:
            missing.append("TO_EMAIL")
        if missing:
            raise ConfigurationMissingError(missing)

        return EmailConfig(
            to_address=self.to_email,
            from_address=self.email_from,
            provider=self.email_provider,
            api_key=self.resend_api_key,
            api_url=self.resend_api_url.rstrip("/"),
            timeout_seconds=self.email_timeout_seconds,
            ses_config=self.ses_config,
        )


@dataclass(frozen=True)
class EmailConfig:
    """Validated email settings, fixed for the lifetime of a handler."""

    to_address: str
    from_address: str
    provider: str = "resend"
    api_key: str | None = None
    api_url: str = "https://api.resend.com"
    timeout_seconds: float = 10.0
    ses_config: dict | None = None

    def __repr__(self) -> str:
        # Keep the credential out of log lines and tracebacks
        return (
            f"EmailConfig(to_address={self.to_address!r}, "
            f"from_address={self.from_address!r}, provider={self.provider!r})"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
