"""Application settings and configuration.

This module defines all configuration options for the CineQuiz application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="CineQuiz", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./cinequiz.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Operational bypass of the one-submission-per-day rule
    admin_code: str | None = Field(default=None, alias="ADMIN_CODE")

    # Calendar day used for the daily rotation and participation checks
    reference_timezone: str = Field(default="Europe/Paris", alias="REFERENCE_TIMEZONE")

    # Guess throttling
    attempt_window_seconds: int = Field(default=60, alias="ATTEMPT_WINDOW_SECONDS")
    max_attempts_per_window: int = Field(default=5, alias="MAX_ATTEMPTS_PER_WINDOW")

    # Throttling of wallet connection requests
    wallet_connect_window_seconds: int = Field(
        default=60,
        alias="WALLET_CONNECT_WINDOW_SECONDS",
    )
    wallet_connect_max_attempts: int = Field(default=10, alias="WALLET_CONNECT_MAX_ATTEMPTS")

    # Email verification
    verification_token_ttl_hours: int = Field(default=24, alias="VERIFICATION_TOKEN_TTL_HOURS")
    verification_token_bytes: int = Field(default=32, alias="VERIFICATION_TOKEN_BYTES")
    public_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_BASE_URL")

    # Outbound mail (SMTP). Mail is logged instead of sent when no host is set.
    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_user: str | None = Field(default=None, alias="SMTP_USER")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    mail_from: str = Field(default="no-reply@cinequiz.local", alias="MAIL_FROM")
    mail_timeout_seconds: float = Field(default=10.0, alias="MAIL_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def verification_base_url(self) -> str:
        """Return the URL prefix used to build verification links.

        Returns:
            Public base URL joined with the verification route, without a trailing slash
        """
        return f"{self.public_base_url.rstrip('/')}/verify-email"


settings = Settings()
