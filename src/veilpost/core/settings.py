"""Application settings and configuration.

This module defines all configuration options for the Veilpost application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Veilpost", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./veilpost.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    verify_code_ttl_seconds: int = Field(default=3600, alias="VERIFY_CODE_TTL_SECONDS")

    # Content bounds (characters, measured after trimming)
    post_max_length: int = Field(default=500, alias="POST_MAX_LENGTH")
    reply_max_length: int = Field(default=300, alias="REPLY_MAX_LENGTH")
    message_max_length: int = Field(default=300, alias="MESSAGE_MAX_LENGTH")

    # Rate limiting. "enforced" counts requests; "disabled" always allows.
    rate_limit_mode: str = Field(default="enforced", alias="RATE_LIMIT_MODE")
    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    trust_forwarded_for: bool = Field(default=False, alias="TRUST_FORWARDED_FOR")
    rate_limit_message: int = Field(default=10, alias="RATE_LIMIT_MESSAGE")
    rate_limit_message_window: int = Field(default=10, alias="RATE_LIMIT_MESSAGE_WINDOW")
    rate_limit_post: int = Field(default=5, alias="RATE_LIMIT_POST")
    rate_limit_post_window: int = Field(default=10, alias="RATE_LIMIT_POST_WINDOW")
    rate_limit_ai: int = Field(default=20, alias="RATE_LIMIT_AI")
    rate_limit_ai_window: int = Field(default=10, alias="RATE_LIMIT_AI_WINDOW")

    # Completion API (OpenAI-compatible chat completions)
    completion_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        alias="COMPLETION_BASE_URL",
    )
    completion_api_key: str | None = Field(default=None, alias="OPENROUTER_API_KEY")
    completion_model: str = Field(
        default="meituan/longcat-flash-chat:free",
        alias="COMPLETION_MODEL",
    )
    completion_temperature: float = Field(default=0.9, alias="COMPLETION_TEMPERATURE")
    completion_timeout_seconds: float = Field(default=30.0, alias="COMPLETION_TIMEOUT_SECONDS")

    # Verification email delivery (Resend HTTP API)
    email_api_url: str = Field(default="https://api.resend.com/emails", alias="EMAIL_API_URL")
    email_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    email_sender: str = Field(default="onboarding@resend.dev", alias="EMAIL_SENDER")
    email_timeout_seconds: float = Field(default=10.0, alias="EMAIL_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
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
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def rate_limit_buckets(self) -> dict[str, tuple[int, int]]:
        """Return ``{bucket: (limit, window_seconds)}`` for every named bucket."""
        return {
            "message": (self.rate_limit_message, self.rate_limit_message_window),
            "post": (self.rate_limit_post, self.rate_limit_post_window),
            "ai": (self.rate_limit_ai, self.rate_limit_ai_window),
        }


settings = Settings()  # type: ignore[call-arg]
