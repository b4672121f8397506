
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "Mailroom API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    # Database (PostgreSQL via asyncpg in production, SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./mailroom_dev.db",
        alias="DATABASE_URL",
    )
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Authentication
    auth_provider: str = Field(
        default="session", alias="AUTH_PROVIDER",
    )  # "session" | "identity_provider"
    jwt_secret: str = Field(default="change-me-in-production", alias="JWT_SECRET")
    jwt_expires_hours: int = Field(default=12, alias="JWT_EXPIRES_HOURS")
    session_cookie_name: str = Field(default="mailroom_session", alias="SESSION_COOKIE_NAME")
    identity_provider_jwt_secret: str | None = Field(
        default=None, alias="IDENTITY_PROVIDER_JWT_SECRET",
    )
    identity_provider_audience: str = Field(
        default="authenticated", alias="IDENTITY_PROVIDER_AUDIENCE",
    )

    # Dashboard thresholds
    aging_threshold_days: int = Field(default=5, alias="AGING_THRESHOLD_DAYS")
    processing_window_days: int = Field(default=14, alias="PROCESSING_WINDOW_DAYS")
    activity_window_days: int = Field(default=30, alias="ACTIVITY_WINDOW_DAYS")

    # Pagination
    default_page_size: int = Field(default=10, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")

    # OpenAI (optional label-scan refinement)
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4.1-mini", alias="OPENAI_MODEL")
    openai_max_tokens: int = Field(default=500, alias="OPENAI_MAX_TOKENS")
    openai_timeout: int = Field(default=30, alias="OPENAI_TIMEOUT")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def ai_enabled(self) -> bool:
        """AI features are available only when an OpenAI key is configured."""
        return bool(self.openai_api_key)

settings = Settings()
