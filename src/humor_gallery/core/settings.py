"""Application settings and configuration.

This module defines all configuration options for the Humor Gallery service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or a `.env` file.
    """

    # Application metadata
    app_name: str = Field(default="Humor Gallery", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./humor_gallery.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    database_timeout_seconds: float = Field(default=5.0, gt=0, alias="DATABASE_TIMEOUT_SECONDS")

    # Identity provider. Access tokens are JWTs signed by the provider with a
    # shared secret; remote verification asks the provider's user endpoint instead.
    auth_jwt_secret: str = Field(default="change-me", alias="AUTH_JWT_SECRET")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_audience: str | None = Field(default="authenticated", alias="AUTH_JWT_AUDIENCE")
    auth_verify_remote: bool = Field(default=False, alias="AUTH_VERIFY_REMOTE")
    auth_url: str | None = Field(default=None, alias="AUTH_URL")
    auth_api_key: str | None = Field(default=None, alias="AUTH_API_KEY")
    auth_timeout_seconds: float = Field(default=5.0, alias="AUTH_TIMEOUT_SECONDS")

    # Pagination
    gallery_page_size: int = Field(default=12, ge=1, alias="GALLERY_PAGE_SIZE")
    voting_page_size: int = Field(default=1, ge=1, alias="VOTING_PAGE_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
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
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
