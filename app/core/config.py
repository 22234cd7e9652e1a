"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Accepted values for LOG_LEVEL (module-level so validators can use it).
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    API_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Comma-separated list of allowed browser origins
    CORS_ORIGINS: str = "http://localhost:3000"

    # Listing defaults for GET /users and GET /users/bookList
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Seed the in-memory user list with demo records at startup
    SEED_USERS: bool = True

    # JWT authentication: access and refresh tokens use separate secrets
    JWT_ACCESS_SECRET: SecretStr = SecretStr("access-secret-change-me-before-deploying")
    JWT_REFRESH_SECRET: SecretStr = SecretStr("refresh-secret-change-me-before-deploying")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    # When True, login honours expectedResult to force a status code. Test scaffold; disable outside demos.
    AUTH_ALLOW_FORCED_RESULTS: bool = True

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @field_validator("API_V1_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith("/"):
            raise ValueError("API_V1_PREFIX must start with '/' (e.g. /api/v1)")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("DEFAULT_PAGE_SIZE")
    @classmethod
    def validate_default_page_size(cls, v: int) -> int:
        if v < 1 or v > 100:
            raise ValueError("DEFAULT_PAGE_SIZE must be between 1 and 100")
        return v

    @field_validator("MAX_PAGE_SIZE")
    @classmethod
    def validate_max_page_size(cls, v: int) -> int:
        if v < 1 or v > 1000:
            raise ValueError("MAX_PAGE_SIZE must be between 1 and 1000")
        return v

    @field_validator("JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT secrets must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES")
    @classmethod
    def validate_access_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 1440:
            raise ValueError(
                "ACCESS_TOKEN_EXPIRE_MINUTES must be between 1 and 1440 (1 min to 1 day)"
            )
        return v

    @field_validator("REFRESH_TOKEN_EXPIRE_DAYS")
    @classmethod
    def validate_refresh_expire_days(cls, v: int) -> int:
        if v < 1 or v > 90:
            raise ValueError("REFRESH_TOKEN_EXPIRE_DAYS must be between 1 and 90")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
