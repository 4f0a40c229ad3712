# python
# app/core/config.py
"""Configuration settings for the DevChecklist.AI API.

Uses Pydantic BaseSettings for environment variable management. The settings
object is built once at import and handed to every adapter through
``get_settings`` so credentials are never re-read from the environment at
call time.
"""
import logging
import secrets
from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ===== Application Settings =====
    app_name: str = Field(default="DevChecklist.AI API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development,
        validation_alias=AliasChoices("environment", "node_env"),
        description="Environment type",
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=3000, description="Port to bind the server")
    client_url: str = Field(
        default="http://localhost:5173", description="Frontend origin allowed by CORS"
    )
    internal_api_url: str | None = Field(
        default=None, description="Base URL this service uses to call its own task endpoint"
    )

    # ===== Security Settings =====
    secret_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("secret_key", "jwt_secret"),
        description="Secret key for JWT encoding",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(
        default=1440, description="JWT token expiration time, 0 disables expiry"
    )

    # ===== Database Settings =====
    database_url: str = Field(
        default="sqlite+aiosqlite:///./devchecklist.db", description="Database connection URL"
    )

    # ===== Task Service (Todoist) =====
    todoist_api_key: str | None = Field(default=None, description="Todoist API token")
    todoist_api_url: str = Field(
        default="https://api.todoist.com/rest/v2", description="Todoist REST API base URL"
    )
    todoist_request_timeout: float = Field(
        default=30.0, description="Todoist request timeout in seconds"
    )

    # ===== AI Service (Gemini) =====
    google_api_key: str | None = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model to use")
    ai_request_timeout: int = Field(default=60, description="AI request timeout in seconds")

    # ===== Google Sign-In =====
    google_client_id: str | None = Field(default=None, description="Google OAuth client ID")

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_ai_enabled(self) -> bool:
        return bool(self.google_api_key)

    @property
    def has_todoist_enabled(self) -> bool:
        return bool(self.todoist_api_key)

    @property
    def internal_api_base_url(self) -> str:
        if self.internal_api_url:
            return self.internal_api_url.rstrip("/")
        return f"http://localhost:{self.port}"

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["test"]:
                return "testing"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator(
        "secret_key", "todoist_api_key", "google_api_key", "google_client_id", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def ensure_secret_key(self):
        if self.secret_key:
            return self
        if self.is_production:
            raise ValueError("SECRET_KEY (or JWT_SECRET) must be set in production")
        # Tokens signed with a per-process key do not survive a restart
        logger.warning("SECRET_KEY/JWT_SECRET is not set; signing tokens with a random per-process key")
        self.secret_key = secrets.token_urlsafe(32)
        return self


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": {
            "ai_enabled": settings.has_ai_enabled,
            "todoist_enabled": settings.has_todoist_enabled,
            "google_sign_in_enabled": bool(settings.google_client_id),
        },
        "database_configured": bool(settings.database_url),
    }


__all__ = [
    "settings",
    "Settings",
    "get_settings",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
