"""
Application configuration

Environment variables and application settings, managed with pydantic-settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import json

# Project root directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Placement-Tracking-API"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Database
    database_url: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'placement.db'}"
    database_echo: bool = False

    # CORS
    cors_origins: List[str] = ["*"]

    # Bearer tokens
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # Workflow defaults
    default_interview_minutes: int = 60
    offer_response_days: int = 14

    # Notification channels: in_app / email
    notification_channels: List[str] = ["in_app", "email"]
    email_sender: str = "placement-office@example.edu"

    @field_validator("cors_origins", "notification_channels", mode="before")
    @classmethod
    def parse_list(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_path(cls, v):
        if isinstance(v, str) and "./data/" in v:
            return v.replace("./data/", str(BASE_DIR / "data") + "/")
        return v

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton"""
    return Settings()


# Global settings instance
settings = get_settings()
