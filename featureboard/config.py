"""
Featureboard – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from dataclasses import dataclass
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "Featureboard"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./featureboard.db"

    # ── JWT ──
    SECRET_KEY: str = "change-me-to-a-random-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # ── OAuth: Google ──
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""

    # ── OAuth: GitHub ──
    GITHUB_CLIENT_ID: str = ""
    GITHUB_CLIENT_SECRET: str = ""

    # ── Accounts created as app_admin on first sign-in ──
    BOOTSTRAP_ADMIN_EMAILS: List[str] = []

    # ── Browser origins allowed to call the API (JSON list) ──
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # ── Reaction toggles ──
    REACTION_MAX_ATTEMPTS: int = 5
    REACTION_RETRY_BACKOFF_SECONDS: float = 0.05


@dataclass(frozen=True)
class AuthConfig:
    """Signing material for bearer credentials, fixed at startup."""

    secret_key: str
    algorithm: str
    expire_minutes: int

    @classmethod
    def from_settings(cls, cfg: Settings) -> "AuthConfig":
        return cls(
            secret_key=cfg.SECRET_KEY,
            algorithm=cfg.ALGORITHM,
            expire_minutes=cfg.ACCESS_TOKEN_EXPIRE_MINUTES,
        )


settings = Settings()
