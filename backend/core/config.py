"""Application settings loaded from the environment."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "local"
    log_level: str = "INFO"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    database_url: str = "sqlite+aiosqlite:///./admin_notices.db"

    secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Anti-forgery tokens stay valid for two half-lifetimes.
    nonce_lifetime_seconds: int = 86_400
    dismissed_notices_meta_key: str = "_stellarwp_dismissed_notices"

    redis_url: str = "redis://localhost:6379/0"
    rate_limit_requests: int = 120
    rate_limit_window_seconds: int = 60


settings = Settings()
