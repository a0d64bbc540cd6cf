from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="XPENSO_", env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./xpenso.db"

    jwt_secret: str = "change-me"
    jwt_expire_minutes: int = 365 * 24 * 60

    # Cookie-based auth: the browser client keeps the JWT in an HttpOnly cookie.
    auth_cookie_name: str = "token"
    auth_cookie_samesite: str = "lax"  # lax|strict|none
    auth_cookie_secure: bool = False

    cors_origins: str = "http://localhost:5173"

    # Calendar used to decide "this month" / "this year" for quick stats.
    stats_time_zone: str = "UTC"
    recent_expenses_limit: int = 5

    log_level: str = "INFO"


settings = Settings()
