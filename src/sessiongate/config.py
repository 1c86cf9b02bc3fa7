from datetime import timedelta
from typing import Literal

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL including the database name, e.g. mongodb://localhost/sessiongate
    redis_url: str  # Redis/KeyDB URL, e.g. redis://localhost:6379/0
    host: str
    port: int
    debug: bool
    log_format: Literal["console", "json"] | None = None  # Defaults to console in debug, JSON otherwise
    cors_origins: list[str] = []
    session_ttl_seconds: int = 24 * 60 * 60
    bcrypt_rounds: int = 10
    store_timeout_seconds: float = 2.0  # Deadline for a single backend round trip
    session_cookie_secure: bool = True  # Disable only for local development over plain HTTP

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SESSIONGATE_",
        "extra": "ignore",
    }

    @property
    def session_lifetime(self) -> timedelta:
        return timedelta(seconds=self.session_ttl_seconds)
