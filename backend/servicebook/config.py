# backend/servicebook/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 2.0

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60
    refresh_secret: str = "change-me-too"
    refresh_expires_minutes: int = 60 * 24 * 7

    # Company admins of this company operate the whole platform
    platform_company_slug: str = "platform"

    booking_lock_enabled: bool = True
    booking_lock_timeout_seconds: int = 10
    booking_lock_wait_seconds: int = 5
    # Redis unreachable: proceed without the lock instead of answering 503
    booking_lock_fail_open: bool = False
    max_booking_minutes: int = 480

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # relative path -> absolute, anchored at the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
