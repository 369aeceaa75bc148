# backend/barbershop/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./barbershop.db"
    redis_url: str = "redis://localhost:6379/0"

    # Business timezone: "today", "now" and weekdays are evaluated here
    timezone: str = "Europe/Madrid"

    booking_lead_minutes: int = 30
    next_appointment_page_size: int = 5
    max_horizon_days: int = 60

    lock_timeout_seconds: int = 10
    lock_blocking_timeout_seconds: int = 5

    reminders_enabled: bool = True
    reminder_check_interval_seconds: int = 300

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite path is resolved against the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
