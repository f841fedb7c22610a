# passsync/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]  # project root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./passsync.db"

    # Reminder scheduler
    scheduler_enabled: bool = True
    scheduler_interval_ms: int = 60_000
    scheduler_initial_delay_ms: int = 5_000
    reminder_lead_minutes: int = 30

    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    ws_path: str = "/ws"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # relative sqlite path → absolute, anchored at the project root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url

    @property
    def scheduler_interval_seconds(self) -> float:
        return self.scheduler_interval_ms / 1000

    @property
    def scheduler_initial_delay_seconds(self) -> float:
        return self.scheduler_initial_delay_ms / 1000

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
