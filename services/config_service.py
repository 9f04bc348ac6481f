from __future__ import annotations

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    API_BASE_URL: str = "http://localhost:5001"
    REQUEST_TIMEOUT: float = 10.0
    SIGNAL_POLL_MS: int = 3000
    POSITION_POLL_MS: int = 3000
    QUEUE_POLL_MS: int = 5000
    RENDER_INTERVAL_MS: int = 5000
    ACTIVITY_WINDOW: int = 100
    HISTORY_LIMIT: int = 100
    HISTORY_POLL_MS: int = 30000
    HISTORY_CSV_PATH: str = ""
    DISCARD_STALE_RESPONSES: bool = True
    LOG_LEVEL: str = "INFO"


class DashboardConfig(BaseModel):
    api_base_url: str
    request_timeout: float
    signal_poll_ms: int
    position_poll_ms: int
    queue_poll_ms: int
    render_interval_ms: int
    activity_window: int
    history_limit: int
    history_poll_ms: int
    history_csv_path: str | None = None
    discard_stale: bool
    log_level: str


class ConfigService:
    def __init__(self, base: DashboardSettings) -> None:
        self.base = base

    def load(self) -> DashboardConfig:
        intervals = {
            "SIGNAL_POLL_MS": self.base.SIGNAL_POLL_MS,
            "POSITION_POLL_MS": self.base.POSITION_POLL_MS,
            "QUEUE_POLL_MS": self.base.QUEUE_POLL_MS,
            "RENDER_INTERVAL_MS": self.base.RENDER_INTERVAL_MS,
            "HISTORY_POLL_MS": self.base.HISTORY_POLL_MS,
        }
        for key, value in intervals.items():
            if value <= 0:
                raise ValueError(f"{key} must be positive, got {value}")
        if self.base.HISTORY_LIMIT <= 0:
            raise ValueError(f"HISTORY_LIMIT must be positive, got {self.base.HISTORY_LIMIT}")
        if self.base.ACTIVITY_WINDOW <= 0:
            raise ValueError(f"ACTIVITY_WINDOW must be positive, got {self.base.ACTIVITY_WINDOW}")
        if self.base.REQUEST_TIMEOUT <= 0:
            raise ValueError(f"REQUEST_TIMEOUT must be positive, got {self.base.REQUEST_TIMEOUT}")
        return DashboardConfig(
            api_base_url=self.base.API_BASE_URL,
            request_timeout=self.base.REQUEST_TIMEOUT,
            signal_poll_ms=self.base.SIGNAL_POLL_MS,
            position_poll_ms=self.base.POSITION_POLL_MS,
            queue_poll_ms=self.base.QUEUE_POLL_MS,
            render_interval_ms=self.base.RENDER_INTERVAL_MS,
            activity_window=self.base.ACTIVITY_WINDOW,
            history_limit=self.base.HISTORY_LIMIT,
            history_poll_ms=self.base.HISTORY_POLL_MS,
            history_csv_path=self.base.HISTORY_CSV_PATH or None,
            discard_stale=self.base.DISCARD_STALE_RESPONSES,
            log_level=self.base.LOG_LEVEL.upper(),
        )
