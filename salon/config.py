"""Runtime settings for the booking rules service."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from salon.services.hours import OperatingHours


class Settings(BaseSettings):
    open_hour: int = 7
    close_hour: int = 21
    timezone: str | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SALON_",
        env_file=".env",
        extra="ignore",
    )

    def operating_hours(self) -> OperatingHours:
        return OperatingHours(
            open_hour=self.open_hour,
            close_hour=self.close_hour,
            timezone=self.timezone,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
