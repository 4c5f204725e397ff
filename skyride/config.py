"""Application configuration pulled from environment variables via pydantic."""
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skyride.domain import ShiftWindow
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


DEFAULT_SHIFTS = [
    ShiftWindow(name="early", outbound_start="05:00", outbound_end="06:00",
                return_start="14:30", return_end="15:30"),
    ShiftWindow(name="late", outbound_start="13:00", outbound_end="14:00",
                return_start="22:30", return_end="23:00"),
    ShiftWindow(name="middle", outbound_start="09:00", outbound_end="10:00",
                return_start="18:00", return_end="19:00"),
    ShiftWindow(name="night", outbound_start="21:00", outbound_end="22:00",
                return_start="06:00", return_end="07:00"),
]


class Settings(BaseSettings):
    """Environment-driven configuration for the skyride service."""
    model_config = SettingsConfigDict(env_prefix="SKYRIDE_", extra="ignore")

    forecast_source: str = "open_meteo"  # options: open_meteo
    open_meteo_commute_url: str = "https://api.open-meteo.com/v1/dwd-icon"
    open_meteo_forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    request_timeout_seconds: float = 10.0
    cache_expire_seconds: int = 3600
    timezone: str = "Europe/Berlin"
    forecast_days: int = 7
    commute_model: str = "icon_seamless"
    launch_orientation: float = 270.0
    spot_radius_km: float = 100.0
    api_key: str | None = None
    log_level: str = "INFO"
    shifts: List[ShiftWindow] = Field(default_factory=lambda: list(DEFAULT_SHIFTS))

    @field_validator("open_meteo_commute_url", "open_meteo_forecast_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("forecast_days", mode="after")
    @classmethod
    def check_forecast_days(cls, v: int) -> int:
        """Open-Meteo serves at most 16 days."""
        if not 1 <= v <= 16:
            raise ValueError("forecast_days must be between 1 and 16")
        return v

    def shift_by_name(self, name: str) -> ShiftWindow | None:
        wanted = name.strip().lower()
        for shift in self.shifts:
            if shift.name.lower() == wanted:
                return shift
        return None


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
