from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Any

class Settings(BaseSettings):
    """Application settings."""

    # Harbour local civil time (St Peter Port, Guernsey)
    harbour_timezone: str = "Europe/Guernsey"
    harbour_latitude: float = 49.455
    harbour_longitude: float = -2.531

    # Tide tables, one page per calendar day
    tide_base_url: str = "https://tides.digimap.gg/"

    # BBC 3-day forecast feed for St Peter Port
    weather_rss_url: str = "https://weather-broker-cdn.api.bbci.co.uk/en/forecast/rss/3day/3042287"

    # Open-Meteo current conditions
    wind_api_url: str = "https://api.open-meteo.com/v1/forecast"
    wave_api_url: str = "https://marine-api.open-meteo.com/v1/marine"

    # CORS proxies, probed in order. "envelope" proxies wrap the body in JSON
    proxies: List[Dict[str, Any]] = [
        {"prefix": "https://api.codetabs.com/v1/proxy?quest=", "envelope": False},
        {"prefix": "https://corsproxy.io/?", "envelope": False},
        {"prefix": "https://cors-anywhere.herokuapp.com/", "envelope": False},
        {"prefix": "https://api.allorigins.win/get?url=", "envelope": True},
    ]
    proxy_probe_url: str = "https://httpbin.org/json"

    request: Dict = {
        "timeout": 10,       # seconds per proxy attempt / fetch
        "max_attempts": 4    # proxies probed before giving up
    }

    # Sill safety margin above boat draft, metres
    sill_margin: float = 0.5

    # Background refresh cadence, 0 disables the scheduled job
    refresh_interval_minutes: int = 15

    # Default sailing settings
    default_marina: str = "Victoria Marina"
    default_boat_draft: float = 1.5
    default_wind_limit: float = 20.0
    default_wave_limit: float = 1.0
    default_risk_tolerance: str = "moderate"

    model_config = SettingsConfigDict(
        env_prefix="harbour_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
