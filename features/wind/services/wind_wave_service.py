import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from core.config import settings
from core.harbour_time import harbour_now
from features.common.exceptions.harbour_exceptions import FetchError, WindWaveParseError
from features.common.models.unknown import UNKNOWN
from features.common.services.proxy_channel import ProxyChannel
from features.wind.models.wind_types import WindWaveReading, cardinal_direction

logger = logging.getLogger(__name__)

class WindWaveService:
    """Current wind and wave conditions from the Open-Meteo forecast and marine APIs."""

    def __init__(self, channel: ProxyChannel) -> None:
        self.channel = channel

    def wind_url(self) -> str:
        params = {
            "latitude": settings.harbour_latitude,
            "longitude": settings.harbour_longitude,
            "current": "wind_speed_10m,wind_direction_10m",
            "wind_speed_unit": "kn",
            "timezone": settings.harbour_timezone
        }
        return f"{settings.wind_api_url}?{urlencode(params)}"

    def wave_url(self) -> str:
        params = {
            "latitude": settings.harbour_latitude,
            "longitude": settings.harbour_longitude,
            "current": "wave_height",
            "timezone": settings.harbour_timezone
        }
        return f"{settings.wave_api_url}?{urlencode(params)}"

    async def get_current(self) -> WindWaveReading:
        """Fetch both feeds; one failing leaves its fields Unknown."""
        logger.info("💨 Fetching wind and wave conditions")
        wind_body = await self._fetch_optional(self.wind_url(), "wind")
        wave_body = await self._fetch_optional(self.wave_url(), "wave")
        if wind_body is None and wave_body is None:
            raise FetchError("Wind and wave requests both failed")
        return self.parse(wind_body, wave_body)

    async def _fetch_optional(self, url: str, label: str) -> Optional[str]:
        try:
            return await self.channel.fetch_text(url)
        except FetchError as e:
            logger.warning(f"⚠️  {label.capitalize()} request failed: {str(e)}")
            return None

    def parse(self, wind_body: Optional[str], wave_body: Optional[str]) -> WindWaveReading:
        wind = self._current_block(wind_body) if wind_body is not None else {}
        wave = self._current_block(wave_body) if wave_body is not None else {}

        speed = self._parse_value(wind.get("wind_speed_10m"))
        direction = self._parse_value(wind.get("wind_direction_10m"))
        height = self._parse_value(wave.get("wave_height"))

        if speed is None and direction is None and height is None:
            raise WindWaveParseError("No wind or wave values in response")

        return WindWaveReading(
            wind_speed_kt=speed if speed is not None else UNKNOWN,
            wind_direction=cardinal_direction(direction) if direction is not None else UNKNOWN,
            wave_height_m=height if height is not None else UNKNOWN,
            observed_at=harbour_now()
        )

    @staticmethod
    def _current_block(body: str) -> Dict[str, Any]:
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise WindWaveParseError(f"Malformed JSON response: {e}") from e
        current = payload.get("current") if isinstance(payload, dict) else None
        if not isinstance(current, dict):
            raise WindWaveParseError("Response has no current conditions block")
        return current

    @staticmethod
    def _parse_value(value: Any) -> Optional[float]:
        """Parse an API value, handling missing value indicators."""
        if value is None:
            return None
        try:
            return float(value)
        except (ValueError, TypeError):
            return None
