import logging
import re
from typing import Dict, Optional

from bs4 import BeautifulSoup

from core.config import settings
from core.harbour_time import harbour_now, hhmm_to_minutes
from features.common.exceptions.harbour_exceptions import WeatherParseError
from features.common.models.unknown import UNKNOWN
from features.common.services.proxy_channel import ProxyChannel
from features.weather.models.weather_types import VisibilityCategory, WeatherReading

logger = logging.getLogger(__name__)

PRECIPITATION_WORDS = ("rain", "drizzle", "shower", "sleet", "snow", "hail", "thunder")

_FIELD = re.compile(r"([A-Z][A-Za-z ]+):\s*([^,]+)")

class WeatherService:
    """Service for the 3-day forecast RSS feed. The first item is today."""

    def __init__(self, channel: ProxyChannel, feed_url: Optional[str] = None) -> None:
        self.channel = channel
        self.feed_url = feed_url or settings.weather_rss_url

    async def get_current(self) -> WeatherReading:
        logger.info("🌤️  Fetching weather forecast")
        feed = await self.channel.fetch_text(self.feed_url)
        return self.parse_feed(feed)

    def parse_feed(self, feed: str) -> WeatherReading:
        soup = BeautifulSoup(feed, "xml")
        item = soup.find("item")
        if item is None:
            raise WeatherParseError("Weather feed has no items")

        title = item.find("title")
        description = item.find("description")
        if title is None or description is None:
            raise WeatherParseError("Weather item is missing title or description")

        condition = self._parse_condition(title.get_text())
        fields = self._parse_fields(description.get_text())

        visibility = VisibilityCategory.from_text(fields.get("Visibility", ""))
        sunrise = hhmm_to_minutes(fields.get("Sunrise", ""))
        sunset = hhmm_to_minutes(fields.get("Sunset", ""))

        return WeatherReading(
            condition=condition if condition else UNKNOWN,
            precipitation=bool(condition) and self.has_precipitation(condition),
            visibility=visibility if visibility is not None else UNKNOWN,
            sunrise=sunrise if sunrise is not None else UNKNOWN,
            sunset=sunset if sunset is not None else UNKNOWN,
            observed_at=harbour_now()
        )

    @staticmethod
    def _parse_condition(title: str) -> Optional[str]:
        """'Today: Light Rain, Minimum Temperature: ...' -> 'Light Rain'."""
        _, _, rest = title.partition(":")
        condition = rest.split(",")[0].strip()
        return condition or None

    @staticmethod
    def _parse_fields(description: str) -> Dict[str, str]:
        return {key.strip(): value.strip() for key, value in _FIELD.findall(description)}

    @staticmethod
    def has_precipitation(condition: str) -> bool:
        lowered = condition.lower()
        return any(word in lowered for word in PRECIPITATION_WORDS)
