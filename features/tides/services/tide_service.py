import logging
from datetime import date
from urllib.parse import urlencode

from core.config import settings
from core.harbour_time import year_day
from features.common.services.proxy_channel import ProxyChannel
from features.tides.models.tide_types import DayTideData
from features.tides.services.tide_parser import TideTableParser

logger = logging.getLogger(__name__)

class TideService:
    """Service for fetching and parsing daily harbour tide tables."""

    def __init__(self, channel: ProxyChannel, parser: TideTableParser = None) -> None:
        self.channel = channel
        self.parser = parser or TideTableParser()
        self.base_url = settings.tide_base_url

    def day_url(self, day: date, boat_draft: float) -> str:
        """Tide page URL; the site computes gate times for the requested depth in cm."""
        params = {
            "year": day.year,
            "yearDay": year_day(day),
            "reqDepth": round(boat_draft * 100)
        }
        return f"{self.base_url}?{urlencode(params)}"

    async def get_day(self, day: date, boat_draft: float) -> DayTideData:
        """Fetch and parse one day. Raises FetchError or TideParseError."""
        url = self.day_url(day, boat_draft)
        logger.info(f"🌊 Fetching tide data for {day.isoformat()}")
        markup = await self.channel.fetch_text(url)
        data = self.parser.parse(markup, day)
        logger.info(
            f"✅ Parsed {len(data.readings)} readings, {len(data.extremes)} extremes, "
            f"{len(data.schedules)} marinas for {day.isoformat()}"
        )
        return data
