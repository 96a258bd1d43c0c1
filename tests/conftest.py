from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

import pytest

from features.common.exceptions.harbour_exceptions import FetchError
from features.common.services.proxy_channel import ProxyEndpoint

HARBOUR_TZ = ZoneInfo("Europe/Guernsey")

def _table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    head = "".join(f"<th>{cell}</th>" for cell in header)
    body = "".join(
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>"
        for row in rows
    )
    return f"<table><tr>{head}</tr>{body}</table>"

def build_tide_page(
    hourly: Sequence[Tuple[str, str]] = (),
    peaks: Sequence[Tuple[str, str, str]] = (),
    marinas: Sequence[Sequence[str]] = (),
    peaks_first: bool = False
) -> str:
    """Tide page markup in the layout the tide site publishes, plus noise tables."""
    tables = [_table(["Sun", "Moon"], [["06:40", "21:10"]])]
    marina_table = _table(
        ["Marina", "Open", "Close", "Open", "Close", "Open"],
        marinas
    )
    peak_table = _table(["Tide", "Time", "Height"], peaks)
    hourly_table = _table(["Time", "Height (m)"], hourly)
    if peaks_first:
        tables += [peak_table, hourly_table, marina_table]
    else:
        tables += [marina_table, hourly_table, peak_table]
    return "<html><body>" + "".join(tables) + "</body></html>"

STANDARD_HOURLY = [(f"{h:02d}:00", f"{5 + (h % 6) * 0.9:.2f}") for h in range(24)]

STANDARD_PEAKS = [
    ("Low", "02:10", "1.80m"),
    ("High", "08:20", "8.60m"),
    ("Low", "14:35", "1.95m"),
    ("High", "20:45", "8.40m"),
]

STANDARD_MARINAS = [
    ["Victoria Marina", "05:40", "11:05", "17:55", "23:30", ""],
    ["Albert Marina", "05:10", "11:40", "17:25", "", ""],
]

WEATHER_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>BBC Weather - Forecast for St Peter Port, GG</title>
    <item>
      <title>Today: Light Rain Showers, Minimum Temperature: 9°C (48°F) Maximum Temperature: 14°C (57°F)</title>
      <description>Maximum Temperature: 14°C (57°F), Minimum Temperature: 9°C (48°F), Wind Direction: South Westerly, Wind Speed: 12mph, Visibility: Poor, Pressure: 1012mb, Humidity: 80%, UV Risk: 1, Pollution: Low, Sunrise: 07:12 BST, Sunset: 18:03 BST</description>
    </item>
    <item>
      <title>Sunday: Sunny, Minimum Temperature: 8°C (46°F) Maximum Temperature: 15°C (59°F)</title>
      <description>Maximum Temperature: 15°C (59°F), Visibility: Good, Sunrise: 07:14 BST, Sunset: 18:01 BST</description>
    </item>
  </channel>
</rss>
"""

def harbour_datetime(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=HARBOUR_TZ)

class FakeChannel:
    """Stands in for ProxyChannel with canned responses keyed by URL. Exception values are raised."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, available: bool = True):
        self.responses = responses or {}
        self.available = available
        self.requested: List[str] = []
        self.active = None

    async def acquire(self):
        self.active = ProxyEndpoint(prefix="https://proxy.test/?") if self.available else None
        return self.active

    async def fetch_text(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.responses:
            raise FetchError(f"No response for {url}")
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        pass

@pytest.fixture
def tide_page():
    return build_tide_page

@pytest.fixture
def standard_page():
    return build_tide_page(STANDARD_HOURLY, STANDARD_PEAKS, STANDARD_MARINAS)

@pytest.fixture
def weather_rss():
    return WEATHER_RSS
