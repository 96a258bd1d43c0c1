from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from features.common.models.unknown import Unknown, UNKNOWN

COMPASS_POINTS = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                  "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]

def cardinal_direction(degrees: float) -> str:
    """Convert degrees to a 16-point compass direction."""
    index = round((degrees % 360) / (360 / len(COMPASS_POINTS))) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]

class WindWaveReading(BaseModel):
    """Current wind and sea state at the harbour"""
    wind_speed_kt: Union[float, Unknown] = Field(UNKNOWN, description="Wind speed in knots")
    wind_direction: Union[str, Unknown] = Field(UNKNOWN, description="Compass direction wind blows from")
    wave_height_m: Union[float, Unknown] = Field(UNKNOWN, description="Significant wave height in metres")
    observed_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)
