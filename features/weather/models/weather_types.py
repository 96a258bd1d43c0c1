from datetime import datetime
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from features.common.models.unknown import Unknown, UNKNOWN

class VisibilityCategory(str, Enum):
    """Visibility bands used by the forecast feed."""
    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    VERY_POOR = "Very Poor"

    @classmethod
    def from_text(cls, text: str) -> Optional["VisibilityCategory"]:
        wanted = text.strip().casefold()
        for category in cls:
            if category.value.casefold() == wanted:
                return category
        return None

class WeatherReading(BaseModel):
    """Today's forecast summary"""
    condition: Union[str, Unknown] = UNKNOWN
    precipitation: bool = False
    visibility: Union[VisibilityCategory, Unknown] = UNKNOWN
    sunrise: Union[int, Unknown] = Field(UNKNOWN, description="Minute of day")
    sunset: Union[int, Unknown] = Field(UNKNOWN, description="Minute of day")
    observed_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)
