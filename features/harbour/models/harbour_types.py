from datetime import datetime
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config import settings
from features.common.models.unknown import Unknown, UNKNOWN
from features.tides.models.tide_types import MarinaTimes, ResolvedTideState
from features.weather.models.conditions_types import ConditionsAssessment
from features.weather.models.weather_types import WeatherReading
from features.wind.models.wind_types import WindWaveReading

class RiskTolerance(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"

class SourceStatus(str, Enum):
    IDLE = "idle"
    OK = "ok"
    NO_SOURCE = "no_source"

class SailingSettings(BaseModel):
    """User sailing preferences"""
    marina: str = Field(default_factory=lambda: settings.default_marina)
    boat_draft: float = Field(default_factory=lambda: settings.default_boat_draft, description="Metres")
    # Advisory only, not used by the scoring formula
    wind_limit: float = Field(default_factory=lambda: settings.default_wind_limit, description="Knots")
    wave_limit: float = Field(default_factory=lambda: settings.default_wave_limit, description="Metres")
    risk_tolerance: RiskTolerance = Field(default_factory=lambda: RiskTolerance(settings.default_risk_tolerance))

    model_config = ConfigDict(frozen=True)

    @field_validator("boat_draft")
    @classmethod
    def validate_boat_draft(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Boat draft must be greater than zero, got {v}")
        return v

    @field_validator("marina")
    @classmethod
    def validate_marina(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Marina name is required")
        return v

class AppState(BaseModel):
    """Displayable snapshot. Replaced wholesale by each refresh step."""
    settings: SailingSettings = Field(default_factory=SailingSettings)
    source_status: SourceStatus = SourceStatus.IDLE
    tide: ResolvedTideState = Field(default_factory=ResolvedTideState)
    marina_table: List[MarinaTimes] = Field(default_factory=list)
    wind_wave: WindWaveReading = Field(default_factory=WindWaveReading)
    weather: WeatherReading = Field(default_factory=WeatherReading)
    assessment: Optional[ConditionsAssessment] = None
    last_updated: Union[datetime, Unknown] = UNKNOWN
    tide_error: Optional[str] = None
    wind_wave_error: Optional[str] = None
    weather_error: Optional[str] = None

    model_config = ConfigDict(frozen=True)
