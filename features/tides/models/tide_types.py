from datetime import date as Date
from enum import Enum
from typing import Dict, List, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from features.common.models.unknown import Unknown, UNKNOWN

class ExtremeType(str, Enum):
    HIGH = "High"
    LOW = "Low"

class MarinaEventKind(str, Enum):
    OPENED = "Opened"
    CLOSED = "Closed"

class TideReading(BaseModel):
    """Hourly tide height"""
    time: int = Field(..., ge=0, le=1439, description="Minute of day")
    height: float = Field(..., description="Height of tide in metres")

    model_config = ConfigDict(frozen=True)

class TideExtreme(BaseModel):
    """High or low water"""
    type: ExtremeType
    time: int = Field(..., ge=0, le=1439, description="Minute of day")
    height: float = Field(..., description="Height of tide in metres")
    day_offset: int = Field(0, description="-1 yesterday, 0 today, 1 tomorrow")

    model_config = ConfigDict(frozen=True)

class MarinaEvent(BaseModel):
    """Sill gate opening or closing"""
    kind: MarinaEventKind
    time: int = Field(..., ge=0, le=1439, description="Minute of day")
    day_offset: int = Field(0, description="-1 yesterday, 0 today, 1 tomorrow")

    model_config = ConfigDict(frozen=True)

class MarinaSchedule(BaseModel):
    marina_name: str
    events: List[MarinaEvent] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("events")
    @classmethod
    def sort_events(cls, v: List[MarinaEvent]) -> List[MarinaEvent]:
        return sorted(v, key=lambda e: e.time)

class MarinaTimes(BaseModel):
    """One row of the marina schedule table as published."""
    marina: str
    open1: Union[str, Unknown] = UNKNOWN
    close1: Union[str, Unknown] = UNKNOWN
    open2: Union[str, Unknown] = UNKNOWN
    close2: Union[str, Unknown] = UNKNOWN
    open3: Union[str, Unknown] = UNKNOWN

    model_config = ConfigDict(frozen=True)

class DayTideData(BaseModel):
    """Everything parsed from one day's tide page."""
    date: Date
    readings: List[TideReading]
    extremes: List[TideExtreme] = Field(default_factory=list)
    schedules: Dict[str, MarinaSchedule] = Field(default_factory=dict)
    marina_table: List[MarinaTimes] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

class ResolvedTideState(BaseModel):
    """Tide and marina state relative to now"""
    current_height: Union[float, Unknown] = UNKNOWN
    last_extreme: Union[TideExtreme, Unknown] = UNKNOWN
    next_extreme: Union[TideExtreme, Unknown] = UNKNOWN
    last_marina_event: Union[MarinaEvent, Unknown] = UNKNOWN
    next_marina_event: Union[MarinaEvent, Unknown] = UNKNOWN
    marina_open: Union[bool, Unknown] = UNKNOWN
    sill_clearance: bool = False

    model_config = ConfigDict(frozen=True)

class DataRequirement(BaseModel):
    """Adjacent days needed before last/next events can be resolved."""
    need_yesterday: bool = False
    need_tomorrow: bool = False

    model_config = ConfigDict(frozen=True)
