from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class Rating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    CAUTION = "Caution"
    POOR = "Poor"
    NIGHT = "Night"

    @classmethod
    def from_score(cls, score: int) -> "Rating":
        if score >= 80:
            return cls.EXCELLENT
        if score >= 60:
            return cls.GOOD
        if score >= 40:
            return cls.CAUTION
        return cls.POOR

class ConditionsAssessment(BaseModel):
    """Go/no-go sailing assessment. A score of None means night."""
    score: Optional[int] = Field(None, description="100 minus penalties, may be negative")
    rating: Rating
    factors: List[str] = Field(default_factory=list)
    marina_closed: bool = False

    model_config = ConfigDict(frozen=True)
