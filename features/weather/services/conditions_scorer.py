from typing import Union

from core.harbour_time import MINUTES_PER_DAY
from features.common.models.unknown import Unknown, is_known
from features.tides.models.tide_types import MarinaEventKind, ResolvedTideState
from features.weather.models.conditions_types import ConditionsAssessment, Rating
from features.weather.models.weather_types import VisibilityCategory, WeatherReading
from features.wind.models.wind_types import WindWaveReading

# Minutes after sunset / before sunrise that still count as daylight
TWILIGHT_MINUTES = 30

POOR_VISIBILITY = {VisibilityCategory.POOR, VisibilityCategory.VERY_POOR}

class ConditionsScorer:
    @staticmethod
    def score(
        wind_wave: WindWaveReading,
        weather: WeatherReading,
        tide: ResolvedTideState,
        now_minute: int
    ) -> ConditionsAssessment:
        """Score sailing conditions out of 100. Not clamped, so may go negative."""
        marina_closed = (
            is_known(tide.last_marina_event)
            and tide.last_marina_event.kind == MarinaEventKind.CLOSED
        )

        if ConditionsScorer.is_night(now_minute, weather.sunrise, weather.sunset):
            return ConditionsAssessment(
                score=None,
                rating=Rating.NIGHT,
                factors=[],
                marina_closed=marina_closed
            )

        score = 100
        factors = []

        # Wind speed scoring
        if is_known(wind_wave.wind_speed_kt):
            if wind_wave.wind_speed_kt > 20:
                score -= 40
                factors.append("Strong winds")
            elif wind_wave.wind_speed_kt > 15:
                score -= 20
                factors.append("Moderate winds")

        # Sea state scoring, scaled for harbour exposure
        if is_known(wind_wave.wave_height_m):
            wave_height = wind_wave.wave_height_m * ConditionsScorer.direction_multiplier(
                wind_wave.wind_direction
            )
            if wave_height > 1.0:
                score -= 35
                factors.append("Rough seas")
            elif wave_height > 0.5:
                score -= 15
                factors.append("Moderate seas")

        if weather.precipitation:
            score -= 25
            factors.append("Rain")

        if is_known(weather.visibility) and weather.visibility in POOR_VISIBILITY:
            score -= 30
            factors.append("Poor visibility")

        if not tide.sill_clearance:
            score -= 50
            factors.append("Insufficient depth")

        if is_known(tide.current_height) and 0 < tide.current_height < 3.0:
            score -= 15
            factors.append("Low tide conditions")

        return ConditionsAssessment(
            score=score,
            rating=Rating.from_score(score),
            factors=factors,
            marina_closed=marina_closed
        )

    @staticmethod
    def direction_multiplier(wind_direction: Union[str, Unknown]) -> float:
        """Wave multiplier for wind direction. The harbour is sheltered from the west."""
        if not is_known(wind_direction):
            return 1.0
        direction = wind_direction.upper()
        if "W" in direction:
            return 0.7
        if "N" in direction or "S" in direction:
            return 1.5
        if "E" in direction:
            return 1.2
        return 1.0

    @staticmethod
    def is_night(
        now_minute: int,
        sunrise: Union[int, Unknown],
        sunset: Union[int, Unknown]
    ) -> bool:
        """Within [sunset + 30min, sunrise - 30min], wrapping past midnight."""
        if not is_known(sunrise) or not is_known(sunset):
            return False
        start = (sunset + TWILIGHT_MINUTES) % MINUTES_PER_DAY
        end = (sunrise - TWILIGHT_MINUTES) % MINUTES_PER_DAY
        if start <= end:
            return start <= now_minute <= end
        return now_minute >= start or now_minute <= end
