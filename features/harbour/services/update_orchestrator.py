import asyncio
import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError

from core.harbour_time import harbour_now, minute_of_day
from features.common.exceptions.harbour_exceptions import (
    HarbourDataError,
    InvalidConfigurationError,
    MissingBoundaryDataError
)
from features.common.services.proxy_channel import ProxyChannel
from features.harbour.models.harbour_types import AppState, SailingSettings, SourceStatus
from features.tides.models.tide_types import DayTideData
from features.tides.services.interval_resolver import probe_requirements, resolve_tide_state
from features.tides.services.tide_service import TideService
from features.weather.services.conditions_scorer import ConditionsScorer
from features.weather.services.weather_service import WeatherService
from features.wind.services.wind_wave_service import WindWaveService

logger = logging.getLogger(__name__)

class UpdateOrchestrator:
    """Runs refresh cycles and owns the displayable AppState snapshot.

    A cycle acquires a proxy, then updates tides, wind/wave and weather in
    turn, each domain failing on its own without touching the others, and
    finally scores the result. Every step publishes a new snapshot; nothing
    mutates one in place. Cycles do not overlap: a trigger that arrives while
    a cycle is running returns the current snapshot unchanged.
    """

    def __init__(
        self,
        channel: ProxyChannel,
        tide_service: TideService,
        wind_wave_service: WindWaveService,
        weather_service: WeatherService,
        sailing_settings: Optional[SailingSettings] = None,
        clock: Callable[[], datetime] = harbour_now
    ):
        self.channel = channel
        self.tide_service = tide_service
        self.wind_wave_service = wind_wave_service
        self.weather_service = weather_service
        self.clock = clock
        self.state = AppState(settings=sailing_settings or SailingSettings())
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def refresh(self) -> AppState:
        """Run one refresh cycle and return the resulting snapshot."""
        if self._in_flight:
            logger.info("⏳ Refresh already in progress, ignoring trigger")
            return self.state

        self._in_flight = True
        try:
            await self._run_cycle()
        finally:
            self._in_flight = False
        return self.state

    async def update_settings(self, values: Union[SailingSettings, Dict[str, Any]]) -> AppState:
        """Validate and apply new sailing settings, then refresh."""
        if isinstance(values, SailingSettings):
            validated = values
        else:
            try:
                validated = SailingSettings(**values)
            except ValidationError as e:
                raise InvalidConfigurationError(str(e)) from e

        logger.info(f"⚙️  Settings updated: marina={validated.marina} draft={validated.boat_draft}m")
        self._publish({"settings": validated})
        return await self.refresh()

    async def _run_cycle(self) -> None:
        logger.info("🔄 Starting refresh cycle")

        proxy = await self.channel.acquire()
        if proxy is None:
            logger.error("❌ No data source available, keeping previous values")
            self._publish({"source_status": SourceStatus.NO_SOURCE})
            return

        # Settings stored while the cycle runs apply from the next cycle
        now = self.clock()
        sailing = self.state.settings
        self._publish({"source_status": SourceStatus.OK})
        self._publish(await self._update_tides(sailing, now))
        self._publish(await self._update_wind_wave())
        self._publish(await self._update_weather())
        self._publish(self._assess(now))
        logger.info("✅ Refresh cycle complete")

    def _publish(self, update: Dict[str, Any]) -> None:
        """Merge one domain's fields into the latest snapshot."""
        self.state = self.state.model_copy(update=update)

    async def _update_tides(self, sailing: SailingSettings, now: datetime) -> Dict[str, Any]:
        today = now.date()
        now_minute = minute_of_day(now)
        draft = sailing.boat_draft
        marina = sailing.marina

        try:
            today_data = await self.tide_service.get_day(today, draft)

            requirement = probe_requirements(today_data, marina, now_minute)
            if requirement.need_yesterday or requirement.need_tomorrow:
                logger.info(
                    f"📅 Backfill needed: yesterday={requirement.need_yesterday} "
                    f"tomorrow={requirement.need_tomorrow}"
                )

            yesterday_data, tomorrow_data = await asyncio.gather(
                self._fetch_adjacent(today - timedelta(days=1), draft, requirement.need_yesterday),
                self._fetch_adjacent(today + timedelta(days=1), draft, requirement.need_tomorrow)
            )

            tide = resolve_tide_state(
                today_data,
                now_minute,
                marina,
                draft,
                yesterday=yesterday_data,
                tomorrow=tomorrow_data
            )
        except HarbourDataError as e:
            logger.error(f"❌ Tide update failed: {str(e)}")
            return {"tide_error": str(e)}
        except Exception as e:
            logger.error(f"❌ Unexpected error updating tides: {e!r}")
            return {"tide_error": f"Unexpected error: {e!r}"}

        return {
            "tide": tide,
            "marina_table": today_data.marina_table,
            "tide_error": None
        }

    async def _fetch_adjacent(self, day: date, draft: float, needed: bool) -> Optional[DayTideData]:
        if not needed:
            return None
        try:
            return await self.tide_service.get_day(day, draft)
        except HarbourDataError as e:
            error = MissingBoundaryDataError(f"Tide data for {day.isoformat()} unavailable: {str(e)}")
            logger.warning(f"⚠️  {error}")
            return None

    async def _update_wind_wave(self) -> Dict[str, Any]:
        try:
            reading = await self.wind_wave_service.get_current()
        except HarbourDataError as e:
            logger.error(f"❌ Wind/wave update failed: {str(e)}")
            return {"wind_wave_error": str(e)}
        except Exception as e:
            logger.error(f"❌ Unexpected error updating wind/wave: {e!r}")
            return {"wind_wave_error": f"Unexpected error: {e!r}"}
        return {"wind_wave": reading, "wind_wave_error": None}

    async def _update_weather(self) -> Dict[str, Any]:
        try:
            reading = await self.weather_service.get_current()
        except HarbourDataError as e:
            logger.error(f"❌ Weather update failed: {str(e)}")
            return {"weather_error": str(e)}
        except Exception as e:
            logger.error(f"❌ Unexpected error updating weather: {e!r}")
            return {"weather_error": f"Unexpected error: {e!r}"}
        return {"weather": reading, "weather_error": None}

    def _assess(self, now: datetime) -> Dict[str, Any]:
        assessment = ConditionsScorer.score(
            self.state.wind_wave,
            self.state.weather,
            self.state.tide,
            minute_of_day(now)
        )
        return {"assessment": assessment, "last_updated": now}
