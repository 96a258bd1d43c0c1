import logging
import re
from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from bs4 import BeautifulSoup
from bs4.element import Tag
from pydantic import ValidationError

from core.harbour_time import hhmm_to_minutes
from features.common.exceptions.harbour_exceptions import TideParseError
from features.common.models.unknown import Unknown, UNKNOWN, is_known
from features.tides.models.tide_types import (
    DayTideData,
    ExtremeType,
    MarinaEvent,
    MarinaEventKind,
    MarinaSchedule,
    MarinaTimes,
    TideExtreme,
    TideReading
)

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"^[-+]?(?:\d+(?:\.\d+)?|\.\d+)")

# Marina table columns after the name, in published order
MARINA_COLUMNS = ("open1", "close1", "open2", "close2", "open3")
_COLUMN_KINDS = {
    "open1": MarinaEventKind.OPENED,
    "close1": MarinaEventKind.CLOSED,
    "open2": MarinaEventKind.OPENED,
    "close2": MarinaEventKind.CLOSED,
    "open3": MarinaEventKind.OPENED,
}

class TideTableParser:
    """Parse one day's tide page into readings, extremes and marina schedules.

    Tables are classified by their content rather than their position because
    the upstream page reorders them between dates:

    - marina table: header row of exactly 6 cells, first containing "Marina"
    - peak table: first data row's first cell contains "Low" or "High"
    - hourly table: exactly 2 header cells containing "Time" and "Height"
    """

    def parse(self, markup: str, day: date) -> DayTideData:
        soup = BeautifulSoup(markup, "html.parser")

        readings: List[TideReading] = []
        extremes: List[TideExtreme] = []
        marina_table: List[MarinaTimes] = []

        for table in soup.find_all("table"):
            rows = self._rows(table)
            if not rows:
                continue
            header = rows[0]

            if self._is_marina_table(header):
                marina_table.extend(self._parse_marina_rows(rows[1:]))
            elif self._is_peak_table(rows):
                extremes.extend(self._parse_peak_rows(rows[1:]))
            elif self._is_hourly_table(header):
                readings.extend(self._parse_hourly_rows(rows[1:]))

        if not readings:
            raise TideParseError(f"No hourly tide readings found for {day.isoformat()}")

        # One reading per minute, first table wins when hourly tables overlap
        unique: Dict[int, TideReading] = {}
        for reading in readings:
            unique.setdefault(reading.time, reading)
        readings = sorted(unique.values(), key=lambda r: r.time)
        extremes.sort(key=lambda e: e.time)
        if not self._extremes_alternate(extremes):
            logger.warning(f"⚠️  High/low water for {day.isoformat()} does not alternate, dropping extremes")
            extremes = []

        try:
            return DayTideData(
                date=day,
                readings=readings,
                extremes=extremes,
                schedules=self._build_schedules(marina_table),
                marina_table=marina_table
            )
        except ValidationError as e:
            raise TideParseError(f"Malformed tide data for {day.isoformat()}: {e}") from e

    @staticmethod
    def _rows(table: Tag) -> List[List[str]]:
        rows = []
        for tr in table.find_all("tr"):
            cells = tr.find_all(["th", "td"])
            rows.append([cell.get_text(strip=True) for cell in cells])
        return rows

    @staticmethod
    def _is_marina_table(header: Sequence[str]) -> bool:
        return len(header) == 6 and "Marina" in header[0]

    @staticmethod
    def _is_peak_table(rows: Sequence[Sequence[str]]) -> bool:
        if len(rows) < 2 or not rows[1]:
            return False
        first = rows[1][0]
        return "Low" in first or "High" in first

    @staticmethod
    def _is_hourly_table(header: Sequence[str]) -> bool:
        return len(header) == 2 and "Time" in header[0] and "Height" in header[1]

    @staticmethod
    def _extremes_alternate(extremes: Sequence[TideExtreme]) -> bool:
        return all(previous.type != current.type for previous, current in zip(extremes, extremes[1:]))

    @staticmethod
    def _parse_number(text: str) -> Optional[float]:
        """Leading number of a cell, tolerating unit suffixes like '8.52m'."""
        match = _NUMBER.match(text.strip())
        if not match:
            return None
        return float(match.group(0))

    def _parse_marina_rows(self, rows: Sequence[Sequence[str]]) -> List[MarinaTimes]:
        table = []
        for row in rows:
            if not row or not row[0].strip():
                continue
            values: Dict[str, Union[str, Unknown]] = {}
            for index, column in enumerate(MARINA_COLUMNS, start=1):
                text = row[index].strip() if index < len(row) else ""
                values[column] = text if text else UNKNOWN
            table.append(MarinaTimes(marina=row[0].strip(), **values))
        return table

    def _parse_peak_rows(self, rows: Sequence[Sequence[str]]) -> List[TideExtreme]:
        extremes = []
        for row in rows:
            if len(row) < 3:
                continue
            label = row[0].lower()
            if "high" in label:
                kind = ExtremeType.HIGH
            elif "low" in label:
                kind = ExtremeType.LOW
            else:
                continue
            minutes = hhmm_to_minutes(row[1])
            height = self._parse_number(row[2])
            if minutes is None or height is None:
                logger.debug(f"Skipping peak row {row}")
                continue
            extremes.append(TideExtreme(type=kind, time=minutes, height=height))
        return extremes

    def _parse_hourly_rows(self, rows: Sequence[Sequence[str]]) -> List[TideReading]:
        readings = []
        for row in rows:
            if len(row) < 2:
                continue
            minutes = hhmm_to_minutes(row[0])
            height = self._parse_number(row[1])
            if minutes is None or height is None:
                continue
            readings.append(TideReading(time=minutes, height=height))
        return readings

    def _build_schedules(self, marina_table: Sequence[MarinaTimes]) -> Dict[str, MarinaSchedule]:
        schedules = {}
        for row in marina_table:
            events = []
            for column in MARINA_COLUMNS:
                value = getattr(row, column)
                if not is_known(value):
                    continue
                minutes = hhmm_to_minutes(value)
                if minutes is None:
                    continue
                events.append(MarinaEvent(kind=_COLUMN_KINDS[column], time=minutes))
            schedules[row.marina] = MarinaSchedule(marina_name=row.marina, events=events)
        return schedules
