from datetime import date

import pytest

from conftest import STANDARD_HOURLY, STANDARD_MARINAS, STANDARD_PEAKS, build_tide_page
from features.common.exceptions.harbour_exceptions import TideParseError
from features.common.models.unknown import UNKNOWN
from features.tides.models.tide_types import ExtremeType, MarinaEventKind
from features.tides.services.tide_parser import TideTableParser

DAY = date(2025, 6, 14)

@pytest.fixture
def parser():
    return TideTableParser()

def test_parses_all_three_table_kinds(parser, standard_page):
    data = parser.parse(standard_page, DAY)

    assert data.date == DAY
    assert len(data.readings) == 24
    assert [e.type for e in data.extremes] == [
        ExtremeType.LOW, ExtremeType.HIGH, ExtremeType.LOW, ExtremeType.HIGH
    ]
    assert data.extremes[1].time == 8 * 60 + 20
    assert data.extremes[1].height == pytest.approx(8.6)
    assert set(data.schedules) == {"Victoria Marina", "Albert Marina"}

def test_classification_ignores_table_order(parser):
    page = build_tide_page(STANDARD_HOURLY, STANDARD_PEAKS, STANDARD_MARINAS, peaks_first=True)
    data = parser.parse(page, DAY)

    assert len(data.readings) == 24
    assert len(data.extremes) == 4
    assert "Victoria Marina" in data.schedules

def test_hourly_readings_sorted_and_merged(parser):
    first = build_tide_page(hourly=[("12:00", "6.1"), ("03:00", "2.2")])
    second = build_tide_page(hourly=[("07:00", "4.0"), ("01:00", "1.5")])
    page = first.replace("</body></html>", "") + second.replace("<html><body>", "")

    data = parser.parse(page, DAY)

    times = [r.time for r in data.readings]
    assert times == sorted(times)
    assert times == [60, 180, 420, 720]

def test_non_numeric_hourly_rows_skipped(parser):
    page = build_tide_page(hourly=[("00:00", "3.4"), ("01:00", "--"), ("02:00", "4.1m")])
    data = parser.parse(page, DAY)

    assert [(r.time, r.height) for r in data.readings] == [(0, 3.4), (120, 4.1)]

def test_no_hourly_rows_is_parse_error(parser):
    page = build_tide_page(hourly=[("00:00", "n/a")], peaks=STANDARD_PEAKS)
    with pytest.raises(TideParseError):
        parser.parse(page, DAY)

def test_unrelated_markup_is_parse_error(parser):
    with pytest.raises(TideParseError):
        parser.parse("<html><body><p>Service unavailable</p></body></html>", DAY)

def test_bad_peak_row_skipped(parser):
    peaks = [("Low", "02:10", "1.8"), ("High", "08:20", "??"), ("HIGH", "20:45", "8.4")]
    data = parser.parse(build_tide_page(STANDARD_HOURLY, peaks), DAY)

    assert [(e.type, e.time) for e in data.extremes] == [
        (ExtremeType.LOW, 130),
        (ExtremeType.HIGH, 1245)
    ]

def test_non_alternating_extremes_dropped_keeping_readings(parser):
    peaks = [("Low", "02:10", "1.8"), ("High", "08:20", "8.6"), ("High", "08:40", "8.5")]
    data = parser.parse(build_tide_page(STANDARD_HOURLY, peaks, STANDARD_MARINAS), DAY)

    assert data.extremes == []
    assert len(data.readings) == 24
    assert set(data.schedules) == {"Victoria Marina", "Albert Marina"}

def test_signed_and_bare_decimal_heights(parser):
    page = build_tide_page(hourly=[("00:00", "+1.2"), ("01:00", ".5"), ("02:00", "-0.3m")])
    data = parser.parse(page, DAY)

    assert [(r.time, r.height) for r in data.readings] == [(0, 1.2), (60, 0.5), (120, -0.3)]

def test_marina_row_columns_and_unknown_cells(parser, standard_page):
    data = parser.parse(standard_page, DAY)
    albert = next(row for row in data.marina_table if row.marina == "Albert Marina")

    assert albert.open1 == "05:10"
    assert albert.close1 == "11:40"
    assert albert.open2 == "17:25"
    assert albert.close2 == UNKNOWN
    assert albert.open3 == UNKNOWN

def test_marina_events_sorted_with_kinds(parser, standard_page):
    data = parser.parse(standard_page, DAY)
    events = data.schedules["Victoria Marina"].events

    assert [(e.kind, e.time) for e in events] == [
        (MarinaEventKind.OPENED, 340),
        (MarinaEventKind.CLOSED, 665),
        (MarinaEventKind.OPENED, 1075),
        (MarinaEventKind.CLOSED, 1410),
    ]

def test_marina_table_needs_six_header_cells(parser):
    page = build_tide_page(STANDARD_HOURLY, marinas=STANDARD_MARINAS).replace(
        "<th>Marina</th><th>Open</th>", "<th>Marina</th>"
    )
    data = parser.parse(page, DAY)

    assert data.schedules == {}
