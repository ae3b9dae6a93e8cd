from datetime import date

import pytest
from pydantic import ValidationError

from card_catalog.config import settings
from card_catalog.errors import InvalidPeriodError
from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.schemas.schedule import RotatingPeriod, ScheduleEntry
from card_catalog.services.schedule_service import (
    build_schedule_entry,
    current_schedule_entries,
    extract_schedule_entries,
)


def _entry(**overrides) -> dict:
    entry = {
        "category": "shopping",
        "subCategory": "online shopping",
        "periodType": "quarter",
        "periodValue": 4,
        "year": 2025,
        "title": "Amazon.com and Target",
    }
    entry.update(overrides)
    return entry


# --- Building entries ---

def test_build_entry_resolves_dates():
    entry = build_schedule_entry(
        "gas", "gas stations", "Gas stations and EV charging",
        RotatingPeriod(period_type="quarter", period_value=3, year=2025),
    )
    assert entry.start_date == date(2025, 7, 1)
    assert entry.end_date == date(2025, 9, 30)
    assert entry.is_custom_date_range is False


def test_build_entry_month_in_leap_year():
    entry = build_schedule_entry(
        "dining", "", "Restaurants",
        RotatingPeriod(period_type="month", period_value=2, year=2028),
    )
    assert entry.end_date == date(2028, 2, 29)


def test_build_entry_custom_range():
    entry = build_schedule_entry(
        "travel", "hotels", "Holiday travel",
        RotatingPeriod(period_type="custom", year=2025),
        custom_range=EffectiveRange(effective_from=date(2025, 11, 15), effective_to=date(2026, 1, 15)),
    )
    assert entry.is_custom_date_range
    assert entry.effective_range.contains(date(2025, 12, 25))


def test_build_entry_custom_range_needs_end():
    with pytest.raises(InvalidPeriodError):
        build_schedule_entry(
            "travel", "", "Open ended",
            RotatingPeriod(period_type="custom", year=2025),
            custom_range=EffectiveRange(effective_from=date(2025, 1, 1)),
        )


@pytest.mark.parametrize("period_type, period_value", [
    ("half_year", 3),
    ("quarter", 9),
    ("month", 0),
    ("month", None),
    ("quarter", True),
])
def test_rotating_period_rejects_bad_value(period_type, period_value):
    with pytest.raises(ValidationError):
        RotatingPeriod(period_type=period_type, period_value=period_value, year=2025)


def test_rotating_period_year_and_custom_need_no_value():
    assert RotatingPeriod(period_type="year", year=2025).period_value is None
    assert RotatingPeriod(period_type="custom", year=2025).period_value is None


def test_entry_dates_parse_as_local_days():
    entry = ScheduleEntry(
        category="gas", title="Gas",
        period=RotatingPeriod(period_type="quarter", period_value=1, year=2025),
        start_date="2025-01-01T00:00:00Z", end_date="2025-03-31",
    )
    assert entry.end_date == date(2025, 3, 31)
    with pytest.raises(ValidationError):
        ScheduleEntry(
            category="gas", title="Gas",
            period=RotatingPeriod(period_type="quarter", period_value=1, year=2025),
            start_date=1735689600, end_date="2025-03-31",
        )


def test_entry_record_uses_iso_dates():
    entry = build_schedule_entry(
        "gas", "", "Gas", RotatingPeriod(period_type="half_year", period_value=1, year=2025),
    )
    record = entry.to_record()
    assert record["startDate"] == "2025-01-01"
    assert record["endDate"] == "2025-06-30"
    assert record["periodValue"] == 1


def test_current_schedule_entries():
    entries = [
        build_schedule_entry("gas", "", f"Q{q}", RotatingPeriod(period_type="quarter", period_value=q, year=2025))
        for q in (1, 2, 3, 4)
    ]
    current = current_schedule_entries(entries, date(2025, 4, 1))
    assert [e.title for e in current] == ["Q2"]


# --- Importing uploaded schedules ---

def test_import_valid_entries():
    result = extract_schedule_entries([
        _entry(),
        _entry(periodType="Year", periodValue=None, title="All year"),
    ])
    assert result.valid_count == 2
    assert result.entries[0].end_date == date(2025, 12, 31)
    assert result.entries[1].period.period_type == "year"
    assert result.entries[1].start_date == date(2025, 1, 1)


def test_import_reports_problems_per_field():
    result = extract_schedule_entries([
        _entry(),
        _entry(category="", title=""),
        _entry(periodValue=5),
        "not an entry",
    ])
    assert result.valid_count == 1
    fields = [s.field for s in result.skipped_fields]
    assert fields == ["[1].category", "[1].title", "[2].periodValue", "[3]"]


def test_import_requires_period_value_for_quarters():
    result = extract_schedule_entries([_entry(periodValue=None)])
    assert result.valid_count == 0
    assert result.skipped_fields[0].field == "[0].periodValue"


def test_import_rejects_custom_periods():
    result = extract_schedule_entries([_entry(periodType="custom")])
    assert result.skipped_fields[0].field == "[0].periodType"


def test_import_year_bounds_come_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "schedule_max_year", 2024)
    result = extract_schedule_entries([_entry(year=2025)])
    assert result.skipped_fields[0].field == "[0].year"
    assert result.skipped_fields[0].reason == "Must be between 2000 and 2024"


def test_import_ignores_unknown_keys():
    result = extract_schedule_entries([_entry(startDate="2025-10-01", note="x")])
    assert result.valid_count == 1


@pytest.mark.parametrize("raw", [None, {}, "[]", 3])
def test_import_non_array(raw):
    result = extract_schedule_entries(raw)
    assert result.valid_count == 0
    assert result.skipped_fields[0].field == "$"


def test_import_empty_array():
    result = extract_schedule_entries([])
    assert result.skipped_fields[0].reason == "Array is empty"
