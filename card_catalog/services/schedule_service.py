import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from card_catalog.config import settings
from card_catalog.errors import InvalidPeriodError
from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.schemas.extraction import FieldValidationResult, SkippedField
from card_catalog.schemas.schedule import RotatingPeriod, ScheduleEntry, ScheduleImportResult
from card_catalog.services.schema_rules import OK, non_empty_string, one_of, string
from card_catalog.utils.date_utils import today
from card_catalog.utils.period_utils import resolve, resolve_custom, resolve_period

logger = logging.getLogger(__name__)

# Uploaded schedules carry no dates, so "custom" cannot be imported.
IMPORTABLE_PERIOD_TYPES = ("quarter", "month", "half_year", "year")


def build_schedule_entry(
    category: str,
    sub_category: str,
    title: str,
    period: RotatingPeriod,
    custom_range: EffectiveRange | None = None,
    entry_id: str | None = None,
) -> ScheduleEntry:
    """Create a schedule entry with its dates filled in.

    A ``custom_range`` overrides the computed dates for any period type and
    marks the entry as custom; it must have an end date.
    """
    if custom_range is not None:
        if custom_range.is_ongoing:
            raise InvalidPeriodError("End date is required", field="endDate")
        rng = resolve_custom(custom_range.effective_from, custom_range.effective_to)
    else:
        rng = resolve_period(period)
    return ScheduleEntry(
        id=entry_id,
        category=category,
        sub_category=sub_category,
        title=title,
        period=period,
        start_date=rng.effective_from,
        end_date=rng.resolved_to,
        is_custom_date_range=custom_range is not None,
    )


def current_schedule_entries(
    entries: Iterable[ScheduleEntry],
    on: date | None = None,
) -> list[ScheduleEntry]:
    day = on or today()
    return [e for e in entries if e.start_date <= day <= e.end_date]


def _period_value(value: Any) -> FieldValidationResult:
    # Range depends on periodType; checked when the entry is resolved.
    if value is None:
        return OK
    if isinstance(value, bool) or not isinstance(value, int):
        return FieldValidationResult(valid=False, reason="Must be a whole number", code="invalid")
    return OK


def _year(value: Any) -> FieldValidationResult:
    if isinstance(value, bool) or not isinstance(value, int):
        return FieldValidationResult(valid=False, reason="Must be a whole number", code="invalid")
    low, high = settings.schedule_min_year, settings.schedule_max_year
    if not low <= value <= high:
        return FieldValidationResult(
            valid=False, reason=f"Must be between {low} and {high}", code="invalid"
        )
    return OK


_ENTRY_FIELDS = (
    ("category", non_empty_string),
    ("subCategory", string),
    ("periodType", one_of(
        IMPORTABLE_PERIOD_TYPES, "Must be quarter, month, half_year, or year"
    )),
    ("periodValue", _period_value),
    ("year", _year),
    ("title", non_empty_string),
)


def _import_entry(index: int, raw: Any, skipped: list[SkippedField]) -> ScheduleEntry | None:
    if not isinstance(raw, Mapping):
        skipped.append(SkippedField(field=f"[{index}]", reason="Entry must be an object"))
        return None

    problems = []
    for name, validator in _ENTRY_FIELDS:
        result = validator(raw.get(name))
        if not result.valid:
            problems.append(SkippedField(field=f"[{index}].{name}", reason=result.reason or "Invalid value"))
    if problems:
        skipped.extend(problems)
        return None

    period_type = raw["periodType"].lower()
    try:
        rng = resolve(period_type, raw.get("periodValue"), raw["year"])
    except InvalidPeriodError as exc:
        skipped.append(SkippedField(field=f"[{index}].{exc.field or 'periodValue'}", reason=str(exc)))
        return None

    return ScheduleEntry(
        category=raw["category"],
        sub_category=raw.get("subCategory") or "",
        title=raw["title"].strip(),
        period=RotatingPeriod(
            period_type=period_type,
            period_value=None if period_type == "year" else raw.get("periodValue"),
            year=raw["year"],
        ),
        start_date=rng.effective_from,
        end_date=rng.resolved_to,
    )


def extract_schedule_entries(raw: Any) -> ScheduleImportResult:
    """Validate an uploaded rotating-category array, keeping the usable entries.

    Problems are reported per field as ``[i].field``. Keys outside the entry
    schema are ignored. Never raises.
    """
    if not isinstance(raw, list):
        return ScheduleImportResult(skipped_fields=[
            SkippedField(field="$", reason=f"Expected an array, got {type(raw).__name__}")
        ])
    if not raw:
        return ScheduleImportResult(skipped_fields=[SkippedField(field="$", reason="Array is empty")])

    entries: list[ScheduleEntry] = []
    skipped: list[SkippedField] = []
    for index, item in enumerate(raw):
        entry = _import_entry(index, item, skipped)
        if entry is not None:
            entries.append(entry)

    logger.info(
        "Imported %d rotating schedule entr(ies), %d problem(s)", len(entries), len(skipped)
    )
    return ScheduleImportResult(entries=entries, skipped_fields=skipped)
