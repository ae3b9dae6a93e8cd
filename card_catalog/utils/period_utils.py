from datetime import date

from dateutil.relativedelta import relativedelta

from card_catalog.errors import InvalidPeriodError
from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.schemas.schedule import PERIOD_VALUE_RANGES, RotatingPeriod
from card_catalog.utils.date_utils import ONGOING_SENTINEL, parse_local_date

# Fixed (month, day) boundaries; never derived from month-length arithmetic.
_QUARTERS = {
    1: ((1, 1), (3, 31)),
    2: ((4, 1), (6, 30)),
    3: ((7, 1), (9, 30)),
    4: ((10, 1), (12, 31)),
}
_HALVES = {
    1: ((1, 1), (6, 30)),
    2: ((7, 1), (12, 31)),
}


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_value(period_type: str, period_value: object) -> int:
    low, high = PERIOD_VALUE_RANGES[period_type]
    if period_value is None:
        raise InvalidPeriodError(
            f"A period value is required for {period_type} periods",
            field="periodValue",
        )
    if not _is_int(period_value):
        raise InvalidPeriodError(
            f"Period value must be an integer, got {period_value!r}",
            field="periodValue",
            value=period_value,
        )
    if not low <= period_value <= high:
        raise InvalidPeriodError(
            f"Period value for {period_type} must be between {low} and {high}, got {period_value}",
            field="periodValue",
            value=period_value,
        )
    return period_value


def resolve(period_type: str, period_value: int | None, year: int) -> EffectiveRange:
    """Return the calendar range a rotating period covers.

    ``custom`` periods have no intrinsic range; use ``resolve_custom``.
    """
    if not _is_int(year) or not 1 <= year <= 9998:
        raise InvalidPeriodError(f"Invalid year {year!r}", field="year", value=year)

    if period_type == "year":
        start, end = date(year, 1, 1), date(year, 12, 31)
    elif period_type == "quarter":
        (sm, sd), (em, ed) = _QUARTERS[_check_value(period_type, period_value)]
        start, end = date(year, sm, sd), date(year, em, ed)
    elif period_type == "half_year":
        (sm, sd), (em, ed) = _HALVES[_check_value(period_type, period_value)]
        start, end = date(year, sm, sd), date(year, em, ed)
    elif period_type == "month":
        start = date(year, _check_value(period_type, period_value), 1)
        end = start + relativedelta(months=1) - relativedelta(days=1)
    elif period_type == "custom":
        raise InvalidPeriodError(
            "Custom periods need an explicit start and end date",
            field="periodType",
            value=period_type,
        )
    else:
        raise InvalidPeriodError(
            f"Unknown period type {period_type!r}",
            field="periodType",
            value=period_type,
        )
    return EffectiveRange(effective_from=start, effective_to=end)


def resolve_custom(
    effective_from: date | str,
    effective_to: date | str | None,
) -> EffectiveRange:
    """Validate a caller-supplied range; an empty end means ongoing."""
    if isinstance(effective_from, str):
        effective_from = parse_local_date(effective_from)
    if effective_to == "" or effective_to == ONGOING_SENTINEL:
        effective_to = None
    elif isinstance(effective_to, str):
        effective_to = parse_local_date(effective_to)

    if effective_to is not None and effective_from > effective_to:
        raise InvalidPeriodError(
            "End date must be on or after start date",
            field="endDate",
            value=effective_to,
        )
    return EffectiveRange(effective_from=effective_from, effective_to=effective_to)


def resolve_period(
    period: RotatingPeriod,
    custom_range: EffectiveRange | None = None,
) -> EffectiveRange:
    if period.period_type == "custom":
        if custom_range is None:
            raise InvalidPeriodError(
                "Custom periods need an explicit start and end date",
                field="periodType",
                value=period.period_type,
            )
        return resolve_custom(custom_range.effective_from, custom_range.effective_to)
    return resolve(period.period_type, period.period_value, period.year)


def period_containing(period_type: str, day: date) -> RotatingPeriod:
    """Return the calendar period of ``period_type`` that contains ``day``."""
    if period_type == "month":
        value = day.month
    elif period_type == "quarter":
        value = (day.month - 1) // 3 + 1
    elif period_type == "half_year":
        value = 1 if day.month <= 6 else 2
    elif period_type == "year":
        value = None
    else:
        raise InvalidPeriodError(
            f"Cannot derive a {period_type!r} period from a date",
            field="periodType",
            value=period_type,
        )
    return RotatingPeriod(period_type=period_type, period_value=value, year=day.year)
