"""Closed field schemas for card, credit, perk and multiplier imports.

Each validator takes an arbitrary value and returns a ``FieldValidationResult``;
none of them raise.
"""
import math
import re
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ValidationError

from card_catalog.errors import InvalidPeriodError
from card_catalog.schemas.extraction import (
    AllowedCategoryImport,
    FieldValidationResult,
    ScheduleEntryImport,
)
from card_catalog.utils.period_utils import resolve

Validator = Callable[[Any], FieldValidationResult]

VALID_REWARDS_CURRENCIES = ("points", "miles", "cash back")
VALID_CREDIT_TIME_PERIODS = ("monthly", "quarterly", "semiannually", "annually")
VALID_MULTIPLIER_TYPES = ("standard", "rotating", "selectable")

OK = FieldValidationResult(valid=True)

_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")
_NUMERIC = re.compile(r"[0-9]+(\.[0-9]+)?")
_EMBEDDED_MULTIPLIER = re.compile(r"\d+x\s+on", re.IGNORECASE)


class FieldSpec(BaseModel):
    name: str
    validator: Validator

    model_config = {"frozen": True}

    def validate_value(self, value: Any) -> FieldValidationResult:
        return self.validator(value)


def _fail(reason: str) -> FieldValidationResult:
    return FieldValidationResult(valid=False, reason=reason, code="invalid")


def string(value: Any) -> FieldValidationResult:
    if not isinstance(value, str):
        return _fail("Must be a string")
    return OK


def non_empty_string(value: Any) -> FieldValidationResult:
    if not isinstance(value, str):
        return _fail("Must be a string")
    if value.strip() == "":
        return _fail("Cannot be empty")
    return OK


def hex_color(value: Any) -> FieldValidationResult:
    if not isinstance(value, str):
        return _fail("Must be a string")
    if not _HEX_COLOR.fullmatch(value):
        return _fail("Must be a valid hex color (e.g., #0A1F2E)")
    return OK


def numeric_string(value: Any) -> FieldValidationResult:
    if not isinstance(value, str):
        return _fail("Must be a string")
    if "$" in value:
        return _fail("Should not include $ sign")
    if not _NUMERIC.fullmatch(value.strip()):
        return _fail('Must be a numeric value (e.g., "300" or "12.95")')
    return OK


def number(value: Any) -> FieldValidationResult:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _fail("Must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        return _fail("Must be a number")
    return OK


def positive_number(value: Any) -> FieldValidationResult:
    result = number(value)
    if not result.valid:
        return result
    if value <= 0:
        return _fail("Must be greater than 0")
    return OK


def boolean(value: Any) -> FieldValidationResult:
    if not isinstance(value, bool):
        return _fail("Must be true or false")
    return OK


def one_of(choices: Iterable[str], reason: str) -> Validator:
    """Case-insensitive membership in a fixed vocabulary."""
    allowed = {c.lower() for c in choices}

    def _validate(value: Any) -> FieldValidationResult:
        if not isinstance(value, str):
            return _fail("Must be a string")
        if value.lower() not in allowed:
            return _fail(reason)
        return OK

    return _validate


def excludes(pattern: re.Pattern, reason: str) -> Validator:
    def _validate(value: Any) -> FieldValidationResult:
        if isinstance(value, str) and pattern.search(value):
            return _fail(reason)
        return OK

    return _validate


def all_of(*validators: Validator) -> Validator:
    def _validate(value: Any) -> FieldValidationResult:
        for validator in validators:
            result = validator(value)
            if not result.valid:
                return result
        return OK

    return _validate


def optional(validator: Validator) -> Validator:
    """``None`` is accepted; the consumer applies its default."""

    def _validate(value: Any) -> FieldValidationResult:
        if value is None:
            return OK
        return validator(value)

    return _validate


def _allowed_category_entry(entry: Any) -> bool:
    try:
        AllowedCategoryImport.model_validate(entry)
    except ValidationError:
        return False
    return True


def _schedule_entry(entry: Any) -> bool:
    try:
        parsed = ScheduleEntryImport.model_validate(entry)
        resolve(parsed.period_type, parsed.period_value, parsed.year)
    except (ValidationError, InvalidPeriodError):
        return False
    return True


def allowed_categories(value: Any) -> FieldValidationResult:
    if not isinstance(value, list):
        return _fail("Must be an array")
    if not value:
        return _fail("Must have at least one category")
    if not all(_allowed_category_entry(e) for e in value):
        return _fail("Each entry must have category, subCategory, and displayName")
    return OK


def schedule_entries(value: Any) -> FieldValidationResult:
    if not isinstance(value, list):
        return _fail("Must be an array")
    # A rotating multiplier may not have a schedule yet.
    if not all(_schedule_entry(e) for e in value):
        return _fail(
            "Each entry must have category, subCategory, periodType, a periodValue "
            "valid for that periodType, year, and title (non-empty)"
        )
    return OK


def _spec(name: str, validator: Validator) -> FieldSpec:
    return FieldSpec(name=name, validator=validator)


_CARD = (
    _spec("CardName", non_empty_string),
    _spec("CardIssuer", non_empty_string),
    _spec("CardNetwork", non_empty_string),
    _spec("CardDetails", non_empty_string),
    _spec("CardPrimaryColor", hex_color),
    _spec("CardSecondaryColor", hex_color),
    _spec("AnnualFee", number),
    _spec("ForeignExchangeFee", non_empty_string),
    _spec("ForeignExchangeFeePercentage", number),
    _spec("RewardsCurrency", one_of(
        VALID_REWARDS_CURRENCIES, 'Must be "points", "miles", or "cash back"'
    )),
    _spec("PointsPerDollar", number),
)

_CREDIT = (
    _spec("Title", non_empty_string),
    _spec("Category", non_empty_string),
    _spec("SubCategory", string),
    _spec("Description", non_empty_string),
    _spec("Value", numeric_string),
    _spec("TimePeriod", one_of(
        VALID_CREDIT_TIME_PERIODS, "Must be monthly, quarterly, semiannually, or annually"
    )),
    _spec("Requirements", string),
    _spec("Details", string),
    _spec("isAnniversaryBased", optional(boolean)),
)

_PERK = (
    _spec("Title", non_empty_string),
    _spec("Category", non_empty_string),
    _spec("SubCategory", string),
    _spec("Description", non_empty_string),
    _spec("Requirements", string),
    _spec("Details", string),
)

_MULTIPLIER = (
    _spec("Name", all_of(
        non_empty_string,
        excludes(
            _EMBEDDED_MULTIPLIER,
            'Should not include multiplier value (e.g., use "Dining" not "3X on Dining")',
        ),
    )),
    # Empty for rotating and selectable multipliers.
    _spec("Category", string),
    _spec("SubCategory", string),
    _spec("Description", non_empty_string),
    _spec("Multiplier", positive_number),
    _spec("Requirements", string),
    _spec("Details", string),
    _spec("multiplierType", optional(one_of(
        VALID_MULTIPLIER_TYPES, 'Must be "standard", "rotating", or "selectable"'
    ))),
    _spec("allowedCategories", optional(allowed_categories)),
    _spec("scheduleEntries", optional(schedule_entries)),
)

SCHEMAS: dict[str, tuple[FieldSpec, ...]] = {
    "card": _CARD,
    "credit": _CREDIT,
    "perk": _PERK,
    "multiplier": _MULTIPLIER,
}
