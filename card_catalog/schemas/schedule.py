from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, StrictInt, computed_field, field_validator, model_validator

from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.schemas.extraction import SkippedField
from card_catalog.utils.date_utils import coerce_date, to_iso_date

PeriodType = Literal["quarter", "month", "half_year", "year", "custom"]

# Allowed periodValue for each period type that needs one.
PERIOD_VALUE_RANGES: dict[str, tuple[int, int]] = {
    "quarter": (1, 4),
    "month": (1, 12),
    "half_year": (1, 2),
}


class RotatingPeriod(BaseModel):
    period_type: PeriodType
    period_value: StrictInt | None = None
    year: int

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_value(self) -> "RotatingPeriod":
        bounds = PERIOD_VALUE_RANGES.get(self.period_type)
        if bounds is None:
            return self
        low, high = bounds
        if self.period_value is None:
            raise ValueError(f"A period value is required for {self.period_type} periods")
        if not low <= self.period_value <= high:
            raise ValueError(
                f"Period value for {self.period_type} must be between {low} and {high}"
            )
        return self


class ScheduleEntry(BaseModel):
    """One period of a rotating multiplier, with its resolved date range."""

    id: str | None = None
    category: str = Field(min_length=1)
    sub_category: str = ""
    title: str = Field(min_length=1)
    period: RotatingPeriod
    start_date: date
    end_date: date
    is_custom_date_range: bool = False

    model_config = {"frozen": True}

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return coerce_date(v)

    @model_validator(mode="after")
    def validate_dates(self) -> "ScheduleEntry":
        if self.start_date > self.end_date:
            raise ValueError("start_date cannot be after end_date")
        if not self.title.strip():
            raise ValueError("title cannot be blank")
        return self

    @property
    def effective_range(self) -> EffectiveRange:
        return EffectiveRange(effective_from=self.start_date, effective_to=self.end_date)

    def to_record(self) -> dict:
        record = {
            "category": self.category,
            "subCategory": self.sub_category,
            "periodType": self.period.period_type,
            "year": self.period.year,
            "startDate": to_iso_date(self.start_date),
            "endDate": to_iso_date(self.end_date),
            "isCustomDateRange": self.is_custom_date_range,
            "title": self.title,
        }
        if self.period.period_value is not None:
            record["periodValue"] = self.period.period_value
        if self.id is not None:
            record["id"] = self.id
        return record


class ScheduleImportResult(BaseModel):
    entries: list[ScheduleEntry] = []
    skipped_fields: list[SkippedField] = []

    @computed_field
    @property
    def valid_count(self) -> int:
        return len(self.entries)

    @computed_field
    @property
    def skipped_count(self) -> int:
        return len(self.skipped_fields)
