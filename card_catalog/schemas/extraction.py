from typing import Any, Literal

from pydantic import BaseModel, Field, StrictInt, StrictStr, computed_field

EntityType = Literal["card", "credit", "perk", "multiplier"]
ResultCode = Literal["missing", "invalid", "unexpected"]


class FieldValidationResult(BaseModel):
    valid: bool
    reason: str | None = None
    code: ResultCode | None = None

    model_config = {"frozen": True}


class SkippedField(BaseModel):
    field: str
    reason: str

    model_config = {"frozen": True}


class ExtractedFields(BaseModel):
    """Valid subset of an imported object plus the fields that were dropped."""

    valid_fields: dict[str, Any] = {}
    skipped_fields: list[SkippedField] = []

    @computed_field
    @property
    def valid_count(self) -> int:
        return len(self.valid_fields)

    @computed_field
    @property
    def skipped_count(self) -> int:
        return len(self.skipped_fields)


class ObjectValidationResult(BaseModel):
    valid: bool
    invalid_fields: list[str] = []
    field_results: dict[str, FieldValidationResult] = {}


class AllowedCategoryImport(BaseModel):
    """Entry of a selectable multiplier's ``allowedCategories`` list."""

    category: StrictStr
    sub_category: StrictStr = Field(alias="subCategory")
    display_name: StrictStr = Field(alias="displayName")

    model_config = {"strict": True, "extra": "ignore"}


class ScheduleEntryImport(BaseModel):
    """Entry of a rotating multiplier's ``scheduleEntries`` list."""

    category: StrictStr
    sub_category: StrictStr = Field(alias="subCategory")
    period_type: Literal["quarter", "month", "half_year", "year"] = Field(alias="periodType")
    period_value: StrictInt | None = Field(default=None, alias="periodValue")
    year: StrictInt
    title: StrictStr = Field(pattern=r"^\s*\S[\s\S]*$")

    model_config = {"strict": True, "extra": "ignore"}
