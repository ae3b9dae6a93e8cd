from datetime import date

from pydantic import BaseModel, field_validator, model_validator

from card_catalog.utils.date_utils import (
    ONGOING_DATE,
    ONGOING_SENTINEL,
    format_date_range,
    coerce_date,
    parse_local_date,
    to_iso_date,
)


class EffectiveRange(BaseModel):
    """Closed validity window; ``effective_to=None`` means ongoing.

    The ``9999-12-31`` sentinel only appears at the wire boundary
    (``from_wire``/``to_wire``). Comparisons go through ``resolved_to``.
    """

    effective_from: date
    effective_to: date | None = None

    model_config = {"frozen": True}

    @field_validator("effective_from", "effective_to", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return coerce_date(v)

    @field_validator("effective_to")
    @classmethod
    def collapse_sentinel(cls, v: date | None) -> date | None:
        if v == ONGOING_DATE:
            return None
        return v

    @model_validator(mode="after")
    def validate_order(self) -> "EffectiveRange":
        if self.effective_from > self.resolved_to:
            raise ValueError("effective_from cannot be after effective_to")
        return self

    @property
    def is_ongoing(self) -> bool:
        return self.effective_to is None

    @property
    def resolved_to(self) -> date:
        return ONGOING_DATE if self.effective_to is None else self.effective_to

    def contains(self, day: date) -> bool:
        return self.effective_from <= day <= self.resolved_to

    @classmethod
    def from_wire(cls, effective_from: str, effective_to: str | None = None) -> "EffectiveRange":
        start = parse_local_date(effective_from)
        if not effective_to or effective_to == ONGOING_SENTINEL:
            return cls(effective_from=start)
        return cls(effective_from=start, effective_to=parse_local_date(effective_to))

    def to_wire(self) -> dict[str, str]:
        return {
            "effectiveFrom": to_iso_date(self.effective_from),
            "effectiveTo": to_iso_date(self.resolved_to),
        }

    def display(self) -> str:
        return format_date_range(self.effective_from, self.effective_to)
