from collections.abc import Mapping
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.utils.date_utils import ONGOING_DATE, coerce_date, to_iso_date


class VersionState(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Version(BaseModel):
    id: str = Field(min_length=1)
    version_name: str = ""
    effective_from: date
    effective_to: date | None = None
    is_active: bool = False

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
    def validate_order(self) -> "Version":
        if self.effective_to is not None and self.effective_from > self.effective_to:
            raise ValueError("effective_from cannot be after effective_to")
        return self

    @property
    def effective_range(self) -> EffectiveRange:
        return EffectiveRange(effective_from=self.effective_from, effective_to=self.effective_to)

    @property
    def state(self) -> VersionState:
        return VersionState.ACTIVE if self.is_active else VersionState.INACTIVE

    @classmethod
    def from_record(cls, record: Mapping) -> "Version":
        """Build from the collaborator's record shape.

        Accepts ``effectiveFrom``/``EffectiveFrom``, ``effectiveTo``/``EffectiveTo``
        and ``isActive``/``IsActive``; a missing or empty end date, or the
        sentinel, is ongoing.
        """
        rng = EffectiveRange.from_wire(
            record.get("effectiveFrom") or record.get("EffectiveFrom"),
            record.get("effectiveTo") or record.get("EffectiveTo"),
        )
        is_active = record.get("isActive", record.get("IsActive", False))
        return cls(
            id=str(record["id"]),
            version_name=record.get("versionName") or record.get("VersionName") or "",
            effective_from=rng.effective_from,
            effective_to=rng.effective_to,
            is_active=bool(is_active),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "versionName": self.version_name,
            "effectiveFrom": to_iso_date(self.effective_from),
            "effectiveTo": to_iso_date(self.effective_to or ONGOING_DATE),
            "isActive": self.is_active,
        }


class CardIdentity(BaseModel):
    """A card and the versions recorded for it; zero versions is legal."""

    id: str = Field(min_length=1)
    card_name: str = Field(min_length=1, max_length=200)
    card_issuer: str = Field(min_length=1, max_length=100)
    versions: tuple[Version, ...] = ()

    model_config = {"frozen": True}


class ActivationPlan(BaseModel):
    target: Version
    to_deactivate: tuple[Version, ...] = ()

    model_config = {"frozen": True}

    @property
    def deactivate_ids(self) -> list[str]:
        return [v.id for v in self.to_deactivate]


class DeactivationPlan(BaseModel):
    target: Version
    no_op: bool

    model_config = {"frozen": True}


class OverlapWarning(BaseModel):
    version_id: str | None = None
    effective_range: EffectiveRange
    message: str

    model_config = {"frozen": True}


class CreationPlan(BaseModel):
    initial_state: VersionState
    to_deactivate: tuple[Version, ...] = ()
    warnings: tuple[OverlapWarning, ...] = ()

    model_config = {"frozen": True}
