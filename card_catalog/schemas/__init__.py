from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.schemas.version import (
    ActivationPlan, CardIdentity, CreationPlan, DeactivationPlan, OverlapWarning, Version, VersionState,
)
from card_catalog.schemas.schedule import RotatingPeriod, ScheduleEntry, ScheduleImportResult
from card_catalog.schemas.extraction import (
    ExtractedFields, FieldValidationResult, ObjectValidationResult, SkippedField,
)

__all__ = [
    "EffectiveRange",
    "ActivationPlan", "CardIdentity", "CreationPlan", "DeactivationPlan", "OverlapWarning", "Version", "VersionState",
    "RotatingPeriod", "ScheduleEntry", "ScheduleImportResult",
    "ExtractedFields", "FieldValidationResult", "ObjectValidationResult", "SkippedField",
]
