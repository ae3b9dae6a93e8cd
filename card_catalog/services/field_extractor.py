"""Sanitize untrusted objects (AI output, pasted JSON) against a closed schema."""
import json
import logging
from collections.abc import Mapping
from typing import Any

from card_catalog.schemas.extraction import (
    ExtractedFields,
    FieldValidationResult,
    ObjectValidationResult,
    SkippedField,
)
from card_catalog.services.schema_rules import SCHEMAS, FieldSpec

logger = logging.getLogger(__name__)

ENTITY_TYPES = tuple(SCHEMAS)


def schema_for(entity_type: str) -> tuple[FieldSpec, ...]:
    try:
        return SCHEMAS[entity_type]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown entity type {entity_type!r}; expected one of {', '.join(ENTITY_TYPES)}"
        ) from None


def _field_spec(entity_type: str, field_name: str) -> FieldSpec | None:
    for spec in schema_for(entity_type):
        if spec.name == field_name:
            return spec
    return None


def _unexpected(entity_type: str) -> FieldValidationResult:
    return FieldValidationResult(
        valid=False, reason=f"Unexpected field for {entity_type}", code="unexpected"
    )


def validate_field(entity_type: str, field_name: str, value: Any) -> FieldValidationResult:
    spec = _field_spec(entity_type, field_name)
    if spec is None:
        return _unexpected(entity_type)
    return spec.validate_value(value)


def validate_response(entity_type: str, obj: Any) -> ObjectValidationResult:
    """Whole-object check: every declared field, plus every undeclared key.

    An absent field that its validator would not accept as ``None`` is
    reported with code ``missing`` so it can be told apart from a wrong value.
    """
    if not isinstance(obj, Mapping):
        root = FieldValidationResult(valid=False, reason="Must be a JSON object", code="invalid")
        return ObjectValidationResult(valid=False, invalid_fields=["$"], field_results={"$": root})

    field_results: dict[str, FieldValidationResult] = {}
    invalid_fields: list[str] = []
    declared = schema_for(entity_type)

    for spec in declared:
        if spec.name in obj:
            result = spec.validate_value(obj[spec.name])
        elif spec.validate_value(None).valid:
            result = FieldValidationResult(valid=True)
        else:
            result = FieldValidationResult(valid=False, reason="Missing field", code="missing")
        field_results[spec.name] = result
        if not result.valid:
            invalid_fields.append(spec.name)

    names = {spec.name for spec in declared}
    for key in obj:
        if key not in names:
            field_results[str(key)] = _unexpected(entity_type)
            invalid_fields.append(str(key))

    return ObjectValidationResult(
        valid=not invalid_fields,
        invalid_fields=invalid_fields,
        field_results=field_results,
    )


def is_valid_response(entity_type: str, obj: Any) -> bool:
    return validate_response(entity_type, obj).valid


def extract_valid(entity_type: str, raw: Any) -> ExtractedFields:
    """Keep the declared fields of ``raw`` whose values validate.

    Unknown keys are ignored silently; declared fields with bad values are
    reported in ``skipped_fields``. Never raises: a non-object input or an
    unknown entity type comes back as a single skipped entry.
    """
    try:
        declared = schema_for(entity_type)
    except ValueError as exc:
        return ExtractedFields(skipped_fields=[SkippedField(field="$", reason=str(exc))])
    if not isinstance(raw, Mapping):
        return ExtractedFields(skipped_fields=[
            SkippedField(field="$", reason=f"Expected a JSON object, got {type(raw).__name__}")
        ])

    valid_fields: dict[str, Any] = {}
    skipped_fields: list[SkippedField] = []
    for spec in declared:
        if spec.name not in raw:
            continue
        value = raw[spec.name]
        result = spec.validate_value(value)
        if result.valid:
            valid_fields[spec.name] = value
        else:
            logger.debug("Skipping %s.%s: %s", entity_type, spec.name, result.reason)
            skipped_fields.append(SkippedField(field=spec.name, reason=result.reason or "Invalid value"))

    logger.info(
        "Extracted %d valid %s field(s), skipped %d",
        len(valid_fields), entity_type, len(skipped_fields),
    )
    return ExtractedFields(valid_fields=valid_fields, skipped_fields=skipped_fields)


def extract_valid_from_json(entity_type: str, text: str) -> ExtractedFields:
    """Parse pasted JSON and extract its valid fields."""
    try:
        raw = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        return ExtractedFields(skipped_fields=[SkippedField(field="$", reason=f"Invalid JSON: {exc}")])
    return extract_valid(entity_type, raw)
