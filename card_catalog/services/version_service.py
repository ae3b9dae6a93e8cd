"""Lifecycle rules for card versions.

These functions decide what *should* change; they never store anything. The
persistence layer applies an ``ActivationPlan`` as one atomic write so the
"at most one active version per card" rule holds under concurrent writers.
"""
import logging
from collections.abc import Iterable, Sequence
from datetime import date

from card_catalog.errors import LifecycleError
from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.schemas.version import (
    ActivationPlan,
    CreationPlan,
    DeactivationPlan,
    OverlapWarning,
    Version,
    VersionState,
)
from card_catalog.utils.date_utils import today
from card_catalog.utils.effective_range import overlaps

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS = {
    VersionState.DRAFT: {VersionState.ACTIVE, VersionState.INACTIVE},
    VersionState.INACTIVE: {VersionState.ACTIVE, VersionState.INACTIVE},
    VersionState.ACTIVE: {VersionState.INACTIVE, VersionState.ACTIVE},
}


def transition(current: VersionState, target: VersionState) -> VersionState:
    """Validate a state change and return the resulting state."""
    if target not in _ALLOWED_TRANSITIONS[current]:
        raise LifecycleError(
            f"Cannot move a version from {current.value} to {target.value}"
        )
    return target


def can_activate(target: Version, siblings: Sequence[Version]) -> ActivationPlan:
    """Activation always succeeds; every other active sibling must be deactivated."""
    to_deactivate = tuple(
        v for v in siblings if v.is_active and v.id != target.id
    )
    if to_deactivate:
        logger.info(
            "Activating version %s deactivates %s",
            target.id,
            ", ".join(v.id for v in to_deactivate),
        )
    return ActivationPlan(target=target, to_deactivate=to_deactivate)


def can_deactivate(target: Version) -> DeactivationPlan:
    transition(target.state, VersionState.INACTIVE)
    return DeactivationPlan(target=target, no_op=not target.is_active)


def _range_of(item: Version | EffectiveRange) -> tuple[str | None, EffectiveRange]:
    if isinstance(item, Version):
        return item.id, item.effective_range
    return None, item


def can_create_version(
    proposed: EffectiveRange,
    siblings: Iterable[Version | EffectiveRange],
) -> list[OverlapWarning]:
    """List siblings whose ranges overlap ``proposed``.

    Overlapping versions are allowed; the warnings let the operator confirm.
    """
    warnings = []
    for sibling in siblings:
        version_id, rng = _range_of(sibling)
        if not overlaps(proposed, rng):
            continue
        label = f"Version {version_id}" if version_id else "An existing version"
        warnings.append(OverlapWarning(
            version_id=version_id,
            effective_range=rng,
            message=f"{label} ({rng.display()}) overlaps {proposed.display()}",
        ))
    return warnings


def plan_version_creation(
    proposed: EffectiveRange,
    siblings: Sequence[Version],
    activate: bool = False,
) -> CreationPlan:
    initial_state = transition(
        VersionState.DRAFT,
        VersionState.ACTIVE if activate else VersionState.INACTIVE,
    )
    to_deactivate = tuple(v for v in siblings if v.is_active) if activate else ()
    return CreationPlan(
        initial_state=initial_state,
        to_deactivate=to_deactivate,
        warnings=tuple(can_create_version(proposed, siblings)),
    )


def active_version(versions: Iterable[Version]) -> Version | None:
    """Return the active version, or None for a retired or brand-new card.

    When stored data already violates exclusivity the first active one wins.
    """
    active = [v for v in versions if v.is_active]
    if len(active) > 1:
        logger.warning(
            "Multiple active versions found: %s", ", ".join(v.id for v in active)
        )
    return active[0] if active else None


def versions_in_effect(versions: Iterable[Version], on: date | None = None) -> list[Version]:
    day = on or today()
    return [v for v in versions if v.effective_range.contains(day)]


def sort_versions(versions: Iterable[Version]) -> list[Version]:
    """Newest first; an ongoing version sorts ahead of a bounded one with the same start."""
    return sorted(
        versions,
        key=lambda v: (v.effective_from, v.effective_range.resolved_to),
        reverse=True,
    )
