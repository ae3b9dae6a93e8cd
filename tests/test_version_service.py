from datetime import date

import pytest
from pydantic import ValidationError

from card_catalog.errors import LifecycleError
from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.schemas.version import CardIdentity, Version, VersionState
from card_catalog.services.version_service import (
    active_version,
    can_activate,
    can_create_version,
    can_deactivate,
    plan_version_creation,
    sort_versions,
    transition,
    versions_in_effect,
)


# --- Activation ---

def test_activate_deactivates_the_other_active_version(make_version):
    a = make_version("a", is_active=True)
    b = make_version("b", is_active=False)
    plan = can_activate(b, [a, b])
    assert plan.deactivate_ids == ["a"]
    assert plan.target == b


def test_activate_never_deactivates_the_target(make_version):
    a = make_version("a", is_active=True)
    b = make_version("b", is_active=True)
    plan = can_activate(a, [a, b])
    assert plan.deactivate_ids == ["b"]


def test_activate_with_no_active_siblings(siblings):
    retired = [s.model_copy(update={"is_active": False}) for s in siblings]
    assert can_activate(retired[0], retired).to_deactivate == ()


def test_activate_collects_every_active_sibling_in_order(make_version):
    versions = [make_version(v, is_active=True) for v in ("x", "y", "z")]
    target = make_version("new")
    assert can_activate(target, versions).deactivate_ids == ["x", "y", "z"]


# --- Deactivation ---

def test_deactivate_active_version(make_version):
    plan = can_deactivate(make_version("a", is_active=True))
    assert plan.no_op is False


def test_deactivate_inactive_version_is_no_op(make_version):
    plan = can_deactivate(make_version("a", is_active=False))
    assert plan.no_op is True


# --- Creation ---

def test_create_version_warns_on_overlap(siblings):
    proposed = EffectiveRange.from_wire("2024-07-01", "")
    warnings = can_create_version(proposed, siblings)
    assert [w.version_id for w in warnings] == ["v2024", "v2025"]
    assert "overlaps" in warnings[0].message


def test_create_version_without_overlap(siblings):
    proposed = EffectiveRange.from_wire("2020-01-01", "2022-12-31")
    assert can_create_version(proposed, siblings) == []


def test_create_version_accepts_bare_ranges():
    proposed = EffectiveRange.from_wire("2024-06-30", "2024-12-31")
    existing = [EffectiveRange.from_wire("2024-01-01", "2024-06-30")]
    warnings = can_create_version(proposed, existing)
    assert len(warnings) == 1
    assert warnings[0].version_id is None


def test_plan_creation_inactive(siblings):
    plan = plan_version_creation(EffectiveRange.from_wire("2026-01-01"), siblings)
    assert plan.initial_state is VersionState.INACTIVE
    assert plan.to_deactivate == ()
    assert [w.version_id for w in plan.warnings] == ["v2025"]


def test_plan_creation_active_deactivates_current(siblings):
    plan = plan_version_creation(EffectiveRange.from_wire("2026-01-01"), siblings, activate=True)
    assert plan.initial_state is VersionState.ACTIVE
    assert [v.id for v in plan.to_deactivate] == ["v2024"]


# --- State machine ---

@pytest.mark.parametrize("current, target", [
    (VersionState.DRAFT, VersionState.ACTIVE),
    (VersionState.DRAFT, VersionState.INACTIVE),
    (VersionState.INACTIVE, VersionState.ACTIVE),
    (VersionState.ACTIVE, VersionState.INACTIVE),
    (VersionState.INACTIVE, VersionState.INACTIVE),
])
def test_allowed_transitions(current, target):
    assert transition(current, target) is target


@pytest.mark.parametrize("current", list(VersionState))
def test_nothing_returns_to_draft(current):
    with pytest.raises(LifecycleError):
        transition(current, VersionState.DRAFT)


# --- Records and lookups ---

def test_from_record_sentinel_and_casing():
    v = Version.from_record({
        "id": "amex-gold-2025",
        "VersionName": "2025 refresh",
        "EffectiveFrom": "2025-01-01T00:00:00Z",
        "EffectiveTo": "9999-12-31",
        "IsActive": True,
    })
    assert v.effective_from == date(2025, 1, 1)
    assert v.effective_to is None
    assert v.is_active
    assert v.state is VersionState.ACTIVE


def test_to_record_round_trip():
    record = {"id": "v1", "effectiveFrom": "2024-01-01", "effectiveTo": "", "isActive": False}
    out = Version.from_record(record).to_record()
    assert out["effectiveTo"] == "9999-12-31"
    assert Version.from_record(out) == Version.from_record(record)


def test_to_record_uses_camel_case():
    record = Version(id="v1", version_name="Launch", effective_from=date(2024, 1, 1)).to_record()
    assert record == {
        "id": "v1",
        "versionName": "Launch",
        "effectiveFrom": "2024-01-01",
        "effectiveTo": "9999-12-31",
        "isActive": False,
    }


def test_reversed_version_is_rejected():
    with pytest.raises(ValidationError):
        Version(id="x", effective_from=date(2024, 6, 1), effective_to=date(2024, 1, 1))


def test_explicit_sentinel_version_is_ongoing():
    explicit = Version(id="x", effective_from=date(2024, 1, 1), effective_to=date(9999, 12, 31))
    assert explicit.effective_to is None
    assert explicit == Version(id="x", effective_from=date(2024, 1, 1))


def test_version_dates_parse_as_local_days():
    v = Version(id="x", effective_from="2024-01-01T23:30:00-08:00", effective_to="9999-12-31")
    assert v.effective_from == date(2024, 1, 1)
    assert v.effective_range.is_ongoing
    with pytest.raises(ValidationError):
        Version(id="x", effective_from=1704067200)


def test_card_without_versions():
    card = CardIdentity(id="chase-freedom", card_name="Chase Freedom Flex", card_issuer="Chase")
    assert card.versions == ()
    assert active_version(card.versions) is None


def test_active_version(siblings):
    assert active_version(siblings).id == "v2024"


def test_versions_in_effect(siblings):
    assert [v.id for v in versions_in_effect(siblings, date(2024, 12, 31))] == ["v2024"]
    assert [v.id for v in versions_in_effect(siblings, date(2030, 1, 1))] == ["v2025"]


def test_sort_versions_newest_first(siblings):
    assert [v.id for v in sort_versions(siblings)] == ["v2025", "v2024", "v2023"]


def test_sort_versions_ongoing_before_bounded_with_same_start(make_version):
    bounded = make_version("bounded", effective_to=date(2024, 12, 31))
    ongoing = make_version("ongoing")
    assert [v.id for v in sort_versions([bounded, ongoing])] == ["ongoing", "bounded"]
