from card_catalog.schemas.effective_range import EffectiveRange
from card_catalog.utils.date_utils import ONGOING_DATE, ONGOING_SENTINEL, parse_local_date

__all__ = [
    "ONGOING_DATE",
    "ONGOING_SENTINEL",
    "normalize",
    "denormalize",
    "is_ongoing",
    "overlaps",
    "dates_overlap",
]


def normalize(to: str | None) -> str:
    """Map an empty/absent end date to the ongoing sentinel."""
    if not to:
        return ONGOING_SENTINEL
    return to


def denormalize(to: str) -> str:
    """Map the ongoing sentinel back to an empty end date for display."""
    if to == ONGOING_SENTINEL:
        return ""
    return to


def is_ongoing(to: str) -> bool:
    return to == ONGOING_SENTINEL


def overlaps(range_a: EffectiveRange, range_b: EffectiveRange) -> bool:
    """Boundary-inclusive overlap; open ends compare as the sentinel date."""
    return (
        range_a.effective_from <= range_b.resolved_to
        and range_b.effective_from <= range_a.resolved_to
    )


def dates_overlap(start1: str, end1: str | None, start2: str, end2: str | None) -> bool:
    s1 = parse_local_date(start1)
    e1 = parse_local_date(normalize(end1))
    s2 = parse_local_date(start2)
    e2 = parse_local_date(normalize(end2))
    return s1 <= e2 and s2 <= e1
