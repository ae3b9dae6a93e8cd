from datetime import date

import pytest

from card_catalog.schemas.version import Version


def _make_version(
    version_id: str,
    is_active: bool = False,
    effective_from: date = date(2024, 1, 1),
    effective_to: date | None = None,
) -> Version:
    return Version(
        id=version_id,
        version_name=f"Version {version_id}",
        effective_from=effective_from,
        effective_to=effective_to,
        is_active=is_active,
    )


@pytest.fixture
def make_version():
    return _make_version


@pytest.fixture
def siblings() -> list[Version]:
    """Three versions of one card: a retired 2023 term, the active 2024 term and an upcoming ongoing term."""
    return [
        _make_version("v2023", effective_from=date(2023, 1, 1), effective_to=date(2023, 12, 31)),
        _make_version("v2024", is_active=True, effective_from=date(2024, 1, 1), effective_to=date(2024, 12, 31)),
        _make_version("v2025", effective_from=date(2025, 1, 1)),
    ]
