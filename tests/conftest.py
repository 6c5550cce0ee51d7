"""Shared fixtures for resolver tests."""

from datetime import datetime, timedelta, timezone

import pytest

from src.models import CoverageQuery, PatientCharacteristics, Policy, PolicyStatus

NOW = datetime(2025, 9, 20, tzinfo=timezone.utc)

WOUND_CARE_BODY = (
    "Coverage for diabetic foot ulcer treatment with cellular tissue products "
    "when conservative wound care has failed for four weeks."
)


def make_policy(
    policy_id: str = "L35041",
    *,
    title: str = "Skin Substitutes for Diabetic Foot Ulcers",
    content: str = WOUND_CARE_BODY,
    status: PolicyStatus = PolicyStatus.CURRENT,
    effective_date: datetime | None = None,
    days_from_now: int | None = None,
    jurisdiction: str = "JL",
    superseded_by: str | None = None,
    policy_type: str = "final",
) -> Policy:
    if effective_date is None:
        effective_date = NOW + timedelta(days=days_from_now if days_from_now is not None else -365)
    return Policy(
        jurisdiction=jurisdiction,
        policy_id=policy_id,
        title=title,
        url=f"https://www.cms.gov/medicare-coverage-database/view/lcd.aspx?lcdid={policy_id}",
        effective_date=effective_date,
        status=status,
        superseded_by=superseded_by,
        policy_type=policy_type,
        content=content,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def dfu_query():
    return CoverageQuery(jurisdiction="JL", wound_type="DFU")


@pytest.fixture
def diabetic_dfu_query():
    return CoverageQuery(
        jurisdiction="JL",
        wound_type="DFU",
        wound_location="foot",
        patient_characteristics=PatientCharacteristics(is_diabetic=True, has_venous_disease=True),
    )


@pytest.fixture
def policy_factory():
    """Build a ``Policy`` with wound-care defaults; override any field."""
    return make_policy
