"""
Tests for catalog readers and MAC region validation.
"""

from datetime import timedelta

import pytest

from src.catalog import (
    CatalogUnavailableError,
    InMemoryPolicyCatalog,
    PolicyCatalogReader,
    validate_mac_region,
)
from src.catalog.regions import MAC_REGION_CODES
from src.models import PolicyStatus
from src.resolution import coerce_policies


class TestInMemoryPolicyCatalog:
    """Test snapshot filtering rules."""

    @pytest.mark.asyncio
    async def test_returns_only_requested_jurisdiction(self, policy_factory, now):
        catalog = InMemoryPolicyCatalog([
            policy_factory("L1", jurisdiction="JL"),
            policy_factory("L2", jurisdiction="JH"),
        ])
        records = await catalog.list_candidate_policies("jl", now=now)
        assert [r.policy_id for r in records] == ["L1"]

    @pytest.mark.asyncio
    async def test_excludes_retired(self, policy_factory, now):
        catalog = InMemoryPolicyCatalog([
            policy_factory("L1"),
            policy_factory("L2", status=PolicyStatus.RETIRED),
        ])
        records = await catalog.list_candidate_policies("JL", now=now)
        assert [r.policy_id for r in records] == ["L1"]

    @pytest.mark.asyncio
    async def test_future_beyond_lookahead_excluded(self, policy_factory, now):
        catalog = InMemoryPolicyCatalog([
            policy_factory("L1", status=PolicyStatus.FUTURE, days_from_now=30),
            policy_factory("L2", status=PolicyStatus.FUTURE, days_from_now=120),
        ])
        records = await catalog.list_candidate_policies("JL", 90, now=now)
        assert [r.policy_id for r in records] == ["L1"]

    @pytest.mark.asyncio
    async def test_proposed_included(self, policy_factory, now):
        catalog = InMemoryPolicyCatalog([policy_factory("L1", status=PolicyStatus.PROPOSED)])
        records = await catalog.list_candidate_policies("JL", now=now)
        assert len(records) == 1

    @pytest.mark.asyncio
    async def test_mapping_records_filtered_too(self, now):
        catalog = InMemoryPolicyCatalog([
            {"policy_id": "L1", "jurisdiction": "JL", "status": "current",
             "effective_date": "2024-01-01T00:00:00Z"},
            {"policy_id": "L2", "jurisdiction": "JL", "status": "future",
             "effective_date": (now + timedelta(days=400)).isoformat()},
            {"policy_id": "L3", "jurisdiction": "JL", "status": "future",
             "effective_date": "not a date"},
        ])
        records = await catalog.list_candidate_policies("JL", now=now)
        assert [r["policy_id"] for r in records] == ["L1", "L3"]

    @pytest.mark.asyncio
    async def test_naive_now_treated_as_utc(self, policy_factory, now):
        catalog = InMemoryPolicyCatalog([
            policy_factory("L1", status=PolicyStatus.FUTURE, days_from_now=30),
            policy_factory("L2", status=PolicyStatus.FUTURE, days_from_now=120),
        ])
        records = await catalog.list_candidate_policies("JL", 90, now=now.replace(tzinfo=None))
        assert [r.policy_id for r in records] == ["L1"]

    @pytest.mark.asyncio
    async def test_upper_case_status_kept_and_accepted(self, now):
        record = {
            "jurisdiction": "JL", "policy_id": "L1", "title": "Wound Care",
            "url": "u", "effective_date": "2024-01-01", "status": "CURRENT",
            "content": "Wound care coverage.",
        }
        records = await InMemoryPolicyCatalog([record]).list_candidate_policies("JL", now=now)
        policies, skipped = coerce_policies(records)
        assert skipped == ()
        assert policies[0].status == PolicyStatus.CURRENT

    @pytest.mark.asyncio
    async def test_unknown_jurisdiction_is_empty(self, policy_factory, now):
        catalog = InMemoryPolicyCatalog([policy_factory("L1")])
        assert await catalog.list_candidate_policies("JX", now=now) == []

    def test_satisfies_reader_protocol(self):
        assert isinstance(InMemoryPolicyCatalog(), PolicyCatalogReader)


class TestCatalogUnavailableError:

    def test_carries_jurisdiction_and_reason(self):
        err = CatalogUnavailableError("JL", "connection refused")
        assert err.jurisdiction == "JL"
        assert err.retryable is True
        assert "connection refused" in str(err)


class TestValidateMacRegion:
    """Test MAC region validation."""

    def test_eleven_regions(self):
        assert len(MAC_REGION_CODES) == 11

    @pytest.mark.parametrize("code", ["JL", "jl", " J5 "])
    def test_known_region_is_valid(self, code):
        assert validate_mac_region(code).valid

    def test_missing_region(self):
        result = validate_mac_region("")
        assert not result.valid
        assert result.error == "MAC region is required"

    def test_unknown_region_lists_known_codes(self):
        result = validate_mac_region("JZ")
        assert not result.valid
        assert result.error.startswith("Invalid MAC region: JZ.")
        assert "JE, JF" in result.error
