"""
Tests for the data model layer.

Tests validate:
- Enum values
- Policy and query normalisation
- Score decomposition on ScoredCandidate
- Citation field contract
- Audit JSON round trip
"""

import json
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from src.models import (
    CoverageQuery,
    EvidenceBundle,
    FallbackReason,
    FilterName,
    PatientCharacteristics,
    Policy,
    PolicyCitation,
    PolicyStatus,
    ScoreComponent,
    ScoreComponents,
    ScoredCandidate,
    ScoringWeights,
    SelectionAudit,
)
from src.models.scoring import (
    RECENCY_MAX_SCORE,
    STATUS_DECAY_CAP,
    STATUS_WEIGHT_CURRENT,
    STATUS_WEIGHT_FUTURE,
    STATUS_WEIGHT_PROPOSED,
)


class TestEnums:
    """Test all enumeration types."""

    def test_policy_status_values(self):
        assert PolicyStatus.CURRENT.value == "current"
        assert PolicyStatus.FUTURE.value == "future"
        assert PolicyStatus.PROPOSED.value == "proposed"
        assert PolicyStatus.RETIRED.value == "retired"

    def test_fallback_reason_values(self):
        assert FallbackReason.NO_POLICIES_AVAILABLE.value == "no_policies_available"
        assert FallbackReason.NO_RELEVANT_POLICIES.value == "no_relevant_policies"

    def test_filter_names_in_order(self):
        assert [f.value for f in FilterName] == ["wound_care_relevance", "superseded_exclusion"]

    def test_score_components_in_order(self):
        assert [c.value for c in ScoreComponent] == ["status", "recency", "applicability"]


class TestPolicy:
    """Test Policy validation and normalisation."""

    def _payload(self, **overrides):
        payload = {
            "jurisdiction": "JL",
            "policy_id": "L35041",
            "title": "Skin Substitute Grafts",
            "url": "https://example.com/L35041",
            "effective_date": "2024-01-01T00:00:00Z",
            "status": "current",
            "content": "Skin substitutes for chronic wounds.",
        }
        payload.update(overrides)
        return payload

    def test_valid_policy(self):
        policy = Policy(**self._payload())
        assert policy.status == PolicyStatus.CURRENT
        assert policy.policy_type == "final"
        assert policy.superseded_by is None
        assert not policy.is_superseded

    def test_plain_date_becomes_utc_midnight(self):
        policy = Policy(**self._payload(effective_date=date(2024, 1, 1)))
        assert policy.effective_date == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_naive_datetime_is_treated_as_utc(self):
        policy = Policy(**self._payload(effective_date=datetime(2024, 1, 1, 12, 0)))
        assert policy.effective_date.tzinfo is not None
        assert policy.effective_date.hour == 12

    @pytest.mark.parametrize("raw", ["2024-06-01", "2024-06-01T00:00:00"])
    def test_naive_date_strings_are_treated_as_utc(self, raw):
        policy = Policy(**self._payload(effective_date=raw))
        assert policy.effective_date == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_offset_string_converted_to_utc(self):
        policy = Policy(**self._payload(effective_date="2024-06-01T02:00:00+02:00"))
        assert policy.effective_date == datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert policy.effective_date.utcoffset().total_seconds() == 0

    def test_status_is_case_insensitive(self):
        policy = Policy(**self._payload(status=" CURRENT "))
        assert policy.status == PolicyStatus.CURRENT

    def test_blank_superseded_by_is_none(self):
        policy = Policy(**self._payload(superseded_by="  "))
        assert policy.superseded_by is None

    def test_superseded_flag(self):
        policy = Policy(**self._payload(superseded_by="L39999"))
        assert policy.is_superseded

    def test_missing_policy_type_defaults_to_final(self):
        policy = Policy(**self._payload(policy_type=None))
        assert policy.policy_type == "final"

    def test_missing_content_rejected(self):
        payload = self._payload()
        del payload["content"]
        with pytest.raises(ValidationError):
            Policy(**payload)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Policy(**self._payload(status="postponed"))

    def test_policy_is_immutable(self):
        policy = Policy(**self._payload())
        with pytest.raises(ValidationError):
            policy.title = "changed"


class TestCoverageQuery:
    """Test query normalisation."""

    def test_jurisdiction_upper_cased(self):
        query = CoverageQuery(jurisdiction=" jl ", wound_type="DFU")
        assert query.jurisdiction == "JL"

    def test_blank_wound_type_rejected(self):
        with pytest.raises(ValidationError):
            CoverageQuery(jurisdiction="JL", wound_type="   ")

    def test_blank_location_is_none(self):
        query = CoverageQuery(jurisdiction="JL", wound_type="DFU", wound_location=" ")
        assert query.wound_location is None

    def test_default_characteristics(self):
        query = CoverageQuery(jurisdiction="JL", wound_type="DFU")
        assert query.patient_characteristics.active_flags() == []

    def test_active_flags_in_field_order(self):
        chars = PatientCharacteristics(has_vascular_disease=True, is_diabetic=True)
        assert chars.active_flags() == ["is_diabetic", "has_vascular_disease"]


class TestScoring:
    """Test weights and score decomposition."""

    def test_default_tiers_do_not_overlap(self):
        weights = ScoringWeights()
        lowest_current = weights.status_current - weights.status_decay_cap
        assert lowest_current > weights.status_future + weights.recency_max_score
        assert weights.status_future - weights.status_decay_cap > (
            weights.status_proposed + weights.recency_max_score
        )

    def test_defaults_match_named_constants(self):
        weights = ScoringWeights()
        assert weights.status_current == STATUS_WEIGHT_CURRENT
        assert weights.status_future == STATUS_WEIGHT_FUTURE
        assert weights.status_proposed == STATUS_WEIGHT_PROPOSED
        assert weights.status_decay_cap == STATUS_DECAY_CAP
        assert weights.recency_max_score == RECENCY_MAX_SCORE

    def test_status_base(self):
        weights = ScoringWeights()
        assert weights.status_base(PolicyStatus.CURRENT) == STATUS_WEIGHT_CURRENT
        assert weights.status_base(PolicyStatus.RETIRED) == 0.0

    def test_negative_applicability_rejected(self):
        with pytest.raises(ValidationError):
            ScoreComponents(status=1.0, recency=1.0, applicability=-1.0)

    def test_total_is_sum_of_components(self):
        candidate = ScoredCandidate(
            policy_id="L1",
            title="t",
            status=PolicyStatus.CURRENT,
            effective_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            components=ScoreComponents(status=90.1, recency=0.2, applicability=40.0),
        )
        c = candidate.components
        assert candidate.total == c.status + c.recency + c.applicability

    def test_dominant_component(self):
        components = ScoreComponents(status=90.0, recency=0.0, applicability=140.0)
        assert components.dominant() == ScoreComponent.APPLICABILITY

    def test_dominant_tie_prefers_declared_order(self):
        components = ScoreComponents(status=10.0, recency=10.0, applicability=0.0)
        assert components.dominant() == ScoreComponent.STATUS

    def test_serialized_total_is_accepted_on_reload(self):
        candidate = ScoredCandidate(
            policy_id="L1",
            title="t",
            status=PolicyStatus.FUTURE,
            effective_date=datetime(2025, 10, 1, tzinfo=timezone.utc),
            components=ScoreComponents(status=59.5, recency=20.0, applicability=0.0),
            matched_signals=("wound_type_title",),
        )
        data = json.loads(candidate.model_dump_json())
        assert data["total"] == 79.5
        assert ScoredCandidate.model_validate(data) == candidate

    def test_mismatched_serialized_total_rejected(self):
        data = {
            "policy_id": "L1",
            "title": "t",
            "status": "current",
            "effective_date": "2024-01-01T00:00:00Z",
            "components": {"status": 90.0, "recency": 0.0, "applicability": 100.0},
            "total": 9999.0,
        }
        with pytest.raises(ValidationError, match="does not match component sum"):
            ScoredCandidate.model_validate(data)


class TestEvidenceModels:
    """Test citation contract."""

    def test_citation_has_exactly_five_fields(self):
        citation = PolicyCitation(
            title="t", url="u", policy_id="L1", effective_date="2024-01-01", jurisdiction="JL",
        )
        assert set(citation.model_dump()) == {
            "title", "url", "policy_id", "effective_date", "jurisdiction",
        }

    def test_citation_rejects_extra_fields(self):
        with pytest.raises(ValidationError):
            PolicyCitation(
                title="t", url="u", policy_id="L1", effective_date="2024-01-01",
                jurisdiction="JL", score=1.0,
            )

    def test_citation_requires_date_only(self):
        with pytest.raises(ValidationError):
            PolicyCitation(
                title="t", url="u", policy_id="L1",
                effective_date="2024-01-01T00:00:00Z", jurisdiction="JL",
            )

    def test_empty_bundle_is_fallback(self):
        bundle = EvidenceBundle(content="nothing found")
        assert bundle.is_fallback
        assert bundle.citation_dicts() == []


class TestSelectionAudit:
    """Test audit snapshot serialisation."""

    def test_json_round_trip(self):
        audit = SelectionAudit(
            evaluated_at=datetime(2025, 9, 20, tzinfo=timezone.utc),
            query=CoverageQuery(jurisdiction="JL", wound_type="DFU"),
            weights=ScoringWeights(),
            keyword_table_version="test",
            considered=0,
            filters_applied=("wound_care_relevance", "superseded_exclusion"),
            selected_reason="No policies found",
            fallback_used=FallbackReason.NO_POLICIES_AVAILABLE,
        )
        reloaded = SelectionAudit.model_validate_json(audit.model_dump_json())
        assert reloaded.model_dump_json() == audit.model_dump_json()
        assert not reloaded.has_winner
