"""Selection audit model for reproducible policy decisions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.models.enums import FallbackReason
from src.models.policy import CoverageQuery
from src.models.scoring import ScoredCandidate, ScoringWeights


class SelectionAudit(BaseModel):
    """
    Snapshot of how a policy (or no policy) was chosen.

    Holds the inputs, the weights, every candidate that survived filtering
    with its score breakdown, and the final reason, so the decision can be
    recomputed without touching the catalog again. Identical inputs give
    byte-identical JSON: there are no generated ids, and the only timestamp
    is the injected evaluation time.

    The caller owns persistence of this record.
    """

    evaluated_at: datetime = Field(..., description="The 'now' used for temporal scoring")
    query: CoverageQuery
    weights: ScoringWeights
    keyword_table_version: str
    considered: int = Field(..., ge=0, description="Records returned by the catalog, before filtering")
    skipped_records: tuple[str, ...] = Field(
        default=(),
        description="Malformed catalog records left out of the resolution",
    )
    filters_applied: tuple[str, ...] = Field(
        ...,
        description="Filter names in application order, including ones that removed nothing",
    )
    scored: tuple[ScoredCandidate, ...] = Field(
        default=(),
        description="Every filtered candidate in ranked order",
    )
    selected_policy_id: Optional[str] = None
    selected_reason: str
    fallback_used: Optional[FallbackReason] = None

    @property
    def has_winner(self) -> bool:
        return self.selected_policy_id is not None

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "evaluated_at": "2025-09-20T00:00:00Z",
                "query": {"jurisdiction": "JL", "wound_type": "DFU"},
                "keyword_table_version": "2025.10.1",
                "considered": 4,
                "filters_applied": ["wound_care_relevance", "superseded_exclusion"],
                "scored": [],
                "selected_policy_id": "L35041",
                "selected_reason": "Selected 'Skin Substitutes for DFU' ...",
            }
        },
    }
