"""
Data models for the coverage policy resolver.

Core Pydantic models shared by the catalog readers, the resolution stages
and the storage layer. All modules import from here - no circular
dependencies allowed.
"""

from src.models.enums import (
    FallbackReason,
    FilterName,
    PolicyStatus,
    ScoreComponent,
)
from src.models.policy import (
    CoverageQuery,
    PatientCharacteristics,
    Policy,
)
from src.models.scoring import (
    ScoreComponents,
    ScoredCandidate,
    ScoringWeights,
)
from src.models.evidence import EvidenceBundle, PolicyCitation
from src.models.audit import SelectionAudit

__all__ = [
    # Enums
    "FallbackReason",
    "FilterName",
    "PolicyStatus",
    "ScoreComponent",
    # Policy & query
    "CoverageQuery",
    "PatientCharacteristics",
    "Policy",
    # Scoring
    "ScoreComponents",
    "ScoredCandidate",
    "ScoringWeights",
    # Evidence
    "EvidenceBundle",
    "PolicyCitation",
    # Audit
    "SelectionAudit",
]
