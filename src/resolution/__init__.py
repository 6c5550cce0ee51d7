"""Coverage policy resolution package."""

from src.resolution.audit import build_audit, verify_audit
from src.resolution.engine import (
    CoverageResolver,
    ResolutionResult,
    coerce_policies,
)
from src.resolution.evidence import (
    DEFAULT_EVIDENCE_TOP_K,
    FALLBACK_EVIDENCE_TEXT,
    assemble_evidence,
)
from src.resolution.filters import (
    FilterOutcome,
    apply_relevance_filters,
    filter_superseded,
    filter_wound_care_relevant,
)
from src.resolution.keywords import (
    KEYWORD_TABLE_VERSION,
    PATIENT_CHARACTERISTIC_KEYWORDS,
    WOUND_CARE_KEYWORDS,
    WOUND_TYPE_ALIASES,
)
from src.resolution.scoring import RankedPolicy, rank_candidates, score_candidate
from src.resolution.selector import Selection, select_policy

__all__ = [
    "CoverageResolver",
    "ResolutionResult",
    "coerce_policies",
    "build_audit",
    "verify_audit",
    "DEFAULT_EVIDENCE_TOP_K",
    "FALLBACK_EVIDENCE_TEXT",
    "assemble_evidence",
    "FilterOutcome",
    "apply_relevance_filters",
    "filter_superseded",
    "filter_wound_care_relevant",
    "KEYWORD_TABLE_VERSION",
    "PATIENT_CHARACTERISTIC_KEYWORDS",
    "WOUND_CARE_KEYWORDS",
    "WOUND_TYPE_ALIASES",
    "RankedPolicy",
    "rank_candidates",
    "score_candidate",
    "Selection",
    "select_policy",
]
