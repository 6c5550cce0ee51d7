"""Enumeration types for the coverage policy resolver."""

from enum import Enum


class PolicyStatus(str, Enum):
    """Lifecycle status of a coverage policy (LCD) version."""
    CURRENT = "current"
    FUTURE = "future"      # Published, effective date still ahead
    PROPOSED = "proposed"  # Draft LCD open for comment
    RETIRED = "retired"    # Never returned by catalog readers


class FallbackReason(str, Enum):
    """Why a resolution ended without a winning policy."""
    NO_POLICIES_AVAILABLE = "no_policies_available"  # Catalog returned nothing
    NO_RELEVANT_POLICIES = "no_relevant_policies"    # Everything was filtered out


class ScoreComponent(str, Enum):
    """Named parts of a candidate score, in declared order."""
    STATUS = "status"
    RECENCY = "recency"
    APPLICABILITY = "applicability"


class FilterName(str, Enum):
    """Relevance filters, in application order."""
    WOUND_CARE_RELEVANCE = "wound_care_relevance"
    SUPERSEDED_EXCLUSION = "superseded_exclusion"
