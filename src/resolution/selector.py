"""Winner selection over ranked candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.models.enums import FallbackReason
from src.models.policy import CoverageQuery, Policy
from src.resolution.scoring import RankedPolicy


@dataclass(frozen=True)
class Selection:
    """Outcome of the selector: a winner, or a fallback tag with its reason."""
    policy: Optional[Policy]
    reason: str
    fallback: Optional[FallbackReason] = None


def no_policy_reason(query: CoverageQuery) -> str:
    return (
        "No policies found for the given jurisdiction/criteria "
        f"(jurisdiction {query.jurisdiction}, wound type '{query.wound_type}')"
    )


def select_policy(
    ranked: tuple[RankedPolicy, ...],
    query: CoverageQuery,
    *,
    catalog_empty: bool = False,
) -> Selection:
    """Take the top-ranked candidate, or report why there is none.

    A winner whose total is zero is still a winner; only an empty
    candidate list yields a fallback.
    """
    if not ranked:
        fallback = (
            FallbackReason.NO_POLICIES_AVAILABLE
            if catalog_empty
            else FallbackReason.NO_RELEVANT_POLICIES
        )
        return Selection(policy=None, reason=no_policy_reason(query), fallback=fallback)

    top = ranked[0]
    return Selection(policy=top.policy, reason=explain_selection(top, len(ranked)))


def explain_selection(top: RankedPolicy, candidate_count: int) -> str:
    """The sentence an auditor reads first."""
    scored = top.scored
    dominant = scored.components.dominant()
    dominant_value = scored.components.as_dict()[dominant.value]
    if scored.total > 0:
        share = f"{dominant_value / scored.total:.0%} of total"
    else:
        share = "no component scored above zero"
    return (
        f"Selected '{scored.title}' ({scored.policy_id}, status {scored.status.value}) "
        f"from {candidate_count} candidate(s) with total score {scored.total:.2f}; "
        f"dominant component: {dominant.value} ({dominant_value:.2f}, {share})"
    )
