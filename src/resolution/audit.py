"""
Selection audit assembly and replay.

``build_audit`` only aggregates what earlier stages produced; it makes no
decisions of its own. ``verify_audit`` re-derives the ranking and the
winner from a stored audit.
"""

from __future__ import annotations

from datetime import datetime

from src.models.audit import SelectionAudit
from src.models.policy import CoverageQuery
from src.models.scoring import ScoringWeights
from src.resolution.filters import RELEVANCE_FILTERS, FilterOutcome
from src.resolution.keywords import KEYWORD_TABLE_VERSION
from src.resolution.scoring import RankedPolicy, ranking_key
from src.resolution.selector import Selection


def build_audit(
    *,
    query: CoverageQuery,
    now: datetime,
    weights: ScoringWeights,
    considered: int,
    skipped_records: tuple[str, ...],
    filtered: FilterOutcome,
    ranked: tuple[RankedPolicy, ...],
    selection: Selection,
) -> SelectionAudit:
    return SelectionAudit(
        evaluated_at=now,
        query=query,
        weights=weights,
        keyword_table_version=KEYWORD_TABLE_VERSION,
        considered=considered,
        skipped_records=skipped_records,
        filters_applied=filtered.filters_applied,
        scored=tuple(r.scored for r in ranked),
        selected_policy_id=selection.policy.policy_id if selection.policy else None,
        selected_reason=selection.reason,
        fallback_used=selection.fallback,
    )


def verify_audit(audit: SelectionAudit) -> list[str]:
    """Recompute the decision recorded in *audit* from the audit alone.

    Returns a list of discrepancies; an empty list means the stored ranking
    and winner follow from the stored scores.
    """
    problems: list[str] = []

    expected_filters = tuple(name.value for name, _ in RELEVANCE_FILTERS)
    if audit.filters_applied != expected_filters:
        problems.append(f"filters_applied {list(audit.filters_applied)} != {list(expected_filters)}")

    reranked = tuple(sorted(audit.scored, key=ranking_key))
    if reranked != audit.scored:
        problems.append("scored candidates are not in ranking order")

    expected_winner = reranked[0].policy_id if reranked else None
    if audit.selected_policy_id != expected_winner:
        problems.append(
            f"selected {audit.selected_policy_id!r} but ranking gives {expected_winner!r}"
        )
    if expected_winner is None and audit.fallback_used is None:
        problems.append("no winner recorded without a fallback reason")

    return problems
