"""
Candidate scoring and ranking.

Three independent components, each reproducible from the policy, the
query, the weights and the injected evaluation time:

- status: tier base weight minus a capped per-day decay, so within a tier
  the policy that took effect most recently ranks higher
- recency: linear bonus for an effective date close to ``now``, in either
  direction, regardless of status
- applicability: fixed increments for each query signal found in the
  policy text; never negative
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from src.models.policy import CoverageQuery, Policy
from src.models.scoring import ScoreComponents, ScoredCandidate, ScoringWeights
from src.resolution.keywords import PATIENT_CHARACTERISTIC_KEYWORDS, mentions_wound_type
from src.utils.text import mentions

logger = logging.getLogger(__name__)

# Component values are rounded so audits stay readable and stable across
# platforms; the total is summed from the rounded values.
_PRECISION = 6

SIGNAL_WOUND_TYPE_TITLE = "wound_type_title"
SIGNAL_WOUND_TYPE_CONTENT = "wound_type_content"
SIGNAL_LOCATION = "wound_location"


def days_between(effective_date: datetime, now: datetime) -> float:
    """Absolute distance in days between a policy's effective date and now."""
    return abs((now - effective_date).total_seconds()) / 86400


def score_status(policy: Policy, now: datetime, weights: ScoringWeights) -> float:
    decay = min(
        weights.status_decay_per_day * days_between(policy.effective_date, now),
        weights.status_decay_cap,
    )
    return round(max(weights.status_base(policy.status) - decay, 0.0), _PRECISION)


def score_recency(policy: Policy, now: datetime, weights: ScoringWeights) -> float:
    days = days_between(policy.effective_date, now)
    normalized = max(0.0, 1.0 - days / weights.recency_window_days)
    return round(normalized * weights.recency_max_score, _PRECISION)


def score_applicability(
    policy: Policy,
    query: CoverageQuery,
    weights: ScoringWeights,
) -> tuple[float, tuple[str, ...]]:
    """Sum of matched signal weights, plus the names of the signals that matched."""
    total = 0.0
    matched: list[str] = []

    if mentions_wound_type(policy.title, query.wound_type):
        total += weights.wound_type_title
        matched.append(SIGNAL_WOUND_TYPE_TITLE)
    if mentions_wound_type(policy.content, query.wound_type):
        total += weights.wound_type_content
        matched.append(SIGNAL_WOUND_TYPE_CONTENT)

    if query.wound_location and (
        mentions(policy.title, [query.wound_location])
        or mentions(policy.content, [query.wound_location])
    ):
        total += weights.location
        matched.append(SIGNAL_LOCATION)

    for flag in query.patient_characteristics.active_flags():
        terms = PATIENT_CHARACTERISTIC_KEYWORDS.get(flag, ())
        if mentions(policy.title, terms) or mentions(policy.content, terms):
            total += weights.patient_characteristic
            matched.append(f"characteristic:{flag}")

    return round(total, _PRECISION), tuple(matched)


def score_candidate(
    policy: Policy,
    query: CoverageQuery,
    now: datetime,
    weights: ScoringWeights,
) -> ScoredCandidate:
    applicability, matched = score_applicability(policy, query, weights)
    return ScoredCandidate(
        policy_id=policy.policy_id,
        title=policy.title,
        status=policy.status,
        effective_date=policy.effective_date,
        components=ScoreComponents(
            status=score_status(policy, now, weights),
            recency=score_recency(policy, now, weights),
            applicability=applicability,
        ),
        matched_signals=matched,
    )


def ranking_key(candidate: ScoredCandidate) -> tuple[float, float, str]:
    """Higher total, then later effective date, then smaller policy id."""
    return (
        -candidate.total,
        -candidate.effective_date.timestamp(),
        candidate.policy_id,
    )


@dataclass(frozen=True)
class RankedPolicy:
    """A policy next to its score, so later stages never look policies up by id."""
    policy: Policy
    scored: ScoredCandidate


def rank_candidates(
    policies: tuple[Policy, ...],
    query: CoverageQuery,
    now: datetime,
    weights: ScoringWeights,
) -> tuple[RankedPolicy, ...]:
    """Score every policy and return them in ranked order."""
    ranked = tuple(sorted(
        (RankedPolicy(p, score_candidate(p, query, now, weights)) for p in policies),
        key=lambda r: ranking_key(r.scored),
    ))
    for r in ranked:
        c = r.scored
        logger.debug(
            "Scored %s: total=%.2f status=%.2f recency=%.2f applicability=%.2f",
            c.policy_id, c.total, c.components.status,
            c.components.recency, c.components.applicability,
        )
    return ranked
