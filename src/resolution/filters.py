"""
Relevance filters.

Each filter is a pure function from a candidate tuple to a smaller (or
equal) tuple. ``apply_relevance_filters`` runs them in a fixed order and
reports every filter that ran, including ones that removed nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from src.models.enums import FilterName
from src.models.policy import CoverageQuery, Policy
from src.resolution.keywords import mentions_wound_type, relevance_terms
from src.utils.text import mentions

logger = logging.getLogger(__name__)


def filter_wound_care_relevant(
    policies: tuple[Policy, ...],
    query: CoverageQuery,
) -> tuple[Policy, ...]:
    """Keep policies whose title or body mentions any wound-care term.

    One matching term is enough; how well the policy fits is left to
    applicability scoring.
    """
    terms = relevance_terms(query.wound_type, query.wound_location)
    return tuple(
        p for p in policies
        if mentions(p.title, terms) or mentions(p.content, terms)
        or mentions_wound_type(p.title, query.wound_type)
        or mentions_wound_type(p.content, query.wound_type)
    )


def filter_superseded(
    policies: tuple[Policy, ...],
    query: CoverageQuery,
) -> tuple[Policy, ...]:
    """Drop every policy that names a successor, whatever its status."""
    return tuple(p for p in policies if not p.is_superseded)


FilterFn = Callable[[tuple[Policy, ...], CoverageQuery], tuple[Policy, ...]]

RELEVANCE_FILTERS: tuple[tuple[FilterName, FilterFn], ...] = (
    (FilterName.WOUND_CARE_RELEVANCE, filter_wound_care_relevant),
    (FilterName.SUPERSEDED_EXCLUSION, filter_superseded),
)


@dataclass(frozen=True)
class FilterOutcome:
    """Candidates left after filtering, and the filters that produced them."""
    candidates: tuple[Policy, ...]
    filters_applied: tuple[str, ...]
    removed: tuple[tuple[str, int], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.candidates


def apply_relevance_filters(
    policies: tuple[Policy, ...],
    query: CoverageQuery,
) -> FilterOutcome:
    """Run every relevance filter in order."""
    remaining = policies
    applied: list[str] = []
    removed: list[tuple[str, int]] = []

    for name, fn in RELEVANCE_FILTERS:
        before = len(remaining)
        remaining = fn(remaining, query)
        applied.append(name.value)
        removed.append((name.value, before - len(remaining)))
        logger.debug("Filter %s removed %d of %d", name.value, before - len(remaining), before)

    return FilterOutcome(
        candidates=remaining,
        filters_applied=tuple(applied),
        removed=tuple(removed),
    )
