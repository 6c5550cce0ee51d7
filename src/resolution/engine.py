"""
Coverage Policy Resolver

Single entry point that turns a ``CoverageQuery`` into a winning policy
(or none), an evidence bundle and a selection audit.

Pipeline:
1. Read candidates from the catalog (the only await)
2. Validate records, skipping malformed ones
3. Relevance filters (wound-care relevance, supersession)
4. Score and rank
5. Select the winner
6. Build the audit; assemble evidence from the ranked list

Every stage after the catalog read is a pure function, and "now" is
injected, so the same query against the same catalog snapshot always
yields the same audit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional

from pydantic import ValidationError

from src.catalog.base import CatalogUnavailableError, PolicyCatalogReader
from src.catalog.regions import InvalidJurisdictionError, validate_mac_region
from src.config import ResolverSettings, get_resolver_settings
from src.models.audit import SelectionAudit
from src.models.evidence import EvidenceBundle
from src.models.policy import CoverageQuery, Policy, as_utc
from src.resolution.audit import build_audit
from src.resolution.evidence import assemble_evidence
from src.resolution.filters import apply_relevance_filters
from src.resolution.scoring import rank_candidates
from src.resolution.selector import select_policy

logger = logging.getLogger(__name__)


class ResolutionResult(NamedTuple):
    """``(policy | None, evidence, audit)`` returned by ``resolve``."""
    policy: Optional[Policy]
    evidence: EvidenceBundle
    audit: SelectionAudit

    def to_persistence_record(self) -> dict[str, Any]:
        """What the caller stores next to the record this resolution supported."""
        return {
            "selected_policy_id": self.policy.policy_id if self.policy else None,
            "selection_audit": self.audit.model_dump(mode="json"),
        }


def _record_label(record: Any, index: int) -> str:
    if isinstance(record, Mapping):
        ident = record.get("policy_id")
    else:
        ident = getattr(record, "policy_id", None)
    return str(ident) if ident else f"#{index}"


def coerce_policies(records: Sequence[Any]) -> tuple[tuple[Policy, ...], tuple[str, ...]]:
    """Validate catalog records into ``Policy`` models.

    A record that fails validation is skipped and reported by label; one
    bad record never fails the whole resolution.
    """
    policies: list[Policy] = []
    skipped: list[str] = []
    for index, record in enumerate(records):
        if isinstance(record, Policy):
            policies.append(record)
            continue
        try:
            policies.append(Policy.model_validate(record))
        except ValidationError as exc:
            label = _record_label(record, index)
            skipped.append(label)
            logger.warning(
                "Skipping malformed policy record %s: %d validation error(s)",
                label, exc.error_count(),
            )
    return tuple(policies), tuple(skipped)


class CoverageResolver:
    """
    Resolves the single most applicable coverage policy for a wound-care case.

    Stateless between calls: concurrent ``resolve`` calls share nothing but
    the read-only catalog reader and settings.
    """

    def __init__(
        self,
        catalog: PolicyCatalogReader,
        settings: Optional[ResolverSettings] = None,
    ):
        self.catalog = catalog
        self.settings = settings or get_resolver_settings()

    async def resolve(
        self,
        query: CoverageQuery,
        *,
        now: Optional[datetime] = None,
    ) -> ResolutionResult:
        """
        Select a policy, assemble evidence, and record why.

        Args:
            query: The case to resolve
            now: Evaluation time; defaults to the current UTC time

        Returns:
            ResolutionResult(policy, evidence, audit). ``policy`` is None
            when no candidate survived filtering; that is not an error.

        Raises:
            CatalogUnavailableError: the catalog could not be read
            InvalidJurisdictionError: unknown region while enforcement is on
        """
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        settings = self.settings

        if settings.enforce_known_jurisdictions:
            check = validate_mac_region(query.jurisdiction)
            if not check.valid:
                raise InvalidJurisdictionError(query.jurisdiction, check.error)

        try:
            records = await self.catalog.list_candidate_policies(
                query.jurisdiction,
                settings.lookahead_days,
                now=now,
            )
        except CatalogUnavailableError:
            logger.error("Resolution aborted for %s: catalog unavailable", query.jurisdiction)
            raise
        return self.resolve_snapshot(query, records, now=now)

    def resolve_snapshot(
        self,
        query: CoverageQuery,
        records: Sequence[Any],
        *,
        now: datetime,
    ) -> ResolutionResult:
        """Run the synchronous stages over records already read from the catalog."""
        now = as_utc(now)
        settings = self.settings

        policies, skipped = coerce_policies(records)
        filtered = apply_relevance_filters(policies, query)
        ranked = rank_candidates(filtered.candidates, query, now, settings.weights)
        selection = select_policy(ranked, query, catalog_empty=not records)

        audit = build_audit(
            query=query,
            now=now,
            weights=settings.weights,
            considered=len(records),
            skipped_records=skipped,
            filtered=filtered,
            ranked=ranked,
            selection=selection,
        )
        evidence = assemble_evidence(ranked, settings.evidence_top_k)

        if selection.policy is None:
            logger.info(
                "No policy selected for %s/%s (%s); %d record(s) considered",
                query.jurisdiction, query.wound_type,
                selection.fallback.value if selection.fallback else "none", len(records),
            )
        else:
            logger.info(
                "Selected %s for %s/%s from %d candidate(s); filters removed %s",
                selection.policy.policy_id, query.jurisdiction, query.wound_type,
                len(ranked), dict(filtered.removed),
            )

        return ResolutionResult(policy=selection.policy, evidence=evidence, audit=audit)
