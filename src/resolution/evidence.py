"""
Evidence bundle assembly.

Renders the top-K ranked candidates for the downstream reasoning step,
independently of which single policy the selector picked.
"""

from __future__ import annotations

from src.models.enums import PolicyStatus
from src.models.evidence import EvidenceBundle, PolicyCitation
from src.models.policy import Policy
from src.resolution.scoring import RankedPolicy

DEFAULT_EVIDENCE_TOP_K = 5

BLOCK_SEPARATOR = "\n\n---\n\n"

FALLBACK_EVIDENCE_TEXT = (
    "No applicable coverage policies were found for the given jurisdiction and "
    "criteria, so general Medicare coverage principles apply."
)


def _date_only(policy: Policy) -> str:
    return policy.effective_date.date().isoformat()


def render_policy_block(policy: Policy) -> str:
    status = policy.status.value
    if policy.status == PolicyStatus.FUTURE:
        status += " (Effective in future)"
    return (
        f"LCD: {policy.title} ({policy.policy_id})\n"
        f"MAC: {policy.jurisdiction}\n"
        f"Effective Date: {_date_only(policy)}\n"
        f"Status: {status}\n"
        f"Policy Type: {policy.policy_type}\n"
        f"\n"
        f"Content:\n"
        f"{policy.content}"
    )


def cite_policy(policy: Policy) -> PolicyCitation:
    return PolicyCitation(
        title=policy.title,
        url=policy.url,
        policy_id=policy.policy_id,
        effective_date=_date_only(policy),
        jurisdiction=policy.jurisdiction,
    )


def assemble_evidence(
    ranked: tuple[RankedPolicy, ...],
    top_k: int = DEFAULT_EVIDENCE_TOP_K,
) -> EvidenceBundle:
    """Render the best *top_k* candidates; an empty list yields the fallback text."""
    top = [r.policy for r in ranked[:max(top_k, 0)]]
    if not top:
        return EvidenceBundle(content=FALLBACK_EVIDENCE_TEXT, citations=())

    return EvidenceBundle(
        content=BLOCK_SEPARATOR.join(render_policy_block(p) for p in top),
        citations=tuple(cite_policy(p) for p in top),
    )
