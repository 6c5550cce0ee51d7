"""Evidence bundle handed to the downstream reasoning step."""

from pydantic import BaseModel, ConfigDict, Field


class PolicyCitation(BaseModel):
    """
    Normalised citation for one rendered policy.

    Exactly five fields; extras are rejected so the downstream contract
    stays stable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    url: str
    policy_id: str
    effective_date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    jurisdiction: str


class EvidenceBundle(BaseModel):
    """
    Rendered policy text plus a parallel citation list.

    Built fresh per resolution and never persisted by the resolver. The
    downstream step receives ``content`` and ``citations`` verbatim.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., min_length=1)
    citations: tuple[PolicyCitation, ...] = Field(default=())

    @property
    def is_fallback(self) -> bool:
        return not self.citations

    def citation_dicts(self) -> list[dict[str, str]]:
        """Citations as plain dicts for untyped downstream context."""
        return [c.model_dump() for c in self.citations]
