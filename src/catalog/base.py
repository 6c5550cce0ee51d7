"""
Policy catalog reader contract.

The catalog itself (storage, refresh and import) lives outside the
resolver. Readers return every record for a jurisdiction that is
``current``, ``proposed``, or ``future`` within the lookahead window, and
never ``retired`` ones. Records may be ``Policy`` instances, mappings or
ORM rows; the resolver validates each one and skips those that are
malformed.

A reader must raise ``CatalogUnavailableError`` when storage fails. An
empty list always means "no data for this jurisdiction".
"""

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

DEFAULT_LOOKAHEAD_DAYS = 90


class CoverageResolutionError(Exception):
    """Base class for resolver errors."""


class CatalogUnavailableError(CoverageResolutionError):
    """Raised when the policy catalog could not be read."""

    retryable = True

    def __init__(self, jurisdiction: str, reason: str):
        self.jurisdiction = jurisdiction
        self.reason = reason
        super().__init__(f"Policy catalog unavailable for jurisdiction {jurisdiction}: {reason}")


@runtime_checkable
class PolicyCatalogReader(Protocol):
    """Read-only accessor for candidate policies."""

    async def list_candidate_policies(
        self,
        jurisdiction: str,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        *,
        now: Optional[datetime] = None,
    ) -> Sequence[Any]:
        ...
