"""In-memory policy catalog snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from src.catalog.base import DEFAULT_LOOKAHEAD_DAYS
from src.models.enums import PolicyStatus
from src.models.policy import as_utc

logger = logging.getLogger(__name__)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _status_value(raw: Any) -> Optional[str]:
    if isinstance(raw, PolicyStatus):
        return raw.value
    if isinstance(raw, str):
        return raw.strip().lower()
    return None


def _effective_at(raw: Any) -> Optional[datetime]:
    if isinstance(raw, str):
        try:
            raw = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
    value = as_utc(raw)
    return value if isinstance(value, datetime) else None


class InMemoryPolicyCatalog:
    """
    Read-only catalog over a fixed list of policy records.

    Applies the same jurisdiction, status and lookahead rules as the SQL
    reader. Records are returned as given; a record whose date cannot be
    read is passed through so the resolver can report it as malformed.
    """

    def __init__(self, records: Iterable[Any] = ()):
        self._records = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    async def list_candidate_policies(
        self,
        jurisdiction: str,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        *,
        now: Optional[datetime] = None,
    ) -> list[Any]:
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        horizon = now + timedelta(days=lookahead_days)
        wanted = jurisdiction.strip().upper()

        selected = []
        for record in self._records:
            region = _field(record, "jurisdiction")
            if not isinstance(region, str) or region.strip().upper() != wanted:
                continue

            status = _status_value(_field(record, "status"))
            if status == PolicyStatus.RETIRED.value:
                continue
            if status == PolicyStatus.FUTURE.value:
                effective = _effective_at(_field(record, "effective_date"))
                if effective is not None and effective > horizon:
                    continue
            selected.append(record)

        logger.debug(
            "Catalog snapshot returned %d of %d records for %s",
            len(selected), len(self._records), wanted,
        )
        return selected
