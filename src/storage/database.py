"""
Database layer using SQLAlchemy 2.0 with async support.

Provides:
- ORM models for the policy catalog and persisted selection records
- Async session management
- Catalog queries and selection persistence via DatabaseService
- SqlPolicyCatalog, the catalog reader the resolver uses in production
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Callable, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    DateTime,
    Index,
    String,
    Text,
    and_,
    or_,
    select,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID as PGUUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.catalog.base import DEFAULT_LOOKAHEAD_DAYS, CatalogUnavailableError
from src.config import get_settings
from src.models.enums import PolicyStatus

logger = logging.getLogger(__name__)


# Base class for all ORM models
class Base(DeclarativeBase):
    """Base class for SQLAlchemy ORM models."""
    pass


# -----------------------------------------------------------------------------
# ORM Models
# -----------------------------------------------------------------------------

class PolicySourceDB(Base):
    """Coverage policy catalog (one row per LCD version).

    Written by the catalog refresh pipeline; the resolver only reads it.
    """

    __tablename__ = "policy_sources"

    id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid4)
    jurisdiction: Mapped[str] = mapped_column(String(100), nullable=False)
    policy_id: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    effective_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    superseded_by: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    policy_type: Mapped[str] = mapped_column(String(20), nullable=False, default="final")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_policy_jurisdiction_status", "jurisdiction", "status"),
        Index("idx_policy_effective_date", "effective_date"),
        Index("idx_policy_policy_id", "policy_id"),
    )


class PolicySelectionDB(Base):
    """Selection audits stored next to the record they supported (append-only)."""

    __tablename__ = "policy_selections"

    selection_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid4)
    reference_type: Mapped[str] = mapped_column(String(64), nullable=False)
    reference_id: Mapped[str] = mapped_column(String(128), nullable=False)
    selected_policy_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    selection_audit: Mapped[dict] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True
    )

    __table_args__ = (
        Index("idx_selection_reference", "reference_type", "reference_id"),
    )


# -----------------------------------------------------------------------------
# Database Engine & Session
# -----------------------------------------------------------------------------

_engine = None
_async_session_factory = None


def get_engine():
    """Get or create the async engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            echo=settings.debug,
        )
    return _engine


def get_session_factory():
    """Get or create the session factory."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Initialize database - create all tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# -----------------------------------------------------------------------------
# Database Service
# -----------------------------------------------------------------------------

class DatabaseService:
    """Service class for catalog reads and selection persistence."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ----- Policy catalog -----

    async def list_candidate_policies(
        self,
        jurisdiction: str,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        now: Optional[datetime] = None,
    ) -> list[PolicySourceDB]:
        """Current, proposed, and near-future policies for a jurisdiction.

        Retired rows are never returned. Newest effective date first.
        """
        now = now or datetime.now(timezone.utc)
        horizon = now + timedelta(days=lookahead_days)
        result = await self.session.execute(
            select(PolicySourceDB)
            .where(
                PolicySourceDB.jurisdiction == jurisdiction,
                or_(
                    PolicySourceDB.status == PolicyStatus.CURRENT.value,
                    PolicySourceDB.status == PolicyStatus.PROPOSED.value,
                    and_(
                        PolicySourceDB.status == PolicyStatus.FUTURE.value,
                        PolicySourceDB.effective_date <= horizon,
                    ),
                ),
            )
            .order_by(PolicySourceDB.effective_date.desc())
        )
        return list(result.scalars().all())

    # ----- Selection records -----

    async def record_selection(
        self,
        reference_type: str,
        reference_id: str,
        record: dict[str, Any],
    ) -> PolicySelectionDB:
        """Store a resolution's persistence record next to a caller reference.

        *record* is the output of ``ResolutionResult.to_persistence_record()``.
        """
        row = PolicySelectionDB(
            reference_type=reference_type,
            reference_id=reference_id,
            selected_policy_id=record.get("selected_policy_id"),
            selection_audit=record["selection_audit"],
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_selections(
        self,
        reference_type: str,
        reference_id: str,
    ) -> list[PolicySelectionDB]:
        """All stored selections for a reference, oldest first."""
        result = await self.session.execute(
            select(PolicySelectionDB)
            .where(
                PolicySelectionDB.reference_type == reference_type,
                PolicySelectionDB.reference_id == reference_id,
            )
            .order_by(PolicySelectionDB.created_at)
        )
        return list(result.scalars().all())


# -----------------------------------------------------------------------------
# Catalog reader
# -----------------------------------------------------------------------------

class SqlPolicyCatalog:
    """Policy catalog reader backed by the ``policy_sources`` table.

    Storage failures surface as ``CatalogUnavailableError``; retrying is
    left to the caller.
    """

    def __init__(
        self,
        session_factory: Callable[[], Any] = get_db_session,
    ):
        self._session_factory = session_factory

    async def list_candidate_policies(
        self,
        jurisdiction: str,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        *,
        now: Optional[datetime] = None,
    ) -> list[PolicySourceDB]:
        try:
            async with self._session_factory() as session:
                rows = await DatabaseService(session).list_candidate_policies(
                    jurisdiction, lookahead_days, now=now,
                )
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Policy catalog read failed for %s: %s", jurisdiction, exc)
            raise CatalogUnavailableError(jurisdiction, str(exc)) from exc

        logger.debug("Catalog returned %d policies for %s", len(rows), jurisdiction)
        return rows
