"""Coverage policy and resolution query models."""

from datetime import date, datetime, time, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import PolicyStatus


def as_utc(value):
    """Normalise dates and naive datetimes to UTC-aware datetimes."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


class Policy(BaseModel):
    """
    One version of a regulatory coverage policy (LCD).

    Created and updated by the catalog refresh pipeline; read-only here.
    A policy whose ``superseded_by`` is set must never be selected.
    """

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "jurisdiction": "JL",
                "policy_id": "L35041",
                "title": "Application of Skin Substitute Grafts for Treatment of DFU and VLU",
                "url": "https://www.cms.gov/medicare-coverage-database/view/lcd.aspx?lcdid=35041",
                "effective_date": "2024-01-01T00:00:00Z",
                "status": "current",
                "superseded_by": None,
                "policy_type": "final",
                "content": "Skin substitute grafts are covered for diabetic foot ulcers...",
            }
        },
    )

    jurisdiction: str = Field(..., min_length=1, description="MAC region code, e.g. 'JL'")
    policy_id: str = Field(..., min_length=1, description="Stable LCD identifier")
    title: str = Field(..., min_length=1)
    url: str = Field(..., description="Source URL of the published policy")
    effective_date: datetime = Field(..., description="When this version takes effect (UTC)")
    status: PolicyStatus
    superseded_by: Optional[str] = Field(
        default=None,
        description="Identifier of the policy that replaces this one",
    )
    policy_type: str = Field(default="final")
    content: str = Field(..., min_length=1, description="Full policy body text")

    @field_validator("effective_date", mode="before")
    @classmethod
    def date_to_datetime(cls, v):
        return as_utc(v)

    @field_validator("effective_date", mode="after")
    @classmethod
    def normalise_effective_date(cls, v: datetime) -> datetime:
        # Naive ISO strings parse to naive datetimes; scoring needs UTC.
        return as_utc(v)

    @field_validator("status", mode="before")
    @classmethod
    def lowercase_status(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("policy_type", mode="before")
    @classmethod
    def default_policy_type(cls, v):
        return v or "final"

    @field_validator("superseded_by", mode="before")
    @classmethod
    def blank_superseded_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_superseded(self) -> bool:
        return self.superseded_by is not None


class PatientCharacteristics(BaseModel):
    """Patient flags matched against policy text during scoring."""

    model_config = ConfigDict(frozen=True)

    is_diabetic: bool = False
    has_venous_disease: bool = False
    has_vascular_disease: bool = False
    notes: Optional[str] = Field(
        default=None,
        description="Free-text context; recorded in the audit, never scored",
    )

    def active_flags(self) -> list[str]:
        """Names of the flags that are set, in field order."""
        return [
            name
            for name in ("is_diabetic", "has_venous_disease", "has_vascular_disease")
            if getattr(self, name)
        ]


class CoverageQuery(BaseModel):
    """A single policy resolution request. Never persisted by the resolver."""

    model_config = ConfigDict(frozen=True)

    jurisdiction: str = Field(..., min_length=1)
    wound_type: str = Field(..., min_length=1, description="e.g. 'DFU', 'VLU'")
    wound_location: Optional[str] = None
    patient_characteristics: PatientCharacteristics = Field(
        default_factory=PatientCharacteristics,
    )

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def normalise_jurisdiction(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("wound_type", mode="before")
    @classmethod
    def strip_wound_type(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("wound_location", mode="before")
    @classmethod
    def blank_location_is_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
