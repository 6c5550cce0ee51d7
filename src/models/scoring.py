"""
Scoring weights and scored-candidate models.

The weight constants below are the reviewed defaults. They are exposed by
name so an auditor can read them next to a ``SelectionAudit`` and every
audit carries a snapshot of the weights that produced it.

Default tuning keeps the status tiers apart: the lowest possible ``current``
status (base minus the full decay cap) is still above the highest ``future``
status plus the maximum recency bonus, so with equal applicability a current
policy always outranks a future one.
"""

import math
from datetime import datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    model_validator,
)

from src.models.enums import PolicyStatus, ScoreComponent

# Status component
STATUS_WEIGHT_CURRENT = 100.0
STATUS_WEIGHT_FUTURE = 60.0
STATUS_WEIGHT_PROPOSED = 20.0
STATUS_WEIGHT_RETIRED = 0.0
STATUS_DECAY_PER_DAY = 10.0 / 365.0
STATUS_DECAY_CAP = 10.0

# Recency component
RECENCY_MAX_SCORE = 25.0
RECENCY_WINDOW_DAYS = 365.0

# Applicability component
APPLICABILITY_WOUND_TYPE_TITLE = 60.0
APPLICABILITY_WOUND_TYPE_CONTENT = 40.0
APPLICABILITY_LOCATION = 15.0
APPLICABILITY_PATIENT_CHARACTERISTIC = 25.0


class ScoringWeights(BaseModel):
    """Tunable weights for the three score components."""

    model_config = ConfigDict(frozen=True)

    status_current: float = Field(default=STATUS_WEIGHT_CURRENT, ge=0)
    status_future: float = Field(default=STATUS_WEIGHT_FUTURE, ge=0)
    status_proposed: float = Field(default=STATUS_WEIGHT_PROPOSED, ge=0)
    status_retired: float = Field(default=STATUS_WEIGHT_RETIRED, ge=0)
    status_decay_per_day: float = Field(default=STATUS_DECAY_PER_DAY, ge=0)
    status_decay_cap: float = Field(default=STATUS_DECAY_CAP, ge=0)

    recency_max_score: float = Field(default=RECENCY_MAX_SCORE, ge=0)
    recency_window_days: float = Field(default=RECENCY_WINDOW_DAYS, gt=0)

    wound_type_title: float = Field(default=APPLICABILITY_WOUND_TYPE_TITLE, ge=0)
    wound_type_content: float = Field(default=APPLICABILITY_WOUND_TYPE_CONTENT, ge=0)
    location: float = Field(default=APPLICABILITY_LOCATION, ge=0)
    patient_characteristic: float = Field(default=APPLICABILITY_PATIENT_CHARACTERISTIC, ge=0)

    def status_base(self, status: PolicyStatus) -> float:
        """Base weight for a lifecycle tier before day decay."""
        return {
            PolicyStatus.CURRENT: self.status_current,
            PolicyStatus.FUTURE: self.status_future,
            PolicyStatus.PROPOSED: self.status_proposed,
            PolicyStatus.RETIRED: self.status_retired,
        }[status]


class ScoreComponents(BaseModel):
    """Named breakdown of a candidate's score."""

    model_config = ConfigDict(frozen=True)

    status: float
    recency: float
    applicability: float = Field(..., ge=0)

    def as_dict(self) -> dict[str, float]:
        """Components keyed by name, in declared order."""
        return {
            ScoreComponent.STATUS.value: self.status,
            ScoreComponent.RECENCY.value: self.recency,
            ScoreComponent.APPLICABILITY.value: self.applicability,
        }

    def dominant(self) -> ScoreComponent:
        """Largest component; ties go to the earlier declared component."""
        values = self.as_dict()
        best = ScoreComponent.STATUS
        for component in ScoreComponent:
            if values[component.value] > values[best.value]:
                best = component
        return best


class ScoredCandidate(BaseModel):
    """
    A filtered policy paired with its score breakdown.

    ``total`` is computed from the components and cannot be set, so it is
    always exactly their sum. A stored audit whose ``total`` disagrees with
    its components fails to load.
    """

    model_config = ConfigDict(frozen=True)

    policy_id: str
    title: str
    status: PolicyStatus
    effective_date: datetime
    components: ScoreComponents
    matched_signals: tuple[str, ...] = Field(
        default=(),
        description="Applicability signals that matched, e.g. 'wound_type_title'",
    )

    @model_validator(mode="before")
    @classmethod
    def check_serialized_total(cls, data):
        """Accept audit JSON that carries the computed total, if it still matches."""
        if not isinstance(data, dict) or "total" not in data:
            return data
        data = dict(data)
        total = data.pop("total")
        components = data.get("components")
        if isinstance(components, dict):
            try:
                components = ScoreComponents.model_validate(components)
            except ValidationError:
                # Field validation reports the bad components.
                return data
        if isinstance(components, ScoreComponents):
            expected = components.status + components.recency + components.applicability
            if not isinstance(total, (int, float)) or not math.isclose(
                total, expected, rel_tol=0.0, abs_tol=1e-6,
            ):
                raise ValueError(
                    f"stored total {total!r} does not match component sum {expected!r}"
                )
        return data

    @computed_field
    @property
    def total(self) -> float:
        c = self.components
        return c.status + c.recency + c.applicability
