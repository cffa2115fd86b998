import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from er_triage.errors import InvalidConfidence, InvalidUrgencyLevel


class UrgencyLevel(str, Enum):
    """Ordered urgency category: Low < Medium < High < Critical.

    Comparisons go through ``rank``; the string values are never compared.
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return _URGENCY_RANK[self]

    @classmethod
    def parse(cls, value: object) -> "UrgencyLevel":
        """Parse an exact, case-sensitive urgency value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                raise InvalidUrgencyLevel(value) from None
        raise InvalidUrgencyLevel(value)

    def _coerce(self, other):
        # Plain strings are parsed so ordering never falls back to str comparison
        if isinstance(other, str):
            return UrgencyLevel.parse(other)
        return None

    def __lt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rank >= other.rank


_URGENCY_RANK = {
    UrgencyLevel.LOW: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.HIGH: 3,
    UrgencyLevel.CRITICAL: 4,
}


def validate_confidence(value: float) -> float:
    """Reject confidence values that are non-finite or outside [0, 1]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfidence(value)
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise InvalidConfidence(value)
    return float(value)


class TriageModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# Guardrail inputs
class UrgencyAgentOutput(TriageModel):
    """Urgency estimate produced by the upstream classification agent"""

    urgency_level: UrgencyLevel
    confidence: Optional[float] = Field(
        default=None,
        description="Classifier confidence in [0, 1]; absent when not reported",
    )
    rationale: tuple[str, ...] = ()

    @field_validator("urgency_level", mode="before")
    @classmethod
    def _parse_urgency_level(cls, value):
        return UrgencyLevel.parse(value)

    @field_validator("confidence")
    @classmethod
    def _check_confidence(cls, value):
        if value is None:
            return value
        return validate_confidence(value)


class StructuredIntake(TriageModel):
    """Symptoms extracted from free-text intake"""

    primary_symptoms: tuple[str, ...] = ()
    red_flags: Optional[tuple[str, ...]] = Field(
        default=None,
        description="Explicitly stated severe symptoms",
    )


class Demographics(TriageModel):
    """Patient demographics relevant to triage"""

    age: Optional[int] = Field(
        default=None,
        ge=0,
        description="Age in whole years; absent when unknown",
    )


class Vitals(TriageModel):
    """Non-invasive vitals; absent values were not measured"""

    heart_rate: Optional[float] = None
    respiration_rate: Optional[float] = None
    confidence: Optional[float] = None
    available: Optional[bool] = None


class GuardrailResult(TriageModel):
    """Final urgency after guardrails, with reasons in evaluation order"""

    final_urgency_level: UrgencyLevel
    applied_guardrails: tuple[str, ...] = ()


# API Request/Response Models
class GuardrailEvaluationRequest(TriageModel):
    """Request to evaluate guardrails against an upstream urgency estimate"""

    urgency_agent_output: UrgencyAgentOutput
    structured_intake: Optional[StructuredIntake] = None
    demographics: Optional[Demographics] = None
    vitals: Optional[Vitals] = None


class GuardrailEvaluationResponse(TriageModel):
    """Guardrail outcome returned to the caller"""

    initial_urgency_level: UrgencyLevel
    final_urgency_level: UrgencyLevel
    applied_guardrails: tuple[str, ...] = ()
    escalated: bool = Field(
        default=False,
        description="True only when the final level ranks above the initial one",
    )


class GuardrailPolicyResponse(TriageModel):
    """Active guardrail thresholds"""

    low_confidence_threshold: float
    pediatric_age: int
    geriatric_age: int
    elderly_red_flag_age: int
    heart_rate_threshold: float
    respiration_rate_threshold: float


class UrgencyLevelInfo(TriageModel):
    """An urgency level with its rank"""

    level: UrgencyLevel
    rank: int
