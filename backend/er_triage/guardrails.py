"""Deterministic guardrails for triage urgency classification.

No AI/LLM usage. Guardrails may only escalate the upstream urgency estimate,
never downgrade it, and every rule that fires leaves a reason in the result.
"""

from dataclasses import dataclass
from typing import Optional

from er_triage.config import Settings
from er_triage.models import (
    Demographics,
    GuardrailResult,
    StructuredIntake,
    UrgencyAgentOutput,
    UrgencyLevel,
    Vitals,
)

LOW_CONFIDENCE_REASON = "Low confidence - clinician review recommended"
AGE_REASON = "Age-based escalation to at least Medium"
ELDERLY_RED_FLAG_REASON = "Age > {age} with red flags -> at least High"
RED_FLAG_REASON = "Red flag symptom present -> at least High"
ELEVATED_VITALS_REASON = "Elevated vitals -> at least High"


@dataclass(frozen=True)
class GuardrailPolicy:
    """Thresholds used by the guardrail rules. All comparisons are strict."""

    low_confidence_threshold: float = 0.6
    pediatric_age: int = 5
    geriatric_age: int = 65
    elderly_red_flag_age: int = 75
    heart_rate_threshold: float = 110
    respiration_rate_threshold: float = 22

    @classmethod
    def from_settings(cls, settings: Settings) -> "GuardrailPolicy":
        return cls(
            low_confidence_threshold=settings.guardrail_low_confidence_threshold,
            pediatric_age=settings.guardrail_pediatric_age,
            geriatric_age=settings.guardrail_geriatric_age,
            elderly_red_flag_age=settings.guardrail_elderly_red_flag_age,
            heart_rate_threshold=settings.guardrail_heart_rate_threshold,
            respiration_rate_threshold=settings.guardrail_respiration_rate_threshold,
        )


DEFAULT_POLICY = GuardrailPolicy()


def max_urgency(current: UrgencyLevel, minimum: UrgencyLevel) -> UrgencyLevel:
    """Raise ``current`` to at least ``minimum``; never lowers it.

    Plain strings are parsed first, so unknown values raise
    ``InvalidUrgencyLevel`` rather than comparing alphabetically.
    """
    current = UrgencyLevel.parse(current)
    minimum = UrgencyLevel.parse(minimum)
    return minimum if minimum > current else current


def has_red_flags(structured_intake: Optional[StructuredIntake]) -> bool:
    """An empty red flag list counts the same as a missing one."""
    if structured_intake is None:
        return False
    return bool(structured_intake.red_flags)


def apply_urgency_guardrails(
    urgency_agent_output: UrgencyAgentOutput,
    structured_intake: Optional[StructuredIntake] = None,
    demographics: Optional[Demographics] = None,
    vitals: Optional[Vitals] = None,
    *,
    policy: GuardrailPolicy = DEFAULT_POLICY,
) -> GuardrailResult:
    """
    Apply guardrails to the urgency agent output.

    Rules are evaluated independently in a fixed order so that the reasons
    in ``applied_guardrails`` are reproducible:

    1. Low confidence: flag for clinician review, level unchanged
    2. Age under pediatric or over geriatric threshold: at least Medium
    3. Elderly with red flags: at least High
    4. Any red flag: at least High
    5. Elevated heart rate or respiration rate: at least High

    Missing age skips rules 2 and 3. Missing vitals never trigger rule 5.
    """
    applied_guardrails: list[str] = []
    final_urgency_level = urgency_agent_output.urgency_level

    age = demographics.age if demographics is not None else None
    red_flags = has_red_flags(structured_intake)

    # 1) Low confidence -> flag only
    confidence = urgency_agent_output.confidence
    if confidence is not None and confidence < policy.low_confidence_threshold:
        applied_guardrails.append(LOW_CONFIDENCE_REASON)

    # 2) Very young or older patients -> minimum Medium
    if age is not None and (age < policy.pediatric_age or age > policy.geriatric_age):
        final_urgency_level = max_urgency(final_urgency_level, UrgencyLevel.MEDIUM)
        applied_guardrails.append(AGE_REASON)

    # 3) Elderly with red flags -> minimum High
    if age is not None and age > policy.elderly_red_flag_age and red_flags:
        final_urgency_level = max_urgency(final_urgency_level, UrgencyLevel.HIGH)
        applied_guardrails.append(ELDERLY_RED_FLAG_REASON.format(age=policy.elderly_red_flag_age))

    # 4) Any red flag -> minimum High
    if red_flags:
        final_urgency_level = max_urgency(final_urgency_level, UrgencyLevel.HIGH)
        applied_guardrails.append(RED_FLAG_REASON)

    # 5) Elevated vitals -> minimum High
    heart_rate = vitals.heart_rate if vitals is not None else None
    respiration_rate = vitals.respiration_rate if vitals is not None else None
    if (heart_rate is not None and heart_rate > policy.heart_rate_threshold) or (
        respiration_rate is not None and respiration_rate > policy.respiration_rate_threshold
    ):
        final_urgency_level = max_urgency(final_urgency_level, UrgencyLevel.HIGH)
        applied_guardrails.append(ELEVATED_VITALS_REASON)

    return GuardrailResult(
        final_urgency_level=final_urgency_level,
        applied_guardrails=tuple(applied_guardrails),
    )
