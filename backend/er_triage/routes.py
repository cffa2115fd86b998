"""Guardrail evaluation endpoints"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from er_triage.config import Settings, get_settings
from er_triage.guardrails import GuardrailPolicy, apply_urgency_guardrails
from er_triage.models import (
    GuardrailEvaluationRequest,
    GuardrailEvaluationResponse,
    GuardrailPolicyResponse,
    UrgencyLevel,
    UrgencyLevelInfo,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/guardrails", tags=["guardrails"])


def get_policy(settings: Settings = Depends(get_settings)) -> GuardrailPolicy:
    """Guardrail policy built from the active settings."""
    return GuardrailPolicy.from_settings(settings)


@router.post("/evaluate", response_model=GuardrailEvaluationResponse)
async def evaluate_guardrails(
    request: GuardrailEvaluationRequest,
    policy: GuardrailPolicy = Depends(get_policy),
) -> GuardrailEvaluationResponse:
    """
    Apply safety guardrails to an upstream urgency estimate.

    Stateless: nothing is stored. The final level is never lower than the
    level supplied by the classifier.
    """
    initial_level = request.urgency_agent_output.urgency_level

    result = apply_urgency_guardrails(
        request.urgency_agent_output,
        request.structured_intake,
        request.demographics,
        request.vitals,
        policy=policy,
    )

    escalated = result.final_urgency_level > initial_level
    logger.info(
        "Guardrails evaluated: %s -> %s (%d applied)",
        initial_level.value,
        result.final_urgency_level.value,
        len(result.applied_guardrails),
    )
    if escalated:
        logger.warning(
            "Urgency escalated from %s to %s: %s",
            initial_level.value,
            result.final_urgency_level.value,
            "; ".join(result.applied_guardrails),
        )

    return GuardrailEvaluationResponse(
        initial_urgency_level=initial_level,
        final_urgency_level=result.final_urgency_level,
        applied_guardrails=result.applied_guardrails,
        escalated=escalated,
    )


@router.get("/policy", response_model=GuardrailPolicyResponse)
async def get_guardrail_policy(
    policy: GuardrailPolicy = Depends(get_policy),
) -> GuardrailPolicyResponse:
    """Return the thresholds the guardrails are currently using."""
    return GuardrailPolicyResponse(**asdict(policy))


@router.get("/levels", response_model=list[UrgencyLevelInfo])
async def list_urgency_levels() -> list[UrgencyLevelInfo]:
    """Urgency levels in ascending order of rank."""
    return [
        UrgencyLevelInfo(level=level, rank=level.rank)
        for level in sorted(UrgencyLevel)
    ]
