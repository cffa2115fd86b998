"""Tests for urgency levels and boundary validation."""

import math

import pytest
from pydantic import ValidationError

from er_triage.errors import GuardrailInputError, InvalidConfidence, InvalidUrgencyLevel
from er_triage.models import (
    GuardrailResult,
    StructuredIntake,
    UrgencyAgentOutput,
    UrgencyLevel,
    validate_confidence,
)


class TestUrgencyLevel:
    """Ordering uses rank, not string comparison."""

    def test_total_order(self):
        assert UrgencyLevel.LOW < UrgencyLevel.MEDIUM < UrgencyLevel.HIGH < UrgencyLevel.CRITICAL

    def test_rank_beats_alphabetical_order(self):
        # "Critical" < "High" < "Medium" alphabetically
        assert UrgencyLevel.CRITICAL > UrgencyLevel.HIGH
        assert UrgencyLevel.HIGH > UrgencyLevel.MEDIUM
        assert not UrgencyLevel.MEDIUM > UrgencyLevel.HIGH

    def test_plain_string_operand_compared_by_rank(self):
        assert not UrgencyLevel.HIGH > "Critical"
        assert UrgencyLevel.HIGH < "Critical"
        assert UrgencyLevel.HIGH >= "Medium"
        assert UrgencyLevel.LOW <= "Low"

    def test_plain_string_on_left_compared_by_rank(self):
        assert "Critical" > UrgencyLevel.HIGH
        assert not "Medium" > UrgencyLevel.HIGH

    def test_unknown_string_operand_rejected(self):
        with pytest.raises(InvalidUrgencyLevel):
            UrgencyLevel.HIGH > "critical"

    def test_non_string_operand_not_orderable(self):
        with pytest.raises(TypeError):
            UrgencyLevel.HIGH > 3

    def test_sorted_by_rank(self):
        assert sorted(UrgencyLevel) == [
            UrgencyLevel.LOW,
            UrgencyLevel.MEDIUM,
            UrgencyLevel.HIGH,
            UrgencyLevel.CRITICAL,
        ]

    def test_max_uses_rank(self):
        assert max(UrgencyLevel.HIGH, UrgencyLevel.CRITICAL, UrgencyLevel.LOW) == UrgencyLevel.CRITICAL

    def test_parse_exact_values(self):
        assert UrgencyLevel.parse("Critical") is UrgencyLevel.CRITICAL
        assert UrgencyLevel.parse(UrgencyLevel.LOW) is UrgencyLevel.LOW

    @pytest.mark.parametrize("value", ["low", "CRITICAL", "Urgent", "", None, 3])
    def test_parse_rejects_unknown_values(self, value):
        with pytest.raises(InvalidUrgencyLevel):
            UrgencyLevel.parse(value)

    def test_invalid_level_is_a_guardrail_input_error(self):
        with pytest.raises(GuardrailInputError):
            UrgencyLevel.parse("Severe")


class TestValidateConfidence:
    @pytest.mark.parametrize("value", [0, 0.0, 0.59, 1, 1.0])
    def test_accepts_unit_interval(self, value):
        assert validate_confidence(value) == float(value)

    @pytest.mark.parametrize("value", [-0.01, 1.01, math.nan, math.inf, True, "0.5"])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(InvalidConfidence):
            validate_confidence(value)


class TestUrgencyAgentOutput:
    def test_accepts_camel_case_payload(self):
        output = UrgencyAgentOutput.model_validate(
            {"urgencyLevel": "High", "confidence": 0.8, "rationale": ["chest pain reported"]}
        )

        assert output.urgency_level is UrgencyLevel.HIGH
        assert output.confidence == 0.8
        assert output.rationale == ("chest pain reported",)

    def test_only_urgency_level_is_required(self):
        output = UrgencyAgentOutput.model_validate({"urgencyLevel": "Low"})

        assert output.confidence is None
        assert output.rationale == ()

    def test_rejects_lowercase_level(self):
        with pytest.raises(ValidationError):
            UrgencyAgentOutput.model_validate({"urgencyLevel": "high", "confidence": 0.8})

    def test_rejects_confidence_out_of_range(self):
        with pytest.raises(ValidationError):
            UrgencyAgentOutput.model_validate({"urgencyLevel": "High", "confidence": 1.5})

    def test_is_immutable(self):
        output = UrgencyAgentOutput(urgency_level=UrgencyLevel.LOW)

        with pytest.raises(ValidationError):
            output.urgency_level = UrgencyLevel.HIGH


class TestGuardrailResult:
    def test_serializes_with_camel_case_keys(self):
        result = GuardrailResult(
            final_urgency_level=UrgencyLevel.HIGH,
            applied_guardrails=("Red flag symptom present -> at least High",),
        )

        assert result.model_dump(mode="json", by_alias=True) == {
            "finalUrgencyLevel": "High",
            "appliedGuardrails": ["Red flag symptom present -> at least High"],
        }

    def test_structured_intake_red_flags_default_absent(self):
        assert StructuredIntake().red_flags is None
