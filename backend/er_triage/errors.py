"""Input errors raised at the guardrail boundary.

The guardrail engine itself never raises. These are raised while parsing
upstream classifier output, before it is handed to the engine.
"""


class GuardrailInputError(ValueError):
    """Base class for rejected guardrail inputs."""


class InvalidUrgencyLevel(GuardrailInputError):
    """Urgency level is not one of the recognized values."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Unrecognized urgency level {value!r}; "
            "expected one of 'Low', 'Medium', 'High', 'Critical'"
        )


class InvalidConfidence(GuardrailInputError):
    """Confidence is not a finite number in [0, 1]."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Confidence must be a finite number in [0, 1], got {value!r}")
