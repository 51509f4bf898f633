"""
Enrollment workflow exceptions.
"""

from greffier.domain.exceptions.base import GreffierException


class WorkflowException(GreffierException):
    """Base exception for workflow sequencing."""


class PrematureStepError(WorkflowException):
    """Step 2 attempted before Step 1 reached Confirmed."""


class AddressMismatchError(WorkflowException):
    """Caller-supplied address differs from independent derivation."""

    def __init__(self, role: str, supplied: object, expected: object):
        self.role = role
        super().__init__(
            f"{role} address mismatch: got {supplied}, expected {expected}",
            details={
                "role": role,
                "supplied": str(supplied),
                "expected": str(expected),
            },
        )
