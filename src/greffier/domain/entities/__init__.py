"""
Domain entities.
"""

from greffier.domain.entities.transaction import (
    TERMINAL_STATES,
    ConfirmationResult,
    ConfirmationStatus,
    SignedTransaction,
    SubmissionState,
    TransactionSkeleton,
)

__all__ = [
    "TERMINAL_STATES",
    "ConfirmationResult",
    "ConfirmationStatus",
    "SignedTransaction",
    "SubmissionState",
    "TransactionSkeleton",
]
