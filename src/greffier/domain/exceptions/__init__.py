"""
Domain exceptions.
"""

from greffier.domain.exceptions.base import GreffierException
from greffier.domain.exceptions.derivation_exceptions import (
    DerivationError,
    DerivationExhaustedError,
    InvalidSeedsError,
)
from greffier.domain.exceptions.transaction_exceptions import (
    ConfirmationTimeoutError,
    EmptyTransactionError,
    ExpiredLifetimeError,
    IncompleteSignersError,
    OversizeTransactionError,
    RPCException,
    SubmissionRejectedError,
    TransactionException,
    TransactionFailedError,
    TransactionStateError,
)
from greffier.domain.exceptions.workflow_exceptions import (
    AddressMismatchError,
    PrematureStepError,
    WorkflowException,
)

__all__ = [
    "GreffierException",
    "DerivationError",
    "DerivationExhaustedError",
    "InvalidSeedsError",
    "TransactionException",
    "EmptyTransactionError",
    "IncompleteSignersError",
    "OversizeTransactionError",
    "TransactionStateError",
    "ExpiredLifetimeError",
    "SubmissionRejectedError",
    "TransactionFailedError",
    "ConfirmationTimeoutError",
    "RPCException",
    "WorkflowException",
    "PrematureStepError",
    "AddressMismatchError",
]
