"""
Transaction assembly, signing and submission exceptions.

Local failures (empty, incomplete signers, oversize, bad state) are
deterministic programming errors. Network failures (expired, rejected)
are retriable only by rebuilding with a fresh lifetime anchor.
"""

from typing import Iterable, Optional

from greffier.domain.exceptions.base import GreffierException


class TransactionException(GreffierException):
    """Base exception for transaction operations."""


class EmptyTransactionError(TransactionException):
    """Transaction skeleton has no instructions."""

    def __init__(self):
        super().__init__("Transaction must contain at least one instruction")


class IncompleteSignersError(TransactionException):
    """Required signer identities have no matching Signer."""

    def __init__(self, missing: Iterable[object]):
        self.missing = tuple(missing)
        names = ", ".join(str(m) for m in self.missing)
        super().__init__(
            f"Missing signers: {names}",
            details={"missing": [str(m) for m in self.missing]},
        )


class OversizeTransactionError(TransactionException):
    """Serialized transaction exceeds the network size limit."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"Transaction too large: {size} bytes (max {max_size})",
            details={"size": size, "max_size": max_size},
        )


class TransactionStateError(TransactionException):
    """Illegal lifecycle transition (re-sign, resubmit, leave terminal)."""


class ExpiredLifetimeError(TransactionException):
    """Lifetime anchor is no longer valid for submission."""


class SubmissionRejectedError(TransactionException):
    """Network refused the transaction at submission time."""


class TransactionFailedError(TransactionException):
    """Transaction was processed but failed on chain."""

    def __init__(self, signature: str, error: Optional[str] = None):
        self.signature = signature
        super().__init__(
            f"Transaction {signature} failed: {error}",
            details={"signature": signature, "error": error},
        )


class ConfirmationTimeoutError(TransactionException):
    """Caller timeout elapsed before a terminal status was observed."""

    def __init__(self, signature: str, timeout: float):
        self.signature = signature
        self.timeout = timeout
        super().__init__(
            f"Transaction confirmation timeout: {signature}",
            details={"signature": signature, "timeout": timeout},
        )


class RPCException(GreffierException):
    """Read-only RPC call failed."""
