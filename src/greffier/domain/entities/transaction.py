"""
Transaction entities - skeleton, signed transaction and confirmation result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from greffier.domain.exceptions import (
    ExpiredLifetimeError,
    TransactionFailedError,
    TransactionStateError,
)
from greffier.domain.value_objects import LifetimeAnchor


class SubmissionState(str, Enum):
    """Lifecycle of a transaction from assembly to a terminal status."""

    BUILT = "built"
    SIGNED = "signed"
    SIZE_CHECKED = "size_checked"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {SubmissionState.CONFIRMED, SubmissionState.FAILED, SubmissionState.EXPIRED}
)

_TRANSITIONS = {
    SubmissionState.BUILT: {SubmissionState.SIGNED},
    SubmissionState.SIGNED: {SubmissionState.SIZE_CHECKED},
    SubmissionState.SIZE_CHECKED: {
        SubmissionState.SUBMITTED,
        SubmissionState.FAILED,
        SubmissionState.EXPIRED,
    },
    SubmissionState.SUBMITTED: TERMINAL_STATES,
}


class ConfirmationStatus(str, Enum):
    """Terminal outcome of a submission."""

    CONFIRMED = "confirmed"
    FAILED = "failed"
    EXPIRED = "expired"


@dataclass
class TransactionSkeleton:
    """
    Ordered instructions bound to a fee payer and a lifetime anchor.

    Business rules:
    - Instruction order is execution order; never reordered or deduplicated
    - Mutable only while BUILT; signing seals it
    - Consumed exactly once by signing
    """

    fee_payer: Pubkey
    anchor: LifetimeAnchor
    instructions: List[Instruction] = field(default_factory=list)
    state: SubmissionState = SubmissionState.BUILT

    @property
    def sealed(self) -> bool:
        return self.state != SubmissionState.BUILT

    def add_instruction(self, instruction: Instruction) -> None:
        """
        Append an instruction during assembly.

        Raises:
            TransactionStateError: If the skeleton was already signed
        """
        if self.sealed:
            raise TransactionStateError(
                "Cannot modify a skeleton after signing",
                details={"state": self.state.value},
            )
        self.instructions.append(instruction)

    def seal(self) -> None:
        """
        Mark skeleton as consumed by signing.

        Raises:
            TransactionStateError: If already sealed
        """
        if self.sealed:
            raise TransactionStateError(
                "Skeleton already consumed by signing",
                details={"state": self.state.value},
            )
        self.state = SubmissionState.SIGNED

    def compile_message(self) -> Message:
        """Compile into a legacy message (fee payer first in account keys)."""
        return Message.new_with_blockhash(
            self.instructions, self.fee_payer, self.anchor.blockhash
        )


@dataclass
class SignedTransaction:
    """
    Skeleton plus exactly one signature per required signer.

    Business rules:
    - Submit-once; resubmission requires a rebuild with a fresh anchor
    - State only moves forward along the submission state machine
    - A send whose outcome is unknown still counts as the one submission
    """

    skeleton: TransactionSkeleton
    transaction: Transaction
    state: SubmissionState = SubmissionState.SIGNED
    send_attempted: bool = False

    @property
    def signature(self) -> Signature:
        """Fee payer signature, which doubles as the transaction id."""
        return self.transaction.signatures[0]

    @property
    def anchor(self) -> LifetimeAnchor:
        return self.skeleton.anchor

    @property
    def signer_keys(self) -> Tuple[Pubkey, ...]:
        """Signer identities in wire order."""
        message = self.transaction.message
        count = message.header.num_required_signatures
        return tuple(message.account_keys[:count])

    def serialize(self) -> bytes:
        return bytes(self.transaction)

    @property
    def size(self) -> int:
        return len(self.serialize())

    def advance(self, new_state: SubmissionState) -> None:
        """
        Move to the next lifecycle state.

        Raises:
            TransactionStateError: If the transition is not allowed
        """
        allowed = _TRANSITIONS.get(self.state, frozenset())
        if new_state not in allowed:
            raise TransactionStateError(
                f"Illegal transition {self.state.value} -> {new_state.value}",
                details={
                    "signature": str(self.signature),
                    "from": self.state.value,
                    "to": new_state.value,
                },
            )
        self.state = new_state


@dataclass(frozen=True)
class ConfirmationResult:
    """Submission identifier plus terminal status."""

    signature: Signature
    status: ConfirmationStatus
    slot: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == ConfirmationStatus.CONFIRMED

    def raise_for_status(self) -> "ConfirmationResult":
        """
        Raise if the result is not CONFIRMED.

        Raises:
            ExpiredLifetimeError: Lifetime ran out; safe to rebuild and resubmit
            TransactionFailedError: Executed and failed; inspect before retrying
        """
        if self.status == ConfirmationStatus.EXPIRED:
            raise ExpiredLifetimeError(
                f"Transaction {self.signature} expired before confirmation",
                details={"signature": str(self.signature)},
            )
        if self.status == ConfirmationStatus.FAILED:
            raise TransactionFailedError(str(self.signature), self.error)
        return self
