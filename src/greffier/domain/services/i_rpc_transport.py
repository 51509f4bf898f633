"""
RPC transport interface.

Defines the network operations the submission pipeline and workflows
depend on. Implementations translate client library errors into domain
exceptions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from solders.pubkey import Pubkey
from solders.signature import Signature

from greffier.domain.value_objects import CommitmentLevel, LifetimeAnchor


@dataclass(frozen=True)
class SignatureStatus:
    """Observed status of a submitted signature."""

    slot: int
    confirmation_status: Optional[CommitmentLevel] = None
    err: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.err is not None


class IRpcTransport(ABC):
    """Abstract interface for Solana RPC access."""

    @abstractmethod
    async def get_latest_anchor(
        self, commitment: CommitmentLevel = CommitmentLevel.CONFIRMED
    ) -> LifetimeAnchor:
        """
        Fetch a fresh lifetime anchor (latest blockhash).

        Raises:
            RPCException: If the query fails after retries
        """

    @abstractmethod
    async def send_transaction(self, raw: bytes) -> Signature:
        """
        Hand serialized transaction bytes to the network. Never retried.

        Raises:
            ExpiredLifetimeError: If the blockhash is no longer recognized
            SubmissionRejectedError: For any other refusal
        """

    @abstractmethod
    async def get_signature_status(
        self, signature: Signature
    ) -> Optional[SignatureStatus]:
        """
        Get current status of a signature (None if not yet seen).

        Raises:
            RPCException: If the query fails after retries
        """

    @abstractmethod
    async def get_block_height(
        self, commitment: CommitmentLevel = CommitmentLevel.CONFIRMED
    ) -> int:
        """
        Get current block height.

        Raises:
            RPCException: If the query fails after retries
        """

    @abstractmethod
    async def account_exists(self, address: Pubkey) -> bool:
        """
        Check whether an account exists on chain.

        Raises:
            RPCException: If the query fails after retries
        """

    @abstractmethod
    async def request_airdrop(self, recipient: Pubkey, lamports: int) -> Signature:
        """
        Request a faucet airdrop (devnet/testnet only).

        Raises:
            SubmissionRejectedError: If the faucet refuses
        """

    @abstractmethod
    async def get_balance(self, address: Pubkey) -> int:
        """Get balance in lamports."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
