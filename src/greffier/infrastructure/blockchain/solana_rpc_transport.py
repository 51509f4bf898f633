"""
Solana RPC transport backed by solana-py's AsyncClient.

Features:
- Retry with exponential backoff for read-only queries
- Single-shot transaction sends (no retry, no client-side confirmation)
- Library errors translated into domain exceptions
"""

import time
from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException as SolanaRPCError
from solana.rpc.types import TxOpts
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from greffier.domain.exceptions import (
    ExpiredLifetimeError,
    RPCException,
    SubmissionRejectedError,
)
from greffier.domain.services import IRpcTransport, SignatureStatus
from greffier.domain.value_objects import CommitmentLevel, LifetimeAnchor
from greffier.reporter import SystemReporter
from greffier.resilience import Retry, RetryError, RetryPolicy

TRANSIENT_ERRORS = (SolanaRpcException, SolanaRPCError, OSError)


def _is_blockhash_not_found(error: Exception) -> bool:
    text = str(error).lower().replace(" ", "").replace("_", "")
    return "blockhashnotfound" in text


def _to_commitment_level(
    status: Optional[TransactionConfirmationStatus],
) -> Optional[CommitmentLevel]:
    if status is None:
        return None
    if status == TransactionConfirmationStatus.Finalized:
        return CommitmentLevel.FINALIZED
    if status == TransactionConfirmationStatus.Confirmed:
        return CommitmentLevel.CONFIRMED
    return CommitmentLevel.PROCESSED


class SolanaRpcTransport(IRpcTransport):
    """
    Solana RPC access for the submission pipeline and workflows.

    Read-only queries are retried; sends are not.
    """

    def __init__(
        self,
        rpc_url: str,
        anchor_validity_seconds: float = 60.0,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Callable[[], float] = time.monotonic,
        client: Optional[AsyncClient] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize Solana RPC transport.

        Args:
            rpc_url: Solana RPC endpoint URL
            anchor_validity_seconds: Local validity window for fetched anchors
            retry_policy: Backoff for read-only queries
            clock: Monotonic clock stamped onto anchors
            client: Optional preconfigured AsyncClient
            reporter: Optional reporter for logging
        """
        self.rpc_url = rpc_url
        self.anchor_validity_seconds = anchor_validity_seconds
        self.clock = clock
        self.client = client or AsyncClient(rpc_url)
        self.reporter = reporter or SystemReporter(name="greffier.rpc")

        policy = replace(
            retry_policy or RetryPolicy(max_attempts=5), retry_on=TRANSIENT_ERRORS
        )
        self.retry = Retry(name="rpc_query", policy=policy, reporter=self.reporter)

    async def _query(self, method: str, call: Callable[[], Awaitable[Any]]) -> Any:
        """Run a read-only RPC call with retry, mapping failures to RPCException."""
        try:
            return await self.retry.execute_async(call)
        except RetryError as e:
            raise RPCException(
                f"RPC {method} failed: {e.last_exception}",
                details={"method": method, "attempts": e.attempts},
            ) from e

    async def get_latest_anchor(
        self, commitment: CommitmentLevel = CommitmentLevel.CONFIRMED
    ) -> LifetimeAnchor:
        """Fetch latest blockhash and stamp it with the local clock."""
        response = await self._query(
            "getLatestBlockhash",
            lambda: self.client.get_latest_blockhash(Commitment(commitment.value)),
        )
        anchor = LifetimeAnchor(
            blockhash=response.value.blockhash,
            last_valid_block_height=response.value.last_valid_block_height,
            fetched_at=self.clock(),
            validity_window=self.anchor_validity_seconds,
        )
        self.reporter.debug(f"Fetched anchor {anchor}", context="SolanaRpcTransport")
        return anchor

    async def send_transaction(self, raw: bytes) -> Signature:
        """Send raw transaction bytes once."""
        opts = TxOpts(
            skip_confirmation=True, preflight_commitment=Commitment("confirmed")
        )
        try:
            response = await self.client.send_raw_transaction(raw, opts=opts)
        except SolanaRPCError as e:
            if _is_blockhash_not_found(e):
                raise ExpiredLifetimeError(
                    "Blockhash not found", details={"error": str(e)}
                ) from e
            raise SubmissionRejectedError(
                f"Transaction rejected: {e}", details={"error": str(e)}
            ) from e
        except SolanaRpcException as e:
            raise SubmissionRejectedError(
                f"Transaction send failed: {e}", details={"error": str(e)}
            ) from e
        return response.value

    async def get_signature_status(
        self, signature: Signature
    ) -> Optional[SignatureStatus]:
        """Get status of one signature, None if the cluster has not seen it."""
        response = await self._query(
            "getSignatureStatuses",
            lambda: self.client.get_signature_statuses([signature]),
        )
        statuses = response.value
        if not statuses or statuses[0] is None:
            return None

        status = statuses[0]
        return SignatureStatus(
            slot=status.slot,
            confirmation_status=_to_commitment_level(status.confirmation_status),
            err=None if status.err is None else str(status.err),
        )

    async def get_block_height(
        self, commitment: CommitmentLevel = CommitmentLevel.CONFIRMED
    ) -> int:
        response = await self._query(
            "getBlockHeight",
            lambda: self.client.get_block_height(Commitment(commitment.value)),
        )
        return response.value

    async def account_exists(self, address: Pubkey) -> bool:
        response = await self._query(
            "getAccountInfo",
            lambda: self.client.get_account_info(address),
        )
        return response.value is not None

    async def request_airdrop(self, recipient: Pubkey, lamports: int) -> Signature:
        try:
            response = await self.client.request_airdrop(recipient, lamports)
        except (SolanaRPCError, SolanaRpcException) as e:
            raise SubmissionRejectedError(
                f"Airdrop refused: {e}",
                details={"recipient": str(recipient), "lamports": lamports},
            ) from e
        return response.value

    async def get_balance(self, address: Pubkey) -> int:
        response = await self._query(
            "getBalance",
            lambda: self.client.get_balance(address),
        )
        return response.value

    async def close(self) -> None:
        await self.client.close()
