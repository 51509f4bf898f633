"""
Request airdrop use case (devnet/testnet faucets).
"""

from typing import Optional, Union

from solders.pubkey import Pubkey

from greffier.domain.entities import ConfirmationResult
from greffier.domain.services import IRpcTransport
from greffier.domain.value_objects import CommitmentLevel
from greffier.infrastructure.blockchain.submission_pipeline import (
    SubmissionPipeline,
)
from greffier.reporter import SystemReporter

LAMPORTS_PER_SOL = 1_000_000_000


class RequestAirdrop:
    """Ask the cluster faucet for lamports and wait for the credit."""

    def __init__(
        self,
        transport: IRpcTransport,
        pipeline: SubmissionPipeline,
        reporter: Optional[SystemReporter] = None,
    ):
        self.transport = transport
        self.pipeline = pipeline
        self.reporter = reporter or SystemReporter(name="greffier.airdrop")

    async def execute(
        self,
        recipient: Pubkey,
        lamports: int = 2 * LAMPORTS_PER_SOL,
        commitment: Union[str, CommitmentLevel] = CommitmentLevel.CONFIRMED,
        timeout: Optional[float] = None,
    ) -> ConfirmationResult:
        """
        Request an airdrop and confirm it.

        The faucet builds and signs the transaction, so expiry is judged
        against a block height fetched just before the request.

        Raises:
            ValueError: If lamports is not positive
            SubmissionRejectedError: If the faucet refuses the request
            ConfirmationTimeoutError: If timeout elapses first
        """
        if lamports <= 0:
            raise ValueError("Airdrop amount must be positive")

        commitment = CommitmentLevel.parse(commitment)
        anchor = await self.transport.get_latest_anchor(commitment)
        signature = await self.transport.request_airdrop(recipient, lamports)

        self.reporter.info(
            f"Airdrop of {lamports / LAMPORTS_PER_SOL} SOL to {recipient}: {signature}",
            context="RequestAirdrop",
        )
        return await self.pipeline.confirm(
            signature,
            commitment=commitment,
            last_valid_block_height=anchor.last_valid_block_height,
            timeout=timeout,
        )
