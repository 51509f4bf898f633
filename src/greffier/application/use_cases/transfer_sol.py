"""
Transfer SOL use case.

Single-instruction system transfer, built and submitted through the same
builder, signer set and pipeline as enrollment.
"""

import time
from typing import Callable, Optional, Union

from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer

from greffier.domain.entities import ConfirmationResult, ConfirmationStatus
from greffier.domain.services import IRpcTransport, ISigner
from greffier.domain.value_objects import CommitmentLevel
from greffier.infrastructure.blockchain.signer_set import SignerSet
from greffier.infrastructure.blockchain.submission_pipeline import (
    SubmissionPipeline,
)
from greffier.infrastructure.blockchain.transaction_builder import (
    TransactionBuilder,
)
from greffier.reporter import SystemReporter
from greffier.utils.explorer import explorer_url


class TransferSol:
    """
    Move lamports from a signer to a recipient.

    An EXPIRED outcome may be retried by rebuilding with a fresh anchor,
    up to max_rebuilds times. FAILED and rejected sends are never retried.
    """

    def __init__(
        self,
        transport: IRpcTransport,
        pipeline: SubmissionPipeline,
        builder: Optional[TransactionBuilder] = None,
        signer_set: Optional[SignerSet] = None,
        max_rebuilds: int = 0,
        clock: Callable[[], float] = time.monotonic,
        network: str = "devnet",
        reporter: Optional[SystemReporter] = None,
    ):
        self.transport = transport
        self.pipeline = pipeline
        self.reporter = reporter or SystemReporter(name="greffier.transfer")
        self.builder = builder or TransactionBuilder(reporter=self.reporter)
        self.signer_set = signer_set or SignerSet(reporter=self.reporter)
        self.max_rebuilds = max_rebuilds
        self.clock = clock
        self.network = network

    async def execute(
        self,
        sender: ISigner,
        recipient: Pubkey,
        lamports: int,
        commitment: Union[str, CommitmentLevel] = CommitmentLevel.CONFIRMED,
        timeout: Optional[float] = None,
    ) -> ConfirmationResult:
        """
        Execute transfer.

        Args:
            sender: Paying signer
            recipient: Destination address
            lamports: Amount in lamports
            commitment: Level to wait for
            timeout: Caller wait limit in seconds

        Returns:
            ConfirmationResult of the last attempt

        Raises:
            ValueError: If lamports is not positive
            SubmissionRejectedError: If the network refuses the transaction
            ConfirmationTimeoutError: If timeout elapses first
        """
        if lamports <= 0:
            raise ValueError("Transfer amount must be positive")

        commitment = CommitmentLevel.parse(commitment)
        payer = sender.pubkey()
        instruction = transfer(
            TransferParams(from_pubkey=payer, to_pubkey=recipient, lamports=lamports)
        )

        self.reporter.info(
            f"Transferring {lamports} lamports {payer} -> {recipient}",
            context="TransferSol",
        )

        anchor = await self.transport.get_latest_anchor(commitment)
        skeleton = self.builder.build([instruction], payer, anchor)

        attempt = 0
        while True:
            signed = self.signer_set.attach(skeleton, [sender])
            result = await self.pipeline.submit(signed, commitment, timeout=timeout)

            if result.status != ConfirmationStatus.EXPIRED or attempt >= self.max_rebuilds:
                break

            attempt += 1
            anchor = await self.transport.get_latest_anchor(commitment)
            skeleton = self.builder.rebuild(skeleton, anchor)

        self.reporter.info(
            f"Transfer {result.status.value}: "
            f"{explorer_url(result.signature, self.network)}",
            context="TransferSol",
        )
        return result
