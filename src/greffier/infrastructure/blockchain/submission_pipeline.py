"""
Signed transaction submission and confirmation.

State machine:
    SIGNED -> SIZE_CHECKED -> SUBMITTED -> {CONFIRMED | FAILED | EXPIRED}

Submission is fire-and-observe: one send, then status polling until the
commitment level is reached or the anchor's last valid block passes.
Nothing here resends signed bytes.
"""

import asyncio
import time
from typing import AsyncIterator, Callable, Optional, Union

from solders.signature import Signature

from greffier.domain.entities import (
    ConfirmationResult,
    ConfirmationStatus,
    SignedTransaction,
    SubmissionState,
)
from greffier.domain.exceptions import (
    ConfirmationTimeoutError,
    ExpiredLifetimeError,
    OversizeTransactionError,
    RPCException,
    SubmissionRejectedError,
    TransactionStateError,
)
from greffier.domain.services import IRpcTransport, SignatureStatus
from greffier.domain.value_objects import CommitmentLevel
from greffier.reporter import SystemReporter

PACKET_DATA_SIZE = 1232


class SubmissionPipeline:
    """Size-checks, submits and awaits confirmation of signed transactions."""

    def __init__(
        self,
        transport: IRpcTransport,
        max_size: int = PACKET_DATA_SIZE,
        poll_interval: float = 1.0,
        default_timeout: float = 90.0,
        clock: Callable[[], float] = time.monotonic,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize submission pipeline.

        Args:
            transport: RPC transport
            max_size: Maximum serialized transaction size in bytes
            poll_interval: Seconds between status polls
            default_timeout: Caller wait limit when submit() gets none
            clock: Monotonic clock used for anchor validity checks
            reporter: Optional reporter for logging

        Raises:
            ValueError: If default_timeout is not a positive number
        """
        if default_timeout is None or default_timeout <= 0:
            raise ValueError(
                f"default_timeout must be positive, got {default_timeout!r}"
            )
        self.transport = transport
        self.max_size = max_size
        self.poll_interval = poll_interval
        self.default_timeout = default_timeout
        self.clock = clock
        self.reporter = reporter or SystemReporter(name="greffier.pipeline")

    def check_size(self, signed: SignedTransaction) -> int:
        """
        Local size guard, run before any network call.

        Calling it again on a transaction already at SIZE_CHECKED only
        returns the size.

        Returns:
            Serialized size in bytes

        Raises:
            OversizeTransactionError: If size exceeds max_size
        """
        size = signed.size
        if size > self.max_size:
            self.reporter.error(
                f"Transaction {signed.signature} is {size} bytes "
                f"(max {self.max_size})",
                context="SubmissionPipeline",
            )
            raise OversizeTransactionError(size, self.max_size)
        if signed.state != SubmissionState.SIZE_CHECKED:
            signed.advance(SubmissionState.SIZE_CHECKED)
        return size

    async def submit(
        self,
        signed: SignedTransaction,
        commitment: Union[str, CommitmentLevel] = CommitmentLevel.CONFIRMED,
        timeout: Optional[float] = None,
    ) -> ConfirmationResult:
        """
        Submit a signed transaction and wait for a terminal status.

        Args:
            signed: Signed transaction (submit-once)
            commitment: Level at which the transaction counts as confirmed
            timeout: Caller wait limit in seconds covering both the send and
                the confirmation wait, independent of anchor expiry

        Returns:
            ConfirmationResult with CONFIRMED, FAILED or EXPIRED

        Raises:
            TransactionStateError: If the transaction was already sent
            OversizeTransactionError: If the transaction is too large
            SubmissionRejectedError: If the network refuses the transaction
            ConfirmationTimeoutError: If timeout elapses first
        """
        commitment = CommitmentLevel.parse(commitment)
        signature = signed.signature
        wait = self.default_timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()
        deadline = loop.time() + wait

        if signed.send_attempted:
            raise TransactionStateError(
                f"Transaction {signature} was already sent; rebuild to resubmit",
                details={"signature": str(signature), "state": signed.state.value},
            )
        size = self.check_size(signed)

        if not signed.anchor.is_valid(self.clock()):
            self.reporter.warning(
                f"Anchor {signed.anchor.blockhash} is stale; "
                f"not sending {signature}",
                context="SubmissionPipeline",
            )
            signed.advance(SubmissionState.EXPIRED)
            return ConfirmationResult(
                signature=signature,
                status=ConfirmationStatus.EXPIRED,
                error="lifetime anchor expired before submission",
            )

        signed.send_attempted = True
        try:
            sent = await asyncio.wait_for(
                self.transport.send_transaction(signed.serialize()),
                timeout=max(0.0, deadline - loop.time()),
            )
        except asyncio.TimeoutError:
            # Left at SIZE_CHECKED: the send may or may not have landed
            self.reporter.warning(
                f"Send of {signature} did not return within {wait}s; "
                f"outcome unknown",
                context="SubmissionPipeline",
            )
            raise ConfirmationTimeoutError(str(signature), wait)
        except ExpiredLifetimeError as e:
            self.reporter.warning(
                f"Network no longer recognizes blockhash for {signature}",
                context="SubmissionPipeline",
            )
            signed.advance(SubmissionState.EXPIRED)
            return ConfirmationResult(
                signature=signature,
                status=ConfirmationStatus.EXPIRED,
                error=e.message,
            )
        except SubmissionRejectedError as e:
            self.reporter.error(
                f"Submission rejected for {signature}: {e.message}",
                context="SubmissionPipeline",
            )
            signed.advance(SubmissionState.FAILED)
            raise

        signed.advance(SubmissionState.SUBMITTED)
        self.reporter.info(
            f"Submitted {sent} ({size} bytes), awaiting {commitment.value}",
            context="SubmissionPipeline",
        )

        try:
            result = await self.confirm(
                sent,
                commitment=commitment,
                last_valid_block_height=signed.anchor.last_valid_block_height,
                timeout=max(0.0, deadline - loop.time()),
            )
        except ConfirmationTimeoutError:
            raise ConfirmationTimeoutError(str(signature), wait) from None
        signed.advance(SubmissionState(result.status.value))
        return result

    async def confirm(
        self,
        signature: Signature,
        commitment: Union[str, CommitmentLevel] = CommitmentLevel.CONFIRMED,
        last_valid_block_height: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> ConfirmationResult:
        """
        Wait for a submitted signature to reach a terminal status.

        Args:
            signature: Submitted transaction signature
            commitment: Target commitment level
            last_valid_block_height: Chain-level expiry; None waits for timeout
            timeout: Caller wait limit in seconds

        Returns:
            ConfirmationResult

        Raises:
            ConfirmationTimeoutError: If timeout elapses first
        """
        commitment = CommitmentLevel.parse(commitment)
        wait = self.default_timeout if timeout is None else timeout

        try:
            result = await asyncio.wait_for(
                self._await_terminal(signature, commitment, last_valid_block_height),
                timeout=wait,
            )
        except asyncio.TimeoutError:
            self.reporter.warning(
                f"Stopped waiting for {signature} after {wait}s; outcome unknown",
                context="SubmissionPipeline",
            )
            raise ConfirmationTimeoutError(str(signature), wait)

        log = self.reporter.info if result.is_confirmed else self.reporter.warning
        log(
            f"{signature} -> {result.status.value}"
            + (f" ({result.error})" if result.error else ""),
            context="SubmissionPipeline",
        )
        return result

    async def status_updates(
        self, signature: Signature
    ) -> AsyncIterator[Optional[SignatureStatus]]:
        """
        Poll signature status forever, yielding each observation.

        RPC errors are logged and polling continues.
        """
        while True:
            try:
                yield await self.transport.get_signature_status(signature)
            except RPCException as e:
                self.reporter.warning(
                    f"Status poll failed for {signature}: {e.message}",
                    context="SubmissionPipeline",
                    verbose_level=2,
                )
            await asyncio.sleep(self.poll_interval)

    async def _await_terminal(
        self,
        signature: Signature,
        commitment: CommitmentLevel,
        last_valid_block_height: Optional[int],
    ) -> ConfirmationResult:
        """Consume status updates until a terminal outcome."""
        async for status in self.status_updates(signature):
            if status is not None:
                if status.failed:
                    return ConfirmationResult(
                        signature=signature,
                        status=ConfirmationStatus.FAILED,
                        slot=status.slot,
                        error=status.err,
                    )
                if status.confirmation_status is not None and commitment.is_reached_by(
                    status.confirmation_status
                ):
                    return ConfirmationResult(
                        signature=signature,
                        status=ConfirmationStatus.CONFIRMED,
                        slot=status.slot,
                    )
                # Seen but below target commitment: it landed, keep waiting
                continue

            if last_valid_block_height is not None and await self._past_expiry(
                last_valid_block_height, commitment
            ):
                return ConfirmationResult(
                    signature=signature,
                    status=ConfirmationStatus.EXPIRED,
                    error=f"block height exceeded {last_valid_block_height}",
                )

        raise RuntimeError("status stream ended")  # pragma: no cover

    async def _past_expiry(
        self, last_valid_block_height: int, commitment: CommitmentLevel
    ) -> bool:
        try:
            height = await self.transport.get_block_height(commitment)
        except RPCException as e:
            self.reporter.warning(
                f"Block height query failed: {e.message}",
                context="SubmissionPipeline",
                verbose_level=2,
            )
            return False
        return height > last_valid_block_height
