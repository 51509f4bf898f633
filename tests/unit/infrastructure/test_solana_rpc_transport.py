"""
Unit tests for SolanaRpcTransport.

The solana-py AsyncClient is replaced with an AsyncMock; tests cover
response mapping, error translation and retry scope.

Usage:
    pytest tests/unit/infrastructure/test_solana_rpc_transport.py
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException as SolanaRPCError
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from greffier.domain.exceptions import (
    ExpiredLifetimeError,
    RPCException,
    SubmissionRejectedError,
)
from greffier.domain.value_objects import CommitmentLevel
from greffier.infrastructure.blockchain import SolanaRpcTransport
from greffier.resilience import RetryPolicy


def _response(value):
    return SimpleNamespace(value=value)


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def rpc(client, clock, reporter) -> SolanaRpcTransport:
    return SolanaRpcTransport(
        rpc_url="http://localhost:8899",
        anchor_validity_seconds=30.0,
        retry_policy=RetryPolicy(max_attempts=3, initial_delay=0.0, jitter=False),
        clock=clock,
        client=client,
        reporter=reporter,
    )


class TestSolanaRpcTransport:
    """Unit tests for SolanaRpcTransport."""

    # ================================================================
    # Anchors
    # ================================================================

    async def test_latest_anchor_stamped_with_clock(self, rpc, client, clock):
        """Test anchors carry the fetch time and window."""
        blockhash = Hash.new_unique()
        client.get_latest_blockhash.return_value = _response(
            SimpleNamespace(blockhash=blockhash, last_valid_block_height=321)
        )

        anchor = await rpc.get_latest_anchor(CommitmentLevel.FINALIZED)

        assert anchor.blockhash == blockhash
        assert anchor.last_valid_block_height == 321
        assert anchor.fetched_at == clock()
        assert anchor.validity_window == 30.0

    # ================================================================
    # Sends
    # ================================================================

    async def test_send_returns_signature(self, rpc, client):
        """Test send returns the transaction signature."""
        signature = Signature.new_unique()
        client.send_raw_transaction.return_value = _response(signature)

        assert await rpc.send_transaction(b"raw") == signature

    async def test_blockhash_not_found_maps_to_expired(self, rpc, client):
        """Test "Blockhash not found" maps to ExpiredLifetimeError."""
        client.send_raw_transaction.side_effect = SolanaRPCError(
            "Transaction simulation failed: Blockhash not found"
        )

        with pytest.raises(ExpiredLifetimeError):
            await rpc.send_transaction(b"raw")

    async def test_other_send_errors_are_rejections(self, rpc, client):
        """Test other send failures map to SubmissionRejectedError."""
        client.send_raw_transaction.side_effect = SolanaRPCError(
            "Attempt to debit an account but found no record of a prior credit."
        )

        with pytest.raises(SubmissionRejectedError):
            await rpc.send_transaction(b"raw")

    async def test_send_is_never_retried(self, rpc, client):
        """Test a failing send is attempted once."""
        client.send_raw_transaction.side_effect = SolanaRpcException(
            TimeoutError("read timeout"), "send_raw_transaction"
        )

        with pytest.raises(SubmissionRejectedError):
            await rpc.send_transaction(b"raw")

        assert client.send_raw_transaction.await_count == 1

    # ================================================================
    # Status
    # ================================================================

    async def test_unknown_signature_is_none(self, rpc, client):
        """Test an unseen signature has no status."""
        client.get_signature_statuses.return_value = _response([None])

        assert await rpc.get_signature_status(Signature.new_unique()) is None

    async def test_status_mapping(self, rpc, client):
        """Test RPC status fields map to SignatureStatus."""
        client.get_signature_statuses.return_value = _response(
            [
                SimpleNamespace(
                    slot=77,
                    confirmation_status=TransactionConfirmationStatus.Finalized,
                    err=None,
                )
            ]
        )

        status = await rpc.get_signature_status(Signature.new_unique())

        assert status.slot == 77
        assert status.confirmation_status == CommitmentLevel.FINALIZED
        assert not status.failed

    async def test_status_error_marks_failed(self, rpc, client):
        """Test a status with an error is marked failed."""
        client.get_signature_statuses.return_value = _response(
            [
                SimpleNamespace(
                    slot=78,
                    confirmation_status=TransactionConfirmationStatus.Processed,
                    err="InstructionError",
                )
            ]
        )

        status = await rpc.get_signature_status(Signature.new_unique())

        assert status.failed
        assert status.confirmation_status == CommitmentLevel.PROCESSED

    # ================================================================
    # Retry scope
    # ================================================================

    async def test_queries_retry_transient_errors(self, rpc, client):
        """Test read queries retry transient errors."""
        client.get_block_height.side_effect = [
            OSError("connection reset"),
            _response(1234),
        ]

        assert await rpc.get_block_height() == 1234
        assert client.get_block_height.await_count == 2

    async def test_exhausted_retries_raise_rpc_exception(self, rpc, client):
        """Test exhausted retries raise RPCException."""
        client.get_balance.side_effect = OSError("connection reset")

        with pytest.raises(RPCException) as exc_info:
            await rpc.get_balance(Keypair().pubkey())

        assert exc_info.value.details["attempts"] == 3
        assert client.get_balance.await_count == 3

    async def test_account_exists(self, rpc, client):
        """Test account lookup reports presence."""
        client.get_account_info.return_value = _response(None)

        assert not await rpc.account_exists(Keypair().pubkey())

        client.get_account_info.return_value = _response(object())

        assert await rpc.account_exists(Keypair().pubkey())

    async def test_close_closes_client(self, rpc, client):
        """Test close closes the RPC client."""
        await rpc.close()

        client.close.assert_awaited_once()
