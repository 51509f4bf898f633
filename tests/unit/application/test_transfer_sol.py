"""
Unit tests for TransferSol use case.

Usage:
    pytest tests/unit/application/test_transfer_sol.py
"""

import pytest
from solders.keypair import Keypair

from greffier.application.use_cases.transfer_sol import TransferSol
from greffier.domain.entities import ConfirmationStatus
from greffier.domain.exceptions import (
    ExpiredLifetimeError,
    SubmissionRejectedError,
)


@pytest.fixture
def transfer_sol(transport, pipeline, builder, signer_set, reporter) -> TransferSol:
    return TransferSol(
        transport=transport,
        pipeline=pipeline,
        builder=builder,
        signer_set=signer_set,
        reporter=reporter,
    )


class TestTransferSol:
    """Unit tests for TransferSol."""

    async def test_transfer_confirmed(self, transfer_sol, transport, payer):
        """Test a single-signer transfer confirms."""
        recipient = Keypair().pubkey()

        result = await transfer_sol.execute(payer, recipient, 5000)

        assert result.is_confirmed
        sent = transport.sent[0]
        assert sent.message.account_keys[0] == payer.pubkey()
        assert recipient in sent.message.account_keys

    async def test_non_positive_amount_rejected(self, transfer_sol, transport, payer):
        """Test zero or negative transfer amounts are refused."""
        with pytest.raises(ValueError):
            await transfer_sol.execute(payer, Keypair().pubkey(), 0)

        assert transport.calls == []

    async def test_expired_returned_without_rebuilds(
        self, transfer_sol, transport, payer
    ):
        """Test EXPIRED is returned as-is when rebuilds are off."""
        transport.default_status = None
        transport.block_height = transport.last_valid_block_height + 1

        result = await transfer_sol.execute(payer, Keypair().pubkey(), 5000)

        assert result.status == ConfirmationStatus.EXPIRED
        assert transport.calls.count("send_transaction") == 1

    async def test_expired_rebuilt_with_fresh_anchor(
        self, transfer_sol, transport, payer
    ):
        """Test an expired transfer is rebuilt with a new anchor."""
        transfer_sol.max_rebuilds = 1
        transport.send_errors.append(ExpiredLifetimeError("Blockhash not found"))

        result = await transfer_sol.execute(payer, Keypair().pubkey(), 5000)

        assert result.is_confirmed
        assert transport.calls.count("get_latest_anchor") == 2
        assert transport.sent[0].message.recent_blockhash == (
            transport.anchors[1].blockhash
        )

    async def test_rejected_is_not_retried(self, transfer_sol, transport, payer):
        """Test a rejected transfer is sent only once."""
        transfer_sol.max_rebuilds = 3
        transport.send_errors.append(SubmissionRejectedError("insufficient funds"))

        with pytest.raises(SubmissionRejectedError):
            await transfer_sol.execute(payer, Keypair().pubkey(), 5000)

        assert transport.calls.count("send_transaction") == 1
