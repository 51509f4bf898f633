"""
Test fixtures and configuration.
"""

import pytest
from solders.hash import Hash
from solders.keypair import Keypair

from greffier.domain.value_objects import LifetimeAnchor
from greffier.infrastructure.blockchain import (
    PrereqProgram,
    SignerSet,
    SubmissionPipeline,
    TransactionBuilder,
)
from greffier.reporter import SystemReporter
from tests.helpers.addresses import (
    MPL_CORE_PROGRAM_ID,
    PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
)
from tests.helpers.fake_transport import FakeClock, FakeTransport


@pytest.fixture
def reporter() -> SystemReporter:
    """Quiet reporter (errors only)."""
    return SystemReporter(name="greffier.test", verbose=0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport(clock: FakeClock) -> FakeTransport:
    return FakeTransport(clock=clock)


@pytest.fixture
def payer() -> Keypair:
    return Keypair()


@pytest.fixture
def anchor(clock: FakeClock) -> LifetimeAnchor:
    """Anchor fetched 'now' with a 60s window."""
    return LifetimeAnchor(
        blockhash=Hash.new_unique(),
        last_valid_block_height=250,
        fetched_at=clock(),
    )


@pytest.fixture
def builder(reporter: SystemReporter) -> TransactionBuilder:
    return TransactionBuilder(reporter=reporter)


@pytest.fixture
def signer_set(reporter: SystemReporter) -> SignerSet:
    return SignerSet(reporter=reporter)


@pytest.fixture
def pipeline(
    transport: FakeTransport, clock: FakeClock, reporter: SystemReporter
) -> SubmissionPipeline:
    """Pipeline polling without delay against the fake transport."""
    return SubmissionPipeline(
        transport=transport,
        poll_interval=0.0,
        default_timeout=5.0,
        clock=clock,
        reporter=reporter,
    )


@pytest.fixture
def program() -> PrereqProgram:
    return PrereqProgram(
        program_id=PROGRAM_ID,
        system_program_id=SYSTEM_PROGRAM_ID,
        mpl_core_program_id=MPL_CORE_PROGRAM_ID,
    )
