"""
Enrollment use case.

Two dependent transactions against the enrollment program:
1. initialize - create the per-user record at PDA [user_seed, user]
2. submit     - mint a fresh asset into the collection, co-signed by the
                user and the new asset identity, referencing the record

Step 2 only runs after Step 1 is CONFIRMED. Both derived addresses are
re-derived locally and compared with what the caller supplied.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from greffier.domain.entities import ConfirmationResult, ConfirmationStatus
from greffier.domain.exceptions import (
    AddressMismatchError,
    ExpiredLifetimeError,
    PrematureStepError,
)
from greffier.domain.services import IRpcTransport, ISigner
from greffier.domain.value_objects import (
    CommitmentLevel,
    DerivedAddress,
    LifetimeAnchor,
)
from greffier.infrastructure.blockchain.address_deriver import AddressDeriver
from greffier.infrastructure.blockchain.prereq_program import PrereqProgram
from greffier.infrastructure.blockchain.signer_set import SignerSet
from greffier.infrastructure.blockchain.submission_pipeline import (
    SubmissionPipeline,
)
from greffier.infrastructure.blockchain.transaction_builder import (
    TransactionBuilder,
)
from greffier.reporter import SystemReporter
from greffier.utils.explorer import explorer_url
from greffier.utils.validation import validate_github_handle


@dataclass(frozen=True)
class EnrollmentAddresses:
    """Derived addresses used by both enrollment steps."""

    user_account: DerivedAddress
    collection_authority: DerivedAddress


@dataclass(frozen=True)
class InitializeOutcome:
    """Step 1 result plus what Step 2 needs from it."""

    result: ConfirmationResult
    anchor: LifetimeAnchor
    user: Pubkey
    user_account: Pubkey


@dataclass(frozen=True)
class SubmitOutcome:
    """Step 2 result and the asset identity minted by it."""

    result: ConfirmationResult
    mint: Pubkey


class EnrollmentWorkflow:
    """
    Initialize-then-submit enrollment against the prereq program.

    Business rules:
    - Step 2 never touches the network unless Step 1 is CONFIRMED
    - Caller-supplied PDAs must match local derivation
    - Step 1's anchor is reused for Step 2 only while still valid
    - Each run owns its signers, addresses and transactions
    """

    def __init__(
        self,
        transport: IRpcTransport,
        pipeline: SubmissionPipeline,
        program: PrereqProgram,
        collection: Pubkey,
        deriver: Optional[AddressDeriver] = None,
        builder: Optional[TransactionBuilder] = None,
        signer_set: Optional[SignerSet] = None,
        user_seed: str = "prereqs",
        collection_seed: str = "collection",
        commitment: Union[str, CommitmentLevel] = CommitmentLevel.CONFIRMED,
        refresh_stale_anchor: bool = True,
        verify_record_before_submit: bool = True,
        mint_factory: Callable[[], ISigner] = Keypair,
        clock: Callable[[], float] = time.monotonic,
        network: str = "devnet",
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize enrollment workflow.

        Args:
            transport: RPC transport (anchors, record lookup)
            pipeline: Submission pipeline
            program: Instruction encoder for the enrollment program
            collection: Default collection identity
            deriver: Address deriver
            builder: Transaction builder
            signer_set: Signer set
            user_seed: Seed prefix of the per-user record PDA
            collection_seed: Seed prefix of the collection authority PDA
            commitment: Commitment level both steps wait for
            refresh_stale_anchor: Fetch a new anchor for Step 2 when stale
            verify_record_before_submit: Check the record exists before Step 2
            mint_factory: Creates the one-time asset signer for Step 2
            clock: Monotonic clock for anchor validity
            network: Cluster name for explorer links
            reporter: Optional reporter for logging
        """
        self.transport = transport
        self.pipeline = pipeline
        self.program = program
        self.collection = collection
        self.reporter = reporter or SystemReporter(name="greffier.enrollment")
        self.deriver = deriver or AddressDeriver()
        self.builder = builder or TransactionBuilder(reporter=self.reporter)
        self.signer_set = signer_set or SignerSet(reporter=self.reporter)
        self.user_seed = user_seed
        self.collection_seed = collection_seed
        self.commitment = CommitmentLevel.parse(commitment)
        self.refresh_stale_anchor = refresh_stale_anchor
        self.verify_record_before_submit = verify_record_before_submit
        self.mint_factory = mint_factory
        self.clock = clock
        self.network = network

    # ================================================================
    # Address derivation
    # ================================================================

    def derive_user_account(self, user: Pubkey) -> DerivedAddress:
        """Per-user record PDA: [user_seed, user]."""
        return self.deriver.derive(self.program.program_id, [self.user_seed, user])

    def derive_collection_authority(
        self, collection: Optional[Pubkey] = None
    ) -> DerivedAddress:
        """Collection authority PDA: [collection_seed, collection]."""
        return self.deriver.derive(
            self.program.program_id,
            [self.collection_seed, collection or self.collection],
        )

    async def derive_addresses(
        self, user: Pubkey, collection: Optional[Pubkey] = None
    ) -> EnrollmentAddresses:
        """Derive both PDAs concurrently; they are independent."""
        user_account, authority = await asyncio.gather(
            asyncio.to_thread(self.derive_user_account, user),
            asyncio.to_thread(self.derive_collection_authority, collection),
        )
        return EnrollmentAddresses(
            user_account=user_account, collection_authority=authority
        )

    def _check_user_account(self, user: Pubkey, supplied: Pubkey) -> None:
        expected = self.derive_user_account(user).address
        if supplied != expected:
            raise AddressMismatchError("user record", supplied, expected)

    def _check_collection_authority(
        self, collection: Pubkey, supplied: Pubkey
    ) -> None:
        expected = self.derive_collection_authority(collection).address
        if supplied != expected:
            raise AddressMismatchError("collection authority", supplied, expected)

    # ================================================================
    # Steps
    # ================================================================

    async def initialize(
        self,
        main_signer: ISigner,
        user_account: Pubkey,
        github: str,
        timeout: Optional[float] = None,
    ) -> InitializeOutcome:
        """
        Step 1: create the per-user record. Payer-signed only.

        Raises:
            ValueError: If github is not a valid handle
            AddressMismatchError: If user_account is not the user's record PDA
            SubmissionRejectedError: If the network refuses the transaction
        """
        if not validate_github_handle(github):
            raise ValueError(f"Invalid GitHub handle: {github!r}")

        user = main_signer.pubkey()
        self._check_user_account(user, user_account)

        anchor = await self.transport.get_latest_anchor(self.commitment)
        instruction = self.program.initialize(user, user_account, github)
        skeleton = self.builder.build([instruction], user, anchor)
        signed = self.signer_set.attach(skeleton, [main_signer])

        self.reporter.info(
            f"initialize: record {user_account} for {user}",
            context="Enrollment",
        )
        result = await self.pipeline.submit(signed, self.commitment, timeout=timeout)
        self._log_result("initialize", result)

        return InitializeOutcome(
            result=result, anchor=anchor, user=user, user_account=user_account
        )

    async def submit(
        self,
        main_signer: ISigner,
        initialized: InitializeOutcome,
        collection: Pubkey,
        collection_authority: Pubkey,
        timeout: Optional[float] = None,
    ) -> SubmitOutcome:
        """
        Step 2: mint a fresh asset, co-signed by user and asset identity.

        Raises:
            PrematureStepError: If Step 1 is not CONFIRMED or the record is missing
            AddressMismatchError: If collection_authority is not the collection PDA
            ExpiredLifetimeError: If Step 1's anchor is stale and refresh is off
            SubmissionRejectedError: If the network refuses the transaction
        """
        if initialized.result.status != ConfirmationStatus.CONFIRMED:
            raise PrematureStepError(
                f"Step 1 ended {initialized.result.status.value}; "
                f"submit requires a confirmed initialize",
                details={"initialize_signature": str(initialized.result.signature)},
            )

        user = main_signer.pubkey()
        if user != initialized.user:
            raise PrematureStepError(
                "Step 1 was confirmed for a different wallet",
                details={"expected": str(initialized.user), "got": str(user)},
            )
        self._check_collection_authority(collection, collection_authority)

        if self.verify_record_before_submit:
            if not await self.transport.account_exists(initialized.user_account):
                raise PrematureStepError(
                    f"Record {initialized.user_account} not found on chain",
                    details={"user_account": str(initialized.user_account)},
                )

        anchor = await self._anchor_for_submit(initialized.anchor)
        mint = self.mint_factory()
        instruction = self.program.submit(
            user=user,
            account=initialized.user_account,
            mint=mint.pubkey(),
            collection=collection,
            authority=collection_authority,
        )
        skeleton = self.builder.build([instruction], user, anchor)
        signed = self.signer_set.attach(skeleton, [main_signer, mint])

        self.reporter.info(
            f"submit: asset {mint.pubkey()} into collection {collection}",
            context="Enrollment",
        )
        result = await self.pipeline.submit(signed, self.commitment, timeout=timeout)
        self._log_result("submit", result)

        return SubmitOutcome(result=result, mint=mint.pubkey())

    async def enroll(
        self,
        main_signer: ISigner,
        user_account: Pubkey,
        collection: Pubkey,
        collection_authority: Pubkey,
        github: str,
        timeout: Optional[float] = None,
    ) -> Tuple[ConfirmationResult, Optional[ConfirmationResult]]:
        """
        Run both steps in order.

        Addresses are checked before any network call. If Step 1 does not
        confirm, Step 2 is skipped and its slot in the result is None.

        Returns:
            (initialize result, submit result or None)
        """
        self._check_user_account(main_signer.pubkey(), user_account)
        self._check_collection_authority(collection, collection_authority)

        initialized = await self.initialize(
            main_signer, user_account, github, timeout=timeout
        )
        if not initialized.result.is_confirmed:
            self.reporter.warning(
                f"initialize ended {initialized.result.status.value}; "
                f"skipping submit",
                context="Enrollment",
            )
            return initialized.result, None

        submitted = await self.submit(
            main_signer,
            initialized,
            collection,
            collection_authority,
            timeout=timeout,
        )
        return initialized.result, submitted.result

    async def enroll_user(
        self, main_signer: ISigner, github: str, timeout: Optional[float] = None
    ) -> Tuple[ConfirmationResult, Optional[ConfirmationResult]]:
        """Derive both addresses for the configured collection and enroll."""
        addresses = await self.derive_addresses(main_signer.pubkey())
        return await self.enroll(
            main_signer,
            addresses.user_account.address,
            self.collection,
            addresses.collection_authority.address,
            github,
            timeout=timeout,
        )

    # ================================================================
    # Helpers
    # ================================================================

    async def _anchor_for_submit(self, previous: LifetimeAnchor) -> LifetimeAnchor:
        """Reuse Step 1's anchor while valid, otherwise fetch a new one."""
        if previous.is_valid(self.clock()):
            self.reporter.debug(
                f"Reusing anchor {previous.blockhash}", context="Enrollment"
            )
            return previous

        if not self.refresh_stale_anchor:
            raise ExpiredLifetimeError(
                f"Anchor {previous.blockhash} expired before submit",
                details={"expires_at": previous.expires_at},
            )

        self.reporter.info(
            "Step 1 anchor is stale, fetching a fresh one", context="Enrollment"
        )
        return await self.transport.get_latest_anchor(self.commitment)

    def _log_result(self, step: str, result: ConfirmationResult) -> None:
        link = explorer_url(result.signature, self.network)
        if result.is_confirmed:
            self.reporter.info(f"{step} confirmed: {link}", context="Enrollment")
        else:
            self.reporter.warning(
                f"{step} {result.status.value}: {link}", context="Enrollment"
            )
