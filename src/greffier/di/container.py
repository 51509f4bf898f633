"""
Dependency Injection Container for Greffier.

Manages service instances and their dependencies, built lazily from
GreffierConfig.
"""

from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from greffier.application.use_cases.enroll import EnrollmentWorkflow
from greffier.application.use_cases.request_airdrop import RequestAirdrop
from greffier.application.use_cases.transfer_sol import TransferSol
from greffier.config.settings import GreffierConfig, get_settings
from greffier.domain.services import IRpcTransport
from greffier.infrastructure.blockchain.address_deriver import AddressDeriver
from greffier.infrastructure.blockchain.keypairs import load_keypair
from greffier.infrastructure.blockchain.prereq_program import PrereqProgram
from greffier.infrastructure.blockchain.signer_set import SignerSet
from greffier.infrastructure.blockchain.solana_rpc_transport import (
    SolanaRpcTransport,
)
from greffier.infrastructure.blockchain.submission_pipeline import (
    SubmissionPipeline,
)
from greffier.infrastructure.blockchain.transaction_builder import (
    TransactionBuilder,
)
from greffier.reporter import SystemReporter
from greffier.resilience import RetryPolicy


class DIContainer:
    """
    Dependency Injection Container.

    Manages singleton instances of all services. Pass a transport to run
    everything against something other than the configured RPC endpoint.
    """

    def __init__(
        self,
        config: Optional[GreffierConfig] = None,
        transport: Optional[IRpcTransport] = None,
    ):
        """Initialize container with None instances."""
        self.config = config or get_settings()

        # Infrastructure
        self._reporter: Optional[SystemReporter] = None
        self._transport: Optional[IRpcTransport] = transport
        self._main_signer: Optional[Keypair] = None

        # Blockchain services
        self._deriver: Optional[AddressDeriver] = None
        self._builder: Optional[TransactionBuilder] = None
        self._signer_set: Optional[SignerSet] = None
        self._pipeline: Optional[SubmissionPipeline] = None
        self._program: Optional[PrereqProgram] = None

        # Use cases
        self._enrollment_workflow: Optional[EnrollmentWorkflow] = None
        self._transfer_sol: Optional[TransferSol] = None
        self._request_airdrop: Optional[RequestAirdrop] = None

    async def shutdown(self) -> None:
        """Cleanup resources and close connections."""
        if self._transport:
            await self._transport.close()

    # Infrastructure Getters

    @property
    def reporter(self) -> SystemReporter:
        """Get shared reporter."""
        if self._reporter is None:
            self._reporter = SystemReporter(
                name="greffier",
                log_dir=self.config.log_dir,
                level=self.config.log_level,
            )
        return self._reporter

    @property
    def transport(self) -> IRpcTransport:
        """Get Solana RPC transport."""
        if self._transport is None:
            self._transport = SolanaRpcTransport(
                rpc_url=self.config.solana_rpc_url,
                anchor_validity_seconds=(
                    self.config.transactions.anchor_validity_seconds
                ),
                retry_policy=RetryPolicy.from_config(
                    self.config.get_retry_config("rpc_query")
                ),
                reporter=self.reporter,
            )
        return self._transport

    @property
    def main_signer(self) -> Keypair:
        """
        Get the wallet keypair loaded from config.wallet_path.

        Raises:
            ValueError: If no wallet_path is configured
            FileNotFoundError: If the wallet file does not exist
        """
        if self._main_signer is None:
            if not self.config.wallet_path:
                raise ValueError("wallet_path is not configured")
            self._main_signer = load_keypair(self.config.wallet_path)
            self.reporter.info(
                f"Loaded wallet {self._main_signer.pubkey()}", context="DIContainer"
            )
        return self._main_signer

    # Blockchain Service Getters

    @property
    def deriver(self) -> AddressDeriver:
        if self._deriver is None:
            self._deriver = AddressDeriver()
        return self._deriver

    @property
    def builder(self) -> TransactionBuilder:
        if self._builder is None:
            self._builder = TransactionBuilder(reporter=self.reporter)
        return self._builder

    @property
    def signer_set(self) -> SignerSet:
        if self._signer_set is None:
            self._signer_set = SignerSet(reporter=self.reporter)
        return self._signer_set

    @property
    def pipeline(self) -> SubmissionPipeline:
        """Get submission pipeline."""
        if self._pipeline is None:
            transactions = self.config.transactions
            self._pipeline = SubmissionPipeline(
                transport=self.transport,
                max_size=transactions.max_size,
                poll_interval=transactions.poll_interval,
                default_timeout=transactions.confirmation_timeout,
                reporter=self.reporter,
            )
        return self._pipeline

    @property
    def program(self) -> PrereqProgram:
        """Get instruction encoder for the configured program."""
        if self._program is None:
            program = self.config.program
            self._program = PrereqProgram(
                program_id=Pubkey.from_string(program.program_id),
                system_program_id=Pubkey.from_string(program.system_program_id),
                mpl_core_program_id=Pubkey.from_string(program.mpl_core_program_id),
                initialize_instruction=program.initialize_instruction,
                submit_instruction=program.submit_instruction,
            )
        return self._program

    # Use Case Getters

    @property
    def enrollment_workflow(self) -> EnrollmentWorkflow:
        """Get enrollment workflow."""
        if self._enrollment_workflow is None:
            program = self.config.program
            transactions = self.config.transactions
            self._enrollment_workflow = EnrollmentWorkflow(
                transport=self.transport,
                pipeline=self.pipeline,
                program=self.program,
                collection=Pubkey.from_string(program.collection),
                deriver=self.deriver,
                builder=self.builder,
                signer_set=self.signer_set,
                user_seed=program.user_seed,
                collection_seed=program.collection_seed,
                commitment=self.config.commitment,
                refresh_stale_anchor=transactions.refresh_stale_anchor,
                verify_record_before_submit=(
                    transactions.verify_record_before_submit
                ),
                network=self.config.solana_network,
                reporter=self.reporter,
            )
        return self._enrollment_workflow

    @property
    def transfer_sol(self) -> TransferSol:
        if self._transfer_sol is None:
            self._transfer_sol = TransferSol(
                transport=self.transport,
                pipeline=self.pipeline,
                builder=self.builder,
                signer_set=self.signer_set,
                max_rebuilds=self.config.transactions.max_rebuilds,
                network=self.config.solana_network,
                reporter=self.reporter,
            )
        return self._transfer_sol

    @property
    def request_airdrop(self) -> RequestAirdrop:
        if self._request_airdrop is None:
            self._request_airdrop = RequestAirdrop(
                transport=self.transport,
                pipeline=self.pipeline,
                reporter=self.reporter,
            )
        return self._request_airdrop


# Global container instance
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global DI container instance."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


async def shutdown_container() -> None:
    """Shutdown DI container and drop the global instance."""
    global _container
    if _container is not None:
        await _container.shutdown()
        _container = None
