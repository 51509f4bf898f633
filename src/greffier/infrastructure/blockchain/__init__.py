"""
Blockchain infrastructure.
"""

from greffier.infrastructure.blockchain.address_deriver import AddressDeriver
from greffier.infrastructure.blockchain.keypairs import load_keypair, save_keypair
from greffier.infrastructure.blockchain.prereq_program import (
    PrereqProgram,
    anchor_discriminator,
)
from greffier.infrastructure.blockchain.signer_set import SignerSet
from greffier.infrastructure.blockchain.solana_rpc_transport import (
    SolanaRpcTransport,
)
from greffier.infrastructure.blockchain.submission_pipeline import (
    PACKET_DATA_SIZE,
    SubmissionPipeline,
)
from greffier.infrastructure.blockchain.transaction_builder import (
    TransactionBuilder,
)

__all__ = [
    "AddressDeriver",
    "PrereqProgram",
    "anchor_discriminator",
    "SignerSet",
    "SolanaRpcTransport",
    "SubmissionPipeline",
    "PACKET_DATA_SIZE",
    "TransactionBuilder",
    "load_keypair",
    "save_keypair",
]
