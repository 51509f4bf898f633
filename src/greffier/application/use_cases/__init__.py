"""
Application use cases.
"""

from greffier.application.use_cases.enroll import (
    EnrollmentAddresses,
    EnrollmentWorkflow,
    InitializeOutcome,
    SubmitOutcome,
)
from greffier.application.use_cases.request_airdrop import (
    LAMPORTS_PER_SOL,
    RequestAirdrop,
)
from greffier.application.use_cases.transfer_sol import TransferSol

__all__ = [
    "EnrollmentAddresses",
    "EnrollmentWorkflow",
    "InitializeOutcome",
    "SubmitOutcome",
    "RequestAirdrop",
    "TransferSol",
    "LAMPORTS_PER_SOL",
]
