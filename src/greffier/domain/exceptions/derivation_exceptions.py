"""
Program-derived address exceptions.
"""

from greffier.domain.exceptions.base import GreffierException


class DerivationError(GreffierException):
    """Base exception for address derivation."""


class InvalidSeedsError(DerivationError):
    """Seed sequence violates the runtime's seed limits."""


class DerivationExhaustedError(DerivationError):
    """No bump in the search range produced an off-curve address."""

    def __init__(self, program_id: str, seed_count: int):
        super().__init__(
            f"No valid bump found for program {program_id} "
            f"with {seed_count} seeds",
            details={"program_id": program_id, "seed_count": seed_count},
        )
        self.program_id = program_id
