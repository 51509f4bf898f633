"""
Program-derived address computation.

Candidate = sha256(seeds || bump || program_id || "ProgramDerivedAddress").
A candidate is accepted only if it is NOT a valid ed25519 point, so no
private key can ever sign for it.
"""

import hashlib
from typing import Sequence, Union

from solders.pubkey import Pubkey

from greffier.domain.exceptions import DerivationExhaustedError, InvalidSeedsError
from greffier.domain.value_objects import DerivedAddress

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEED_LEN = 32
MAX_SEEDS = 16

Seed = Union[bytes, str, Pubkey]


def _seed_bytes(seed: Seed) -> bytes:
    """Normalize a seed (bytes, utf-8 string or Pubkey) to bytes."""
    if isinstance(seed, Pubkey):
        return bytes(seed)
    if isinstance(seed, str):
        return seed.encode("utf-8")
    return bytes(seed)


def _is_on_curve(candidate: bytes) -> bool:
    return Pubkey.from_bytes(candidate).is_on_curve()


class AddressDeriver:
    """
    Deterministic program address derivation.

    Pure: no I/O, no state. Bumps are searched from 255 downward.
    """

    def __init__(self, max_bump: int = 255, min_bump: int = 1):
        self.max_bump = max_bump
        self.min_bump = min_bump

    def _normalize(self, seeds: Sequence[Seed]) -> list:
        """
        Validate seed limits (bump counts against MAX_SEEDS).

        Raises:
            InvalidSeedsError: If a seed is too long or there are too many
        """
        normalized = [_seed_bytes(s) for s in seeds]
        if len(normalized) >= MAX_SEEDS:
            raise InvalidSeedsError(
                f"Too many seeds: {len(normalized)} (max {MAX_SEEDS - 1})",
                details={"seed_count": len(normalized)},
            )
        for index, seed in enumerate(normalized):
            if len(seed) > MAX_SEED_LEN:
                raise InvalidSeedsError(
                    f"Seed {index} is {len(seed)} bytes (max {MAX_SEED_LEN})",
                    details={"index": index, "length": len(seed)},
                )
        return normalized

    @staticmethod
    def _candidate(seeds: Sequence[bytes], bump: int, program_id: Pubkey) -> bytes:
        hasher = hashlib.sha256()
        for seed in seeds:
            hasher.update(seed)
        hasher.update(bytes([bump]))
        hasher.update(bytes(program_id))
        hasher.update(PDA_MARKER)
        return hasher.digest()

    def derive(self, program_id: Pubkey, seeds: Sequence[Seed]) -> DerivedAddress:
        """
        Find the program address and canonical bump for seeds.

        Args:
            program_id: Owning program
            seeds: Ordered seeds; order is significant

        Returns:
            DerivedAddress (address, bump)

        Raises:
            InvalidSeedsError: If seeds exceed runtime limits
            DerivationExhaustedError: If no bump yields an off-curve address
        """
        normalized = self._normalize(seeds)

        for bump in range(self.max_bump, self.min_bump - 1, -1):
            candidate = self._candidate(normalized, bump, program_id)
            if not _is_on_curve(candidate):
                return DerivedAddress(Pubkey.from_bytes(candidate), bump)

        raise DerivationExhaustedError(str(program_id), len(normalized))

    def create(self, program_id: Pubkey, seeds: Sequence[Seed], bump: int) -> Pubkey:
        """
        Compute the address for a known bump without searching.

        Raises:
            InvalidSeedsError: If seeds are invalid or the bump lands on the curve
        """
        if not 0 <= bump <= 255:
            raise InvalidSeedsError(f"Bump out of range: {bump}")
        normalized = self._normalize(seeds)
        candidate = self._candidate(normalized, bump, program_id)
        if _is_on_curve(candidate):
            raise InvalidSeedsError(
                f"Bump {bump} yields an on-curve address",
                details={"bump": bump},
            )
        return Pubkey.from_bytes(candidate)

    def verify(
        self,
        program_id: Pubkey,
        seeds: Sequence[Seed],
        bump: int,
        expected: Pubkey,
    ) -> bool:
        """Check a known (address, bump) pair against the seeds."""
        try:
            return self.create(program_id, seeds, bump) == expected
        except InvalidSeedsError:
            return False
