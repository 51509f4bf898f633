"""
DerivedAddress value object - program address plus its bump.
"""

from typing import NamedTuple

from solders.pubkey import Pubkey


class DerivedAddress(NamedTuple):
    """
    Program-owned address with the bump that pushed it off the curve.

    Unpacks as (address, bump).
    """

    address: Pubkey
    bump: int

    def __str__(self) -> str:
        return str(self.address)
