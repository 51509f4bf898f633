"""
Signer interface.

Anything that can produce signatures for one identity. solders Keypair
satisfies it; hardware or remote signers can too.
"""

from typing import Protocol, runtime_checkable

from solders.pubkey import Pubkey
from solders.signature import Signature


@runtime_checkable
class ISigner(Protocol):
    """Signing capability bound to a single public identity."""

    def pubkey(self) -> Pubkey:
        """Return the identity this signer signs for."""

    def sign_message(self, message: bytes) -> Signature:
        """Sign arbitrary bytes on behalf of pubkey()."""
