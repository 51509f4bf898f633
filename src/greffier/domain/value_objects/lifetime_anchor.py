"""
LifetimeAnchor value object - recent blockhash with a captured fetch time.
"""

from dataclasses import dataclass

from solders.hash import Hash


@dataclass(frozen=True)
class LifetimeAnchor:
    """
    Recent ledger checkpoint binding a transaction's validity window.

    Business rules:
    - Locally valid for validity_window seconds after fetched_at
    - On chain, valid until block height passes last_valid_block_height
    - Immutable once fetched; expiry is answered by a pure predicate
    """

    blockhash: Hash
    last_valid_block_height: int
    fetched_at: float
    validity_window: float = 60.0

    def __post_init__(self):
        """Validate anchor data on creation."""
        if self.validity_window <= 0:
            raise ValueError("Validity window must be positive")
        if self.last_valid_block_height < 0:
            raise ValueError("Last valid block height cannot be negative")

    @property
    def expires_at(self) -> float:
        """Clock reading after which the anchor is stale."""
        return self.fetched_at + self.validity_window

    def is_valid(self, now: float) -> bool:
        """True while now is inside the local validity window."""
        return self.fetched_at <= now < self.expires_at

    def is_expired_at_height(self, block_height: int) -> bool:
        """True once the chain has moved past the anchor's last valid block."""
        return block_height > self.last_valid_block_height

    def __str__(self) -> str:
        return f"{self.blockhash} (valid through block {self.last_valid_block_height})"
