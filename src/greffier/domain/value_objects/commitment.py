"""
Commitment level value object.
"""

from enum import Enum


class CommitmentLevel(str, Enum):
    """Durability threshold at which a transaction counts as confirmed."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @property
    def rank(self) -> int:
        """Ordering: processed < confirmed < finalized."""
        return _RANKS[self]

    def is_reached_by(self, observed: "CommitmentLevel") -> bool:
        """True if an observed status satisfies this commitment."""
        return observed.rank >= self.rank

    @classmethod
    def parse(cls, value: "str | CommitmentLevel") -> "CommitmentLevel":
        """Accept enum members or case-insensitive names."""
        if isinstance(value, CommitmentLevel):
            return value
        return cls(str(value).lower())


_RANKS = {
    CommitmentLevel.PROCESSED: 0,
    CommitmentLevel.CONFIRMED: 1,
    CommitmentLevel.FINALIZED: 2,
}
