"""
Domain value objects.
"""

from greffier.domain.value_objects.commitment import CommitmentLevel
from greffier.domain.value_objects.derived_address import DerivedAddress
from greffier.domain.value_objects.lifetime_anchor import LifetimeAnchor

__all__ = ["CommitmentLevel", "DerivedAddress", "LifetimeAnchor"]
