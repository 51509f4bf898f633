"""
Greffier utilities.
"""

from greffier.utils.explorer import explorer_url
from greffier.utils.keys import base58_to_wallet, wallet_to_base58
from greffier.utils.validation import (
    validate_github_handle,
    validate_solana_address,
)

__all__ = [
    "explorer_url",
    "base58_to_wallet",
    "wallet_to_base58",
    "validate_github_handle",
    "validate_solana_address",
]
