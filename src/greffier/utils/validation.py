"""
Validation utility functions for Greffier.

Provides validation for Solana addresses and PDA seed components.
"""

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def validate_solana_address(address: str) -> bool:
    """
    Validate Solana address format.

    Solana addresses are base58-encoded 32-byte public keys.
    Valid addresses are typically 32-44 characters.

    Args:
        address: Solana address string

    Returns:
        True if valid format, False otherwise

    Examples:
        >>> validate_solana_address("11111111111111111111111111111111")
        True
        >>> validate_solana_address("invalid")
        False
    """
    if not address or not isinstance(address, str):
        return False

    if len(address) < 32 or len(address) > 44:
        return False

    return all(c in BASE58_ALPHABET for c in address)


def validate_github_handle(handle: str) -> bool:
    """
    Validate a GitHub username as stored in the enrollment record.

    Args:
        handle: GitHub username

    Returns:
        True if 1-39 chars of alphanumerics or single hyphens
    """
    if not handle or not isinstance(handle, str) or len(handle) > 39:
        return False
    if handle.startswith("-") or handle.endswith("-") or "--" in handle:
        return False
    return all(c.isascii() and (c.isalnum() or c == "-") for c in handle)
