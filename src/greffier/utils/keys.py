"""
Wallet key format conversion.

Wallet files store the 64-byte secret key as a JSON array of integers;
browser wallets export the same bytes as a base58 string.
"""

from typing import List

import base58

SECRET_KEY_LENGTH = 64


def base58_to_wallet(secret: str) -> List[int]:
    """
    Convert a base58 secret key into wallet-file byte array form.

    Args:
        secret: Base58-encoded 64-byte secret key

    Returns:
        List of 64 integers (0-255)

    Raises:
        ValueError: If the string is not base58 or has the wrong length
    """
    try:
        raw = base58.b58decode(secret.strip())
    except ValueError as e:
        raise ValueError(f"Invalid base58 private key: {e}") from e

    if len(raw) != SECRET_KEY_LENGTH:
        raise ValueError(
            f"Secret key must be {SECRET_KEY_LENGTH} bytes, got {len(raw)}"
        )
    return list(raw)


def wallet_to_base58(wallet: List[int]) -> str:
    """
    Convert a wallet-file byte array into a base58 secret key.

    Args:
        wallet: List of 64 integers (0-255)

    Returns:
        Base58-encoded secret key

    Raises:
        ValueError: If the array is malformed
    """
    if len(wallet) != SECRET_KEY_LENGTH:
        raise ValueError(
            f"Wallet must contain {SECRET_KEY_LENGTH} bytes, got {len(wallet)}"
        )
    if not all(isinstance(b, int) and 0 <= b <= 255 for b in wallet):
        raise ValueError("Invalid wallet byte array format")

    return base58.b58encode(bytes(wallet)).decode("ascii")
