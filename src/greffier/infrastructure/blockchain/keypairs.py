"""
Keypair loading from wallet files.
"""

import json
from pathlib import Path

from solders.keypair import Keypair


def load_keypair(keypair_path: str) -> Keypair:
    """
    Load Solana keypair from JSON file.

    Args:
        keypair_path: Path to keypair JSON file (array of 64 integers)

    Returns:
        Solana Keypair object

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a 64-byte array

    Examples:
        >>> keypair = load_keypair("~/.config/solana/dev-wallet.json")
        >>> print(keypair.pubkey())
    """
    path = Path(keypair_path).expanduser()

    if not path.exists():
        raise FileNotFoundError(f"Keypair not found: {keypair_path}")

    with open(path, "r") as f:
        secret_key = json.load(f)

    if not isinstance(secret_key, list) or len(secret_key) != 64:
        raise ValueError(f"Keypair file must hold 64 bytes: {keypair_path}")

    return Keypair.from_bytes(bytes(secret_key))


def save_keypair(keypair: Keypair, keypair_path: str) -> Path:
    """
    Write keypair as a JSON byte array (same format load_keypair reads).

    Returns:
        Resolved path written
    """
    path = Path(keypair_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(list(bytes(keypair)), f)
    return path
