"""Solana explorer links for log output."""

EXPLORER_BASE_URL = "https://explorer.solana.com"


def explorer_url(signature: object, network: str = "devnet") -> str:
    """
    Build explorer URL for a transaction signature.

    Examples:
        >>> explorer_url("5abc", "devnet")
        'https://explorer.solana.com/tx/5abc?cluster=devnet'
        >>> explorer_url("5abc", "mainnet-beta")
        'https://explorer.solana.com/tx/5abc'
    """
    url = f"{EXPLORER_BASE_URL}/tx/{signature}"
    if network != "mainnet-beta":
        url += f"?cluster={network}"
    return url
