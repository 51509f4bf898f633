"""
Unit tests for validation and explorer helpers.

Usage:
    pytest tests/unit/utils/test_validation.py
"""

import pytest

from greffier.utils.explorer import explorer_url
from greffier.utils.validation import validate_github_handle, validate_solana_address


class TestValidateSolanaAddress:
    """Unit tests for validate_solana_address."""

    def test_valid_addresses(self):
        """Test valid Solana addresses pass."""
        assert validate_solana_address("11111111111111111111111111111111")
        assert validate_solana_address(
            "TRBZyQHB3m68FGeVsqTK39Wm4xejadjVhP5MAZaKWDM"
        )

    @pytest.mark.parametrize(
        "address",
        ["", "short", "0" * 44, "O" * 40, "1" * 45, None],
    )
    def test_invalid_addresses(self, address):
        """Test malformed addresses fail."""
        assert not validate_solana_address(address)


class TestValidateGithubHandle:
    """Unit tests for validate_github_handle."""

    @pytest.mark.parametrize("handle", ["octocat", "a", "my-handle", "A1-b2"])
    def test_valid_handles(self, handle):
        """Test valid GitHub handles pass."""
        assert validate_github_handle(handle)

    @pytest.mark.parametrize(
        "handle", ["", "-lead", "trail-", "dou--ble", "with space", "x" * 40]
    )
    def test_invalid_handles(self, handle):
        """Test malformed GitHub handles fail."""
        assert not validate_github_handle(handle)


class TestExplorerUrl:
    """Unit tests for explorer_url."""

    def test_devnet_has_cluster_param(self):
        """Test devnet links carry the cluster parameter."""
        assert explorer_url("5sig", "devnet") == (
            "https://explorer.solana.com/tx/5sig?cluster=devnet"
        )

    def test_mainnet_has_no_cluster_param(self):
        """Test mainnet links have no cluster parameter."""
        assert explorer_url("5sig", "mainnet-beta") == (
            "https://explorer.solana.com/tx/5sig"
        )
