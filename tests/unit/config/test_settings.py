"""
Unit tests for Greffier configuration.

Tests config loading, validation, and environment variable overrides.

Usage:
    pytest tests/unit/config/test_settings.py
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from greffier.config import GreffierConfig, get_settings, load_config, reset_settings


class TestGreffierConfig:
    """Unit tests for Greffier configuration system."""

    # ================================================================
    # Defaults and validation
    # ================================================================

    def test_default_config(self):
        """Test default configuration values."""
        config = GreffierConfig()

        assert config.solana_network == "devnet"
        assert config.commitment == "confirmed"
        assert config.program.user_seed == "prereqs"
        assert config.program.collection_seed == "collection"
        assert config.program.submit_instruction == "submit_ts"
        assert config.transactions.max_size == 1232
        assert config.transactions.refresh_stale_anchor is True

    def test_values_normalized_to_lowercase(self):
        """Test enum-like settings are lowercased."""
        config = GreffierConfig(log_level="DEBUG", commitment="Finalized")

        assert config.log_level == "debug"
        assert config.commitment == "finalized"

    def test_invalid_log_level(self):
        """Test unknown log level is rejected."""
        with pytest.raises(ValidationError):
            GreffierConfig(log_level="verbose")

    def test_invalid_network(self):
        """Test unknown network is rejected."""
        with pytest.raises(ValidationError):
            GreffierConfig(solana_network="localnet")

    def test_invalid_commitment(self):
        """Test unknown commitment is rejected."""
        with pytest.raises(ValidationError):
            GreffierConfig(commitment="max")

    def test_invalid_program_address(self):
        """Test non-base58 program address is rejected."""
        with pytest.raises(ValidationError):
            GreffierConfig(program={"program_id": "not-an-address"})

    def test_transaction_limits_bounded(self):
        """Test transaction limits outside their range are rejected."""
        with pytest.raises(ValidationError):
            GreffierConfig(transactions={"max_size": 10})
        with pytest.raises(ValidationError):
            GreffierConfig(transactions={"max_rebuilds": -1})

    def test_wallet_path_expanded(self):
        """Test home directory is expanded in wallet_path."""
        config = GreffierConfig(wallet_path="~/wallet.json")

        assert config.wallet_path == os.path.expanduser("~/wallet.json")

    def test_retry_config_lookup(self):
        """Test retry profiles are looked up by operation name."""
        config = GreffierConfig()

        assert config.get_retry_config("rpc_query").max_attempts == 5
        assert config.get_retry_config("unknown").max_attempts == 3

    # ================================================================
    # YAML loading
    # ================================================================

    def test_load_test_yaml(self):
        """Test test.yaml is merged over default.yaml."""
        config = load_config("test.yaml")

        assert config.log_level == "debug"
        assert config.transactions.poll_interval == 0.0
        assert config.transactions.confirmation_timeout == 10.0
        # Untouched keys in the same section come from default.yaml
        assert config.transactions.max_size == 1232

    def test_missing_yaml_falls_back_to_default(self):
        """Test a missing environment file falls back to defaults."""
        config = load_config("does-not-exist.yaml")

        assert config.program.program_id == (
            "TRBZyQHB3m68FGeVsqTK39Wm4xejadjVhP5MAZaKWDM"
        )

    def test_env_overrides_yaml(self):
        """Test GREFFIER_ variables win over YAML."""
        with patch.dict(
            os.environ, {"GREFFIER_SOLANA_RPC_URL": "http://localhost:8899"}
        ):
            config = load_config("test.yaml")

        assert config.solana_rpc_url == "http://localhost:8899"

    def test_nested_env_overrides_yaml(self):
        """Test nested GREFFIER_ variables win over a YAML section."""
        with patch.dict(os.environ, {"GREFFIER_TRANSACTIONS__POLL_INTERVAL": "2.5"}):
            config = load_config("test.yaml")

        assert config.transactions.poll_interval == 2.5
        assert config.transactions.confirmation_timeout == 10.0

    def test_get_settings_is_cached(self):
        """Test get_settings returns the same instance."""
        reset_settings()
        try:
            assert get_settings() is get_settings()
        finally:
            reset_settings()
