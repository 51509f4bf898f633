"""
Greffier configuration with hybrid YAML + ENV support.

Program and collection addresses live here instead of in module-level
literals so workflows can be pointed at mock programs in tests.

Priority: Environment variables > YAML config > Pydantic defaults
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from greffier.utils.validation import validate_solana_address

ALLOWED_COMMITMENTS = ["processed", "confirmed", "finalized"]


class RetryConfig(BaseSettings):
    """Retry configuration for transient read-only RPC failures."""

    max_attempts: int = Field(default=3, ge=1, le=10)
    initial_delay: float = Field(default=0.5, ge=0.0, le=10.0)
    max_delay: float = Field(default=5.0, ge=0.0, le=300.0)
    exponential_base: float = Field(default=2.0, ge=1.0, le=10.0)
    jitter: bool = Field(default=True)


class ResilienceConfig(BaseSettings):
    """Resilience patterns configuration."""

    retry: dict = Field(
        default_factory=lambda: {
            "rpc_query": {
                "max_attempts": 5,
                "initial_delay": 0.5,
                "max_delay": 5.0,
                "exponential_base": 2.0,
                "jitter": True,
            },
        }
    )


class ProgramConfig(BaseSettings):
    """On-chain program the enrollment workflow talks to."""

    program_id: str = Field(default="TRBZyQHB3m68FGeVsqTK39Wm4xejadjVhP5MAZaKWDM")
    collection: str = Field(default="5ebsp5RChCGK7ssRZMVMufgVZhd2kFbNaotcZ5UvytN2")
    mpl_core_program_id: str = Field(
        default="CoREENxT6tW1HoK8ypY1SxRMZTcVPm7R94rH4PZNhX7d"
    )
    system_program_id: str = Field(default="11111111111111111111111111111111")

    # PDA seeds: [user_seed, user] and [collection_seed, collection]
    user_seed: str = Field(default="prereqs")
    collection_seed: str = Field(default="collection")

    # Anchor instruction names (discriminator = sha256("global:<name>")[:8])
    initialize_instruction: str = Field(default="initialize")
    submit_instruction: str = Field(default="submit_ts")

    @field_validator(
        "program_id", "collection", "mpl_core_program_id", "system_program_id"
    )
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Validate base58 program/account addresses."""
        if not validate_solana_address(v):
            raise ValueError(f"Invalid Solana address: {v}")
        return v


class TransactionConfig(BaseSettings):
    """Transaction assembly and confirmation limits."""

    max_size: int = Field(
        default=1232,
        ge=64,
        le=65535,
        description="Maximum serialized transaction size (network packet limit)",
    )
    anchor_validity_seconds: float = Field(default=60.0, ge=1.0, le=600.0)
    confirmation_timeout: float = Field(default=90.0, ge=1.0, le=600.0)
    poll_interval: float = Field(default=1.0, ge=0.0, le=30.0)
    max_rebuilds: int = Field(default=0, ge=0, le=10)
    refresh_stale_anchor: bool = Field(default=True)
    verify_record_before_submit: bool = Field(default=True)


class GreffierConfig(BaseSettings):
    """
    Greffier configuration schema.

    Nested sections:
    - program: program/collection identities and instruction names
    - transactions: size limit, anchor window, confirmation timing
    - resilience: retry profiles for read-only RPC calls
    """

    model_config = SettingsConfigDict(
        env_prefix="GREFFIER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="allow",
    )

    # Blockchain connection
    solana_rpc_url: str = Field(default="https://api.devnet.solana.com")
    solana_network: str = Field(default="devnet")
    commitment: str = Field(default="confirmed")

    # Key material
    wallet_path: Optional[str] = Field(default=None)

    # Logging
    log_level: str = Field(default="info")
    log_dir: Optional[str] = Field(default=None)

    program: ProgramConfig = Field(default_factory=ProgramConfig)
    transactions: TransactionConfig = Field(default_factory=TransactionConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower

    @field_validator("solana_network")
    @classmethod
    def validate_network(cls, v: str) -> str:
        """Validate Solana network."""
        allowed = ["devnet", "testnet", "mainnet-beta"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid network. Must be one of: {allowed}")
        return v_lower

    @field_validator("commitment")
    @classmethod
    def validate_commitment(cls, v: str) -> str:
        """Validate commitment level."""
        v_lower = v.lower()
        if v_lower not in ALLOWED_COMMITMENTS:
            raise ValueError(
                f"Invalid commitment. Must be one of: {ALLOWED_COMMITMENTS}"
            )
        return v_lower

    @field_validator("wallet_path")
    @classmethod
    def expand_wallet_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand home directory in wallet path."""
        if v:
            return os.path.expanduser(v)
        return v

    def get_retry_config(self, operation: str) -> RetryConfig:
        """Get retry config for a specific operation."""
        config = self.resilience.retry.get(operation, {})
        return RetryConfig(**config)


def _merge(base: dict, override: dict) -> dict:
    """Merge override into base, recursing into nested sections."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_file: Optional[str] = None) -> GreffierConfig:
    """
    Load configuration from YAML files.

    Priority: Environment variables > environment-specific YAML > default YAML

    Args:
        config_file: Optional YAML filename override

    Returns:
        GreffierConfig instance
    """
    env = os.getenv("ENV", "production")

    config_map = {
        "production": "production.yaml",
        "development": "development.yaml",
        "test": "test.yaml",
    }

    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    if config_file is None:
        config_file = os.getenv("GREFFIER_CONFIG")
        if not config_file:
            config_file = config_map.get(env, "production.yaml")

    env_config_path = config_dir / config_file

    if env_config_path.exists():
        with open(env_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = _merge(merged_config, loaded)

    # Environment variables win over YAML: drop YAML keys that ENV overrides
    for key in list(merged_config):
        prefix = f"GREFFIER_{key.upper()}"
        if os.getenv(prefix) is not None:
            merged_config.pop(key)
            continue
        section = merged_config[key]
        if isinstance(section, dict):
            for sub in list(section):
                if os.getenv(f"{prefix}__{sub.upper()}") is not None:
                    section.pop(sub)

    return GreffierConfig(**merged_config)


# Global settings instance
_settings: Optional[GreffierConfig] = None


def get_settings() -> GreffierConfig:
    """
    Get singleton settings instance.

    Returns:
        GreffierConfig instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads."""
    global _settings
    _settings = None
