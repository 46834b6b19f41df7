"""
Configuration management for tempwallet.

Provides centralized configuration for:
- JSON-RPC transport timeouts and receipt polling
- Gas defaults used when populating transactions
- Logging configuration
- Payment URI scheme

RPC endpoints are never part of the configuration: every network-touching
helper takes the endpoint URL as an explicit argument.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "TEMPWALLET_"


@dataclass
class RPCConfig:
    """Configuration for the JSON-RPC transport."""
    timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0

    # Receipt polling
    receipt_poll_interval_seconds: float = 2.0
    confirmation_timeout_seconds: float = 120.0


@dataclass
class GasConfig:
    """Gas defaults applied to transactions missing explicit values."""
    # Added on top of eth_estimateGas for calls carrying data
    gas_limit_buffer_percent: int = 20

    # Used when the node does not support eth_maxPriorityFeePerGas
    fallback_priority_fee_wei: int = 1_500_000_000

    # maxFeePerGas = base_fee * multiplier + priority fee
    base_fee_multiplier: int = 2


@dataclass
class LoggingConfig:
    """Configuration for wallet operation logging."""
    rpc_call_level: str = "DEBUG"
    transaction_level: str = "INFO"
    lifecycle_level: str = "INFO"
    error_level: str = "ERROR"

    # Partial masking of addresses in log records
    mask_addresses: bool = False
    log_rpc_latency: bool = True

    # Audit logging
    audit_log_enabled: bool = False
    audit_log_path: Optional[str] = None  # None = use default logger


@dataclass
class TempWalletConfig:
    """
    Master configuration for tempwallet.

    Supports loading from environment variables with prefix TEMPWALLET_.
    """
    rpc: RPCConfig = field(default_factory=RPCConfig)
    gas: GasConfig = field(default_factory=GasConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    payment_uri_scheme: str = "ethereum"


def _get_env(key: str, default: Any = None, prefix: str = ENV_PREFIX) -> Any:
    """Get environment variable with prefix."""
    return os.getenv(f"{prefix}{key}", default)


def _get_env_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{key}={value!r}, using {default}")
        return default


def _get_env_int(key: str, default: int) -> int:
    value = _get_env(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{key}={value!r}, using {default}")
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def build_default_config() -> TempWalletConfig:
    """Build configuration from defaults and TEMPWALLET_* environment variables."""
    rpc = RPCConfig(
        timeout_seconds=_get_env_float("RPC_TIMEOUT_SECONDS", 30.0),
        connect_timeout_seconds=_get_env_float("RPC_CONNECT_TIMEOUT_SECONDS", 10.0),
        receipt_poll_interval_seconds=_get_env_float("RECEIPT_POLL_INTERVAL_SECONDS", 2.0),
        confirmation_timeout_seconds=_get_env_float("CONFIRMATION_TIMEOUT_SECONDS", 120.0),
    )
    gas = GasConfig(
        gas_limit_buffer_percent=_get_env_int("GAS_LIMIT_BUFFER_PERCENT", 20),
        fallback_priority_fee_wei=_get_env_int("FALLBACK_PRIORITY_FEE_WEI", 1_500_000_000),
    )
    logging_config = LoggingConfig(
        transaction_level=_get_env("LOG_TRANSACTION_LEVEL", "INFO"),
        mask_addresses=_get_env_bool("MASK_ADDRESSES", False),
        audit_log_enabled=_get_env_bool("AUDIT_LOG_ENABLED", False),
        audit_log_path=_get_env("AUDIT_LOG_PATH") or None,
    )
    return TempWalletConfig(
        rpc=rpc,
        gas=gas,
        logging=logging_config,
        payment_uri_scheme=_get_env("PAYMENT_URI_SCHEME", "ethereum"),
    )


# Global configuration instance
_global_config: Optional[TempWalletConfig] = None


def get_config() -> TempWalletConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = build_default_config()
    return _global_config


def set_config(config: TempWalletConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Drop the global configuration so the next get_config() rebuilds it."""
    global _global_config
    _global_config = None
