"""
Logging utilities for temp wallet operations.

Features:
- Structured logging for wallet lifecycle events
- Transaction lifecycle logging
- RPC call latency logging
- Audit trail support
- Sensitive data masking
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import LoggingConfig, get_config

logger = logging.getLogger(__name__)


def mask_url(url: str) -> str:
    """Mask sensitive parts of an RPC URL (like API keys in query params or path)."""
    if "?" in url:
        url = url.split("?")[0] + "?<params_masked>"
    # Hosted providers put the API key in the last path segment (.../v2/<key>)
    scheme, sep, rest = url.partition("://")
    if sep and ("/v2/" in rest or "/v3/" in rest):
        head, _, _ = rest.rpartition("/")
        return f"{scheme}://{head}/<key_masked>"
    return url


def mask_address(address: str) -> str:
    """Mask middle portion of address for privacy."""
    if len(address) < 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


@dataclass
class RPCCallLog:
    """Log entry for an RPC call."""
    method: str
    endpoint_url: str
    request_id: int
    duration_ms: float
    success: bool
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "method": self.method,
            "endpoint_url": mask_url(self.endpoint_url),
            "request_id": self.request_id,
            "duration_ms": round(self.duration_ms, 2),
            "success": self.success,
            "error_message": self.error_message,
        }


class WalletLogger:
    """
    Structured logger for temp wallet operations.

    Provides:
    - Wallet creation and guard rejection events
    - Transaction lifecycle logging
    - RPC call latency
    - Audit trail support
    """

    def __init__(
        self,
        name: str = "tempwallet",
        config: Optional[LoggingConfig] = None,
    ):
        self._logger = logging.getLogger(name)
        self._fixed_config = config

    @property
    def _config(self) -> LoggingConfig:
        return self._fixed_config or get_config().logging

    def _get_level(self, level_str: str) -> int:
        """Convert level string to logging level."""
        return getattr(logging, level_str.upper(), logging.INFO)

    def _addr(self, address: str) -> str:
        return mask_address(address) if self._config.mask_addresses else address

    def log_wallet_created(
        self,
        address: str,
        expires_at: Optional[datetime],
        label: Optional[str] = None,
    ) -> None:
        """Log creation of a temp wallet. Never logs key material."""
        expiry = expires_at.isoformat() if expires_at else "never"
        self._logger.log(
            self._get_level(self._config.lifecycle_level),
            f"Temp wallet created: {self._addr(address)} (expires={expiry}"
            + (f", label={label}" if label else "")
            + ")",
            extra={
                "wallet": {
                    "address": self._addr(address),
                    "expires_at": expires_at.isoformat() if expires_at else None,
                    "label": label,
                }
            },
        )

    def log_guard_rejected(self, address: str, reason: str) -> None:
        """Log a send refused by the used/expired guard."""
        self._logger.warning(
            f"Temp wallet {self._addr(address)} refused to sign: {reason}",
            extra={"wallet": {"address": self._addr(address), "reason": reason}},
        )

    def log_rpc_call(
        self,
        method: str,
        endpoint_url: str,
        request_id: int,
        duration_ms: float,
        success: bool,
        error_message: Optional[str] = None,
    ) -> None:
        """Log an RPC call."""
        if not self._config.log_rpc_latency:
            return

        log_entry = RPCCallLog(
            method=method,
            endpoint_url=endpoint_url,
            request_id=request_id,
            duration_ms=duration_ms,
            success=success,
            error_message=error_message,
        )

        level = (
            self._get_level(self._config.error_level)
            if not success
            else self._get_level(self._config.rpc_call_level)
        )
        self._logger.log(
            level,
            f"RPC {method} to {mask_url(endpoint_url)} in {duration_ms:.0f}ms "
            f"(success={success})",
            extra={"rpc_call": log_entry.to_dict()},
        )

    def log_transaction_submitted(
        self,
        tx_hash: str,
        from_address: str,
        to_address: Optional[str],
        value_wei: int,
        nonce: int,
    ) -> None:
        """Log transaction submission."""
        data = {
            "tx_hash": tx_hash,
            "from_address": self._addr(from_address),
            "to_address": self._addr(to_address) if to_address else None,
            "value_wei": str(value_wei),
            "nonce": nonce,
        }
        self._logger.log(
            self._get_level(self._config.transaction_level),
            f"Transaction submitted: {tx_hash}",
            extra={"transaction": data},
        )
        if self._config.audit_log_enabled:
            self._write_audit_log("transaction_submitted", data)

    def log_transaction_confirmed(
        self,
        tx_hash: str,
        block_number: Optional[int],
        gas_used: Optional[int] = None,
    ) -> None:
        """Log transaction confirmation."""
        self._logger.log(
            self._get_level(self._config.transaction_level),
            f"Transaction confirmed: {tx_hash} in block {block_number}",
            extra={"transaction": {
                "tx_hash": tx_hash,
                "block_number": block_number,
                "gas_used": gas_used,
            }},
        )
        if self._config.audit_log_enabled:
            self._write_audit_log("transaction_confirmed", {
                "tx_hash": tx_hash,
                "block_number": block_number,
                "gas_used": gas_used,
            })

    def log_transaction_failed(self, tx_hash: Optional[str], error: str) -> None:
        """Log transaction failure."""
        self._logger.log(
            self._get_level(self._config.error_level),
            f"Transaction failed: {tx_hash or '<unsubmitted>'} - {error}",
            extra={"transaction": {"tx_hash": tx_hash, "error": error}},
        )
        if self._config.audit_log_enabled:
            self._write_audit_log("transaction_failed", {
                "tx_hash": tx_hash,
                "error": error,
            })

    def log_sweep_built(
        self,
        from_address: str,
        to_address: str,
        balance_wei: int,
        buffer_wei: int,
        value_wei: int,
    ) -> None:
        """Log a built sweep transaction."""
        self._logger.info(
            f"Sweep built: {self._addr(from_address)} -> {self._addr(to_address)} "
            f"value={value_wei} wei (balance={balance_wei}, buffer={buffer_wei})",
            extra={"sweep": {
                "from_address": self._addr(from_address),
                "to_address": self._addr(to_address),
                "balance_wei": str(balance_wei),
                "buffer_wei": str(buffer_wei),
                "value_wei": str(value_wei),
            }},
        )

    def _write_audit_log(self, event_type: str, data: Dict[str, Any]) -> None:
        """Write to audit log."""
        audit_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "data": data,
        }

        if self._config.audit_log_path:
            try:
                with open(self._config.audit_log_path, "a") as f:
                    f.write(json.dumps(audit_entry, default=str) + "\n")
            except OSError as e:
                self._logger.error(f"Failed to write audit log: {e}")
        else:
            self._logger.info(
                f"AUDIT: {event_type}",
                extra={"audit": audit_entry},
            )


# Global logger instance
_wallet_logger: Optional[WalletLogger] = None


def get_wallet_logger() -> WalletLogger:
    """Get the global wallet logger instance."""
    global _wallet_logger
    if _wallet_logger is None:
        _wallet_logger = WalletLogger()
    return _wallet_logger


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """
    Set up logging configuration.

    Args:
        level: Log level
        format_string: Custom format string
        json_format: Use JSON formatting
    """
    if format_string is None:
        if json_format:
            format_string = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
        else:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
    )

    logging.getLogger("tempwallet").setLevel(getattr(logging, level.upper()))
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
