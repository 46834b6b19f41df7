"""Exception hierarchy for tempwallet.

All tempwallet-specific exceptions inherit from TempWalletError, so callers
can branch on a concrete kind or catch the whole family:

    from tempwallet.exceptions import AlreadyUsedError, ExpiredSessionError

    try:
        tx_hash = await wallet.send_transaction(provider_url, to=dest, value=wei)
    except AlreadyUsedError:
        wallet = create_temp_wallet(ttl=3600)
    except ExpiredSessionError:
        ...

Every exception carries:
- error_code: Machine-readable error code (e.g., "ALREADY_USED")
- message: Human-readable error message
- details: Optional additional context dictionary
- to_dict(): Convert to a serializable structure

Errors raised by the JSON-RPC collaborator (RPCError, TransactionRevertedError,
ConfirmationTimeoutError and raw httpx errors) are propagated unchanged by the
wallet, sweep and Safe helpers.
"""
from __future__ import annotations

from typing import Any, Optional


class TempWalletError(Exception):
    """Base exception for all tempwallet errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Optional additional context
    """

    error_code: str = "TEMPWALLET_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable structure."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Temp wallet lifecycle
# =============================================================================

class ExpiredSessionError(TempWalletError):
    """The temp wallet has passed its TTL.

    Expiration is client-side only and is not enforced on-chain.
    """

    error_code = "SESSION_EXPIRED"

    def __init__(
        self,
        address: Optional[str] = None,
        expired_at: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if address:
            details["address"] = address
        if expired_at:
            details["expired_at"] = expired_at
        super().__init__("tempwallet: session expired", details=details)


class AlreadyUsedError(TempWalletError):
    """The temp wallet already sent its single transaction."""

    error_code = "ALREADY_USED"

    def __init__(
        self,
        address: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if address:
            details["address"] = address
        super().__init__("tempwallet: already used", details=details)


# =============================================================================
# Sweep errors
# =============================================================================

class SweepError(TempWalletError):
    """Base class for sweep-related errors."""

    error_code = "SWEEP_ERROR"


class NoBalanceToSweepError(SweepError):
    """The sweep source address holds exactly zero wei."""

    error_code = "NO_BALANCE_TO_SWEEP"

    def __init__(
        self,
        address: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if address:
            details["address"] = address
        super().__init__("tempwallet: no balance to sweep", details=details)


class InsufficientAfterBufferError(SweepError):
    """The sweep source balance does not exceed the reserved gas buffer."""

    error_code = "INSUFFICIENT_AFTER_BUFFER"

    def __init__(
        self,
        balance_wei: Optional[int] = None,
        buffer_wei: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if balance_wei is not None:
            details["balance_wei"] = str(balance_wei)
        if buffer_wei is not None:
            details["buffer_wei"] = str(buffer_wei)
        super().__init__(
            "tempwallet: not enough balance after gas buffer", details=details
        )


# =============================================================================
# Permit2
# =============================================================================

class PermitSigningNotImplementedError(TempWalletError, NotImplementedError):
    """Permit2 signing was requested without a signer implementation."""

    error_code = "NOT_IMPLEMENTED"

    def __init__(self, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            "Permit2 signing not implemented. Supply a PermitSigner backed by "
            "a Permit2 or EIP-712 library.",
            details=details,
        )


# =============================================================================
# JSON-RPC collaborator errors
# =============================================================================

class RPCError(TempWalletError):
    """The JSON-RPC endpoint answered with an error object."""

    error_code = "RPC_ERROR"

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        code: Optional[int] = None,
        data: Any = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.data = data
        details = details or {}
        if method:
            details["method"] = method
        if code is not None:
            details["rpc_code"] = code
        super().__init__(message, details=details)


class TransactionRevertedError(TempWalletError):
    """A mined transaction has receipt status 0."""

    error_code = "TRANSACTION_REVERTED"

    def __init__(
        self,
        tx_hash: str,
        block_number: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.tx_hash = tx_hash
        details = details or {}
        details["tx_hash"] = tx_hash
        if block_number is not None:
            details["block_number"] = block_number
        super().__init__(f"Transaction {tx_hash} failed on-chain", details=details)


class ConfirmationTimeoutError(TempWalletError):
    """No receipt appeared before the confirmation timeout."""

    error_code = "CONFIRMATION_TIMEOUT"

    def __init__(
        self,
        tx_hash: str,
        timeout_seconds: float,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.tx_hash = tx_hash
        details = details or {}
        details["tx_hash"] = tx_hash
        details["timeout_seconds"] = timeout_seconds
        super().__init__(
            f"Transaction {tx_hash} not confirmed after {timeout_seconds}s",
            details=details,
        )


__all__ = [
    "TempWalletError",
    "ExpiredSessionError",
    "AlreadyUsedError",
    "SweepError",
    "NoBalanceToSweepError",
    "InsufficientAfterBufferError",
    "PermitSigningNotImplementedError",
    "RPCError",
    "TransactionRevertedError",
    "ConfirmationTimeoutError",
]
