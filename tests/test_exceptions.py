"""Tests for the tempwallet exception hierarchy."""
from __future__ import annotations

import pytest

from tempwallet.exceptions import (
    AlreadyUsedError,
    ConfirmationTimeoutError,
    ExpiredSessionError,
    InsufficientAfterBufferError,
    NoBalanceToSweepError,
    PermitSigningNotImplementedError,
    RPCError,
    SweepError,
    TempWalletError,
    TransactionRevertedError,
)


@pytest.mark.parametrize(
    "error,code,message",
    [
        (ExpiredSessionError(), "SESSION_EXPIRED", "tempwallet: session expired"),
        (AlreadyUsedError(), "ALREADY_USED", "tempwallet: already used"),
        (NoBalanceToSweepError(), "NO_BALANCE_TO_SWEEP", "tempwallet: no balance to sweep"),
        (
            InsufficientAfterBufferError(),
            "INSUFFICIENT_AFTER_BUFFER",
            "tempwallet: not enough balance after gas buffer",
        ),
    ],
)
def test_lifecycle_errors(error, code, message):
    assert isinstance(error, TempWalletError)
    assert error.error_code == code
    assert str(error) == message
    assert error.to_dict() == {"error": code, "message": message}


def test_sweep_errors_share_base():
    assert issubclass(NoBalanceToSweepError, SweepError)
    assert issubclass(InsufficientAfterBufferError, SweepError)


def test_details_in_to_dict():
    error = ExpiredSessionError(address="0xabc", expired_at="2030-01-01T00:00:00+00:00")
    assert error.to_dict()["details"] == {
        "address": "0xabc",
        "expired_at": "2030-01-01T00:00:00+00:00",
    }


def test_permit_error_is_not_implemented():
    error = PermitSigningNotImplementedError()
    assert isinstance(error, NotImplementedError)
    assert error.error_code == "NOT_IMPLEMENTED"


def test_rpc_error_fields():
    error = RPCError("RPC error: bad", method="eth_call", code=3, data="0x08c379a0")
    assert error.code == 3
    assert error.data == "0x08c379a0"
    assert error.details == {"method": "eth_call", "rpc_code": 3}


def test_receipt_errors_carry_hash():
    reverted = TransactionRevertedError("0xabc", block_number=10)
    timeout = ConfirmationTimeoutError("0xdef", 30)

    assert reverted.tx_hash == "0xabc"
    assert reverted.details == {"tx_hash": "0xabc", "block_number": 10}
    assert timeout.tx_hash == "0xdef"
    assert "30" in str(timeout)
