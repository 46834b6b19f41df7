"""Tests for wallet logging utilities."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from tempwallet.config import LoggingConfig
from tempwallet.logging_utils import (
    RPCCallLog,
    WalletLogger,
    get_wallet_logger,
    mask_address,
    mask_url,
)

ADDRESS = "0x742d35Cc6634C0532925a3b8D4C9db96C4b4d8b6"


class TestMasking:
    """Tests for sensitive data masking."""

    def test_mask_url_path_key(self):
        assert (
            mask_url("https://eth-mainnet.g.alchemy.com/v2/abc123")
            == "https://eth-mainnet.g.alchemy.com/v2/<key_masked>"
        )

    def test_mask_url_query(self):
        assert mask_url("https://rpc.example/?apikey=secret") == "https://rpc.example/?<params_masked>"

    def test_mask_url_plain(self):
        assert mask_url("http://localhost:8545") == "http://localhost:8545"

    def test_mask_address(self):
        assert mask_address(ADDRESS) == "0x742d...d8b6"

    def test_mask_short_address(self):
        assert mask_address("0x1234") == "0x1234"

    def test_rpc_call_log_masks_url(self):
        entry = RPCCallLog(
            method="eth_chainId",
            endpoint_url="https://mainnet.infura.io/v3/projectid",
            request_id=1,
            duration_ms=12.3456,
            success=True,
        )
        data = entry.to_dict()
        assert data["endpoint_url"] == "https://mainnet.infura.io/v3/<key_masked>"
        assert data["duration_ms"] == 12.35


class TestWalletLogger:
    """Tests for WalletLogger."""

    def test_wallet_created(self, caplog):
        wallet_logger = WalletLogger(config=LoggingConfig())
        expires = datetime(2030, 1, 1, tzinfo=timezone.utc)

        with caplog.at_level(logging.INFO, logger="tempwallet"):
            wallet_logger.log_wallet_created(ADDRESS, expires, label="checkout")

        record = caplog.records[-1]
        assert ADDRESS in record.getMessage()
        assert record.wallet["expires_at"] == expires.isoformat()
        assert record.wallet["label"] == "checkout"

    def test_masked_addresses(self, caplog):
        wallet_logger = WalletLogger(config=LoggingConfig(mask_addresses=True))

        with caplog.at_level(logging.WARNING, logger="tempwallet"):
            wallet_logger.log_guard_rejected(ADDRESS, "already used")

        assert ADDRESS not in caplog.text
        assert "0x742d...d8b6" in caplog.text
        assert caplog.records[-1].levelno == logging.WARNING

    def test_rpc_latency_can_be_disabled(self, caplog):
        wallet_logger = WalletLogger(config=LoggingConfig(log_rpc_latency=False))

        with caplog.at_level(logging.DEBUG, logger="tempwallet"):
            wallet_logger.log_rpc_call("eth_chainId", "http://localhost:8545", 1, 3.0, True)

        assert caplog.records == []

    def test_failed_rpc_logged_as_error(self, caplog):
        wallet_logger = WalletLogger(config=LoggingConfig())

        with caplog.at_level(logging.DEBUG, logger="tempwallet"):
            wallet_logger.log_rpc_call(
                "eth_getBalance", "http://localhost:8545", 4, 8.0, False, "boom"
            )

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.rpc_call["error_message"] == "boom"

    def test_audit_without_path_goes_to_logger(self, caplog):
        wallet_logger = WalletLogger(config=LoggingConfig(audit_log_enabled=True))

        with caplog.at_level(logging.INFO, logger="tempwallet"):
            wallet_logger.log_transaction_confirmed("0xabc", block_number=5, gas_used=21000)

        audit_records = [r for r in caplog.records if hasattr(r, "audit")]
        assert len(audit_records) == 1
        assert audit_records[0].audit["event_type"] == "transaction_confirmed"
        assert audit_records[0].audit["data"]["block_number"] == 5

    def test_global_logger_is_shared(self):
        assert get_wallet_logger() is get_wallet_logger()
