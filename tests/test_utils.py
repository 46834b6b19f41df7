"""Tests for balance lookup, payment URIs and ether unit helpers."""
from __future__ import annotations

from decimal import Decimal

import pytest

from tempwallet.config import TempWalletConfig, set_config
from tempwallet.exceptions import RPCError
from tempwallet.utils import build_payment_uri, format_ether, get_balance_wei, parse_ether

ADDRESS = "0x742d35Cc6634C0532925a3b8D4C9db96C4b4d8b6"


class TestBuildPaymentUri:
    """Tests for build_payment_uri."""

    def test_without_amount(self):
        assert build_payment_uri(ADDRESS) == f"ethereum:{ADDRESS}"

    def test_with_amount(self):
        assert build_payment_uri(ADDRESS, 10**17) == f"ethereum:{ADDRESS}?value=100000000000000000"

    def test_zero_amount_omitted(self):
        assert build_payment_uri(ADDRESS, 0) == f"ethereum:{ADDRESS}"

    def test_address_not_rewritten(self):
        lower = ADDRESS.lower()
        assert build_payment_uri(lower, 1) == f"ethereum:{lower}?value=1"

    def test_configured_scheme(self):
        set_config(TempWalletConfig(payment_uri_scheme="pay"))
        assert build_payment_uri(ADDRESS, 5) == f"pay:{ADDRESS}?value=5"


class TestEtherUnits:
    """Tests for format_ether and parse_ether."""

    @pytest.mark.parametrize(
        "ether,wei",
        [
            ("1", 10**18),
            ("0.1", 10**17),
            ("0.000000000000000001", 1),
            (Decimal("2.5"), 25 * 10**17),
            (3, 3 * 10**18),
        ],
    )
    def test_parse_ether(self, ether, wei):
        assert parse_ether(ether) == wei

    def test_format_ether(self):
        assert format_ether(10**17) == "0.1"
        assert format_ether(10**18) == "1"
        assert format_ether(1) == "0.000000000000000001"

    def test_format_zero(self):
        assert Decimal(format_ether(0)) == 0


class TestGetBalanceWei:
    """Tests for get_balance_wei."""

    @pytest.mark.asyncio
    async def test_reads_latest_balance(self, fake_node):
        fake_node.responses["eth_getBalance"] = "0xde0b6b3a7640000"

        balance = await get_balance_wei("https://rpc.example", ADDRESS)

        assert balance == 10**18
        assert fake_node.calls == [("eth_getBalance", [ADDRESS, "latest"])]
        assert fake_node.urls == ["https://rpc.example"]

    @pytest.mark.asyncio
    async def test_rpc_error_propagates(self, fake_node):
        with pytest.raises(RPCError) as exc_info:
            await get_balance_wei("https://rpc.example", ADDRESS)

        assert exc_info.value.code == -32601
