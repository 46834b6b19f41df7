"""Balance lookup, payment URIs and ether unit helpers."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

from web3 import Web3

from .config import get_config
from .rpc_client import JsonRpcClient


async def get_balance_wei(provider_url: str, address: str) -> int:
    """
    Read the ETH balance (wei) of ``address`` via a JSON-RPC endpoint.

    Raises:
        RPCError, httpx.HTTPError: if the RPC call fails
    """
    async with JsonRpcClient(provider_url) as rpc:
        return await rpc.get_balance(address)


def build_payment_uri(address: str, wei: Optional[int] = None) -> str:
    """
    Build a minimal payment URI: ``ethereum:<address>[?value=<wei>]``.

    Only the value parameter is supported. An amount of zero is left out, the
    same as no amount.

    Example:
        >>> build_payment_uri("0x742d35Cc6634C0532925a3b8D4C9db96C4b4d8b6", 10**17)
        'ethereum:0x742d35Cc6634C0532925a3b8D4C9db96C4b4d8b6?value=100000000000000000'
    """
    scheme = get_config().payment_uri_scheme
    if wei:
        return f"{scheme}:{address}?value={int(wei)}"
    return f"{scheme}:{address}"


def format_ether(wei: int) -> str:
    """Convert wei to a decimal ETH string."""
    value = Web3.from_wei(wei, "ether")
    return f"{value:f}" if isinstance(value, Decimal) else str(value)


def parse_ether(ether: Union[str, int, Decimal]) -> int:
    """Convert an ETH amount to wei."""
    if isinstance(ether, str):
        ether = Decimal(ether)
    return int(Web3.to_wei(ether, "ether"))
