"""
Gas cost estimation.

Basic formulas:
    total_wei = gas_units * gas_price_wei
    total_with_margin = total_wei * (10_000 + margin_bps) // 10_000

All arithmetic is on Python ints, so nothing is lost to rounding except the
floor division of the margin formula.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional


from .rpc_client import JsonRpcClient
from .transactions import TransactionRequest

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10_000

# Gas units for a plain ETH transfer
ETH_TRANSFER_GAS = 21_000


def estimate_total_cost_wei(gas_units: int, gas_price_wei: int) -> int:
    """
    Calculate the total gas cost in wei.

    Example:
        >>> estimate_total_cost_wei(21_000, 20_000_000_000)  # 20 gwei
        420000000000000
    """
    return gas_units * gas_price_wei


def estimate_with_margin_wei(gas_units: int, gas_price_wei: int, margin_bps: int) -> int:
    """
    Calculate the total gas cost with a safety margin in basis points.

    1 bps = 0.01%, so 1000 bps adds 10%. The result is floored.

    Example:
        >>> estimate_with_margin_wei(21_000, 20_000_000_000, 2000)
        504000000000000
    """
    total = estimate_total_cost_wei(gas_units, gas_price_wei)
    return total * (BPS_DENOMINATOR + margin_bps) // BPS_DENOMINATOR


@dataclass
class GasCostEstimate:
    """Gas cost estimate for a concrete transaction."""
    gas_units: int
    gas_price_wei: int
    margin_bps: int
    total_cost_wei: int
    total_with_margin_wei: int


async def estimate_transaction_cost(
    provider_url: str,
    tx: TransactionRequest,
    margin_bps: int = 0,
    *,
    from_address: Optional[str] = None,
) -> GasCostEstimate:
    """
    Estimate what ``tx`` would cost on the node behind ``provider_url``.

    Uses eth_estimateGas (unless tx.gas_limit is set) and eth_gasPrice.
    """
    async with JsonRpcClient(provider_url) as rpc:
        if tx.gas_limit is not None:
            gas_units = tx.gas_limit
        else:
            call = {"value": hex(tx.value), "data": tx.data_hex}
            if tx.to is not None:
                call["to"] = tx.to
            if from_address is not None:
                call["from"] = from_address
            gas_units = await rpc.estimate_gas(call)
        gas_price = await rpc.get_gas_price()

    estimate = GasCostEstimate(
        gas_units=gas_units,
        gas_price_wei=gas_price,
        margin_bps=margin_bps,
        total_cost_wei=estimate_total_cost_wei(gas_units, gas_price),
        total_with_margin_wei=estimate_with_margin_wei(gas_units, gas_price, margin_bps),
    )
    logger.debug(
        f"Estimated {gas_units} gas at {gas_price} wei: "
        f"{estimate.total_with_margin_wei} wei with {margin_bps} bps margin"
    )
    return estimate
