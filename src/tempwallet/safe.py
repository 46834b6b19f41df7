"""Safe (Gnosis Safe) transaction payload builders.

These only build payloads. Proposing, signing and executing them is done by a
Safe SDK in the calling application.

References:
- https://github.com/safe-global/safe-smart-account
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .utils import get_balance_wei

EMPTY_DATA = "0x"


@dataclass
class SafeTransactionPayload:
    """Minimal Safe transaction data: target, wei value and calldata."""
    to: str
    value: int
    data: str = EMPTY_DATA

    def to_dict(self) -> Dict[str, Any]:
        return {"to": self.to, "value": self.value, "data": self.data}


def build_safe_payment(to: str, value: int, data: str = EMPTY_DATA) -> SafeTransactionPayload:
    """Build an ETH payment (or contract call) payload for a Safe transaction.

    Args:
        to: Recipient address
        value: Amount to send in wei
        data: Optional calldata, "0x" for a plain transfer

    Returns:
        Payload ready to hand to a Safe SDK
    """
    return SafeTransactionPayload(to=to, value=value, data=data or EMPTY_DATA)


async def build_safe_sweep(provider_url: str, safe_address: str, to: str) -> SafeTransactionPayload:
    """Build a payload moving the full ETH balance of a Safe to ``to``.

    Unlike build_sweep_tx, no gas buffer is subtracted and a zero balance is
    not an error.

    Args:
        provider_url: RPC endpoint for the balance lookup
        safe_address: Safe to sweep from
        to: Destination address

    Returns:
        Payload ready to hand to a Safe SDK
    """
    balance = await get_balance_wei(provider_url, safe_address)
    return SafeTransactionPayload(to=to, value=balance, data=EMPTY_DATA)
