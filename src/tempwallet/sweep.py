"""
Sweeping: move the whole ETH balance of an address, minus a gas buffer.

Typical post-use cleanup of a temp wallet:

    tx = await build_sweep_tx(
        from_address=wallet.address,
        to=treasury,
        provider_url=url,
        gas_limit_buffer=parse_ether("0.001"),
    )
    tx_hash = await send_sweep_tx(url, wallet.private_key, tx)
"""
from __future__ import annotations

import logging

from eth_account import Account

from .exceptions import InsufficientAfterBufferError, NoBalanceToSweepError
from .logging_utils import get_wallet_logger
from .transactions import TransactionRequest, submit_transaction
from .utils import get_balance_wei

logger = logging.getLogger(__name__)


async def build_sweep_tx(
    from_address: str,
    to: str,
    provider_url: str,
    gas_limit_buffer: int = 0,
) -> TransactionRequest:
    """
    Build an unsigned transaction sending the balance of ``from_address`` to ``to``.

    ``gas_limit_buffer`` wei are left behind to pay for the sweep itself. The
    returned request has no gas fields set; they are filled when it is signed.

    Raises:
        NoBalanceToSweepError: If the source balance is zero
        InsufficientAfterBufferError: If the balance does not exceed the buffer
    """
    balance = await get_balance_wei(provider_url, from_address)
    if balance == 0:
        raise NoBalanceToSweepError(address=from_address)

    buffer = gas_limit_buffer or 0
    value = balance - buffer if balance > buffer else 0
    if value <= 0:
        raise InsufficientAfterBufferError(balance_wei=balance, buffer_wei=buffer)

    get_wallet_logger().log_sweep_built(from_address, to, balance, buffer, value)
    return TransactionRequest(to=to, value=value)


async def send_sweep_tx(provider_url: str, private_key: str, tx: TransactionRequest) -> str:
    """
    Sign and send a prepared sweep transaction with a raw private key.

    Returns:
        The confirmed transaction hash
    """
    account = Account.from_key(private_key)
    return await submit_transaction(provider_url, account, tx)
