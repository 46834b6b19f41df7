"""Transaction requests, local signing and submission."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from eth_account.signers.local import LocalAccount
from web3 import Web3

from .config import GasConfig, get_config
from .logging_utils import get_wallet_logger
from .rpc_client import JsonRpcClient

logger = logging.getLogger(__name__)


@dataclass
class TransactionRequest:
    """A transaction to be signed and submitted.

    Unset optional fields are filled from the node when the transaction is
    populated for signing.
    """
    to: Optional[str]
    value: int = 0  # Native token value in wei
    data: Union[str, bytes] = "0x"
    gas_limit: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    nonce: Optional[int] = None
    chain_id: Optional[int] = None

    @property
    def data_hex(self) -> str:
        if isinstance(self.data, (bytes, bytearray)):
            return Web3.to_hex(self.data)
        return self.data or "0x"

    @property
    def has_calldata(self) -> bool:
        return self.data_hex not in ("0x", "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to an eth_account style dict, leaving out unset fields."""
        tx: Dict[str, Any] = {"value": self.value, "data": self.data_hex}
        if self.to is not None:
            tx["to"] = Web3.to_checksum_address(self.to)
        optional = {
            "gas": self.gas_limit,
            "maxFeePerGas": self.max_fee_per_gas,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "nonce": self.nonce,
            "chainId": self.chain_id,
        }
        tx.update({k: v for k, v in optional.items() if v is not None})
        return tx


def _rpc_view(tx: Dict[str, Any], from_address: str) -> Dict[str, Any]:
    """Shape a transaction dict for eth_estimateGas."""
    view: Dict[str, Any] = {"from": from_address, "value": hex(tx["value"]), "data": tx["data"]}
    if "to" in tx:
        view["to"] = tx["to"]
    return view


async def populate_transaction(
    rpc: JsonRpcClient,
    from_address: str,
    tx: TransactionRequest,
    gas_config: Optional[GasConfig] = None,
) -> Dict[str, Any]:
    """
    Fill nonce, chain id, gas limit and fees that the request leaves unset.

    Fees are EIP-1559 when the latest block carries a base fee, legacy
    gasPrice otherwise. Caller-provided values are never overridden.
    """
    gas = gas_config or get_config().gas
    populated = tx.to_dict()

    if "nonce" not in populated:
        populated["nonce"] = await rpc.get_nonce(from_address)
    if "chainId" not in populated:
        populated["chainId"] = await rpc.get_chain_id()

    if "gas" not in populated:
        estimated = await rpc.estimate_gas(_rpc_view(populated, from_address))
        if tx.has_calldata:
            estimated = estimated * (100 + gas.gas_limit_buffer_percent) // 100
        populated["gas"] = estimated

    has_max_fee = "maxFeePerGas" in populated
    has_priority_fee = "maxPriorityFeePerGas" in populated
    if not (has_max_fee and has_priority_fee):
        base_fee = await rpc.get_base_fee() if not has_max_fee else None
        if not has_max_fee and not has_priority_fee and base_fee is None:
            populated["gasPrice"] = await rpc.get_gas_price()
        else:
            if not has_priority_fee:
                priority = await rpc.get_max_priority_fee()
                if has_max_fee:
                    priority = min(priority, populated["maxFeePerGas"])
                populated["maxPriorityFeePerGas"] = priority
            if not has_max_fee:
                populated["maxFeePerGas"] = (
                    (base_fee or 0) * gas.base_fee_multiplier
                    + populated["maxPriorityFeePerGas"]
                )

    return populated


async def sign_and_submit(
    rpc: JsonRpcClient,
    account: LocalAccount,
    tx: TransactionRequest,
) -> str:
    """
    Populate, sign locally, broadcast and wait for the receipt.

    Returns:
        The confirmed transaction hash

    Raises:
        RPCError, TransactionRevertedError, ConfirmationTimeoutError,
        httpx.HTTPError: propagated unchanged from the RPC client
    """
    chain_logger = get_wallet_logger()
    tx_hash: Optional[str] = None
    try:
        populated = await populate_transaction(rpc, account.address, tx)
        signed = account.sign_transaction(populated)
        tx_hash = await rpc.send_raw_transaction(Web3.to_hex(signed.raw_transaction))
        chain_logger.log_transaction_submitted(
            tx_hash=tx_hash,
            from_address=account.address,
            to_address=populated.get("to"),
            value_wei=populated["value"],
            nonce=populated["nonce"],
        )

        receipt = await rpc.wait_for_receipt(tx_hash)
    except Exception as e:
        chain_logger.log_transaction_failed(tx_hash, str(e))
        raise

    block_number = receipt.get("blockNumber")
    gas_used = receipt.get("gasUsed")
    chain_logger.log_transaction_confirmed(
        tx_hash,
        block_number=int(block_number, 16) if block_number else None,
        gas_used=int(gas_used, 16) if gas_used else None,
    )
    return receipt.get("transactionHash") or tx_hash


async def submit_transaction(
    provider_url: str,
    account: LocalAccount,
    tx: TransactionRequest,
) -> str:
    """Sign and send ``tx`` through ``provider_url``; return the confirmed hash."""
    async with JsonRpcClient(provider_url) as rpc:
        return await sign_and_submit(rpc, account, tx)
