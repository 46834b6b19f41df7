"""
JSON-RPC client for the single endpoint a temp wallet talks to.

One client per endpoint URL, opened for the duration of an operation and
closed afterwards. No failover, pooling across calls or retry: any transport
failure propagates to the caller unchanged.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from .config import RPCConfig, get_config
from .exceptions import ConfirmationTimeoutError, RPCError, TransactionRevertedError
from .logging_utils import get_wallet_logger

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """JSON-RPC client for blockchain interaction."""

    def __init__(
        self,
        rpc_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        config: Optional[RPCConfig] = None,
    ):
        self._rpc_url = rpc_url
        self._config = config or get_config().rpc
        self._http_client = http_client
        self._owns_client = http_client is None
        self._request_id = 0

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self._config.timeout_seconds,
                    connect=self._config.connect_timeout_seconds,
                ),
            )
        return self._http_client

    async def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            The "result" member of the response

        Raises:
            RPCError: If the node answers with an error object
            httpx.HTTPError: On transport or HTTP status failures
        """
        self._request_id += 1
        request_id = self._request_id
        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params or [],
        }

        chain_logger = get_wallet_logger()
        start_time = time.monotonic()
        try:
            response = await self._get_client().post(
                self._rpc_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            chain_logger.log_rpc_call(
                method,
                self._rpc_url,
                request_id,
                (time.monotonic() - start_time) * 1000,
                success=False,
                error_message=str(e),
            )
            raise

        duration_ms = (time.monotonic() - start_time) * 1000

        if "error" in result:
            error = result["error"] or {}
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            chain_logger.log_rpc_call(
                method, self._rpc_url, request_id, duration_ms,
                success=False, error_message=message,
            )
            raise RPCError(
                message=f"RPC error: {message}",
                method=method,
                code=error.get("code") if isinstance(error, dict) else None,
                data=error.get("data") if isinstance(error, dict) else None,
            )

        chain_logger.log_rpc_call(method, self._rpc_url, request_id, duration_ms, success=True)
        return result.get("result")

    async def get_chain_id(self) -> int:
        """Get chain ID."""
        result = await self.call("eth_chainId")
        return int(result, 16)

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """Get native token balance for address in wei."""
        result = await self.call("eth_getBalance", [address, block])
        return int(result, 16)

    async def get_nonce(self, address: str, block: str = "pending") -> int:
        """Get transaction count (nonce) for address."""
        result = await self.call("eth_getTransactionCount", [address, block])
        return int(result, 16)

    async def get_gas_price(self) -> int:
        """Get current gas price in wei."""
        result = await self.call("eth_gasPrice")
        return int(result, 16)

    async def get_max_priority_fee(self) -> int:
        """Get max priority fee for EIP-1559."""
        try:
            result = await self.call("eth_maxPriorityFeePerGas")
            return int(result, 16)
        except RPCError:
            # Fallback for chains that don't support this
            return get_config().gas.fallback_priority_fee_wei

    async def get_base_fee(self) -> Optional[int]:
        """Get current base fee from latest block, None on pre-London chains."""
        block = await self.call("eth_getBlockByNumber", ["latest", False])
        if block and block.get("baseFeePerGas") is not None:
            return int(block["baseFeePerGas"], 16)
        return None

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        """Estimate gas for a transaction."""
        result = await self.call("eth_estimateGas", [tx])
        return int(result, 16)

    async def send_raw_transaction(self, signed_tx: str) -> str:
        """Broadcast signed transaction."""
        if not signed_tx.startswith("0x"):
            signed_tx = "0x" + signed_tx
        return await self.call("eth_sendRawTransaction", [signed_tx])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        """Get transaction receipt."""
        return await self.call("eth_getTransactionReceipt", [tx_hash])

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout_seconds: Optional[float] = None,
        poll_interval_seconds: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Poll until the transaction is mined.

        Raises:
            TransactionRevertedError: If the receipt has status 0
            ConfirmationTimeoutError: If no receipt appears in time
        """
        timeout = (
            timeout_seconds
            if timeout_seconds is not None
            else self._config.confirmation_timeout_seconds
        )
        interval = (
            poll_interval_seconds
            if poll_interval_seconds is not None
            else self._config.receipt_poll_interval_seconds
        )

        loop = asyncio.get_running_loop()
        start_time = loop.time()

        while True:
            receipt = await self.get_transaction_receipt(tx_hash)

            if receipt:
                block_number = receipt.get("blockNumber")
                block = int(block_number, 16) if block_number else None
                # Pre-Byzantium receipts carry "root" and a null status
                status = receipt.get("status")
                if status is not None and int(status, 16) == 0:
                    raise TransactionRevertedError(tx_hash, block_number=block)
                logger.debug(f"Transaction {tx_hash} mined in block {block}")
                return receipt

            if loop.time() - start_time >= timeout:
                raise ConfirmationTimeoutError(tx_hash, timeout)

            await asyncio.sleep(interval)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client and self._owns_client:
            await self._http_client.aclose()
        self._http_client = None

    async def __aenter__(self) -> "JsonRpcClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
