"""
Pytest configuration for tempwallet tests.
"""
from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

import httpx
import pytest

# Add package source to path
package_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(package_src))

# Set test environment
for key in list(os.environ):
    if key.startswith("TEMPWALLET_"):
        del os.environ[key]

from tempwallet.config import RPCConfig, TempWalletConfig, reset_config, set_config
from tempwallet.rpc_client import JsonRpcClient


@pytest.fixture(autouse=True)
def fast_config():
    """Fresh global config with fast receipt polling for every test."""
    set_config(TempWalletConfig(
        rpc=RPCConfig(
            receipt_poll_interval_seconds=0.01,
            confirmation_timeout_seconds=1.0,
        ),
    ))
    yield
    reset_config()


@pytest.fixture
def sample_eth_address():
    """Valid Ethereum address for testing."""
    return "0x1234567890123456789012345678901234567890"


@pytest.fixture
def dead_address():
    return "0x000000000000000000000000000000000000dEaD"


@pytest.fixture
def sample_tx_hash():
    """Valid transaction hash for testing."""
    return "0x" + "a" * 64


class RpcFailure:
    """Scripted JSON-RPC error response."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message


class FakeNode:
    """In-process JSON-RPC node served through httpx.MockTransport."""

    def __init__(self):
        self.responses: Dict[str, Any] = {}
        self.calls: List[Tuple[str, list]] = []
        self.urls: List[str] = []

    def methods(self) -> List[str]:
        return [method for method, _ in self.calls]

    def fail(self, method: str, code: int, message: str) -> None:
        self.responses[method] = RpcFailure(code, message)

    def params_for(self, method: str) -> list:
        for called, params in self.calls:
            if called == method:
                return params
        raise AssertionError(f"{method} was never called")

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.calls.append((method, body["params"]))
        self.urls.append(str(request.url))

        if method not in self.responses:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": -32601, "message": f"method {method} not found"},
                },
            )

        result = self.responses[method]
        if callable(result):
            result = result(body["params"])
        if isinstance(result, RpcFailure):
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": result.code, "message": result.message},
                },
            )
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


@pytest.fixture
def fake_node(monkeypatch):
    """Route every JsonRpcClient to an in-process fake node."""
    node = FakeNode()

    def _get_client(self):
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(transport=httpx.MockTransport(node.handler))
        return self._http_client

    monkeypatch.setattr(JsonRpcClient, "_get_client", _get_client)
    return node


@pytest.fixture
def london_node(fake_node, sample_tx_hash):
    """Fake node answering everything a plain EIP-1559 send needs."""
    fake_node.responses.update({
        "eth_getTransactionCount": "0x0",
        "eth_chainId": "0x1",
        "eth_estimateGas": "0x5208",
        "eth_getBlockByNumber": {"number": "0x10", "baseFeePerGas": "0x3b9aca00"},
        "eth_maxPriorityFeePerGas": "0x59682f00",
        "eth_sendRawTransaction": sample_tx_hash,
        "eth_getTransactionReceipt": {
            "transactionHash": sample_tx_hash,
            "status": "0x1",
            "blockNumber": "0x10",
            "gasUsed": "0x5208",
        },
    })
    return fake_node
