"""
tempwallet - single-use Ethereum wallets with client-side TTL.

Expiration and the used flag are enforced only inside this process; nothing
is enforced on-chain.

Example:
    from tempwallet import create_temp_wallet, build_payment_uri

    wallet = create_temp_wallet(ttl=3600, label="checkout")
    uri = build_payment_uri(wallet.address, 10**17)
    tx_hash = await wallet.send_transaction(provider_url, to=dest, value=10**16)
"""

from .config import TempWalletConfig, get_config, set_config
from .estimate import (
    GasCostEstimate,
    estimate_total_cost_wei,
    estimate_transaction_cost,
    estimate_with_margin_wei,
)
from .exceptions import (
    AlreadyUsedError,
    ConfirmationTimeoutError,
    ExpiredSessionError,
    InsufficientAfterBufferError,
    NoBalanceToSweepError,
    PermitSigningNotImplementedError,
    RPCError,
    TempWalletError,
    TransactionRevertedError,
)
from .permit2 import (
    PERMIT2_ADDRESS,
    Permit2Input,
    PermitSigner,
    SignedPermit2,
    build_permit2_typed_data,
    sign_permit2,
)
from .rpc_client import JsonRpcClient
from .safe import SafeTransactionPayload, build_safe_payment, build_safe_sweep
from .sweep import build_sweep_tx, send_sweep_tx
from .transactions import TransactionRequest
from .utils import build_payment_uri, format_ether, get_balance_wei, parse_ether
from .wallet import TempWallet, TempWalletMeta, create_temp_wallet

__version__ = "0.1.0"
__all__ = [
    # Wallet
    "TempWallet",
    "TempWalletMeta",
    "create_temp_wallet",
    # Sweep
    "build_sweep_tx",
    "send_sweep_tx",
    "TransactionRequest",
    # Gas
    "estimate_total_cost_wei",
    "estimate_with_margin_wei",
    "estimate_transaction_cost",
    "GasCostEstimate",
    # Safe
    "SafeTransactionPayload",
    "build_safe_payment",
    "build_safe_sweep",
    # Permit2
    "PERMIT2_ADDRESS",
    "Permit2Input",
    "PermitSigner",
    "SignedPermit2",
    "build_permit2_typed_data",
    "sign_permit2",
    # Utils
    "JsonRpcClient",
    "get_balance_wei",
    "build_payment_uri",
    "format_ether",
    "parse_ether",
    # Config
    "TempWalletConfig",
    "get_config",
    "set_config",
    # Exceptions
    "TempWalletError",
    "ExpiredSessionError",
    "AlreadyUsedError",
    "NoBalanceToSweepError",
    "InsufficientAfterBufferError",
    "PermitSigningNotImplementedError",
    "RPCError",
    "TransactionRevertedError",
    "ConfirmationTimeoutError",
]
