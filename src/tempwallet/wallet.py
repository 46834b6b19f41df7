"""
Temp wallets: in-memory EOAs intended for single-use flows.

Keys are generated client-side and live only in this process. The ``used``
flag and ``expires_at`` are client-side semantics: nothing is enforced
on-chain, and anyone holding the key can still sign with it elsewhere. Two
concurrent sends on the same wallet may both pass the guard before either
completes.

Example:
    wallet = create_temp_wallet(ttl=3600, label="checkout")
    tx_hash = await wallet.send_transaction(
        "https://eth-mainnet.g.alchemy.com/v2/YOUR_KEY",
        to="0x742d35Cc6634C0532925a3b8D4C9db96C4b4d8b6",
        value=parse_ether("0.1"),
    )
    assert wallet.meta.used
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from .exceptions import AlreadyUsedError, ExpiredSessionError
from .logging_utils import get_wallet_logger
from .transactions import TransactionRequest, submit_transaction

logger = logging.getLogger(__name__)


@dataclass
class TempWalletMeta:
    """Client-side lifecycle metadata of a temp wallet."""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None
    label: Optional[str] = None
    used: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "label": self.label,
            "used": self.used,
        }


class TempWallet:
    """An in-memory EOA that signs at most one transaction."""

    def __init__(self, account: LocalAccount, meta: TempWalletMeta):
        self._account = account
        self.meta = meta

    @property
    def address(self) -> str:
        """The wallet's checksummed address."""
        return self._account.address

    @property
    def account(self) -> LocalAccount:
        return self._account

    @property
    def private_key(self) -> str:
        """Hex private key, e.g. for a later send_sweep_tx."""
        return Web3.to_hex(self._account.key)

    def is_expired(self) -> bool:
        """True once the current time is past ``expires_at``; never without a TTL."""
        if self.meta.expires_at is None:
            return False
        return datetime.now(timezone.utc) > self.meta.expires_at

    def mark_as_used(self) -> None:
        """Mark the wallet as used. Irreversible."""
        self.meta.used = True

    async def send_transaction(
        self,
        provider_url: str,
        to: Optional[str],
        value: int = 0,
        data: Union[str, bytes] = "0x",
        gas_limit: Optional[int] = None,
        max_fee_per_gas: Optional[int] = None,
        max_priority_fee_per_gas: Optional[int] = None,
        nonce: Optional[int] = None,
        chain_id: Optional[int] = None,
    ) -> str:
        """
        Sign and send this wallet's single transaction.

        Args:
            provider_url: JSON-RPC endpoint to submit through
            to: Recipient address
            value: Amount in wei
            data: Optional calldata
            gas_limit, max_fee_per_gas, max_priority_fee_per_gas, nonce, chain_id:
                Optional overrides; unset fields are filled from the node

        Returns:
            The confirmed transaction hash

        Raises:
            AlreadyUsedError: If the wallet already sent a transaction
            ExpiredSessionError: If the wallet's TTL has passed
        """
        if self.meta.used:
            get_wallet_logger().log_guard_rejected(self.address, "already used")
            raise AlreadyUsedError(address=self.address)
        if self.is_expired():
            get_wallet_logger().log_guard_rejected(self.address, "session expired")
            raise ExpiredSessionError(
                address=self.address,
                expired_at=self.meta.expires_at.isoformat(),
            )

        tx = TransactionRequest(
            to=to,
            value=value,
            data=data,
            gas_limit=gas_limit,
            max_fee_per_gas=max_fee_per_gas,
            max_priority_fee_per_gas=max_priority_fee_per_gas,
            nonce=nonce,
            chain_id=chain_id,
        )
        tx_hash = await submit_transaction(provider_url, self._account, tx)
        self.mark_as_used()
        return tx_hash

    def to_dict(self) -> Dict[str, Any]:
        """Public view of the wallet. Never includes the key."""
        return {"address": self.address, **self.meta.to_dict()}

    def __repr__(self) -> str:
        return (
            f"TempWallet(address={self.address!r}, label={self.meta.label!r}, "
            f"used={self.meta.used}, expired={self.is_expired()})"
        )


def create_temp_wallet(ttl: Optional[float] = None, label: Optional[str] = None) -> TempWallet:
    """
    Create a new temp wallet for single-use flows.

    Args:
        ttl: Time to live in seconds. A falsy ttl means the wallet never expires.
        label: Optional label for UI/logging purposes

    Returns:
        A fresh, unused TempWallet
    """
    account = Account.create()
    now = datetime.now(timezone.utc)
    meta = TempWalletMeta(
        created_at=now,
        expires_at=now + timedelta(seconds=ttl) if ttl else None,
        label=label,
    )
    get_wallet_logger().log_wallet_created(account.address, meta.expires_at, label)
    return TempWallet(account, meta)
