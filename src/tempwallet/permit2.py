"""Permit2 (Uniswap) signing extension point.

tempwallet does not bundle a Permit2 / EIP-712 signing implementation.
``sign_permit2`` fails with PermitSigningNotImplementedError unless the caller
supplies a PermitSigner. ``build_permit2_typed_data`` documents the typed-data
shape such a signer is expected to sign.

A signer backed by eth_account could look like:

    class LocalPermitSigner:
        def __init__(self, nonce: int):
            self.nonce = nonce

        async def sign(self, wallet, permit):
            typed = build_permit2_typed_data(permit, nonce=self.nonce)
            signed = wallet.account.sign_typed_data(full_message=typed)
            return SignedPermit2(signature=Web3.to_hex(signed.signature), payload=typed)

References:
- https://github.com/Uniswap/permit2
- https://docs.uniswap.org/contracts/permit2/overview
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, runtime_checkable

from .exceptions import PermitSigningNotImplementedError

if TYPE_CHECKING:
    from .wallet import TempWallet


# Canonical Permit2 address, same on all EVM chains (CREATE2)
PERMIT2_ADDRESS = "0x000000000022D473030F116dDEE9F6B43aC78BA3"

PERMIT2_DOMAIN_NAME = "Permit2"

PERMIT2_TYPES: Dict[str, Any] = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
    "PermitDetails": [
        {"name": "token", "type": "address"},
        {"name": "amount", "type": "uint160"},
        {"name": "expiration", "type": "uint48"},
        {"name": "nonce", "type": "uint48"},
    ],
    "PermitSingle": [
        {"name": "details", "type": "PermitDetails"},
        {"name": "spender", "type": "address"},
        {"name": "sigDeadline", "type": "uint256"},
    ],
}


@dataclass
class Permit2Input:
    """One-time exact-amount Permit2 approval request."""
    token: str
    amount: int  # uint160, token's smallest unit
    spender: str
    deadline: int  # unix seconds
    chain_id: int


@dataclass
class SignedPermit2:
    """Signature plus the typed-data payload that was signed."""
    signature: str
    payload: Dict[str, Any]


@runtime_checkable
class PermitSigner(Protocol):
    """Signing backend for Permit2 typed data."""

    async def sign(self, wallet: "TempWallet", permit: Permit2Input) -> SignedPermit2:
        ...


class UnsupportedPermitSigner:
    """Placeholder signer: Permit2 signing is not available."""

    async def sign(self, wallet: "TempWallet", permit: Permit2Input) -> SignedPermit2:
        raise PermitSigningNotImplementedError(
            details={"token": permit.token, "chain_id": permit.chain_id}
        )


def build_permit2_typed_data(permit: Permit2Input, nonce: int = 0) -> Dict[str, Any]:
    """Build the EIP-712 PermitSingle typed data for ``permit``.

    The permit's deadline is used both as the allowance expiration and the
    signature deadline. ``nonce`` must be the owner's current Permit2 nonce
    for (token, spender), read from Permit2.allowance().
    """
    return {
        "types": PERMIT2_TYPES,
        "primaryType": "PermitSingle",
        "domain": {
            "name": PERMIT2_DOMAIN_NAME,
            "chainId": permit.chain_id,
            "verifyingContract": PERMIT2_ADDRESS,
        },
        "message": {
            "details": {
                "token": permit.token,
                "amount": permit.amount,
                "expiration": permit.deadline,
                "nonce": nonce,
            },
            "spender": permit.spender,
            "sigDeadline": permit.deadline,
        },
    }


async def sign_permit2(
    wallet: "TempWallet",
    permit: Permit2Input,
    signer: Optional[PermitSigner] = None,
) -> SignedPermit2:
    """Sign a Permit2 permit with ``wallet``.

    Raises:
        PermitSigningNotImplementedError: Always, unless a signer is supplied
    """
    backend = signer if signer is not None else UnsupportedPermitSigner()
    return await backend.sign(wallet, permit)
