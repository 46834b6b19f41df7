"""
tempwallet command-line interface.

Usage:
    tempwallet [OPTIONS] COMMAND [ARGS]...
"""
from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation
from typing import NoReturn

import click
import httpx
from eth_account import Account
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from web3 import Web3

from .estimate import ETH_TRANSFER_GAS, estimate_total_cost_wei, estimate_with_margin_wei
from .exceptions import TempWalletError
from .logging_utils import setup_logging
from .sweep import build_sweep_tx, send_sweep_tx
from .utils import build_payment_uri, format_ether, get_balance_wei
from .wallet import create_temp_wallet

console = Console()

# Malformed keys and amounts
INPUT_ERRORS = (ValueError, InvalidOperation)


def _fail(error: object) -> NoReturn:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise SystemExit(1)


def _to_wei(amount: str, unit: str = "ether") -> int:
    try:
        return int(Web3.to_wei(Decimal(amount), unit))
    except INPUT_ERRORS:
        _fail(f"invalid {unit} amount: {amount!r}")


rpc_url_option = click.option(
    "--rpc-url",
    envvar="TEMPWALLET_RPC_URL",
    required=True,
    help="JSON-RPC endpoint URL",
)


@click.group()
@click.version_option(package_name="tempwallet", message="%(prog)s %(version)s")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose: bool):
    """tempwallet - single-use Ethereum wallets, sweeps and gas math."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging("DEBUG" if verbose else "WARNING")


@cli.command()
@click.option("--ttl", type=float, default=None, help="Lifetime in seconds")
@click.option("--label", default=None, help="Label for logs")
@click.option("--show-key", is_flag=True, help="Print the private key")
def create(ttl: float | None, label: str | None, show_key: bool):
    """Generate a temp wallet."""
    wallet = create_temp_wallet(ttl=ttl, label=label)

    console.print("\n[bold blue]Temp Wallet[/bold blue]\n")
    console.print(f"Address: [cyan]{wallet.address}[/cyan]")
    expires = wallet.meta.expires_at.isoformat() if wallet.meta.expires_at else "never"
    console.print(f"Expires: {expires}")
    if label:
        console.print(f"Label: {label}")
    if show_key:
        console.print(f"Private Key: [red]{wallet.private_key}[/red]")
        console.print("[yellow]Anyone with this key controls the funds.[/yellow]")
    console.print()


@cli.command()
@click.argument("address")
@rpc_url_option
def balance(address: str, rpc_url: str):
    """Show the ETH balance of ADDRESS."""
    try:
        wei = asyncio.run(get_balance_wei(rpc_url, address))
    except (TempWalletError, httpx.HTTPError) as e:
        _fail(e)

    console.print(f"{wei} wei ([cyan]{format_ether(wei)} ETH[/cyan])")


@cli.command()
@click.option("--to", "to_address", required=True, help="Destination address")
@click.option(
    "--private-key",
    envvar="TEMPWALLET_PRIVATE_KEY",
    required=True,
    help="Key of the address to sweep",
)
@click.option("--buffer-eth", default="0", help="ETH to leave behind for gas")
@click.option("--dry-run", is_flag=True, help="Build the sweep without sending it")
@rpc_url_option
def sweep(to_address: str, private_key: str, buffer_eth: str, dry_run: bool, rpc_url: str):
    """Sweep the full balance of a key to another address."""
    try:
        from_address = Account.from_key(private_key).address
    except INPUT_ERRORS:
        _fail("invalid private key")
    buffer_wei = _to_wei(buffer_eth)

    async def _run():
        tx = await build_sweep_tx(
            from_address=from_address,
            to=to_address,
            provider_url=rpc_url,
            gas_limit_buffer=buffer_wei,
        )
        console.print(
            f"Sweeping [cyan]{format_ether(tx.value)} ETH[/cyan] "
            f"from {from_address} to {to_address}"
        )
        if dry_run:
            return None
        return await send_sweep_tx(rpc_url, private_key, tx)

    try:
        tx_hash = asyncio.run(_run())
    except (TempWalletError, httpx.HTTPError) as e:
        _fail(e)

    if tx_hash:
        console.print(f"[green]✓ Sweep confirmed: {tx_hash}[/green]")
    else:
        console.print("[yellow]Dry run, nothing sent[/yellow]")


@cli.command()
@click.option("--gas-units", type=int, default=ETH_TRANSFER_GAS, help="Gas units")
@click.option("--gas-price-gwei", default="20", help="Gas price in gwei")
@click.option("--margin-bps", type=int, default=0, help="Safety margin in basis points")
def estimate(gas_units: int, gas_price_gwei: str, margin_bps: int):
    """Estimate a transaction's gas cost."""
    gas_price_wei = _to_wei(gas_price_gwei, "gwei")
    total = estimate_total_cost_wei(gas_units, gas_price_wei)
    with_margin = estimate_with_margin_wei(gas_units, gas_price_wei, margin_bps)

    table = Table(title="Gas Estimate")
    table.add_column("Item", style="cyan")
    table.add_column("Wei", justify="right")
    table.add_column("ETH", justify="right")
    table.add_row("Total", str(total), format_ether(total))
    table.add_row(f"With {margin_bps} bps margin", str(with_margin), format_ether(with_margin))
    console.print(table)


@cli.command()
@click.argument("address")
@click.option("--value-eth", default=None, help="Amount to request in ETH")
def uri(address: str, value_eth: str | None):
    """Print a payment URI for ADDRESS."""
    wei = _to_wei(value_eth) if value_eth else None
    click.echo(build_payment_uri(address, wei))


if __name__ == "__main__":
    cli()
