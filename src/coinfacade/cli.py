"""Typer-based CLI for order execution."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .platform import detect_platform
from .precision import RoundMode, format_decimal

if TYPE_CHECKING:
    from .facade import TradeFacade


# Import with local function to avoid circular imports
def _load_settings(config_path: Optional[Path] = None):
    from .config import load_settings
    return load_settings(config_path)


def _configure_logging(log_dir: Path | None = None):
    from .logging import configure_logging
    return configure_logging(log_dir)


def _build_facade(config_path: Optional[Path] = None) -> "TradeFacade":
    from .facade import TradeFacade
    return TradeFacade.from_settings(_load_settings(config_path))


app = typer.Typer(help="Unified order execution across crypto exchanges")
console = Console()
logger = logging.getLogger(__name__)


def main() -> None:
    _configure_logging(Path("logs"))
    app()


async def _with_facade(config: Optional[Path], call):
    facade = _build_facade(config)
    try:
        await facade.init()
        return await call(facade)
    finally:
        await facade.close()


def _run(config: Optional[Path], call):
    try:
        return asyncio.run(_with_facade(config, call))
    except Exception as e:
        logger.error("Command failed: %s", e, exc_info=True)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def balances(
    exchange: str = typer.Argument(..., help="Exchange name, e.g. Binance"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show available balances on an exchange."""
    result = _run(config, lambda facade: facade.query_all_balances(exchange))

    nonzero = {symbol: amount for symbol, amount in result.items() if amount}
    if not nonzero:
        console.print("[yellow]No balances found[/yellow]")
        return

    table = Table(title=f"{exchange} balances")
    table.add_column("Asset", style="cyan")
    table.add_column("Available", style="green", justify="right")
    for symbol in sorted(nonzero):
        table.add_row(symbol, f"{nonzero[symbol]:f}")
    console.print(table)


@app.command()
def place(
    exchange: str = typer.Argument(..., help="Exchange name"),
    pair: str = typer.Argument(..., help="Normalized pair, e.g. BTC_USDT"),
    price: str = typer.Argument(..., help="Limit price"),
    quantity: str = typer.Argument(..., help="Base quantity"),
    sell: bool = typer.Option(False, "--sell/--buy", help="Order side"),
    client_order_id: Optional[str] = typer.Option(None, help="Client order id"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Place a limit order."""
    order_id = _run(
        config,
        lambda facade: facade.place_order(exchange, pair, price, quantity, sell, client_order_id),
    )
    console.print(Panel.fit(
        f"[green]✓ Order placed[/green]\n"
        f"Exchange: {exchange}\n"
        f"Pair: {pair}\n"
        f"Side: {'sell' if sell else 'buy'}\n"
        f"Order ID: {order_id}",
        title="Place Order"
    ))


@app.command()
def cancel(
    exchange: str = typer.Argument(..., help="Exchange name"),
    pair: str = typer.Argument(..., help="Normalized pair"),
    order_id: str = typer.Argument(..., help="Order id"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Cancel an order."""
    cancelled = _run(config, lambda facade: facade.cancel_order(exchange, pair, order_id))
    if not cancelled:
        console.print(f"[red]✗ Order {order_id} was not cancelled[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Order {order_id} cancelled[/green]")


@app.command()
def query(
    exchange: str = typer.Argument(..., help="Exchange name"),
    pair: str = typer.Argument(..., help="Normalized pair"),
    order_id: str = typer.Argument(..., help="Order id"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show raw order information."""
    order = _run(config, lambda facade: facade.query_order(exchange, pair, order_id))
    if order is None:
        console.print(f"[yellow]Order {order_id} not found[/yellow]")
        raise typer.Exit(1)
    console.print_json(json.dumps(order, default=str))


@app.command()
def deposit_addresses(
    exchange: str = typer.Argument(..., help="Exchange name"),
    symbols: list[str] = typer.Argument(..., help="Asset symbols"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """List deposit addresses."""
    result = _run(config, lambda facade: facade.get_deposit_addresses(exchange, symbols))

    table = Table(title=f"{exchange} deposit addresses")
    table.add_column("Asset", style="cyan")
    table.add_column("Platform", style="magenta")
    table.add_column("Address", style="green")
    table.add_column("Memo", style="dim")
    for symbol, by_platform in sorted(result.items()):
        for platform, address in sorted(by_platform.items()):
            table.add_row(symbol, platform, address.address, address.memo or "")
    console.print(table)


@app.command()
def detect(
    address: str = typer.Argument(..., help="Withdrawal address"),
    symbol: str = typer.Argument(..., help="Asset symbol"),
) -> None:
    """Detect the platform a withdrawal should use."""
    platform = detect_platform(address, symbol)
    console.print(platform.value if platform else "default")


@app.command()
def format_number(
    value: str = typer.Argument(..., help="Number to format"),
    precision: int = typer.Argument(..., min=0, help="Decimal places"),
    ceil: bool = typer.Option(False, "--ceil/--floor", help="Rounding direction"),
) -> None:
    """Format a number to an exchange precision."""
    try:
        console.print(format_decimal(value, precision, RoundMode.CEIL if ceil else RoundMode.FLOOR))
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def dex_order(
    pair: str = typer.Argument(..., help="EOS-quoted pair, e.g. EIDOS_EOS"),
    price: str = typer.Argument(..., help="Limit price in EOS"),
    quantity: str = typer.Argument(..., help="Base quantity"),
    sell: bool = typer.Option(False, "--sell/--buy", help="Order side"),
    exchange: str = typer.Option("WhaleEx", help="DEX exchange name"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Build a DEX order action without sending it."""
    extended = _run(config, lambda facade: facade.create_order(exchange, pair, price, quantity, sell))
    console.print(f"Order ID: {extended.order_id}")
    console.print_json(json.dumps(extended.action.to_dict()))
