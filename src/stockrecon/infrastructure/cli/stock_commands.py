"""CLI commands for bin-level stock."""

from __future__ import annotations

import click

from stockrecon.application.adjust_stock import AdjustmentType, AdjustStockHandler
from stockrecon.application.dto import AllocationSpec
from stockrecon.application.show_stock import ShowStockHandler
from stockrecon.application.transfer_stock import TransferStockHandler
from stockrecon.domain.exceptions import DomainException
from stockrecon.infrastructure.bootstrap import uow_factory
from stockrecon.infrastructure.cli.display import echo_ledger_lines
from stockrecon.infrastructure.cli.parsing import parse_path


@click.command("adjust")
@click.option("--product", required=True, help="Product id.")
@click.option("--at", "path", required=True, help="Bin as 'Location[/Room[/Rack]]'.")
@click.option(
    "--type",
    "adjustment_type",
    required=True,
    type=click.Choice([t.value for t in AdjustmentType]),
    help="Kind of adjustment.",
)
@click.option("--quantity", required=True, type=int, help="Units (or new count for 'set').")
@click.option("--reason", default="", help="Why the stock is being adjusted.")
@click.option("--user", default="system", help="Who performs the adjustment.")
def stock_adjust(
    product: str, path: str, adjustment_type: str, quantity: int, reason: str, user: str
) -> None:
    """Add, subtract, recount, reserve or release stock in one bin."""
    location, room, rack = parse_path(path)
    handler = AdjustStockHandler(uow_factory())

    try:
        line = handler.handle(
            product,
            location,
            AdjustmentType(adjustment_type),
            quantity,
            room=room,
            rack=rack,
            reason=reason,
            performed_by=user,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if line is None:
        click.echo("Stock already at that level; nothing recorded.")
        return
    echo_ledger_lines([line])


@click.command("transfer")
@click.option("--product", required=True, help="Product id.")
@click.option("--from", "source", required=True, help="Source bin 'Location[/Room[/Rack]]'.")
@click.option("--to", "destination", required=True, help="Destination bin.")
@click.option("--quantity", required=True, type=int, help="Units to move.")
@click.option("--notes", default=None, help="Free-text notes for the ledger.")
@click.option("--user", default="system", help="Who performs the transfer.")
def stock_transfer(
    product: str, source: str, destination: str, quantity: int, notes: str | None, user: str
) -> None:
    """Move stock of one product between two bins."""
    src = parse_path(source)
    dst = parse_path(destination)
    handler = TransferStockHandler(uow_factory())

    try:
        lines = handler.handle(
            product,
            AllocationSpec(location=src[0], room=src[1], rack=src[2], quantity=quantity),
            AllocationSpec(location=dst[0], room=dst[1], rack=dst[2], quantity=quantity),
            notes=notes,
            performed_by=user,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_ledger_lines(lines)


@click.command("show")
@click.option("--product", default=None, help="Only show this product.")
def stock_show(product: str | None) -> None:
    """Show stock per bin."""
    handler = ShowStockHandler(uow_factory())
    lines = handler.handle(product)

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(f"{'Product':<16} {'Location':<30} {'Total':>8} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 78)
    for line in lines:
        click.echo(
            f"{line.product_id:<16} {line.location:<30} {line.quantity:>8} "
            f"{line.reserved:>10} {line.available:>10}"
        )
    if product:
        click.echo("-" * 78)
        click.echo(f"{'Available across all bins':<58} {handler.available(product):>20}")
