"""CLI commands for the stock ledger."""

from __future__ import annotations

import click

from stockrecon.application.show_ledger import ShowLedgerHandler
from stockrecon.domain.exceptions import DomainException
from stockrecon.infrastructure.bootstrap import uow_factory
from stockrecon.infrastructure.cli.display import echo_ledger_lines


@click.command("show")
@click.option("--reference", default=None, help="Document or adjustment reference.")
@click.option("--product", default=None, help="Product ID; full history when no reference.")
def ledger_show(reference: str | None, product: str | None) -> None:
    """Show ledger entries for a reference and/or a product."""
    handler = ShowLedgerHandler(uow_factory())

    try:
        lines = handler.handle(reference_id=reference, product_id=product)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_ledger_lines(lines)
