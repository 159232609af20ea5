"""CLI commands for sales invoices."""

from __future__ import annotations

import click

from stockrecon.application.change_status import ChangeInvoiceStatusHandler
from stockrecon.application.create_invoice import CreateInvoiceHandler
from stockrecon.application.delete_document import DeleteInvoiceHandler
from stockrecon.application.list_documents import ListInvoicesHandler
from stockrecon.application.show_document import ShowInvoiceHandler
from stockrecon.domain.exceptions import DomainException
from stockrecon.domain.model.document import Invoice
from stockrecon.domain.model.lifecycle import parse_status
from stockrecon.infrastructure.bootstrap import reconciliation_engine, uow_factory
from stockrecon.infrastructure.cli.display import (
    echo_document,
    echo_document_list,
    echo_ledger_lines,
)
from stockrecon.infrastructure.cli.parsing import parse_items

_INVOICE_STATUSES = sorted(s.value for s in Invoice.ALLOWED_STATUSES)


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--items", required=True, help="Items as 'Product:Qty[@Location/Room/Rack],...'.")
@click.option("--location", default=None, help="Location to draw unallocated items from.")
@click.option(
    "--reduce-stock/--no-reduce-stock",
    default=True,
    help="Whether the invoice draws its items from stock.",
)
@click.option("--number", default=None, help="Invoice number (generated when omitted).")
@click.option("--user", default="system", help="Who creates the invoice.")
def invoice_create(
    customer: str,
    items: str,
    location: str | None,
    reduce_stock: bool,
    number: str | None,
    user: str,
) -> None:
    """Create a draft invoice."""
    handler = CreateInvoiceHandler(uow_factory(), reconciliation_engine())

    try:
        dto = handler.handle(
            customer=customer,
            items=parse_items(items),
            location=location,
            reduce_stock=reduce_stock,
            invoice_number=number,
            performed_by=user,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_document(dto)


@click.command("status")
@click.option("--number", required=True, help="Invoice number.")
@click.option("--to", "status", required=True, type=click.Choice(_INVOICE_STATUSES))
@click.option("--user", default="system", help="Who changes the status.")
def invoice_status(number: str, status: str, user: str) -> None:
    """Move an invoice to another status."""
    handler = ChangeInvoiceStatusHandler(uow_factory(), reconciliation_engine())

    try:
        dto = handler.handle(number, parse_status(status), performed_by=user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_document(dto)


@click.command("delete")
@click.option("--number", required=True, help="Invoice number.")
@click.option("--user", default="system", help="Who deletes the invoice.")
def invoice_delete(number: str, user: str) -> None:
    """Delete a draft invoice, returning any stock it holds."""
    handler = DeleteInvoiceHandler(uow_factory(), reconciliation_engine())

    try:
        lines = handler.handle(number, performed_by=user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Invoice {number} deleted.")
    if lines:
        echo_ledger_lines(lines)


@click.command("show")
@click.option("--number", required=True, help="Invoice number.")
def invoice_show(number: str) -> None:
    """Show an invoice and its stock history."""
    handler = ShowInvoiceHandler(uow_factory())

    try:
        dto = handler.handle(number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_document(dto)


@click.command("list")
@click.option(
    "--status",
    default=None,
    type=click.Choice(_INVOICE_STATUSES),
    help="Only documents in this status.",
)
def invoice_list(status: str | None) -> None:
    """List invoices, oldest first."""
    handler = ListInvoicesHandler(uow_factory())
    echo_document_list(handler.handle(parse_status(status) if status else None))
