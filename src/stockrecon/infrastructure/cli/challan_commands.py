"""CLI commands for delivery challans."""

from __future__ import annotations

import click

from stockrecon.application.change_status import ChangeChallanStatusHandler
from stockrecon.application.create_challan import CreateChallanHandler
from stockrecon.application.delete_document import DeleteChallanHandler
from stockrecon.application.list_documents import ListChallansHandler
from stockrecon.application.show_document import ShowChallanHandler
from stockrecon.application.update_challan import UpdateChallanItemsHandler
from stockrecon.domain.exceptions import DomainException
from stockrecon.domain.model.document import DeliveryChallan
from stockrecon.domain.model.lifecycle import parse_status
from stockrecon.infrastructure.bootstrap import reconciliation_engine, uow_factory
from stockrecon.infrastructure.cli.display import (
    echo_document,
    echo_document_list,
    echo_ledger_lines,
)
from stockrecon.infrastructure.cli.parsing import parse_items, parse_services

_CHALLAN_STATUSES = sorted(s.value for s in DeliveryChallan.ALLOWED_STATUSES)


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--department", required=True, help="Receiving department.")
@click.option("--destination", required=True, help="Delivery destination.")
@click.option("--spares", default=None, help="Spares as 'Product:Qty[@Location/Room/Rack],...'.")
@click.option("--services", default=None, help="Services as 'Description:Qty,...'.")
@click.option("--number", default=None, help="Challan number (generated when omitted).")
@click.option("--dispatched-through", default="", help="Carrier or vehicle.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.option("--user", default="system", help="Who creates the challan.")
def challan_create(
    customer: str,
    department: str,
    destination: str,
    spares: str | None,
    services: str | None,
    number: str | None,
    dispatched_through: str,
    notes: str | None,
    user: str,
) -> None:
    """Create a draft challan and draw its spares from stock."""
    handler = CreateChallanHandler(uow_factory(), reconciliation_engine())

    try:
        dto = handler.handle(
            customer=customer,
            department=department,
            destination=destination,
            spares=parse_items(spares) if spares else [],
            services=parse_services(services) if services else [],
            challan_number=number,
            dispatched_through=dispatched_through,
            notes=notes,
            performed_by=user,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_document(dto)


@click.command("update")
@click.option("--number", required=True, help="Challan number.")
@click.option("--spares", required=True, help="New spares list, replacing the old one.")
@click.option("--user", default="system", help="Who edits the challan.")
def challan_update(number: str, spares: str, user: str) -> None:
    """Replace a challan's spares; only the difference moves stock."""
    handler = UpdateChallanItemsHandler(uow_factory(), reconciliation_engine())

    try:
        dto = handler.handle(number, parse_items(spares), performed_by=user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_document(dto)


@click.command("status")
@click.option("--number", required=True, help="Challan number.")
@click.option("--to", "status", required=True, type=click.Choice(_CHALLAN_STATUSES))
@click.option("--user", default="system", help="Who changes the status.")
def challan_status(number: str, status: str, user: str) -> None:
    """Move a challan to another status."""
    handler = ChangeChallanStatusHandler(uow_factory(), reconciliation_engine())

    try:
        dto = handler.handle(number, parse_status(status), performed_by=user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_document(dto)


@click.command("delete")
@click.option("--number", required=True, help="Challan number.")
@click.option("--user", default="system", help="Who deletes the challan.")
def challan_delete(number: str, user: str) -> None:
    """Delete a draft challan, returning any stock it holds."""
    handler = DeleteChallanHandler(uow_factory(), reconciliation_engine())

    try:
        lines = handler.handle(number, performed_by=user)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Delivery challan {number} deleted.")
    if lines:
        echo_ledger_lines(lines)


@click.command("show")
@click.option("--number", required=True, help="Challan number.")
def challan_show(number: str) -> None:
    """Show a challan and its stock history."""
    handler = ShowChallanHandler(uow_factory())

    try:
        dto = handler.handle(number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_document(dto)


@click.command("list")
@click.option(
    "--status",
    default=None,
    type=click.Choice(_CHALLAN_STATUSES),
    help="Only documents in this status.",
)
def challan_list(status: str | None) -> None:
    """List delivery challans, oldest first."""
    handler = ListChallansHandler(uow_factory())
    echo_document_list(handler.handle(parse_status(status) if status else None))
