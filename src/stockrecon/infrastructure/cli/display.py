"""Shared formatting for ledger lines and documents."""

from __future__ import annotations

import click

from stockrecon.application.dto import DocumentDTO, LedgerLineDTO


def echo_ledger_lines(lines: list[LedgerLineDTO]) -> None:
    if not lines:
        click.echo("No stock movements.")
        return
    click.echo(
        f"  {'Reference':<20} {'Product':<16} {'Location':<24} {'Type':<11} "
        f"{'Qty':>6} {'Before':>7} {'After':>7}"
    )
    click.echo(f"  {'-'*97}")
    for line in lines:
        click.echo(
            f"  {line.reference_id:<20} {line.product_id:<16} {line.location:<24} "
            f"{line.transaction_type:<11} {line.quantity:>+6} "
            f"{line.previous_quantity:>7} {line.resulting_quantity:>7}"
        )


def echo_document(dto: DocumentDTO) -> None:
    label = "Delivery challan" if dto.kind == "challan" else "Invoice"
    held = "stock consumed" if dto.stock_consumed else "no stock held"
    click.echo(f"{label} {dto.number}  (status={dto.status}, {held})")
    click.echo(f"Customer: {dto.customer}")
    click.echo()
    click.echo(f"  {'Item':<30} {'Product':<16} {'Qty':>5}")
    click.echo(f"  {'-'*53}")
    for item in dto.items:
        click.echo(f"  {item.description:<30} {item.product_id or '-':<16} {item.quantity:>5}")
    click.echo()
    echo_ledger_lines(dto.movements)


def echo_document_list(dtos: list[DocumentDTO]) -> None:
    if not dtos:
        click.echo("No documents found.")
        return
    click.echo(f"  {'Number':<20} {'Customer':<24} {'Status':<10} {'Items':>5}  Stock")
    click.echo(f"  {'-'*70}")
    for dto in dtos:
        held = "consumed" if dto.stock_consumed else "-"
        click.echo(
            f"  {dto.number:<20} {dto.customer:<24} {dto.status:<10} {len(dto.items):>5}  {held}"
        )
