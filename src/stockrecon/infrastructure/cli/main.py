import click

from stockrecon.infrastructure.bootstrap import LOG_LEVEL_ENV
from stockrecon.infrastructure.cli.challan_commands import (
    challan_create,
    challan_delete,
    challan_list,
    challan_show,
    challan_status,
    challan_update,
)
from stockrecon.infrastructure.cli.invoice_commands import (
    invoice_create,
    invoice_delete,
    invoice_list,
    invoice_show,
    invoice_status,
)
from stockrecon.infrastructure.cli.ledger_commands import ledger_show
from stockrecon.infrastructure.cli.location_commands import location_add
from stockrecon.infrastructure.cli.stock_commands import (
    stock_adjust,
    stock_show,
    stock_transfer,
)
from stockrecon.infrastructure.logging_setup import setup_logging


@click.group()
@click.option(
    "--log-level",
    envvar=LOG_LEVEL_ENV,
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity (also read from STOCKRECON_LOG_LEVEL).",
)
def cli(log_level: str) -> None:
    """stockrecon — stock ledger and document reconciliation"""
    setup_logging(log_level)


@cli.group()
def location() -> None:
    """Manage stock locations."""


@cli.group()
def stock() -> None:
    """Adjust, transfer and inspect stock."""


@cli.group()
def ledger() -> None:
    """Inspect the stock ledger."""


@cli.group()
def challan() -> None:
    """Manage delivery challans."""


@cli.group()
def invoice() -> None:
    """Manage invoices."""


# Register subcommands
location.add_command(location_add)
stock.add_command(stock_adjust)
stock.add_command(stock_transfer)
stock.add_command(stock_show)
ledger.add_command(ledger_show)
challan.add_command(challan_create)
challan.add_command(challan_update)
challan.add_command(challan_status)
challan.add_command(challan_delete)
challan.add_command(challan_show)
challan.add_command(challan_list)
invoice.add_command(invoice_create)
invoice.add_command(invoice_status)
invoice.add_command(invoice_delete)
invoice.add_command(invoice_show)
invoice.add_command(invoice_list)
