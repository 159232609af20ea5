"""CLI commands for stock locations."""

from __future__ import annotations

import click

from stockrecon.application.add_location import AddLocationHandler
from stockrecon.domain.exceptions import DomainException
from stockrecon.infrastructure.bootstrap import uow_factory


@click.command("add")
@click.option("--location", required=True, help="Location name.")
@click.option("--room", default=None, help="Room inside the location.")
@click.option("--rack", default=None, help="Rack inside the room.")
def location_add(location: str, room: str | None, rack: str | None) -> None:
    """Register a location, optionally with a room and rack."""
    handler = AddLocationHandler(uow_factory())

    try:
        path = handler.handle(location, room=room, rack=rack)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Location '{path}' ready.")
