"""Parsing of item and location arguments typed on the command line.

Items:      PRODUCT:QTY[@LOCATION[/ROOM[/RACK]][=N][+LOCATION...=N]]
Services:   DESCRIPTION:QTY
Locations:  LOCATION[/ROOM[/RACK]]
"""

from __future__ import annotations

import click

from stockrecon.application.dto import AllocationSpec, ItemSpec


def _parse_quantity(raw: str, label: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid quantity '{raw}' for '{label}'.") from None


def parse_path(raw: str) -> tuple[str, str | None, str | None]:
    """Split 'Main/Room 1/Rack A' into (location, room, rack)."""
    parts = [part.strip() for part in raw.split("/")]
    if len(parts) > 3 or not all(parts):
        raise click.BadParameter(
            f"Invalid location '{raw}'. Expected 'Location[/Room[/Rack]]'."
        )
    location, room, rack = parts + [None] * (3 - len(parts))
    return location, room, rack


def _parse_allocations(raw: str, item_quantity: int, product: str) -> tuple[AllocationSpec, ...]:
    chunks = [chunk.strip() for chunk in raw.split("+")]
    allocations = []
    for chunk in chunks:
        path, _, qty_str = chunk.partition("=")
        if qty_str:
            quantity = _parse_quantity(qty_str, product)
        elif len(chunks) == 1:
            quantity = item_quantity
        else:
            raise click.BadParameter(
                f"Allocation '{chunk}' for '{product}' needs '=QTY' when splitting across bins."
            )
        location, room, rack = parse_path(path)
        allocations.append(AllocationSpec(location=location, room=room, rack=rack, quantity=quantity))
    return tuple(allocations)


def parse_items(raw: str) -> list[ItemSpec]:
    """Parse 'BRG-6204:3@Main/R1/A,SEAL-22:1' into stock-moving ItemSpecs."""
    specs: list[ItemSpec] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        item, _, where = chunk.partition("@")
        if ":" not in item:
            raise click.BadParameter(
                f"Invalid item format '{chunk}'. Expected 'Product:Quantity[@Location]'."
            )
        product, qty_str = item.rsplit(":", 1)
        product = product.strip()
        quantity = _parse_quantity(qty_str, product)
        allocations = _parse_allocations(where, quantity, product) if where else ()
        specs.append(
            ItemSpec(
                description=product,
                quantity=quantity,
                product_id=product,
                allocations=allocations,
            )
        )
    return specs


def parse_services(raw: str) -> list[ItemSpec]:
    """Parse 'Installation:1,Site visit:2' into free-text lines."""
    specs: list[ItemSpec] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if ":" not in chunk:
            raise click.BadParameter(
                f"Invalid service format '{chunk}'. Expected 'Description:Quantity'."
            )
        description, qty_str = chunk.rsplit(":", 1)
        specs.append(
            ItemSpec(
                description=description.strip(),
                quantity=_parse_quantity(qty_str, description),
            )
        )
    return specs
