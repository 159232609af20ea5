"""Domain service: Allocation Resolver.

Turns "move N units of product P" into concrete per-bin movements.

Planned mode honours the bins the caller picked in an AllocationPlan,
but re-resolves every name and re-checks every bin against live stock:
time may have passed since the plan was computed.  Fallback mode walks
the product's bins in creation order.  Both modes are all-or-nothing per
product: they either return a complete list of movements or raise
without touching stock.
"""

from __future__ import annotations

import logging

from stockrecon.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    LocationNotFoundError,
)
from stockrecon.domain.model.stock import StockKey
from stockrecon.domain.model.value_objects import Allocation, AllocationLine, AllocationPlan
from stockrecon.domain.repository.location_repository import LocationRepository
from stockrecon.domain.repository.stock_repository import StockRepository

logger = logging.getLogger(__name__)


class AllocationResolver:

    def __init__(
        self,
        stock_repo: StockRepository,
        location_repo: LocationRepository,
    ) -> None:
        self._stock_repo = stock_repo
        self._location_repo = location_repo

    # --- Consumption (outward) ------------------------------------------------

    def consume(
        self,
        product_id: str,
        quantity: int,
        plan: AllocationPlan | None = None,
        already_consumed: dict[StockKey, int] | None = None,
        default_location: str | None = None,
        planned_quantity: int | None = None,
    ) -> list[Allocation]:
        """Pick bins to draw ``quantity`` units from.

        ``already_consumed`` is what the same document already holds per
        bin; in planned mode it is subtracted from each line's target so
        that growing an item only draws the extra units.

        ``planned_quantity`` is how much of ``quantity`` the plan covers
        (all of it when omitted).  The rest walks the bins as in fallback
        mode, after the planned draws.
        """
        if quantity <= 0:
            return []
        if plan is None or not plan.lines:
            return self._consume_fallback(product_id, quantity, default_location)

        planned = quantity if planned_quantity is None else max(0, min(planned_quantity, quantity))
        allocations = (
            self._consume_planned(product_id, planned, plan, already_consumed or {})
            if planned
            else []
        )
        if planned < quantity:
            taken = {a.key: -a.quantity for a in allocations}
            allocations += self._consume_fallback(
                product_id, quantity - planned, default_location, taken
            )
        return allocations

    def _consume_planned(
        self,
        product_id: str,
        quantity: int,
        plan: AllocationPlan,
        already_consumed: dict[StockKey, int],
    ) -> list[Allocation]:
        targets, paths = self._resolve_plan(product_id, plan)

        allocations: list[Allocation] = []
        remaining = quantity
        for key, target in targets.items():
            if remaining == 0:
                break
            headroom = target - already_consumed.get(key, 0)
            if headroom <= 0:
                continue
            take = min(headroom, remaining)
            record = self._stock_repo.get(key)
            available = record.available_quantity if record is not None else 0
            if available < take:
                raise InsufficientStockError(
                    product_id, available=available, requested=take, location=paths[key]
                )
            allocations.append(Allocation(key, -take, planned=True))
            remaining -= take

        if remaining > 0:
            raise InsufficientStockError(
                product_id, available=quantity - remaining, requested=quantity
            )
        logger.debug("planned consumption for %s: %s", product_id, allocations)
        return allocations

    def _consume_fallback(
        self,
        product_id: str,
        quantity: int,
        default_location: str | None,
        taken: dict[StockKey, int] | None = None,
    ) -> list[Allocation]:
        taken = taken or {}
        records = self._stock_repo.list_for_product(product_id)
        if default_location:
            location = self._location_repo.get_location_by_name(default_location)
            if location is None:
                raise LocationNotFoundError(product_id, default_location)
            records = [r for r in records if r.key.location_id == location.id]

        available = {r.key: r.available_quantity - taken.get(r.key, 0) for r in records}
        total = sum(qty for qty in available.values() if qty > 0)
        if total < quantity:
            raise InsufficientStockError(
                product_id, available=total, requested=quantity, location=default_location
            )

        allocations: list[Allocation] = []
        remaining = quantity
        for record in records:
            if remaining == 0:
                break
            take = min(available[record.key], remaining)
            if take <= 0:
                continue
            allocations.append(Allocation(record.key, -take))
            remaining -= take
        return allocations

    # --- Restoration (inward) -------------------------------------------------

    def restore(
        self,
        product_id: str,
        quantity: int,
        plan: AllocationPlan | None = None,
        already_consumed: dict[StockKey, int] | None = None,
        default_location: str | None = None,
    ) -> list[Allocation]:
        """Pick bins to return ``quantity`` units to.

        Units go back where this document took them from: bins the new
        plan no longer wants first, then the most recently drawn bins.
        """
        if quantity <= 0:
            return []
        consumed = already_consumed or {}
        targets: dict[StockKey, int] = {}
        if plan is not None and plan.lines:
            targets, _ = self._resolve_plan(product_id, plan)

        given: dict[StockKey, int] = {}
        remaining = quantity

        def give(key: StockKey, amount: int) -> None:
            nonlocal remaining
            amount = min(amount, remaining)
            if amount > 0:
                given[key] = given.get(key, 0) + amount
                remaining -= amount

        for key in reversed(list(consumed)):
            give(key, consumed[key] - targets.get(key, 0))
        for key in reversed(list(consumed)):
            give(key, consumed[key] - given.get(key, 0))

        if remaining > 0:
            give(self._restore_target(product_id, targets, default_location), remaining)

        return [Allocation(key, qty, planned=key in targets) for key, qty in given.items()]

    def _restore_target(
        self,
        product_id: str,
        targets: dict[StockKey, int],
        default_location: str | None,
    ) -> StockKey:
        if targets:
            return next(iter(targets))
        records = self._stock_repo.list_for_product(product_id)
        if default_location:
            location = self._location_repo.get_location_by_name(default_location)
            if location is None:
                raise LocationNotFoundError(product_id, default_location)
            records = [r for r in records if r.key.location_id == location.id]
            if not records:
                return StockKey(product_id, location.id)
        if not records:
            raise EntityNotFoundError(
                f"No stock location to return product '{product_id}' to"
            )
        return records[0].key

    # --- Name resolution ------------------------------------------------------

    def _resolve_plan(
        self, product_id: str, plan: AllocationPlan
    ) -> tuple[dict[StockKey, int], dict[StockKey, str]]:
        targets: dict[StockKey, int] = {}
        paths: dict[StockKey, str] = {}
        for line in plan.lines:
            key = self.resolve_line(product_id, line)
            targets[key] = targets.get(key, 0) + line.allocated_quantity
            paths[key] = line.path
        return targets, paths

    def resolve_line(self, product_id: str, line: AllocationLine) -> StockKey:
        """Map a line's location/room/rack names to a live StockKey."""
        location = self._location_repo.get_location_by_name(line.location)
        if location is None:
            raise LocationNotFoundError(product_id, line.location, line.room, line.rack)

        room_id = rack_id = None
        if line.room:
            room = self._location_repo.get_room_by_name(location.id, line.room)
            if room is None:
                raise LocationNotFoundError(product_id, line.location, line.room, line.rack)
            room_id = room.id
        if line.rack:
            rack = (
                self._location_repo.get_rack_by_name(room_id, line.rack)
                if room_id is not None
                else None
            )
            if rack is None:
                raise LocationNotFoundError(product_id, line.location, line.room, line.rack)
            rack_id = rack.id

        return StockKey(product_id, location.id, room_id, rack_id)
