"""Application service: Adjust Stock use case.

Manual corrections outside any document: receive (add), write off
(subtract), recount (set), and hold back / free up stock (reserve,
release).  Every adjustment gets its own reference number and exactly
one ledger entry; a recount that changes nothing writes none.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from stockrecon.application.dto import LedgerLineDTO, ledger_line
from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry, TransactionType
from stockrecon.domain.model.value_objects import AllocationLine, Quantity
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.allocation_resolver import AllocationResolver
from stockrecon.domain.service.reference_numbers import ReferenceNumberGenerator
from stockrecon.domain.service.stock_ledger import StockLedger


class AdjustmentType(Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    SET = "set"
    RESERVE = "reserve"
    RELEASE = "release"


class AdjustStockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        product_id: str,
        location: str,
        adjustment_type: AdjustmentType,
        quantity: int,
        room: str | None = None,
        rack: str | None = None,
        reason: str = "",
        performed_by: str = "system",
    ) -> LedgerLineDTO | None:
        """Apply one adjustment and return the ledger line written, if any."""
        if not product_id or not product_id.strip():
            raise ValidationError("Product is required")
        if adjustment_type is AdjustmentType.SET:
            if quantity < 0:
                raise ValidationError("Stock cannot be set to a negative quantity")
        else:
            quantity = Quantity(quantity).value

        with self._uow_factory() as uow:
            resolver = AllocationResolver(uow.stock, uow.locations)
            key = resolver.resolve_line(
                product_id,
                AllocationLine(location=location, room=room, rack=rack, allocated_quantity=quantity),
            )

            if adjustment_type in (AdjustmentType.RESERVE, AdjustmentType.RELEASE):
                entry = self._reserve_or_release(uow, key, adjustment_type, quantity, reason, performed_by)
            else:
                entry = self._move(uow, key, adjustment_type, quantity, reason, performed_by)

            if entry is None:
                return None
            StockLedger(uow.ledger).append(entry)
            line = ledger_line(entry, uow.locations.describe(key))
            uow.commit()
        return line

    @staticmethod
    def _move(uow, key, adjustment_type, quantity, reason, performed_by) -> StockLedgerEntry | None:
        if adjustment_type is AdjustmentType.ADD:
            delta = quantity
        elif adjustment_type is AdjustmentType.SUBTRACT:
            delta = -quantity
        else:
            record = uow.stock.get(key)
            delta = quantity - (record.quantity if record is not None else 0)
        if delta == 0:
            return None

        previous, _ = uow.stock.adjust(key, delta)
        reference_id = ReferenceNumberGenerator(uow.counters).next("adjustment")
        return StockLedgerEntry(
            product_id=key.product_id,
            location_id=key.location_id,
            room_id=key.room_id,
            rack_id=key.rack_id,
            transaction_type=TransactionType.ADJUSTMENT,
            quantity=delta,
            previous_quantity=previous,
            resulting_quantity=previous + delta,
            reference_id=reference_id,
            reference_type=ReferenceType.ADJUSTMENT,
            performed_by=performed_by,
            reason=reason or f"Stock {adjustment_type.value}",
        )

    @staticmethod
    def _reserve_or_release(uow, key, adjustment_type, quantity, reason, performed_by) -> StockLedgerEntry:
        if adjustment_type is AdjustmentType.RESERVE:
            delta, tx_type = quantity, TransactionType.RESERVATION
            label = "Stock Reserved"
        else:
            delta, tx_type = -quantity, TransactionType.RELEASE
            label = "Reserved Stock Released"
        previous, _ = uow.stock.adjust_reserved(key, delta)

        reference_id = ReferenceNumberGenerator(uow.counters).next("reservation")
        return StockLedgerEntry(
            product_id=key.product_id,
            location_id=key.location_id,
            room_id=key.room_id,
            rack_id=key.rack_id,
            transaction_type=tx_type,
            quantity=delta,
            previous_quantity=previous,
            resulting_quantity=previous + delta,
            reference_id=reference_id,
            reference_type=ReferenceType.RESERVATION,
            performed_by=performed_by,
            reason=f"{label} - {reason}" if reason else label,
        )
