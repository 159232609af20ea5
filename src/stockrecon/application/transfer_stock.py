"""Application service: Transfer Stock use case.

Moves units between two bins of the same product.  Both ledger lines
share one reference id; they differ by location and transaction type.
"""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.application.dto import AllocationSpec, LedgerLineDTO, ledger_line
from stockrecon.domain.exceptions import InsufficientStockError, ValidationError
from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry
from stockrecon.domain.model.value_objects import AllocationLine, Quantity
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.allocation_resolver import AllocationResolver
from stockrecon.domain.service.reference_numbers import ReferenceNumberGenerator
from stockrecon.domain.service.stock_ledger import StockLedger


class TransferStockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        product_id: str,
        source: AllocationSpec,
        destination: AllocationSpec,
        notes: str | None = None,
        performed_by: str = "system",
    ) -> list[LedgerLineDTO]:
        quantity = Quantity(source.quantity).value

        with self._uow_factory() as uow:
            resolver = AllocationResolver(uow.stock, uow.locations)
            src = resolver.resolve_line(product_id, _line(source, quantity))
            dst = resolver.resolve_line(product_id, _line(destination, quantity))
            if src == dst:
                raise ValidationError("Source and destination must differ")

            record = uow.stock.get(src)
            available = record.available_quantity if record is not None else 0
            if available < quantity:
                raise InsufficientStockError(
                    product_id, available=available, requested=quantity,
                    location=uow.locations.describe(src),
                )

            reference_id = ReferenceNumberGenerator(uow.counters).next("transfer")
            ledger = StockLedger(uow.ledger)
            lines: list[LedgerLineDTO] = []
            for key, delta in ((src, -quantity), (dst, quantity)):
                previous, _ = uow.stock.adjust(key, delta)
                entry = StockLedgerEntry.for_movement(
                    key,
                    delta,
                    previous,
                    reference_id=reference_id,
                    reference_type=ReferenceType.TRANSFER,
                    performed_by=performed_by,
                    reason=f"Stock transfer - {reference_id}",
                    notes=notes,
                )
                ledger.append(entry)
                lines.append(ledger_line(entry, uow.locations.describe(key)))
            uow.commit()
        return lines


def _line(spec: AllocationSpec, quantity: int) -> AllocationLine:
    return AllocationLine(
        location=spec.location, room=spec.room, rack=spec.rack, allocated_quantity=quantity
    )
