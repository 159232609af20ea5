"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stockrecon.domain.model.document import DeliveryChallan, DocumentItem, Invoice
from stockrecon.domain.model.ledger import StockLedgerEntry
from stockrecon.domain.model.value_objects import AllocationLine, AllocationPlan


@dataclass(frozen=True)
class AllocationSpec:
    """Input: one bin picked for an item (names, as typed by the user)."""

    location: str
    quantity: int
    room: str | None = None
    rack: str | None = None


@dataclass(frozen=True)
class ItemSpec:
    """Input: a document line as requested by the caller."""

    description: str
    quantity: int
    product_id: str | None = None
    allocations: tuple[AllocationSpec, ...] = ()

    def to_item(self) -> DocumentItem:
        plan = None
        if self.allocations:
            lines = tuple(
                AllocationLine(
                    location=a.location,
                    room=a.room,
                    rack=a.rack,
                    allocated_quantity=a.quantity,
                )
                for a in self.allocations
            )
            plan = AllocationPlan(
                lines=lines,
                can_fulfill=sum(a.quantity for a in self.allocations) >= self.quantity,
            )
        return DocumentItem(
            description=self.description,
            quantity=self.quantity,
            product_id=self.product_id,
            allocation=plan,
        )


@dataclass(frozen=True)
class LedgerLineDTO:
    """Output: one ledger entry as displayed to the user."""

    reference_id: str
    product_id: str
    location: str
    transaction_type: str
    quantity: int
    previous_quantity: int
    resulting_quantity: int
    reason: str
    performed_by: str
    transaction_date: str


@dataclass(frozen=True)
class StockLineDTO:
    product_id: str
    location: str
    quantity: int
    reserved: int
    available: int


@dataclass(frozen=True)
class DocumentItemDTO:
    description: str
    quantity: int
    product_id: str | None


@dataclass(frozen=True)
class DocumentDTO:
    """Output: a challan or invoice with the stock movements just applied."""

    number: str
    kind: str
    customer: str
    status: str
    stock_consumed: bool
    items: list[DocumentItemDTO]
    movements: list[LedgerLineDTO] = field(default_factory=list)


def ledger_line(entry: StockLedgerEntry, location: str | None = None) -> LedgerLineDTO:
    return LedgerLineDTO(
        reference_id=entry.reference_id,
        product_id=entry.product_id,
        location=location or str(entry.key),
        transaction_type=entry.transaction_type.value,
        quantity=entry.quantity,
        previous_quantity=entry.previous_quantity,
        resulting_quantity=entry.resulting_quantity,
        reason=entry.reason,
        performed_by=entry.performed_by,
        transaction_date=entry.transaction_date.strftime("%Y-%m-%d %H:%M UTC"),
    )


def document_dto(
    document: DeliveryChallan | Invoice,
    entries: list[StockLedgerEntry] | None = None,
) -> DocumentDTO:
    if isinstance(document, DeliveryChallan):
        items = document.spares + document.services
        kind = "challan"
    else:
        items = document.items
        kind = "invoice"
    return DocumentDTO(
        number=document.get_identifier(),
        kind=kind,
        customer=document.customer,
        status=document.status.value,
        stock_consumed=document.stock_consumed,
        items=[
            DocumentItemDTO(
                description=item.description,
                quantity=item.quantity,
                product_id=item.product_id,
            )
            for item in items
        ],
        movements=[ledger_line(entry) for entry in entries or []],
    )
