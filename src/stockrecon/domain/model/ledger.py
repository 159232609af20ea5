"""StockLedgerEntry — one immutable line of the stock audit trail."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.model.stock import StockKey


class TransactionType(Enum):
    INWARD = "inward"
    OUTWARD = "outward"
    ADJUSTMENT = "adjustment"
    RESERVATION = "reservation"
    RELEASE = "release"


class ReferenceType(Enum):
    PURCHASE_ORDER = "purchase_order"
    SERVICE_TICKET = "service_ticket"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"
    SALE = "sale"
    RESERVATION = "reservation"
    DELIVERY_CHALLAN = "delivery_challan"


@dataclass(frozen=True)
class StockLedgerEntry:
    """A single applied stock mutation.

    ``quantity`` is the signed delta that was applied (negative for
    outward).  For reservation and release entries the previous/resulting
    pair tracks the reserved quantity rather than on-hand stock.

    Several entries may share a ``reference_id``: a transfer writes an
    outward and an inward line, and each update of a document appends
    another line for the same reference.
    """

    product_id: str
    location_id: str
    transaction_type: TransactionType
    quantity: int
    previous_quantity: int
    resulting_quantity: int
    reference_id: str
    reference_type: ReferenceType
    performed_by: str
    reason: str = ""
    room_id: str | None = None
    rack_id: str | None = None
    notes: str | None = None
    transaction_date: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    id: int | None = None

    def __post_init__(self) -> None:
        if self.resulting_quantity != self.previous_quantity + self.quantity:
            raise ValidationError(
                f"Ledger entry for {self.reference_id} does not balance: "
                f"{self.previous_quantity} + {self.quantity} != {self.resulting_quantity}"
            )
        if not self.reference_id:
            raise ValidationError("Ledger entry requires a reference id")

    @property
    def key(self) -> StockKey:
        return StockKey(self.product_id, self.location_id, self.room_id, self.rack_id)

    @staticmethod
    def for_movement(
        key: StockKey,
        delta: int,
        previous_quantity: int,
        reference_id: str,
        reference_type: ReferenceType,
        performed_by: str,
        reason: str = "",
        notes: str | None = None,
    ) -> StockLedgerEntry:
        """Build an inward/outward entry from an applied on-hand delta."""
        if delta == 0:
            raise ValidationError("Ledger entries record non-zero movements only")
        return StockLedgerEntry(
            product_id=key.product_id,
            location_id=key.location_id,
            room_id=key.room_id,
            rack_id=key.rack_id,
            transaction_type=TransactionType.INWARD if delta > 0 else TransactionType.OUTWARD,
            quantity=delta,
            previous_quantity=previous_quantity,
            resulting_quantity=previous_quantity + delta,
            reference_id=reference_id,
            reference_type=reference_type,
            performed_by=performed_by,
            reason=reason,
            notes=notes,
        )
