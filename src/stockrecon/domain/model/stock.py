"""StockRecord aggregate — on-hand and reserved stock for one bin.

A bin is the (product, location, room, rack) tuple identified by a
StockKey.  Room and rack are optional: stock kept loose at a location has
neither.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockrecon.domain.exceptions import InsufficientStockError, ValidationError


@dataclass(frozen=True)
class StockKey:
    product_id: str
    location_id: str
    room_id: str | None = None
    rack_id: str | None = None

    def __str__(self) -> str:
        return "/".join(
            part for part in (self.location_id, self.room_id, self.rack_id) if part
        )


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StockRecord:
    """Aggregate root for bin-level stock.

    Invariants:
    - ``quantity`` is never negative
    - ``reserved_quantity`` can never exceed ``quantity``
    - ``available_quantity`` is derived, never stored
    """

    key: StockKey
    quantity: int = 0
    reserved_quantity: int = 0
    last_updated: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        if self.reserved_quantity < 0:
            raise ValidationError("Reserved quantity cannot be negative")
        if self.reserved_quantity > self.quantity:
            raise ValidationError("Reserved quantity cannot exceed total quantity")

    @property
    def product_id(self) -> str:
        return self.key.product_id

    @property
    def available_quantity(self) -> int:
        return self.quantity - self.reserved_quantity

    def apply(self, delta: int) -> int:
        """Change on-hand quantity by ``delta`` and return the previous value.

        Over-consumption is rejected rather than clamped to zero.
        """
        if delta < 0 and self.quantity + delta < self.reserved_quantity:
            raise InsufficientStockError(
                self.product_id,
                available=self.available_quantity,
                requested=-delta,
                location=str(self.key),
            )
        previous = self.quantity
        self.quantity += delta
        self.last_updated = _now()
        return previous

    def reserve(self, quantity: int) -> None:
        """Hold back available stock without removing it from the bin."""
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_quantity:
            raise InsufficientStockError(
                self.product_id,
                available=self.available_quantity,
                requested=quantity,
                location=str(self.key),
            )
        self.reserved_quantity += quantity
        self.last_updated = _now()

    def release(self, quantity: int) -> None:
        """Return previously reserved stock to the available pool."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        if quantity > self.reserved_quantity:
            raise ValidationError(
                f"Cannot release {quantity} of {self.product_id}; "
                f"only {self.reserved_quantity} currently reserved"
            )
        self.reserved_quantity -= quantity
        self.last_updated = _now()
