"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.model.stock import StockKey


@dataclass(frozen=True)
class AllocationLine:
    """One bin chosen by the caller, addressed by names.

    ``available_quantity`` is the caller's snapshot at planning time.  It
    is carried for display only and never used for validation.
    """

    location: str
    allocated_quantity: int
    room: str | None = None
    rack: str | None = None
    available_quantity: int = 0

    def __post_init__(self) -> None:
        if not self.location or not self.location.strip():
            raise ValidationError("Allocation line requires a location")
        if not isinstance(self.allocated_quantity, int) or self.allocated_quantity < 0:
            raise ValidationError("Allocated quantity must be a non-negative integer")

    @property
    def path(self) -> str:
        return "/".join(part for part in (self.location, self.room, self.rack) if part)


@dataclass(frozen=True)
class AllocationPlan:
    """Caller-specified breakdown of where an item's quantity comes from.

    ``can_fulfill`` is precomputed by the caller and, like the per-line
    availability, is advisory only.
    """

    lines: tuple[AllocationLine, ...] = ()
    can_fulfill: bool = False

    @property
    def total_allocated(self) -> int:
        return sum(line.allocated_quantity for line in self.lines)

    def merged_with(self, other: AllocationPlan | None) -> AllocationPlan:
        if other is None:
            return self
        return AllocationPlan(
            lines=self.lines + other.lines,
            can_fulfill=self.can_fulfill and other.can_fulfill,
        )


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot move zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Allocation:
    """A resolved, concrete stock movement for one bin.

    ``quantity`` is signed: negative consumes, positive restores.
    """

    key: StockKey
    quantity: int
    planned: bool = field(default=False, compare=False)
