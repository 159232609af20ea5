"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Reconciliation failures carry structured fields (product, location,
quantities) in addition to the message, so callers can report exactly which
product could not be reconciled.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ReconciliationError(DomainException):
    """Stock could not be brought in line with a document transition."""


class InsufficientStockError(ReconciliationError):

    def __init__(
        self,
        product_id: str,
        available: int,
        requested: int,
        location: str | None = None,
    ) -> None:
        self.product_id = product_id
        self.location = location
        self.available = available
        self.requested = requested
        where = f" at {location}" if location else ""
        super().__init__(
            f"Insufficient stock for product '{product_id}'{where} "
            f"(need {requested}, have {available} available)"
        )


class LocationNotFoundError(ReconciliationError):

    def __init__(
        self,
        product_id: str,
        location: str,
        room: str | None = None,
        rack: str | None = None,
    ) -> None:
        self.product_id = product_id
        self.location = location
        self.room = room
        self.rack = rack
        path = "/".join(part for part in (location, room, rack) if part)
        super().__init__(
            f"Stock location '{path}' for product '{product_id}' does not exist"
        )


class InvalidTransitionError(ReconciliationError):

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot move document from {from_status} to {to_status}")


class ConcurrentModificationError(ReconciliationError):
    """A stock row changed between validation and commit.

    This is the only reconciliation error that is safe to retry.
    """
