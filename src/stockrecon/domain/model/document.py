"""Stock-consuming documents: delivery challans and sales invoices.

Both are aggregate roots that own their line items and status.  The
reconciliation engine sees them only through the ``StockDocument``
interface: items, status, identifier and reference type, plus the
persisted ``stock_consumed`` flag.  Documents never touch stock
themselves; the application layer runs the engine and then persists the
document in the same unit of work.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar

from stockrecon.domain.exceptions import InvalidTransitionError, ValidationError
from stockrecon.domain.model.ledger import ReferenceType
from stockrecon.domain.model.lifecycle import (
    DELETED,
    DocumentStatus,
    StockEffect,
    stock_effect,
)
from stockrecon.domain.model.value_objects import AllocationPlan


@dataclass
class DocumentItem:
    """A line on a document.

    Only items that name a product move stock; free-text lines (services,
    labour) are carried for the document's own sake.
    """

    description: str
    quantity: int
    product_id: str | None = None
    allocation: AllocationPlan | None = None

    @property
    def moves_stock(self) -> bool:
        return bool(self.product_id) and self.quantity > 0


def _validate_items(items: list[DocumentItem], label: str) -> None:
    for i, item in enumerate(items, start=1):
        if not item.description or not item.description.strip():
            raise ValidationError(f"{label} item {i} description is required")
        if not isinstance(item.quantity, int) or item.quantity <= 0:
            raise ValidationError(f"{label} item {i} quantity must be greater than 0")


class StockDocument(ABC):
    """Read-only view of a document, as needed by the reconciliation engine."""

    ALLOWED_STATUSES: ClassVar[frozenset[DocumentStatus]] = frozenset(DocumentStatus)

    status: DocumentStatus
    stock_consumed: bool

    @abstractmethod
    def get_items(self) -> list[DocumentItem]:
        """Return the items that move stock."""

    @abstractmethod
    def get_identifier(self) -> str:
        """Return the document number used as ledger reference id."""

    @abstractmethod
    def get_reference_type(self) -> ReferenceType:
        """Return the ledger reference type for this kind of document."""

    def get_status(self) -> DocumentStatus:
        return self.status

    def default_location(self) -> str | None:
        """Location name to draw unplanned items from, if the document has one."""
        return None

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: DocumentStatus) -> StockEffect:
        """Move to ``new_status`` and return the stock effect of the move.

        Stock itself must be reconciled by the caller via the engine.
        """
        if new_status not in self.ALLOWED_STATUSES:
            raise InvalidTransitionError(self.status.value, new_status.value)
        effect = stock_effect(self.status, new_status)
        self.status = new_status
        return effect

    def assert_deletable(self) -> None:
        """Only drafts may be deleted; anything else must be cancelled first."""
        if self.status != DocumentStatus.DRAFT:
            raise InvalidTransitionError(self.status.value, DELETED)


@dataclass
class DeliveryChallan(StockDocument):
    """Aggregate root for delivery challans.

    Use ``DeliveryChallan.create()`` for new challans; it enforces all
    business rules.  ``__init__`` stays simple so repositories can
    reconstitute persisted challans without re-validating.
    """

    ALLOWED_STATUSES: ClassVar[frozenset[DocumentStatus]] = frozenset(
        {
            DocumentStatus.DRAFT,
            DocumentStatus.SENT,
            DocumentStatus.DELIVERED,
            DocumentStatus.CANCELLED,
        }
    )

    challan_number: str
    customer: str
    department: str
    destination: str
    spares: list[DocumentItem] = field(default_factory=list)
    services: list[DocumentItem] = field(default_factory=list)
    dispatched_through: str = ""
    notes: str | None = None
    status: DocumentStatus = DocumentStatus.DRAFT
    stock_consumed: bool = False
    created_by: str = ""
    dated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        challan_number: str,
        customer: str,
        department: str,
        destination: str,
        spares: list[DocumentItem] | None = None,
        services: list[DocumentItem] | None = None,
        dispatched_through: str = "",
        notes: str | None = None,
        created_by: str = "",
    ) -> DeliveryChallan:
        """Create a new draft challan, enforcing all invariants."""
        if not challan_number or not challan_number.strip():
            raise ValidationError("Challan number is required")
        if not customer or not customer.strip():
            raise ValidationError("Customer is required")
        if not department or not department.strip():
            raise ValidationError("Department is required")
        if not destination or not destination.strip():
            raise ValidationError("Destination is required")

        spares = list(spares or [])
        services = list(services or [])
        if not spares and not services:
            raise ValidationError("At least one spare item or service is required")
        _validate_items(spares, "Spare")
        _validate_items(services, "Service")

        return DeliveryChallan(
            challan_number=challan_number.strip(),
            customer=customer.strip(),
            department=department.strip(),
            destination=destination.strip(),
            spares=spares,
            services=services,
            dispatched_through=dispatched_through,
            notes=notes,
            created_by=created_by,
        )

    def replace_spares(self, spares: list[DocumentItem]) -> list[DocumentItem]:
        """Swap in a new spares list and return the previous one."""
        if self.status == DocumentStatus.CANCELLED:
            raise ValidationError("Cannot edit a cancelled challan")
        _validate_items(spares, "Spare")
        if not spares and not self.services:
            raise ValidationError("At least one spare item or service is required")
        previous = self.spares
        self.spares = list(spares)
        return previous

    # --- StockDocument interface ----------------------------------------------

    def get_items(self) -> list[DocumentItem]:
        return [item for item in self.spares if item.moves_stock]

    def get_identifier(self) -> str:
        return self.challan_number

    def get_reference_type(self) -> ReferenceType:
        return ReferenceType.DELIVERY_CHALLAN


@dataclass
class Invoice(StockDocument):
    """Aggregate root for sales invoices.

    Stock is only reduced when ``reduce_stock`` is set.  Items without an
    allocation plan draw from the invoice ``location`` when one is given.
    """

    ALLOWED_STATUSES: ClassVar[frozenset[DocumentStatus]] = frozenset(
        {
            DocumentStatus.DRAFT,
            DocumentStatus.SENT,
            DocumentStatus.PAID,
            DocumentStatus.OVERDUE,
            DocumentStatus.CANCELLED,
        }
    )

    invoice_number: str
    customer: str
    items: list[DocumentItem] = field(default_factory=list)
    location: str | None = None
    reduce_stock: bool = True
    status: DocumentStatus = DocumentStatus.DRAFT
    stock_consumed: bool = False
    created_by: str = ""
    issue_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        invoice_number: str,
        customer: str,
        items: list[DocumentItem],
        location: str | None = None,
        reduce_stock: bool = True,
        created_by: str = "",
    ) -> Invoice:
        if not invoice_number or not invoice_number.strip():
            raise ValidationError("Invoice number is required")
        if not customer or not customer.strip():
            raise ValidationError("Customer is required")
        if not items:
            raise ValidationError("Invoice must contain at least one item")
        _validate_items(items, "Invoice")

        return Invoice(
            invoice_number=invoice_number.strip(),
            customer=customer.strip(),
            items=list(items),
            location=location,
            reduce_stock=reduce_stock,
            created_by=created_by,
        )

    def get_items(self) -> list[DocumentItem]:
        if not self.reduce_stock:
            return []
        return [item for item in self.items if item.moves_stock]

    def get_identifier(self) -> str:
        return self.invoice_number

    def get_reference_type(self) -> ReferenceType:
        return ReferenceType.SALE

    def default_location(self) -> str | None:
        return self.location
