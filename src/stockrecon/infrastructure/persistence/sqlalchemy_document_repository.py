"""SQLAlchemy-backed implementation of DocumentRepository.

Common fields are columns; items and kind-specific fields are kept in a
JSON payload.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from stockrecon.domain.model.document import DeliveryChallan, DocumentItem, Invoice
from stockrecon.domain.model.lifecycle import DocumentStatus
from stockrecon.domain.model.value_objects import AllocationLine, AllocationPlan
from stockrecon.domain.repository.document_repository import DocumentRepository
from stockrecon.infrastructure.persistence.models import DocumentRow

CHALLAN = "challan"
INVOICE = "invoice"


class SqlAlchemyDocumentRepository(DocumentRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- DocumentRepository interface -----------------------------------------

    def get_challan(self, challan_number: str) -> DeliveryChallan | None:
        row = self._find(CHALLAN, challan_number)
        return self._challan_to_domain(row) if row is not None else None

    def get_invoice(self, invoice_number: str) -> Invoice | None:
        row = self._find(INVOICE, invoice_number)
        return self._invoice_to_domain(row) if row is not None else None

    def save(self, document: DeliveryChallan | Invoice) -> None:
        if isinstance(document, DeliveryChallan):
            kind, dated = CHALLAN, document.dated
            payload = {
                "department": document.department,
                "destination": document.destination,
                "spares": [_item_to_raw(i) for i in document.spares],
                "services": [_item_to_raw(i) for i in document.services],
                "dispatched_through": document.dispatched_through,
                "notes": document.notes,
            }
        else:
            kind, dated = INVOICE, document.issue_date
            payload = {
                "items": [_item_to_raw(i) for i in document.items],
                "location": document.location,
                "reduce_stock": document.reduce_stock,
            }

        number = document.get_identifier()
        row = self._find(kind, number)
        if row is None:
            row = DocumentRow(kind=kind, number=number)
            self._session.add(row)
        row.customer = document.customer
        row.status = document.status.value
        row.stock_consumed = document.stock_consumed
        row.created_by = document.created_by
        row.dated = dated
        row.payload = payload
        self._session.flush()

    def delete(self, document: DeliveryChallan | Invoice) -> None:
        kind = CHALLAN if isinstance(document, DeliveryChallan) else INVOICE
        self._session.execute(
            delete(DocumentRow).where(
                DocumentRow.kind == kind,
                DocumentRow.number == document.get_identifier(),
            )
        )

    def list_challans(self, status: DocumentStatus | None = None) -> list[DeliveryChallan]:
        return [self._challan_to_domain(row) for row in self._list(CHALLAN, status)]

    def list_invoices(self, status: DocumentStatus | None = None) -> list[Invoice]:
        return [self._invoice_to_domain(row) for row in self._list(INVOICE, status)]

    # --- Serialization --------------------------------------------------------

    def _find(self, kind: str, number: str) -> DocumentRow | None:
        stmt = select(DocumentRow).where(DocumentRow.kind == kind, DocumentRow.number == number)
        return self._session.scalars(stmt).one_or_none()

    def _list(self, kind: str, status: DocumentStatus | None) -> list[DocumentRow]:
        stmt = select(DocumentRow).where(DocumentRow.kind == kind)
        if status is not None:
            stmt = stmt.where(DocumentRow.status == status.value)
        return list(self._session.scalars(stmt.order_by(DocumentRow.id)))

    @staticmethod
    def _challan_to_domain(row: DocumentRow) -> DeliveryChallan:
        raw = row.payload
        return DeliveryChallan(
            challan_number=row.number,
            customer=row.customer,
            department=raw["department"],
            destination=raw["destination"],
            spares=[_item_to_domain(i) for i in raw.get("spares", [])],
            services=[_item_to_domain(i) for i in raw.get("services", [])],
            dispatched_through=raw.get("dispatched_through", ""),
            notes=raw.get("notes"),
            status=DocumentStatus(row.status),
            stock_consumed=row.stock_consumed,
            created_by=row.created_by,
            dated=row.dated,
        )

    @staticmethod
    def _invoice_to_domain(row: DocumentRow) -> Invoice:
        raw = row.payload
        return Invoice(
            invoice_number=row.number,
            customer=row.customer,
            items=[_item_to_domain(i) for i in raw.get("items", [])],
            location=raw.get("location"),
            reduce_stock=raw.get("reduce_stock", True),
            status=DocumentStatus(row.status),
            stock_consumed=row.stock_consumed,
            created_by=row.created_by,
            issue_date=row.dated,
        )


def _item_to_raw(item: DocumentItem) -> dict:
    plan = item.allocation
    return {
        "description": item.description,
        "quantity": item.quantity,
        "product_id": item.product_id,
        "allocation": None
        if plan is None
        else {
            "can_fulfill": plan.can_fulfill,
            "lines": [
                {
                    "location": line.location,
                    "room": line.room,
                    "rack": line.rack,
                    "allocated_quantity": line.allocated_quantity,
                    "available_quantity": line.available_quantity,
                }
                for line in plan.lines
            ],
        },
    }


def _item_to_domain(raw: dict) -> DocumentItem:
    plan = None
    if raw.get("allocation") is not None:
        plan = AllocationPlan(
            lines=tuple(AllocationLine(**line) for line in raw["allocation"]["lines"]),
            can_fulfill=raw["allocation"].get("can_fulfill", False),
        )
    return DocumentItem(
        description=raw["description"],
        quantity=raw["quantity"],
        product_id=raw.get("product_id"),
        allocation=plan,
    )
