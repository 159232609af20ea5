"""SQLAlchemy-backed implementation of LedgerRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry, TransactionType
from stockrecon.domain.repository.ledger_repository import LedgerRepository
from stockrecon.infrastructure.persistence.models import LedgerRow


class SqlAlchemyLedgerRepository(LedgerRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def append(self, entry: StockLedgerEntry) -> int:
        row = self._to_row(entry)
        self._session.add(row)
        self._session.flush()
        return row.id

    def find_by_reference(
        self,
        reference_id: str,
        reference_type: ReferenceType | None = None,
    ) -> list[StockLedgerEntry]:
        stmt = select(LedgerRow).where(LedgerRow.reference_id == reference_id)
        if reference_type is not None:
            stmt = stmt.where(LedgerRow.reference_type == reference_type.value)
        stmt = stmt.order_by(LedgerRow.id)
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def find_by_product(self, product_id: str) -> list[StockLedgerEntry]:
        stmt = (
            select(LedgerRow)
            .where(LedgerRow.product_id == product_id)
            .order_by(LedgerRow.id)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(entry: StockLedgerEntry) -> LedgerRow:
        return LedgerRow(
            product_id=entry.product_id,
            location_id=entry.location_id,
            room_id=entry.room_id,
            rack_id=entry.rack_id,
            transaction_type=entry.transaction_type.value,
            quantity=entry.quantity,
            previous_quantity=entry.previous_quantity,
            resulting_quantity=entry.resulting_quantity,
            reference_id=entry.reference_id,
            reference_type=entry.reference_type.value,
            reason=entry.reason,
            notes=entry.notes,
            performed_by=entry.performed_by,
            transaction_date=entry.transaction_date,
        )

    @staticmethod
    def _to_domain(row: LedgerRow) -> StockLedgerEntry:
        return StockLedgerEntry(
            id=row.id,
            product_id=row.product_id,
            location_id=row.location_id,
            room_id=row.room_id,
            rack_id=row.rack_id,
            transaction_type=TransactionType(row.transaction_type),
            quantity=row.quantity,
            previous_quantity=row.previous_quantity,
            resulting_quantity=row.resulting_quantity,
            reference_id=row.reference_id,
            reference_type=ReferenceType(row.reference_type),
            reason=row.reason,
            notes=row.notes,
            performed_by=row.performed_by,
            transaction_date=row.transaction_date,
        )
