"""SQLAlchemy-backed implementation of StockRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockrecon.domain.exceptions import (
    ConcurrentModificationError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from stockrecon.domain.model.stock import StockKey, StockRecord
from stockrecon.domain.repository.stock_repository import StockRepository
from stockrecon.infrastructure.persistence.models import StockRecordRow


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _bin_filter(key: StockKey) -> tuple:
    return (
        StockRecordRow.product_id == key.product_id,
        StockRecordRow.location_id == key.location_id,
        StockRecordRow.room_id == (key.room_id or ""),
        StockRecordRow.rack_id == (key.rack_id or ""),
    )


class SqlAlchemyStockRepository(StockRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- StockRepository interface --------------------------------------------

    def get(self, key: StockKey) -> StockRecord | None:
        row = self._find(key)
        return self._to_domain(row) if row is not None else None

    def list_for_product(self, product_id: str) -> list[StockRecord]:
        stmt = (
            select(StockRecordRow)
            .where(StockRecordRow.product_id == product_id)
            .order_by(StockRecordRow.id)
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def list_all(self) -> list[StockRecord]:
        stmt = (
            select(StockRecordRow)
            .order_by(StockRecordRow.id)
            .execution_options(populate_existing=True)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def adjust(self, key: StockKey, delta: int) -> tuple[int, StockRecord]:
        now = _now()
        # Guard and write in one statement: concurrent writers cannot
        # interleave between the check and the update.
        stmt = (
            update(StockRecordRow)
            .where(
                *_bin_filter(key),
                StockRecordRow.quantity + delta >= StockRecordRow.reserved_quantity,
            )
            .values(quantity=StockRecordRow.quantity + delta, last_updated=now)
            .returning(StockRecordRow.quantity, StockRecordRow.reserved_quantity)
            .execution_options(synchronize_session=False)
        )
        updated = self._session.execute(stmt).one_or_none()
        if updated is not None:
            record = StockRecord(
                key,
                quantity=updated.quantity,
                reserved_quantity=updated.reserved_quantity,
                last_updated=now,
            )
            return updated.quantity - delta, record

        existing = self._find(key)
        if existing is not None:
            raise InsufficientStockError(
                key.product_id,
                available=existing.quantity - existing.reserved_quantity,
                requested=-delta,
                location=str(key),
            )
        if delta <= 0:
            raise EntityNotFoundError(f"No stock of '{key.product_id}' at {key}")
        return 0, self._insert(StockRecord(key, quantity=delta, last_updated=now))

    def adjust_reserved(self, key: StockKey, delta: int) -> tuple[int, StockRecord]:
        if delta == 0:
            raise ValidationError("Reservation change must be non-zero")
        now = _now()
        stmt = (
            update(StockRecordRow)
            .where(
                *_bin_filter(key),
                StockRecordRow.reserved_quantity + delta >= 0,
                StockRecordRow.reserved_quantity + delta <= StockRecordRow.quantity,
            )
            .values(reserved_quantity=StockRecordRow.reserved_quantity + delta, last_updated=now)
            .returning(StockRecordRow.quantity, StockRecordRow.reserved_quantity)
            .execution_options(synchronize_session=False)
        )
        updated = self._session.execute(stmt).one_or_none()
        if updated is not None:
            record = StockRecord(
                key,
                quantity=updated.quantity,
                reserved_quantity=updated.reserved_quantity,
                last_updated=now,
            )
            return updated.reserved_quantity - delta, record

        existing = self._find(key)
        if existing is None:
            raise EntityNotFoundError(f"No stock of '{key.product_id}' at {key}")
        # Let the aggregate explain the refusal against the row as it is now.
        current = self._to_domain(existing)
        if delta > 0:
            current.reserve(delta)
        else:
            current.release(-delta)
        raise ConcurrentModificationError(
            f"Stock for product '{key.product_id}' at {key} changed during reservation"
        )

    def add(self, record: StockRecord) -> None:
        if self._find(record.key) is not None:
            raise ValidationError(
                f"Stock bin {record.key} for '{record.product_id}' already exists"
            )
        self._insert(record)

    # --- Helpers --------------------------------------------------------------

    def _find(self, key: StockKey) -> StockRecordRow | None:
        stmt = (
            select(StockRecordRow)
            .where(*_bin_filter(key))
            .execution_options(populate_existing=True)
        )
        return self._session.scalars(stmt).one_or_none()

    def _insert(self, record: StockRecord) -> StockRecord:
        key = record.key
        self._session.add(
            StockRecordRow(
                product_id=key.product_id,
                location_id=key.location_id,
                room_id=key.room_id or "",
                rack_id=key.rack_id or "",
                quantity=record.quantity,
                reserved_quantity=record.reserved_quantity,
                last_updated=record.last_updated,
            )
        )
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise ConcurrentModificationError(
                f"Stock bin {key} for '{key.product_id}' was created concurrently"
            ) from exc
        return record

    @staticmethod
    def _to_domain(row: StockRecordRow) -> StockRecord:
        return StockRecord(
            key=StockKey(
                product_id=row.product_id,
                location_id=row.location_id,
                room_id=row.room_id or None,
                rack_id=row.rack_id or None,
            ),
            quantity=row.quantity,
            reserved_quantity=row.reserved_quantity,
            last_updated=row.last_updated,
        )
