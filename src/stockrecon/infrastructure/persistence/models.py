"""SQLAlchemy ORM tables.

Room and rack ids are stored as '' rather than NULL on stock rows so the
(product, location, room, rack) unique constraint also covers loose
stock; the repositories translate '' back to None.
"""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class LocationRow(Base):
    __tablename__ = "stock_locations"

    id: Mapped[str] = mapped_column(sa.String(32), primary_key=True)
    name: Mapped[str] = mapped_column(sa.String(128), nullable=False, unique=True)


class RoomRow(Base):
    __tablename__ = "rooms"

    id: Mapped[str] = mapped_column(sa.String(32), primary_key=True)
    location_id: Mapped[str] = mapped_column(
        sa.ForeignKey("stock_locations.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(sa.String(128), nullable=False)

    __table_args__ = (sa.UniqueConstraint("location_id", "name", name="uq_room_location_name"),)


class RackRow(Base):
    __tablename__ = "racks"

    id: Mapped[str] = mapped_column(sa.String(32), primary_key=True)
    room_id: Mapped[str] = mapped_column(sa.ForeignKey("rooms.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(sa.String(128), nullable=False)

    __table_args__ = (sa.UniqueConstraint("room_id", "name", name="uq_rack_room_name"),)


class StockRecordRow(Base):
    __tablename__ = "stock_records"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    location_id: Mapped[str] = mapped_column(
        sa.ForeignKey("stock_locations.id"), nullable=False
    )
    room_id: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="")
    rack_id: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="")
    quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    reserved_quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    last_updated: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)

    __table_args__ = (
        sa.UniqueConstraint(
            "product_id", "location_id", "room_id", "rack_id", name="uq_stock_bin"
        ),
        sa.CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"),
        sa.CheckConstraint(
            "reserved_quantity >= 0 AND reserved_quantity <= quantity",
            name="ck_stock_reserved_within_quantity",
        ),
    )


class LedgerRow(Base):
    """Append-only; several rows may share a reference id."""

    __tablename__ = "stock_ledger"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    location_id: Mapped[str] = mapped_column(sa.String(32), nullable=False)
    room_id: Mapped[str | None] = mapped_column(sa.String(32), nullable=True)
    rack_id: Mapped[str | None] = mapped_column(sa.String(32), nullable=True)
    transaction_type: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    previous_quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    resulting_quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    reference_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)
    reference_type: Mapped[str] = mapped_column(sa.String(32), nullable=False)
    reason: Mapped[str] = mapped_column(sa.String(255), nullable=False, default="")
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    performed_by: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    transaction_date: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, index=True
    )


class DocumentRow(Base):
    """Challans and invoices; kind-specific fields and items live in ``payload``."""

    __tablename__ = "stock_documents"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    number: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    customer: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    status: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    stock_consumed: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    created_by: Mapped[str] = mapped_column(sa.String(64), nullable=False, default="")
    dated: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    payload: Mapped[dict] = mapped_column(sa.JSON, nullable=False, default=dict)

    __table_args__ = (sa.UniqueConstraint("kind", "number", name="uq_document_kind_number"),)


class ReferenceCounterRow(Base):
    """Last number issued per kind and day."""

    __tablename__ = "reference_counters"

    kind: Mapped[str] = mapped_column(sa.String(32), primary_key=True)
    day: Mapped[str] = mapped_column(sa.String(6), primary_key=True)
    letter: Mapped[str] = mapped_column(sa.String(1), nullable=False)
    sequence: Mapped[int] = mapped_column(sa.Integer, nullable=False)
