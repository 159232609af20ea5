"""SQLAlchemy-backed implementation of LocationRepository."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from stockrecon.domain.model.location import Rack, Room, StockLocation
from stockrecon.domain.model.stock import StockKey
from stockrecon.domain.repository.location_repository import LocationRepository
from stockrecon.infrastructure.persistence.models import LocationRow, RackRow, RoomRow


def _new_id() -> str:
    return uuid.uuid4().hex


class SqlAlchemyLocationRepository(LocationRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_location_by_name(self, name: str) -> StockLocation | None:
        row = self._session.scalars(
            select(LocationRow).where(func.lower(LocationRow.name) == name.strip().lower())
        ).first()
        return StockLocation(id=row.id, name=row.name) if row is not None else None

    def get_room_by_name(self, location_id: str, name: str) -> Room | None:
        row = self._session.scalars(
            select(RoomRow).where(
                RoomRow.location_id == location_id,
                func.lower(RoomRow.name) == name.strip().lower(),
            )
        ).first()
        if row is None:
            return None
        return Room(id=row.id, location_id=row.location_id, name=row.name)

    def get_rack_by_name(self, room_id: str, name: str) -> Rack | None:
        row = self._session.scalars(
            select(RackRow).where(
                RackRow.room_id == room_id,
                func.lower(RackRow.name) == name.strip().lower(),
            )
        ).first()
        return Rack(id=row.id, room_id=row.room_id, name=row.name) if row is not None else None

    def add_location(self, name: str) -> StockLocation:
        row = LocationRow(id=_new_id(), name=name)
        self._session.add(row)
        self._session.flush()
        return StockLocation(id=row.id, name=row.name)

    def add_room(self, location_id: str, name: str) -> Room:
        row = RoomRow(id=_new_id(), location_id=location_id, name=name)
        self._session.add(row)
        self._session.flush()
        return Room(id=row.id, location_id=row.location_id, name=row.name)

    def add_rack(self, room_id: str, name: str) -> Rack:
        row = RackRow(id=_new_id(), room_id=room_id, name=name)
        self._session.add(row)
        self._session.flush()
        return Rack(id=row.id, room_id=row.room_id, name=row.name)

    def describe(self, key: StockKey) -> str:
        parts = [self._name(LocationRow, key.location_id)]
        if key.room_id:
            parts.append(self._name(RoomRow, key.room_id))
        if key.rack_id:
            parts.append(self._name(RackRow, key.rack_id))
        return "/".join(parts)

    def _name(self, model, row_id: str) -> str:
        row = self._session.get(model, row_id)
        return row.name if row is not None else row_id
