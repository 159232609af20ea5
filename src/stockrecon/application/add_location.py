"""Application service: Add Location use case."""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.repository.unit_of_work import UnitOfWork


class AddLocationHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, location: str, room: str | None = None, rack: str | None = None) -> str:
        """Create a location, and optionally a room and rack inside it.

        Parts that already exist are reused, so the call is idempotent.
        """
        if not location or not location.strip():
            raise ValidationError("Location name is required")
        if rack and not room:
            raise ValidationError("A rack must belong to a room")

        with self._uow_factory() as uow:
            repo = uow.locations
            loc = repo.get_location_by_name(location) or repo.add_location(location.strip())
            parts = [loc.name]
            if room:
                rm = repo.get_room_by_name(loc.id, room) or repo.add_room(loc.id, room.strip())
                parts.append(rm.name)
                if rack:
                    rk = repo.get_rack_by_name(rm.id, rack) or repo.add_rack(rm.id, rack.strip())
                    parts.append(rk.name)
            uow.commit()
        return "/".join(parts)
