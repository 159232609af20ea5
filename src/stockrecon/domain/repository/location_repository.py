"""Abstract repository for stock locations, rooms and racks."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockrecon.domain.model.location import Rack, Room, StockLocation
from stockrecon.domain.model.stock import StockKey


class LocationRepository(ABC):

    @abstractmethod
    def get_location_by_name(self, name: str) -> StockLocation | None:
        """Return a location by its exact name (case-insensitive), or None."""

    @abstractmethod
    def get_room_by_name(self, location_id: str, name: str) -> Room | None:
        """Return a room inside a location, or None."""

    @abstractmethod
    def get_rack_by_name(self, room_id: str, name: str) -> Rack | None:
        """Return a rack inside a room, or None."""

    @abstractmethod
    def add_location(self, name: str) -> StockLocation:
        """Create a location."""

    @abstractmethod
    def add_room(self, location_id: str, name: str) -> Room:
        """Create a room inside a location."""

    @abstractmethod
    def add_rack(self, room_id: str, name: str) -> Rack:
        """Create a rack inside a room."""

    @abstractmethod
    def describe(self, key: StockKey) -> str:
        """Return the 'Location/Room/Rack' name path of a bin."""
