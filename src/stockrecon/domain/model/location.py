"""Stock locations and the rooms and racks inside them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StockLocation:
    id: str
    name: str


@dataclass(frozen=True)
class Room:
    id: str
    location_id: str
    name: str


@dataclass(frozen=True)
class Rack:
    id: str
    room_id: str
    name: str
