"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the SQLAlchemy
repositories but keep everything in dicts and lists.  FakeUnitOfWork
snapshots all of them so rollback really discards uncommitted work.
"""

from __future__ import annotations

import copy
import dataclasses
import itertools

from stockrecon.domain.exceptions import EntityNotFoundError, ValidationError
from stockrecon.domain.model.document import DeliveryChallan, Invoice
from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry
from stockrecon.domain.model.lifecycle import DocumentStatus
from stockrecon.domain.model.location import Rack, Room, StockLocation
from stockrecon.domain.model.stock import StockKey, StockRecord
from stockrecon.domain.repository.counter_repository import CounterRepository
from stockrecon.domain.repository.document_repository import DocumentRepository
from stockrecon.domain.repository.ledger_repository import LedgerRepository
from stockrecon.domain.repository.location_repository import LocationRepository
from stockrecon.domain.repository.stock_repository import StockRepository
from stockrecon.domain.repository.unit_of_work import UnitOfWork


class FakeStockRepository(StockRepository):

    def __init__(self, records: list[StockRecord] | None = None) -> None:
        self._store: dict[StockKey, StockRecord] = {}
        for record in records or []:
            self._store[record.key] = record

    def get(self, key: StockKey) -> StockRecord | None:
        record = self._store.get(key)
        return copy.deepcopy(record) if record is not None else None

    def list_for_product(self, product_id: str) -> list[StockRecord]:
        return [copy.deepcopy(r) for r in self._store.values() if r.product_id == product_id]

    def list_all(self) -> list[StockRecord]:
        return [copy.deepcopy(r) for r in self._store.values()]

    def adjust(self, key: StockKey, delta: int) -> tuple[int, StockRecord]:
        record = self._store.get(key)
        if record is None:
            if delta <= 0:
                raise EntityNotFoundError(f"No stock of '{key.product_id}' at {key}")
            record = self._store[key] = StockRecord(key)
        previous = record.apply(delta)
        return previous, copy.deepcopy(record)

    def adjust_reserved(self, key: StockKey, delta: int) -> tuple[int, StockRecord]:
        record = self._store.get(key)
        if record is None:
            raise EntityNotFoundError(f"No stock of '{key.product_id}' at {key}")
        previous = record.reserved_quantity
        if delta > 0:
            record.reserve(delta)
        else:
            record.release(-delta)
        return previous, copy.deepcopy(record)

    def add(self, record: StockRecord) -> None:
        if record.key in self._store:
            raise ValidationError(f"Stock bin {record.key} already exists")
        self._store[record.key] = copy.deepcopy(record)


class RacingStockRepository(FakeStockRepository):
    """Takes stock from one bin right before the first write, once.

    Stands in for another transaction committing between a caller's
    availability check and its conditional update.
    """

    def __init__(self, store: dict[StockKey, StockRecord], key: StockKey, amount: int) -> None:
        super().__init__()
        self._store = store
        self._key = key
        self._amount = amount
        self.raced = False

    def adjust(self, key: StockKey, delta: int) -> tuple[int, StockRecord]:
        if not self.raced:
            self.raced = True
            self._store[self._key].apply(-self._amount)
        return super().adjust(key, delta)


class FakeLedgerRepository(LedgerRepository):

    def __init__(self) -> None:
        self._entries: list[StockLedgerEntry] = []

    def append(self, entry: StockLedgerEntry) -> int:
        entry_id = len(self._entries) + 1
        self._entries.append(dataclasses.replace(entry, id=entry_id))
        return entry_id

    def find_by_reference(
        self,
        reference_id: str,
        reference_type: ReferenceType | None = None,
    ) -> list[StockLedgerEntry]:
        return [
            e for e in self._entries
            if e.reference_id == reference_id
            and (reference_type is None or e.reference_type == reference_type)
        ]

    def find_by_product(self, product_id: str) -> list[StockLedgerEntry]:
        return [e for e in self._entries if e.product_id == product_id]

    @property
    def entries(self) -> list[StockLedgerEntry]:
        return list(self._entries)


class FakeLocationRepository(LocationRepository):

    def __init__(self) -> None:
        self._locations: dict[str, StockLocation] = {}
        self._rooms: dict[str, Room] = {}
        self._racks: dict[str, Rack] = {}
        self._ids = itertools.count(1)

    def get_location_by_name(self, name: str) -> StockLocation | None:
        for loc in self._locations.values():
            if loc.name.lower() == name.strip().lower():
                return loc
        return None

    def get_room_by_name(self, location_id: str, name: str) -> Room | None:
        for room in self._rooms.values():
            if room.location_id == location_id and room.name.lower() == name.strip().lower():
                return room
        return None

    def get_rack_by_name(self, room_id: str, name: str) -> Rack | None:
        for rack in self._racks.values():
            if rack.room_id == room_id and rack.name.lower() == name.strip().lower():
                return rack
        return None

    def add_location(self, name: str) -> StockLocation:
        loc = StockLocation(id=f"loc-{next(self._ids)}", name=name)
        self._locations[loc.id] = loc
        return loc

    def add_room(self, location_id: str, name: str) -> Room:
        room = Room(id=f"room-{next(self._ids)}", location_id=location_id, name=name)
        self._rooms[room.id] = room
        return room

    def add_rack(self, room_id: str, name: str) -> Rack:
        rack = Rack(id=f"rack-{next(self._ids)}", room_id=room_id, name=name)
        self._racks[rack.id] = rack
        return rack

    def describe(self, key: StockKey) -> str:
        parts = [self._locations[key.location_id].name]
        if key.room_id:
            parts.append(self._rooms[key.room_id].name)
        if key.rack_id:
            parts.append(self._racks[key.rack_id].name)
        return "/".join(parts)

    def bin(self, product_id: str, location: str, room: str | None = None, rack: str | None = None) -> StockKey:
        """Create the named location/room/rack as needed and return the key."""
        loc = self.get_location_by_name(location) or self.add_location(location)
        room_id = rack_id = None
        if room:
            rm = self.get_room_by_name(loc.id, room) or self.add_room(loc.id, room)
            room_id = rm.id
            if rack:
                rk = self.get_rack_by_name(rm.id, rack) or self.add_rack(rm.id, rack)
                rack_id = rk.id
        return StockKey(product_id, loc.id, room_id, rack_id)


class FakeDocumentRepository(DocumentRepository):

    def __init__(self) -> None:
        self._store: dict[tuple[str, str], DeliveryChallan | Invoice] = {}

    def get_challan(self, challan_number: str) -> DeliveryChallan | None:
        doc = self._store.get(("challan", challan_number))
        return copy.deepcopy(doc) if doc is not None else None

    def get_invoice(self, invoice_number: str) -> Invoice | None:
        doc = self._store.get(("invoice", invoice_number))
        return copy.deepcopy(doc) if doc is not None else None

    def save(self, document: DeliveryChallan | Invoice) -> None:
        self._store[self._key(document)] = copy.deepcopy(document)

    def delete(self, document: DeliveryChallan | Invoice) -> None:
        self._store.pop(self._key(document), None)

    def list_challans(self, status: DocumentStatus | None = None) -> list[DeliveryChallan]:
        return self._list("challan", status)

    def list_invoices(self, status: DocumentStatus | None = None) -> list[Invoice]:
        return self._list("invoice", status)

    def _list(self, kind: str, status: DocumentStatus | None) -> list:
        return [
            copy.deepcopy(doc) for (k, _), doc in self._store.items()
            if k == kind and (status is None or doc.status == status)
        ]

    @staticmethod
    def _key(document: DeliveryChallan | Invoice) -> tuple[str, str]:
        kind = "challan" if isinstance(document, DeliveryChallan) else "invoice"
        return kind, document.get_identifier()


class FakeCounterRepository(CounterRepository):

    def __init__(self) -> None:
        self._store: dict[tuple[str, str], tuple[str, int]] = {}

    def latest(self, kind: str, day: str) -> tuple[str, int] | None:
        return self._store.get((kind, day))

    def store(self, kind: str, day: str, letter: str, sequence: int) -> None:
        self._store[(kind, day)] = (letter, sequence)


class FakeUnitOfWork(UnitOfWork):

    def __init__(self) -> None:
        self.stock = FakeStockRepository()
        self.ledger = FakeLedgerRepository()
        self.locations = FakeLocationRepository()
        self.documents = FakeDocumentRepository()
        self.counters = FakeCounterRepository()
        self.commits = 0
        self._snapshot = self._take_snapshot()

    def commit(self) -> None:
        self.commits += 1
        self._snapshot = self._take_snapshot()

    def rollback(self) -> None:
        state = copy.deepcopy(self._snapshot)
        self.stock._store = state["stock"]
        self.ledger._entries = state["ledger"]
        self.documents._store = state["documents"]
        self.counters._store = state["counters"]
        self.locations._locations, self.locations._rooms, self.locations._racks = state["locations"]

    def _take_snapshot(self) -> dict:
        return copy.deepcopy(
            {
                "stock": self.stock._store,
                "ledger": self.ledger._entries,
                "documents": self.documents._store,
                "counters": self.counters._store,
                "locations": (
                    self.locations._locations,
                    self.locations._rooms,
                    self.locations._racks,
                ),
            }
        )

    # --- Test helpers -----------------------------------------------------------

    def seed(
        self,
        product_id: str,
        location: str,
        quantity: int,
        room: str | None = None,
        rack: str | None = None,
        reserved: int = 0,
    ) -> StockKey:
        """Create a bin with stock and commit it, bypassing the ledger."""
        key = self.locations.bin(product_id, location, room, rack)
        self.stock.add(StockRecord(key, quantity=quantity, reserved_quantity=reserved))
        self.commit()
        return key

    def quantity(self, key: StockKey) -> int:
        record = self.stock.get(key)
        return record.quantity if record is not None else 0
