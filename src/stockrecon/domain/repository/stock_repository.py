"""Abstract repository for StockRecord aggregates.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (SQLAlchemy, in-memory) live in
the infrastructure layer and the test suite.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockrecon.domain.model.stock import StockKey, StockRecord


class StockRepository(ABC):

    @abstractmethod
    def get(self, key: StockKey) -> StockRecord | None:
        """Return the record for one bin, or None."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[StockRecord]:
        """Return every bin holding the product, in creation order."""

    @abstractmethod
    def list_all(self) -> list[StockRecord]:
        """Return every stock record, in creation order."""

    @abstractmethod
    def adjust(self, key: StockKey, delta: int) -> tuple[int, StockRecord]:
        """Atomically apply ``quantity += delta`` to one bin.

        Returns the quantity before the change and the updated record.
        Must be a single conditional write at the storage layer, not a
        read-modify-write in application code.  Raises
        InsufficientStockError when the result would drop below the
        reserved quantity, and EntityNotFoundError when consuming from a
        bin that does not exist.  A missing bin is created when
        ``delta`` is positive.
        """

    @abstractmethod
    def adjust_reserved(self, key: StockKey, delta: int) -> tuple[int, StockRecord]:
        """Atomically apply ``reserved_quantity += delta`` to one bin.

        Returns the reserved quantity before the change and the updated
        record.  On-hand ``quantity`` is read and guarded in the same
        statement but never written, so a concurrent consumption is
        never undone.  Raises InsufficientStockError when reserving more
        than is available, ValidationError when releasing more than is
        reserved, and EntityNotFoundError when the bin does not exist.
        """

    @abstractmethod
    def add(self, record: StockRecord) -> None:
        """Insert a new bin.  Existing bins change only through the adjust methods."""

    def aggregate_available(self, product_id: str) -> int:
        return sum(r.available_quantity for r in self.list_for_product(product_id))
