"""Unit of Work — the transaction boundary for one reconciliation.

Every stock adjustment and ledger append for a single document
transition, plus the document write itself, happens inside one unit of
work and is committed together or not at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockrecon.domain.repository.counter_repository import CounterRepository
from stockrecon.domain.repository.document_repository import DocumentRepository
from stockrecon.domain.repository.ledger_repository import LedgerRepository
from stockrecon.domain.repository.location_repository import LocationRepository
from stockrecon.domain.repository.stock_repository import StockRepository


class UnitOfWork(ABC):

    stock: StockRepository
    ledger: LedgerRepository
    locations: LocationRepository
    documents: DocumentRepository
    counters: CounterRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Anything not explicitly committed is discarded.
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since the last commit durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every change since the last commit."""
