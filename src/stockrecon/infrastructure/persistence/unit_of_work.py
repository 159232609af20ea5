"""SQLAlchemy implementation of the UnitOfWork.

One session per unit of work.  Repositories share that session, so every
stock adjustment, ledger append and document write made inside the
``with`` block lands in the same database transaction.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session

from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.infrastructure.persistence.sqlalchemy_counter_repository import (
    SqlAlchemyCounterRepository,
)
from stockrecon.infrastructure.persistence.sqlalchemy_document_repository import (
    SqlAlchemyDocumentRepository,
)
from stockrecon.infrastructure.persistence.sqlalchemy_ledger_repository import (
    SqlAlchemyLedgerRepository,
)
from stockrecon.infrastructure.persistence.sqlalchemy_location_repository import (
    SqlAlchemyLocationRepository,
)
from stockrecon.infrastructure.persistence.sqlalchemy_stock_repository import (
    SqlAlchemyStockRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self._session_factory()
        self.stock = SqlAlchemyStockRepository(self.session)
        self.ledger = SqlAlchemyLedgerRepository(self.session)
        self.locations = SqlAlchemyLocationRepository(self.session)
        self.documents = SqlAlchemyDocumentRepository(self.session)
        self.counters = SqlAlchemyCounterRepository(self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self.session.close()
            self.session = None

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
