"""SQLAlchemy-backed implementation of CounterRepository."""

from __future__ import annotations

from sqlalchemy.orm import Session

from stockrecon.domain.repository.counter_repository import CounterRepository
from stockrecon.infrastructure.persistence.models import ReferenceCounterRow


class SqlAlchemyCounterRepository(CounterRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def latest(self, kind: str, day: str) -> tuple[str, int] | None:
        row = self._session.get(ReferenceCounterRow, (kind, day))
        return (row.letter, row.sequence) if row is not None else None

    def store(self, kind: str, day: str, letter: str, sequence: int) -> None:
        row = self._session.get(ReferenceCounterRow, (kind, day))
        if row is None:
            self._session.add(
                ReferenceCounterRow(kind=kind, day=day, letter=letter, sequence=sequence)
            )
        else:
            row.letter = letter
            row.sequence = sequence
        self._session.flush()
