"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from stockrecon.domain.service.reconciliation_engine import (
    ReconciliationEngine,
    ReconciliationPolicy,
)
from stockrecon.infrastructure.persistence.models import Base
from stockrecon.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

DATABASE_URL_ENV = "STOCKRECON_DATABASE_URL"
LOG_LEVEL_ENV = "STOCKRECON_LOG_LEVEL"

_DATA_DIR = Path.cwd() / "data"


def database_url() -> str:
    url = os.environ.get(DATABASE_URL_ENV)
    if url:
        return url
    _DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{_DATA_DIR / 'stockrecon.db'}"


@lru_cache(maxsize=None)
def session_factory(url: str) -> sessionmaker[Session]:
    """One engine per database URL; the schema is created on first use."""
    engine = create_engine(url)
    Base.metadata.create_all(engine)
    return sessionmaker(engine, expire_on_commit=False)


def uow_factory() -> Callable[[], SqlAlchemyUnitOfWork]:
    sessions = session_factory(database_url())
    return lambda: SqlAlchemyUnitOfWork(sessions)


def reconciliation_engine() -> ReconciliationEngine:
    return ReconciliationEngine(ReconciliationPolicy(consume_on_create=True))
