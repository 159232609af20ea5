"""Bounded retry for transitions that lost a race on a stock row."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from stockrecon.domain.exceptions import ConcurrentModificationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3


def retry_on_conflict(operation: Callable[[], T], attempts: int = DEFAULT_ATTEMPTS) -> T:
    """Run ``operation``, re-running it on ConcurrentModificationError.

    Each attempt must open its own unit of work so that it re-reads live
    stock.  Every other error propagates immediately: insufficient stock
    is a business condition, not a transient fault.
    """
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except ConcurrentModificationError:
            if attempt == attempts:
                raise
            logger.warning("stock conflict, retrying (%d/%d)", attempt, attempts)
    raise AssertionError("unreachable")
