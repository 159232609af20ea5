"""Domain service: daily reference numbers.

Numbers look like ``AD251019-A-000042``: a kind prefix, the issue date
as ``yymmdd``, a letter and a six-digit sequence.  The sequence restarts
every day; once it passes 999999 the letter advances.
"""

from __future__ import annotations

import string
from collections.abc import Callable
from datetime import datetime, timezone

from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.repository.counter_repository import CounterRepository

PREFIXES = {
    "adjustment": "AD",
    "transfer": "TF",
    "reservation": "RS",
    "delivery_challan": "DC",
    "invoice": "IN",
}
MAX_SEQUENCE = 999_999


class ReferenceNumberGenerator:

    def __init__(
        self,
        counter_repo: CounterRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._counter_repo = counter_repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def next(self, kind: str) -> str:
        try:
            prefix = PREFIXES[kind]
        except KeyError:
            raise ValidationError(f"Unknown reference kind '{kind}'") from None

        day = self._clock().strftime("%y%m%d")
        letter, sequence = "A", 1
        latest = self._counter_repo.latest(kind, day)
        if latest is not None:
            letter, sequence = latest
            if sequence < MAX_SEQUENCE:
                sequence += 1
            else:
                index = string.ascii_uppercase.index(letter) + 1
                if index >= len(string.ascii_uppercase):
                    raise ValidationError(f"Letter sequence exhausted for {kind} on {day}")
                letter, sequence = string.ascii_uppercase[index], 1

        self._counter_repo.store(kind, day, letter, sequence)
        return f"{prefix}{day}-{letter}-{sequence:06d}"
