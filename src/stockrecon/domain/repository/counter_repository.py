"""Abstract repository for daily reference-number counters."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CounterRepository(ABC):

    @abstractmethod
    def latest(self, kind: str, day: str) -> tuple[str, int] | None:
        """Return the highest (letter, sequence) issued for a kind and day."""

    @abstractmethod
    def store(self, kind: str, day: str, letter: str, sequence: int) -> None:
        """Record that (letter, sequence) has been issued."""
