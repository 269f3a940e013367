"""Thread-safe generators of 16-bit RTP sequence numbers."""

from __future__ import annotations

import random
import threading

_MAX_SEQUENCE = 0xFFFF
_random = random.SystemRandom()


class Sequencer:
    """Hands out consecutive 16-bit sequence numbers, counting wrap-arounds.

    ``start`` is the first number returned by :meth:`next_sequence_number`.
    """

    def __init__(self, start: int) -> None:
        if not 0 <= start <= _MAX_SEQUENCE:
            raise ValueError(f"sequence number out of range: {start}")
        self._sequence_number = (start - 1) & _MAX_SEQUENCE
        self._roll_over_count = 0
        self._lock = threading.Lock()

    def next_sequence_number(self) -> int:
        """Advance and return the next sequence number."""
        with self._lock:
            self._sequence_number = (self._sequence_number + 1) & _MAX_SEQUENCE
            if self._sequence_number == 0:
                self._roll_over_count += 1
            return self._sequence_number

    def roll_over_count(self) -> int:
        """Return how many times the sequence number has wrapped to zero."""
        with self._lock:
            return self._roll_over_count


def random_sequencer() -> Sequencer:
    """Return a sequencer starting at a cryptographically random number."""
    return Sequencer((_random.randrange(_MAX_SEQUENCE) + 1) & _MAX_SEQUENCE)


def fixed_sequencer(start: int) -> Sequencer:
    """Return a sequencer whose first number is ``start``."""
    return Sequencer(start)