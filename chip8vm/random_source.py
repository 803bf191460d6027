"""Injectable sources of uniformly distributed random bytes."""

from __future__ import annotations

import random
from collections import deque
from typing import Deque, Iterable, Optional, Protocol


class RandomSource(Protocol):
    """Anything that can produce the next uniform byte in [0, 255]."""

    def next_byte(self) -> int: ...


class SystemRandomSource:
    """Mersenne Twister seeded from OS entropy unless a seed is given."""

    def __init__(self, seed: Optional[int] = None) -> None:
        # random.Random(None) seeds from os.urandom when available.
        self._rng = random.Random(seed)

    def next_byte(self) -> int:
        return self._rng.randrange(256)


class SequenceRandomSource:
    """Replays a fixed sequence of bytes, cycling when exhausted."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = [int(v) & 0xFF for v in values]
        if not self._values:
            raise ValueError("SequenceRandomSource requires at least one value")
        self._pending: Deque[int] = deque(self._values)
        self.draws = 0

    def next_byte(self) -> int:
        if not self._pending:
            self._pending.extend(self._values)
        self.draws += 1
        return self._pending.popleft()


_process_source: Optional[SystemRandomSource] = None


def default_random_source() -> SystemRandomSource:
    """Return the process-scoped generator, creating it on first use."""
    global _process_source
    if _process_source is None:
        _process_source = SystemRandomSource()
    return _process_source


__all__ = [
    "RandomSource",
    "SystemRandomSource",
    "SequenceRandomSource",
    "default_random_source",
]
