"""Delay and sound countdown timers for the CHIP-8 virtual machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List

from .constants import BYTE_MASK, TIMER_PERIOD_MS


class TimerSource(Enum):
    """The two countdown timers."""

    DELAY = auto()
    SOUND = auto()


@dataclass
class CountdownTimers:
    """Deterministic 60 Hz countdown pair.

    ``advance`` takes an explicit elapsed duration so tests can drive decay
    without a clock; ``sample`` adapts it to an absolute millisecond clock.
    """

    period_ms: int = TIMER_PERIOD_MS
    delay: int = 0
    sound: int = 0

    def __post_init__(self) -> None:
        self.period_ms = int(self.period_ms)
        if self.period_ms <= 0:
            raise ValueError(f"Timer period must be positive, got {self.period_ms}")
        self._last_update_ms = 0

    def reset(self, *, now_ms: int = 0) -> None:
        """Zero both counters and take ``now_ms`` as the decay baseline."""

        self.delay = 0
        self.sound = 0
        self._last_update_ms = int(now_ms)

    def advance(self, elapsed_ms: float) -> int:
        """Apply every whole tick contained in ``elapsed_ms``; return the tick count."""

        if elapsed_ms < 0:
            raise ValueError(f"Elapsed time must not be negative, got {elapsed_ms}")
        ticks = int(elapsed_ms // self.period_ms)
        if ticks:
            self.delay = max(0, self.delay - ticks)
            self.sound = max(0, self.sound - ticks)
        return ticks

    def sample(self, now_ms: int) -> int:
        """Advance to the absolute time ``now_ms``, keeping the sub-tick remainder."""

        elapsed = max(0, int(now_ms) - self._last_update_ms)
        ticks = self.advance(elapsed)
        self._last_update_ms += ticks * self.period_ms
        return ticks

    def expired(self) -> List[TimerSource]:
        """Timers currently sitting at zero."""

        fired: List[TimerSource] = []
        if self.delay == 0:
            fired.append(TimerSource.DELAY)
        if self.sound == 0:
            fired.append(TimerSource.SOUND)
        return fired

    def set_delay(self, value: int) -> None:
        self.delay = int(value) & BYTE_MASK

    def set_sound(self, value: int) -> None:
        self.sound = int(value) & BYTE_MASK

    @property
    def last_update_ms(self) -> int:
        return self._last_update_ms

    @last_update_ms.setter
    def last_update_ms(self, value: int) -> None:
        self._last_update_ms = int(value)


__all__ = ["CountdownTimers", "TimerSource"]
