"""Sixteen-key input latch driven by the host."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .constants import NUM_KEYS
from .errors import OutOfRangeError

# Conventional COSMAC VIP layout, row by row, for hosts that want labels.
KEY_LAYOUT: Tuple[Tuple[int, ...], ...] = (
    (0x1, 0x2, 0x3, 0xC),
    (0x4, 0x5, 0x6, 0xD),
    (0x7, 0x8, 0x9, 0xE),
    (0xA, 0x0, 0xB, 0xF),
)


class Keypad:
    """Boolean key states; mutated only by the host, read by instructions."""

    def __init__(self) -> None:
        self._keys: List[bool] = [False] * NUM_KEYS

    def reset(self) -> None:
        self._keys = [False] * NUM_KEYS

    @staticmethod
    def _check(index: int) -> None:
        if not (0 <= index < NUM_KEYS):
            raise OutOfRangeError("key", index, NUM_KEYS - 1)

    def press(self, index: int) -> None:
        self._check(index)
        self._keys[index] = True

    def release(self, index: int) -> None:
        self._check(index)
        self._keys[index] = False

    def is_pressed(self, index: int) -> bool:
        self._check(index)
        return self._keys[index]

    def pressed_keys(self) -> Tuple[int, ...]:
        return tuple(idx for idx, down in enumerate(self._keys) if down)

    def last_pressed(self) -> Optional[int]:
        """Return the highest pressed key index, or ``None``.

        A full scan where later matches win, so with several keys held the
        highest index is reported.
        """
        found: Optional[int] = None
        for idx, down in enumerate(self._keys):
            if down:
                found = idx
        return found

    def any_pressed(self) -> bool:
        return any(self._keys)


__all__ = ["Keypad", "KEY_LAYOUT"]
