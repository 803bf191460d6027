"""Monochrome 64x32 framebuffer with a host-facing dirty flag."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..constants import DISPLAY_HEIGHT, DISPLAY_WIDTH
from ..errors import OutOfRangeError


@dataclass(frozen=True)
class FramebufferSnapshot:
    """Immutable copy of the pixel grid."""

    pixels: Tuple[Tuple[bool, ...], ...]
    draw_pending: bool

    def lit_count(self) -> int:
        return sum(sum(1 for px in row if px) for row in self.pixels)


class Framebuffer:
    """Row-major boolean grid.

    Accessors do not wrap coordinates; callers that need wrap-around (sprite
    drawing) reduce coordinates before calling in.
    """

    WIDTH = DISPLAY_WIDTH
    HEIGHT = DISPLAY_HEIGHT

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._pixels = np.zeros((height, width), dtype=np.bool_)
        self._dirty = False

    def reset(self) -> None:
        """Blank every pixel and drop any pending frame."""
        self._pixels.fill(False)
        self._dirty = False

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width):
            raise OutOfRangeError("framebuffer column", x, self.width - 1)
        if not (0 <= y < self.height):
            raise OutOfRangeError("framebuffer row", y, self.height - 1)

    # ------------------------------------------------------------------ #
    # Pixel access
    # ------------------------------------------------------------------ #
    def get(self, x: int, y: int) -> bool:
        self._check(x, y)
        return bool(self._pixels[y, x])

    def set(self, x: int, y: int, value: bool) -> None:
        self._check(x, y)
        self._pixels[y, x] = bool(value)
        self._dirty = True

    def flip(self, x: int, y: int) -> bool:
        """Toggle one pixel and return its new value."""
        self._check(x, y)
        value = not self._pixels[y, x]
        self._pixels[y, x] = value
        self._dirty = True
        return value

    def clear(self) -> None:
        self._pixels.fill(False)
        self._dirty = True

    # ------------------------------------------------------------------ #
    # Dirty-flag protocol
    # ------------------------------------------------------------------ #
    @property
    def dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        self._dirty = True

    def clear_dirty(self) -> None:
        self._dirty = False

    # ------------------------------------------------------------------ #
    # Host views
    # ------------------------------------------------------------------ #
    def view(self) -> np.ndarray:
        """Read-only (height, width) view sharing storage with the buffer."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def copy(self) -> np.ndarray:
        return self._pixels.copy()

    def snapshot(self) -> FramebufferSnapshot:
        return FramebufferSnapshot(
            pixels=tuple(tuple(bool(px) for px in row) for row in self._pixels),
            draw_pending=self._dirty,
        )

    def rows(self, on: str = "#", off: str = ".") -> List[str]:
        """Text rendering of the grid, one string per row."""
        return ["".join(on if px else off for px in row) for row in self._pixels]

    def packed_rows(self) -> List[int]:
        """Each row as a ``width``-bit integer, leftmost pixel most significant."""
        packed: List[int] = []
        for row in self._pixels:
            value = 0
            for px in row:
                value = (value << 1) | int(px)
            packed.append(value)
        return packed


__all__ = ["Framebuffer", "FramebufferSnapshot"]
