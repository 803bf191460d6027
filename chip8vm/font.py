"""Built-in hexadecimal glyph table and helpers for working with it."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Tuple

from .constants import FONT_BASE, GLYPH_STRIDE, SPRITE_WIDTH

GLYPH_COUNT = 16

FONT_DATA: bytes = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    ]
)


def glyph_address(digit: int) -> int:
    """Return the memory address of the glyph for a hex digit."""
    if not (0 <= digit < GLYPH_COUNT):
        raise ValueError(f"Glyph digit out of range: {digit}")
    return FONT_BASE + digit * GLYPH_STRIDE


def glyph_rows(digit: int) -> Tuple[int, ...]:
    """Return the five sprite bytes for a hex digit."""
    start = glyph_address(digit) - FONT_BASE
    return tuple(FONT_DATA[start : start + GLYPH_STRIDE])


@lru_cache(maxsize=GLYPH_COUNT)
def glyph_bitmap(digit: int) -> Tuple[Tuple[int, ...], ...]:
    """Decode a glyph into rows of 0/1 pixels, most significant bit first."""
    bitmap: List[Tuple[int, ...]] = []
    for row in glyph_rows(digit):
        bitmap.append(
            tuple((row >> (SPRITE_WIDTH - 1 - col)) & 1 for col in range(SPRITE_WIDTH))
        )
    return tuple(bitmap)


__all__ = ["FONT_DATA", "GLYPH_COUNT", "glyph_address", "glyph_rows", "glyph_bitmap"]
