"""Machine constants for the CHIP-8 virtual machine."""

from __future__ import annotations

MEMORY_SIZE = 0x1000  # 4 KiB, addresses 0x000-0xFFF
PROGRAM_ORIGIN = 0x200
ADDRESS_MASK = 0xFFF

# Register file
NUM_REGISTERS = 16
FLAG_REGISTER = 0xF  # VF carries carry/borrow/erasure results
BYTE_MASK = 0xFF
WORD_MASK = 0xFFFF

STACK_DEPTH = 16

# Display
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

NUM_KEYS = 16

# Built-in hex glyphs live at the base of memory, five bytes per digit.
FONT_BASE = 0x000
GLYPH_STRIDE = 5

# One 60 Hz tick is 16.666... ms, rounded up.
TIMER_PERIOD_MS = 17

__all__ = [
    "MEMORY_SIZE",
    "PROGRAM_ORIGIN",
    "ADDRESS_MASK",
    "NUM_REGISTERS",
    "FLAG_REGISTER",
    "BYTE_MASK",
    "WORD_MASK",
    "STACK_DEPTH",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "SPRITE_WIDTH",
    "NUM_KEYS",
    "FONT_BASE",
    "GLYPH_STRIDE",
    "TIMER_PERIOD_MS",
]
