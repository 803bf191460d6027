"""Flat 4 KiB memory for the CHIP-8 virtual machine."""

from __future__ import annotations

import logging
from typing import Iterable

from .constants import FONT_BASE, MEMORY_SIZE, PROGRAM_ORIGIN
from .errors import OutOfRangeError
from .font import FONT_DATA

logger = logging.getLogger(__name__)


class Memory:
    """Byte-addressable store with bounds-checked accessors.

    Every accessor raises :class:`OutOfRangeError` instead of wrapping or
    truncating, and multi-byte writes validate the whole span before touching
    any cell.
    """

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        self.size = size
        self._data = bytearray(size)
        self.reset()

    def reset(self) -> None:
        """Zero every cell and reload the glyph table."""
        self._data[:] = bytes(self.size)
        self._data[FONT_BASE : FONT_BASE + len(FONT_DATA)] = FONT_DATA

    # ------------------------------------------------------------------ #
    # Range checks
    # ------------------------------------------------------------------ #
    def _check(self, address: int, count: int = 1) -> None:
        if address < 0 or address >= self.size:
            raise OutOfRangeError("memory", address, self.size - 1)
        last = address + count - 1
        if last >= self.size:
            raise OutOfRangeError("memory", last, self.size - 1)

    def check_span(self, address: int, count: int) -> None:
        """Raise if ``count`` bytes starting at ``address`` are not all valid."""
        if count > 0:
            self._check(address, count)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #
    def read_byte(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def write_byte(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit word from ``address`` and ``address + 1``."""
        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_bytes(self, address: int, count: int) -> bytes:
        self.check_span(address, count)
        return bytes(self._data[address : address + count])

    def write_bytes(self, address: int, data: Iterable[int]) -> None:
        payload = bytes(int(value) & 0xFF for value in data)
        self.check_span(address, len(payload))
        self._data[address : address + len(payload)] = payload

    def load_program(self, data: bytes, origin: int = PROGRAM_ORIGIN) -> None:
        """Copy a raw program image into memory starting at ``origin``.

        Fails before copying anything when the image would run past the last
        valid address.
        """
        payload = bytes(data)
        if origin + len(payload) > self.size:
            raise OutOfRangeError("memory", origin + len(payload) - 1, self.size - 1)
        self.write_bytes(origin, payload)
        logger.debug(
            "Loaded %d program bytes at 0x%03X-0x%03X",
            len(payload),
            origin,
            origin + max(len(payload), 1) - 1,
        )

    def snapshot(self) -> bytes:
        """Return an immutable copy of the whole address space."""
        return bytes(self._data)

    def __len__(self) -> int:
        return self.size


__all__ = ["Memory"]
