"""Exceptions raised by the CHIP-8 virtual machine."""

from __future__ import annotations

from typing import Optional


class Chip8Error(Exception):
    """Base class for errors that abort the current operation."""


class OutOfRangeError(Chip8Error, IndexError):
    """A memory, register, stack or key index fell outside its valid range."""

    def __init__(self, what: str, index: int, limit: int) -> None:
        self.what = what
        self.index = index
        self.limit = limit
        super().__init__(f"{what} index 0x{index:X} out of range (limit 0x{limit:X})")


class UnknownInstructionError(Chip8Error):
    """The fetched word does not decode to any instruction."""

    def __init__(self, word: int, address: Optional[int] = None) -> None:
        self.word = word
        self.address = address
        location = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Unknown instruction 0x{word:04X}{location}")


class StackOverflowError(Chip8Error):
    """CALL executed with every stack slot already in use."""

    def __init__(self, address: int, depth: int) -> None:
        self.address = address
        self.depth = depth
        super().__init__(f"Call stack overflow at 0x{address:03X} (depth {depth})")


class StackUnderflowError(Chip8Error):
    """RET executed with an empty call stack."""

    def __init__(self, address: int) -> None:
        self.address = address
        super().__init__(f"Call stack underflow at 0x{address:03X}")


__all__ = [
    "Chip8Error",
    "OutOfRangeError",
    "UnknownInstructionError",
    "StackOverflowError",
    "StackUnderflowError",
]
