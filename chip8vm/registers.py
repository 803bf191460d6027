"""Register file and return-address stack."""

from __future__ import annotations

from typing import List, Tuple

from .constants import (
    BYTE_MASK,
    FLAG_REGISTER,
    NUM_REGISTERS,
    PROGRAM_ORIGIN,
    STACK_DEPTH,
    WORD_MASK,
)
from .errors import OutOfRangeError, StackOverflowError, StackUnderflowError


class Registers:
    """V0-VF plus the 16-bit index register and program counter."""

    def __init__(self) -> None:
        self.v: List[int] = [0] * NUM_REGISTERS
        self._i = 0
        self._pc = PROGRAM_ORIGIN

    def reset(self, pc: int = PROGRAM_ORIGIN) -> None:
        self.v = [0] * NUM_REGISTERS
        self._i = 0
        self._pc = pc & WORD_MASK

    def get(self, index: int) -> int:
        if not (0 <= index < NUM_REGISTERS):
            raise OutOfRangeError("register", index, NUM_REGISTERS - 1)
        return self.v[index]

    def set(self, index: int, value: int) -> None:
        if not (0 <= index < NUM_REGISTERS):
            raise OutOfRangeError("register", index, NUM_REGISTERS - 1)
        self.v[index] = value & BYTE_MASK

    @property
    def flag(self) -> int:
        return self.v[FLAG_REGISTER]

    @flag.setter
    def flag(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & BYTE_MASK

    @property
    def i(self) -> int:
        return self._i

    @i.setter
    def i(self, value: int) -> None:
        self._i = value & WORD_MASK

    @property
    def pc(self) -> int:
        return self._pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._pc = value & WORD_MASK

    def as_tuple(self) -> Tuple[int, ...]:
        return tuple(self.v)


class CallStack:
    """Fixed-depth return-address stack.

    Overflow and underflow are fatal to the instruction that caused them; the
    stack pointer never wraps.
    """

    def __init__(self, depth: int = STACK_DEPTH) -> None:
        self.depth = depth
        self._slots: List[int] = [0] * depth
        self._sp = 0

    def reset(self) -> None:
        self._slots = [0] * self.depth
        self._sp = 0

    @property
    def pointer(self) -> int:
        return self._sp

    def push(self, address: int, *, pc: int) -> None:
        """Push a return address; ``pc`` identifies the CALL for diagnostics."""
        if self._sp >= self.depth:
            raise StackOverflowError(pc, self.depth)
        self._slots[self._sp] = address & WORD_MASK
        self._sp += 1

    def pop(self, *, pc: int) -> int:
        if self._sp <= 0:
            raise StackUnderflowError(pc)
        self._sp -= 1
        return self._slots[self._sp]

    def peek(self) -> int:
        if self._sp <= 0:
            raise OutOfRangeError("stack", -1, self.depth - 1)
        return self._slots[self._sp - 1]

    def __getitem__(self, index: int) -> int:
        if not (0 <= index < self.depth):
            raise OutOfRangeError("stack", index, self.depth - 1)
        return self._slots[index]

    def __len__(self) -> int:
        return self._sp

    def entries(self) -> Tuple[int, ...]:
        """Live return addresses, oldest first."""
        return tuple(self._slots[: self._sp])


__all__ = ["Registers", "CallStack"]
