"""In-memory interpreter snapshots and diff utilities.

Snapshots are plain frozen dataclasses meant for tests and debuggers; they
are never written anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple, TYPE_CHECKING

from .display import FramebufferSnapshot

if TYPE_CHECKING:
    from .interpreter import Interpreter


@dataclass(frozen=True)
class CPUState:
    """Register file, call stack and execution mode."""

    registers: Tuple[int, ...]
    index: int
    pc: int
    stack: Tuple[int, ...]
    mode: str
    waiting_register: Optional[int]
    instruction_count: int


@dataclass(frozen=True)
class MemoryState:
    """Full 4 KiB address space."""

    data: bytes


@dataclass(frozen=True)
class KeypadState:
    pressed_keys: Tuple[int, ...]


@dataclass(frozen=True)
class TimerState:
    delay: int
    sound: int
    period_ms: int


@dataclass(frozen=True)
class InterpreterState:
    """Composite immutable snapshot of every state group."""

    cpu: CPUState
    memory: MemoryState
    keypad: KeypadState
    timers: TimerState
    display: FramebufferSnapshot


@dataclass(frozen=True)
class FieldDiff:
    """Difference for a single named field."""

    name: str
    before: object
    after: object


@dataclass(frozen=True)
class StateDiff:
    """Aggregated differences between two interpreter states."""

    cpu: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    memory: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    keypad: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    timers: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    display_changed: bool = False

    def is_empty(self) -> bool:
        """Return True when no differences were recorded."""

        return (
            not self.cpu
            and not self.memory
            and not self.keypad
            and not self.timers
            and not self.display_changed
        )

    def names(self) -> Tuple[str, ...]:
        """Every changed field name, grouped cpu/memory/keypad/timers."""

        return tuple(
            diff.name
            for group in (self.cpu, self.memory, self.keypad, self.timers)
            for diff in group
        )


def empty_state_diff() -> StateDiff:
    """Return a reusable empty diff instance."""

    return StateDiff()


def capture_state(interpreter: "Interpreter") -> InterpreterState:
    """Capture the current interpreter state as a canonical snapshot."""

    cpu = CPUState(
        registers=interpreter.registers,
        index=interpreter.index,
        pc=interpreter.pc,
        stack=interpreter.stack,
        mode=interpreter.mode.value,
        waiting_register=interpreter.waiting_register,
        instruction_count=interpreter.instruction_count,
    )
    timers = interpreter.timers
    return InterpreterState(
        cpu=cpu,
        memory=MemoryState(data=interpreter.memory.snapshot()),
        keypad=KeypadState(pressed_keys=interpreter.keypad.pressed_keys()),
        timers=TimerState(
            delay=timers.delay, sound=timers.sound, period_ms=timers.period_ms
        ),
        display=interpreter.display.snapshot(),
    )


def diff_states(
    before: Optional[InterpreterState], after: InterpreterState
) -> StateDiff:
    """Compute structured differences between two interpreter states."""

    if before is None:
        return empty_state_diff()

    return StateDiff(
        cpu=_diff_cpu(before.cpu, after.cpu),
        memory=_diff_memory(before.memory, after.memory),
        keypad=_diff_keypad(before.keypad, after.keypad),
        timers=_diff_timers(before.timers, after.timers),
        display_changed=before.display.pixels != after.display.pixels,
    )


def _diff_cpu(before: CPUState, after: CPUState) -> Tuple[FieldDiff, ...]:
    diffs: list[FieldDiff] = []
    diffs.extend(
        _diff_mapping(
            "registers",
            {f"V{idx:X}": value for idx, value in enumerate(before.registers)},
            {f"V{idx:X}": value for idx, value in enumerate(after.registers)},
        )
    )
    for name in ("index", "pc", "stack", "mode", "waiting_register", "instruction_count"):
        previous = getattr(before, name)
        current = getattr(after, name)
        if previous != current:
            diffs.append(FieldDiff(name, previous, current))
    return tuple(diffs)


def _diff_memory(before: MemoryState, after: MemoryState) -> Tuple[FieldDiff, ...]:
    diffs: list[FieldDiff] = []
    if before.data == after.data:
        return ()
    for address, (previous, current) in enumerate(zip(before.data, after.data)):
        if previous != current:
            diffs.append(FieldDiff(f"0x{address:03X}", previous, current))
    return tuple(diffs)


def _diff_keypad(before: KeypadState, after: KeypadState) -> Tuple[FieldDiff, ...]:
    if before.pressed_keys != after.pressed_keys:
        return (FieldDiff("pressed_keys", before.pressed_keys, after.pressed_keys),)
    return ()


def _diff_timers(before: TimerState, after: TimerState) -> Tuple[FieldDiff, ...]:
    diffs: list[FieldDiff] = []
    if before.delay != after.delay:
        diffs.append(FieldDiff("delay", before.delay, after.delay))
    if before.sound != after.sound:
        diffs.append(FieldDiff("sound", before.sound, after.sound))
    if before.period_ms != after.period_ms:
        diffs.append(FieldDiff("period_ms", before.period_ms, after.period_ms))
    return tuple(diffs)


def _diff_mapping(
    prefix: str, before: Dict[str, int], after: Dict[str, int]
) -> Iterable[FieldDiff]:
    for key in sorted(set(before.keys()) | set(after.keys())):
        previous = before.get(key)
        current = after.get(key)
        if previous != current:
            yield FieldDiff(f"{prefix}.{key}", previous, current)


__all__ = [
    "CPUState",
    "MemoryState",
    "KeypadState",
    "TimerState",
    "InterpreterState",
    "FieldDiff",
    "StateDiff",
    "capture_state",
    "diff_states",
    "empty_state_diff",
]
