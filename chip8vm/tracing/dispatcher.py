"""Tracing event dispatcher and observer interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol


class TraceEventType(Enum):
    """Kinds of tracing events emitted by the interpreter."""

    INSTRUCTION = "instruction"
    CALL = "call"
    RETURN = "return"
    DRAW = "draw"
    KEY_WAIT = "key_wait"
    KEY_RESUME = "key_resume"
    TIMER_TICK = "timer_tick"
    FAULT = "fault"


@dataclass
class TraceEvent:
    """Structured tracing event."""

    type: TraceEventType
    pc: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict)


class TraceObserver(Protocol):
    """Interface for tracing observers."""

    def handle_event(self, event: TraceEvent) -> None: ...


class TraceDispatcher:
    """Dispatches tracing events to registered observers."""

    def __init__(self) -> None:
        self._observers: List[TraceObserver] = []

    # ------------------------------------------------------------------ #
    # Observer management
    # ------------------------------------------------------------------ #
    def register(self, observer: TraceObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister(self, observer: TraceObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def observers(self) -> Iterable[TraceObserver]:
        return tuple(self._observers)

    def has_observers(self) -> bool:
        """Return True when any observers are registered."""
        return bool(self._observers)

    # ------------------------------------------------------------------ #
    # Convenience emission helpers
    # ------------------------------------------------------------------ #
    def record_instruction(self, pc: int, word: int, mnemonic: str) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.INSTRUCTION,
                pc=pc,
                payload={"word": word, "mnemonic": mnemonic},
            )
        )

    def record_call(self, pc: int, target: int, depth: int) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.CALL,
                pc=pc,
                payload={"target": target, "depth": depth},
            )
        )

    def record_return(self, pc: int, target: int, depth: int) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.RETURN,
                pc=pc,
                payload={"target": target, "depth": depth},
            )
        )

    def record_draw(self, pc: int, x: int, y: int, rows: int, erased: bool) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.DRAW,
                pc=pc,
                payload={"x": x, "y": y, "rows": rows, "erased": erased},
            )
        )

    def record_key_wait(self, pc: int, register: int) -> None:
        self._emit(
            TraceEvent(TraceEventType.KEY_WAIT, pc=pc, payload={"register": register})
        )

    def record_key_resume(self, pc: int, register: int, key: int) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.KEY_RESUME,
                pc=pc,
                payload={"register": register, "key": key},
            )
        )

    def record_timer_tick(self, ticks: int, delay: int, sound: int) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.TIMER_TICK,
                payload={"ticks": ticks, "delay": delay, "sound": sound},
            )
        )

    def record_fault(self, pc: int, error: Exception) -> None:
        self._emit(
            TraceEvent(
                TraceEventType.FAULT,
                pc=pc,
                payload={"error": type(error).__name__, "message": str(error)},
            )
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _emit(self, event: TraceEvent) -> None:
        for observer in tuple(self._observers):
            observer.handle_event(event)


class TraceRecorder:
    """Observer that keeps every event in memory, mostly for tests."""

    def __init__(self) -> None:
        self.events: List[TraceEvent] = []

    def handle_event(self, event: TraceEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: TraceEventType) -> List[TraceEvent]:
        return [event for event in self.events if event.type is event_type]

    def clear(self) -> None:
        self.events.clear()


__all__ = [
    "TraceDispatcher",
    "TraceObserver",
    "TraceEvent",
    "TraceEventType",
    "TraceRecorder",
]
