"""Tracing infrastructure for the CHIP-8 virtual machine."""

from .dispatcher import (
    TraceDispatcher,
    TraceEvent,
    TraceEventType,
    TraceObserver,
    TraceRecorder,
)

__all__ = [
    "TraceDispatcher",
    "TraceEvent",
    "TraceEventType",
    "TraceObserver",
    "TraceRecorder",
]
