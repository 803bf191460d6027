"""CHIP-8 virtual machine core."""

from .interpreter import ExecutionMode, Interpreter
from .config import InterpreterConfig
from .decoder import Instruction, Opcode, decode, disassemble
from .errors import (
    Chip8Error,
    OutOfRangeError,
    StackOverflowError,
    StackUnderflowError,
    UnknownInstructionError,
)
from .random_source import RandomSource, SequenceRandomSource, SystemRandomSource
from .state_model import (
    CPUState,
    FieldDiff,
    InterpreterState,
    KeypadState,
    MemoryState,
    StateDiff,
    TimerState,
    capture_state,
    diff_states,
    empty_state_diff,
)

__all__ = [
    "Interpreter",
    "ExecutionMode",
    "InterpreterConfig",
    "Instruction",
    "Opcode",
    "decode",
    "disassemble",
    "Chip8Error",
    "OutOfRangeError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownInstructionError",
    "RandomSource",
    "SequenceRandomSource",
    "SystemRandomSource",
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
