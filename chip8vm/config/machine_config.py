"""Interpreter configuration for the CHIP-8 virtual machine."""

from dataclasses import dataclass
from typing import Optional
import json

from ..constants import PROGRAM_ORIGIN, TIMER_PERIOD_MS


@dataclass
class InterpreterConfig:
    """Tunable interpreter settings."""
    name: str = "CHIP-8"
    timer_period_ms: int = TIMER_PERIOD_MS  # one 60 Hz tick, rounded
    program_origin: int = PROGRAM_ORIGIN
    trace_instructions: bool = False
    random_seed: Optional[int] = None  # None = OS entropy

    def __post_init__(self):
        if self.timer_period_ms <= 0:
            raise ValueError(f"timer_period_ms must be positive: {self.timer_period_ms}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "timer_period_ms": self.timer_period_ms,
            "program_origin": f"0x{self.program_origin:03X}",
            "trace_instructions": self.trace_instructions,
            "random_seed": self.random_seed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'InterpreterConfig':
        origin = data.get("program_origin", PROGRAM_ORIGIN)
        return cls(
            name=data.get("name", "CHIP-8"),
            timer_period_ms=int(data.get("timer_period_ms", TIMER_PERIOD_MS)),
            program_origin=int(origin, 16) if isinstance(origin, str) else origin,
            trace_instructions=bool(data.get("trace_instructions", False)),
            random_seed=data.get("random_seed"),
        )

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'InterpreterConfig':
        """Load configuration from JSON file."""
        with open(path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def for_profile(cls, profile: str) -> 'InterpreterConfig':
        """Get a named preset; unknown names fall back to "default"."""
        configs = {
            "default": cls(),
            "trace": cls(name="CHIP-8 (traced)", trace_instructions=True),
        }
        return configs.get(profile, configs["default"])
