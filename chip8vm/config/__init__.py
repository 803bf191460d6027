"""Configuration system for the CHIP-8 virtual machine."""

from .machine_config import InterpreterConfig

__all__ = ["InterpreterConfig"]
