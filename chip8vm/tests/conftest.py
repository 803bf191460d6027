"""Shared pytest fixtures for the CHIP-8 interpreter tests."""

from __future__ import annotations

from typing import Callable

import pytest

from chip8vm import Interpreter, SequenceRandomSource


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = 1_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def words_to_bytes(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def random_source() -> SequenceRandomSource:
    return SequenceRandomSource([0xAB, 0x3C, 0xFF])


@pytest.fixture
def vm(clock: FakeClock, random_source: SequenceRandomSource) -> Interpreter:
    return Interpreter(random_source=random_source, clock=clock)


@pytest.fixture
def load_words(vm: Interpreter) -> Callable[..., Interpreter]:
    """Load big-endian instruction words at the program origin."""

    def _load(*words: int) -> Interpreter:
        vm.load(words_to_bytes(*words))
        return vm

    return _load
