from __future__ import annotations

import os

import pytest
from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from chip8vm import Interpreter, SequenceRandomSource, UnknownInstructionError
from chip8vm.decoder import decode

from .conftest import FakeClock, words_to_bytes


MAX_EXAMPLES = int(os.getenv("CHIP8_PROP_EXAMPLES", "200"))

PROP_SETTINGS = settings(
    max_examples=MAX_EXAMPLES,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)

bytes_ = st.integers(min_value=0, max_value=0xFF)
# Operand registers that never alias VF or each other.
reg_pairs = st.tuples(
    st.integers(min_value=0, max_value=0xE), st.integers(min_value=0, max_value=0xE)
).filter(lambda pair: pair[0] != pair[1])


def _run_alu(sub: int, x: int, y: int, vx: int, vy: int) -> Interpreter:
    vm = Interpreter(random_source=SequenceRandomSource([0]), clock=FakeClock())
    vm.load(words_to_bytes(0x8000 | (x << 8) | (y << 4) | sub))
    vm.set_register(x, vx)
    vm.set_register(y, vy)
    vm.step()
    return vm


@given(regs=reg_pairs, vx=bytes_, vy=bytes_)
@PROP_SETTINGS
def test_prop_add_carry(regs, vx, vy) -> None:
    x, y = regs
    vm = _run_alu(0x4, x, y, vx, vy)
    assert vm.registers[x] == (vx + vy) % 256
    assert vm.registers[0xF] == (1 if vx + vy > 255 else 0)
    assert vm.pc == 0x202


@given(regs=reg_pairs, vx=bytes_, vy=bytes_)
@PROP_SETTINGS
def test_prop_sub_and_subn_borrow(regs, vx, vy) -> None:
    x, y = regs
    vm = _run_alu(0x5, x, y, vx, vy)
    assert vm.registers[x] == (vx - vy) % 256
    assert vm.registers[0xF] == (1 if vx > vy else 0)

    vm = _run_alu(0x7, x, y, vx, vy)
    assert vm.registers[x] == (vy - vx) % 256
    assert vm.registers[0xF] == (1 if vy > vx else 0)


@given(regs=reg_pairs, vx=bytes_)
@PROP_SETTINGS
def test_prop_shifts_capture_outgoing_bit(regs, vx) -> None:
    x, y = regs
    vm = _run_alu(0x6, x, y, vx, 0)
    assert vm.registers[x] == vx >> 1
    assert vm.registers[0xF] == vx & 1

    vm = _run_alu(0xE, x, y, vx, 0)
    assert vm.registers[x] == (vx << 1) & 0xFF
    assert vm.registers[0xF] == vx >> 7


@given(vy=bytes_, vf=bytes_)
@PROP_SETTINGS
def test_prop_add_into_flag_register_keeps_sum(vy, vf) -> None:
    vm = _run_alu(0x4, 0xF, 0x1, vf, vy)
    assert vm.registers[0xF] == (vf + vy) % 256


@given(value=bytes_, index=st.integers(min_value=0x300, max_value=0xFFD))
@PROP_SETTINGS
def test_prop_bcd_digits_recompose(value, index) -> None:
    vm = Interpreter(random_source=SequenceRandomSource([0]), clock=FakeClock())
    vm.load(words_to_bytes(0xF333))
    vm.set_register(3, value)
    vm.index = index
    vm.step()
    hundreds, tens, ones = vm.memory.read_bytes(index, 3)
    assert all(digit <= 9 for digit in (hundreds, tens, ones))
    assert hundreds * 100 + tens * 10 + ones == value
    assert vm.index == index


# Families 0, 8, E and F select a sub-operation, so most of their words are undefined.
sub_family_words = st.builds(
    lambda family, low: (family << 12) | low,
    st.sampled_from([0x0, 0x8, 0xE, 0xF]),
    st.integers(min_value=0, max_value=0xFFF),
)


@given(word=sub_family_words)
@PROP_SETTINGS
def test_prop_unknown_words_report_exact_word(word) -> None:
    assume(not decode(word).known)
    vm = Interpreter(random_source=SequenceRandomSource([0]), clock=FakeClock())
    vm.load(words_to_bytes(word))
    with pytest.raises(UnknownInstructionError) as excinfo:
        vm.step()
    assert excinfo.value.word == word
    assert excinfo.value.address == 0x200
    assert vm.pc == 0x200
