"""CHIP-8 interpreter: owns every piece of machine state and executes it.

The host drives the machine one ``step`` at a time::

    vm = Interpreter()
    vm.load(program_bytes)
    while running:
        vm.step()
        if vm.is_draw_pending():
            blit(vm.framebuffer())
            vm.clear_draw_pending()

``step`` is ``execute_one_instruction`` (deterministic, no clock access)
followed by timer decay for the wall-clock time elapsed since the last tick.
Tests can call ``execute_one_instruction`` and ``advance_timers`` directly.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .config import InterpreterConfig
from .constants import (
    ADDRESS_MASK,
    BYTE_MASK,
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    FLAG_REGISTER,
    GLYPH_STRIDE,
    SPRITE_WIDTH,
)
from .decoder import Instruction, Opcode, decode, disassemble
from .display import Framebuffer
from .errors import Chip8Error, UnknownInstructionError
from .keypad import Keypad
from .memory import Memory
from .random_source import RandomSource, SystemRandomSource, default_random_source
from .registers import CallStack, Registers
from .timers import CountdownTimers
from .tracing import TraceDispatcher

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
Handler = Callable[[Instruction], None]


def monotonic_ms() -> int:
    """Default clock: monotonic milliseconds."""
    return time.monotonic_ns() // 1_000_000


class ExecutionMode(enum.Enum):
    RUNNING = "running"
    WAITING_FOR_KEY = "waiting_for_key"


class Interpreter:
    """CHIP-8 virtual machine.

    Not thread-safe: the host serializes every call against one instance.
    """

    def __init__(
        self,
        config: Optional[InterpreterConfig] = None,
        *,
        random_source: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
        tracer: Optional[TraceDispatcher] = None,
    ) -> None:
        self.config = config or InterpreterConfig()
        if random_source is None:
            if self.config.random_seed is not None:
                random_source = SystemRandomSource(self.config.random_seed)
            else:
                random_source = default_random_source()
        self._random = random_source
        self._clock: Clock = clock or monotonic_ms
        self.tracer = tracer or TraceDispatcher()

        self._memory = Memory()
        self._regs = Registers()
        self._stack = CallStack()
        self._display = Framebuffer()
        self._keypad = Keypad()
        self._timers = CountdownTimers(period_ms=self.config.timer_period_ms)

        self._mode = ExecutionMode.RUNNING
        self._wait_register: Optional[int] = None
        self.last_instruction: Optional[Instruction] = None
        self.instruction_count = 0

        self._dispatch: Dict[Opcode, Handler] = self._build_dispatch()
        self.reset()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def reset(self) -> None:
        """Return every state group to its power-on defaults."""
        self._memory.reset()
        self._regs.reset(self.config.program_origin)
        self._stack.reset()
        self._display.reset()
        self._keypad.reset()
        self._timers.reset(now_ms=self._clock())
        self._mode = ExecutionMode.RUNNING
        self._wait_register = None
        self.last_instruction = None
        self.instruction_count = 0
        logger.debug("Interpreter reset, PC=0x%03X", self._regs.pc)

    def load(self, data: bytes) -> None:
        """Copy a program image to the program origin."""
        self._memory.load_program(data, self.config.program_origin)

    def load_program(self, data: bytes) -> None:
        """Reset, then load ``data``."""
        self.reset()
        self.load(data)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def step(self) -> Optional[Instruction]:
        """Execute one instruction, then decay the timers by elapsed real time."""
        try:
            instruction = self.execute_one_instruction()
        except Chip8Error as exc:
            logger.warning("Step aborted at PC=0x%03X: %s", self._regs.pc, exc)
            if self.tracer.has_observers():
                self.tracer.record_fault(self._regs.pc, exc)
            raise
        ticks = self._timers.sample(self._clock())
        if ticks and self.tracer.has_observers():
            self.tracer.record_timer_tick(ticks, self._timers.delay, self._timers.sound)
        return instruction

    def execute_one_instruction(self) -> Optional[Instruction]:
        """Fetch and execute the word at PC; no timer or clock involvement.

        While waiting for a key this re-runs the key scan instead of fetching.
        """
        if self._mode is ExecutionMode.WAITING_FOR_KEY:
            if self._poll_key_wait():
                self.instruction_count += 1
            return self.last_instruction
        word = self._memory.read_word(self._regs.pc)
        return self.execute(word)

    def execute(self, word: int) -> Instruction:
        """Decode ``word`` and execute it as if fetched from the current PC."""
        pc = self._regs.pc
        instruction = decode(word)
        self.last_instruction = instruction
        if instruction.opcode is None:
            raise UnknownInstructionError(instruction.word, pc)

        if self.config.trace_instructions:
            logger.debug("%03X: %04X  %s", pc, instruction.word, disassemble(word))
        if self.tracer.has_observers():
            self.tracer.record_instruction(pc, instruction.word, disassemble(word))

        self._dispatch[instruction.opcode](instruction)
        if self._mode is ExecutionMode.RUNNING:
            self.instruction_count += 1
        return instruction

    def advance_timers(self, elapsed_ms: float) -> int:
        """Decay the timers by the whole 60 Hz ticks in ``elapsed_ms``."""
        ticks = self._timers.advance(elapsed_ms)
        if ticks and self.tracer.has_observers():
            self.tracer.record_timer_tick(ticks, self._timers.delay, self._timers.sound)
        return ticks

    # ------------------------------------------------------------------ #
    # Host-facing input and display
    # ------------------------------------------------------------------ #
    def set_key_down(self, index: int) -> None:
        self._keypad.press(index)

    def set_key_up(self, index: int) -> None:
        self._keypad.release(index)

    def is_draw_pending(self) -> bool:
        return self._display.dirty

    def clear_draw_pending(self) -> None:
        self._display.clear_dirty()

    def framebuffer(self) -> np.ndarray:
        """Read-only (32, 64) boolean view of the display."""
        return self._display.view()

    # ------------------------------------------------------------------ #
    # State inspection
    # ------------------------------------------------------------------ #
    @property
    def pc(self) -> int:
        return self._regs.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._regs.pc = value

    @property
    def index(self) -> int:
        return self._regs.i

    @index.setter
    def index(self, value: int) -> None:
        self._regs.i = value

    @property
    def registers(self) -> Tuple[int, ...]:
        return self._regs.as_tuple()

    def set_register(self, index: int, value: int) -> None:
        self._regs.set(index, value)

    @property
    def stack(self) -> Tuple[int, ...]:
        return self._stack.entries()

    @property
    def stack_pointer(self) -> int:
        return self._stack.pointer

    @property
    def delay_timer(self) -> int:
        return self._timers.delay

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self._timers.set_delay(value)

    @property
    def sound_timer(self) -> int:
        return self._timers.sound

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self._timers.set_sound(value)

    @property
    def sound_active(self) -> bool:
        return self._timers.sound > 0

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def display(self) -> Framebuffer:
        return self._display

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    @property
    def timers(self) -> CountdownTimers:
        return self._timers

    @property
    def mode(self) -> ExecutionMode:
        return self._mode

    @property
    def waiting_register(self) -> Optional[int]:
        return self._wait_register

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #
    def _build_dispatch(self) -> Dict[Opcode, Handler]:
        return {
            Opcode.CLS: self._op_cls,
            Opcode.RET: self._op_ret,
            Opcode.JP: self._op_jp,
            Opcode.CALL: self._op_call,
            Opcode.SE_IMM: self._op_se_imm,
            Opcode.SNE_IMM: self._op_sne_imm,
            Opcode.SE_REG: self._op_se_reg,
            Opcode.LD_IMM: self._op_ld_imm,
            Opcode.ADD_IMM: self._op_add_imm,
            Opcode.LD_REG: self._op_alu,
            Opcode.OR: self._op_alu,
            Opcode.AND: self._op_alu,
            Opcode.XOR: self._op_alu,
            Opcode.ADD_REG: self._op_alu,
            Opcode.SUB: self._op_alu,
            Opcode.SHR: self._op_alu,
            Opcode.SUBN: self._op_alu,
            Opcode.SHL: self._op_alu,
            Opcode.SNE_REG: self._op_sne_reg,
            Opcode.LD_I: self._op_ld_i,
            Opcode.JP_V0: self._op_jp_v0,
            Opcode.RND: self._op_rnd,
            Opcode.DRW: self._op_drw,
            Opcode.SKP: self._op_skp,
            Opcode.SKNP: self._op_sknp,
            Opcode.LD_VX_DT: self._op_ld_vx_dt,
            Opcode.LD_VX_K: self._op_ld_vx_k,
            Opcode.LD_DT_VX: self._op_ld_dt_vx,
            Opcode.LD_ST_VX: self._op_ld_st_vx,
            Opcode.ADD_I: self._op_add_i,
            Opcode.LD_F: self._op_ld_f,
            Opcode.LD_B: self._op_ld_b,
            Opcode.LD_MEM_VX: self._op_ld_mem_vx,
            Opcode.LD_VX_MEM: self._op_ld_vx_mem,
        }

    def _advance(self, amount: int = 2) -> None:
        self._regs.pc = self._regs.pc + amount

    def _skip_if(self, condition: bool) -> None:
        self._advance(4 if condition else 2)

    # -- 0x0: CLS / RET --
    def _op_cls(self, ins: Instruction) -> None:
        self._display.clear()
        self._advance()

    def _op_ret(self, ins: Instruction) -> None:
        pc = self._regs.pc
        target = self._stack.pop(pc=pc)
        self._regs.pc = target
        if self.tracer.has_observers():
            self.tracer.record_return(pc, target, self._stack.pointer)

    # -- 0x1, 0x2, 0xB: jumps and calls --
    def _op_jp(self, ins: Instruction) -> None:
        self._regs.pc = ins.nnn

    def _op_call(self, ins: Instruction) -> None:
        pc = self._regs.pc
        self._stack.push(pc + 2, pc=pc)
        self._regs.pc = ins.nnn
        if self.tracer.has_observers():
            self.tracer.record_call(pc, ins.nnn, self._stack.pointer)

    def _op_jp_v0(self, ins: Instruction) -> None:
        self._regs.pc = ins.nnn + self._regs.v[0]

    # -- 0x3, 0x4, 0x5, 0x9: conditional skips --
    def _op_se_imm(self, ins: Instruction) -> None:
        self._skip_if(self._regs.v[ins.x] == ins.nn)

    def _op_sne_imm(self, ins: Instruction) -> None:
        self._skip_if(self._regs.v[ins.x] != ins.nn)

    def _op_se_reg(self, ins: Instruction) -> None:
        self._skip_if(self._regs.v[ins.x] == self._regs.v[ins.y])

    def _op_sne_reg(self, ins: Instruction) -> None:
        self._skip_if(self._regs.v[ins.x] != self._regs.v[ins.y])

    # -- 0x6, 0x7: immediate loads --
    def _op_ld_imm(self, ins: Instruction) -> None:
        self._regs.set(ins.x, ins.nn)
        self._advance()

    def _op_add_imm(self, ins: Instruction) -> None:
        # No carry flag for the immediate form.
        self._regs.set(ins.x, self._regs.v[ins.x] + ins.nn)
        self._advance()

    # -- 0x8: register-register ALU --
    def _op_alu(self, ins: Instruction) -> None:
        v = self._regs.v
        a, b = v[ins.x], v[ins.y]
        op = ins.opcode
        flag: Optional[int] = None

        if op is Opcode.LD_REG:
            result = b
        elif op is Opcode.OR:
            result = a | b
        elif op is Opcode.AND:
            result = a & b
        elif op is Opcode.XOR:
            result = a ^ b
        elif op is Opcode.ADD_REG:
            flag = 1 if a + b > BYTE_MASK else 0
            result = a + b
        elif op is Opcode.SUB:
            flag = 1 if a > b else 0
            result = a - b
        elif op is Opcode.SHR:
            flag = a & 0x1
            result = a >> 1
        elif op is Opcode.SUBN:
            flag = 1 if b > a else 0
            result = b - a
        else:  # SHL
            flag = (a >> 7) & 0x1
            result = a << 1

        # Operands are read before VF changes; with VF as the destination
        # the result wins over the flag.
        if flag is not None:
            v[FLAG_REGISTER] = flag
        v[ins.x] = result & BYTE_MASK
        self._advance()

    # -- 0xA, 0xC: index and random --
    def _op_ld_i(self, ins: Instruction) -> None:
        self._regs.i = ins.nnn
        self._advance()

    def _op_rnd(self, ins: Instruction) -> None:
        self._regs.set(ins.x, self._random.next_byte() & ins.nn)
        self._advance()

    # -- 0xD: sprite drawing --
    def _op_drw(self, ins: Instruction) -> None:
        base_x = self._regs.v[ins.x]
        base_y = self._regs.v[ins.y]
        sprite = self._memory.read_bytes(self._regs.i, ins.n)

        erased = False
        self._regs.flag = 0
        for row, bits in enumerate(sprite):
            draw_y = (base_y + row) % DISPLAY_HEIGHT
            for col in range(SPRITE_WIDTH):
                if not bits & (0x80 >> col):
                    continue
                draw_x = (base_x + col) % DISPLAY_WIDTH
                # Only a set pixel turning off counts; drawing onto blank
                # pixels never raises the flag.
                if not self._display.flip(draw_x, draw_y):
                    erased = True
        if erased:
            self._regs.flag = 1
        self._display.mark_dirty()

        if self.tracer.has_observers():
            self.tracer.record_draw(self._regs.pc, base_x, base_y, ins.n, erased)
        self._advance()

    # -- 0xE: key skips --
    def _op_skp(self, ins: Instruction) -> None:
        pressed = self._keypad.is_pressed(self._regs.v[ins.x])
        if pressed:
            self._advance()
        self._advance()

    def _op_sknp(self, ins: Instruction) -> None:
        pressed = self._keypad.is_pressed(self._regs.v[ins.x])
        if not pressed:
            self._advance()
        self._advance()

    # -- 0xF: timers, key wait, index and memory transfers --
    def _op_ld_vx_dt(self, ins: Instruction) -> None:
        self._regs.set(ins.x, self._timers.delay)
        self._advance()

    def _op_ld_vx_k(self, ins: Instruction) -> None:
        key = self._keypad.last_pressed()
        if key is None:
            # PC stays on this instruction until a key is down.
            self._mode = ExecutionMode.WAITING_FOR_KEY
            self._wait_register = ins.x
            logger.debug(
                "Waiting for key into V%X at PC=0x%03X", ins.x, self._regs.pc
            )
            if self.tracer.has_observers():
                self.tracer.record_key_wait(self._regs.pc, ins.x)
            return
        self._regs.set(ins.x, key)
        self._advance()

    def _poll_key_wait(self) -> bool:
        """Finish a pending key wait if any key is down."""
        register = self._wait_register
        key = self._keypad.last_pressed()
        if key is None or register is None:
            return False
        self._regs.set(register, key)
        self._mode = ExecutionMode.RUNNING
        self._wait_register = None
        logger.debug("Key %X pressed, resuming with V%X", key, register)
        if self.tracer.has_observers():
            self.tracer.record_key_resume(self._regs.pc, register, key)
        self._advance()
        return True

    def _op_ld_dt_vx(self, ins: Instruction) -> None:
        self._timers.set_delay(self._regs.v[ins.x])
        self._advance()

    def _op_ld_st_vx(self, ins: Instruction) -> None:
        self._timers.set_sound(self._regs.v[ins.x])
        self._advance()

    def _op_add_i(self, ins: Instruction) -> None:
        total = self._regs.i + self._regs.v[ins.x]
        self._regs.flag = 1 if total > ADDRESS_MASK else 0
        self._regs.i = total
        self._advance()

    def _op_ld_f(self, ins: Instruction) -> None:
        self._regs.i = GLYPH_STRIDE * self._regs.v[ins.x]
        self._advance()

    def _op_ld_b(self, ins: Instruction) -> None:
        value = self._regs.v[ins.x]
        self._memory.write_bytes(
            self._regs.i, (value // 100, (value // 10) % 10, value % 10)
        )
        self._advance()

    def _op_ld_mem_vx(self, ins: Instruction) -> None:
        # I is left unchanged, unlike the COSMAC VIP interpreter.
        self._memory.write_bytes(self._regs.i, self._regs.v[: ins.x + 1])
        self._advance()

    def _op_ld_vx_mem(self, ins: Instruction) -> None:
        data = self._memory.read_bytes(self._regs.i, ins.x + 1)
        for offset, value in enumerate(data):
            self._regs.v[offset] = value
        self._advance()


__all__ = ["Interpreter", "ExecutionMode", "monotonic_ms"]
