"""Instruction word decoding and disassembly."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


class Opcode(enum.Enum):
    """Base instruction set, named after the conventional mnemonics."""

    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_IMM = "SE_IMM"
    SNE_IMM = "SNE_IMM"
    SE_REG = "SE_REG"
    LD_IMM = "LD_IMM"
    ADD_IMM = "ADD_IMM"
    LD_REG = "LD_REG"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_REG = "ADD_REG"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_REG = "SNE_REG"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I = "ADD_I"
    LD_F = "LD_F"
    LD_B = "LD_B"
    LD_MEM_VX = "LD_MEM_VX"
    LD_VX_MEM = "LD_VX_MEM"


# Families whose whole top nibble identifies the instruction.
_FAMILY_OPCODES: Dict[int, Opcode] = {
    0x1: Opcode.JP,
    0x2: Opcode.CALL,
    0x3: Opcode.SE_IMM,
    0x4: Opcode.SNE_IMM,
    0x5: Opcode.SE_REG,
    0x6: Opcode.LD_IMM,
    0x7: Opcode.ADD_IMM,
    0x9: Opcode.SNE_REG,
    0xA: Opcode.LD_I,
    0xB: Opcode.JP_V0,
    0xC: Opcode.RND,
    0xD: Opcode.DRW,
}

# Families that select a sub-operation from the low byte or low nibble.
_SYS_OPCODES: Dict[int, Opcode] = {0xE0: Opcode.CLS, 0xEE: Opcode.RET}

_ALU_OPCODES: Dict[int, Opcode] = {
    0x0: Opcode.LD_REG,
    0x1: Opcode.OR,
    0x2: Opcode.AND,
    0x3: Opcode.XOR,
    0x4: Opcode.ADD_REG,
    0x5: Opcode.SUB,
    0x6: Opcode.SHR,
    0x7: Opcode.SUBN,
    0xE: Opcode.SHL,
}

_KEY_OPCODES: Dict[int, Opcode] = {0x9E: Opcode.SKP, 0xA1: Opcode.SKNP}

_MISC_OPCODES: Dict[int, Opcode] = {
    0x07: Opcode.LD_VX_DT,
    0x0A: Opcode.LD_VX_K,
    0x15: Opcode.LD_DT_VX,
    0x18: Opcode.LD_ST_VX,
    0x1E: Opcode.ADD_I,
    0x29: Opcode.LD_F,
    0x33: Opcode.LD_B,
    0x55: Opcode.LD_MEM_VX,
    0x65: Opcode.LD_VX_MEM,
}


@dataclass(frozen=True)
class Instruction:
    """A fetched 16-bit word split into its fixed bit-fields."""

    word: int
    opcode: Optional[Opcode]

    @property
    def family(self) -> int:
        return (self.word >> 12) & 0xF

    @property
    def nnn(self) -> int:
        return self.word & 0x0FFF

    @property
    def nn(self) -> int:
        return self.word & 0x00FF

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0x000F

    @property
    def known(self) -> bool:
        return self.opcode is not None

    def fields(self) -> Tuple[int, int, int, int, int]:
        return self.nnn, self.nn, self.x, self.y, self.n

    def __str__(self) -> str:
        return disassemble(self.word)


def identify(word: int) -> Optional[Opcode]:
    """Return the opcode for ``word`` or ``None`` when it is not defined."""
    word &= 0xFFFF
    family = word >> 12
    if family in _FAMILY_OPCODES:
        return _FAMILY_OPCODES[family]
    if family == 0x0:
        # The sub-operation is the low byte alone; 0NNN machine-code calls
        # are not supported.
        return _SYS_OPCODES.get(word & 0xFF)
    if family == 0x8:
        return _ALU_OPCODES.get(word & 0xF)
    if family == 0xE:
        return _KEY_OPCODES.get(word & 0xFF)
    return _MISC_OPCODES.get(word & 0xFF)


def decode(word: int) -> Instruction:
    word &= 0xFFFF
    return Instruction(word=word, opcode=identify(word))


def disassemble(word: int) -> str:
    """Render ``word`` in conventional assembler syntax."""
    ins = decode(word)
    op = ins.opcode
    x, y = f"V{ins.x:X}", f"V{ins.y:X}"
    nnn, nn = f"0x{ins.nnn:03X}", f"0x{ins.nn:02X}"

    if op is None:
        return f"DW 0x{ins.word:04X}"
    if op in (Opcode.CLS, Opcode.RET):
        return op.value
    if op in (Opcode.JP, Opcode.CALL):
        return f"{op.value} {nnn}"
    if op is Opcode.SE_IMM:
        return f"SE {x}, {nn}"
    if op is Opcode.SNE_IMM:
        return f"SNE {x}, {nn}"
    if op is Opcode.SE_REG:
        return f"SE {x}, {y}"
    if op is Opcode.SNE_REG:
        return f"SNE {x}, {y}"
    if op is Opcode.LD_IMM:
        return f"LD {x}, {nn}"
    if op is Opcode.ADD_IMM:
        return f"ADD {x}, {nn}"
    if op is Opcode.LD_REG:
        return f"LD {x}, {y}"
    if op is Opcode.ADD_REG:
        return f"ADD {x}, {y}"
    if op in (Opcode.OR, Opcode.AND, Opcode.XOR, Opcode.SUB, Opcode.SUBN):
        return f"{op.value} {x}, {y}"
    if op in (Opcode.SHR, Opcode.SHL):
        return f"{op.value} {x}"
    if op is Opcode.LD_I:
        return f"LD I, {nnn}"
    if op is Opcode.JP_V0:
        return f"JP V0, {nnn}"
    if op is Opcode.RND:
        return f"RND {x}, {nn}"
    if op is Opcode.DRW:
        return f"DRW {x}, {y}, {ins.n}"
    if op in (Opcode.SKP, Opcode.SKNP):
        return f"{op.value} {x}"

    misc = {
        Opcode.LD_VX_DT: f"LD {x}, DT",
        Opcode.LD_VX_K: f"LD {x}, K",
        Opcode.LD_DT_VX: f"LD DT, {x}",
        Opcode.LD_ST_VX: f"LD ST, {x}",
        Opcode.ADD_I: f"ADD I, {x}",
        Opcode.LD_F: f"LD F, {x}",
        Opcode.LD_B: f"LD B, {x}",
        Opcode.LD_MEM_VX: f"LD [I], {x}",
        Opcode.LD_VX_MEM: f"LD {x}, [I]",
    }
    return misc[op]


__all__ = ["Opcode", "Instruction", "identify", "decode", "disassemble"]
