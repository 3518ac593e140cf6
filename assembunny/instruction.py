from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from assembunny.errors import ProgramError

REGISTER_NAMES = ("a", "b", "c", "d")

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def to_int32(value: int) -> int:
    # Registers behave like a signed 32-bit machine word.
    return (value - INT32_MIN) % 2**32 + INT32_MIN


class OpCode(str, Enum):
    CPY = "cpy"
    INC = "inc"
    DEC = "dec"
    JNZ = "jnz"
    TGL = "tgl"
    OUT = "out"
    NOP = "nop"
    # Never produced by toggling; callers patch it in to replace slow loops.
    MUL = "mul"

    @property
    def arity(self) -> int:
        return _ARITY[self]


_ARITY = {
    OpCode.CPY: 2,
    OpCode.INC: 1,
    OpCode.DEC: 1,
    OpCode.JNZ: 2,
    OpCode.TGL: 1,
    OpCode.OUT: 1,
    OpCode.NOP: 0,
    OpCode.MUL: 3,
}

_TOGGLED = {
    OpCode.INC: OpCode.DEC,
    OpCode.DEC: OpCode.INC,
    OpCode.TGL: OpCode.INC,
    OpCode.OUT: OpCode.INC,
    OpCode.JNZ: OpCode.CPY,
    OpCode.CPY: OpCode.JNZ,
}


def toggled(op: OpCode) -> OpCode:
    """Opcode produced by ``tgl``, chosen by arity class only.

    One-argument instructions: ``inc`` becomes ``dec``, every other one becomes ``inc``.
    Two-argument instructions: ``jnz`` becomes ``cpy``, ``cpy`` becomes ``jnz``.
    ``nop`` and ``mul`` have no toggled form and come back unchanged.
    """
    return _TOGGLED.get(op, op)


class OperandKind(str, Enum):
    LITERAL = "literal"
    REGISTER = "register"


@dataclass(frozen=True, slots=True)
class Operand:
    kind: OperandKind
    value: int

    def __post_init__(self) -> None:
        try:
            kind = OperandKind(self.kind)
        except ValueError:
            raise ProgramError(f"unknown operand kind: {self.kind!r}") from None
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ProgramError(f"operand value must be an int, got {self.value!r}")
        if kind is OperandKind.REGISTER and not 0 <= self.value < len(REGISTER_NAMES):
            raise ProgramError(f"register index out of range: {self.value}")
        if kind is OperandKind.LITERAL and not INT32_MIN <= self.value <= INT32_MAX:
            raise ProgramError(f"literal out of 32-bit range: {self.value}")
        object.__setattr__(self, "kind", kind)

    @classmethod
    def literal(cls, value: int) -> Operand:
        return cls(OperandKind.LITERAL, int(value))

    @classmethod
    def register(cls, name: str) -> Operand:
        if name not in REGISTER_NAMES:
            raise ProgramError(f"unknown register: {name!r}")
        return cls(OperandKind.REGISTER, REGISTER_NAMES.index(name))

    @property
    def is_register(self) -> bool:
        return self.kind is OperandKind.REGISTER

    def __str__(self) -> str:
        if self.is_register:
            return REGISTER_NAMES[self.value]
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Instruction:
    op: OpCode
    args: tuple[Operand, ...] = ()

    def __post_init__(self) -> None:
        try:
            op = OpCode(self.op)
        except ValueError:
            raise ProgramError(f"unknown opcode: {self.op!r}") from None
        args = tuple(self.args)
        if len(args) != op.arity:
            raise ProgramError(f"{op.value} takes {op.arity} operand(s), got {len(args)}")
        for arg in args:
            if not isinstance(arg, Operand):
                raise ProgramError(f"operand must be an Operand, got {type(arg).__name__}")
        object.__setattr__(self, "op", op)
        object.__setattr__(self, "args", args)

    def __str__(self) -> str:
        return " ".join([self.op.value, *(str(a) for a in self.args)])

    def with_op(self, op: OpCode) -> Instruction:
        return Instruction(op, self.args)
