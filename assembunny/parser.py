from __future__ import annotations

import re
from pathlib import Path

from assembunny.errors import ProgramError
from assembunny.instruction import Instruction, OpCode, Operand, REGISTER_NAMES

_INT_RE = re.compile(r"[+-]?\d+")


def parse_operand(token: str, *, line: int | None = None) -> Operand:
    if token in REGISTER_NAMES:
        return Operand.register(token)
    if not _INT_RE.fullmatch(token):
        raise ProgramError(f"bad operand: {token!r}", line=line)
    try:
        return Operand.literal(int(token))
    except ProgramError as e:
        raise ProgramError(str(e), line=line) from None


def parse_instruction(text: str, *, line: int | None = None) -> Instruction:
    tokens = text.split()
    if not tokens:
        raise ProgramError("empty instruction", line=line)
    mnemonic, *raw_args = tokens
    try:
        op = OpCode(mnemonic)
    except ValueError:
        raise ProgramError(f"unknown opcode: {mnemonic!r}", line=line) from None
    args = [parse_operand(t, line=line) for t in raw_args]
    try:
        return Instruction(op, tuple(args))
    except ProgramError as e:
        raise ProgramError(str(e), line=line) from None


def parse_program(src: str) -> list[Instruction]:
    instructions: list[Instruction] = []
    for lineno, raw in enumerate(src.splitlines(), start=1):
        if not raw.strip():
            continue
        instructions.append(parse_instruction(raw, line=lineno))
    return instructions


def load_program(path: Path) -> list[Instruction]:
    return parse_program(Path(path).read_text(encoding="utf-8"))
