from __future__ import annotations

import pytest

from assembunny.errors import ProgramError
from assembunny.instruction import Instruction, OpCode, Operand
from assembunny.parser import load_program, parse_instruction, parse_program


def test_parse_instruction_operands() -> None:
    assert parse_instruction("cpy 41 a") == Instruction(
        OpCode.CPY, (Operand.literal(41), Operand.register("a"))
    )
    assert parse_instruction("jnz c -2").args[1] == Operand.literal(-2)
    assert parse_instruction("  tgl   +3 ").args == (Operand.literal(3),)
    assert parse_instruction("nop").args == ()


def test_mul_is_accepted_from_text() -> None:
    instr = parse_instruction("mul b d a")
    assert instr.op is OpCode.MUL
    assert str(instr) == "mul b d a"


def test_literal_in_register_slot_is_allowed() -> None:
    # Only arity and register names are checked up front.
    assert str(parse_instruction("inc 4")) == "inc 4"


def test_parse_program_skips_blank_lines() -> None:
    program = parse_program("inc a\n\n   \ndec b\n")
    assert [str(i) for i in program] == ["inc a", "dec b"]


@pytest.mark.parametrize(
    ("src", "message"),
    [
        ("inc a\nhlt\n", "unknown opcode"),
        ("inc a\ninc e\n", "bad operand"),
        ("inc a\ncpy 1\n", "cpy takes 2 operand"),
        ("inc a\ninc 1.5\n", "bad operand"),
        ("inc a\ncpy 99999999999 a\n", "32-bit"),
    ],
)
def test_parse_errors_carry_line_numbers(src: str, message: str) -> None:
    with pytest.raises(ProgramError, match=message) as exc:
        parse_program(src)
    assert exc.value.line == 2
    assert str(exc.value).startswith("line 2: ")


def test_empty_instruction() -> None:
    with pytest.raises(ProgramError, match="empty instruction"):
        parse_instruction("   ")


def test_load_program(tmp_path) -> None:
    path = tmp_path / "prog.txt"
    path.write_text("cpy 41 a\ninc a\n", encoding="utf-8")
    assert [str(i) for i in load_program(path)] == ["cpy 41 a", "inc a"]
