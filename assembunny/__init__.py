from __future__ import annotations

from assembunny.errors import ProgramError, VMError
from assembunny.instruction import (
    REGISTER_NAMES,
    Instruction,
    OpCode,
    Operand,
    OperandKind,
    toggled,
)
from assembunny.interpreter import Interpreter, execute
from assembunny.parser import load_program, parse_instruction, parse_program
from assembunny.patching import apply_patches, multiply_patch
from assembunny.search import clock_signal, find_clock_seed
from assembunny.state import DEFAULT_OUTPUT_CAPACITY, MachineState

__all__ = [
    "__version__",
    # Errors
    "ProgramError",
    "VMError",
    # Encoding
    "OpCode",
    "Operand",
    "OperandKind",
    "Instruction",
    "REGISTER_NAMES",
    "toggled",
    # Machine
    "MachineState",
    "DEFAULT_OUTPUT_CAPACITY",
    "Interpreter",
    "execute",
    # Text format
    "parse_instruction",
    "parse_program",
    "load_program",
    # Caller-side helpers
    "apply_patches",
    "multiply_patch",
    "clock_signal",
    "find_clock_seed",
]

__version__ = "0.1.0"
