from __future__ import annotations

from collections.abc import Iterable, Mapping

from assembunny.instruction import Instruction, OpCode, Operand
from assembunny.parser import parse_instruction
from assembunny.state import MachineState


def apply_patches(
    state: MachineState,
    patches: Mapping[int, Instruction | str] | Iterable[tuple[int, Instruction | str]],
) -> None:
    """Replace instructions by index before the machine runs.

    Patches may be given as instructions or as instruction text such as ``"mul b d a"``.
    """
    items = patches.items() if isinstance(patches, Mapping) else patches
    for index, patch in items:
        if not state.in_bounds(index):
            raise ValueError(f"patch index {index} outside program of {len(state)} instructions")
        instruction = parse_instruction(patch) if isinstance(patch, str) else patch
        state.replace(index, instruction)


def multiply_patch(
    *, start: int, length: int, left: str | int, right: str | int, dest: str
) -> dict[int, Instruction]:
    # A `mul` padded with `nop`s keeps every jump offset in the program valid.
    if length < 1:
        raise ValueError("length must be >= 1")
    mul = Instruction(OpCode.MUL, (_operand(left), _operand(right), Operand.register(dest)))
    patch = {start: mul}
    for i in range(start + 1, start + length):
        patch[i] = Instruction(OpCode.NOP)
    return patch


def _operand(raw: str | int) -> Operand:
    if isinstance(raw, int):
        return Operand.literal(raw)
    return Operand.register(raw)
