from __future__ import annotations

import logging
from collections.abc import Callable

from assembunny.errors import VMError
from assembunny.instruction import Instruction, OpCode, Operand, toggled
from assembunny.state import MachineState

logger = logging.getLogger(__name__)

# A handler executes one instruction and returns True when the machine must halt.
Handler = Callable[[MachineState, Instruction, bool], bool]


class Interpreter:
    """Fetch-decode-execute loop over a `MachineState`.

    Holds no data of its own. `execute` runs until the instruction pointer leaves the
    program or the output buffer fills, whichever comes first. Results are read back
    from the state afterwards.

    `tgl` may leave an instruction whose operands no longer suit its opcode, e.g.
    ``inc 4`` or ``cpy 1 2``. Such an instruction does nothing except advance the
    instruction pointer. With ``strict=True`` a `VMError` is raised instead.
    """

    def execute(self, state: MachineState, *, strict: bool = False) -> None:
        while state.in_bounds(state.ip):
            instruction = state[state.ip]
            if _HANDLERS[instruction.op](state, instruction, strict):
                logger.debug(
                    "halt: output buffer full (%d values) at ip=%d", state.output_used, state.ip
                )
                return
        logger.debug("halt: ip=%d outside program of %d instructions", state.ip, len(state))


def execute(state: MachineState, *, strict: bool = False) -> None:
    Interpreter().execute(state, strict=strict)


def _resolve(state: MachineState, operand: Operand) -> int:
    if operand.is_register:
        return state.load(operand.value)
    return operand.value


def _writable(instruction: Instruction, operand: Operand, strict: bool) -> bool:
    if operand.is_register:
        return True
    if strict:
        raise VMError(
            f"{instruction.op.value} needs a register, got literal {operand.value}: {instruction}"
        )
    return False


def _cpy(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    src, dest = instruction.args
    if _writable(instruction, dest, strict):
        state.store(dest.value, _resolve(state, src))
    state.ip += 1
    return False


def _inc(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    (target,) = instruction.args
    if _writable(instruction, target, strict):
        state.store(target.value, state.load(target.value) + 1)
    state.ip += 1
    return False


def _dec(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    (target,) = instruction.args
    if _writable(instruction, target, strict):
        state.store(target.value, state.load(target.value) - 1)
    state.ip += 1
    return False


def _jnz(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    cond, offset = instruction.args
    if _resolve(state, cond) != 0:
        state.ip += _resolve(state, offset)
    else:
        state.ip += 1
    return False


def _tgl(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    (offset,) = instruction.args
    target = state.ip + _resolve(state, offset)
    # Toggling outside the program does nothing.
    if state.in_bounds(target):
        current = state[target]
        new_op = toggled(current.op)
        logger.debug(
            "tgl at ip=%d: [%d] %s -> %s", state.ip, target, current.op.value, new_op.value
        )
        state.replace(target, current.with_op(new_op))
    state.ip += 1
    return False


def _out(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    (value,) = instruction.args
    if state.emit(_resolve(state, value)):
        # The ip stays on the `out`; the caller only reads the buffer.
        return True
    state.ip += 1
    return False


def _nop(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    state.ip += 1
    return False


def _mul(state: MachineState, instruction: Instruction, strict: bool) -> bool:
    left, right, dest = instruction.args
    if _writable(instruction, dest, strict):
        state.store(dest.value, _resolve(state, left) * _resolve(state, right))
    state.ip += 1
    return False


_HANDLERS: dict[OpCode, Handler] = {
    OpCode.CPY: _cpy,
    OpCode.INC: _inc,
    OpCode.DEC: _dec,
    OpCode.JNZ: _jnz,
    OpCode.TGL: _tgl,
    OpCode.OUT: _out,
    OpCode.NOP: _nop,
    OpCode.MUL: _mul,
}

if set(_HANDLERS) != set(OpCode):  # pragma: no cover
    raise RuntimeError(f"missing handlers: {set(OpCode) - set(_HANDLERS)}")
