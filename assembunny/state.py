from __future__ import annotations

from collections.abc import Iterable

from assembunny.instruction import REGISTER_NAMES, Instruction, to_int32

DEFAULT_OUTPUT_CAPACITY = 10


class MachineState:
    """Registers, program, instruction pointer and bounded output of one machine.

    Instructions are immutable, so one parsed program can seed any number of
    independent states. The sequence length never changes; ``replace`` is the only way
    to change its contents. Registers are read through ``registers``/``load`` and
    written through ``set_register``/``store``, which keep them in 32-bit range.
    """

    def __init__(
        self,
        instructions: Iterable[Instruction],
        *,
        output_capacity: int = DEFAULT_OUTPUT_CAPACITY,
    ) -> None:
        if output_capacity < 1:
            raise ValueError("output_capacity must be >= 1")
        self._instructions = list(instructions)
        self._registers = [0] * len(REGISTER_NAMES)
        self.ip = 0
        self._output: list[int] = []
        self._output_capacity = int(output_capacity)

    @property
    def instructions(self) -> tuple[Instruction, ...]:
        return tuple(self._instructions)

    def __len__(self) -> int:
        return len(self._instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self._instructions[index]

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._instructions)

    def replace(self, index: int, instruction: Instruction) -> None:
        if not self.in_bounds(index):
            raise IndexError(f"instruction index out of range: {index}")
        self._instructions[index] = instruction

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(self._registers)

    def load(self, index: int) -> int:
        return self._registers[index]

    def store(self, index: int, value: int) -> None:
        self._registers[index] = to_int32(value)

    def get_register(self, name: str) -> int:
        return self._registers[_register_index(name)]

    def set_register(self, name: str, value: int) -> None:
        self.store(_register_index(name), int(value))

    @property
    def output(self) -> tuple[int, ...]:
        return tuple(self._output)

    @property
    def output_used(self) -> int:
        return len(self._output)

    @property
    def output_capacity(self) -> int:
        return self._output_capacity

    @property
    def output_full(self) -> bool:
        return len(self._output) >= self._output_capacity

    def emit(self, value: int) -> bool:
        """Append to the output buffer; returns True once the buffer is full."""
        if not self.output_full:
            self._output.append(value)
        return self.output_full

    def __str__(self) -> str:
        return f"IP={self.ip},Registers={self._registers}"

    def __repr__(self) -> str:
        return (
            f"MachineState(ip={self.ip}, registers={self._registers}, "
            f"instructions={len(self._instructions)}, output={self._output})"
        )


def _register_index(name: str) -> int:
    try:
        return REGISTER_NAMES.index(name)
    except ValueError:
        raise KeyError(f"unknown register: {name!r}") from None
