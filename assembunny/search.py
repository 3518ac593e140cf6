from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from assembunny.instruction import Instruction
from assembunny.interpreter import Interpreter
from assembunny.state import DEFAULT_OUTPUT_CAPACITY, MachineState


def clock_signal(capacity: int) -> tuple[int, ...]:
    return tuple(i % 2 for i in range(capacity))


def emits_clock_signal(
    program: Sequence[Instruction],
    seed: int,
    *,
    register: str = "a",
    output_capacity: int = DEFAULT_OUTPUT_CAPACITY,
) -> bool:
    # Every attempt gets a fresh state; `tgl` must not leak between seeds.
    state = MachineState(program, output_capacity=output_capacity)
    state.set_register(register, seed)
    Interpreter().execute(state)
    return state.output == clock_signal(output_capacity)


def find_clock_seed(
    program: Sequence[Instruction],
    *,
    start: int = 1,
    stop: int,
    register: str = "a",
    output_capacity: int = DEFAULT_OUTPUT_CAPACITY,
    concurrency: int = 1,
) -> int | None:
    """Smallest seed in ``[start, stop)`` whose output matches ``0, 1, 0, 1, ...``.

    The program must fill the output buffer or fall off its end for every seed tried;
    nothing here bounds a program that loops without output.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    def attempt(seed: int) -> bool:
        return emits_clock_signal(
            program, seed, register=register, output_capacity=output_capacity
        )

    if concurrency == 1:
        for seed in range(start, stop):
            if attempt(seed):
                return seed
        return None

    with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="assembunny") as pool:
        for batch_start in range(start, stop, concurrency):
            seeds = range(batch_start, min(batch_start + concurrency, stop))
            # map() preserves order, so the first hit is the smallest seed in the batch.
            for seed, ok in zip(seeds, pool.map(attempt, seeds)):
                if ok:
                    return seed
    return None
