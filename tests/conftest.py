from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest


def pytest_configure() -> None:
    project_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


@pytest.fixture
def machine() -> Callable[..., object]:
    """Build a `MachineState` from program text, optionally seeding registers."""
    from assembunny.parser import parse_program
    from assembunny.state import MachineState

    def build(src: str, *, output_capacity: int = 10, **registers: int) -> MachineState:
        state = MachineState(parse_program(src), output_capacity=output_capacity)
        for name, value in registers.items():
            state.set_register(name, value)
        return state

    return build
