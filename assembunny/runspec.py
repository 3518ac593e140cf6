from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

import yaml
from pydantic import ValidationError

from assembunny.config import MachineSettings
from assembunny.instruction import REGISTER_NAMES, Instruction
from assembunny.interpreter import Interpreter
from assembunny.parser import load_program
from assembunny.patching import apply_patches
from assembunny.schemas import HaltReason, RunResult, RunSpec
from assembunny.state import MachineState


def load_run_spec(path: Path) -> RunSpec:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("run spec must be a YAML mapping")
    if not data.get("program"):
        raise ValueError("run spec needs a program path")

    # Relative program paths are resolved against the spec file.
    program = Path(str(data["program"]))
    if not program.is_absolute():
        program = (path.parent / program).resolve()
    data = {**data, "program": program}

    raw_patches = data.get("patches")
    if isinstance(raw_patches, dict):
        data["patches"] = [{"index": k, "instruction": v} for k, v in raw_patches.items()]

    try:
        return RunSpec.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"invalid run spec {path}: {e}") from None


def run_program(
    program: Sequence[Instruction],
    *,
    registers: Mapping[str, int] | None = None,
    patches: Mapping[int, Instruction | str] | None = None,
    output_capacity: int,
    strict: bool = False,
) -> RunResult:
    state = MachineState(program, output_capacity=output_capacity)
    for name, value in (registers or {}).items():
        state.set_register(name, value)
    if patches:
        apply_patches(state, patches)
    Interpreter().execute(state, strict=strict)
    return result_of(state)


def run_spec(spec: RunSpec, *, settings: MachineSettings) -> RunResult:
    return run_program(
        load_program(spec.program),
        registers=spec.registers,
        patches={p.index: p.instruction for p in spec.patches},
        output_capacity=spec.output_capacity or settings.output_capacity,
        strict=spec.strict,
    )


def result_of(state: MachineState) -> RunResult:
    return RunResult(
        registers=dict(zip(REGISTER_NAMES, state.registers)),
        ip=state.ip,
        output=list(state.output),
        halted_by=HaltReason.OUTPUT_FULL if state.output_full else HaltReason.IP_OUT_OF_RANGE,
    )
