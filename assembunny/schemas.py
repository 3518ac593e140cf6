from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from assembunny.errors import ProgramError
from assembunny.instruction import REGISTER_NAMES
from assembunny.parser import parse_instruction


class HaltReason(str, Enum):
    IP_OUT_OF_RANGE = "ip_out_of_range"
    OUTPUT_FULL = "output_full"


class PatchSpec(BaseModel):
    index: int = Field(ge=0)
    instruction: str

    @field_validator("instruction")
    @classmethod
    def _parses(cls, v: str) -> str:
        try:
            parse_instruction(v)
        except ProgramError as e:
            raise ValueError(str(e)) from None
        return v.strip()


class RunSpec(BaseModel):
    program: Path
    registers: dict[str, int] = Field(default_factory=dict)
    patches: list[PatchSpec] = Field(default_factory=list)
    # None means "use the configured default".
    output_capacity: int | None = Field(default=None, ge=1)
    strict: bool = False

    @field_validator("registers")
    @classmethod
    def _known_registers(cls, v: dict[str, int]) -> dict[str, int]:
        unknown = sorted(set(v) - set(REGISTER_NAMES))
        if unknown:
            raise ValueError(f"unknown registers: {', '.join(unknown)}")
        return v


class RunResult(BaseModel):
    registers: dict[str, int]
    ip: int
    output: list[int] = Field(default_factory=list)
    halted_by: HaltReason
