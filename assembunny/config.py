from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from assembunny.state import DEFAULT_OUTPUT_CAPACITY


def repo_root() -> Path:
    # Project root is the directory that contains the `assembunny/` package.
    return Path(__file__).resolve().parents[1]


def load_env() -> None:
    # Prefer a project-local `.env`, fall back to searching from CWD.
    root_env = repo_root() / ".env"
    env_path = str(root_env) if root_env.exists() else (find_dotenv(usecwd=True) or str(root_env))
    load_dotenv(env_path)


@dataclass(frozen=True)
class MachineSettings:
    output_capacity: int = DEFAULT_OUTPUT_CAPACITY
    log_level: str = "WARNING"
    max_seed: int = 1_000_000


def _int_env(name: str, default: int, *, minimum: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_settings() -> MachineSettings:
    load_env()
    return MachineSettings(
        output_capacity=_int_env(
            "ASSEMBUNNY_OUTPUT_CAPACITY", DEFAULT_OUTPUT_CAPACITY, minimum=1
        ),
        log_level=(os.getenv("ASSEMBUNNY_LOG_LEVEL") or "WARNING").strip().upper(),
        max_seed=_int_env("ASSEMBUNNY_MAX_SEED", 1_000_000, minimum=1),
    )
