from __future__ import annotations

import argparse
import logging
from pathlib import Path

from assembunny.config import MachineSettings, load_settings
from assembunny.errors import ProgramError, VMError
from assembunny.instruction import REGISTER_NAMES
from assembunny.parser import load_program, parse_instruction
from assembunny.runspec import load_run_spec, run_program, run_spec
from assembunny.schemas import RunResult
from assembunny.search import find_clock_seed


def _existing_path(value: str) -> Path:
    p = Path(value)
    if not p.exists():
        raise argparse.ArgumentTypeError(f"path not found: {value}")
    return p


def _register_seed(value: str) -> tuple[str, int]:
    name, sep, raw = value.partition("=")
    name = name.strip()
    if not sep or name not in REGISTER_NAMES:
        raise argparse.ArgumentTypeError(f"expected REG=VALUE with REG in a-d: {value}")
    try:
        return name, int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"register value must be an integer: {value}") from None


def _patch(value: str) -> tuple[int, str]:
    raw_index, sep, text = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected INDEX=INSTRUCTION: {value}")
    try:
        index = int(raw_index)
    except ValueError:
        raise argparse.ArgumentTypeError(f"patch index must be an integer: {value}") from None
    try:
        parse_instruction(text)
    except ProgramError as e:
        raise argparse.ArgumentTypeError(f"bad patch {value!r}: {e}") from None
    return index, text


def _print_result(result: RunResult, *, as_json: bool) -> None:
    if as_json:
        print(result.model_dump_json())
        return
    print(" ".join(f"{name}={value}" for name, value in result.registers.items()))
    if result.output:
        print("output: " + ",".join(str(v) for v in result.output))


def _cmd_run(args: argparse.Namespace, settings: MachineSettings) -> int:
    if args.spec is not None:
        spec = load_run_spec(args.spec)
        overrides: dict[str, object] = {}
        if args.capacity is not None:
            overrides["output_capacity"] = args.capacity
        if args.strict:
            overrides["strict"] = True
        if args.reg:
            overrides["registers"] = {**spec.registers, **dict(args.reg)}
        result = run_spec(spec.model_copy(update=overrides), settings=settings)
    else:
        result = run_program(
            load_program(args.program),
            registers=dict(args.reg),
            patches=dict(args.patch),
            output_capacity=args.capacity or settings.output_capacity,
            strict=args.strict,
        )
    _print_result(result, as_json=args.json)
    return 0


def _cmd_clock(args: argparse.Namespace, settings: MachineSettings) -> int:
    stop = args.stop if args.stop is not None else settings.max_seed + 1
    seed = find_clock_seed(
        load_program(args.program),
        start=args.start,
        stop=stop,
        register=args.register,
        output_capacity=args.capacity or settings.output_capacity,
        concurrency=args.concurrency,
    )
    if seed is None:
        print(f"no seed in [{args.start}, {stop}) produces a clock signal")
        return 1
    print(seed)
    return 0


def _cmd_check(args: argparse.Namespace, settings: MachineSettings) -> int:
    program = load_program(args.program)
    print(f"{args.program}: {len(program)} instructions")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="assembunny")
    parser.add_argument("--log-level", type=str, default=None, help="override ASSEMBUNNY_LOG_LEVEL")
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="run a program until it halts and print its registers")
    src = run_p.add_mutually_exclusive_group(required=True)
    src.add_argument("program", type=_existing_path, nargs="?", default=None)
    src.add_argument("--spec", type=_existing_path, default=None, help="YAML run description")
    run_p.add_argument(
        "--reg", type=_register_seed, action="append", default=[], help="seed a register, e.g. a=7"
    )
    run_p.add_argument(
        "--patch",
        type=_patch,
        action="append",
        default=[],
        help='replace an instruction before running, e.g. 4="mul b d a"',
    )
    run_p.add_argument("--capacity", type=int, default=None, help="output buffer capacity")
    run_p.add_argument("--strict", action="store_true", help="fail on operand-kind mismatches")
    run_p.add_argument("--json", action="store_true")

    clock_p = sub.add_parser("clock", help="find the smallest seed producing 0,1,0,1,...")
    clock_p.add_argument("program", type=_existing_path)
    clock_p.add_argument("--start", type=int, default=1)
    clock_p.add_argument("--stop", type=int, default=None, help="exclusive upper bound")
    clock_p.add_argument("--register", choices=list(REGISTER_NAMES), default="a")
    clock_p.add_argument("--capacity", type=int, default=None)
    clock_p.add_argument("--concurrency", type=int, default=1)

    check_p = sub.add_parser("check", help="parse a program and report its size")
    check_p.add_argument("program", type=_existing_path)

    args = parser.parse_args(argv)
    if getattr(args, "patch", None) and getattr(args, "spec", None) is not None:
        parser.error("--patch cannot be combined with --spec; list patches in the spec")

    commands = {"run": _cmd_run, "clock": _cmd_clock, "check": _cmd_check}
    try:
        settings = load_settings()
        logging.basicConfig(
            level=(args.log_level or settings.log_level).upper(),
            format="%(levelname)s:%(name)s:%(message)s",
        )
        return commands[args.cmd](args, settings)
    except (ProgramError, VMError, ValueError, OSError) as e:
        raise SystemExit(f"error: {e}") from None
