from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from assembunny.main import main
from tests.helpers import CLOCK_SRC

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ASSEMBUNNY_OUTPUT_CAPACITY", "ASSEMBUNNY_LOG_LEVEL", "ASSEMBUNNY_MAX_SEED"):
        monkeypatch.delenv(name, raising=False)


def _program(tmp_path: Path, src: str) -> Path:
    p = tmp_path / "prog.txt"
    p.write_text(src, encoding="utf-8")
    return p


def test_run_prints_registers(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = _program(tmp_path, "cpy 41 a\ninc a\ninc a\ndec a\njnz a 2\ndec a\n")
    assert main(["run", str(p), "--reg", "c=1"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a=42 b=0 c=1 d=0"]


def test_run_json_with_patch(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = _program(tmp_path, "nop\nout a\n")
    argv = ["run", str(p), "--reg", "b=6", "--reg", "d=7", "--patch", "0=mul b d a", "--json"]
    assert main(argv) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["registers"]["a"] == 42
    assert data["output"] == [42]
    assert data["halted_by"] == "ip_out_of_range"


def test_run_with_capacity_prints_output(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    p = _program(tmp_path, "out a\ninc a\njnz 1 -2\n")
    assert main(["run", str(p), "--capacity", "3"]) == 0
    assert capsys.readouterr().out.splitlines()[-1] == "output: 0,1,2"


def test_run_spec(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _program(tmp_path, "inc a\n")
    spec = tmp_path / "run.yaml"
    spec.write_text("program: prog.txt\nregisters: {a: 9}\n", encoding="utf-8")
    assert main(["run", "--spec", str(spec), "--reg", "b=2"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a=10 b=2 c=0 d=0"]


def test_run_reports_program_errors(tmp_path: Path) -> None:
    p = _program(tmp_path, "inc a\njmp 2\n")
    with pytest.raises(SystemExit, match="line 2: unknown opcode"):
        main(["run", str(p)])


def test_run_strict(tmp_path: Path) -> None:
    p = _program(tmp_path, "inc 3\n")
    with pytest.raises(SystemExit, match="needs a register"):
        main(["run", str(p), "--strict"])


def test_patch_index_outside_program(tmp_path: Path) -> None:
    p = _program(tmp_path, "inc a\n")
    with pytest.raises(SystemExit, match="patch index 5 outside program of 1 instructions"):
        main(["run", str(p), "--patch", "5=nop"])


def test_spec_patch_index_outside_program(tmp_path: Path) -> None:
    _program(tmp_path, "inc a\n")
    spec = tmp_path / "run.yaml"
    spec.write_text("program: prog.txt\npatches: {3: nop}\n", encoding="utf-8")
    with pytest.raises(SystemExit, match="patch index 3"):
        main(["run", "--spec", str(spec)])


def test_bad_register_argument(tmp_path: Path) -> None:
    p = _program(tmp_path, "inc a\n")
    with pytest.raises(SystemExit):
        main(["run", str(p), "--reg", "q=1"])


def test_clock(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = _program(tmp_path, CLOCK_SRC)
    assert main(["clock", str(p), "--stop", "10", "--concurrency", "2"]) == 0
    assert capsys.readouterr().out.strip() == "3"
    assert main(["clock", str(p), "--stop", "3"]) == 1


def test_check_via_module(tmp_path: Path) -> None:
    p = _program(tmp_path, "inc a\ndec a\n")
    proc = subprocess.run(
        [sys.executable, "-m", "assembunny", "check", str(p)],
        cwd=PROJECT_ROOT,
        env=dict(os.environ),
        text=True,
        capture_output=True,
        check=False,
    )
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip().endswith("2 instructions")
