import subprocess
import sys
from pathlib import Path
import pytest

from becker_irr.scenario_runner import run_dir
from becker_irr.validate import _main as validate_main

ROOT = Path(__file__).resolve().parents[2]

PARTIAL_CFG = """\
earnings: [-1000, 300, 300, 300, 300]
disc_rate: 0.0
"""

FULL_CFG = PARTIAL_CFG + "irr_guess: 0.1\ndecimals: 6\n"

def _write(p: Path, name: str, text: str) -> Path:
    f = p / name
    f.write_text(text, encoding="utf-8")
    return f

def test_strict_requires_guess_and_decimals_in_runner(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "partial.yaml", PARTIAL_CFG)
    monkeypatch.setenv("VALIDATION_MODE", "strict")
    with pytest.raises(SystemExit):
        run_dir(cfg, tmp_path / "out", mode="irr", fmt="csv", save_annual=False)

def test_strict_rejects_unknown_keys(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "extra.yaml", FULL_CFG + "tariff: 3\n")
    monkeypatch.setenv("VALIDATION_MODE", "strict")
    with pytest.raises(SystemExit, match="unknown top-level keys"):
        run_dir(cfg, tmp_path / "out")

def test_relaxed_fills_defaults(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "partial.yaml", PARTIAL_CFG)
    monkeypatch.setenv("VALIDATION_MODE", "relaxed")
    res = run_dir(cfg, tmp_path / "out")
    assert res.summary["irr_guess"] == 0.1
    assert res.summary["decimals"] == 6

@pytest.mark.parametrize("text", ["earnings: 5\n", "earnings: [1, x]\n", "earnings: [1, 2]\ndecimals: 2.5\n"])
def test_bad_shapes_rejected_in_any_mode(tmp_path: Path, text):
    cfg = _write(tmp_path, "bad.yaml", text)
    assert validate_main([str(cfg), "--mode", "relaxed"]) == 1

def test_validate_cli_accepts_good_file(tmp_path: Path):
    cfg = _write(tmp_path, "good.yaml", FULL_CFG)
    assert validate_main([str(cfg), "--mode", "strict"]) == 0

def test_cli_strict_flag_via_module(tmp_path: Path):
    cfg = _write(tmp_path, "partial.yaml", PARTIAL_CFG)
    out = tmp_path / "out"
    with pytest.raises(subprocess.CalledProcessError):
        subprocess.check_call(
            [sys.executable, "-m", "becker_irr", "--strict", "--config", str(cfg), "--outputs-dir", str(out)],
            cwd=ROOT,
        )
