import pytest

from becker_irr import cli

ANNUITY_YAML = "earnings: [-1000, 300, 300, 300, 300]\ndisc_rate: 0.0\nirr_guess: 0.1\ndecimals: 6\n"


@pytest.fixture(autouse=True)
def _relaxed(monkeypatch):
    # --strict/--relaxed write to os.environ; monkeypatch restores it afterwards
    monkeypatch.setenv("VALIDATION_MODE", "relaxed")


def test_cli_missing_config():
    assert cli.main([]) == 2


def test_cli_irr(tmp_path, capsys):
    cfg = tmp_path / "annuity.yaml"
    cfg.write_text(ANNUITY_YAML, encoding="utf-8")
    out = tmp_path / "out"
    rc = cli.main(["--mode", "irr", "--config", str(cfg), "--outputs-dir", str(out),
                   "--format", "jsonl", "--save-annual"])
    assert rc == 0
    assert (out / "summary.json").exists()
    assert list(out.glob("annuity_results_*.jsonl"))
    assert "Becker IRR: 0.0771" in capsys.readouterr().out


def test_cli_scenarios_dir(tmp_path, capsys):
    in_dir = tmp_path / "sc"
    out_dir = tmp_path / "out"
    in_dir.mkdir()
    (in_dir / "s1.yaml").write_text(ANNUITY_YAML, encoding="utf-8")
    (in_dir / "s2.yaml").write_text("earnings: [1, 1, 1]\n", encoding="utf-8")
    rc = cli.main(["--config", str(in_dir), "--outputs-dir", str(out_dir), "--format", "csv"])
    assert rc == 0
    assert (out_dir / "scenarios.csv").exists()
    assert "Ran 2 scenarios (1 failed)." in capsys.readouterr().out


def test_cli_solver_failure_exits_1(tmp_path, capsys):
    cfg = tmp_path / "flat.yaml"
    cfg.write_text("earnings: [1, 1, 1]\n", encoding="utf-8")
    rc = cli.main(["--config", str(cfg), "--outputs-dir", str(tmp_path / "out")])
    assert rc == 1
    assert "Max iterations reached" in capsys.readouterr().err


def test_cli_strict_rejects_incomplete_scenario(tmp_path, capsys):
    cfg = tmp_path / "partial.yaml"
    cfg.write_text("earnings: [-100, 110]\n", encoding="utf-8")
    rc = cli.main(["--strict", "--config", str(cfg), "--outputs-dir", str(tmp_path / "out")])
    assert rc == 2
    assert "missing required keys" in capsys.readouterr().err


def test_cli_montecarlo(tmp_path):
    cfg = tmp_path / "annuity.yaml"
    cfg.write_text(ANNUITY_YAML, encoding="utf-8")
    out = tmp_path / "out"
    rc = cli.main(["--mode", "montecarlo", "--config", str(cfg), "--outputs-dir", str(out),
                   "--iterations", "20", "--seed", "7"])
    assert rc == 0
    lines = (out / "annuity_montecarlo.csv").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 21


def test_cli_invalid_mode_exits_2():
    # argparse enforces choices
    with pytest.raises(SystemExit) as ei:
        cli.parse_args(["--mode", "nope"])
    assert ei.value.code == 2
