import json

import pytest

from xlfin import cli


def test_cli_calc_payment(capsys):
    rc = cli.main(["--mode", "calc", "--solve", "pmt", "--rate", "0.005", "--nper", "60", "--pv", "-10000"])
    assert rc == 0
    assert float(capsys.readouterr().out) == pytest.approx(193.328015, abs=1e-6)


def test_cli_calc_rate_with_timing(capsys):
    rc = cli.main(["--mode", "calc", "--solve", "rate", "--nper", "24", "--pmt", "-230",
                   "--pv", "5000", "--when", "begin"])
    assert rc == 0
    assert 0 < float(capsys.readouterr().out) < 0.02


def test_cli_calc_failure_prints_na(capsys):
    rc = cli.main(["--mode", "calc", "--solve", "pmt", "--rate", "0.01", "--nper", "12", "--pv", "0"])
    assert rc == 1
    captured = capsys.readouterr()
    assert captured.out.strip() == "N/A"
    assert "invalid_arguments" in captured.err


def test_cli_calc_requires_solve():
    assert cli.main(["--mode", "calc"]) == 2


def test_cli_default_sheet(tmp_path, capsys):
    out_dir = tmp_path / "out"
    rc = cli.main(["--outputs-dir", str(out_dir), "--save-results", "--format", "jsonl"])
    assert rc == 0
    summary = json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["sheet"] == "release_case"
    assert summary["failed"] == 1
    assert list(out_dir.glob("release_case_results_*.jsonl"))
    assert "release_case" in capsys.readouterr().out


def test_cli_sheet_directory(tmp_path):
    in_dir = tmp_path / "sheets"
    out_dir = tmp_path / "out"
    in_dir.mkdir()
    (in_dir / "s1.yaml").write_text(
        "calculations:\n  - { name: a, output: pv, rate: 0, nper: 10, pmt: -100 }\n",
        encoding="utf-8",
    )
    (in_dir / "s2.json").write_text(
        json.dumps([{"name": "b", "output": "fv", "rate": 0, "nper": 10, "pmt": -100}]),
        encoding="utf-8",
    )
    assert cli.main(["--mode", "sheet", "--config", str(in_dir), "--outputs-dir", str(out_dir)]) == 0
    assert json.loads((out_dir / "s1" / "summary.json").read_text())["results"] == {"a": 1000.0}
    assert json.loads((out_dir / "s2" / "summary.json").read_text())["results"] == {"b": 1000.0}


def test_cli_missing_sheet_returns_1(tmp_path):
    assert cli.main(["--config", str(tmp_path / "nope.yaml"), "--outputs-dir", str(tmp_path)]) == 1


def test_cli_montecarlo(capsys):
    rc = cli.main(["--mode", "montecarlo", "--iterations", "20", "--seed", "3"])
    assert rc == 0
    assert "success rate 100.00%" in capsys.readouterr().out


def test_cli_invalid_mode_exits_2():
    # argparse enforces choices
    with pytest.raises(SystemExit) as ei:
        cli.main(["--mode", "nope"])
    assert ei.value.code == 2
