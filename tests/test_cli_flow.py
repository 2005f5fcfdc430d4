import json
from pathlib import Path

from typer.testing import CliRunner

from pledger_core.cli import app
from pledger_core.io.ledger import HEADER


runner = CliRunner()


def _base_args(tmp_path: Path):
    return ["--ledger", str(tmp_path / "ledger.csv"), "--backup", str(tmp_path / "backup.csv")]


def test_cli_add_edit_delete(tmp_path: Path):
    base = _base_args(tmp_path)

    result = runner.invoke(
        app,
        base + ["add", "Income", "Bonus", "--amount", "100", "--date", "2026-10-25", "--probability", "0.5"],
    )
    assert result.exit_code == 0, result.stdout
    result = runner.invoke(
        app,
        base + ["add", "Expense", "Repair", "--amount", "40", "--date", "2026-10-02", "--probability", "0.25"],
    )
    assert result.exit_code == 0, result.stdout

    lines = (tmp_path / "ledger.csv").read_text().splitlines()
    assert lines[0] == HEADER
    assert lines[1] == "Expense,Repair,General,40.0,2026-10-02,0.25"
    assert (tmp_path / "backup.csv").read_text() == (tmp_path / "ledger.csv").read_text()

    result = runner.invoke(app, base + ["edit", "Repair", "--category", "Car"])
    assert result.exit_code == 0, result.stdout
    assert "Expense,Repair,Car,40.0,2026-10-02,0.25" in (tmp_path / "ledger.csv").read_text()

    result = runner.invoke(app, base + ["delete", "Bonus"])
    assert result.exit_code == 0, result.stdout
    assert "Bonus" not in (tmp_path / "ledger.csv").read_text()

    result = runner.invoke(app, base + ["delete", "Bonus"])
    assert result.exit_code == 1


def test_cli_rejects_unknown_kind(tmp_path: Path):
    result = runner.invoke(app, _base_args(tmp_path) + ["add", "Salary", "x", "--amount", "1"])
    assert result.exit_code != 0
    assert not (tmp_path / "ledger.csv").exists()


def test_cli_scenario_json(tmp_path: Path):
    base = _base_args(tmp_path)
    runner.invoke(app, base + ["add", "Income", "A", "--amount", "100", "--date", "2026-10-01", "--probability", "0.5"])
    runner.invoke(app, base + ["add", "Expense", "B", "--amount", "40", "--date", "2026-10-02", "--probability", "0.25"])

    out_path = tmp_path / "scenario.json"
    result = runner.invoke(app, base + ["scenario", "--out", str(out_path)])
    assert result.exit_code == 0, result.stdout

    payload = json.loads(out_path.read_text())
    assert payload["best_case"] == 100.0
    assert payload["worst_case"] == -40.0
    assert payload["most_likely"] == 0.0
    assert payload["least_likely"] == -40.0
    assert abs(payload["most_likely_pct"] - 37.5) < 1e-9


def test_cli_reports_run_against_fixture(tmp_path: Path):
    ledger_path = tmp_path / "ledger.csv"
    fixture = Path(__file__).parent / "data" / "ledger.csv"
    ledger_path.write_text(fixture.read_text())
    base = ["--ledger", str(ledger_path), "--backup", str(tmp_path / "backup.csv")]

    for args in (
        ["list"],
        ["summary", "--today", "2026-10-19"],
        ["detail", "--today", "2026-10-19"],
        ["scenario"],
        ["report", "monthly", "--year", "2026"],
        ["report", "annual"],
        ["report", "income-vs-expenses"],
        ["report", "breakdown"],
    ):
        result = runner.invoke(app, base + args)
        assert result.exit_code == 0, (args, result.stdout)

    result = runner.invoke(app, base + ["detail", "--today", "2026-10-19"])
    assert "6,450.00" in result.stdout
    assert "Housing" in result.stdout


def test_cli_reads_paths_from_config(tmp_path: Path):
    config_path = tmp_path / "pledger.json"
    config_path.write_text(json.dumps({"ledger_path": "data/main.csv", "backup_path": "data/copy.csv"}))

    result = runner.invoke(app, ["--config", str(config_path), "add", "Asset", "Cash", "--amount", "10"])
    assert result.exit_code == 0, result.stdout
    assert (tmp_path / "data" / "main.csv").exists()
    assert (tmp_path / "data" / "copy.csv").exists()
