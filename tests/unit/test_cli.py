from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from ddb_bench import main
from ddb_bench.exceptions import BackendUnavailableError
from ddb_bench.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_settings(monkeypatch, settings_factory):
    """Point the CLI at its own moto table and keep root logging untouched."""
    settings = settings_factory(DYNAMODB_TABLE_NAME="CliItem")
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    monkeypatch.setattr(main, "configure_logging", lambda **_: None)
    return settings


def _unavailable(*args, **kwargs):
    raise BackendUnavailableError("Backend unavailable - connection refused")


def test_info_lists_adapters_and_scenarios():
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "Adapters: document, mapped, native" in result.output
    assert "Scenarios: get, scan, query" in result.output


def test_run_rejects_unknown_scenario():
    result = runner.invoke(app, ["run", "--scenario", "delete", "--no-persist"])
    assert result.exit_code == 1
    assert "Unknown scenario 'delete'" in result.output


def test_seed_output_then_verify_against_saved_dataset(mocked_backend, tmp_path):
    dataset_path = tmp_path / "dataset.json"

    seeded = runner.invoke(app, ["seed", "--rows", "60", "--output", str(dataset_path)])
    assert seeded.exit_code == 0, seeded.output
    assert "Seeded 60 records into 'CliItem'." in seeded.output
    assert len(json.loads(dataset_path.read_text(encoding="utf-8"))) == 60

    verified = runner.invoke(
        app,
        ["run", "--dataset", str(dataset_path), "--mode", "verify", "--no-persist", "--json"],
    )
    assert verified.exit_code == 0, verified.output
    assert verified.output.count('"status": "ok"') == 6
    assert '"status": "failed"' not in verified.output


def test_seed_exits_2_when_backend_unavailable(monkeypatch):
    monkeypatch.setattr(main, "provision_table", _unavailable)
    result = runner.invoke(app, ["seed", "--rows", "5"])
    assert result.exit_code == 2
    assert "Backend unavailable" in result.output


def test_run_exits_2_when_backend_unavailable(monkeypatch):
    monkeypatch.setattr(main, "run_scenarios", _unavailable)
    result = runner.invoke(app, ["run", "--no-persist"])
    assert result.exit_code == 2
    assert "run aborted" in result.output


def test_run_exits_1_when_a_scenario_fails(monkeypatch):
    failed = [
        {"scenario": "get", "operation": "get id=a", "rounds": 5, "status": "ok"},
        {
            "scenario": "scan",
            "operation": "scan string == 'Lion'",
            "rounds": 2,
            "status": "failed",
            "error": "native returned a different result",
            "error_type": "EquivalenceMismatchError",
        },
    ]
    monkeypatch.setattr(main, "run_scenarios", lambda **_: failed)
    result = runner.invoke(app, ["run", "--no-persist", "--json"])
    assert result.exit_code == 1
    assert '"error_type": "EquivalenceMismatchError"' in result.output


def test_run_exits_1_on_unreadable_dataset(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "run_scenarios", _unavailable)
    broken = tmp_path / "broken.json"
    broken.write_text("not json", encoding="utf-8")

    malformed = runner.invoke(app, ["run", "--dataset", str(broken), "--no-persist"])
    assert malformed.exit_code == 1
    assert "Cannot load dataset" in malformed.output

    missing = runner.invoke(app, ["run", "--dataset", str(tmp_path / "absent.json"), "--no-persist"])
    assert missing.exit_code == 1
    assert "Cannot load dataset" in missing.output
