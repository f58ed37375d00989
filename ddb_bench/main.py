from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional

import typer

from ddb_bench.config import get_settings
from ddb_bench.domain.dataset import generate_dataset, load_dataset, save_dataset
from ddb_bench.exceptions import BackendUnavailableError
from ddb_bench.infrastructure.client_factory import provision_table, seed_table
from ddb_bench.orchestrator import MODES, available_adapters, available_scenarios, run_scenarios
from ddb_bench.reporter import print_results
from ddb_bench.utils.logging import configure_logging

app = typer.Typer(help="DynamoDB Adapter Bench CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"endpoint={settings.mock_dynamodb_endpoint or '<aws default>'} region={settings.aws_region} "
        f"table={settings.table_name} | records={settings.dataset_size} "
        f"rounds(get={settings.get_rounds}, scan={settings.scan_rounds}, query={settings.query_rounds})"
    )
    typer.echo(
        f"Adapters: {', '.join(available_adapters())} | Scenarios: {', '.join(available_scenarios())}"
    )


@app.command()
def seed(
    rows: Optional[int] = typer.Option(
        None,
        "--rows",
        "-r",
        help="Number of records to generate (default from settings).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Save the generated dataset as JSON so `run --dataset` can verify against it.",
    ),
) -> None:
    """
    Generate a dataset, create the table if needed, and load the records.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    count = rows if rows is not None else settings.dataset_size

    dataset = generate_dataset(count)
    if output:
        save_dataset(dataset, output)
        typer.echo(f"Dataset saved -> {output}")
    try:
        provision_table(settings)
        written = seed_table(dataset, settings)
    except BackendUnavailableError as exc:
        typer.echo(f"Backend unavailable: {exc}", err=True)
        raise typer.Exit(code=2)
    typer.echo(f"Seeded {written:,} records into '{settings.table_name}'.")


@app.command()
def run(
    scenario: List[str] = typer.Option(
        ["all"],
        "--scenario",
        "-s",
        help="Scenario to run (get, scan, query, all). Repeatable.",
    ),
    adapter: List[str] = typer.Option(
        ["all"],
        "--adapter",
        "-a",
        help="Adapter to include (native, document, mapped, all). Repeatable.",
    ),
    mode: str = typer.Option(
        "all",
        "--mode",
        "-m",
        help=f"What to do per scenario: {', '.join(MODES)}.",
    ),
    dataset_path: Optional[Path] = typer.Option(
        None,
        "--dataset",
        "-d",
        help="Dataset JSON written by `seed --output`; skips generating and seeding.",
    ),
    warmup: bool = typer.Option(False, "--warmup", help="One untimed call per adapter first."),
    persist: bool = typer.Option(True, "--persist/--no-persist", help="Write results/ JSON."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of a table."),
) -> None:
    """
    Verify adapter equivalence and benchmark each scenario.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        dataset = load_dataset(dataset_path) if dataset_path else None
    except (OSError, ValueError) as exc:
        typer.echo(f"Cannot load dataset {dataset_path}: {exc}", err=True)
        raise typer.Exit(code=1)

    try:
        results = run_scenarios(
            scenario_names=scenario,
            adapter_names=adapter,
            mode=mode,
            dataset=dataset,
            settings=settings,
            persist=persist,
            seed=dataset is None,
            warmup=warmup,
        )
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    except BackendUnavailableError as exc:
        typer.echo(f"Backend unavailable, run aborted: {exc}", err=True)
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps(results, indent=2, default=str))
    else:
        print_results(results)

    if any(r["status"] != "ok" for r in results):
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
