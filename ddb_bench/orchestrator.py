"""
Orchestrator for verifying and benchmarking client adapters, and persisting results.

Usage (example from CLI):
    from ddb_bench.orchestrator import run_scenarios

    results = run_scenarios(scenario_names=["get", "scan"], adapter_names=["native"])
    print(results)

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ddb_bench.adapters.abstract import ClientAdapter
from ddb_bench.adapters.document import DocumentClientAdapter
from ddb_bench.adapters.mapped import MappedClientAdapter
from ddb_bench.adapters.native import NativeClientAdapter
from ddb_bench.config import Settings, get_settings
from ddb_bench.domain.dataset import generate_dataset
from ddb_bench.domain.models import Record
from ddb_bench.exceptions import BackendUnavailableError, HarnessError
from ddb_bench.infrastructure.client_factory import provision_table, seed_table
from ddb_bench.operations import SCENARIO_NAMES, Scenario, build_scenarios
from ddb_bench.runner import BenchmarkRunner
from ddb_bench.utils.logging import get_logger
from ddb_bench.verifier import verify_equivalence

log = get_logger(__name__)

MODES = ("verify", "benchmark", "all")


def _adapter_factories() -> Dict[str, Callable[[Settings], ClientAdapter]]:
    """Registry of available adapters."""
    return {
        "native": lambda settings: NativeClientAdapter(settings),
        "document": lambda settings: DocumentClientAdapter(settings),
        "mapped": lambda settings: MappedClientAdapter(settings),
    }


def available_adapters() -> List[str]:
    """List available adapter names."""
    return sorted(_adapter_factories().keys())


def available_scenarios() -> List[str]:
    return list(SCENARIO_NAMES)


def _resolve_names(requested: Optional[Iterable[str]], available: List[str], kind: str) -> List[str]:
    names = list(requested) if requested is not None else ["all"]
    if len(names) == 1 and names[0] == "all":
        return list(available)
    unknown = [n for n in names if n not in available]
    if unknown:
        raise ValueError(f"Unknown {kind} '{', '.join(unknown)}'. Available: {', '.join(available)}")
    return names


def _resolve_adapter(name: str, settings: Settings) -> ClientAdapter:
    factories = _adapter_factories()
    if name not in factories:
        raise ValueError(f"Unknown adapter '{name}'. Available: {', '.join(factories)}")
    return factories[name](settings)


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _run_scenario(
    scenario: Scenario,
    adapters: Dict[str, ClientAdapter],
    dataset: Sequence[Record],
    runner: BenchmarkRunner,
    mode: str,
) -> dict:
    result: dict = {
        "scenario": scenario.name,
        "operation": scenario.operation.describe(),
        "rounds": scenario.rounds,
        "status": "ok",
    }
    log.info(f"{'=' * 60}")
    log.info(f"[SCENARIO] {scenario.name.upper()}", extra={"scenario": scenario.name})
    log.info(f"{'=' * 60}")

    try:
        if mode in ("verify", "all"):
            result["verification"] = dict(verify_equivalence(scenario.operation, adapters, dataset))
        if mode in ("benchmark", "all"):
            result["benchmarks"] = [
                dict(runner.run(adapter, scenario.operation, scenario.rounds))
                for adapter in adapters.values()
            ]
    except BackendUnavailableError:
        log.exception(f"[SCENARIO ABORTED] {scenario.name}", extra={"scenario": scenario.name})
        raise
    except HarnessError as exc:
        log.exception(f"[SCENARIO FAILED] {scenario.name}", extra={"scenario": scenario.name})
        result["status"] = "failed"
        result["error"] = str(exc)
        result["error_type"] = type(exc).__name__
    else:
        log.info(f"[SCENARIO COMPLETE] {scenario.name.upper()}", extra={"scenario": scenario.name})
    return result


def run_scenarios(
    scenario_names: Optional[Iterable[str]] = None,
    adapter_names: Optional[Iterable[str]] = None,
    mode: str = "all",
    dataset: Optional[List[Record]] = None,
    settings: Optional[Settings] = None,
    results_dir: Path | str = "results",
    persist: bool = True,
    seed: bool = True,
    warmup: bool = False,
) -> List[dict]:
    """
    Verify and/or benchmark scenarios across adapters.

    Parameters
    ----------
    scenario_names : iterable[str] | None
        Scenario names to run. If None or ["all"], runs get, scan and query.
    adapter_names : iterable[str] | None
        Adapters to compare. If None or ["all"], uses every registered adapter.
    mode : str
        "verify", "benchmark" or "all".
    dataset : list[Record] | None
        Dataset the table holds. Generated with `settings.dataset_size` if None.
    settings : Settings | None
        Defaults to the cached environment settings.
    results_dir : Path | str
        Directory to store JSON artifacts.
    persist : bool
        Whether to write results to disk.
    seed : bool
        Provision the table and load `dataset` before running. Disable when
        the table was seeded by a previous `seed` command with the same dataset.
    warmup : bool
        Issue one untimed call per adapter before each timed loop.

    Returns
    -------
    List[dict]
        One entry per scenario with verification and benchmark results, or
        `status="failed"` and the error text.

    Raises
    ------
    BackendUnavailableError
        When the backend cannot be reached; remaining scenarios are not run.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}'. Available: {', '.join(MODES)}")
    settings = settings or get_settings()
    names = _resolve_names(scenario_names, available_scenarios(), "scenario")
    adapter_list = _resolve_names(adapter_names, available_adapters(), "adapter")

    if dataset is None:
        dataset = generate_dataset(settings.dataset_size)
        log.info("Dataset generated", extra={"records": len(dataset)})

    if seed:
        provision_table(settings)
        seed_table(dataset, settings)

    scenarios = build_scenarios(dataset, settings)
    runner = BenchmarkRunner(settings.rounds_by_kind(), warmup=warmup)

    adapters: Dict[str, ClientAdapter] = {}
    results: List[dict] = []
    try:
        for name in adapter_list:
            adapters[name] = _resolve_adapter(name, settings)
        for name in names:
            results.append(_run_scenario(scenarios[name], adapters, dataset, runner, mode))
    finally:
        for adapter in adapters.values():
            adapter.close()

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "table": settings.table_name,
        "endpoint": settings.mock_dynamodb_endpoint,
        "records": len(dataset),
        "mode": mode,
        "adapters": adapter_list,
        "scenarios": names,
        "results": results,
    }

    if persist:
        _persist_results(payload, Path(results_dir))

    failed = [r["scenario"] for r in results if r["status"] != "ok"]
    log.info(
        f"[ORCHESTRATOR COMPLETE] {len(names) - len(failed)}/{len(names)} scenario(s) passed",
        extra={"scenarios": names, "failed": failed},
    )
    return results


__all__ = [
    "MODES",
    "available_adapters",
    "available_scenarios",
    "run_scenarios",
]
