from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def get_container_resources() -> Dict[str, Optional[str]]:
    """
    Get container resource constraints.

    Reads from environment variables or the cgroup v2 files when running in a
    container. Returns dict with 'cpus' and 'memory' keys.
    """
    resources: Dict[str, Optional[str]] = {
        "cpus": os.environ.get("BENCHMARK_CPU_LIMIT"),
        "memory": os.environ.get("BENCHMARK_MEMORY_LIMIT"),
    }

    if resources["cpus"] is None:
        try:
            with open("/sys/fs/cgroup/cpu.max", "r") as f:
                parts = f.read().strip().split()
            if len(parts) == 2 and parts[0] != "max":
                resources["cpus"] = f"{int(parts[0]) / int(parts[1]):.1f}"
        except (FileNotFoundError, PermissionError, ValueError):
            pass

    if resources["memory"] is None:
        try:
            with open("/sys/fs/cgroup/memory.max", "r") as f:
                content = f.read().strip()
            if content != "max":
                mem_bytes = int(content)
                if mem_bytes >= 1024**3:
                    resources["memory"] = f"{mem_bytes / 1024**3:.1f}GB"
                else:
                    resources["memory"] = f"{mem_bytes / 1024**2:.0f}MB"
        except (FileNotFoundError, PermissionError, ValueError):
            pass

    return resources


def _verification_cell(scenario: Dict[str, Any]) -> str:
    if scenario.get("status") != "ok":
        return "[bold red]FAILED[/bold red]"
    if "verification" in scenario:
        return "[green]equal[/green]"
    return "[dim]skipped[/dim]"


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render scenario results as a rich table, one row per scenario x adapter.

    Benchmark rows are sorted by mean latency (ascending) within a scenario.
    Failed scenarios get a single row followed by their error text.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    resources = get_container_resources()
    resource_parts = []
    if resources["cpus"]:
        resource_parts.append(f"CPU: {resources['cpus']} cores")
    if resources["memory"]:
        resource_parts.append(f"Memory: {resources['memory']}")

    title = "DynamoDB Adapter Bench Results"
    if resource_parts:
        title = f"{title}\n[dim]Container Resources: {' │ '.join(resource_parts)}[/dim]"

    table = Table(title=title, box=box.ROUNDED, caption="Sorted by mean latency per scenario")
    table.add_column("Scenario", style="cyan", no_wrap=True)
    table.add_column("Adapter", style="magenta", no_wrap=True)
    table.add_column("Verified", justify="center")
    table.add_column("Rounds", justify="right", style="blue")
    table.add_column("Total (s)", justify="right", style="green")
    table.add_column("Mean (ms)\n[dim](± StdDev)[/dim]", justify="right", style="bold green")
    table.add_column("Median (ms)", justify="right", style="green")
    table.add_column("Ops/s", justify="right", style="yellow")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")

    errors: List[str] = []
    for scenario in results:
        name = scenario.get("scenario", "Unknown")
        verified = _verification_cell(scenario)
        benchmarks = sorted(scenario.get("benchmarks", []), key=lambda b: b.get("mean_ms", 0.0))

        if not benchmarks:
            adapters = ", ".join(scenario.get("verification", {}).get("adapters", [])) or "-"
            table.add_row(name, adapters, verified, "-", "-", "-", "-", "-", "-", "-")
        for bench in benchmarks:
            mem_bytes = bench.get("peak_rss_bytes") or 0
            cpu = bench.get("cpu_percent")
            table.add_row(
                name,
                bench.get("adapter", "?"),
                verified,
                f"{bench.get('rounds', 0):,}",
                f"{bench.get('total_seconds', 0.0):.2f}",
                f"{bench.get('mean_ms', 0.0):.3f} ± {bench.get('stddev_ms', 0.0):.3f}",
                f"{bench.get('median_ms', 0.0):.3f}",
                f"{bench.get('ops_per_sec', 0.0):,.1f}",
                f"{mem_bytes / (1024 * 1024):.2f}",
                f"{cpu:.1f}" if cpu is not None else "N/A",
            )
        if scenario.get("error"):
            errors.append(f"[bold red]{name}[/bold red] ({scenario.get('error_type')}): {scenario['error']}")

    console.print(table)
    for line in errors:
        console.print(line)


__all__ = ["get_container_resources", "print_results"]
