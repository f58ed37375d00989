"""
Benchmark runner.

Repeats a logical operation R times against one adapter, strictly
sequentially, and reports wall-time statistics. Results returned by the
adapter are discarded; correctness is the verifier's job. Adapters are
timed one after another and never interleaved, so they do not contend for
the backend within a timed run.
"""

from __future__ import annotations

import statistics
import time
from typing import Dict, List, Mapping, Optional, TypedDict

from ddb_bench.adapters.abstract import ClientAdapter
from ddb_bench.operations import LogicalOperation
from ddb_bench.utils.logging import get_logger
from ddb_bench.utils.profiler import profile_block

log = get_logger(__name__)


class BenchmarkResult(TypedDict, total=False):
    """
    Metrics for one adapter x operation timed run.

    Latency figures are per call, in milliseconds; `total_seconds` covers the
    whole loop as measured by the profiler.
    """

    adapter: str
    operation: str
    kind: str
    rounds: int
    total_seconds: float
    mean_ms: float
    median_ms: float
    stddev_ms: float
    min_ms: float
    max_ms: float
    ops_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


def _round_float(value: float, decimals: int = 3) -> float:
    return round(value, decimals)


def summarize(samples: List[float]) -> Dict[str, float]:
    """Latency statistics (ms) over per-call samples in seconds."""
    millis = [s * 1000.0 for s in samples]
    return {
        "mean_ms": _round_float(statistics.mean(millis)),
        "median_ms": _round_float(statistics.median(millis)),
        "stddev_ms": _round_float(statistics.stdev(millis)) if len(millis) > 1 else 0.0,
        "min_ms": _round_float(min(millis)),
        "max_ms": _round_float(max(millis)),
    }


class BenchmarkRunner:
    """
    Time repeated logical operations.

    Parameters
    ----------
    rounds : Mapping[str, int]
        Repetition count per operation kind ("get", "scan", "query").
    warmup : bool
        Issue one untimed call per adapter before the timed loop.
    """

    def __init__(self, rounds: Mapping[str, int], warmup: bool = False) -> None:
        self.rounds = dict(rounds)
        self.warmup = warmup

    def rounds_for(self, operation: LogicalOperation) -> int:
        if operation.kind not in self.rounds:
            raise ValueError(
                f"No repetition count configured for '{operation.kind}'. "
                f"Configured: {', '.join(sorted(self.rounds))}"
            )
        return self.rounds[operation.kind]

    def run(
        self,
        adapter: ClientAdapter,
        operation: LogicalOperation,
        rounds: Optional[int] = None,
    ) -> BenchmarkResult:
        """
        Invoke `operation` against `adapter` `rounds` times and return metrics.
        """
        count = rounds if rounds is not None else self.rounds_for(operation)
        if count < 1:
            raise ValueError(f"rounds must be positive, got {count}")

        if self.warmup:
            operation.invoke(adapter)

        label = f"{adapter.name}:{operation.kind}"
        log.info(f"[BENCH START] {label}", extra={"adapter": adapter.name, "rounds": count})

        samples: List[float] = []
        with profile_block(label) as stats:
            for _ in range(count):
                start = time.perf_counter()
                operation.invoke(adapter)
                samples.append(time.perf_counter() - start)

        result = BenchmarkResult(
            adapter=adapter.name,
            operation=operation.describe(),
            kind=operation.kind,
            rounds=count,
            total_seconds=_round_float(stats.duration_seconds),
            ops_per_sec=_round_float(count / stats.duration_seconds, 2) if stats.duration_seconds else 0.0,
            peak_rss_bytes=stats.peak_rss_bytes,
            cpu_percent=_round_float(stats.cpu_percent, 1) if stats.cpu_percent is not None else None,
            **summarize(samples),
        )
        log.info(
            f"[BENCH DONE] {label}",
            extra={
                "adapter": adapter.name,
                "rounds": count,
                "total_seconds": result["total_seconds"],
                "mean_ms": result["mean_ms"],
            },
        )
        return result

    def run_all(
        self, adapters: Mapping[str, ClientAdapter], operation: LogicalOperation
    ) -> List[BenchmarkResult]:
        """Time each adapter in turn; one adapter's loop finishes before the next starts."""
        return [self.run(adapter, operation) for adapter in adapters.values()]


__all__ = ["BenchmarkResult", "BenchmarkRunner", "summarize"]
