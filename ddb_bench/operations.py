"""
Logical operations and the reference scenarios.

A logical operation knows how to invoke any adapter, how to compute the
expected answer straight from the in-memory dataset, and how to normalize an
adapter's answer into an ordered list of records so expected and actual can
be compared element by element.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Protocol, Sequence

from ddb_bench.adapters.abstract import ClientAdapter
from ddb_bench.config import Settings, get_settings
from ddb_bench.domain.models import Record
from ddb_bench.domain.predicates import And, Condition, Eq, Gt, describe, evaluate

SCENARIO_NAMES = ("get", "scan", "query")


def sort_records(records: Sequence[Record], descending: bool = True) -> List[Record]:
    """Total order on `id`; the same order is applied to expected and actual."""
    return sorted(records, key=lambda r: r.id, reverse=descending)


class LogicalOperation(Protocol):
    kind: str

    def describe(self) -> str: ...

    def invoke(self, adapter: ClientAdapter) -> Any: ...

    def expected(self, dataset: Sequence[Record]) -> List[Record]: ...

    def normalize(self, result: Any) -> List[Record]: ...


@dataclass(frozen=True)
class GetById:
    record_id: str
    kind: ClassVar[str] = "get"

    def describe(self) -> str:
        return f"get id={self.record_id}"

    def invoke(self, adapter: ClientAdapter) -> Record:
        return adapter.get_by_id(self.record_id)

    def expected(self, dataset: Sequence[Record]) -> List[Record]:
        return [r for r in dataset if r.id == self.record_id]

    def normalize(self, result: Record) -> List[Record]:
        return [result]


@dataclass(frozen=True)
class ScanFilter:
    condition: Condition
    descending: bool = True
    kind: ClassVar[str] = "scan"

    def describe(self) -> str:
        return f"scan {describe(self.condition)}"

    def invoke(self, adapter: ClientAdapter) -> List[Record]:
        return adapter.scan_filter(self.condition)

    def expected(self, dataset: Sequence[Record]) -> List[Record]:
        return sort_records([r for r in dataset if evaluate(self.condition, r)], self.descending)

    def normalize(self, result: List[Record]) -> List[Record]:
        return sort_records(result, self.descending)


@dataclass(frozen=True)
class QueryById:
    record_id: str
    first_only: bool = False
    kind: ClassVar[str] = "query"

    def describe(self) -> str:
        suffix = " (first match)" if self.first_only else ""
        return f"query id={self.record_id}{suffix}"

    def invoke(self, adapter: ClientAdapter) -> List[Record]:
        return adapter.query_by_id(self.record_id)

    def expected(self, dataset: Sequence[Record]) -> List[Record]:
        matches = [r for r in dataset if r.id == self.record_id]
        return matches[:1] if self.first_only else matches

    def normalize(self, result: List[Record]) -> List[Record]:
        records = list(result)
        return records[:1] if self.first_only else records


@dataclass(frozen=True)
class Scenario:
    name: str
    operation: LogicalOperation
    rounds: int


def scan_pivot(dataset: Sequence[Record]) -> Record:
    """
    First record that is not the largest `number` in its category.

    Filtering on its category and a larger number then matches at least one
    record and never the whole dataset.
    """
    highest: Dict[str, int] = {}
    for record in dataset:
        highest[record.string] = max(highest.get(record.string, record.number), record.number)
    for record in dataset:
        if record.number < highest[record.string]:
            return record
    raise ValueError(
        "Every record holds the largest number in its category; no scan pivot matches anything"
    )


def build_scenarios(dataset: Sequence[Record], settings: Optional[Settings] = None) -> Dict[str, Scenario]:
    """
    Reference scenarios over a generated dataset.

    - get: the middle record, by id
    - scan: records sharing the pivot's category with a larger number, where
      the pivot is the first record for which that set is non-empty
    - query: the first record's id, comparing the first match only
    """
    if not dataset:
        raise ValueError("Scenarios need a non-empty dataset")
    settings = settings or get_settings()
    rounds = settings.rounds_by_kind()
    middle, first = dataset[len(dataset) // 2], dataset[0]
    pivot = scan_pivot(dataset)

    operations: Dict[str, LogicalOperation] = {
        "get": GetById(middle.id),
        "scan": ScanFilter(And(Eq("string", pivot.string), Gt("number", pivot.number))),
        "query": QueryById(first.id, first_only=True),
    }
    return {
        name: Scenario(name=name, operation=op, rounds=rounds[op.kind])
        for name, op in operations.items()
    }


__all__ = [
    "GetById",
    "LogicalOperation",
    "QueryById",
    "SCENARIO_NAMES",
    "ScanFilter",
    "Scenario",
    "build_scenarios",
    "scan_pivot",
    "sort_records",
]
