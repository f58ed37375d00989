"""
Equivalence verifier.

Runs one logical operation through every adapter and checks each normalized
result against the expected result computed from the in-memory dataset.
Comparison is field-set equality per record on the wire attribute names, so
a missing or extra field, or a nullable stored as "" instead of None, is a
mismatch.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, TypedDict

from ddb_bench.adapters.abstract import ClientAdapter
from ddb_bench.domain.models import Record
from ddb_bench.exceptions import EquivalenceMismatchError, FieldMismatch
from ddb_bench.operations import LogicalOperation
from ddb_bench.utils.logging import get_logger

log = get_logger(__name__)

_MISSING = "<missing>"


class VerificationResult(TypedDict):
    operation: str
    kind: str
    adapters: List[str]
    expected_records: int
    status: str


def _as_fields(record: Any) -> Dict[str, Any]:
    if isinstance(record, Record):
        return record.to_item()
    return dict(record)


def diff_records(expected: Sequence[Any], actual: Sequence[Any]) -> List[FieldMismatch]:
    """
    Compare two ordered record sequences field by field.

    Records may be `Record` instances or plain mappings keyed by wire
    attribute names. A length difference is reported per surplus or missing
    position under the pseudo-field `<record>`.
    """
    mismatches: List[FieldMismatch] = []
    for index in range(max(len(expected), len(actual))):
        if index >= len(actual):
            exp = _as_fields(expected[index])
            mismatches.append(FieldMismatch(index, exp.get("id"), "<record>", exp.get("id"), _MISSING))
            continue
        if index >= len(expected):
            act = _as_fields(actual[index])
            mismatches.append(FieldMismatch(index, act.get("id"), "<record>", _MISSING, act.get("id")))
            continue
        exp, act = _as_fields(expected[index]), _as_fields(actual[index])
        record_id = exp.get("id", act.get("id"))
        for field in sorted(set(exp) | set(act)):
            exp_value = exp.get(field, _MISSING)
            act_value = act.get(field, _MISSING)
            # bool is an int subclass; 0 == False must still be a mismatch
            if exp_value != act_value or type(exp_value) is not type(act_value):
                mismatches.append(FieldMismatch(index, record_id, field, exp_value, act_value))
    return mismatches


def verify_equivalence(
    operation: LogicalOperation,
    adapters: Mapping[str, ClientAdapter],
    dataset: Sequence[Record],
    expected: Optional[List[Record]] = None,
) -> VerificationResult:
    """
    Assert every adapter returns the expected result for `operation`.

    Parameters
    ----------
    operation : LogicalOperation
        The operation to run through each adapter.
    adapters : Mapping[str, ClientAdapter]
        Adapters keyed by name; checked in mapping order.
    dataset : Sequence[Record]
        The in-memory dataset the table was seeded with.
    expected : list[Record] | None
        Precomputed expected result; computed from `dataset` when omitted.

    Raises
    ------
    EquivalenceMismatchError
        On the first adapter whose result differs, listing every diverging field.
    """
    expected_records = expected if expected is not None else operation.expected(dataset)
    description = operation.describe()
    log.info(
        f"[VERIFY] {description}",
        extra={"operation": operation.kind, "expected_records": len(expected_records)},
    )
    if not expected_records:
        log.warning(
            f"[VERIFY EMPTY] {description} matches no records; every adapter will agree",
            extra={"operation": operation.kind},
        )

    for name, adapter in adapters.items():
        actual = operation.normalize(operation.invoke(adapter))
        mismatches = diff_records(expected_records, actual)
        if mismatches:
            log.error(
                f"[VERIFY FAILED] {name}: {description}",
                extra={"adapter": name, "mismatches": len(mismatches)},
            )
            raise EquivalenceMismatchError(name, description, mismatches)
        log.info(f"[VERIFY OK] {name}", extra={"adapter": name, "records": len(actual)})

    return VerificationResult(
        operation=description,
        kind=operation.kind,
        adapters=list(adapters),
        expected_records=len(expected_records),
        status="ok",
    )


__all__ = ["VerificationResult", "diff_records", "verify_equivalence"]
