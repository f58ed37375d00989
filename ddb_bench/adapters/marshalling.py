"""
Helpers shared by adapters that receive plain Python values from boto3.

boto3's TypeDeserializer and the resource layer both hand back numbers as
`Decimal`; the record model wants ints. Nullable handling is deliberately
not done here: each adapter normalizes its own nullable representation.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from boto3.dynamodb.types import TypeDeserializer
from pydantic import ValidationError

from ddb_bench.domain.models import Record
from ddb_bench.exceptions import DecodeError

_deserializer = TypeDeserializer()


def plain_value(value: Any) -> Any:
    """
    Recursively replace Decimal with int (integral) or float.

    boto3's number context does not trap malformed input, so an unparsable
    `N` arrives here as NaN; any non-finite Decimal is a DecodeError.
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise DecodeError(f"Non-finite number attribute {value!r}")
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, list):
        return [plain_value(v) for v in value]
    if isinstance(value, dict):
        return {k: plain_value(v) for k, v in value.items()}
    return value


def deserialize_item(item: Mapping[str, Mapping[str, Any]]) -> dict:
    """Turn an attribute-value map (`{"S": ...}`, `{"N": ...}`) into plain Python values."""
    try:
        return {key: plain_value(_deserializer.deserialize(value)) for key, value in item.items()}
    except (TypeError, ValueError, AttributeError, InvalidOperation) as exc:
        raise DecodeError(f"Malformed attribute value in item: {exc}", exc) from exc


def record_from_values(values: Mapping[str, Any]) -> Record:
    """Validate plain values keyed by wire attribute names into a Record."""
    try:
        return Record.model_validate(dict(values))
    except ValidationError as exc:
        raise DecodeError(
            f"Item does not match the record schema: {exc.error_count()} error(s)",
            exc,
            {"id": values.get("id"), "fields": sorted({str(e["loc"][0]) for e in exc.errors() if e["loc"]})},
        ) from exc


__all__ = ["deserialize_item", "plain_value", "record_from_values"]
