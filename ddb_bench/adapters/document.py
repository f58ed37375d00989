"""
Document adapter: the boto3 resource layer (`Table`).

boto3 marshalls items to and from plain Python values on its own; predicates
are compiled into `boto3.dynamodb.conditions` objects instead of expression
strings. The adapter only has to bring numbers back from Decimal and
normalize the nullable attribute.
"""

from __future__ import annotations

import functools
import operator
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, ConditionBase, Key

from ddb_bench.adapters.abstract import AbstractClientAdapter
from ddb_bench.adapters.marshalling import plain_value, record_from_values
from ddb_bench.config import Settings, get_settings
from ddb_bench.domain.models import Record
from ddb_bench.domain.predicates import And, Condition, Eq, Gt
from ddb_bench.exceptions import ItemNotFoundError
from ddb_bench.infrastructure.client_factory import PARTITION_KEY, get_resource
from ddb_bench.infrastructure.errors import translate_backend_errors


def to_boto3_condition(condition: Condition, key: bool = False) -> ConditionBase:
    """
    Compile a predicate tree into boto3 condition objects.

    With `key=True` leaves use `Key(...)`, as KeyConditionExpression requires.
    """
    if isinstance(condition, And):
        return functools.reduce(
            operator.and_, (to_boto3_condition(c, key) for c in condition.conditions)
        )
    subject = Key(condition.field) if key else Attr(condition.field)
    if isinstance(condition, Eq):
        return subject.eq(condition.value)
    if isinstance(condition, Gt):
        return subject.gt(condition.value)
    raise TypeError(f"Unsupported condition: {condition!r}")


class DocumentClientAdapter(AbstractClientAdapter):
    """
    Items as plain dicts through `boto3.resource("dynamodb").Table`.
    """

    name: str = "document"
    description: str = "boto3 resource Table + boto3.dynamodb.conditions."

    def __init__(self, settings: Optional[Settings] = None, resource: Any = None) -> None:
        self._settings = settings or get_settings()
        self._table_name = self._settings.table_name
        self._resource = resource if resource is not None else get_resource(self._settings)
        self._table = self._resource.Table(self._table_name)

    def _unmarshall(self, item: Dict[str, Any]) -> Record:
        values = plain_value(item)
        if values.get("nullable") == "":
            values["nullable"] = None
        return record_from_values(values)

    def get_by_id(self, record_id: str) -> Record:
        with translate_backend_errors("GetItem", self._table_name, record_id):
            response = self._table.get_item(Key={PARTITION_KEY: record_id})
        item = response.get("Item")
        if item is None:
            raise ItemNotFoundError(self._table_name, {PARTITION_KEY: record_id})
        return self._unmarshall(item)

    def scan_filter(self, condition: Condition) -> List[Record]:
        return self._follow_pages(
            "Scan", self._table.scan, {"FilterExpression": to_boto3_condition(condition)}
        )

    def query_by_id(self, record_id: str) -> List[Record]:
        return self._follow_pages(
            "Query",
            self._table.query,
            {"KeyConditionExpression": to_boto3_condition(Eq(PARTITION_KEY, record_id), key=True)},
        )

    def close(self) -> None:
        self._resource.meta.client.close()


__all__ = ["DocumentClientAdapter", "to_boto3_condition"]
