"""
Mapped adapter: a schema-declared object mapper over the low-level client.

Items are marshalled and unmarshalled attribute by attribute through
`RECORD_SCHEMA`, and multi-page reads go through botocore paginators. The
nullable attribute is handled by its own codec, which also accepts the
empty-string form some backends store.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ddb_bench.adapters.abstract import AbstractClientAdapter
from ddb_bench.adapters.schema import RECORD_SCHEMA, ItemSchema
from ddb_bench.config import Settings, get_settings
from ddb_bench.domain.models import Record
from ddb_bench.domain.predicates import Condition, Eq, to_expression
from ddb_bench.exceptions import ItemNotFoundError
from ddb_bench.infrastructure.client_factory import PARTITION_KEY, get_client
from ddb_bench.infrastructure.errors import translate_backend_errors


class MappedClientAdapter(AbstractClientAdapter):
    """
    Records mapped through a declarative per-attribute schema.
    """

    name: str = "mapped"
    description: str = "Schema-declared mapper (custom nullable codec) + botocore paginators."

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Any = None,
        schema: ItemSchema = RECORD_SCHEMA,
    ) -> None:
        self._settings = settings or get_settings()
        self._table_name = self._settings.table_name
        self._client = client if client is not None else get_client(self._settings)
        self._schema = schema

    def _unmarshall(self, item: Dict[str, Any]) -> Record:
        return self._schema.unmarshall_item(item)

    def _paginate(self, operation: str, request: Dict[str, Any]) -> List[Record]:
        paginator = self._client.get_paginator(operation.lower())
        records: List[Record] = []
        with translate_backend_errors(operation, self._table_name):
            for page in paginator.paginate(TableName=self._table_name, **request):
                records.extend(self._unmarshall(item) for item in page.get("Items", []))
        return records

    def get_by_id(self, record_id: str) -> Record:
        key = {PARTITION_KEY: self._schema.marshall_value(PARTITION_KEY, record_id)}
        with translate_backend_errors("GetItem", self._table_name, record_id):
            response = self._client.get_item(TableName=self._table_name, Key=key)
        item = response.get("Item")
        if item is None:
            raise ItemNotFoundError(self._table_name, {PARTITION_KEY: record_id})
        return self._unmarshall(item)

    def scan_filter(self, condition: Condition) -> List[Record]:
        compiled = to_expression(condition, self._schema.marshall_value)
        return self._paginate("Scan", compiled.as_filter_kwargs())

    def query_by_id(self, record_id: str) -> List[Record]:
        compiled = to_expression(Eq(PARTITION_KEY, record_id), self._schema.marshall_value)
        return self._paginate("Query", compiled.as_key_condition_kwargs())

    def close(self) -> None:
        self._client.close()


__all__ = ["MappedClientAdapter"]
