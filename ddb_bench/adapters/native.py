"""
Native adapter: the low-level boto3 DynamoDB client.

Requests are built by hand in the attribute-value wire format, filter and key
conditions are compiled from the predicate tree into expression strings, and
responses are unmarshalled with boto3's TypeDeserializer. This is the
baseline the two mapping layers are compared against.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from boto3.dynamodb.types import TypeSerializer

from ddb_bench.adapters.abstract import AbstractClientAdapter
from ddb_bench.adapters.marshalling import deserialize_item, record_from_values
from ddb_bench.config import Settings, get_settings
from ddb_bench.domain.models import Record
from ddb_bench.domain.predicates import Condition, Eq, to_expression
from ddb_bench.exceptions import ItemNotFoundError
from ddb_bench.infrastructure.client_factory import PARTITION_KEY, get_client
from ddb_bench.infrastructure.errors import translate_backend_errors


class NativeClientAdapter(AbstractClientAdapter):
    """
    Hand-marshalled requests over `boto3.client("dynamodb")`.
    """

    name: str = "native"
    description: str = "Low-level boto3 client + TypeDeserializer unmarshalling."

    def __init__(self, settings: Optional[Settings] = None, client: Any = None) -> None:
        self._settings = settings or get_settings()
        self._table_name = self._settings.table_name
        self._client = client if client is not None else get_client(self._settings)
        self._serializer = TypeSerializer()

    def _serialize(self, attribute: str, value: Any) -> Dict[str, Any]:
        return self._serializer.serialize(value)

    def _unmarshall(self, item: Dict[str, Any]) -> Record:
        values = deserialize_item(item)
        # Backends differ on how an absent string is stored.
        if values.get("nullable") == "":
            values["nullable"] = None
        return record_from_values(values)

    def get_by_id(self, record_id: str) -> Record:
        with translate_backend_errors("GetItem", self._table_name, record_id):
            response = self._client.get_item(
                TableName=self._table_name,
                Key={PARTITION_KEY: {"S": record_id}},
            )
        item = response.get("Item")
        if item is None:
            raise ItemNotFoundError(self._table_name, {PARTITION_KEY: record_id})
        return self._unmarshall(item)

    def scan_filter(self, condition: Condition) -> List[Record]:
        compiled = to_expression(condition, self._serialize)
        return self._follow_pages(
            "Scan",
            self._client.scan,
            {"TableName": self._table_name, **compiled.as_filter_kwargs()},
        )

    def query_by_id(self, record_id: str) -> List[Record]:
        compiled = to_expression(Eq(PARTITION_KEY, record_id), self._serialize)
        return self._follow_pages(
            "Query",
            self._client.query,
            {"TableName": self._table_name, **compiled.as_key_condition_kwargs()},
        )

    def close(self) -> None:
        self._client.close()


__all__ = ["NativeClientAdapter"]
