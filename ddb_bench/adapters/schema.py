"""
Declarative item schema for the mapped adapter.

Each record attribute is declared with a codec that knows how to marshall a
Python value into a DynamoDB attribute value and back, the way a data mapper
declares `{type: "String"}`, `{type: "List", memberType: ...}` or a custom
type with its own marshall/unmarshall pair. The schema is strict: missing
attributes, unknown attributes and unexpected type tags are decode errors.
"""

from __future__ import annotations

import abc
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from ddb_bench.adapters.marshalling import plain_value, record_from_values
from ddb_bench.domain.models import Record
from ddb_bench.exceptions import DecodeError


class AttributeCodec(abc.ABC):
    """Marshall/unmarshall pair for one attribute."""

    type_tag: str

    @abc.abstractmethod
    def marshall(self, value: Any) -> Dict[str, Any]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def unmarshall(self, attribute: Mapping[str, Any]) -> Any:  # pragma: no cover - interface only
        raise NotImplementedError

    def _payload(self, attribute: Mapping[str, Any]) -> Any:
        if not isinstance(attribute, Mapping) or self.type_tag not in attribute:
            raise DecodeError(f"Expected a '{self.type_tag}' attribute, got {attribute!r}")
        return attribute[self.type_tag]


class StringCodec(AttributeCodec):
    type_tag = "S"

    def marshall(self, value: str) -> Dict[str, Any]:
        return {"S": value}

    def unmarshall(self, attribute: Mapping[str, Any]) -> str:
        return self._payload(attribute)


class BooleanCodec(AttributeCodec):
    type_tag = "BOOL"

    def marshall(self, value: bool) -> Dict[str, Any]:
        return {"BOOL": value}

    def unmarshall(self, attribute: Mapping[str, Any]) -> bool:
        return self._payload(attribute)


class NumberCodec(AttributeCodec):
    type_tag = "N"

    def marshall(self, value: int) -> Dict[str, Any]:
        return {"N": str(value)}

    def unmarshall(self, attribute: Mapping[str, Any]) -> Any:
        raw = self._payload(attribute)
        try:
            return plain_value(Decimal(raw))
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise DecodeError(f"Invalid number attribute {raw!r}", exc) from exc


class ListCodec(AttributeCodec):
    type_tag = "L"

    def __init__(self, member: AttributeCodec) -> None:
        self.member = member

    def marshall(self, value: list) -> Dict[str, Any]:
        return {"L": [self.member.marshall(v) for v in value]}

    def unmarshall(self, attribute: Mapping[str, Any]) -> list:
        return [self.member.unmarshall(v) for v in self._payload(attribute)]


class AnyCodec(AttributeCodec):
    """Schemaless attribute; defers to boto3's type (de)serializer."""

    type_tag = "*"

    def __init__(self) -> None:
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def marshall(self, value: Any) -> Dict[str, Any]:
        try:
            return self._serializer.serialize(value)
        except TypeError as exc:
            raise DecodeError(f"Cannot marshall value {value!r}", exc) from exc

    def unmarshall(self, attribute: Mapping[str, Any]) -> Any:
        try:
            return plain_value(self._deserializer.deserialize(attribute))
        except (TypeError, AttributeError) as exc:
            raise DecodeError(f"Cannot unmarshall attribute {attribute!r}", exc) from exc


class NullableStringCodec(AttributeCodec):
    """
    String that may be absent.

    Writes both `None` and `""` as `{"NULL": true}`; reads `{"NULL": true}`
    and `{"S": ""}` back as None.
    """

    type_tag = "S"

    def marshall(self, value: Optional[str]) -> Dict[str, Any]:
        if value is None or value == "":
            return {"NULL": True}
        return {"S": value}

    def unmarshall(self, attribute: Mapping[str, Any]) -> Optional[str]:
        if isinstance(attribute, Mapping) and attribute.get("NULL") is True:
            return None
        return self._payload(attribute) or None


class ItemSchema:
    """Ordered mapping of wire attribute name to codec."""

    def __init__(self, fields: Mapping[str, AttributeCodec]) -> None:
        self.fields = dict(fields)

    def marshall_item(self, record: Record) -> Dict[str, Dict[str, Any]]:
        values = record.to_item()
        return {name: codec.marshall(values[name]) for name, codec in self.fields.items()}

    def marshall_value(self, attribute: str, value: Any) -> Dict[str, Any]:
        """Marshall a single value the way `attribute` is declared (for expression values)."""
        codec = self.fields.get(attribute)
        if codec is None:
            raise KeyError(f"Attribute '{attribute}' is not declared in the schema")
        return codec.marshall(value)

    def unmarshall_item(self, item: Mapping[str, Mapping[str, Any]]) -> Record:
        unknown = sorted(set(item) - set(self.fields))
        if unknown:
            raise DecodeError(
                f"Item carries undeclared attributes: {', '.join(unknown)}",
                context={"id": item.get("id")},
            )
        values: Dict[str, Any] = {}
        for name, codec in self.fields.items():
            if name not in item:
                raise DecodeError(f"Item is missing attribute '{name}'", context={"id": item.get("id")})
            values[name] = codec.unmarshall(item[name])
        return record_from_values(values)


RECORD_SCHEMA = ItemSchema(
    {
        "id": StringCodec(),
        "boolean": BooleanCodec(),
        "string": StringCodec(),
        "nullable": NullableStringCodec(),
        "number": NumberCodec(),
        "externalIdList": ListCodec(StringCodec()),
        "numberList": ListCodec(NumberCodec()),
        "nested": AnyCodec(),
    }
)


__all__ = [
    "AnyCodec",
    "AttributeCodec",
    "BooleanCodec",
    "ItemSchema",
    "ListCodec",
    "NullableStringCodec",
    "NumberCodec",
    "RECORD_SCHEMA",
    "StringCodec",
]
