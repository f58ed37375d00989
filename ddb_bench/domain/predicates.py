"""
Declarative filter predicates.

A predicate is a small expression tree of `Eq`, `Gt` and `And` nodes over
wire attribute names. The same tree is evaluated in memory to compute
expected results and compiled by each adapter into its native filter
representation, so no adapter carries a hand-written filter string.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Iterable, Mapping, Tuple, Union

from ddb_bench.domain.models import Record


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any
    operator: ClassVar[str] = "="


@dataclass(frozen=True)
class Gt:
    field: str
    value: Any
    operator: ClassVar[str] = ">"


@dataclass(frozen=True)
class And:
    conditions: Tuple["Condition", ...]

    def __init__(self, *conditions: "Condition") -> None:
        if not conditions:
            raise ValueError("And requires at least one condition")
        object.__setattr__(self, "conditions", tuple(conditions))


Condition = Union[Eq, Gt, And]


def evaluate(condition: Condition, record: Record) -> bool:
    """Evaluate a predicate against an in-memory record."""
    if isinstance(condition, And):
        return all(evaluate(c, record) for c in condition.conditions)
    actual = record.get_attribute(condition.field)
    if isinstance(condition, Eq):
        return actual == condition.value
    if isinstance(condition, Gt):
        return actual > condition.value
    raise TypeError(f"Unsupported condition: {condition!r}")


@dataclass
class CompiledExpression:
    """Expression string plus its placeholder maps, ready for a DynamoDB request."""

    expression: str
    names: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, Any] = field(default_factory=dict)

    def as_filter_kwargs(self) -> Dict[str, Any]:
        return {
            "FilterExpression": self.expression,
            "ExpressionAttributeNames": self.names,
            "ExpressionAttributeValues": self.values,
        }

    def as_key_condition_kwargs(self) -> Dict[str, Any]:
        return {
            "KeyConditionExpression": self.expression,
            "ExpressionAttributeNames": self.names,
            "ExpressionAttributeValues": self.values,
        }


def _identity(attribute: str, value: Any) -> Any:
    return value


def to_expression(
    condition: Condition, serialize: Callable[[str, Any], Any] = _identity
) -> CompiledExpression:
    """
    Compile a predicate into a DynamoDB expression string.

    Attribute names become `#nX` placeholders and values `:vX` placeholders;
    `serialize(attribute, value)` converts each value into the caller's wire
    representation.
    """
    compiled = CompiledExpression(expression="")
    counter = itertools.count()

    def _compile(node: Condition, nested: bool) -> str:
        if isinstance(node, And):
            joined = " AND ".join(_compile(c, True) for c in node.conditions)
            return f"({joined})" if nested and len(node.conditions) > 1 else joined
        idx = next(counter)
        name_key, value_key = f"#n{idx}", f":v{idx}"
        compiled.names[name_key] = node.field
        compiled.values[value_key] = serialize(node.field, node.value)
        return f"{name_key} {node.operator} {value_key}"

    compiled.expression = _compile(condition, False)
    return compiled


_OPERATORS: Mapping[str, type] = {"eq": Eq, "=": Eq, "gt": Gt, ">": Gt}


def from_description(description: Iterable[Mapping[str, Any]]) -> And:
    """
    Build a conjunction from `[{"field": ..., "operator": ..., "value": ...}, ...]`.
    """
    conditions = []
    for clause in description:
        operator = str(clause["operator"]).lower()
        if operator not in _OPERATORS:
            raise ValueError(f"Unknown operator '{clause['operator']}'. Available: {', '.join(_OPERATORS)}")
        conditions.append(_OPERATORS[operator](clause["field"], clause["value"]))
    return And(*conditions)


def describe(condition: Condition) -> str:
    """Human-readable rendering used in logs and reports."""
    if isinstance(condition, And):
        return " AND ".join(describe(c) for c in condition.conditions)
    return f"{condition.field} {condition.operator} {condition.value!r}"


__all__ = [
    "And",
    "CompiledExpression",
    "Condition",
    "Eq",
    "Gt",
    "describe",
    "evaluate",
    "from_description",
    "to_expression",
]
