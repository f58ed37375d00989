from __future__ import annotations

import random

import pytest
from boto3.dynamodb.conditions import Attr, Key

from ddb_bench.adapters.document import to_boto3_condition
from ddb_bench.domain.dataset import generate_record
from ddb_bench.domain.predicates import And, Eq, Gt, describe, evaluate, from_description, to_expression


@pytest.fixture
def lion():
    return generate_record(random.Random(3)).model_copy(update={"string": "Lion", "number": 600_000})


class TestEvaluate:
    """In-memory predicate evaluation."""

    def test_eq_and_gt(self, lion):
        assert evaluate(Eq("string", "Lion"), lion)
        assert not evaluate(Eq("string", "Monkey"), lion)
        assert evaluate(Gt("number", 500_000), lion)
        assert not evaluate(Gt("number", 600_000), lion)

    def test_and_requires_every_clause(self, lion):
        assert evaluate(And(Eq("string", "Lion"), Gt("number", 500_000)), lion)
        assert not evaluate(And(Eq("string", "Lion"), Gt("number", 700_000)), lion)

    def test_wire_names_resolve(self, lion):
        assert evaluate(Eq("numberList", [1, 2, 3]), lion)

    def test_empty_and_rejected(self):
        with pytest.raises(ValueError):
            And()


class TestToExpression:
    """Expression string compilation."""

    def test_placeholders_and_values(self):
        compiled = to_expression(And(Eq("string", "Lion"), Gt("number", 500_000)))
        assert compiled.expression == "#n0 = :v0 AND #n1 > :v1"
        assert compiled.names == {"#n0": "string", "#n1": "number"}
        assert compiled.values == {":v0": "Lion", ":v1": 500_000}

    def test_nested_conjunction_is_parenthesized(self):
        condition = And(Eq("boolean", False), And(Eq("string", "Lion"), Gt("number", 1)))
        compiled = to_expression(condition)
        assert compiled.expression == "#n0 = :v0 AND (#n1 = :v1 AND #n2 > :v2)"

    def test_serializer_sees_attribute_and_value(self):
        seen = []

        def serialize(attribute, value):
            seen.append(attribute)
            return {"X": value}

        compiled = to_expression(Eq("id", "abc"), serialize)
        assert seen == ["id"]
        assert compiled.values == {":v0": {"X": "abc"}}
        assert compiled.as_key_condition_kwargs()["KeyConditionExpression"] == "#n0 = :v0"
        assert set(compiled.as_filter_kwargs()) == {
            "FilterExpression",
            "ExpressionAttributeNames",
            "ExpressionAttributeValues",
        }


class TestBoto3Conditions:
    """Condition objects for the resource layer."""

    def test_attr_conjunction(self):
        built = to_boto3_condition(And(Eq("string", "Lion"), Gt("number", 5)))
        assert built == Attr("string").eq("Lion") & Attr("number").gt(5)

    def test_key_condition(self):
        assert to_boto3_condition(Eq("id", "abc"), key=True) == Key("id").eq("abc")


class TestFromDescription:
    """Declarative predicate construction."""

    def test_builds_conjunction(self):
        condition = from_description(
            [
                {"field": "string", "operator": "eq", "value": "Lion"},
                {"field": "number", "operator": ">", "value": 500_000},
            ]
        )
        assert condition == And(Eq("string", "Lion"), Gt("number", 500_000))
        assert describe(condition) == "string = 'Lion' AND number > 500000"

    def test_unknown_operator(self):
        with pytest.raises(ValueError, match="Unknown operator 'lt'"):
            from_description([{"field": "number", "operator": "lt", "value": 1}])
