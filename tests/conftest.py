"""
Pytest configuration for the DynamoDB adapter bench.

Provides fixtures for:
- Settings pointed at an in-process moto backend
- The generated dataset and a seeded `LargeItem` table
- Concrete adapters bound to that table
- An in-memory adapter factory for unit tests that must not touch boto3
"""

from __future__ import annotations

import os
import random
from typing import Callable, Dict, Generator, List, Optional

import pytest
from moto import mock_aws

from ddb_bench.adapters import DocumentClientAdapter, MappedClientAdapter, NativeClientAdapter
from ddb_bench.adapters.abstract import AbstractClientAdapter
from ddb_bench.config import Settings
from ddb_bench.domain.dataset import generate_dataset
from ddb_bench.domain.models import Record
from ddb_bench.domain.predicates import Condition, evaluate
from ddb_bench.exceptions import ItemNotFoundError
from ddb_bench.infrastructure.client_factory import provision_table, seed_table

DATASET_SIZE = 1_000
DATASET_SEED = 42


def make_settings(**overrides) -> Settings:
    """Settings for moto: no custom endpoint, dummy credentials, tiny round counts."""
    values = {
        "MOCK_DYNAMODB_ENDPOINT": None,
        "AWS_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "DYNAMODB_TABLE_NAME": "LargeItem",
        "DYNAMODB_CAPACITY_UNITS": 1_000_000,
        "BENCHMARK_DATASET_SIZE": DATASET_SIZE,
        "BENCHMARK_GET_ROUNDS": 5,
        "BENCHMARK_SCAN_ROUNDS": 2,
        "BENCHMARK_QUERY_ROUNDS": 3,
        "LOG_LEVEL": "DEBUG",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(scope="session", autouse=True)
def aws_credentials() -> None:
    """Keep boto3 away from any real account during the test session."""
    for key, value in {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": "us-east-1",
    }.items():
        os.environ[key] = value


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings


@pytest.fixture(scope="session")
def mocked_backend(aws_credentials) -> Generator[None, None, None]:
    """Session-wide moto backend standing in for the local DynamoDB endpoint."""
    with mock_aws():
        yield


@pytest.fixture(scope="session")
def dataset() -> List[Record]:
    return generate_dataset(DATASET_SIZE, rng=random.Random(DATASET_SEED))


@pytest.fixture(scope="session")
def seeded_table(mocked_backend, test_settings: Settings, dataset: List[Record]) -> List[Record]:
    """
    Create `LargeItem` and load the dataset once per session.

    Returns the dataset the table holds; tests must not write to this table.
    """
    provision_table(test_settings)
    written = seed_table(dataset, test_settings)
    assert written == len(dataset)
    return dataset


@pytest.fixture
def adapters(seeded_table, test_settings: Settings) -> Generator[Dict[str, AbstractClientAdapter], None, None]:
    built: Dict[str, AbstractClientAdapter] = {
        "native": NativeClientAdapter(test_settings),
        "document": DocumentClientAdapter(test_settings),
        "mapped": MappedClientAdapter(test_settings),
    }
    try:
        yield built
    finally:
        for adapter in built.values():
            adapter.close()


class InMemoryAdapter(AbstractClientAdapter):
    """Adapter over a list of records; optionally rewrites what it returns."""

    description = "in-memory test adapter"

    def __init__(
        self,
        name: str,
        records: List[Record],
        transform: Optional[Callable[[Record], Record]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.name = name
        self._table_name = "memory"
        self._records = list(records)
        self._transform = transform or (lambda r: r)
        self._error = error
        self.calls: List[str] = []
        self.closed = False

    def _check(self, call: str) -> None:
        self.calls.append(call)
        if self._error is not None:
            raise self._error

    def get_by_id(self, record_id: str) -> Record:
        self._check("get")
        for record in self._records:
            if record.id == record_id:
                return self._transform(record)
        raise ItemNotFoundError(self._table_name, {"id": record_id})

    def scan_filter(self, condition: Condition) -> List[Record]:
        self._check("scan")
        matches = [self._transform(r) for r in self._records if evaluate(condition, r)]
        random.shuffle(matches)
        return matches

    def query_by_id(self, record_id: str) -> List[Record]:
        self._check("query")
        return [self._transform(r) for r in self._records if r.id == record_id]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def memory_adapter() -> Callable[..., InMemoryAdapter]:
    return InMemoryAdapter


@pytest.fixture
def small_dataset() -> List[Record]:
    return generate_dataset(50, rng=random.Random(7))
