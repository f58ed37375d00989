"""
DynamoDB Adapter Bench - cross-validation and latency harness for DynamoDB clients.

This package drives several client abstractions over the same DynamoDB-compatible
table through identical logical operations, checks that they all return the
same records, and times repeated calls:

- Native low-level boto3 client with TypeDeserializer
- boto3 resource Table with condition objects
- Schema-declared object mapper over botocore paginators

Each is exercised with a point get, a filtered scan and a key query against a
synthetic dataset.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from ddb_bench.adapters.abstract import AbstractClientAdapter, ClientAdapter
from ddb_bench.config import Settings, get_settings
from ddb_bench.domain.dataset import generate_dataset
from ddb_bench.domain.models import Record
from ddb_bench.exceptions import (
    BackendUnavailableError,
    DecodeError,
    EquivalenceMismatchError,
    HarnessError,
    ItemNotFoundError,
)
from ddb_bench.orchestrator import available_adapters, available_scenarios, run_scenarios
from ddb_bench.runner import BenchmarkRunner
from ddb_bench.utils.logging import configure_logging, get_logger
from ddb_bench.verifier import verify_equivalence

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Record",
    "generate_dataset",
    # Adapter abstractions
    "ClientAdapter",
    "AbstractClientAdapter",
    # Harness
    "BenchmarkRunner",
    "available_adapters",
    "available_scenarios",
    "run_scenarios",
    "verify_equivalence",
    # Errors
    "HarnessError",
    "ItemNotFoundError",
    "BackendUnavailableError",
    "DecodeError",
    "EquivalenceMismatchError",
    # Logging
    "configure_logging",
    "get_logger",
]
