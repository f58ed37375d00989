"""
Client adapters for the DynamoDB adapter bench.

This module re-exports the adapter interfaces and the concrete adapter classes
so downstream code can import from `ddb_bench.adapters` directly.
"""

from ddb_bench.adapters.abstract import AbstractClientAdapter, ClientAdapter
from ddb_bench.adapters.document import DocumentClientAdapter
from ddb_bench.adapters.mapped import MappedClientAdapter
from ddb_bench.adapters.native import NativeClientAdapter

__all__ = [
    # Abstracts
    "AbstractClientAdapter",
    "ClientAdapter",
    # Concrete adapters
    "DocumentClientAdapter",
    "MappedClientAdapter",
    "NativeClientAdapter",
]
