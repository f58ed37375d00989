"""
Utilities package for the DynamoDB adapter bench.

Exports shared helpers for logging and profiling.
Keep this package lightweight and free of domain-specific logic.
"""

from ddb_bench.utils.logging import configure_logging, get_logger
from ddb_bench.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
