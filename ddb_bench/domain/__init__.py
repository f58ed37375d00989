"""
Domain package for the DynamoDB adapter bench.

Exports the record model, the synthetic dataset generator and the declarative
predicate tree. Keep this package free of any backend I/O.
"""

from ddb_bench.domain.dataset import generate_dataset, load_dataset, save_dataset
from ddb_bench.domain.models import Record
from ddb_bench.domain.predicates import And, Condition, Eq, Gt, evaluate, from_description

__all__ = [
    "And",
    "Condition",
    "Eq",
    "Gt",
    "Record",
    "evaluate",
    "from_description",
    "generate_dataset",
    "load_dataset",
    "save_dataset",
]
