"""
Infrastructure package for the DynamoDB adapter bench.

Centralizes backend connectivity concerns (boto3 client/resource factories,
table provisioning and seeding, botocore error translation). Keep this layer
focused on I/O, decoupled from adapter and verification logic.
"""

from ddb_bench.infrastructure.client_factory import (
    get_client,
    get_resource,
    provision_table,
    seed_table,
)
from ddb_bench.infrastructure.errors import map_client_error, translate_backend_errors

__all__ = [
    "get_client",
    "get_resource",
    "map_client_error",
    "provision_table",
    "seed_table",
    "translate_backend_errors",
]
