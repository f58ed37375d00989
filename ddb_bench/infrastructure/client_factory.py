"""
DynamoDB client factory and table fixture helpers for the adapter bench.

Provides boto3 low-level clients and resources bound to the configured
endpoint, plus the Backend Fixture side of the harness: creating the
`LargeItem` table and seeding it with the generated dataset.

Clients built here have botocore retries disabled; a failed request surfaces
immediately. The one retry policy in the system lives in `provision_table`,
which waits for a freshly started local endpoint to accept connections,
using tenacity.
"""

from __future__ import annotations

from typing import Iterable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, ConnectionError as BotoConnectionError, WaiterError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ddb_bench.config import Settings, get_settings
from ddb_bench.domain.models import Record
from ddb_bench.exceptions import BackendUnavailableError
from ddb_bench.infrastructure.errors import translate_backend_errors
from ddb_bench.utils.logging import get_logger

log = get_logger(__name__)

PARTITION_KEY = "id"


def _boto_config(settings: Settings) -> Config:
    return Config(
        retries={"total_max_attempts": 1},
        read_timeout=settings.request_timeout_seconds,
        connect_timeout=settings.request_timeout_seconds,
    )


def build_session(settings: Optional[Settings] = None) -> boto3.session.Session:
    """Create a boto3 session from explicit settings (never the ambient profile)."""
    settings = settings or get_settings()
    return boto3.session.Session(
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_region,
    )


def get_client(settings: Optional[Settings] = None):
    """
    Build a low-level DynamoDB client for the configured endpoint.

    Returns
    -------
    botocore.client.DynamoDB
        A client speaking the attribute-value wire format.
    """
    settings = settings or get_settings()
    return build_session(settings).client(
        "dynamodb",
        endpoint_url=settings.mock_dynamodb_endpoint,
        config=_boto_config(settings),
    )


def get_resource(settings: Optional[Settings] = None):
    """
    Build a DynamoDB service resource for the configured endpoint.

    Returns
    -------
    boto3.resources.factory.dynamodb.ServiceResource
        A resource whose Table handles marshall items to plain Python types.
    """
    settings = settings or get_settings()
    return build_session(settings).resource(
        "dynamodb",
        endpoint_url=settings.mock_dynamodb_endpoint,
        config=_boto_config(settings),
    )


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
    retry=retry_if_exception_type(BotoConnectionError),
    reraise=True,
)
def _create_table(client, settings: Settings) -> bool:
    try:
        client.create_table(
            TableName=settings.table_name,
            KeySchema=[{"AttributeName": PARTITION_KEY, "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": PARTITION_KEY, "AttributeType": "S"}],
            ProvisionedThroughput={
                "ReadCapacityUnits": settings.capacity_units,
                "WriteCapacityUnits": settings.capacity_units,
            },
        )
    except ClientError as exc:
        if exc.response.get("Error", {}).get("Code") == "ResourceInUseException":
            return False
        raise
    return True


def provision_table(settings: Optional[Settings] = None) -> bool:
    """
    Create the benchmark table if it does not exist and wait until it is active.

    Returns
    -------
    bool
        True if the table was created by this call, False if it already existed.

    Raises
    ------
    BackendUnavailableError
        If the endpoint stays unreachable after all retry attempts.
    """
    settings = settings or get_settings()
    client = get_client(settings)
    try:
        with translate_backend_errors("CreateTable", settings.table_name):
            created = _create_table(client, settings)
            try:
                client.get_waiter("table_exists").wait(
                    TableName=settings.table_name,
                    WaiterConfig={"Delay": 1, "MaxAttempts": 60},
                )
            except WaiterError as exc:
                raise BackendUnavailableError(
                    f"Table '{settings.table_name}' did not become active", exc
                ) from exc
    finally:
        client.close()

    log.info(
        "Table ready",
        extra={"table": settings.table_name, "created": created, "endpoint": settings.mock_dynamodb_endpoint},
    )
    return created


def seed_table(records: Iterable[Record], settings: Optional[Settings] = None) -> int:
    """
    Put every record into the table through a batch writer.

    Returns
    -------
    int
        Number of records written.
    """
    settings = settings or get_settings()
    resource = get_resource(settings)
    written = 0
    try:
        table = resource.Table(settings.table_name)
        with translate_backend_errors("BatchWriteItem", settings.table_name):
            with table.batch_writer() as batch:
                for record in records:
                    batch.put_item(Item=record.to_item())
                    written += 1
    finally:
        resource.meta.client.close()

    log.info("Table seeded", extra={"table": settings.table_name, "records": written})
    return written


__all__ = [
    "PARTITION_KEY",
    "build_session",
    "get_client",
    "get_resource",
    "provision_table",
    "seed_table",
]
