"""
Translation of botocore failures into harness exceptions.

Adapters wrap every backend request in `translate_backend_errors` so callers
only ever see the harness taxonomy. Nothing here retries.
"""

from __future__ import annotations

import contextlib
from typing import Generator, Optional

from botocore.exceptions import (
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
    NoCredentialsError,
    NoRegionError,
)

from ddb_bench.exceptions import BackendUnavailableError, HarnessError
from ddb_bench.utils.logging import get_logger

log = get_logger(__name__)

_UNAVAILABLE_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "RequestLimitExceeded",
        "ThrottlingException",
        "InternalServerError",
        "ServiceUnavailable",
        "ServiceUnavailableException",
        "RequestTimeoutException",
    }
)

_AUTH_CODES = frozenset(
    {
        "UnrecognizedClientException",
        "AccessDeniedException",
        "InvalidSignatureException",
        "ExpiredTokenException",
    }
)


def map_client_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resource_id: Optional[str] = None,
) -> HarnessError:
    """Map a DynamoDB ClientError to a harness exception.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "GetItem", "Scan")
        table_name: The DynamoDB table name
        resource_id: Optional record id for context

    Returns:
        BackendUnavailableError for missing tables, throttling, service and
        credential failures; HarnessError for anything else.
    """
    error_code = error.response.get("Error", {}).get("Code", "Unknown")
    error_message = error.response.get("Error", {}).get("Message", str(error))

    context = f"{operation} on {table_name}"
    if resource_id:
        context += f" (resource: {resource_id})"
    full_message = f"{context}: {error_message}"
    details = {"operation": operation, "table_name": table_name, "code": error_code}

    if error_code == "ResourceNotFoundException":
        return BackendUnavailableError(f"Table not found - {full_message}", error, details)

    if error_code in _UNAVAILABLE_CODES:
        return BackendUnavailableError(f"Backend unavailable - {full_message}", error, details)

    if error_code in _AUTH_CODES:
        return BackendUnavailableError(
            f"Authentication/authorization failed - {full_message}", error, details
        )

    log.warning(
        f"[UNMAPPED] DynamoDB error code '{error_code}' during {operation}",
        extra={"code": error_code, "operation": operation, "table_name": table_name},
    )
    return HarnessError(f"DynamoDB operation failed - {full_message}", error, details)


@contextlib.contextmanager
def translate_backend_errors(
    operation: str, table_name: str, resource_id: Optional[str] = None
) -> Generator[None, None, None]:
    """
    Re-raise botocore failures raised inside the block as harness exceptions.

    Example
    -------
        with translate_backend_errors("GetItem", "LargeItem", record_id):
            response = client.get_item(...)
    """
    try:
        yield
    except ClientError as exc:
        raise map_client_error(exc, operation, table_name, resource_id) from exc
    except (BotoConnectionError, HTTPClientError) as exc:
        raise BackendUnavailableError(
            f"{operation} on {table_name}: endpoint unreachable or timed out - {exc}",
            exc,
            {"operation": operation, "table_name": table_name},
        ) from exc
    except (NoCredentialsError, NoRegionError) as exc:
        raise BackendUnavailableError(
            f"{operation} on {table_name}: client is not configured - {exc}",
            exc,
            {"operation": operation, "table_name": table_name},
        ) from exc


__all__ = ["map_client_error", "translate_backend_errors"]
