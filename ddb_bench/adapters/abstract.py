"""
Abstract client adapter interface for the DynamoDB adapter bench.

Concrete adapters (low-level client, document resource, schema mapper) wrap
the same table behind one logical operation set. The verifier and the
benchmark runner depend only on the ClientAdapter protocol, never on a
concrete implementation.
"""

from __future__ import annotations

import abc
from typing import Any, Callable, Dict, List, Protocol, runtime_checkable

from ddb_bench.domain.models import Record
from ddb_bench.domain.predicates import Condition
from ddb_bench.infrastructure.errors import translate_backend_errors


@runtime_checkable
class ClientAdapter(Protocol):
    """
    Common interface all client adapters must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the access strategy.
    """

    name: str
    description: str

    def get_by_id(self, record_id: str) -> Record:
        """
        Fetch exactly one record by partition key.

        Raises
        ------
        ItemNotFoundError
            If no record with that id exists.
        """
        ...

    def scan_filter(self, condition: Condition) -> List[Record]:
        """
        Return every record matching `condition`, evaluated backend-side.

        Result order is not guaranteed.
        """
        ...

    def query_by_id(self, record_id: str) -> List[Record]:
        """Return all records matching the partition key, in backend order."""
        ...

    def close(self) -> None:
        """Release the underlying client."""
        ...


class AbstractClientAdapter(abc.ABC):
    """
    ABC helper for class-based adapters.

    Subclasses set `name` and `description` and implement the three logical
    operations. Every call must round-trip to the backend; nothing is cached.
    """

    name: str
    description: str
    _table_name: str

    @abc.abstractmethod
    def get_by_id(self, record_id: str) -> Record:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def scan_filter(self, condition: Condition) -> List[Record]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def query_by_id(self, record_id: str) -> List[Record]:  # pragma: no cover - interface only
        raise NotImplementedError

    def _unmarshall(self, item: Dict[str, Any]) -> Record:  # pragma: no cover - interface only
        raise NotImplementedError

    def _follow_pages(
        self, operation: str, method: Callable[..., Dict[str, Any]], request: Dict[str, Any]
    ) -> List[Record]:
        """Issue `method(**request)` until LastEvaluatedKey runs out, unmarshalling every item."""
        records: List[Record] = []
        kwargs = dict(request)
        while True:
            with translate_backend_errors(operation, self._table_name):
                response = method(**kwargs)
            records.extend(self._unmarshall(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return records
            kwargs["ExclusiveStartKey"] = last_key

    def close(self) -> None:
        """Default no-op; adapters owning a boto3 client override this."""

    def __enter__(self) -> "AbstractClientAdapter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    "ClientAdapter",
    "AbstractClientAdapter",
]
