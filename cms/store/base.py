"""
Document store interface shared by the storage backends.

Every document carries an ``id`` and a ``docType`` partition value. An id is
unique within its partition. Documents are plain JSON-compatible dicts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from tenacity import (
    Retrying,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..utils.exceptions import TransientStoreError

PARTITION_KEY = "docType"

RETRY_POLICY: Dict[str, Any] = dict(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    retry=retry_if_exception_type(TransientStoreError),
    reraise=True,
)

# Idempotent operations only. Creates must never be wrapped.
store_retry = retry(**RETRY_POLICY)


def store_retrying() -> Retrying:
    """Iterator form of store_retry, for code that needs the attempt number"""
    return Retrying(**RETRY_POLICY)


class DocumentStore(ABC):
    """Minimal document-container contract used by the CMS services."""

    partition_key = PARTITION_KEY

    @abstractmethod
    def initialize(self) -> None:
        """Create the database/container if missing. Safe to call repeatedly."""

    @abstractmethod
    def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new document; raises ConflictError if the id exists in its partition."""

    @abstractmethod
    def read(self, item_id: str, partition: str) -> Optional[Dict[str, Any]]:
        """Point read; returns None when absent."""

    @abstractmethod
    def replace(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Replace an existing document; raises NotFoundError when absent."""

    @abstractmethod
    def delete(self, item_id: str, partition: str) -> bool:
        """Remove a document; False when it did not exist."""

    @abstractmethod
    def query(
        self,
        partition: str,
        equals: Optional[Mapping[str, Any]] = None,
        contains: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return documents of a partition matching every predicate.

        equals: field -> value equality conjunction
        contains: array field -> value that must be a member
        """

    def close(self) -> None:
        pass
