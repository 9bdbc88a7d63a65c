"""Document store backends and the connection-string based factory."""

from pathlib import Path

from .base import PARTITION_KEY, DocumentStore, store_retry
from .json_store import JsonDocumentStore

JSON_SCHEME = "json://"


def open_store(connection_string: str, database_id: str, container_id: str) -> DocumentStore:
    """
    Build a store from a connection string.

    json://<directory> selects the local JSON backend; any other value is
    treated as an Azure Cosmos DB connection string.
    """
    if connection_string.startswith(JSON_SCHEME):
        root = connection_string[len(JSON_SCHEME):] or "data"
        return JsonDocumentStore(Path(root), database_id, container_id)

    from .cosmos_store import CosmosDocumentStore

    return CosmosDocumentStore(connection_string, database_id, container_id)


__all__ = [
    "PARTITION_KEY",
    "DocumentStore",
    "JsonDocumentStore",
    "open_store",
    "store_retry",
]
