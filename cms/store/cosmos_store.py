"""Azure Cosmos DB backend (SQL API), partitioned on /docType."""

import re
from typing import Any, Dict, List, Mapping, Optional

from azure.cosmos import CosmosClient, PartitionKey, exceptions

from .base import DocumentStore, store_retry, store_retrying
from ..utils.exceptions import ConflictError, NotFoundError, StorageError, TransientStoreError
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Throttling, timeouts and service unavailability
_TRANSIENT_STATUS_CODES = {408, 429, 449, 500, 503}
_SYSTEM_PROPERTIES = ("_rid", "_self", "_etag", "_attachments", "_ts")
_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _translate(error: exceptions.CosmosHttpResponseError, action: str) -> StorageError:
    status = getattr(error, "status_code", None)
    message = f"Cosmos DB {action} failed (status {status}): {error}"
    if status in _TRANSIENT_STATUS_CODES:
        return TransientStoreError(message, status_code=status)
    return StorageError(message, status_code=status)


def _strip_system(document: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in document.items() if k not in _SYSTEM_PROPERTIES}


class CosmosDocumentStore(DocumentStore):
    """Document store backed by one Cosmos DB container"""

    def __init__(
        self,
        connection_string: str,
        database_id: str,
        container_id: str,
        client: Optional[CosmosClient] = None,
    ):
        self.database_id = database_id
        self.container_id = container_id
        self._client = client or CosmosClient.from_connection_string(connection_string)
        self._container = self._client.get_database_client(database_id).get_container_client(container_id)

    @store_retry
    def initialize(self) -> None:
        try:
            database = self._client.create_database_if_not_exists(id=self.database_id)
            self._container = database.create_container_if_not_exists(
                id=self.container_id,
                partition_key=PartitionKey(path=f"/{self.partition_key}"),
            )
        except exceptions.CosmosHttpResponseError as e:
            raise _translate(e, "initialize")
        logger.info(
            "Cosmos DB initialized",
            database_id=self.database_id,
            container_id=self.container_id,
        )

    def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return _strip_system(self._container.create_item(body=document))
        except exceptions.CosmosResourceExistsError:
            raise ConflictError(
                f"Document '{document.get('id')}' already exists in '{document.get(self.partition_key)}'"
            )
        except exceptions.CosmosHttpResponseError as e:
            raise _translate(e, "create")

    @store_retry
    def read(self, item_id: str, partition: str) -> Optional[Dict[str, Any]]:
        try:
            return _strip_system(self._container.read_item(item=item_id, partition_key=partition))
        except exceptions.CosmosResourceNotFoundError:
            return None
        except exceptions.CosmosHttpResponseError as e:
            raise _translate(e, "read")

    @store_retry
    def replace(self, document: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return _strip_system(self._container.replace_item(item=document["id"], body=document))
        except exceptions.CosmosResourceNotFoundError:
            raise NotFoundError(
                f"Document '{document.get('id')}' not found in '{document.get(self.partition_key)}'"
            )
        except exceptions.CosmosHttpResponseError as e:
            raise _translate(e, "replace")

    def delete(self, item_id: str, partition: str) -> bool:
        for attempt in store_retrying():
            with attempt:
                try:
                    self._container.delete_item(item=item_id, partition_key=partition)
                    return True
                except exceptions.CosmosResourceNotFoundError:
                    # On a retry, an earlier attempt may have deleted it before failing
                    return attempt.retry_state.attempt_number > 1
                except exceptions.CosmosHttpResponseError as e:
                    raise _translate(e, "delete")
        return False

    @store_retry
    def query(
        self,
        partition: str,
        equals: Optional[Mapping[str, Any]] = None,
        contains: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        query = f"SELECT * FROM c WHERE c.{self.partition_key} = @partition"
        parameters: List[Dict[str, Any]] = [{"name": "@partition", "value": partition}]

        for i, (field, value) in enumerate((equals or {}).items()):
            self._check_field(field)
            query += f" AND c.{field} = @eq{i}"
            parameters.append({"name": f"@eq{i}", "value": value})

        for i, (field, value) in enumerate((contains or {}).items()):
            self._check_field(field)
            query += f" AND ARRAY_CONTAINS(c.{field}, @in{i})"
            parameters.append({"name": f"@in{i}", "value": value})

        try:
            items = self._container.query_items(
                query=query,
                parameters=parameters,
                partition_key=partition,
            )
            return [_strip_system(item) for item in items]
        except exceptions.CosmosHttpResponseError as e:
            raise _translate(e, "query")

    @staticmethod
    def _check_field(field: str) -> None:
        if not _FIELD_NAME.match(field):
            raise ValueError(f"Invalid field name for query: {field!r}")
