"""
JSON-file document store for local development and tests.

Layout: <root>/<database_id>/<container_id>.json holding
{"partitions": {"<docType>": {"<id>": {...document...}}}}.
Writes go through a temp file and an atomic move.
"""

import json
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .base import DocumentStore
from ..utils.exceptions import ConflictError, NotFoundError, StorageError
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _matches(actual: Any, expected: Any) -> bool:
    # bool is an int subclass; keep published=true from matching 1
    if isinstance(actual, bool) or isinstance(expected, bool):
        return actual is expected
    return actual == expected


class JsonDocumentStore(DocumentStore):
    """Single-process document container persisted to one JSON file"""

    def __init__(self, root: Path, database_id: str, container_id: str):
        self.root = Path(root)
        self.database_id = database_id
        self.container_id = container_id
        self.path = self.root / database_id / f"{container_id}.json"
        self._lock = threading.RLock()

    def initialize(self) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._save({})
                logger.info("JSON document store created", path=str(self.path))

    def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        item_id, partition = self._key(document)
        with self._lock:
            partitions = self._load()
            bucket = partitions.setdefault(partition, {})
            if item_id in bucket:
                raise ConflictError(f"Document '{item_id}' already exists in '{partition}'")
            bucket[item_id] = dict(document)
            self._save(partitions)
        return dict(document)

    def read(self, item_id: str, partition: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            doc = self._load().get(partition, {}).get(item_id)
        return dict(doc) if doc is not None else None

    def replace(self, document: Dict[str, Any]) -> Dict[str, Any]:
        item_id, partition = self._key(document)
        with self._lock:
            partitions = self._load()
            bucket = partitions.get(partition, {})
            if item_id not in bucket:
                raise NotFoundError(f"Document '{item_id}' not found in '{partition}'")
            bucket[item_id] = dict(document)
            self._save(partitions)
        return dict(document)

    def delete(self, item_id: str, partition: str) -> bool:
        with self._lock:
            partitions = self._load()
            bucket = partitions.get(partition, {})
            if item_id not in bucket:
                return False
            del bucket[item_id]
            self._save(partitions)
        return True

    def query(
        self,
        partition: str,
        equals: Optional[Mapping[str, Any]] = None,
        contains: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            docs = list(self._load().get(partition, {}).values())

        results = []
        for doc in docs:
            if any(not _matches(doc.get(k), v) for k, v in (equals or {}).items()):
                continue
            if any(
                not isinstance(doc.get(k), list) or v not in doc[k]
                for k, v in (contains or {}).items()
            ):
                continue
            results.append(dict(doc))
        return results

    def _key(self, document: Dict[str, Any]) -> tuple:
        item_id = document.get("id")
        partition = document.get(self.partition_key)
        if not item_id or not partition:
            raise StorageError(f"Document requires 'id' and '{self.partition_key}'")
        return item_id, partition

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StorageError(f"Failed to load documents from {self.path}: {str(e)}")
        return data.get("partitions", {})

    def _save(self, partitions: Dict[str, Dict[str, Any]]) -> None:
        """Atomically save the container to JSON"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(self.path.parent), delete=False, encoding="utf-8"
        ) as tf:
            json.dump({"partitions": partitions}, tf, indent=2, ensure_ascii=False)
            temp_path = Path(tf.name)

        try:
            shutil.move(str(temp_path), str(self.path))
        except Exception as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"Failed to save documents to {self.path}: {str(e)}")
