"""
Generic CRUD over the five content variants.

All variants share one container; each lives in its own docType partition.
Identifiers are slugs derived from the title once, at creation time.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from ..models.content import ContentRecord, ContentType
from ..store.base import PARTITION_KEY, DocumentStore
from ..utils.exceptions import ConflictError, ValidationError
from ..utils.logger import get_logger
from ..utils.time import Clock, iso_z, utcnow

logger = get_logger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")

# Keys an update may never change
_IMMUTABLE_KEYS = {"id", "slug", "createdAt", "updatedAt", PARTITION_KEY}


def slugify(title: str) -> str:
    """Lowercase, collapse runs of non [a-z0-9] into '-', trim hyphens"""
    return _NON_SLUG.sub("-", (title or "").lower()).strip("-")


def _validation_error(error: PydanticValidationError) -> ValidationError:
    missing = []
    invalid = []
    for err in error.errors():
        field = str(err["loc"][0]) if err.get("loc") else "body"
        if err["type"] == "missing" or (err["type"] == "string_type" and err.get("input") is None):
            missing.append(field)
        else:
            invalid.append(field)

    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    else:
        message = f"Invalid value for fields: {', '.join(invalid)}"
    return ValidationError(message, fields=missing + invalid)


class ContentRepository:
    """Create, read, update and delete content documents"""

    def __init__(self, store: DocumentStore, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    def list(
        self,
        content_type: ContentType,
        filters: Optional[Mapping[str, Any]] = None,
        contains: Optional[Mapping[str, Any]] = None,
    ) -> List[ContentRecord]:
        """Items of a type matching every non-None filter, in storage order"""
        equals = {k: v for k, v in (filters or {}).items() if v is not None}
        members = {k: v for k, v in (contains or {}).items() if v is not None}
        docs = self.store.query(content_type.doc_type, equals=equals, contains=members)
        return [content_type.record_model.model_validate(doc) for doc in docs]

    def get(self, content_type: ContentType, item_id: str) -> Optional[ContentRecord]:
        if not item_id:
            return None
        doc = self.store.read(item_id, content_type.doc_type)
        return content_type.record_model.model_validate(doc) if doc else None

    def create(self, content_type: ContentType, fields: Mapping[str, Any]) -> ContentRecord:
        """
        Validate and store a new item.

        Raises:
            ValidationError: required fields missing or the title has no slug
            ConflictError: an item with the derived identifier already exists
        """
        try:
            validated = content_type.fields_model.model_validate(dict(fields))
        except PydanticValidationError as e:
            raise _validation_error(e)

        item_id = slugify(validated.title)
        if not item_id:
            raise ValidationError("Title must contain at least one letter or digit", fields=["title"])

        now = self.clock()
        data = validated.model_dump(by_alias=True)
        data["id"] = item_id
        data["createdAt"] = iso_z(now)
        data["updatedAt"] = data["createdAt"]
        if content_type.id_field == "slug":
            data["slug"] = item_id
            data["date"] = data.get("date") or now.date().isoformat()

        record = content_type.record_model.model_validate(data)
        document = record.to_api()
        document[PARTITION_KEY] = content_type.doc_type
        try:
            self.store.create(document)
        except ConflictError:
            raise ConflictError(f"{content_type.label} with {content_type.id_field} '{item_id}' already exists")

        logger.info("Content created", doc_type=content_type.doc_type, item_id=item_id)
        return record

    def update(
        self,
        content_type: ContentType,
        existing: ContentRecord,
        partial: Mapping[str, Any],
    ) -> ContentRecord:
        """
        Shallow-merge partial fields over an existing item.

        Explicit nulls overwrite optional fields; nulling a required field
        fails validation. Identifier and timestamps are not client writable.
        """
        known = {f.alias or name for name, f in content_type.record_model.model_fields.items()}
        merged = existing.to_api()
        for key, value in partial.items():
            if key in known and key not in _IMMUTABLE_KEYS:
                merged[key] = value
        merged["updatedAt"] = iso_z(self.clock())

        try:
            record = content_type.record_model.model_validate(merged)
        except PydanticValidationError as e:
            raise _validation_error(e)

        document = record.to_api()
        document[PARTITION_KEY] = content_type.doc_type
        self.store.replace(document)
        logger.info("Content updated", doc_type=content_type.doc_type, item_id=record.id)
        return record

    def delete(self, content_type: ContentType, item_id: str) -> bool:
        if not item_id:
            return False
        deleted = self.store.delete(item_id, content_type.doc_type)
        if deleted:
            logger.info("Content deleted", doc_type=content_type.doc_type, item_id=item_id)
        return deleted
