"""User and session data models for authentication"""

from datetime import datetime, timezone
from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["admin", "editor"]
ROLES = ("admin", "editor")

USER_DOC_TYPE = "user"
SESSION_DOC_TYPE = "session"
USERNAME_DOC_TYPE = "username"


class User(BaseModel):
    """CMS user; stored with camelCase keys (passwordHash, createdAt)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    id: str
    username: str
    password_hash: str
    role: Role = "editor"
    created_at: str  # ISO format timestamp

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def public(self) -> Dict[str, Any]:
        """Representation safe to return over the API (no password hash)."""
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "createdAt": self.created_at,
        }

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True)
        doc["docType"] = USER_DOC_TYPE
        return doc


class Session(BaseModel):
    """Login session (opaque token, fixed expiry)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    token: str
    user_id: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("expires_at", "created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Older documents may carry naive timestamps
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, mode="json")
        doc["docType"] = SESSION_DOC_TYPE
        return doc
