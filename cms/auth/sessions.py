"""
Session manager: opaque bearer tokens with a fixed 24-hour lifetime.

Sessions are stored in the "session" partition under an id derived from the
SHA-256 of the token, so resolving a token is a point read. Expiry is lazy:
an expired session is deleted the next time its token is validated.
"""

import hashlib
import secrets
from datetime import timedelta
from typing import Optional

from ..models.user import SESSION_DOC_TYPE, Session, User
from ..store.base import DocumentStore
from ..utils.exceptions import StorageError
from ..utils.logger import get_logger
from ..utils.time import Clock, utcnow
from .credentials import CredentialStore

logger = get_logger(__name__)

SESSION_LIFETIME = timedelta(hours=24)


def session_id_for(token: str) -> str:
    return "session-" + hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionManager:
    """Issue, resolve and revoke login sessions"""

    def __init__(
        self,
        store: DocumentStore,
        credentials: CredentialStore,
        lifetime: timedelta = SESSION_LIFETIME,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.credentials = credentials
        self.lifetime = lifetime
        self.clock = clock

    def create_session(self, user_id: str) -> str:
        """Create a session for the user and return its token"""
        token = secrets.token_urlsafe(32)
        now = self.clock()
        session = Session(
            id=session_id_for(token),
            token=token,
            user_id=user_id,
            expires_at=now + self.lifetime,
            created_at=now,
        )
        self.store.create(session.to_document())
        logger.info("Session created", user_id=user_id, expires_at=session.expires_at.isoformat())
        return token

    def get_session(self, token: str) -> Optional[Session]:
        if not token:
            return None
        doc = self.store.read(session_id_for(token), SESSION_DOC_TYPE)
        return Session.model_validate(doc) if doc else None

    def validate_session(self, token: str) -> Optional[User]:
        """
        Resolve a token to its user.

        Returns None for unknown or expired tokens. An expired session is
        removed as a side effect; a failure to remove it is logged only.
        The session lifetime is never extended.
        """
        session = self.get_session(token)
        if not session:
            return None

        if session.is_expired(self.clock()):
            self._discard(session, "expired")
            return None

        user = self.credentials.get_user_by_id(session.user_id)
        if not user:
            logger.warning("Session references missing user", user_id=session.user_id)
            self._discard(session, "user missing")
            return None
        return user

    def _discard(self, session: Session, reason: str) -> None:
        # Cleanup failures never change the validation outcome
        try:
            self.store.delete(session.id, SESSION_DOC_TYPE)
            logger.info("Session removed", user_id=session.user_id, reason=reason)
        except StorageError as e:
            logger.warning("Failed to remove session", user_id=session.user_id, reason=reason, error=str(e))

    def delete_session(self, token: str) -> bool:
        """Revoke a session. Safe to call more than once."""
        if not token:
            return False
        deleted = self.store.delete(session_id_for(token), SESSION_DOC_TYPE)
        if deleted:
            logger.info("Session deleted")
        return deleted

    def sweep_expired(self) -> int:
        """Delete every expired session; returns how many were removed"""
        now = self.clock()
        removed = 0
        for doc in self.store.query(SESSION_DOC_TYPE):
            session = Session.model_validate(doc)
            if session.is_expired(now) and self.store.delete(session.id, SESSION_DOC_TYPE):
                removed += 1
        if removed:
            logger.info("Expired sessions swept", count=removed)
        return removed
