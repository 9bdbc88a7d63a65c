"""
Service wiring for one running CMS instance.

The web layer builds a CMSContext once at startup and hands it to request
handlers; nothing in the core keeps module-level state.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .auth.credentials import CredentialStore
from .auth.sessions import SESSION_LIFETIME, SessionManager
from .services.content_repository import ContentRepository
from .store import DocumentStore, open_store
from .utils.config import Settings
from .utils.logger import get_logger
from .utils.time import Clock, utcnow

logger = get_logger(__name__)


@dataclass
class CMSContext:
    settings: Settings
    store: DocumentStore
    credentials: CredentialStore
    sessions: SessionManager
    content: ContentRepository

    def start(self) -> None:
        """Prepare storage and, when enabled, the bootstrap admin"""
        self.store.initialize()
        auth = self.settings.auth
        if auth.enable_demo_login:
            user = self.credentials.bootstrap_admin_if_needed(
                auth.bootstrap_admin_username,
                auth.bootstrap_admin_password,
            )
            if user:
                logger.warning("Bootstrap admin user created", username=user.username)

    def close(self) -> None:
        self.store.close()


def build_context(
    settings: Settings,
    store: Optional[DocumentStore] = None,
    clock: Clock = utcnow,
    session_lifetime: timedelta = SESSION_LIFETIME,
) -> CMSContext:
    if store is None:
        store = open_store(
            settings.store.connection_string,
            settings.store.database_id,
            settings.store.container_id,
        )
    credentials = CredentialStore(store, rounds=settings.auth.bcrypt_rounds, clock=clock)
    return CMSContext(
        settings=settings,
        store=store,
        credentials=credentials,
        sessions=SessionManager(store, credentials, lifetime=session_lifetime, clock=clock),
        content=ContentRepository(store, clock=clock),
    )
