from .credentials import CredentialStore, hash_password, verify_password
from .gate import authorize_user_update, read_requires_session, require_role, require_session
from .sessions import SESSION_LIFETIME, SessionManager

__all__ = [
    "CredentialStore",
    "SessionManager",
    "SESSION_LIFETIME",
    "authorize_user_update",
    "hash_password",
    "read_requires_session",
    "require_role",
    "require_session",
    "verify_password",
]
