"""
Credential store: CMS users with bcrypt password hashes and roles.

Users live in the shared container under the "user" partition. Username
uniqueness is enforced by a create-only reservation document per username
("username" partition), so two concurrent creates cannot both succeed.
"""

import hashlib
from typing import List, Optional
from uuid import uuid4

import bcrypt

from ..models.user import ROLES, USER_DOC_TYPE, USERNAME_DOC_TYPE, Role, User
from ..store.base import DocumentStore
from ..utils.exceptions import ConflictError, ValidationError
from ..utils.logger import get_logger
from ..utils.time import Clock, iso_z, utcnow

logger = get_logger(__name__)

# Reference cost factor
BCRYPT_ROUNDS = 10
# bcrypt ignores (or rejects) input beyond this length
MAX_PASSWORD_BYTES = 72


def _check_password(password: str) -> bytes:
    if not password:
        raise ValidationError("Password is required", fields=["password"])
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes", fields=["password"]
        )
    return encoded


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_check_password(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _reservation_id(username: str) -> str:
    return "username-" + hashlib.sha256(username.encode("utf-8")).hexdigest()


class CredentialStore:
    """User lookup, creation and credential checks"""

    def __init__(self, store: DocumentStore, rounds: int = BCRYPT_ROUNDS, clock: Clock = utcnow):
        self.store = store
        self.rounds = rounds
        self.clock = clock

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Exact, case-sensitive username lookup"""
        if not username:
            return None
        docs = self.store.query(USER_DOC_TYPE, equals={"username": username})
        return User.model_validate(docs[0]) if docs else None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        doc = self.store.read(user_id, USER_DOC_TYPE)
        return User.model_validate(doc) if doc else None

    def list_users(self) -> List[User]:
        return [User.model_validate(doc) for doc in self.store.query(USER_DOC_TYPE)]

    def create_user(self, username: str, password: str, role: Role = "editor") -> User:
        """
        Create a new user.

        Raises:
            ValidationError: blank username, bad password or unknown role
            ConflictError: username already taken
        """
        if not username:
            raise ValidationError("Username is required", fields=["username"])
        if role not in ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(ROLES)}", fields=["role"])

        user = User(
            id=f"user-{uuid4().hex}",
            username=username,
            password_hash=hash_password(password, self.rounds),
            role=role,
            created_at=iso_z(self.clock()),
        )

        try:
            self.store.create({
                "id": _reservation_id(username),
                "docType": USERNAME_DOC_TYPE,
                "username": username,
                "userId": user.id,
            })
        except ConflictError:
            raise ConflictError("User already exists")

        # Users written before reservations existed have none
        if self.get_user_by_username(username):
            self.store.delete(_reservation_id(username), USERNAME_DOC_TYPE)
            raise ConflictError("User already exists")

        try:
            self.store.create(user.to_document())
        except Exception:
            self.store.delete(_reservation_id(username), USERNAME_DOC_TYPE)
            raise

        logger.info("User created", user_id=user.id, username=username, role=role)
        return user

    def validate_credentials(self, username: str, password: str) -> Optional[User]:
        """Return the user if the password matches, else None"""
        user = self.get_user_by_username(username)
        if not user:
            return None
        if not verify_password(password or "", user.password_hash):
            return None
        return user

    def update_user(
        self,
        user: User,
        new_password: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> User:
        """
        Change password and/or role in a single write.

        Every check runs before anything is stored, so a rejected role
        leaves the password untouched too.
        """
        changes = {}
        if role is not None:
            if role not in ROLES:
                raise ValidationError(f"Role must be one of: {', '.join(ROLES)}", fields=["role"])
            if user.role == "admin" and role != "admin" and self._admin_count() <= 1:
                raise ValidationError("Cannot demote the last admin user")
            changes["role"] = role
        if new_password is not None:
            changes["password_hash"] = hash_password(new_password, self.rounds)
        if not changes:
            return user

        updated = user.model_copy(update=changes)
        self.store.replace(updated.to_document())
        logger.info(
            "User updated",
            user_id=user.id,
            password_changed="password_hash" in changes,
            role=updated.role,
        )
        return updated

    def update_password(self, user: User, new_password: str) -> User:
        return self.update_user(user, new_password=new_password)

    def update_role(self, user: User, role: Role) -> User:
        return self.update_user(user, role=role)

    def delete_user(self, user_id: str) -> bool:
        """Delete a user; False if no such user exists"""
        user = self.get_user_by_id(user_id)
        if not user:
            return False
        if user.is_admin and self._admin_count() <= 1:
            raise ValidationError("Cannot delete the last admin user")

        deleted = self.store.delete(user.id, USER_DOC_TYPE)
        self.store.delete(_reservation_id(user.username), USERNAME_DOC_TYPE)
        if deleted:
            logger.info("User deleted", user_id=user.id, username=user.username)
        return deleted

    def bootstrap_admin_if_needed(self, username: str, password: str) -> Optional[User]:
        """Create the first admin user when no users exist yet"""
        if self.store.query(USER_DOC_TYPE):
            return None
        if not username or not password:
            return None
        try:
            return self.create_user(username, password, role="admin")
        except ConflictError:
            # Another process bootstrapped first
            return None

    def _admin_count(self) -> int:
        return len(self.store.query(USER_DOC_TYPE, equals={"role": "admin"}))
