"""Authorization checks applied in front of CMS handlers"""

from typing import Optional

from ..models.user import Role, User
from ..utils.exceptions import Forbidden, Unauthorized
from .sessions import SessionManager


def require_session(sessions: SessionManager, token: Optional[str]) -> User:
    """Resolve the bearer token or raise Unauthorized"""
    user = sessions.validate_session(token) if token else None
    if not user:
        raise Unauthorized("Unauthorized")
    return user


def require_role(user: User, role: Role) -> None:
    # Exact match; admin does not imply editor and vice versa
    if user.role != role:
        raise Forbidden("Insufficient permissions")


def authorize_user_update(
    current: User,
    target: User,
    changes_password: bool,
    changes_role: bool,
) -> None:
    """
    Only the user themselves or an admin may update a user at all.
    Role changes are admin only.
    """
    if current.id != target.id and not current.is_admin:
        if changes_password:
            raise Forbidden("Cannot change another user's password")
        raise Forbidden("Insufficient permissions")
    if changes_role and not current.is_admin:
        raise Forbidden("Only admins can change roles")


def read_requires_session(published: Optional[bool]) -> bool:
    """Only reads explicitly filtered to published content are anonymous"""
    return published is not True
