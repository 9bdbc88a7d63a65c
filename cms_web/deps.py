"""
FastAPI dependencies for authentication and authorization.
"""

from typing import Optional

from fastapi import Depends, Request

from cms.auth import gate
from cms.context import CMSContext
from cms.models.user import Role, User


def get_cms(request: Request) -> CMSContext:
    """Services built by the app factory's startup hook"""
    return request.app.state.cms


def get_session_token(request: Request) -> Optional[str]:
    """Extract the session token from the Authorization header"""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    cms: CMSContext = Depends(get_cms),
) -> User:
    """Dependency to get current authenticated user"""
    return gate.require_session(cms.sessions, token)


def require_role(role: Role):
    """Dependency factory for role-based access control"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        gate.require_role(current_user, role)
        return current_user

    return role_checker


require_admin = require_role("admin")
