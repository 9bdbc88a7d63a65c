"""
FastAPI routes for CMS authentication.

Prefix: /api/cms/auth

Login returns an opaque bearer token valid for 24 hours. Clients send it
back as "Authorization: Bearer <token>".
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from cms.context import CMSContext
from cms.models.user import User
from cms.utils.exceptions import Unauthorized, ValidationError
from cms.utils.logger import get_logger
from .deps import get_cms, get_current_user, get_session_token
from .models import AuthRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cms/auth", tags=["auth"])


def _session_user(user: User) -> Dict[str, Any]:
    return {"id": user.id, "username": user.username, "role": user.role}


@router.post("")
def login_or_logout(
    payload: AuthRequest,
    token: Optional[str] = Depends(get_session_token),
    cms: CMSContext = Depends(get_cms),
) -> Dict[str, Any]:
    """
    Log in, or log out the current session.

    Request:
        {"username": "...", "password": "..."}  -> {"token": "...", "user": {...}}
        {"action": "logout"} + bearer token     -> {"success": true}
    """
    if payload.action == "logout":
        if token:
            cms.sessions.delete_session(token)
        return {"success": True}

    if not payload.username or not payload.password:
        raise ValidationError("Username and password required", fields=["username", "password"])

    user = cms.credentials.validate_credentials(payload.username, payload.password)
    if not user:
        logger.warning("Login failed", username=payload.username)
        raise Unauthorized("Invalid credentials")

    new_token = cms.sessions.create_session(user.id)
    logger.info("Login succeeded", user_id=user.id, username=user.username)
    return {"token": new_token, "user": _session_user(user)}


@router.get("")
def current_session(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    """Return the user behind the bearer token"""
    return {"user": _session_user(user)}
