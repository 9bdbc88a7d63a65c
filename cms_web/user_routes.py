"""
FastAPI routes for CMS user management.

Prefix: /api/cms/users
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status

from cms.auth import gate
from cms.context import CMSContext
from cms.models.user import User
from cms.utils.exceptions import NotFoundError, ValidationError
from cms.utils.logger import get_logger
from .deps import get_cms, get_current_user, require_admin
from .models import CreateUserRequest, UpdateUserRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cms/users", tags=["users"])


def _resolve_user(cms: CMSContext, user_id: Optional[str], username: Optional[str]) -> User:
    if not user_id and not username:
        raise ValidationError("Provide user id or username", fields=["id", "username"])
    if user_id:
        user = cms.credentials.get_user_by_id(user_id)
    else:
        user = cms.credentials.get_user_by_username(username)
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("")
def list_users(
    _: User = Depends(require_admin),
    cms: CMSContext = Depends(get_cms),
) -> List[Dict[str, Any]]:
    return [user.public() for user in cms.credentials.list_users()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: CreateUserRequest,
    admin: User = Depends(require_admin),
    cms: CMSContext = Depends(get_cms),
) -> Dict[str, Any]:
    if not payload.username or not payload.password:
        raise ValidationError("username and password are required", fields=["username", "password"])

    user = cms.credentials.create_user(payload.username, payload.password, payload.role or "editor")
    logger.info("User created by admin", admin_id=admin.id, user_id=user.id)
    return user.public()


@router.put("")
def update_user(
    payload: UpdateUserRequest,
    current_user: User = Depends(get_current_user),
    cms: CMSContext = Depends(get_cms),
) -> Dict[str, Any]:
    """
    Update a user's password and/or role.

    Users may change their own password; admins may change anyone's
    password and role.
    """
    target = _resolve_user(cms, payload.id, payload.username)
    changes_password = bool(payload.new_password)
    changes_role = bool(payload.role)

    gate.authorize_user_update(current_user, target, changes_password, changes_role)

    target = cms.credentials.update_user(
        target,
        new_password=payload.new_password if changes_password else None,
        role=payload.role if changes_role else None,
    )
    return target.public()


@router.delete("")
def delete_user(
    id: Optional[str] = None,
    username: Optional[str] = None,
    admin: User = Depends(require_admin),
    cms: CMSContext = Depends(get_cms),
) -> Dict[str, bool]:
    target = _resolve_user(cms, id, username)
    if not cms.credentials.delete_user(target.id):
        raise NotFoundError("User not found")
    logger.info("User deleted by admin", admin_id=admin.id, user_id=target.id)
    return {"success": True}
