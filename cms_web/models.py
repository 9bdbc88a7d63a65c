"""Request bodies for the auth and user endpoints"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthRequest(BaseModel):
    """Login ({username, password}) or logout ({action: "logout"})"""
    action: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class CreateUserRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    username: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")
    role: Optional[str] = None
