# /exam-portal/app/models/user_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

# --- Model Definitions ---

class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    """Returned on a successful login. `token` must accompany every later request."""
    success: bool = True
    username: str
    name: str
    isAdmin: bool
    token: str
    examActive: bool


class UserCreate(BaseModel):
    """The admin's payload for creating a single account."""
    username: str = Field(..., description="Login name. Stored lower-cased.")
    password: str = Field(..., min_length=1)
    displayName: Optional[str] = None
    isAdmin: bool = False


class BulkCreateRequest(BaseModel):
    csvText: str = Field(..., description="CSV rows of: username, display name, password (optional).")
    passwordPrefix: Optional[str] = None


class BulkCreateResult(BaseModel):
    success: bool = True
    results: List[List[str]]
    created: int


class DeleteUserRequest(BaseModel):
    userId: Optional[int] = None
    username: Optional[str] = None


class User(BaseModel):
    """The public representation of an account. Never carries the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    success: bool = True
    users: List[User]
