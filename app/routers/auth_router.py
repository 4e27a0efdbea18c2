# /exam-portal/app/routers/auth_router.py

"""
This module defines the API for session handling: login, logout and the
current-user profile.

Login failures are ordinary business outcomes, so they come back as a
`{"success": false, "message": ...}` envelope instead of an HTTP error. Only a
missing or unknown session token on `/me` is a 401.
"""

from typing import Optional

from fastapi import APIRouter, Depends

# --- Application-specific Imports ---
from app.core.deps import get_current_user, get_session_token
from app.db.models.user_model import User as UserModel
from app.models import exam_model, user_model
from app.services import user_service
from app.services.database_service import DatabaseService, get_db_service

# --- Router Initialization ---
router = APIRouter()


@router.post("/login", summary="Log In and Receive a Session Token")
def login(request: user_model.LoginRequest, db: DatabaseService = Depends(get_db_service)):
    """
    Verifies the credentials and issues a fresh session token. Any earlier
    token of the same user stops working.
    """
    try:
        return user_service.login(db, request.username, request.password)
    except ValueError as e:
        return exam_model.ActionResult(success=False, message=str(e))


@router.post("/logout", response_model=exam_model.ActionResult, summary="Invalidate the Session Token")
def logout(token: Optional[str] = Depends(get_session_token), db: DatabaseService = Depends(get_db_service)):
    user_service.logout(db, token)
    return exam_model.ActionResult(success=True)


@router.get("/me", summary="Get the Current User")
def read_current_user(current_user: UserModel = Depends(get_current_user), db: DatabaseService = Depends(get_db_service)):
    profile = user_model.User.model_validate(current_user).model_dump()
    profile["is_admin"] = user_service.is_admin(db, current_user)
    return profile
