# /exam-portal/app/core/deps.py

"""
Request-level dependencies that resolve the caller from their session token.

The token is the opaque value issued by `/api/auth/login`, sent back as
`Authorization: Bearer <token>`.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.db.models.user_model import User
from app.services import user_service
from app.services.database_service import DatabaseService, get_db_service

bearer = HTTPBearer(auto_error=False)


def get_session_token(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Optional[str]:
    return creds.credentials if creds else None


def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    db: DatabaseService = Depends(get_db_service),
) -> User:
    user = user_service.get_user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(
    current_user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db_service),
) -> User:
    if not user_service.is_admin(db, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return current_user
