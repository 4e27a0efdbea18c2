# /exam-portal/app/services/user_service.py

"""
This service module owns portal accounts: login/logout, session lookup, admin
resolution and the administrator's user-management operations (single and
bulk creation, listing, deletion).

Every function receives its `DatabaseService` explicitly. Expected failures
(unknown user, duplicate username, protected admin) are raised as the business
errors from `core.exceptions` and turned into `{"success": False}` payloads by
the routers.
"""

from typing import List, Dict, Optional

from ..core import config, security
from ..core.exceptions import NotFoundError, PreconditionError
from ..db.models.user_model import User
from ..models import user_model
from . import config_service
from .database_service import DatabaseService
from .ingestion_helpers.tabular_parser import parse_csv_rows


# --- Session Management ---

def authenticate_user(db: DatabaseService, username: str, password: str) -> User:
    """Verifies the credentials and returns the matching user."""
    normalized = (username or "").strip().lower()
    if not normalized:
        raise PreconditionError("Username required")

    user = db.get_user_by_username(normalized)
    if not user:
        raise NotFoundError("User not found")
    if not security.verify_password(password, user.password):
        raise PreconditionError("Incorrect password")
    return user


def login(db: DatabaseService, username: str, password: str) -> user_model.LoginResponse:
    """Authenticates the user and issues a fresh session token."""
    user = authenticate_user(db, username, password)
    token = security.create_session_token()
    db.set_session_token(user.id, token)

    return user_model.LoginResponse(
        success=True,
        username=user.username,
        name=user.display_name or user.username,
        isAdmin=is_admin(db, user),
        token=token,
        examActive=config_service.is_exam_active(db),
    )


def logout(db: DatabaseService, token: Optional[str]) -> None:
    if token:
        db.clear_session_token(token)


def get_user_from_token(db: DatabaseService, token: Optional[str]) -> Optional[User]:
    if not token:
        return None
    return db.get_user_by_session_token(token)


def is_admin(db: DatabaseService, user: Optional[User]) -> bool:
    """A user is an admin if flagged as one OR listed in the `AdminUsers` setting."""
    if user is None:
        return False
    return bool(user.is_admin) or user.username.lower() in config_service.get_admin_usernames(db)


# --- Account Creation ---

def create_user(db: DatabaseService, user_in: user_model.UserCreate) -> User:
    normalized = (user_in.username or "").strip().lower()
    if not normalized:
        raise PreconditionError("Username required")
    if db.get_user_by_username(normalized):
        raise PreconditionError("User already exists")

    new_user = db.add_user({
        "username": normalized,
        "password": security.hash_password(user_in.password),
        "display_name": user_in.displayName or normalized,
        "is_admin": bool(user_in.isAdmin),
    })

    if user_in.isAdmin:
        config_service.add_admin_username(db, normalized)
    return new_user


def bulk_create_users(db: DatabaseService, csv_text: str, password_prefix: Optional[str] = None) -> user_model.BulkCreateResult:
    """
    Creates student accounts from CSV rows of `username, display name, password`.

    Display name defaults to the username and password to `<prefix><row number>`.
    Each row is reported as `OK` or `ERROR: <reason>`; one bad row never stops
    the rest of the import.
    """
    prefix = password_prefix or config.DEFAULT_PASSWORD_PREFIX
    results: List[List[str]] = []

    for index, row in enumerate(parse_csv_rows(csv_text or "")):
        if not row or not str(row[0]).strip():
            continue

        username = str(row[0]).strip().lower()
        display_name = str(row[1]).strip() if len(row) > 1 and str(row[1]).strip() else username
        password = str(row[2]).strip() if len(row) > 2 and str(row[2]).strip() else f"{prefix}{index + 1}"

        if db.get_user_by_username(username):
            results.append([username, "ERROR: User already exists"])
            continue

        try:
            db.add_user({
                "username": username,
                "password": security.hash_password(password),
                "display_name": display_name,
                "is_admin": False,
            })
            results.append([username, "OK"])
        except Exception as e:
            db.session.rollback()
            print(f"ERROR creating user '{username}' during bulk import: {e}")
            results.append([username, f"ERROR: {e}"])

    created = sum(1 for _, outcome in results if outcome == "OK")
    return user_model.BulkCreateResult(success=True, results=results, created=created)


def ensure_default_admin(db: DatabaseService) -> None:
    """Creates the bootstrap admin account if it does not exist yet."""
    if db.get_user_by_username(config.DEFAULT_ADMIN_USERNAME):
        return
    db.add_user({
        "username": config.DEFAULT_ADMIN_USERNAME,
        "password": security.hash_password(config.DEFAULT_ADMIN_PASSWORD),
        "display_name": config.DEFAULT_ADMIN_DISPLAY_NAME,
        "is_admin": True,
    })
    print(f"INFO: Default admin created: username={config.DEFAULT_ADMIN_USERNAME}")


# --- Account Listing & Deletion ---

def list_users(db: DatabaseService) -> List[Dict]:
    return [
        {
            "id": u.id,
            "username": u.username,
            "display_name": u.display_name,
            "is_admin": bool(u.is_admin),
            "created_at": u.created_at,
        }
        for u in db.get_all_users()
    ]


def delete_user(db: DatabaseService, user_id: Optional[int] = None, username: Optional[str] = None) -> str:
    """
    Deletes a student together with their responses, grades, papers and
    submission statuses. Admin accounts are protected.
    """
    user = db.get_user_by_id(user_id) if user_id else None
    if user is None and username:
        user = db.get_user_by_username(username)
    if user is None:
        raise NotFoundError("User not found")
    if user.is_admin:
        raise PreconditionError("Cannot delete admin users")

    deleted_username = user.username
    db.delete_user(user.id)
    db.delete_results_for_user(deleted_username)
    return deleted_username


def delete_all_students(db: DatabaseService) -> int:
    deleted = db.delete_all_students()
    if deleted:
        db.delete_all_results()
    return len(deleted)
