# /exam-portal/app/core/security.py

"""
Credential hashing and session token generation.

Passwords are hashed with bcrypt. Accounts imported from older data may still
carry a plain-text password; those are compared directly until the user is
recreated.
"""

import uuid
import bcrypt


def hash_password(password: str) -> str:
    return bcrypt.hashpw(str(password).encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, stored_password: str) -> bool:
    if not stored_password:
        return False
    if stored_password.startswith("$2"):
        try:
            return bcrypt.checkpw(str(plain_password or "").encode("utf-8"), stored_password.encode("utf-8"))
        except ValueError:
            return False
    return plain_password == stored_password


def create_session_token() -> str:
    """An opaque, unguessable token (32 hex characters)."""
    return uuid.uuid4().hex
