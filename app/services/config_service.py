# /exam-portal/app/services/config_service.py

"""
Typed accessors over the flat key/value Configuration Store.

The store only holds strings; this module owns the key names, the defaults
and the parsing rules, so no other module reads a raw config key.
"""

from typing import Dict, List, Optional

from ..core.exceptions import PreconditionError
from .database_service import DatabaseService

# --- Recognized keys ---
EXAM_ACTIVE = "ExamActive"
TOTAL_QUESTIONS_PER_SUBJECT = "TotalQuestionsPerSubject"
ACTIVE_SUBJECT = "ActiveSubject"
ADMIN_USERS = "AdminUsers"

DEFAULT_TOTAL_QUESTIONS = 50
DEFAULT_ACTIVE_SUBJECT = "EVS"

DEFAULT_CONFIG: Dict[str, str] = {
    EXAM_ACTIVE: "TRUE",
    TOTAL_QUESTIONS_PER_SUBJECT: str(DEFAULT_TOTAL_QUESTIONS),
    ACTIVE_SUBJECT: DEFAULT_ACTIVE_SUBJECT,
    ADMIN_USERS: "admin",
}


def seed_defaults(db: DatabaseService) -> None:
    """Writes the default settings on first startup. Existing keys are kept."""
    if db.get_config(EXAM_ACTIVE) is not None:
        return
    for key, value in DEFAULT_CONFIG.items():
        if db.get_config(key) is None:
            db.set_config(key, value)
    print("INFO: Default exam configuration created.")


def get_config_value(db: DatabaseService, key: str) -> Optional[str]:
    """Raw stored value of any setting, or None when the key is unset."""
    return db.get_config(key)


# --- Exam active flag ---

def is_exam_active(db: DatabaseService) -> bool:
    return db.get_config(EXAM_ACTIVE) == "TRUE"


def set_exam_active(db: DatabaseService, active: bool) -> None:
    db.set_config(EXAM_ACTIVE, "TRUE" if active else "FALSE")


# --- Paper size ---

def get_total_questions_per_subject(db: DatabaseService) -> int:
    """The configured paper size; missing, non-numeric or non-positive values fall back to 50."""
    raw = db.get_config(TOTAL_QUESTIONS_PER_SUBJECT)
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return DEFAULT_TOTAL_QUESTIONS
    return value if value > 0 else DEFAULT_TOTAL_QUESTIONS


def set_total_questions_per_subject(db: DatabaseService, total) -> int:
    try:
        value = int(str(total).strip())
    except (TypeError, ValueError):
        value = 0
    if value < 1:
        raise PreconditionError("Invalid number")
    db.set_config(TOTAL_QUESTIONS_PER_SUBJECT, str(value))
    return value


# --- Active subject ---

def get_active_subject(db: DatabaseService) -> str:
    return db.get_config(ACTIVE_SUBJECT) or DEFAULT_ACTIVE_SUBJECT


def set_active_subject(db: DatabaseService, subject: Optional[str]) -> str:
    subject_name = (subject or "").strip()
    if not subject_name:
        raise PreconditionError("Subject required")
    db.set_config(ACTIVE_SUBJECT, subject_name)
    return subject_name


# --- Admin list ---

def get_admin_usernames(db: DatabaseService) -> List[str]:
    raw = db.get_config(ADMIN_USERS) or ""
    return [name.strip().lower() for name in raw.split(",") if name.strip()]


def add_admin_username(db: DatabaseService, username: str) -> None:
    admins = get_admin_usernames(db)
    normalized = username.strip().lower()
    if normalized not in admins:
        admins.append(normalized)
        db.set_config(ADMIN_USERS, ",".join(admins))
