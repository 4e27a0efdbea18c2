# /exam-portal/app/services/database_helpers/user_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the User table and for
the per-user exam state tables (`PaperAssignment`, `SubmissionStatus`).

Usernames are normalized to lower case before every query, so all lookups
are case-insensitive.
"""

from typing import List, Dict, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.user_model import User, PaperAssignment, SubmissionStatus


def _normalize_username(username: str) -> str:
    return (username or "").strip().lower()


class UserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- User Methods ---

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Fetches a user by username, ignoring case and surrounding spaces."""
        return (
            self.db.query(User)
            .filter(func.lower(User.username) == _normalize_username(username))
            .first()
        )

    def get_user_by_session_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        return self.db.query(User).filter(User.session_token == token).first()

    def get_all_users(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def count_students(self) -> int:
        return self.db.query(func.count(User.id)).filter(User.is_admin.is_(False)).scalar() or 0

    def add_user(self, record: Dict) -> User:
        """Creates a new User record. The username is stored lower-cased."""
        record = dict(record)
        record["username"] = _normalize_username(record["username"])
        new_user = User(**record)
        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)
        return new_user

    def set_session_token(self, user_id: int, token: Optional[str]):
        user = self.get_user_by_id(user_id)
        if user:
            user.session_token = token
            self.db.commit()

    def clear_session_token(self, token: str) -> bool:
        user = self.get_user_by_session_token(token)
        if user:
            user.session_token = None
            self.db.commit()
            return True
        return False

    def delete_user(self, user_id: int) -> bool:
        """Deletes a user; assignments and submission statuses cascade."""
        user = self.get_user_by_id(user_id)
        if user:
            self.db.delete(user)
            self.db.commit()
            return True
        return False

    def delete_all_students(self) -> List[str]:
        """Deletes every non-admin user and returns the deleted usernames."""
        students = self.db.query(User).filter(User.is_admin.is_(False)).all()
        usernames = [s.username for s in students]
        for student in students:
            self.db.delete(student)
        self.db.commit()
        return usernames

    # --- Paper Assignment Methods ---

    def get_assignment(self, user_id: int, subject: str) -> Optional[List[int]]:
        row = (
            self.db.query(PaperAssignment)
            .filter(PaperAssignment.user_id == user_id, PaperAssignment.subject == subject)
            .first()
        )
        return list(row.question_ids) if row else None

    def create_assignment_if_absent(self, user_id: int, subject: str, question_ids: List[int]) -> List[int]:
        """
        Inserts the paper for (user, subject) unless one already exists, and
        returns whichever paper is stored afterwards.

        If a concurrent request inserted first, the unique constraint rejects
        this insert, the transaction is rolled back, and the winner's paper
        is returned unchanged.
        """
        existing = self.get_assignment(user_id, subject)
        if existing:
            return existing
        try:
            self.db.add(PaperAssignment(user_id=user_id, subject=subject, question_ids=list(question_ids)))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            winner = self.get_assignment(user_id, subject)
            if winner is None:
                raise
            print(f"WARNING: Concurrent paper assignment for user {user_id}, subject '{subject}'. Keeping the stored paper.")
            return winner
        return list(question_ids)

    # --- Submission Status Methods ---

    def get_submission_status(self, user_id: int, subject: str) -> Optional[SubmissionStatus]:
        return (
            self.db.query(SubmissionStatus)
            .filter(SubmissionStatus.user_id == user_id, SubmissionStatus.subject == subject)
            .first()
        )

    def stage_submission_status(self, user_id: int, subject: str, data: Dict) -> SubmissionStatus:
        """
        Adds or updates the submission status in the CURRENT transaction
        without committing. Used by the submit unit of work.
        """
        status = self.get_submission_status(user_id, subject)
        if status is None:
            status = SubmissionStatus(user_id=user_id, subject=subject)
            self.db.add(status)
        for key, value in data.items():
            setattr(status, key, value)
        return status
