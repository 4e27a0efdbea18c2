# /exam-portal/app/services/database_helpers/result_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the append-only
Response and Grade tables, including the single-transaction write used by
the scoring engine.
"""

from typing import List, Dict, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.result_models import Response, Grade
from .user_repository_sql import UserRepositorySQL


class ResultRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Submit Unit of Work ---

    def record_submission(self, response_record: Dict, grade_record: Dict, user_id: int, subject: str, status_data: Dict) -> Response:
        """
        Writes the Response row, the Grade row and the user's submission
        status in one transaction. Either all three are committed or, on any
        error, all three are rolled back and the error is re-raised.
        """
        try:
            new_response = Response(**response_record)
            self.db.add(new_response)
            self.db.add(Grade(**grade_record))
            UserRepositorySQL(self.db).stage_submission_status(user_id, subject, status_data)
            self.db.commit()
            self.db.refresh(new_response)
            return new_response
        except Exception:
            self.db.rollback()
            raise

    # --- Response Methods ---

    def get_all_responses(self) -> List[Response]:
        return self.db.query(Response).order_by(Response.submitted_at.desc(), Response.id.desc()).all()

    def get_latest_response(self, username: str, subject: str) -> Optional[Response]:
        return (
            self.db.query(Response)
            .filter(func.lower(Response.username) == (username or "").strip().lower(), Response.subject == subject)
            .order_by(Response.submitted_at.desc(), Response.id.desc())
            .first()
        )

    def count_responses(self, username: Optional[str] = None) -> int:
        query = self.db.query(func.count(Response.id))
        if username is not None:
            query = query.filter(func.lower(Response.username) == username.strip().lower())
        return query.scalar() or 0

    # --- Grade Methods ---

    def get_all_grades(self) -> List[Grade]:
        return self.db.query(Grade).order_by(Grade.graded_at.desc(), Grade.id.desc()).all()

    def count_grades(self) -> int:
        return self.db.query(func.count(Grade.id)).scalar() or 0

    # --- Delete Methods ---

    def delete_results_for_user(self, username: str):
        """Removes every Response and Grade row that belongs to `username`."""
        normalized = (username or "").strip().lower()
        self.db.query(Response).filter(func.lower(Response.username) == normalized).delete(synchronize_session=False)
        self.db.query(Grade).filter(func.lower(Grade.username) == normalized).delete(synchronize_session=False)
        self.db.commit()

    def delete_all_results(self):
        self.db.query(Response).delete(synchronize_session=False)
        self.db.query(Grade).delete(synchronize_session=False)
        self.db.commit()
