# /exam-portal/app/services/database_service.py

"""
The single data-access facade handed to every service.

Each instance wraps ONE SQLAlchemy session and delegates to the specialist
repositories. Services never import a session or an engine themselves; they
receive a `DatabaseService` (from the FastAPI dependency below, or from a test
fixture), which keeps every store handle explicitly injected.
"""

from typing import List, Dict, Optional, Generator
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db

# --- Repository Imports ---
from .database_helpers.user_repository_sql import UserRepositorySQL
from .database_helpers.question_repository_sql import QuestionRepositorySQL
from .database_helpers.result_repository_sql import ResultRepositorySQL
from .database_helpers.config_repository_sql import ConfigRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session):
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.user_repo = UserRepositorySQL(db_session)
        self.question_repo = QuestionRepositorySQL(db_session)
        self.result_repo = ResultRepositorySQL(db_session)
        self.config_repo = ConfigRepositorySQL(db_session)

    # --- CONFIGURATION STORE (DELEGATED) ---
    def get_config(self, key: str) -> Optional[str]: return self.config_repo.get(key)
    def set_config(self, key: str, value: str): self.config_repo.set(key, value)
    def get_all_config(self) -> Dict[str, Optional[str]]: return self.config_repo.get_all()

    # --- USER DIRECTORY (DELEGATED) ---
    def get_user_by_id(self, user_id: int): return self.user_repo.get_user_by_id(user_id)
    def get_user_by_username(self, username: str): return self.user_repo.get_user_by_username(username)
    def get_user_by_session_token(self, token: str): return self.user_repo.get_user_by_session_token(token)
    def get_all_users(self) -> List: return self.user_repo.get_all_users()
    def count_students(self) -> int: return self.user_repo.count_students()
    def add_user(self, record: Dict): return self.user_repo.add_user(record)
    def set_session_token(self, user_id: int, token: Optional[str]): self.user_repo.set_session_token(user_id, token)
    def clear_session_token(self, token: str) -> bool: return self.user_repo.clear_session_token(token)
    def delete_user(self, user_id: int) -> bool: return self.user_repo.delete_user(user_id)
    def delete_all_students(self) -> List[str]: return self.user_repo.delete_all_students()

    # --- PAPER ASSIGNMENT & SUBMISSION STATUS (DELEGATED) ---
    def get_assignment(self, user_id: int, subject: str) -> Optional[List[int]]: return self.user_repo.get_assignment(user_id, subject)
    def create_assignment_if_absent(self, user_id: int, subject: str, question_ids: List[int]) -> List[int]:
        return self.user_repo.create_assignment_if_absent(user_id, subject, question_ids)
    def get_submission_status(self, user_id: int, subject: str): return self.user_repo.get_submission_status(user_id, subject)

    # --- QUESTION STORE (DELEGATED) ---
    def find_question_ids_by_subject(self, subject: str) -> List[int]: return self.question_repo.find_ids_by_subject_substring(subject)
    def find_questions_by_ids(self, question_ids: List[int]) -> List[Dict]: return self.question_repo.find_by_ids(question_ids)
    def get_question_by_id(self, question_id: int) -> Optional[Dict]: return self.question_repo.get_question_by_id(question_id)
    def get_correct_answers(self, question_ids: List[int]) -> Dict[int, Optional[str]]: return self.question_repo.get_correct_answers(question_ids)
    def add_question(self, record: Dict): return self.question_repo.add_question(record)
    def add_upload_batch(self, upload_record: Dict, question_records: List[Dict], passage_records: Optional[Dict] = None):
        return self.question_repo.add_upload_batch(upload_record, question_records, passage_records)
    def get_all_uploads(self) -> List: return self.question_repo.get_all_uploads()
    def get_upload_by_id(self, upload_id: int): return self.question_repo.get_upload_by_id(upload_id)
    def delete_upload(self, upload_id: int) -> bool: return self.question_repo.delete_by_upload(upload_id)
    def delete_questions_by_subject(self, subject: str) -> int: return self.question_repo.delete_by_subject(subject)
    def delete_all_questions(self) -> int: return self.question_repo.delete_all()
    def get_question_counts(self) -> List[Dict]: return self.question_repo.count_by_subject()
    def get_passage_count(self) -> int: return self.question_repo.count_passages()

    # --- RESPONSES & GRADES (DELEGATED) ---
    def record_submission(self, response_record: Dict, grade_record: Dict, user_id: int, subject: str, status_data: Dict):
        return self.result_repo.record_submission(response_record, grade_record, user_id, subject, status_data)
    def get_all_responses(self) -> List: return self.result_repo.get_all_responses()
    def get_latest_response(self, username: str, subject: str): return self.result_repo.get_latest_response(username, subject)
    def count_responses(self, username: Optional[str] = None) -> int: return self.result_repo.count_responses(username)
    def get_all_grades(self) -> List: return self.result_repo.get_all_grades()
    def count_grades(self) -> int: return self.result_repo.count_grades()
    def delete_results_for_user(self, username: str): self.result_repo.delete_results_for_user(username)
    def delete_all_results(self): self.result_repo.delete_all_results()


# --- DEPENDENCY PROVIDER ---
def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService bound to the
    request-scoped session.
    """
    yield DatabaseService(db_session=db)
