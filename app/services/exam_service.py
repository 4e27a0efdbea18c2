# /exam-portal/app/services/exam_service.py

"""
This service module is the student-facing side of the portal: delivering one
question of the student's paper at a time and scoring the submitted paper.

It orchestrates the Paper Assignment Engine (`exam_helpers.paper_assignment`),
the pure scoring rules (`exam_helpers.scoring`) and the `DatabaseService`.
The user is always resolved by the caller (the router's session dependency)
and passed in explicitly.
"""

import random
from datetime import datetime, timezone
from typing import Dict, Optional

from ..core.exceptions import ExamDisabledError, AlreadySubmittedError, SubmissionFailedError
from ..db.models.user_model import User
from ..models import exam_model
from . import config_service
from .database_service import DatabaseService
from .exam_helpers import paper_assignment, scoring


def _question_to_view(record: Dict, total: int) -> exam_model.QuestionView:
    """Flattens a stored question (with its joined passage) for the student UI."""
    return exam_model.QuestionView(
        id=record["id"],
        subject=record["subject"],
        question=record["question_text"],
        options=[record.get(f"option_{letter}") or "" for letter in "abcd"],
        optionImages=[record.get(f"option_{letter}_image") or "" for letter in "abcd"],
        imageUrl=record.get("image_url") or "",
        passageId=record.get("passage_id"),
        passageText=record.get("passage_text") or "",
        instructionText=record.get("instruction_text") or "",
        total=total,
    )


def get_question(db: DatabaseService, user: User, subject: str, index: int, rng: Optional[random.Random] = None) -> Optional[exam_model.QuestionView]:
    """
    Returns question number `index` (0-based) of the user's paper, assigning
    the paper on first access. An index outside the paper returns None,
    meaning "no more questions" rather than an error.
    """
    if not config_service.is_exam_active(db):
        raise ExamDisabledError()

    subject_name = (subject or "").strip()
    assigned_ids = paper_assignment.assign_paper_if_needed(db, user, subject_name, rng)
    total = len(assigned_ids)

    if index is None or index < 0 or index >= total:
        return None

    record = db.get_question_by_id(assigned_ids[index])
    if record is None:
        print(f"WARNING: Question {assigned_ids[index]} on {user.username}'s '{subject_name}' paper no longer exists.")
        return None
    return _question_to_view(record, total)


def submit_exam(db: DatabaseService, user: User, subject: str, answers: Optional[Dict], rng: Optional[random.Random] = None) -> exam_model.SubmitResult:
    """
    Scores the user's paper for `subject` and records the result.

    The Response row, the Grade row and the submission status are written in
    a single transaction. A subject that was already submitted is rejected.
    """
    if not config_service.is_exam_active(db):
        raise ExamDisabledError()

    subject_name = (subject or "").strip()
    status = db.get_submission_status(user.id, subject_name)
    if status is not None and status.submitted:
        raise AlreadySubmittedError(subject_name)

    assigned_ids = paper_assignment.assign_paper_if_needed(db, user, subject_name, rng)
    correct_answers = db.get_correct_answers(assigned_ids)
    answers_obj = dict(answers or {})

    score = scoring.score_answers(assigned_ids, correct_answers, answers_obj)
    total = len(assigned_ids)
    percentage = scoring.format_percentage(score, total)

    # JSON columns need string keys; normalize int keys sent by internal callers.
    stored_answers = {str(k): v for k, v in answers_obj.items()}

    try:
        db.record_submission(
            response_record={
                "username": user.username,
                "subject": subject_name,
                "score": score,
                "answers": stored_answers,
            },
            grade_record={
                "username": user.username,
                "display_name": user.display_name or user.username,
                "subject": subject_name,
                "score": score,
                "percentage": percentage,
            },
            user_id=user.id,
            subject=subject_name,
            status_data={
                "submitted": True,
                "submitted_at": datetime.now(timezone.utc),
                "score": score,
                "total": total,
            },
        )
    except Exception as e:
        print(f"ERROR recording submission for {user.username} ('{subject_name}'): {e}")
        raise SubmissionFailedError("Could not record the submission. Please try again.") from e

    return exam_model.SubmitResult(success=True, score=score, total=total)


def get_submission_status(db: DatabaseService, user: User, subject: str) -> Optional[exam_model.SubmissionStatus]:
    status = db.get_submission_status(user.id, (subject or "").strip())
    return exam_model.SubmissionStatus.model_validate(status) if status else None


def get_active_subject(db: DatabaseService) -> str:
    return config_service.get_active_subject(db)
