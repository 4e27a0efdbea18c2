# /exam-portal/app/routers/exam_router.py

from fastapi import APIRouter, Depends

from ..core.deps import get_current_user
from ..db.models.user_model import User
from ..models import exam_model
from ..services import config_service, exam_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.post("/question", response_model=exam_model.QuestionResponse, summary="Get One Question of the Student's Paper")
def get_question(
    request: exam_model.QuestionRequest,
    current_user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db_service),
):
    try:
        question = exam_service.get_question(db, current_user, request.subject, request.index)
    except ValueError as e:
        return exam_model.QuestionResponse(success=False, message=str(e))
    if question is None:
        return exam_model.QuestionResponse(success=True, message="No more questions")
    return exam_model.QuestionResponse(success=True, question=question)


@router.post("/submit", summary="Submit and Score the Student's Paper")
def submit_exam(
    request: exam_model.SubmitRequest,
    current_user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db_service),
):
    try:
        return exam_service.submit_exam(db, current_user, request.subject, request.answers)
    except ValueError as e:
        return exam_model.ActionResult(success=False, message=str(e))


@router.get("/active-subject", response_model=exam_model.ActiveSubjectResponse, summary="Get the Subject Currently Set for the Exam")
def get_active_subject(
    current_user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db_service),
):
    return exam_model.ActiveSubjectResponse(subject=exam_service.get_active_subject(db))


@router.get("/status", summary="Get the Student's Submission Status for a Subject")
def get_submission_status(
    subject: str,
    current_user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db_service),
):
    status = exam_service.get_submission_status(db, current_user, subject)
    if status is None:
        return exam_model.SubmissionStatus(subject=subject.strip(), submitted=False)
    return status


@router.get("/config", response_model=exam_model.ConfigValueResponse, summary="Read One Exam Setting")
def get_config_value(
    key: str,
    current_user: User = Depends(get_current_user),
    db: DatabaseService = Depends(get_db_service),
):
    return exam_model.ConfigValueResponse(key=key, value=config_service.get_config_value(db, key))
