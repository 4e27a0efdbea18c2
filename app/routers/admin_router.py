# /exam-portal/app/routers/admin_router.py

"""
This module defines the administrator's API: user management, the question
bank (Word / CSV / Google Sheet ingestion and maintenance), runtime exam
settings, and reporting.

Every route requires an admin session (`require_admin`, applied once at the
router level). Business failures raised by the services are returned as
`{"success": false, "message": ...}` envelopes.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..core.deps import require_admin
from ..models import exam_model, question_bank_model, report_model, user_model
from ..services import config_service, question_bank_service, report_service, user_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter(dependencies=[Depends(require_admin)])


def _failure(e: Exception) -> exam_model.ActionResult:
    return exam_model.ActionResult(success=False, message=str(e))


# --- USER MANAGEMENT (/api/admin/users) ---

@router.get("/users", response_model=user_model.UserListResponse, summary="List All Accounts")
def list_users(db: DatabaseService = Depends(get_db_service)):
    return user_model.UserListResponse(users=user_service.list_users(db))


@router.post("/users", response_model=exam_model.ActionResult, summary="Create a Single Account")
def create_user(user_in: user_model.UserCreate, db: DatabaseService = Depends(get_db_service)):
    try:
        new_user = user_service.create_user(db, user_in)
        return exam_model.ActionResult(success=True, message=f"User {new_user.username} created")
    except ValueError as e:
        return _failure(e)


@router.post("/users/bulk", response_model=user_model.BulkCreateResult, summary="Create Student Accounts from CSV")
def bulk_create_users(request: user_model.BulkCreateRequest, db: DatabaseService = Depends(get_db_service)):
    return user_service.bulk_create_users(db, request.csvText, request.passwordPrefix)


@router.post("/users/delete", response_model=exam_model.ActionResult, summary="Delete a Student and Their Results")
def delete_user(request: user_model.DeleteUserRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        username = user_service.delete_user(db, user_id=request.userId, username=request.username)
        return exam_model.ActionResult(success=True, message=f"Deleted {username}")
    except ValueError as e:
        return _failure(e)


@router.post("/users/delete-students", response_model=exam_model.ActionResult, summary="Delete Every Student Account")
def delete_all_students(db: DatabaseService = Depends(get_db_service)):
    deleted = user_service.delete_all_students(db)
    return exam_model.ActionResult(success=True, message=f"Deleted {deleted} students")


# --- QUESTION BANK (/api/admin/uploads, /api/admin/questions) ---

@router.post("/uploads/word", summary="Import Questions from a Word Document")
async def upload_word(
    db: DatabaseService = Depends(get_db_service),
    subject: str = Form(...),
    file: UploadFile = File(...),
):
    try:
        file_bytes = await file.read()
        return question_bank_service.upload_word_document(db, file_bytes, subject, file.filename)
    except ValueError as e:
        return _failure(e)


@router.post("/uploads/csv", summary="Import Questions from CSV Text")
def upload_csv(request: question_bank_model.CsvUploadRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        return question_bank_service.upload_csv_questions(db, request.csvText, request.filename)
    except ValueError as e:
        return _failure(e)


@router.post("/uploads/sheet", summary="Import Questions from a Google Sheet")
def import_sheet(request: question_bank_model.SheetImportRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        return question_bank_service.import_google_sheet(db, request.sheetUrl)
    except ValueError as e:
        return _failure(e)


@router.get("/uploads", response_model=question_bank_model.UploadListResponse, summary="List Upload Batches, Newest First")
def list_uploads(db: DatabaseService = Depends(get_db_service)):
    return question_bank_model.UploadListResponse(uploads=question_bank_service.list_uploads(db))


@router.post("/uploads/delete", response_model=exam_model.ActionResult, summary="Delete an Upload Batch and Its Questions")
def delete_upload(request: question_bank_model.DeleteUploadRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        message = question_bank_service.delete_upload(db, request.uploadId)
        return exam_model.ActionResult(success=True, message=message)
    except ValueError as e:
        return _failure(e)


@router.get("/questions/counts", response_model=question_bank_model.QuestionCountResponse, summary="Count Questions per Subject")
def question_counts(db: DatabaseService = Depends(get_db_service)):
    return question_bank_service.get_question_counts(db)


@router.post("/questions/clear", response_model=exam_model.ActionResult, summary="Clear Questions for a Subject or Everything")
def clear_questions(request: question_bank_model.ClearQuestionsRequest, db: DatabaseService = Depends(get_db_service)):
    message = question_bank_service.clear_questions(db, request.subject)
    return exam_model.ActionResult(success=True, message=message)


# --- EXAM SETTINGS (/api/admin/config) ---

@router.get("/config", response_model=exam_model.ConfigResponse, summary="Get All Exam Settings")
def get_config(db: DatabaseService = Depends(get_db_service)):
    return exam_model.ConfigResponse(config=db.get_all_config())


@router.post("/config/exam-active", response_model=exam_model.ActionResult, summary="Enable or Disable the Exam")
def set_exam_active(request: exam_model.ExamActiveRequest, db: DatabaseService = Depends(get_db_service)):
    config_service.set_exam_active(db, request.active)
    return exam_model.ActionResult(success=True, message="Exam enabled" if request.active else "Exam disabled")


@router.post("/config/total-questions", response_model=exam_model.ActionResult, summary="Set the Paper Size")
def set_total_questions(request: exam_model.TotalQuestionsRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        total = config_service.set_total_questions_per_subject(db, request.total)
        return exam_model.ActionResult(success=True, message=f"Total questions set to {total}")
    except ValueError as e:
        return _failure(e)


@router.post("/config/active-subject", response_model=exam_model.ActionResult, summary="Set the Active Subject")
def set_active_subject(request: exam_model.ActiveSubjectRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        subject = config_service.set_active_subject(db, request.subject)
        return exam_model.ActionResult(success=True, message=f"Active subject set to {subject}")
    except ValueError as e:
        return _failure(e)


# --- REPORTS (/api/admin/reports) ---

@router.get("/reports/summary", response_model=report_model.SummaryResponse, summary="List All Submissions")
def get_summary(db: DatabaseService = Depends(get_db_service)):
    return report_model.SummaryResponse(data=report_service.get_summary(db))


@router.get("/reports/export-csv", response_model=report_model.CsvExportResponse, summary="Export All Responses as CSV")
def export_csv(db: DatabaseService = Depends(get_db_service)):
    return report_model.CsvExportResponse(csv=report_service.export_responses_csv(db))


@router.post("/reports/result-details", summary="Get the Question-by-Question Breakdown of a Result")
def get_result_details(request: report_model.ResultDetailsRequest, db: DatabaseService = Depends(get_db_service)):
    try:
        return report_service.get_result_details(db, request.username, request.subject)
    except ValueError as e:
        return _failure(e)


@router.get("/reports/analytics", response_model=report_model.AnalyticsResponse, summary="Get Exam Analytics")
def get_analytics(db: DatabaseService = Depends(get_db_service)):
    return report_model.AnalyticsResponse(analytics=report_service.get_analytics(db))
