# /exam-portal/app/services/question_bank_service.py

"""
This service module fills and maintains the Question Store.

Three ingestion paths exist, and all of them end in the same place: a single
`add_upload_batch` call that creates the Upload row, its passages and its
questions in one transaction, each question stamped with the batch id.

- Word documents: `.docx` -> HTML (`docx_converter`) -> content items
  (`word_segmenter`) -> questions (`question_extractor`).
- CSV text and Google Sheets: rows (`tabular_parser`), with the sheet fetched
  by `sheet_source`.

The remaining functions are the administrator's bank maintenance operations.
"""

from typing import Dict, List, Optional

from ..core.exceptions import NotFoundError, PreconditionError
from ..models import question_bank_model
from ..models.question_bank_model import QuestionRecord, UploadSource
from .database_service import DatabaseService
from .ingestion_helpers import docx_converter, sheet_source, tabular_parser
from .ingestion_helpers.question_extractor import ParsedQuestion, extract_questions
from .ingestion_helpers.word_segmenter import PassageSegmenter, split_html_blocks

SHEET_UPLOAD_FILENAME = "Google Sheet"
DEFAULT_CSV_FILENAME = "upload.csv"


def _save_batch(
    db: DatabaseService,
    records: List[QuestionRecord],
    subject: str,
    filename: str,
    source: UploadSource,
    passage_records: Optional[Dict] = None,
):
    """Persists the batch; returns the Upload row, or None when there is nothing to add."""
    if not records:
        return None
    return db.add_upload_batch(
        upload_record={"filename": filename, "subject": subject, "source": source.value},
        question_records=[record.model_dump() for record in records],
        passage_records=passage_records,
    )


# --- Word Ingestion ---

def _parsed_to_record(parsed: ParsedQuestion, subject: str) -> QuestionRecord:
    options = dict(zip("abcd", parsed.options))
    images = dict(zip("abcd", parsed.option_images))
    return QuestionRecord(
        subject=subject,
        question_text=parsed.question_text,
        option_a=options.get("a", ""),
        option_b=options.get("b", ""),
        option_c=options.get("c", ""),
        option_d=options.get("d", ""),
        option_a_image=images.get("a"),
        option_b_image=images.get("b"),
        option_c_image=images.get("c"),
        option_d_image=images.get("d"),
        correct_answer=parsed.correct_answer,
        image_url=parsed.image_url or "",
        instruction_text=parsed.instruction_text,
        passage_key=parsed.passage_id if parsed.passage_text else None,
    )


def ingest_word_html(db: DatabaseService, document_html: str, subject: str, filename: str) -> question_bank_model.IngestionResult:
    """Parses converted Word HTML and stores every extractable question."""
    subject_name = (subject or "").strip()
    segmenter = PassageSegmenter()
    items = segmenter.segment(split_html_blocks(document_html))
    extraction = extract_questions(items)

    records, passage_records = [], {}
    for parsed in extraction.questions:
        record = _parsed_to_record(parsed, subject_name)
        if record.passage_key is not None and record.passage_key not in passage_records:
            passage_records[record.passage_key] = {
                "subject": subject_name,
                "passage_text": parsed.passage_text,
                "passage_type": "prose",
            }
        records.append(record)

    upload = _save_batch(db, records, subject_name, filename, UploadSource.WORD, passage_records)
    print(
        f"INFO: Word upload '{filename}' ({subject_name}): {len(records)} added, "
        f"{extraction.skipped} skipped, {segmenter.passage_count} passages."
    )
    return question_bank_model.IngestionResult(
        success=True,
        added=len(records),
        skipped=extraction.skipped,
        passages=segmenter.passage_count,
        uploadId=upload.id if upload else None,
    )


def upload_word_document(db: DatabaseService, file_bytes: bytes, subject: str, filename: Optional[str] = None) -> question_bank_model.IngestionResult:
    if not file_bytes or not (subject or "").strip():
        raise PreconditionError("Word file and subject required")
    try:
        document_html = docx_converter.convert_docx_to_html(file_bytes)
    except Exception as e:
        print(f"ERROR converting Word document '{filename}': {e}")
        raise PreconditionError(f"Could not read the Word document: {e}") from e
    return ingest_word_html(db, document_html, subject, filename or "document.docx")


# --- Tabular Ingestion ---

def _ingest_rows(db: DatabaseService, rows: List[List[str]], filename: str, source: UploadSource) -> question_bank_model.IngestionResult:
    records, skipped = tabular_parser.parse_question_rows(rows)
    upload = _save_batch(db, records, tabular_parser.batch_subject(records), filename, source)
    print(f"INFO: {source.value} upload '{filename}': {len(records)} added, {skipped} skipped.")
    return question_bank_model.IngestionResult(
        success=True,
        added=len(records),
        skipped=skipped,
        uploadId=upload.id if upload else None,
    )


def upload_csv_questions(db: DatabaseService, csv_text: str, filename: Optional[str] = None) -> question_bank_model.IngestionResult:
    if not (csv_text or "").strip():
        raise PreconditionError("CSV data required")
    rows = tabular_parser.parse_csv_rows(csv_text)
    return _ingest_rows(db, rows, filename or DEFAULT_CSV_FILENAME, UploadSource.CSV)


def import_google_sheet(db: DatabaseService, sheet_url: str) -> question_bank_model.IngestionResult:
    if not (sheet_url or "").strip():
        raise PreconditionError("Sheet URL required")
    csv_text = sheet_source.fetch_sheet_csv(sheet_url.strip())
    rows = tabular_parser.parse_csv_rows(csv_text)
    return _ingest_rows(db, rows, SHEET_UPLOAD_FILENAME, UploadSource.SHEET)


# --- Bank Maintenance ---

def list_uploads(db: DatabaseService) -> List[question_bank_model.Upload]:
    return [question_bank_model.Upload.model_validate(upload) for upload in db.get_all_uploads()]


def delete_upload(db: DatabaseService, upload_id: Optional[int]) -> str:
    """Deletes one upload batch and exactly the questions it produced."""
    if not upload_id:
        raise PreconditionError("Upload ID required")
    upload = db.get_upload_by_id(upload_id)
    if upload is None:
        raise NotFoundError("Upload not found")

    filename, count = upload.filename, upload.question_count
    db.delete_upload(upload_id)
    return f'Deleted "{filename}" ({count} questions)'


def clear_questions(db: DatabaseService, subject: Optional[str] = None) -> str:
    subject_name = (subject or "").strip()
    if subject_name and subject_name.lower() != "all":
        deleted = db.delete_questions_by_subject(subject_name)
        print(f"INFO: Cleared {deleted} '{subject_name}' questions.")
        return f"Cleared all {subject_name} questions"

    deleted = db.delete_all_questions()
    print(f"INFO: Cleared the whole question bank ({deleted} questions).")
    return "Cleared all questions and passages"


def get_question_counts(db: DatabaseService) -> question_bank_model.QuestionCountResponse:
    return question_bank_model.QuestionCountResponse(
        success=True,
        counts=[question_bank_model.SubjectCount(**row) for row in db.get_question_counts()],
        passageCount=db.get_passage_count(),
    )
