# /exam-portal/app/models/question_bank_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from enum import Enum


class UploadSource(str, Enum):
    WORD = "word"
    SHEET = "sheet"
    CSV = "csv"


class QuestionRecord(BaseModel):
    """
    The structured shape every ingestion parser produces before persistence.
    `passage_key` is a batch-local reference resolved to a Passage row on save.
    """
    subject: str
    question_text: str = Field(..., min_length=1)
    option_a: str = ""
    option_b: str = ""
    option_c: str = ""
    option_d: str = ""
    option_a_image: Optional[str] = None
    option_b_image: Optional[str] = None
    option_c_image: Optional[str] = None
    option_d_image: Optional[str] = None
    correct_answer: str = ""
    image_url: str = ""
    instruction_text: Optional[str] = None
    passage_key: Optional[int] = None


class CsvUploadRequest(BaseModel):
    csvText: str
    filename: Optional[str] = None


class SheetImportRequest(BaseModel):
    sheetUrl: str = ""


class IngestionResult(BaseModel):
    success: bool = True
    added: int = 0
    skipped: int = 0
    passages: int = 0
    uploadId: Optional[int] = None


class Upload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    subject: str
    source: UploadSource
    question_count: int
    uploaded_at: Optional[datetime] = None


class UploadListResponse(BaseModel):
    success: bool = True
    uploads: List[Upload]


class DeleteUploadRequest(BaseModel):
    uploadId: Optional[int] = None


class ClearQuestionsRequest(BaseModel):
    subject: Optional[str] = None


class SubjectCount(BaseModel):
    subject: str
    count: int


class QuestionCountResponse(BaseModel):
    success: bool = True
    counts: List[SubjectCount]
    passageCount: int = 0
