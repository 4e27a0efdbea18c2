# /exam-portal/app/models/exam_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Dict
from datetime import datetime


class QuestionRequest(BaseModel):
    subject: str = ""
    index: int = 0


class QuestionView(BaseModel):
    """
    One question of a student's paper, flattened for rendering.
    Deliberately has no field for the correct answer.
    """
    id: int
    subject: str
    question: str
    options: List[str] = Field(..., min_length=4, max_length=4)
    optionImages: List[str] = Field(..., min_length=4, max_length=4)
    imageUrl: str = ""
    passageId: Optional[int] = None
    passageText: str = ""
    instructionText: str = ""
    total: int = Field(..., description="Size of the whole paper, used for progress and prev/next boundaries.")


class QuestionResponse(BaseModel):
    """`question` is None when the index is past either end of the paper."""
    success: bool = True
    message: Optional[str] = None
    question: Optional[QuestionView] = None


class SubmitRequest(BaseModel):
    subject: str = ""
    answers: Dict[str, Optional[str]] = Field(default_factory=dict, description="Question id -> chosen letter.")


class SubmitResult(BaseModel):
    success: bool = True
    score: int
    total: int


class ActiveSubjectResponse(BaseModel):
    subject: str


class SubmissionStatus(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subject: str
    submitted: bool
    submitted_at: Optional[datetime] = None
    score: int = 0
    total: int = 0


class ActionResult(BaseModel):
    """The generic success/failure envelope used across the API."""
    success: bool
    message: Optional[str] = None


# --- Admin exam settings ---

class ExamActiveRequest(BaseModel):
    active: bool


class TotalQuestionsRequest(BaseModel):
    total: int


class ActiveSubjectRequest(BaseModel):
    subject: str = ""


class ConfigResponse(BaseModel):
    success: bool = True
    config: Dict[str, Optional[str]]


class ConfigValueResponse(BaseModel):
    success: bool = True
    key: str
    value: Optional[str] = None
