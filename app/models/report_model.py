# /exam-portal/app/models/report_model.py

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime


class ResponseSummaryRow(BaseModel):
    timestamp: Optional[datetime] = None
    username: str
    subject: str
    score: int


class SummaryResponse(BaseModel):
    success: bool = True
    data: List[ResponseSummaryRow]


class CsvExportResponse(BaseModel):
    success: bool = True
    csv: str


class ResultDetailsRequest(BaseModel):
    username: str = ""
    subject: str = ""


class ResultDetail(BaseModel):
    qNo: int
    question: str
    passage: Optional[str] = None
    optionA: Optional[str] = None
    optionB: Optional[str] = None
    optionC: Optional[str] = None
    optionD: Optional[str] = None
    correctAnswer: str
    studentAnswer: str
    isCorrect: bool


class ResultDetailsResponse(BaseModel):
    success: bool = True
    details: List[ResultDetail]
    score: int
    total: int


class PerformerRow(BaseModel):
    display_name: Optional[str] = None
    subject: str
    score: int
    percentage: str


class SubjectStats(BaseModel):
    avgPercentage: float
    count: int


class Analytics(BaseModel):
    totalStudents: int
    totalExams: int
    avgScore: str = Field(..., description="Average percentage, one decimal.")
    passRate: str = Field(..., description="Share of grades at or above the pass mark, one decimal.")
    subjectStats: Dict[str, SubjectStats]
    distribution: Dict[str, int]
    topPerformers: List[PerformerRow]
    lowPerformers: List[PerformerRow]


class AnalyticsResponse(BaseModel):
    success: bool = True
    analytics: Analytics
