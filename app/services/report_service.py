# /exam-portal/app/services/report_service.py

"""
This service module assembles the administrator's reports from the
append-only Response and Grade tables: the submission summary, the raw CSV
export, the per-question breakdown of one result, and the analytics dashboard.
"""

import csv
import json
from typing import Dict, List

import pandas as pd

from ..core.exceptions import NotFoundError, PreconditionError
from ..models import report_model
from .database_service import DatabaseService
from .exam_helpers.scoring import normalize_answer_letter

PASS_MARK = 40.0
TOP_PERFORMER_LIMIT = 10
EXPORT_COLUMNS = ["Timestamp", "Username", "Subject", "Score", "Answers"]

DISTRIBUTION_BINS = [float("-inf"), 20, 40, 60, 80, float("inf")]
DISTRIBUTION_LABELS = ["0-20", "21-40", "41-60", "61-80", "81-100"]


# --- Submission Summary & Export ---

def get_summary(db: DatabaseService) -> List[report_model.ResponseSummaryRow]:
    """Every submission, newest first."""
    return [
        report_model.ResponseSummaryRow(
            timestamp=r.submitted_at,
            username=r.username,
            subject=r.subject,
            score=r.score,
        )
        for r in db.get_all_responses()
    ]


def export_responses_csv(db: DatabaseService) -> str:
    """Exports all responses as CSV with every cell quoted."""
    export_data = [
        {
            "Timestamp": r.submitted_at.isoformat() if r.submitted_at else "",
            "Username": r.username,
            "Subject": r.subject,
            "Score": r.score,
            "Answers": json.dumps(r.answers or {}),
        }
        for r in db.get_all_responses()
    ]
    df = pd.DataFrame(export_data, columns=EXPORT_COLUMNS)
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL)


# --- Result Details ---

def _question_order(db: DatabaseService, username: str, subject: str, answers: Dict) -> List[int]:
    """The paper order from the assignment, falling back to the answered ids."""
    user = db.get_user_by_username(username)
    assigned = db.get_assignment(user.id, subject) if user else None
    if assigned:
        return list(assigned)
    return [int(key) for key in answers if str(key).strip().isdigit()]


def get_result_details(db: DatabaseService, username: str, subject: str) -> report_model.ResultDetailsResponse:
    """Question-by-question breakdown of the student's latest submission for `subject`."""
    if not (username or "").strip() or not (subject or "").strip():
        raise PreconditionError("Username and subject required")

    response = db.get_latest_response(username, subject.strip())
    if response is None:
        raise NotFoundError("No response found")

    answers = response.answers or {}
    order = _question_order(db, username, subject.strip(), answers)
    questions_by_id = {q["id"]: q for q in db.find_questions_by_ids(order)}

    details = []
    for position, question_id in enumerate(order, start=1):
        question = questions_by_id.get(question_id)
        if question is None:
            continue
        given = answers.get(str(question_id), answers.get(question_id))
        student_answer = str(given or "").strip().upper()
        correct_answer = normalize_answer_letter(question.get("correct_answer"))
        details.append(report_model.ResultDetail(
            qNo=position,
            question=question["question_text"],
            passage=question.get("passage_text"),
            optionA=question.get("option_a"),
            optionB=question.get("option_b"),
            optionC=question.get("option_c"),
            optionD=question.get("option_d"),
            correctAnswer=correct_answer,
            studentAnswer=student_answer,
            isCorrect=bool(correct_answer) and normalize_answer_letter(student_answer) == correct_answer,
        ))

    return report_model.ResultDetailsResponse(
        success=True, details=details, score=response.score, total=len(details)
    )


# --- Analytics ---

def _performer_rows(df: pd.DataFrame) -> List[report_model.PerformerRow]:
    return [
        report_model.PerformerRow(
            display_name=row["display_name"] or row["username"],
            subject=row["subject"],
            score=int(row["score"]),
            percentage=row["percentage"],
        )
        for _, row in df.iterrows()
    ]


def get_analytics(db: DatabaseService) -> report_model.Analytics:
    grades = db.get_all_grades()
    total_students = db.count_students()

    grade_dicts = [{c.name: getattr(g, c.name) for c in g.__table__.columns} for g in grades]
    df = pd.DataFrame(grade_dicts)

    if df.empty:
        return report_model.Analytics(
            totalStudents=total_students,
            totalExams=0,
            avgScore="0.0",
            passRate="0.0",
            subjectStats={},
            distribution={label: 0 for label in DISTRIBUTION_LABELS},
            topPerformers=[],
            lowPerformers=[],
        )

    df["pct"] = pd.to_numeric(df["percentage"], errors="coerce").fillna(0.0)

    subject_stats = {
        subject: report_model.SubjectStats(avgPercentage=round(float(group["pct"].mean()), 1), count=int(len(group)))
        for subject, group in df.groupby("subject")
    }

    buckets = pd.cut(df["pct"], bins=DISTRIBUTION_BINS, labels=DISTRIBUTION_LABELS, right=True)
    distribution = {label: int(count) for label, count in buckets.value_counts().reindex(DISTRIBUTION_LABELS, fill_value=0).items()}

    top = df.sort_values("pct", ascending=False, kind="stable").head(TOP_PERFORMER_LIMIT)
    low = df[df["pct"] < PASS_MARK].sort_values("pct", ascending=True, kind="stable").head(TOP_PERFORMER_LIMIT)
    pass_rate = (df["pct"] >= PASS_MARK).mean() * 100

    return report_model.Analytics(
        totalStudents=total_students,
        totalExams=int(len(df)),
        avgScore=f"{df['pct'].mean():.1f}",
        passRate=f"{pass_rate:.1f}",
        subjectStats=subject_stats,
        distribution=distribution,
        topPerformers=_performer_rows(top),
        lowPerformers=_performer_rows(low),
    )
