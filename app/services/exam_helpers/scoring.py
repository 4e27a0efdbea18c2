# /exam-portal/app/services/exam_helpers/scoring.py

"""
Pure scoring utilities. Nothing here touches the database, so the scoring
rules can be tested without one.
"""

from typing import Dict, Iterable, Mapping, Optional, Any

VALID_LETTERS = ("A", "B", "C", "D")


def normalize_answer_letter(value: Any) -> str:
    """
    Reduces an answer to a single upper-case letter when it is recognizably
    one of A-D: bare letters, "Option B", "(B)" and "b)" all become "B".
    Empty input yields "". Anything else is returned trimmed and upper-cased
    so it can never equal a valid letter by accident.
    """
    s = str(value if value is not None else "").strip().upper()
    if not s:
        return ""
    if s in VALID_LETTERS:
        return s
    for letter in VALID_LETTERS:
        if s.startswith(f"OPTION {letter}") or s == f"{letter})" or f"({letter})" in s:
            return letter
    return s


def _lookup_answer(submitted: Mapping, question_id: int) -> Any:
    # JSON bodies key answers by string ids; internal callers may use ints.
    if question_id in submitted:
        return submitted[question_id]
    return submitted.get(str(question_id))


def score_answers(assigned_ids: Iterable[int], correct_answers: Mapping[int, Optional[str]], submitted: Mapping) -> int:
    """
    Counts the assigned questions whose submitted letter equals the
    normalized correct letter. Unanswered, empty or invalid entries never
    match, and neither does a question with no stored correct answer.
    """
    score = 0
    for qid in assigned_ids:
        given = normalize_answer_letter(_lookup_answer(submitted, qid))
        correct = normalize_answer_letter(correct_answers.get(qid))
        if given and correct and given == correct:
            score += 1
    return score


def format_percentage(score: int, total: int) -> str:
    """`score*100/total` with two decimals, or "0.00" for an empty paper."""
    if total <= 0:
        return "0.00"
    return f"{(score * 100.0) / total:.2f}"
