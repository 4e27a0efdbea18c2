# /tests/test_scoring.py

import pytest

from app.services.exam_helpers.scoring import normalize_answer_letter, score_answers, format_percentage


@pytest.mark.parametrize("raw, expected", [
    ("B", "B"),
    ("b", "B"),
    (" Option B ", "B"),
    ("option c", "C"),
    ("(D)", "D"),
    ("a)", "A"),
    ("", ""),
    (None, ""),
    ("E", "E"),
    ("Both", "BOTH"),
])
def test_normalize_answer_letter(raw, expected):
    assert normalize_answer_letter(raw) == expected


def test_score_answers_counts_normalized_matches():
    assigned = [1, 2, 3]
    correct = {1: "A", 2: "Option B", 3: "C"}
    submitted = {"1": "A", "2": "b", "3": "D"}

    assert score_answers(assigned, correct, submitted) == 2


def test_score_answers_accepts_int_keys_and_ignores_unassigned():
    correct = {10: "A", 11: "B"}
    submitted = {10: "A", 11: "B", 99: "C"}

    assert score_answers([10, 11], correct, submitted) == 2


def test_unanswered_or_empty_answers_never_match():
    correct = {1: "A", 2: None, 3: "C"}
    submitted = {"1": "", "2": "", "3": None}

    assert score_answers([1, 2, 3], correct, submitted) == 0


def test_question_without_stored_answer_never_matches():
    assert score_answers([1], {1: None}, {"1": "A"}) == 0


@pytest.mark.parametrize("score, total, expected", [
    (18, 50, "36.00"),
    (1, 3, "33.33"),
    (2, 3, "66.67"),
    (0, 0, "0.00"),
    (5, 5, "100.00"),
])
def test_format_percentage(score, total, expected):
    assert format_percentage(score, total) == expected
