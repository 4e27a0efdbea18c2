# /tests/test_exam_service.py

import random

import pytest

from app.core.exceptions import ExamDisabledError, AlreadySubmittedError, SubmissionFailedError
from app.services import config_service, exam_service


@pytest.fixture
def student_with_bank(db_service, make_user, add_questions, set_paper_size):
    user = make_user("priya", display_name="Priya S")
    add_questions("EVS", 60, correct_answer="Option A")
    set_paper_size(50)
    return user


# --- Question Delivery ---

def test_get_question_returns_the_view_without_the_answer(db_service, student_with_bank):
    view = exam_service.get_question(db_service, student_with_bank, "EVS", 0, random.Random(3))

    assert view.total == 50
    assert view.subject == "EVS"
    assert view.options == ["Option one", "Option two", "Option three", "Option four"]
    assert view.optionImages == ["", "", "", ""]
    assert view.passageText == ""
    assert "correct_answer" not in view.model_dump()
    assert view.id == db_service.get_assignment(student_with_bank.id, "EVS")[0]


@pytest.mark.parametrize("index", [-1, 50, 500])
def test_index_outside_the_paper_means_no_more_questions(db_service, student_with_bank, index):
    assert exam_service.get_question(db_service, student_with_bank, "EVS", index) is None


def test_question_view_includes_the_linked_passage(db_service, make_user, set_paper_size):
    user = make_user()
    set_paper_size(1)
    db_service.add_upload_batch(
        upload_record={"filename": "reading.docx", "subject": "English", "source": "word"},
        question_records=[{
            "subject": "English",
            "question_text": "Who found the axe?",
            "option_a": "The king", "option_b": "The woodcutter", "option_c": "A fairy", "option_d": "Nobody",
            "correct_answer": "C",
            "instruction_text": "The Honest Woodcutter",
            "passage_key": 1,
        }],
        passage_records={1: {"subject": "English", "passage_text": "Once upon a time...", "passage_type": "prose"}},
    )

    view = exam_service.get_question(db_service, user, "English", 0)

    assert view.passageText == "Once upon a time..."
    assert view.passageId is not None
    assert view.instructionText == "The Honest Woodcutter"


def test_get_question_is_blocked_while_the_exam_is_disabled(db_service, student_with_bank):
    config_service.set_exam_active(db_service, False)

    with pytest.raises(ExamDisabledError, match="Exam is disabled by admin"):
        exam_service.get_question(db_service, student_with_bank, "EVS", 0)


# --- Submission ---

def test_submit_round_trip_records_response_grade_and_status(db_service, student_with_bank):
    exam_service.get_question(db_service, student_with_bank, "EVS", 0)
    paper = db_service.get_assignment(student_with_bank.id, "EVS")
    answers = {str(qid): ("A" if i < 18 else "B") for i, qid in enumerate(paper)}

    result = exam_service.submit_exam(db_service, student_with_bank, "EVS", answers)

    assert (result.score, result.total) == (18, 50)

    grade = db_service.get_all_grades()[0]
    assert grade.percentage == "36.00"
    assert grade.display_name == "Priya S"

    response = db_service.get_latest_response("priya", "EVS")
    assert response.score == 18
    assert response.answers == answers

    status = exam_service.get_submission_status(db_service, student_with_bank, "EVS")
    assert status.submitted is True
    assert (status.score, status.total) == (18, 50)


def test_submit_assigns_the_paper_lazily(db_service, student_with_bank):
    result = exam_service.submit_exam(db_service, student_with_bank, "EVS", {})

    assert result.score == 0
    assert result.total == 50
    assert len(db_service.get_assignment(student_with_bank.id, "EVS")) == 50


def test_a_second_submission_is_rejected(db_service, student_with_bank):
    exam_service.submit_exam(db_service, student_with_bank, "EVS", {})

    with pytest.raises(AlreadySubmittedError):
        exam_service.submit_exam(db_service, student_with_bank, "EVS", {})

    assert db_service.count_responses() == 1


def test_failed_submission_rolls_back_every_write(db_service, student_with_bank, mocker):
    user_id = student_with_bank.id
    mocker.patch(
        "app.services.database_helpers.user_repository_sql.UserRepositorySQL.stage_submission_status",
        side_effect=RuntimeError("disk full"),
    )

    with pytest.raises(SubmissionFailedError):
        exam_service.submit_exam(db_service, student_with_bank, "EVS", {})

    assert db_service.count_responses() == 0
    assert db_service.count_grades() == 0
    assert db_service.get_submission_status(user_id, "EVS") is None

    mocker.stopall()
    result = exam_service.submit_exam(db_service, student_with_bank, "EVS", {})
    assert result.total == 50
    assert db_service.count_responses() == 1


def test_submit_is_blocked_while_the_exam_is_disabled(db_service, student_with_bank):
    config_service.set_exam_active(db_service, False)

    with pytest.raises(ExamDisabledError):
        exam_service.submit_exam(db_service, student_with_bank, "EVS", {})

    assert db_service.count_responses() == 0
