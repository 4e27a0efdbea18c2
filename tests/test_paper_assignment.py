# /tests/test_paper_assignment.py

import random

import pytest

from app.core.exceptions import InsufficientQuestionPoolError
from app.services.exam_helpers import paper_assignment


def test_fisher_yates_shuffle_is_a_permutation():
    items = list(range(20))
    shuffled = paper_assignment.fisher_yates_shuffle(list(items), random.Random(7))

    assert sorted(shuffled) == items
    assert shuffled != items


def test_fisher_yates_shuffle_is_reproducible_with_a_seeded_source():
    first = paper_assignment.fisher_yates_shuffle(list(range(10)), random.Random(42))
    second = paper_assignment.fisher_yates_shuffle(list(range(10)), random.Random(42))

    assert first == second


def test_draw_paper_raises_when_the_pool_is_too_small():
    with pytest.raises(InsufficientQuestionPoolError) as exc_info:
        paper_assignment.draw_paper([1, 2, 3], 5, "EVS")

    assert str(exc_info.value) == "Not enough questions for EVS (need 5, have 3)"
    assert exc_info.value.needed == 5
    assert exc_info.value.available == 3


def test_assignment_is_a_subset_of_the_pool_with_the_configured_size(db_service, make_user, add_questions, set_paper_size):
    user = make_user()
    pool = add_questions("EVS", 12)
    set_paper_size(5)

    paper = paper_assignment.assign_paper_if_needed(db_service, user, "EVS", random.Random(1))

    assert len(paper) == 5
    assert len(set(paper)) == 5
    assert set(paper) <= set(pool)


def test_assignment_is_stable_across_calls(db_service, make_user, add_questions, set_paper_size):
    user = make_user()
    add_questions("EVS", 12)
    set_paper_size(5)

    first = paper_assignment.assign_paper_if_needed(db_service, user, "EVS", random.Random(1))
    second = paper_assignment.assign_paper_if_needed(db_service, user, " EVS ", random.Random(99))

    assert first == second
    assert db_service.get_assignment(user.id, "EVS") == first


def test_students_get_independent_papers(db_service, make_user, add_questions, set_paper_size):
    alice = make_user("alice")
    bob = make_user("bob")
    add_questions("EVS", 30)
    set_paper_size(10)

    alice_paper = paper_assignment.assign_paper_if_needed(db_service, alice, "EVS", random.Random(1))
    bob_paper = paper_assignment.assign_paper_if_needed(db_service, bob, "EVS", random.Random(2))

    assert alice_paper != bob_paper


def test_subject_match_is_a_case_insensitive_substring(db_service, make_user, add_questions, set_paper_size):
    user = make_user()
    evs_ids = add_questions("EVS-2024", 3)
    add_questions("English", 3)
    set_paper_size(3)

    paper = paper_assignment.assign_paper_if_needed(db_service, user, "evs")

    assert sorted(paper) == sorted(evs_ids)


def test_like_wildcards_in_the_subject_match_literally(db_service, make_user, add_questions, set_paper_size):
    user = make_user()
    add_questions("MATHS", 3)
    set_paper_size(3)

    with pytest.raises(InsufficientQuestionPoolError):
        paper_assignment.assign_paper_if_needed(db_service, user, "M_THS")


def test_insufficient_pool_persists_nothing(db_service, make_user, add_questions, set_paper_size):
    user = make_user()
    add_questions("EVS", 3)
    set_paper_size(5)

    with pytest.raises(InsufficientQuestionPoolError):
        paper_assignment.assign_paper_if_needed(db_service, user, "EVS")

    assert db_service.get_assignment(user.id, "EVS") is None


def test_paper_size_falls_back_to_fifty_when_the_setting_is_invalid(db_service, make_user, add_questions):
    user = make_user()
    add_questions("EVS", 50)
    db_service.set_config("TotalQuestionsPerSubject", "lots")

    paper = paper_assignment.assign_paper_if_needed(db_service, user, "EVS")

    assert len(paper) == 50


def test_concurrent_assignment_keeps_the_first_stored_paper(db_service, make_user, mocker):
    user = make_user()
    user_id = user.id
    db_service.create_assignment_if_absent(user_id, "EVS", [1, 2, 3])

    # The losing writer read "no paper yet" before the winner committed.
    real_get_assignment = db_service.user_repo.get_assignment
    calls = []

    def stale_first_read(uid, subject):
        calls.append(subject)
        return None if len(calls) == 1 else real_get_assignment(uid, subject)

    mocker.patch.object(db_service.user_repo, "get_assignment", side_effect=stale_first_read)

    stored = db_service.create_assignment_if_absent(user_id, "EVS", [7, 8, 9])

    assert stored == [1, 2, 3]
    assert real_get_assignment(user_id, "EVS") == [1, 2, 3]
