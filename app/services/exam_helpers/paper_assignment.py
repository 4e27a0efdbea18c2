# /exam-portal/app/services/exam_helpers/paper_assignment.py

"""
The Paper Assignment Engine.

A student's paper for a subject is a fixed-size, uniformly random sample
(without replacement) of the question bank for that subject. It is drawn on
first access, persisted, and from then on returned verbatim so that question
index `i` always maps to the same question for that student.
"""

import random
from typing import List, Optional, MutableSequence, TypeVar

from ...core.exceptions import InsufficientQuestionPoolError
from ...db.models.user_model import User
from .. import config_service
from ..database_service import DatabaseService

T = TypeVar("T")


def fisher_yates_shuffle(items: MutableSequence[T], rng: Optional[random.Random] = None) -> MutableSequence[T]:
    """
    Shuffles `items` in place: for i from the last index down to 1, swap with
    a uniformly chosen index in [0, i]. Returns the same sequence.
    """
    rng = rng or random.SystemRandom()
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def draw_paper(pool_ids: List[int], total_needed: int, subject: str, rng: Optional[random.Random] = None) -> List[int]:
    """
    Pure sampling step. Never returns a partial paper: a pool smaller than
    `total_needed` raises `InsufficientQuestionPoolError`.
    """
    if len(pool_ids) < total_needed:
        raise InsufficientQuestionPoolError(subject, total_needed, len(pool_ids))
    shuffled = fisher_yates_shuffle(list(pool_ids), rng)
    return shuffled[:total_needed]


def assign_paper_if_needed(db: DatabaseService, user: User, subject: str, rng: Optional[random.Random] = None) -> List[int]:
    """
    Returns the user's paper for `subject`, drawing and persisting it first if
    the user has none yet.

    The subject is matched against stored question subjects as a
    case-insensitive substring. Persistence is insert-if-absent: when two
    first accesses race, the paper stored first wins and is returned to both.
    """
    subject_name = (subject or "").strip()

    existing = db.get_assignment(user.id, subject_name)
    if existing:
        return existing

    pool_ids = db.find_question_ids_by_subject(subject_name)
    total_needed = config_service.get_total_questions_per_subject(db)
    selected = draw_paper(pool_ids, total_needed, subject_name, rng)

    stored = db.create_assignment_if_absent(user.id, subject_name, selected)
    print(f"INFO: Assigned {len(stored)} '{subject_name}' questions to {user.username}.")
    return stored
