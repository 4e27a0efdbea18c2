# /tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models.user_model import UserCreate
from app.services import config_service, user_service
from app.services.database_service import DatabaseService


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database per test. StaticPool keeps every
    session (and the TestClient's worker thread) on the same connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db_service(session):
    """A DatabaseService over the test session, with the default settings seeded."""
    service = DatabaseService(session)
    config_service.seed_defaults(service)
    return service


@pytest.fixture
def make_user(db_service):
    def _make_user(username="student1", password="pass123", display_name=None, is_admin=False):
        return user_service.create_user(
            db_service,
            UserCreate(username=username, password=password, displayName=display_name, isAdmin=is_admin),
        )
    return _make_user


@pytest.fixture
def add_questions(db_service):
    """Adds `count` questions for `subject` outside any upload; returns their ids."""
    def _add_questions(subject="EVS", count=5, correct_answer="A"):
        ids = []
        for i in range(count):
            question = db_service.add_question({
                "subject": subject,
                "question_text": f"{subject} question {i + 1}",
                "option_a": "Option one",
                "option_b": "Option two",
                "option_c": "Option three",
                "option_d": "Option four",
                "correct_answer": correct_answer,
            })
            ids.append(question.id)
        return ids
    return _add_questions


@pytest.fixture
def set_paper_size(db_service):
    def _set_paper_size(total):
        config_service.set_total_questions_per_subject(db_service, total)
    return _set_paper_size
