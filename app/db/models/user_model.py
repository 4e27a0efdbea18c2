# /exam-portal/app/db/models/user_model.py

"""
This module defines the SQLAlchemy ORM models for portal accounts and for the
per-subject exam state of each account.

A student's exam state is kept in two explicit tables rather than one nested
JSON blob on the user row:
- `PaperAssignment`: the fixed, ordered list of question ids the student sees
  for a subject. Written once, never updated.
- `SubmissionStatus`: whether (and how) the student's paper for a subject has
  been submitted. Upserted by the scoring engine.
"""

from sqlalchemy import Column, String, Integer, Boolean, JSON, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class User(Base):
    """
    A portal account. Usernames are stored lower-cased and are unique, which
    makes every lookup case-insensitive.
    """
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    session_token = Column(String(255), unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Deleting a user removes their papers and submission flags with them.
    assignments = relationship("PaperAssignment", back_populates="user", cascade="all, delete-orphan")
    submissions = relationship("SubmissionStatus", back_populates="user", cascade="all, delete-orphan")


class PaperAssignment(Base):
    """
    The paper issued to one user for one subject.

    The (user_id, subject) unique constraint is what makes assignment
    creation an "insert if absent": a second concurrent insert fails instead
    of overwriting the first paper.
    """
    __tablename__ = "paper_assignments"
    __table_args__ = (UniqueConstraint("user_id", "subject", name="uq_assignment_user_subject"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    question_ids = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="assignments")


class SubmissionStatus(Base):
    __tablename__ = "submission_statuses"
    __table_args__ = (UniqueConstraint("user_id", "subject", name="uq_submission_user_subject"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    submitted = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    score = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="submissions")
