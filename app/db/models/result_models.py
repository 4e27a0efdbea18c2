# /exam-portal/app/db/models/result_models.py

"""
Append-only records written by the scoring engine. Neither table is ever
updated; a student who somehow submits twice simply has two rows.
"""

from sqlalchemy import Column, String, Integer, JSON, DateTime
from sqlalchemy.sql import func

from ..base_class import Base


class Response(Base):
    """The raw submission: every answer the student sent, plus the raw score."""
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), index=True, nullable=False)
    subject = Column(String(255), nullable=False)
    score = Column(Integer, nullable=False, default=0)
    answers = Column(JSON, nullable=False, default=dict)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now())


class Grade(Base):
    """Denormalized summary of one scored submission, used by reporting."""
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), index=True, nullable=False)
    display_name = Column(String(255), nullable=True)
    subject = Column(String(255), nullable=False)
    score = Column(Integer, nullable=False, default=0)
    percentage = Column(String(10), nullable=False, default="0.00")
    graded_at = Column(DateTime(timezone=True), server_default=func.now())
