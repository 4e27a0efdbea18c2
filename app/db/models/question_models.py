# /exam-portal/app/db/models/question_models.py

"""
This module defines the SQLAlchemy ORM models for the question bank:
`Question`, the shared reading `Passage`, and the `Upload` batch that records
one ingestion run (a Word file, a CSV file or a Google Sheet import).
"""

from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class Upload(Base):
    """
    One ingestion batch. Owns the questions it produced, so deleting the
    upload deletes exactly those questions.
    """
    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    source = Column(String(50), nullable=False)  # 'word' | 'sheet' | 'csv'
    question_count = Column(Integer, nullable=False, default=0)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())

    questions = relationship("Question", back_populates="upload", cascade="all, delete-orphan")


class Passage(Base):
    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String(255), nullable=False)
    passage_text = Column(Text, nullable=False)
    passage_type = Column(String(50), nullable=False, default="prose")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    questions = relationship("Question", back_populates="passage")


class Question(Base):
    """
    A single multiple-choice question with exactly four options.

    `correct_answer` is stored as provided by the source; it may be a bare
    letter or a verbose form such as "Option B" and is normalized at scoring
    time.
    """
    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String(255), index=True, nullable=False)
    question_text = Column(Text, nullable=False)

    option_a = Column(Text, nullable=True)
    option_b = Column(Text, nullable=True)
    option_c = Column(Text, nullable=True)
    option_d = Column(Text, nullable=True)
    option_a_image = Column(Text, nullable=True)
    option_b_image = Column(Text, nullable=True)
    option_c_image = Column(Text, nullable=True)
    option_d_image = Column(Text, nullable=True)

    correct_answer = Column(String(20), nullable=True)
    image_url = Column(Text, nullable=True)
    instruction_text = Column(Text, nullable=True)

    passage_id = Column(Integer, ForeignKey("passages.id", ondelete="SET NULL"), nullable=True)
    upload_id = Column(Integer, ForeignKey("uploads.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    passage = relationship("Passage", back_populates="questions")
    upload = relationship("Upload", back_populates="questions")
