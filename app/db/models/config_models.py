# /exam-portal/app/db/models/config_models.py

from sqlalchemy import Column, String, Integer, Text

from ..base_class import Base


class ConfigEntry(Base):
    # Flat key -> string settings (ExamActive, TotalQuestionsPerSubject, ...).
    __tablename__ = "config"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(255), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=True)
