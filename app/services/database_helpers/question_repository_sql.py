# /exam-portal/app/services/database_helpers/question_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the Question, Passage
and Upload tables. It is the Question Store the paper assignment engine and the
ingestion pipelines call into.

Ingestion writes go through `add_upload_batch`, which creates the Upload row,
its passages and its questions in ONE transaction so every question is stamped
with its batch id at insert time.
"""

from typing import List, Dict, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.question_models import Question, Passage, Upload


class QuestionRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Read Methods ---

    def find_ids_by_subject_substring(self, subject: str) -> List[int]:
        """
        Returns the ids of every question whose subject CONTAINS `subject`,
        case-insensitively ("EVS" matches "EVS-2024"). LIKE wildcards typed by
        the caller are escaped so they match literally.
        """
        rows = (
            self.db.query(Question.id)
            .filter(func.lower(Question.subject).contains(subject.lower(), autoescape=True))
            .order_by(Question.id)
            .all()
        )
        return [row.id for row in rows]

    def find_by_ids(self, question_ids: List[int]) -> List[Dict]:
        """
        Fetches the given questions left-joined with their passage text.
        Rows come back as plain dictionaries keyed by column name plus
        `passage_text`; callers re-order them as needed.
        """
        if not question_ids:
            return []
        rows = (
            self.db.query(Question, Passage.passage_text)
            .outerjoin(Passage, Question.passage_id == Passage.id)
            .filter(Question.id.in_(question_ids))
            .all()
        )
        results = []
        for question, passage_text in rows:
            record = {c.name: getattr(question, c.name) for c in question.__table__.columns}
            record["passage_text"] = passage_text
            results.append(record)
        return results

    def get_question_by_id(self, question_id: int) -> Optional[Dict]:
        found = self.find_by_ids([question_id])
        return found[0] if found else None

    def get_correct_answers(self, question_ids: List[int]) -> Dict[int, Optional[str]]:
        """Returns {question_id: stored correct answer} for exactly these ids."""
        if not question_ids:
            return {}
        rows = (
            self.db.query(Question.id, Question.correct_answer)
            .filter(Question.id.in_(question_ids))
            .all()
        )
        return {row.id: row.correct_answer for row in rows}

    def count_by_subject(self) -> List[Dict]:
        rows = (
            self.db.query(Question.subject, func.count(Question.id).label("count"))
            .group_by(Question.subject)
            .order_by(Question.subject)
            .all()
        )
        return [{"subject": row.subject, "count": row.count} for row in rows]

    def count_passages(self) -> int:
        return self.db.query(func.count(Passage.id)).scalar() or 0

    # --- Write Methods ---

    def add_question(self, record: Dict) -> Question:
        """Creates a single Question record outside of any upload batch."""
        new_question = Question(**record)
        self.db.add(new_question)
        self.db.commit()
        self.db.refresh(new_question)
        return new_question

    def add_upload_batch(self, upload_record: Dict, question_records: List[Dict], passage_records: Optional[Dict] = None) -> Upload:
        """
        Persists one ingestion batch atomically.

        `passage_records` maps a batch-local passage key to a Passage
        dictionary; question records reference passages through a
        `passage_key` entry, which is resolved to the real `passage_id` here.
        Any failure rolls the whole batch back.
        """
        try:
            upload = Upload(**upload_record, question_count=len(question_records))
            self.db.add(upload)

            passages_by_key = {}
            for key, passage_record in (passage_records or {}).items():
                passage = Passage(**passage_record)
                self.db.add(passage)
                passages_by_key[key] = passage
            self.db.flush()

            for record in question_records:
                record = dict(record)
                passage_key = record.pop("passage_key", None)
                passage = passages_by_key.get(passage_key) if passage_key is not None else None
                question = Question(**record)
                question.upload_id = upload.id
                question.passage_id = passage.id if passage is not None else None
                self.db.add(question)

            self.db.commit()
            self.db.refresh(upload)
            return upload
        except Exception:
            self.db.rollback()
            raise

    # --- Upload Methods ---

    def get_all_uploads(self) -> List[Upload]:
        return self.db.query(Upload).order_by(Upload.uploaded_at.desc(), Upload.id.desc()).all()

    def get_upload_by_id(self, upload_id: int) -> Optional[Upload]:
        return self.db.query(Upload).filter(Upload.id == upload_id).first()

    # --- Delete Methods ---

    def delete_by_upload(self, upload_id: int) -> bool:
        """
        Deletes an upload batch. The cascade on `Upload.questions` removes
        exactly the questions stamped with this batch id and nothing else.
        """
        upload = self.get_upload_by_id(upload_id)
        if upload:
            self.db.delete(upload)
            self.db.commit()
            return True
        return False

    def delete_by_subject(self, subject: str) -> int:
        """
        Deletes questions and uploads whose subject is exactly `subject`,
        together with any question still owned by one of those uploads.
        """
        upload_ids = [row.id for row in self.db.query(Upload.id).filter(Upload.subject == subject).all()]
        deleted = (
            self.db.query(Question)
            .filter((Question.subject == subject) | (Question.upload_id.in_(upload_ids)))
            .delete(synchronize_session=False)
        )
        self.db.query(Upload).filter(Upload.id.in_(upload_ids)).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    def delete_all(self) -> int:
        deleted = self.db.query(Question).delete(synchronize_session=False)
        self.db.query(Passage).delete(synchronize_session=False)
        self.db.query(Upload).delete(synchronize_session=False)
        self.db.commit()
        return deleted
