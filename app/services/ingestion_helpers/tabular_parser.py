# /exam-portal/app/services/ingestion_helpers/tabular_parser.py

"""
Row-oriented question parsing shared by the CSV upload and the Google Sheet
import. Two row shapes are accepted:

- Google Form responses: Timestamp, Subject, Question, Image, A, B, C, D, Correct
- Plain sheets: Subject, Question, A, B, C, D, Correct, Image

The shape is detected from the first row; a header row is skipped.
"""

import csv
import io
import re
from typing import List, Tuple

import pandas as pd

from ...models.question_bank_model import QuestionRecord
from ..exam_helpers.scoring import normalize_answer_letter

FORM_SHAPE = "form"
PLAIN_SHAPE = "plain"

FORM_OPTION_PREFIX_RE = re.compile(r"^[A-D]\)\s*", re.IGNORECASE)
HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)
DRIVE_FILE_ID_RE = re.compile(r"/d/([\w-]+)")
DRIVE_VIEW_URL = "https://drive.google.com/uc?export=view&id={file_id}"

# Column indexes per shape.
FORM_COLUMNS = {"subject": 1, "question": 2, "image": 3, "options": (4, 5, 6, 7), "correct": 8}
PLAIN_COLUMNS = {"subject": 0, "question": 1, "options": (2, 3, 4, 5), "correct": 6, "image": 7}


def _max_field_count(text: str) -> int:
    return max((len(row) for row in csv.reader(io.StringIO(text))), default=0)


def parse_csv_rows(text: str) -> List[List[str]]:
    """
    Parses CSV text into rows of strings, honouring quoted fields. Rows may
    have different lengths; shorter rows are padded with empty cells up to the
    widest row. Only malformed input falls back to a naive split on newlines
    and commas.
    """
    if not text or not text.strip():
        return []
    try:
        width = _max_field_count(text)
        if width == 0:
            return []
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
        )
    except (csv.Error, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        print(f"WARNING: CSV parsing failed ({e}); falling back to a plain comma split.")
        return [line.rstrip("\r").split(",") for line in text.split("\n") if line.strip()]
    return frame.fillna("").astype(str).values.tolist()


def to_direct_image_url(url: str) -> str:
    """Rewrites a Google Drive sharing link to a directly viewable image URL."""
    value = (url or "").strip()
    if not value or not HTTP_RE.match(value):
        return value

    file_id = ""
    match = DRIVE_FILE_ID_RE.search(value)
    if match:
        file_id = match.group(1)
    if "open?id=" in value:
        file_id = value.split("open?id=", 1)[1].split("&")[0]
    if not file_id and "id=" in value:
        file_id = value.split("id=", 1)[1].split("&")[0]

    return DRIVE_VIEW_URL.format(file_id=file_id) if file_id else value


def detect_shape(header: List[str]) -> str:
    lowered = [str(cell).strip().lower() for cell in header]
    return FORM_SHAPE if any("timestamp" in cell for cell in lowered) else PLAIN_SHAPE


def is_header_row(row: List[str]) -> bool:
    lowered = [str(cell).strip().lower() for cell in row]
    return any("timestamp" in cell or "subject" in cell for cell in lowered)


def _cell(row: List[str], index: int) -> str:
    return str(row[index]).strip() if index < len(row) else ""


def _row_to_record(row: List[str], shape: str) -> QuestionRecord:
    columns = FORM_COLUMNS if shape == FORM_SHAPE else PLAIN_COLUMNS
    options = [_cell(row, i) for i in columns["options"]]
    if shape == FORM_SHAPE:
        options = [FORM_OPTION_PREFIX_RE.sub("", option, count=1) for option in options]

    return QuestionRecord(
        subject=_cell(row, columns["subject"]),
        question_text=_cell(row, columns["question"]),
        option_a=options[0],
        option_b=options[1],
        option_c=options[2],
        option_d=options[3],
        correct_answer=normalize_answer_letter(_cell(row, columns["correct"])),
        image_url=to_direct_image_url(_cell(row, columns["image"])),
    )


def parse_question_rows(rows: List[List[str]]) -> Tuple[List[QuestionRecord], int]:
    """
    Converts parsed rows into question records.
    Returns (records, skipped) where `skipped` counts rows without question text.
    """
    if not rows:
        return [], 0

    shape = detect_shape(rows[0])
    data_rows = rows[1:] if is_header_row(rows[0]) else rows

    records, skipped = [], 0
    for row in data_rows:
        if not _cell(row, 0) and not _cell(row, 1):
            continue
        columns = FORM_COLUMNS if shape == FORM_SHAPE else PLAIN_COLUMNS
        if not _cell(row, columns["question"]):
            skipped += 1
            continue
        records.append(_row_to_record(row, shape))
    return records, skipped


def batch_subject(records: List[QuestionRecord]) -> str:
    """The batch's subject: the one subject all rows share, otherwise "Mixed"."""
    subjects = {record.subject for record in records}
    return subjects.pop() if len(subjects) == 1 else "Mixed"
