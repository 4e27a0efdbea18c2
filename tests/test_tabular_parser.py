# /tests/test_tabular_parser.py

import httpx
import pytest

from app.core.exceptions import PreconditionError
from app.services.ingestion_helpers import sheet_source, tabular_parser


# --- CSV rows ---

def test_parse_csv_rows_honours_quoted_commas():
    rows = tabular_parser.parse_csv_rows('EVS,"What, exactly, is soil?",Rock,Dust,Sand,Mix,D\n')

    assert rows == [["EVS", "What, exactly, is soil?", "Rock", "Dust", "Sand", "Mix", "D"]]


def test_parse_csv_rows_keeps_every_cell_as_a_string():
    rows = tabular_parser.parse_csv_rows("Maths,What is 2+2?,3,4,5,NA,B\n")

    assert rows[0][2:6] == ["3", "4", "5", "NA"]


def test_parse_csv_rows_skips_blank_lines():
    rows = tabular_parser.parse_csv_rows("a,b\n\n\nc,d\n")

    assert rows == [["a", "b"], ["c", "d"]]


def test_parse_csv_rows_accepts_rows_of_different_lengths():
    rows = tabular_parser.parse_csv_rows(
        "Subject,Question,A,B,C,D,Correct\n"
        'EVS,"Which, of these, is soil?",Rock,Dust,Sand,Mix,D,https://x/img.png\n'
    )

    assert rows == [
        ["Subject", "Question", "A", "B", "C", "D", "Correct", ""],
        ["EVS", "Which, of these, is soil?", "Rock", "Dust", "Sand", "Mix", "D", "https://x/img.png"],
    ]

    records, skipped = tabular_parser.parse_question_rows(rows)

    assert skipped == 0
    assert records[0].question_text == "Which, of these, is soil?"
    assert records[0].correct_answer == "D"
    assert records[0].image_url == "https://x/img.png"


def test_parse_csv_rows_of_empty_text():
    assert tabular_parser.parse_csv_rows("   ") == []


# --- Drive links ---

@pytest.mark.parametrize("url, expected", [
    ("https://drive.google.com/file/d/abc_123-XY/view?usp=sharing",
     "https://drive.google.com/uc?export=view&id=abc_123-XY"),
    ("https://drive.google.com/open?id=FILE42&authuser=0",
     "https://drive.google.com/uc?export=view&id=FILE42"),
    ("https://drive.google.com/uc?export=view&id=FILE42",
     "https://drive.google.com/uc?export=view&id=FILE42"),
    ("https://example.com/picture.png", "https://example.com/picture.png"),
    ("images/local.png", "images/local.png"),
    ("", ""),
])
def test_to_direct_image_url(url, expected):
    assert tabular_parser.to_direct_image_url(url) == expected


# --- Row shapes ---

def test_plain_rows_use_plain_column_offsets_and_skip_the_header():
    rows = [
        ["Subject", "Question", "A", "B", "C", "D", "Correct", "Image"],
        ["EVS", "Which is a mammal?", "Shark", "Whale", "Trout", "Eel", "Option B",
         "https://drive.google.com/file/d/IMG1/view"],
    ]

    records, skipped = tabular_parser.parse_question_rows(rows)

    assert skipped == 0
    assert len(records) == 1
    record = records[0]
    assert record.subject == "EVS"
    assert record.question_text == "Which is a mammal?"
    assert [record.option_a, record.option_b, record.option_c, record.option_d] == ["Shark", "Whale", "Trout", "Eel"]
    assert record.correct_answer == "B"
    assert record.image_url == "https://drive.google.com/uc?export=view&id=IMG1"


def test_plain_rows_without_a_header_are_all_data():
    rows = [["Maths", "2+2?", "3", "4", "5", "6", "B"]]

    records, _ = tabular_parser.parse_question_rows(rows)

    assert len(records) == 1
    assert records[0].image_url == ""


def test_form_export_rows_use_form_column_offsets():
    rows = [
        ["Timestamp", "Subject", "Question", "Image", "Option A", "Option B", "Option C", "Option D", "Correct"],
        ["2024-01-05 10:00:00", "English", "Pick the verb.", "", "A) run", "b) tree", "C)blue", "D) happy", "(A)"],
    ]

    records, skipped = tabular_parser.parse_question_rows(rows)

    assert skipped == 0
    record = records[0]
    assert record.subject == "English"
    assert record.question_text == "Pick the verb."
    assert [record.option_a, record.option_b, record.option_c, record.option_d] == ["run", "tree", "blue", "happy"]
    assert record.correct_answer == "A"


def test_blank_rows_are_ignored_and_blank_questions_are_counted_as_skipped():
    rows = [
        ["Subject", "Question", "A", "B", "C", "D", "Correct"],
        ["", "", "x", "y", "z", "w", "A"],
        ["EVS", "", "x", "y", "z", "w", "A"],
        ["EVS", "A real question?", "x", "y", "z", "w", "A"],
    ]

    records, skipped = tabular_parser.parse_question_rows(rows)

    assert len(records) == 1
    assert skipped == 1


def test_batch_subject_is_shared_subject_or_mixed():
    rows = [["EVS", "Q1?", "a", "b", "c", "d", "A"], ["EVS", "Q2?", "a", "b", "c", "d", "B"]]
    same, _ = tabular_parser.parse_question_rows(rows)
    mixed, _ = tabular_parser.parse_question_rows(rows + [["Maths", "Q3?", "a", "b", "c", "d", "C"]])

    assert tabular_parser.batch_subject(same) == "EVS"
    assert tabular_parser.batch_subject(mixed) == "Mixed"


# --- Google Sheet source ---

def test_build_export_url_keeps_the_tab_gid():
    url = "https://docs.google.com/spreadsheets/d/1AbC-d_EF/edit#gid=12345"

    assert sheet_source.build_export_url(url) == (
        "https://docs.google.com/spreadsheets/d/1AbC-d_EF/export?format=csv&gid=12345"
    )


def test_build_export_url_defaults_to_the_first_tab():
    url = "https://docs.google.com/spreadsheets/d/SHEET1/edit"

    assert sheet_source.build_export_url(url).endswith("/SHEET1/export?format=csv&gid=0")


def test_build_export_url_rejects_other_links():
    with pytest.raises(PreconditionError, match="Invalid Google Sheet URL"):
        sheet_source.build_export_url("https://example.com/not-a-sheet")


def test_fetch_sheet_csv_returns_the_body(mocker):
    response = mocker.Mock(text="EVS,Q?,a,b,c,d,A\n")
    get = mocker.patch("app.services.ingestion_helpers.sheet_source.httpx.get", return_value=response)

    text = sheet_source.fetch_sheet_csv("https://docs.google.com/spreadsheets/d/SHEET1/edit")

    assert text == "EVS,Q?,a,b,c,d,A\n"
    assert get.call_args.args[0].endswith("/SHEET1/export?format=csv&gid=0")
    response.raise_for_status.assert_called_once()


def test_fetch_sheet_csv_reports_an_unreachable_sheet(mocker):
    mocker.patch(
        "app.services.ingestion_helpers.sheet_source.httpx.get",
        side_effect=httpx.ConnectError("connection refused"),
    )

    with pytest.raises(PreconditionError, match="Could not fetch sheet"):
        sheet_source.fetch_sheet_csv("https://docs.google.com/spreadsheets/d/SHEET1/edit")
