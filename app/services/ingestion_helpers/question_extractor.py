# /exam-portal/app/services/ingestion_helpers/question_extractor.py

"""
Stage two of the Word ingestion pipeline: question extraction.

Works purely on the `ContentItem` list produced by the segmenter. Documents
with numbered questions ("1. ...", "Q3) ...") are cut into spans between
numbered starts; documents with no numbering at all fall back to anchoring on
each `Answer: X` line and walking backwards for the options and the stem.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field

from .word_segmenter import ContentItem, is_answer_line, is_numbered_question, ANSWER_LINE_RE

OPTION_LETTERS = ("A", "B", "C", "D")

QUESTION_NUMBER_RE = re.compile(r"^(?:Q?\s*)?\d+[.)]\s?", re.IGNORECASE)
PLAIN_NUMBER_RE = re.compile(r"^\d+[.)]\s?")
BLANK_RUN_RE = re.compile(r"_{3,}")
BLANK_PLACEHOLDER = "_______"

# The answer line must sit at least this far into a span to leave room for
# the question and its four options.
MIN_ANSWER_OFFSET = 5
MIN_FALLBACK_QUESTION_LENGTH = 10


class ParsedQuestion(BaseModel):
    question_text: str
    options: List[str] = Field(default_factory=list)
    option_images: List[Optional[str]] = Field(default_factory=list)
    correct_answer: str
    image_url: Optional[str] = None
    passage_id: Optional[int] = None
    passage_text: Optional[str] = None
    instruction_text: Optional[str] = None


class ExtractionResult(BaseModel):
    questions: List[ParsedQuestion] = Field(default_factory=list)
    skipped: int = 0


def _option_prefix_re(letter: str):
    return re.compile(rf"^[{letter}{letter.lower()}][.)]\s*")


OPTION_PREFIX_RES = {letter: _option_prefix_re(letter) for letter in OPTION_LETTERS}


def _clean_question_text(text: str, number_re) -> str:
    return BLANK_RUN_RE.sub(BLANK_PLACEHOLDER, number_re.sub("", text, count=1)).strip()


def _answer_letter(item: ContentItem) -> str:
    return ANSWER_LINE_RE.match(item.text).group(1).upper()


def _is_boilerplate(text: str) -> bool:
    lowered = text.lower()
    return "multiple choice" in lowered or "answer key" in lowered or is_answer_line(text)


def _build_options(option_items: List[ContentItem]):
    """Strips option prefixes; empty options get an image marker or a placeholder."""
    options, option_images = [], []
    for letter, item in zip(OPTION_LETTERS, option_items):
        text = OPTION_PREFIX_RES[letter].sub("", item.text, count=1).strip()
        image = item.image
        if not text:
            text = "[Image]" if image else f"[Option {letter}]"
        options.append(text)
        option_images.append(image)
    return options, option_images


def _has_real_option(options: List[str], option_images: List[Optional[str]]) -> bool:
    placeholders = {f"[Option {letter}]" for letter in OPTION_LETTERS}
    return any(image or text not in placeholders for text, image in zip(options, option_images))


def _is_persistable(question: ParsedQuestion) -> bool:
    return bool(question.question_text) and _has_real_option(question.options, question.option_images)


def _extract_numbered(items: List[ContentItem], starts: List[int]) -> ExtractionResult:
    result = ExtractionResult()
    for position, start in enumerate(starts):
        end = starts[position + 1] if position + 1 < len(starts) else len(items)
        span = items[start:end]

        answer_offset = next((i for i, item in enumerate(span) if is_answer_line(item.text)), None)
        if answer_offset is None or answer_offset < MIN_ANSWER_OFFSET:
            result.skipped += 1
            continue

        question_item = span[0]
        block_images = []
        for item in span[:answer_offset]:
            for image in ([item.image] if item.image else []) + item.all_images:
                if image not in block_images:
                    block_images.append(image)

        option_items = span[max(1, answer_offset - 4):answer_offset][-4:]
        options, option_images = _build_options(option_items)

        question = ParsedQuestion(
            question_text=_clean_question_text(question_item.text, QUESTION_NUMBER_RE),
            options=options,
            option_images=option_images,
            correct_answer=_answer_letter(span[answer_offset]),
            image_url=question_item.image or (block_images[0] if block_images else None),
            passage_id=question_item.passage_id,
            passage_text=question_item.passage_text,
            instruction_text=question_item.instruction_text,
        )
        if _is_persistable(question):
            result.questions.append(question)
        else:
            result.skipped += 1
    return result


def _extract_by_answer_anchor(items: List[ContentItem]) -> ExtractionResult:
    result = ExtractionResult()
    for index, answer_item in enumerate(items):
        if not is_answer_line(answer_item.text):
            continue

        option_items = []
        cursor = index - 1
        while cursor >= 0 and len(option_items) < 4:
            if not _is_boilerplate(items[cursor].text):
                option_items.insert(0, items[cursor])
            cursor -= 1

        question_item = None
        while cursor >= 0:
            candidate = items[cursor]
            if not _is_boilerplate(candidate.text) and len(candidate.text) > MIN_FALLBACK_QUESTION_LENGTH:
                question_item = candidate
                break
            cursor -= 1

        if len(option_items) < 4 or question_item is None:
            result.skipped += 1
            continue

        options, option_images = _build_options(option_items)
        first_option_image = next((image for image in option_images if image), None)
        context = question_item if question_item.passage_id is not None else answer_item

        question = ParsedQuestion(
            question_text=_clean_question_text(question_item.text, PLAIN_NUMBER_RE),
            options=options,
            option_images=option_images,
            correct_answer=_answer_letter(answer_item),
            image_url=question_item.image or first_option_image,
            passage_id=context.passage_id,
            passage_text=context.passage_text,
            instruction_text=question_item.instruction_text or answer_item.instruction_text,
        )
        if _is_persistable(question):
            result.questions.append(question)
        else:
            result.skipped += 1
    return result


def extract_questions(items: List[ContentItem]) -> ExtractionResult:
    """Extracts questions from segmented content, numbered mode first."""
    starts = [i for i, item in enumerate(items) if is_numbered_question(item.text)]
    if starts:
        return _extract_numbered(items, starts)
    return _extract_by_answer_anchor(items)
