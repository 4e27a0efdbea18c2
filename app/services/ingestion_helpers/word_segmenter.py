# /exam-portal/app/services/ingestion_helpers/word_segmenter.py

"""
Stage one of the Word ingestion pipeline: segmentation.

The converted document is cut into paragraph blocks, and an explicit
two-state machine (`normal`, `collecting-passage`) walks them in order. It
tracks the running context a question inherits: the instruction banner
(`## ...`), the reading passage being collected (`@@ title` followed by prose)
and a pending standalone image. Every block that survives is emitted as a
`ContentItem` carrying that context; stage two (`question_extractor`) never
looks at raw markup.
"""

import html as html_lib
import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

# --- Markers & patterns ---
INSTRUCTION_MARKER = "##"
PASSAGE_MARKER = "@@"

PARAGRAPH_SPLIT_RE = re.compile(r"<p[^>]*>", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]+>")
IMG_SRC_RE = re.compile(r"<img[^>]+src=\"([^\"]+)\"[^>]*>", re.IGNORECASE)

ANSWER_LINE_RE = re.compile(r"^Answer\s*:\s*([A-D])", re.IGNORECASE)
NUMBERED_QUESTION_RE = re.compile(r"^(?:Q?\s*)?(\d+)[.)]\s*.+", re.IGNORECASE)
OPTION_PREFIX_RE = re.compile(r"^[A-Da-d][.)]")
ROMAN_HEADER_RE = re.compile(r"^[IVX]+\.\s+", re.IGNORECASE)

DOCUMENT_HEADER_RES = [
    re.compile(r"^SAFAL\s*[-–]", re.IGNORECASE),
    re.compile(r"^MARKS\s*:", re.IGNORECASE),
    re.compile(r"^(ENGLISH|MATHEMATICS|EVS)$", re.IGNORECASE),
]
DOCUMENT_HEADER_PHRASES = ("mock question paper", "question paper")

SECTION_HEADER_RES = [
    re.compile(r"^Section\s+[A-Z]\b", re.IGNORECASE),
    re.compile(r"^Part\s*[IVX\d]+\b", re.IGNORECASE),
]
SECTION_HEADER_MAX_LENGTH = 100
MIN_PASSAGE_LINE_LENGTH = 20


class Block(BaseModel):
    """One paragraph of the converted document."""
    text: str
    html: str
    images: List[str] = Field(default_factory=list)


class ContentItem(BaseModel):
    """A retained block plus the context active when it was read."""
    text: str
    html: str
    image: Optional[str] = None
    all_images: List[str] = Field(default_factory=list)
    passage_text: Optional[str] = None
    passage_id: Optional[int] = None
    instruction_text: Optional[str] = None


class SegmenterState(str, Enum):
    NORMAL = "normal"
    COLLECTING_PASSAGE = "collecting-passage"


# --- Block extraction ---

def split_html_blocks(document_html: str) -> List[Block]:
    """Splits converted HTML on paragraph openings into text/image blocks."""
    blocks = []
    for raw in PARAGRAPH_SPLIT_RE.split(document_html or ""):
        markup = raw.replace("</p>", "").strip()
        if not markup:
            continue
        text = html_lib.unescape(TAG_RE.sub("", markup)).strip()
        blocks.append(Block(text=text, html=markup, images=IMG_SRC_RE.findall(markup)))
    return blocks


# --- Line classifiers (shared with the extractor) ---

def is_answer_line(text: str) -> bool:
    return bool(ANSWER_LINE_RE.match(text))


def is_numbered_question(text: str) -> bool:
    return bool(NUMBERED_QUESTION_RE.match(text))


def is_document_header(text: str) -> bool:
    lowered = text.lower()
    if any(phrase in lowered for phrase in DOCUMENT_HEADER_PHRASES):
        return True
    return any(pattern.match(text) for pattern in DOCUMENT_HEADER_RES)


def is_section_header(text: str) -> bool:
    if len(text) >= SECTION_HEADER_MAX_LENGTH:
        return False
    if "multiple choice" in text.lower():
        return True
    return any(pattern.match(text) for pattern in SECTION_HEADER_RES)


def looks_like_option(text: str) -> bool:
    return bool(OPTION_PREFIX_RE.match(text)) or len(text) < MIN_PASSAGE_LINE_LENGTH


class PassageSegmenter:
    """
    Walks blocks once and emits content items. One instance per document;
    `passage_count` is the number of `@@` passages opened so far.
    """

    def __init__(self):
        self.state = SegmenterState.NORMAL
        self.instruction: Optional[str] = None
        self.passage: Optional[str] = None
        self.passage_id: Optional[int] = None
        self.passage_count = 0
        self.pending_image: Optional[str] = None

    def segment(self, blocks: List[Block]) -> List[ContentItem]:
        items = []
        for block in blocks:
            item = self.feed(block)
            if item is not None:
                items.append(item)
        return items

    def feed(self, block: Block) -> Optional[ContentItem]:
        """Consumes one block; returns the content item it produced, if any."""
        text = block.text
        first_image = block.images[0] if block.images else None

        if not text:
            if first_image:
                self.pending_image = first_image
            return None

        if text.startswith(INSTRUCTION_MARKER):
            self.instruction = text[len(INSTRUCTION_MARKER):].strip()
            self._reset_passage()
            return None

        if text.startswith(PASSAGE_MARKER):
            self.passage_count += 1
            self.passage_id = self.passage_count
            self.passage = ""
            self.state = SegmenterState.COLLECTING_PASSAGE
            # The passage (or poem) title becomes the banner shown with its questions.
            self.instruction = text[len(PASSAGE_MARKER):].strip()
            return None

        if is_document_header(text) or ROMAN_HEADER_RE.match(text) or is_section_header(text):
            return None

        answer_line = is_answer_line(text)
        numbered = is_numbered_question(text)

        if self.state == SegmenterState.COLLECTING_PASSAGE and not answer_line and not numbered:
            if not looks_like_option(text) and len(text) > MIN_PASSAGE_LINE_LENGTH:
                self.passage += text + "\n\n"
                return None

        if numbered:
            self.state = SegmenterState.NORMAL

        item = ContentItem(
            text=text,
            html=block.html,
            image=first_image or self.pending_image,
            all_images=list(block.images),
            passage_text=self.passage.strip() if self.passage else None,
            passage_id=self.passage_id,
            instruction_text=self.instruction,
        )
        self.pending_image = None
        return item

    def _reset_passage(self):
        self.state = SegmenterState.NORMAL
        self.passage = None
        self.passage_id = None
