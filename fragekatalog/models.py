"""
Data Models
===========
Pydantic models for the parsed question catalog.
Final models are frozen; drafts exist only while a document is parsed.
The JSON layout (camelCase keys) is what the quiz app consumes.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

OPTION_LETTERS: tuple[str, ...] = ("a", "b", "c", "d", "e", "f")

Letter = Literal["a", "b", "c", "d", "e", "f"]


# ─── Enums ────────────────────────────────────────────────────────────────────


class LineKind(str, Enum):
    """Shape of a single trimmed line of extracted text."""
    BLANK = "blank"
    CATEGORY = "category"
    BOILERPLATE = "boilerplate"
    QUESTION_NUMBER = "question_number"
    QUESTION_INLINE = "question_inline"
    CORRECT_MARKER = "correct_marker"
    OPTION_MARKED = "option_marked"
    OPTION = "option"
    OTHER = "other"


# ─── Catalog Models ───────────────────────────────────────────────────────────


class Option(BaseModel):
    """A single answer option of a question."""
    model_config = ConfigDict(frozen=True)

    letter: Letter
    text: str
    correct: bool = False


class Question(BaseModel):
    """
    A finalized exam question.
    Options are always ordered a → f, independent of source order.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1, description="Question number from the source")
    text: str = Field(min_length=6)
    options: list[Option] = Field(default_factory=list)
    category: str = ""

    @property
    def correct_letters(self) -> list[str]:
        return [o.letter for o in self.options if o.correct]


class QuestionCatalog(BaseModel):
    """
    Complete output of a parse run.
    This is the top-level JSON document written to questions.json.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    year: int
    state: str
    subject: str
    total_count: int = Field(default=0, alias="totalCount")
    questions: list[Question] = Field(default_factory=list)
    last_modified: str = Field(
        default="",
        alias="lastModified",
        description="RFC3339 timestamp of the parse run",
    )

    @computed_field
    @property
    def correct_answer_count(self) -> int:
        """Number of options flagged correct across all questions."""
        return sum(len(q.correct_letters) for q in self.questions)

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys of the catalog file format."""
        return self.model_dump(
            by_alias=True,
            exclude={"correct_answer_count"},
        )

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ─── Draft Models ─────────────────────────────────────────────────────────────


class OptionDraft(BaseModel):
    """An option collected while parsing; may be overwritten by letter."""
    letter: Letter
    text: str = ""
    correct: bool = False


class QuestionDraft(BaseModel):
    """
    In-progress question keyed by its number.
    Replaced wholesale when the same number is seen again.
    """
    number: int
    text: str
    category: str = ""
    options: dict[str, OptionDraft] = Field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return len(self.text) > 5 and bool(self.options)

    def ordered_options(self) -> list[Option]:
        """Materialize options over the fixed letter sequence a..f."""
        return [
            Option(
                letter=letter,
                text=self.options[letter].text,
                correct=self.options[letter].correct,
            )
            for letter in OPTION_LETTERS
            if letter in self.options
        ]


# ─── Validation Model ─────────────────────────────────────────────────────────


class ValidationReport(BaseModel):
    """Post-parse statistics for a finished catalog."""
    total_questions: int = 0
    total_options: int = 0
    correct_answers: int = 0
    missing_question_numbers: list[int] = Field(default_factory=list)
    duplicate_question_numbers: list[int] = Field(default_factory=list)
    questions_without_correct_answer: list[int] = Field(default_factory=list)
    questions_with_letter_gaps: list[int] = Field(default_factory=list)
    category_breakdown: dict[str, int] = Field(default_factory=dict)

    @computed_field
    @property
    def answered_rate(self) -> float:
        """Share of questions with at least one correct option, in percent."""
        if self.total_questions == 0:
            return 0.0
        answered = self.total_questions - len(
            self.questions_without_correct_answer
        )
        return round(answered / self.total_questions * 100, 2)
