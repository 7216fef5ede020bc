"""
State Machine Parser
====================
Deterministic line-oriented state machine turning extracted catalog text
into QuestionDraft entities, and drafts into the final QuestionCatalog.

Correctness marking comes in two shapes:
    - inline:     "X b) Antwort"        → option b is correct
    - standalone: "X" then "b) Antwort" → the next option only is correct
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .accumulator import (
    collect_option_text,
    collect_question_inline_text,
    collect_question_number_text,
)
from .classifier import RULES, find_content_start, parse_number
from .models import (
    LineKind,
    OptionDraft,
    Question,
    QuestionCatalog,
    QuestionDraft,
)

logger = logging.getLogger(__name__)


def current_timestamp() -> str:
    """Local time in RFC3339 format, second precision."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


@dataclass
class CatalogHeader:
    """Descriptive fields copied onto the finished catalog."""
    title: str = "Jagdfrageprüfer Bayern"
    year: int = 2025
    state: str = "by"
    subject: str = "Jagdwaffen, Jagd- und Fanggeräte"


@dataclass
class ParseSession:
    """
    Mutable state of one parse run. Never shared between documents.
    """
    last_question_number: int = 0
    pending_correct: bool = False
    category: str = ""
    drafts: dict[int, QuestionDraft] = field(default_factory=dict)

    @property
    def current_draft(self) -> Optional[QuestionDraft]:
        if self.last_question_number == 0:
            return None
        return self.drafts.get(self.last_question_number)


class StateMachineParser:
    """
    Runs every line through the classifier rules and applies the matching
    handlers to a ParseSession.

    Handlers return True when processing of the current line stops.
    """

    def __init__(self, header: Optional[CatalogHeader] = None):
        self.header = header or CatalogHeader()
        self.session = ParseSession()
        self._handlers = {
            LineKind.BLANK: self._on_blank,
            LineKind.CATEGORY: self._on_category,
            LineKind.BOILERPLATE: self._on_boilerplate,
            LineKind.QUESTION_NUMBER: self._on_question_number,
            LineKind.QUESTION_INLINE: self._on_question_inline,
            LineKind.CORRECT_MARKER: self._on_correct_marker,
            LineKind.OPTION_MARKED: self._on_option_marked,
            LineKind.OPTION: self._on_option,
        }

    def reset(self):
        """Reset the state machine for a fresh parsing run."""
        self.session = ParseSession()

    def parse_lines(
        self,
        lines: list[str],
        last_modified: Optional[str] = None,
    ) -> QuestionCatalog:
        """
        Parse extracted lines into a finished catalog.

        Args:
            lines: Document lines in reading order.
            last_modified: Timestamp to stamp on the catalog; defaults to now.

        Returns:
            QuestionCatalog with questions ordered by number.
        """
        self.reset()
        self.run(lines)
        return finalize(
            self.session,
            self.header,
            last_modified or current_timestamp(),
        )

    def run(self, lines: list[str]) -> ParseSession:
        """Feed all lines after the header skip into the session."""
        start, category = find_content_start(lines)
        self.session.category = category
        logger.debug(
            f"Content starts at line {start}, category {category!r}"
        )

        for i in range(start, len(lines)):
            self.process_line(lines, i)

        logger.info(
            f"State machine done: {len(self.session.drafts)} drafts "
            f"from {len(lines) - start} lines"
        )
        return self.session

    def process_line(self, lines: list[str], index: int):
        """Apply the rule pipeline to ``lines[index]``."""
        line = lines[index].strip()
        for rule in RULES:
            hit = rule.match(line)
            if not hit:
                continue
            if self._handlers[rule.kind](lines, index, line, hit):
                return

    # ─── Handlers ─────────────────────────────────────────────────────────

    def _on_blank(self, lines, index, line, hit) -> bool:
        return True

    def _on_category(self, lines, index, line, hit) -> bool:
        if line != self.session.category:
            logger.debug(f"Category: {line}")
        self.session.category = line
        return False

    def _on_boilerplate(self, lines, index, line, hit) -> bool:
        return True

    def _on_question_number(self, lines, index, line, hit: re.Match) -> bool:
        number = parse_number(hit.group(1))
        if number is None:
            return True

        text = collect_question_number_text(lines, index)
        self._commit_question(number, text)
        return False

    def _on_question_inline(self, lines, index, line, hit: re.Match) -> bool:
        number = parse_number(hit.group(1))
        if number is None:
            return True

        text = collect_question_inline_text(lines, index, hit.group(2))
        self._commit_question(number, text)
        return False

    def _on_correct_marker(self, lines, index, line, hit) -> bool:
        if self.session.last_question_number > 0:
            self.session.pending_correct = True
        return True

    def _on_option_marked(self, lines, index, line, hit: re.Match) -> bool:
        text = collect_option_text(lines, index, hit.group(2))
        self.session.pending_correct = False
        self._commit_option(hit.group(1), text, True)
        return True

    def _on_option(self, lines, index, line, hit: re.Match) -> bool:
        text = collect_option_text(lines, index, hit.group(2))
        correct = self.session.pending_correct
        self.session.pending_correct = False
        self._commit_option(hit.group(1), text, correct)
        return True

    # ─── Assembly ─────────────────────────────────────────────────────────

    def _commit_question(self, number: int, text: str):
        """Open question ``number``; store a draft when the text is usable."""
        session = self.session
        session.last_question_number = number

        if len(text) <= 5:
            logger.debug(f"Question {number}: text too short, no draft")
            return

        if number in session.drafts:
            logger.debug(f"Question {number} seen again, replacing draft")

        session.drafts[number] = QuestionDraft(
            number=number,
            text=text,
            category=session.category,
        )

    def _commit_option(self, letter: str, text: str, correct: bool):
        """Attach an option to the open question, if it has a draft."""
        draft = self.session.current_draft
        if draft is None:
            return

        draft.options[letter] = OptionDraft(
            letter=letter,
            text=text,
            correct=correct,
        )


# ─── Finalizer ────────────────────────────────────────────────────────────────


def finalize(
    session: ParseSession,
    header: CatalogHeader,
    last_modified: str,
) -> QuestionCatalog:
    """
    Promote complete drafts to Questions, ordered by number.

    Drafts with text of 5 characters or less, or without options, are
    dropped without notice.
    """
    questions: list[Question] = []
    for number in sorted(session.drafts):
        draft = session.drafts[number]
        if not draft.is_complete:
            continue
        questions.append(Question(
            id=draft.number,
            text=draft.text,
            options=draft.ordered_options(),
            category=draft.category,
        ))

    dropped = len(session.drafts) - len(questions)
    if dropped:
        logger.debug(f"Dropped {dropped} incomplete drafts")

    return QuestionCatalog(
        title=header.title,
        year=header.year,
        state=header.state,
        subject=header.subject,
        total_count=len(questions),
        questions=questions,
        last_modified=last_modified,
    )
