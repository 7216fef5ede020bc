"""
Validation Engine
=================
Post-parse reporting for a finished catalog.

Generates:
    - Total Questions / Options / Correct Answers
    - Missing Question Numbers (gaps in sequence)
    - Duplicate Question Numbers (merged batch catalogs)
    - Questions Without Correct Answer
    - Questions With Letter Gaps (e.g. options a and d only)
    - Question count per category

Reporting only: the catalog is never filtered or rejected here.
"""

from __future__ import annotations

import logging
from collections import Counter

from .models import OPTION_LETTERS, Question, ValidationReport

logger = logging.getLogger(__name__)


def has_letter_gap(question: Question) -> bool:
    """True when the option letters are not a contiguous run from 'a'."""
    letters = [o.letter for o in question.options]
    return letters != list(OPTION_LETTERS[:len(letters)])


class ValidationEngine:
    """
    Summarizes parsed questions into a ValidationReport.
    """

    def validate(self, questions: list[Question]) -> ValidationReport:
        """
        Run all checks on the given questions.

        Args:
            questions: Finalized questions of one catalog.

        Returns:
            ValidationReport with statistics and detected issues.
        """
        report = ValidationReport()

        if not questions:
            logger.warning("No questions to validate")
            return report

        report.total_questions = len(questions)
        report.total_options = sum(len(q.options) for q in questions)
        report.correct_answers = sum(len(q.correct_letters) for q in questions)

        numbers = [q.id for q in questions]
        number_counts = Counter(numbers)
        report.duplicate_question_numbers = sorted(
            num for num, count in number_counts.items() if count > 1
        )

        expected = set(range(min(numbers), max(numbers) + 1))
        report.missing_question_numbers = sorted(expected - set(numbers))

        report.questions_without_correct_answer = [
            q.id for q in questions if not q.correct_letters
        ]
        report.questions_with_letter_gaps = [
            q.id for q in questions if has_letter_gap(q)
        ]
        report.category_breakdown = dict(Counter(q.category for q in questions))

        logger.info("=" * 60)
        logger.info("VALIDATION REPORT")
        logger.info("=" * 60)
        logger.info(f"Total Questions: {report.total_questions}")
        logger.info(f"Correct Answers: {report.correct_answers}")
        logger.info(
            f"Missing Question Numbers: {len(report.missing_question_numbers)}"
        )
        logger.info(
            f"Duplicate Question Numbers: "
            f"{len(report.duplicate_question_numbers)}"
        )
        logger.info(
            f"Questions Without Correct Answer: "
            f"{len(report.questions_without_correct_answer)}"
        )
        logger.info(
            f"Questions With Letter Gaps: "
            f"{len(report.questions_with_letter_gaps)}"
        )
        logger.info("=" * 60)

        return report
