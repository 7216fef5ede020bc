"""
Line Classifier
===============
Pattern set and ordered rule pipeline for the Fragenkatalog text layout.

Catalog layout as emitted by pdftotext (one item per line):

    1. Sachgebiet: Jagdwaffen, Jagd- und Fanggeräte
    3.1 Lang- und Kurzwaffen
    12.
    Was versteht man unter ...
    a) erste Antwort
    X
    b) zweite Antwort
    X c) dritte Antwort

Every trimmed line runs through RULES in order. Rules are independent
predicates; the state machine decides what a match does.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple, Optional

from .models import LineKind

# ─── Markers ──────────────────────────────────────────────────────────────────

CATEGORY_MARKER = "Sachgebiet"

DATE_STAMP_MARKER = "Stand:"

# Date stamp, page label, reviewer and publisher lines in headers/footers
BOILERPLATE_MARKERS: tuple[str, ...] = (
    DATE_STAMP_MARKER,
    "Seite",
    "Zweitkorrektor",
    "HERAUSGEBER",
)

# Lines scanned backwards from the first subsection header for a category
CATEGORY_SEED_LOOKBACK = 50

# ─── Patterns ─────────────────────────────────────────────────────────────────

# "3.1 Lang- und Kurzwaffen" (whitespace after the second number is required)
SUBSECTION_HEADER_PATTERN = re.compile(r"^\s*\d+\.\d+\s+", re.ASCII)

# "12." with the question text on the following lines
QUESTION_NUMBER_PATTERN = re.compile(r"^\s*(\d+)\.\s*$", re.ASCII)

# "12. Was versteht man unter ...?"
QUESTION_INLINE_PATTERN = re.compile(r"^\s*(\d+)\.\s+(.+)$", re.ASCII)

# "X" alone: the next option is the correct one
CORRECT_MARKER_PATTERN = re.compile(r"^\s*X\s*$", re.ASCII)

# "X b) Antwort"
OPTION_MARKED_PATTERN = re.compile(r"^\s*X\s+([a-f])\)\s*(.*)$", re.ASCII)

# "b) Antwort"
OPTION_PATTERN = re.compile(r"^\s*([a-f])\)\s*(.*)$", re.ASCII)


# ─── Predicates ───────────────────────────────────────────────────────────────


def is_blank(line: str) -> bool:
    return not line.strip()


def is_category_line(line: str) -> bool:
    """Category lines carry the marker token together with a colon."""
    return CATEGORY_MARKER in line and ":" in line


def is_boilerplate(line: str) -> bool:
    return any(marker in line for marker in BOILERPLATE_MARKERS)


def match_inline_question(line: str) -> Optional[re.Match]:
    """
    Numbered line with text on the same line.

    Only lines whose text contains a question mark count; numbered
    headings like "1. Sachgebiet: ..." share the shape but are not
    questions.
    """
    m = QUESTION_INLINE_PATTERN.match(line)
    if m and "?" in m.group(2):
        return m
    return None


def is_question_line(line: str) -> bool:
    """Either numbered shape, with or without a question mark."""
    return bool(
        QUESTION_NUMBER_PATTERN.match(line)
        or QUESTION_INLINE_PATTERN.match(line)
    )


def is_option_line(line: str) -> bool:
    """Option shape, with or without the inline correctness marker."""
    return bool(OPTION_PATTERN.match(line) or OPTION_MARKED_PATTERN.match(line))


def parse_number(raw: str) -> Optional[int]:
    """Question numbers must be positive integers; anything else is skipped."""
    try:
        number = int(raw)
    except ValueError:
        return None
    return number if number >= 1 else None


# ─── Rule Pipeline ────────────────────────────────────────────────────────────


class LineRule(NamedTuple):
    """A single classification rule; ``match`` returns a truthy hit."""
    kind: LineKind
    match: Callable[[str], object]


RULES: tuple[LineRule, ...] = (
    LineRule(LineKind.BLANK, is_blank),
    LineRule(LineKind.CATEGORY, is_category_line),
    LineRule(LineKind.BOILERPLATE, is_boilerplate),
    LineRule(LineKind.QUESTION_NUMBER, QUESTION_NUMBER_PATTERN.match),
    LineRule(LineKind.QUESTION_INLINE, match_inline_question),
    LineRule(LineKind.CORRECT_MARKER, CORRECT_MARKER_PATTERN.match),
    LineRule(LineKind.OPTION_MARKED, OPTION_MARKED_PATTERN.match),
    LineRule(LineKind.OPTION, OPTION_PATTERN.match),
)


def classify_line(line: str) -> LineKind:
    """Kind of the first rule matching the trimmed line."""
    stripped = line.strip()
    for rule in RULES:
        if rule.match(stripped):
            return rule.kind
    return LineKind.OTHER


# ─── Header Skip ──────────────────────────────────────────────────────────────


def find_content_start(lines: list[str]) -> tuple[int, str]:
    """
    Locate the first subsection header and the category in effect there.

    Cover page and table of contents precede the first "<n>.<m> <text>"
    line. The category is taken from the nearest category line within
    CATEGORY_SEED_LOOKBACK lines above the header.

    Returns:
        (start_index, category). (0, "") when no header exists.
    """
    for i, line in enumerate(lines):
        if not SUBSECTION_HEADER_PATTERN.match(line.strip()):
            continue

        for j in range(i - 1, max(i - CATEGORY_SEED_LOOKBACK, 0) - 1, -1):
            candidate = lines[j].strip()
            if is_category_line(candidate):
                return i, candidate
        return i, ""

    return 0, ""
