"""
Multi-line Field Accumulator
============================
Question and option texts wrap over several lines in the extracted text.
Each opening line pulls in the following lines until a terminator or the
end of its lookahead window.

Windows are counted in raw lines from the opening line (blank lines
included), so each opening line costs at most a small constant amount of
extra scanning.
"""

from __future__ import annotations

import re
from typing import Callable

from .classifier import (
    CORRECT_MARKER_PATTERN,
    OPTION_PATTERN,
    is_boilerplate,
    is_category_line,
    is_option_line,
    is_question_line,
)

# ─── Lookahead Windows ────────────────────────────────────────────────────────

QUESTION_NUMBER_WINDOW = 15
QUESTION_INLINE_WINDOW = 10
OPTION_WINDOW = 8

# ─── Cleanup Patterns ─────────────────────────────────────────────────────────

# "... X a)" swept in from the next option line
_TRAILING_MARKED_LEAD_IN = re.compile(r"\s+X\s+[a-f]\)\s*$", re.ASCII)
# "... X a) Antwort" swept in by the inline path, with everything after it
_MARKED_OPTION_TAIL = re.compile(r"\s+X\s+[a-f]\).*$", re.ASCII)
_TRAILING_MARKER = re.compile(r"\s+X\s*$", re.ASCII)
_TRAILING_LETTER = re.compile(r"\s+[a-f]\)\s*$", re.ASCII)


# ─── Terminators ──────────────────────────────────────────────────────────────


def stops_question_number(line: str) -> bool:
    return (
        is_option_line(line)
        or bool(CORRECT_MARKER_PATTERN.match(line))
        or is_question_line(line)
    )


def stops_question_inline(line: str) -> bool:
    # Marked options are swept in here and cut off again during cleanup
    return bool(OPTION_PATTERN.match(line)) or is_question_line(line)


def stops_option(line: str) -> bool:
    return (
        is_option_line(line)
        or is_question_line(line)
        or is_category_line(line)
        or is_boilerplate(line)
    )


# ─── Accumulation ─────────────────────────────────────────────────────────────


def accumulate(
    lines: list[str],
    start: int,
    head: str,
    window: int,
    stop: Callable[[str], bool],
) -> str:
    """
    Join continuation lines following ``lines[start]`` onto ``head``.

    Args:
        lines: All document lines.
        start: Index of the opening line.
        head: Text already taken from the opening line (may be empty).
        window: Lookahead bound; lines start+1 .. start+window-1 are read.
        stop: Terminator predicate, applied to each trimmed line.

    Returns:
        The joined text, space separated and not yet cleaned up.
    """
    parts = [head] if head else []
    end = min(len(lines), start + window)

    for j in range(start + 1, end):
        next_line = lines[j].strip()
        if not next_line:
            continue
        if stop(next_line):
            break
        parts.append(next_line)

    return " ".join(parts)


def collect_question_number_text(lines: list[str], start: int) -> str:
    """Text of a question whose number stands alone on its line."""
    text = accumulate(
        lines, start, "", QUESTION_NUMBER_WINDOW, stops_question_number
    ).strip()
    return _TRAILING_MARKED_LEAD_IN.sub("", text)


def collect_question_inline_text(lines: list[str], start: int, head: str) -> str:
    """Text of a question that starts on the numbered line itself."""
    text = accumulate(
        lines, start, head.strip(), QUESTION_INLINE_WINDOW, stops_question_inline
    ).strip()
    text = text.replace("  ", " ")
    text = _MARKED_OPTION_TAIL.sub("", text)
    return text.strip()


def collect_option_text(lines: list[str], start: int, head: str) -> str:
    """Text of an option, minus a stray trailing marker or letter."""
    text = accumulate(
        lines, start, head.strip(), OPTION_WINDOW, stops_option
    ).strip()
    text = _TRAILING_MARKER.sub("", text)
    text = _TRAILING_LETTER.sub("", text)
    return text.strip()
