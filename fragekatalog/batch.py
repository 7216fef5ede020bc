"""
Batch Processing
================
Parses every Sachgebiet PDF of a directory and merges the results.

Files follow the naming convention ``fragekatalog_<year>_sg<N>.pdf``;
they are processed one after another in ascending order of N and their
question lists are concatenated without deduplication.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .engine import ParserEngine
from .models import Question, QuestionCatalog
from .state_machine import current_timestamp
from .text_source import ExtractionError

logger = logging.getLogger(__name__)

MERGED_TITLE = "Jagdfrageprüfer Bayern - Alle Sachgebiete"
MERGED_SUBJECT = "Alle Sachgebiete (SG 1-6)"

_SECTION_SUFFIX = re.compile(r"^(\d+)", re.ASCII)


@dataclass(frozen=True)
class SectionFile:
    """A catalog PDF and its Sachgebiet number."""
    number: int
    path: Path


@dataclass
class BatchResult:
    """Merged catalog plus per-file outcome."""
    catalog: QuestionCatalog
    parsed: list[tuple[SectionFile, int]] = field(default_factory=list)
    failed: list[tuple[SectionFile, str]] = field(default_factory=list)


def section_number(filename: str) -> Optional[int]:
    """
    Sachgebiet number encoded after ``_sg`` in a file name.

    "fragekatalog_2025_sg3.pdf" → 3. Returns None for names without
    exactly one ``_sg`` or without a positive number after it.
    """
    if not filename.endswith(".pdf"):
        return None
    parts = filename.split("_sg")
    if len(parts) != 2:
        return None
    m = _SECTION_SUFFIX.match(parts[1][: -len(".pdf")])
    if not m:
        return None
    number = int(m.group(1))
    return number if number > 0 else None


def discover_section_files(directory: str) -> list[SectionFile]:
    """All Sachgebiet PDFs in ``directory``, sorted by their number."""
    files = []
    for entry in Path(directory).iterdir():
        if not entry.is_file():
            continue
        number = section_number(entry.name)
        if number is not None:
            files.append(SectionFile(number=number, path=entry))

    files.sort(key=lambda f: f.number)
    return files


def parse_batch(
    engine: ParserEngine,
    directory: str,
    title: str = MERGED_TITLE,
    subject: str = MERGED_SUBJECT,
    progress_callback: Optional[Callable[[SectionFile], None]] = None,
) -> BatchResult:
    """
    Parse all Sachgebiet PDFs of a directory into one catalog.

    A file that cannot be extracted is logged and skipped; the remaining
    files are still processed.

    Raises:
        FileNotFoundError: If the directory holds no Sachgebiet PDFs.
    """
    section_files = discover_section_files(directory)
    if not section_files:
        raise FileNotFoundError(f"No *_sg<N>.pdf files found in {directory}")

    logger.info(f"Found {len(section_files)} PDF files to process")

    questions: list[Question] = []
    parsed: list[tuple[SectionFile, int]] = []
    failed: list[tuple[SectionFile, str]] = []

    for section in section_files:
        if progress_callback:
            progress_callback(section)

        logger.info(f"Processing SG{section.number}: {section.path.name}")
        try:
            catalog = engine.parse(str(section.path))
        except ExtractionError as e:
            logger.warning(f"Skipping {section.path.name}: {e}")
            failed.append((section, str(e)))
            continue

        questions.extend(catalog.questions)
        parsed.append((section, catalog.total_count))

    config = engine.config
    merged = QuestionCatalog(
        title=title,
        year=config.year,
        state=config.state,
        subject=subject,
        total_count=len(questions),
        questions=questions,
        last_modified=current_timestamp(),
    )

    logger.info(
        f"Merged {merged.total_count} questions from {len(parsed)} files, "
        f"{len(failed)} failures"
    )
    return BatchResult(catalog=merged, parsed=parsed, failed=failed)
