"""
Fragenkatalog Parser Engine
===========================
Main orchestrator that combines text extraction, state machine parsing
and validation into a complete parsing pipeline.

Usage:
    engine = ParserEngine(config)
    catalog = engine.parse("path/to/fragekatalog_2025_sg1.pdf")
    # catalog is a frozen QuestionCatalog

Architecture:
    PDF → PdfToTextSource → lines → StateMachineParser →
    QuestionCatalog → ValidationEngine → ValidationReport
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import QuestionCatalog, ValidationReport
from .state_machine import CatalogHeader, StateMachineParser
from .text_source import PdfToTextSource, split_lines
from .validator import ValidationEngine

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Catalog metadata
    title: str = "Jagdfrageprüfer Bayern"
    year: int = 2025
    state: str = "by"
    subject: str = "Jagdwaffen, Jagd- und Fanggeräte"

    # Text extraction
    pdftotext_path: str = "pdftotext"
    extraction_timeout: Optional[float] = None

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def catalog_header(self) -> CatalogHeader:
        return CatalogHeader(
            title=self.title,
            year=self.year,
            state=self.state,
            subject=self.subject,
        )


class ParserEngine:
    """
    Main catalog parsing engine.

    Orchestrates the pipeline:
        1. Text extraction (pdftotext)
        2. State machine parsing (structure detection)
        3. Finalization into a QuestionCatalog
        4. Validation (report kept in ``last_report``)

    Each parse uses a fresh StateMachineParser; nothing is shared between
    documents.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.text_source = PdfToTextSource(
            executable=self.config.pdftotext_path,
            timeout=self.config.extraction_timeout,
        )
        self.last_report: Optional[ValidationReport] = None
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("fragekatalog")
        package_logger.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(console)
        else:
            for handler in package_logger.handlers:
                handler.setLevel(log_level)

        # File handler
        if self.config.log_file:
            log_path = Path(self.config.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            already_attached = any(
                isinstance(h, logging.FileHandler)
                and Path(h.baseFilename) == log_path.resolve()
                for h in package_logger.handlers
            )
            if not already_attached:
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setLevel(log_level)
                file_handler.setFormatter(
                    logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
                )
                package_logger.addHandler(file_handler)

    def parse(self, pdf_path: str) -> QuestionCatalog:
        """
        Parse a catalog PDF into structured questions.

        Args:
            pdf_path: Path to the PDF file to parse.

        Returns:
            QuestionCatalog with all complete questions.

        Raises:
            FileNotFoundError: If the PDF file doesn't exist.
            ExtractionError: If pdftotext is missing or fails.
        """
        pdf_path = os.path.abspath(pdf_path)

        if not os.path.exists(pdf_path):
            raise FileNotFoundError(f"PDF not found: {pdf_path}")

        start_time = time.time()
        logger.info(f"Starting parse of: {pdf_path}")

        # ── Step 1: Extract text ──────────────────────────────────────
        logger.info("Phase 1: Text extraction")
        lines = self.text_source.read_lines(pdf_path)

        # ── Step 2: State machine parsing ─────────────────────────────
        logger.info("Phase 2: State machine parsing")
        catalog = self.parse_lines(lines)

        # ── Step 3: Validation ────────────────────────────────────────
        logger.info("Phase 3: Validation")
        self.last_report = self.validate(catalog)

        elapsed = time.time() - start_time
        logger.info(
            f"Parse complete in {elapsed:.2f}s, "
            f"{catalog.total_count} questions extracted"
        )
        return catalog

    def parse_text(self, text: str) -> QuestionCatalog:
        """Parse text that was already extracted from a catalog PDF."""
        return self.parse_lines(split_lines(text))

    def parse_lines(
        self,
        lines: list[str],
        last_modified: Optional[str] = None,
    ) -> QuestionCatalog:
        parser = StateMachineParser(self.config.catalog_header())
        return parser.parse_lines(lines, last_modified=last_modified)

    def validate(self, catalog: QuestionCatalog) -> ValidationReport:
        return ValidationEngine().validate(catalog.questions)
