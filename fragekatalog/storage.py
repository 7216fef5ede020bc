"""
Catalog Storage
===============
Reads and writes questions.json files.

Layout:
    <pdf dir>/questions.json       # single document
    <batch dir>/questions.json     # merged Sachgebiete
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .models import QuestionCatalog

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "questions.json"


def default_output_path(input_path: str) -> Path:
    """
    questions.json inside a batch directory, or beside a single PDF.
    """
    path = Path(input_path)
    if path.is_dir():
        return path / DEFAULT_OUTPUT_NAME
    return path.parent / DEFAULT_OUTPUT_NAME


def write_catalog(catalog: QuestionCatalog, filepath: str | Path) -> Path:
    """Write the catalog as indented UTF-8 JSON with camelCase keys."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(catalog.to_json(indent=2))
    logger.info(f"Saved {catalog.total_count} questions to: {path}")
    return path


def load_catalog(filepath: str | Path) -> QuestionCatalog:
    """Load a previously written questions.json."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return QuestionCatalog.model_validate(data)
