"""
Text Source
===========
Obtains the linearized text of a catalog PDF from the external
``pdftotext`` tool (poppler-utils).

The tool is invoked once per document with the path and ``-`` so the
text is written to stdout. Its reading order is taken as-is; no layout
reconstruction happens here.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ExtractionError(RuntimeError):
    """The external text extraction tool is unavailable or failed."""

    def __init__(
        self,
        message: str,
        pdf_path: str = "",
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.pdf_path = pdf_path
        self.returncode = returncode
        self.stderr = stderr


def split_lines(text: str) -> list[str]:
    """Split extracted text into lines, keeping blank lines."""
    return text.split("\n")


class PdfToTextSource:
    """
    Runs pdftotext as a blocking subprocess.

    No retry: a missing binary or a non-zero exit status is raised as
    ExtractionError with the underlying cause attached.
    """

    def __init__(self, executable: str = "pdftotext", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def read_text(self, pdf_path: str) -> str:
        cmd = [self.executable, str(pdf_path), "-"]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                check=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            logger.error(f"Text extraction tool not found: {self.executable}")
            raise ExtractionError(
                f"{self.executable} not found; install poppler-utils",
                pdf_path=str(pdf_path),
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            logger.error(
                f"{self.executable} failed for {Path(pdf_path).name} "
                f"(exit {e.returncode}): {stderr}"
            )
            raise ExtractionError(
                f"{self.executable} failed with exit status {e.returncode}",
                pdf_path=str(pdf_path),
                returncode=e.returncode,
                stderr=stderr,
            ) from e
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Could not run {self.executable}: {e}")
            raise ExtractionError(
                f"could not run {self.executable}: {e}",
                pdf_path=str(pdf_path),
            ) from e

        return completed.stdout.decode("utf-8", errors="replace")

    def read_lines(self, pdf_path: str) -> list[str]:
        """
        Extract the document as an ordered list of lines.

        Args:
            pdf_path: Path to the catalog PDF.

        Returns:
            Lines in top-to-bottom reading order as emitted by pdftotext.

        Raises:
            ExtractionError: If the tool is missing or exits with failure.
        """
        lines = split_lines(self.read_text(pdf_path))
        logger.info(f"Extracted {len(lines)} lines from {Path(pdf_path).name}")
        return lines
