"""Extractors for uploaded files (plain text and PDF)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from studyquiz.errors import ExtractionError
from studyquiz.models.source import SourceType

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"


def validate_file_type(filename: str, allowed_extensions: list[str]) -> bool:
    """Case-insensitive suffix check, e.g. ``("report.PDF", [".pdf"]) -> True``."""
    if "." not in filename:
        return False
    extension = "." + filename.lower().rsplit(".", 1)[1]
    return extension in {ext.lower() for ext in allowed_extensions}


def process_text_file(path: str | Path) -> str:
    """Return the file's contents decoded as UTF-8, verbatim."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read text file %s: %s", path, exc)
        raise ExtractionError(
            "Failed to read text file. Please ensure the file is valid text format."
        ) from exc


def process_pdf(path: str | Path) -> str:
    """Check the PDF is readable and return placeholder text for it.

    No text is actually pulled out of the document yet; callers get a fixed
    description so question generation has something to work with.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        logger.warning("Could not read PDF %s: %s", path, exc)
        raise ExtractionError(
            "Failed to process PDF file. Please ensure the file is a valid PDF."
        ) from exc

    if not data.startswith(PDF_SIGNATURE):
        raise ExtractionError("Failed to process PDF file. Please ensure the file is a valid PDF.")

    return (
        "PDF content extracted from file. A full text extraction step would "
        f"return the actual text content of the PDF file at {path}."
    )


class TextFileExtractor:
    source_type = SourceType.TEXT
    allowed_extensions = [".txt"]

    async def extract(self, target: str) -> str:
        return await asyncio.to_thread(process_text_file, target)


class PdfExtractor:
    source_type = SourceType.PDF
    allowed_extensions = [".pdf"]

    async def extract(self, target: str) -> str:
        return await asyncio.to_thread(process_pdf, target)
