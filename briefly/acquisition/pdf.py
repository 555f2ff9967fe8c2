"""PDF text extraction with pdfplumber."""

from __future__ import annotations

import io

from briefly.errors import ExtractionError
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter

logger = get_logger(__name__)


def extract_pdf_text(data: bytes) -> str:
    """
    Extract the text layer of an in-memory PDF, pages joined by blank lines.

    Raises:
        ExtractionError: If the PDF cannot be parsed or has no text layer.
    """
    import pdfplumber

    pages: list[str] = []
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                text = page.extract_text() or ""
                if text.strip():
                    pages.append(text.strip())
            total_pages = len(pdf.pages)
    except Exception as e:
        counter("notegen.acquire.pdf_error")
        logger.error("PDF parsing failed: %s", e)
        raise ExtractionError(f"Failed to extract text from PDF: {e}") from e

    full_text = "\n\n".join(pages)
    if not full_text.strip():
        counter("notegen.acquire.pdf_empty")
        raise ExtractionError("No text could be extracted from the PDF")

    logger.info("Extracted %d chars from %d/%d PDF pages", len(full_text), len(pages), total_pages)
    return full_text
