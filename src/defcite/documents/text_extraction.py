"""Raw text extraction from uploaded documents.

Supported MIME types: PDF (pypdf), DOCX (python-docx) and plain text.
"""

from __future__ import annotations

import io
import logging

from defcite.errors import DocumentExtractionError, UnsupportedDocumentError
from defcite.shared.text import clean_text

logger = logging.getLogger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PLAIN_TEXT = "text/plain"
SUPPORTED_MIME_TYPES = (PDF, DOCX, PLAIN_TEXT)


def _pdf_text(data: bytes) -> str:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _docx_text(data: bytes) -> str:
    from docx import Document

    document = Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _plain_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


_EXTRACTORS = {
    PDF: _pdf_text,
    DOCX: _docx_text,
    PLAIN_TEXT: _plain_text,
}


def extract_text(data: bytes, mime_type: str) -> str:
    """Decode *data* of *mime_type* into cleaned text.

    Raises:
        UnsupportedDocumentError: no extractor for *mime_type*.
        DocumentExtractionError: the decoder failed on *data*.
    """
    extractor = _EXTRACTORS.get(mime_type)
    if extractor is None:
        raise UnsupportedDocumentError(mime_type)

    try:
        text = extractor(data)
    except Exception as e:
        logger.error("Text extraction failed for %s: %s: %s", mime_type, type(e).__name__, e)
        raise DocumentExtractionError("Failed to extract text from document") from e

    return clean_text(text)
