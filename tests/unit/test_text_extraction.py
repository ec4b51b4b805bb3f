"""Tests for document text extraction."""
import io

import pytest

from defcite.documents import SUPPORTED_MIME_TYPES, extract_text
from defcite.documents.text_extraction import DOCX, PDF, PLAIN_TEXT
from defcite.errors import DocumentExtractionError, UnsupportedDocumentError


class TestExtractText:
    """Tests for extract_text."""

    def test_plain_text_is_cleaned(self):
        """Control characters and CRLF line endings are normalized."""
        text = extract_text(b"  Algoritma\r\nadalah\x00langkah.  ", PLAIN_TEXT)
        assert text == "Algoritma\nadalah langkah."

    def test_invalid_utf8_is_replaced(self):
        text = extract_text("Algoritma".encode() + b"\xff", PLAIN_TEXT)
        assert text.startswith("Algoritma")

    def test_docx(self):
        from docx import Document

        document = Document()
        document.add_paragraph("Algoritma adalah urutan langkah yang sistematis.")
        document.add_paragraph("Paragraf kedua.")
        buffer = io.BytesIO()
        document.save(buffer)

        text = extract_text(buffer.getvalue(), DOCX)
        assert "Algoritma adalah urutan langkah yang sistematis.\nParagraf kedua." in text

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedDocumentError) as exc:
            extract_text(b"\x89PNG", "image/png")
        assert exc.value.mime_type == "image/png"

    def test_corrupt_pdf(self):
        with pytest.raises(DocumentExtractionError):
            extract_text(b"this is not a pdf", PDF)

    def test_supported_types(self):
        assert set(SUPPORTED_MIME_TYPES) == {PDF, DOCX, PLAIN_TEXT}
