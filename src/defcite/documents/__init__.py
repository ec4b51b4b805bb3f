"""Document collaborators: raw text extraction and persistence."""
from defcite.documents.storage import SQLiteStorage
from defcite.documents.text_extraction import SUPPORTED_MIME_TYPES, extract_text

__all__ = ["SQLiteStorage", "extract_text", "SUPPORTED_MIME_TYPES"]
