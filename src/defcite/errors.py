"""Exception hierarchy shared by the extraction, paraphrase and service layers."""


class DefciteError(Exception):
    """Base class for all defcite errors."""


class ValidationError(DefciteError, ValueError):
    """Request input failed boundary validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UnsupportedDocumentError(DefciteError):
    """The document MIME type has no text extractor."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(f"Unsupported document type: {mime_type}")
        self.mime_type = mime_type


class DocumentExtractionError(DefciteError):
    """A supported document could not be decoded into text."""


class GenerationError(DefciteError):
    """The text-generation collaborator failed or returned nothing usable."""


class DocumentNotFoundError(DefciteError):
    """No stored document matches the id for the requesting user."""
