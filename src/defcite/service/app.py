"""FastAPI application for definition paraphrasing and citation.

Endpoints:
- POST /documents/upload - Store an uploaded document (PDF, DOCX, TXT)
- POST /documents/paraphrase-text - Paraphrase a definition typed by the user
- POST /documents/process - Find, paraphrase and cite a keyword in a stored document
- GET /documents/history - The caller's processed documents, newest first
- GET /health - Service health status

Request authentication happens upstream; the authenticated user id is
passed in the ``X-User-Id`` header.

Environment variables: see :mod:`defcite.config`.

Usage:
    uvicorn defcite.service.app:app --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from defcite.config import (
    CitationFormat,
    ProcessingOptions,
    Settings,
    coerce_sentence_count,
    validate_definition_text,
    validate_request,
)
from defcite.documents import SQLiteStorage, extract_text
from defcite.errors import (
    DefciteError,
    DocumentExtractionError,
    DocumentNotFoundError,
    UnsupportedDocumentError,
    ValidationError,
)
from defcite.shared.llm import TextGenerator, get_provider
from defcite.shared.text import count_sentences
from defcite.workflow import ProcessingResult, paraphrase_text, process_document

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


class ParaphraseTextRequest(BaseModel):
    """Request body for /documents/paraphrase-text."""
    original_text: str = Field(..., description="Definition text to paraphrase")
    keyword: str
    author: str
    year: int | str
    citation_format: str = Field(default="APA", description="APA, MLA or CHICAGO")
    sentence_count: int | str | None = Field(default=None, description="1-5, defaults to 2")
    additional_info: str | dict[str, Any] | None = Field(
        default=None, description='Legacy options blob, e.g. {"sentenceCount": 3}'
    )


class ProcessRequest(BaseModel):
    """Request body for /documents/process."""
    document_id: str


class UploadResponse(BaseModel):
    document_id: str
    filename: str
    keyword: str
    author: str
    publication_year: int
    sentence_count: int
    text_length: int


class SentenceAnalysisModel(BaseModel):
    target_sentences: int
    actual_sentences: int
    original_sentences: int
    processing_success: bool


class ProcessResponse(BaseModel):
    """Response body for /documents/process and /documents/paraphrase-text."""
    document_id: str
    keyword: str
    author: str
    publication_year: int
    definition_found: bool
    confidence_level: str
    original_definition: str
    paraphrased: str
    in_text_citation: str
    alternative_citations: list[str]
    bibliography: str
    alternative_bibliographies: list[str]
    citation_format: str
    sentence_analysis: SentenceAnalysisModel
    processing_notes: str


class HistoryItem(BaseModel):
    id: str
    filename: str
    keyword: str
    citation_format: str
    paraphrased: str | None
    citation: str | None
    bibliography: str | None
    definition_found: bool | None
    original_definition: str | None
    author: str
    publication_year: int
    created_at: str | None
    sentence_info: dict[str, Any]


class HistoryResponse(BaseModel):
    documents: list[HistoryItem]


class HealthResponse(BaseModel):
    status: str
    document_count: int
    model: str


def _options(
    sentence_count: int | str | None,
    additional_info: str | dict[str, Any] | None,
    citation_format: str | None,
) -> ProcessingOptions:
    if sentence_count is not None and sentence_count != "":
        return ProcessingOptions(
            sentence_count=coerce_sentence_count(sentence_count),
            citation_format=CitationFormat.parse(citation_format),
        )
    return ProcessingOptions.from_additional_info(additional_info, citation_format)


def _to_response(document_id: str, result: ProcessingResult) -> ProcessResponse:
    analysis = result.sentence_analysis
    return ProcessResponse(
        document_id=document_id,
        keyword=result.keyword,
        author=result.author,
        publication_year=result.publication_year,
        definition_found=result.definition_found,
        confidence_level=result.confidence.value,
        original_definition=result.original_definition,
        paraphrased=result.paraphrased,
        in_text_citation=result.citation,
        alternative_citations=result.alternative_citations,
        bibliography=result.bibliography,
        alternative_bibliographies=result.alternative_bibliographies,
        citation_format=result.citation_format,
        sentence_analysis=SentenceAnalysisModel(
            target_sentences=analysis.target_sentences,
            actual_sentences=analysis.actual_sentences,
            original_sentences=analysis.original_sentences,
            processing_success=analysis.processing_success,
        ),
        processing_notes=result.processing_notes,
    )


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def create_app(
    settings: Settings | None = None,
    storage: SQLiteStorage | None = None,
    generator: TextGenerator | None = None,
) -> FastAPI:
    """Build the application; collaborators default to ones built from *settings*."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_settings = settings or Settings.from_env()
        logger.info(f"[Service] Starting with DB_PATH={app_settings.db_path}, MODEL={app_settings.llm_model}")

        app.state.settings = app_settings
        app.state.storage = storage or SQLiteStorage(app_settings.db_path)
        app.state.storage.create_tables()
        app.state.generator = generator or get_provider(app_settings.llm_model, app_settings.llm_timeout)

        logger.info("[Service] Startup complete")
        yield
        logger.info("[Service] Shutdown complete")

    app = FastAPI(
        title="defcite",
        description="Definition extraction, paraphrasing and citation service",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(DefciteError)
    async def defcite_error_handler(request: Request, exc: DefciteError) -> JSONResponse:
        if isinstance(exc, (ValidationError, UnsupportedDocumentError, DocumentExtractionError)):
            status = 400
        elif isinstance(exc, DocumentNotFoundError):
            status = 404
        else:
            status = 500
        logger.warning(f"[Service] {request.url.path} failed ({status}): {exc}")
        body: dict[str, Any] = {"error": str(exc)}
        if isinstance(exc, ValidationError) and exc.field:
            body["field"] = exc.field
        return JSONResponse(status_code=status, content=body)

    @app.post("/documents/upload", response_model=UploadResponse)
    def upload(
        request: Request,
        document: UploadFile = File(...),
        keyword: str = Form(...),
        author: str = Form(...),
        year: str = Form(...),
        citation_format: str = Form(default="APA"),
        sentence_count: str | None = Form(default=None),
        additional_info: str | None = Form(default=None),
        user_id: str = Depends(get_user_id),
    ) -> UploadResponse:
        """Extract text from an uploaded document and store it for processing."""
        options = _options(sentence_count, additional_info, citation_format)
        publication_year = validate_request(keyword, author, year, options.sentence_count)

        data = document.file.read()
        max_bytes = request.app.state.settings.max_upload_bytes
        if len(data) > max_bytes:
            raise ValidationError(f"File exceeds {max_bytes} bytes", field="document")

        mime_type = (document.content_type or "").split(";")[0].strip()
        text = extract_text(data, mime_type)
        if not text.strip():
            raise DocumentExtractionError("No text could be extracted from the document")

        storage: SQLiteStorage = request.app.state.storage
        filename = document.filename or "document"
        doc_id = storage.add_document(
            user_id=user_id,
            filename=filename,
            original_text=text,
            keyword=keyword.strip(),
            author=author.strip(),
            publication_year=publication_year,
            citation_format=options.citation_format.value,
            additional_info=options.to_json(),
        )
        logger.info(f"[Service] Stored document {doc_id} ({len(text)} chars) for user {user_id}")

        return UploadResponse(
            document_id=doc_id,
            filename=filename,
            keyword=keyword.strip(),
            author=author.strip(),
            publication_year=publication_year,
            sentence_count=options.sentence_count,
            text_length=len(text),
        )

    @app.post("/documents/paraphrase-text", response_model=ProcessResponse)
    def paraphrase_text_endpoint(
        body: ParaphraseTextRequest,
        request: Request,
        user_id: str = Depends(get_user_id),
    ) -> ProcessResponse:
        """Paraphrase and cite a definition typed in by the user."""
        options = _options(body.sentence_count, body.additional_info, body.citation_format)
        validate_definition_text(body.original_text)
        publication_year = validate_request(body.keyword, body.author, body.year, options.sentence_count)

        result = paraphrase_text(
            body.original_text,
            body.keyword.strip(),
            body.author.strip(),
            publication_year,
            generator=request.app.state.generator,
            options=options,
        )

        storage: SQLiteStorage = request.app.state.storage
        doc_id = storage.add_document(
            user_id=user_id,
            filename=f"Teks: {result.keyword}",
            original_text=body.original_text,
            keyword=result.keyword,
            author=result.author,
            publication_year=publication_year,
            citation_format=options.citation_format.value,
            additional_info=options.to_json(
                actualSentenceCount=result.sentence_analysis.actual_sentences,
                processingType="text_input",
            ),
            paraphrased=result.paraphrased,
            citation=result.citation,
            bibliography=result.bibliography,
            definition_found=True,
            original_definition=result.original_definition,
        )
        return _to_response(doc_id, result)

    @app.post("/documents/process", response_model=ProcessResponse)
    def process(
        body: ProcessRequest,
        request: Request,
        user_id: str = Depends(get_user_id),
    ) -> ProcessResponse:
        """Run the full pipeline on a stored document."""
        storage: SQLiteStorage = request.app.state.storage
        doc = storage.get_document(body.document_id, user_id)
        options = ProcessingOptions.from_additional_info(doc.get("additional_info"), doc["citation_format"])

        result = process_document(
            doc["original_text"],
            doc["keyword"],
            doc["author"],
            doc["publication_year"],
            doc["filename"],
            generator=request.app.state.generator,
            options=options,
        )

        storage.update_result(
            body.document_id,
            paraphrased=result.paraphrased,
            citation=result.citation,
            bibliography=result.bibliography,
            definition_found=result.definition_found,
            original_definition=result.original_definition,
            additional_info=options.to_json(
                actualSentenceCount=count_sentences(result.paraphrased),
                processingType="document_analysis",
                confidenceLevel=result.confidence.value,
            ),
        )
        return _to_response(body.document_id, result)

    @app.get("/documents/history", response_model=HistoryResponse)
    def history(request: Request, user_id: str = Depends(get_user_id)) -> HistoryResponse:
        """List the caller's documents, newest first."""
        storage: SQLiteStorage = request.app.state.storage
        rows = storage.list_history(user_id)
        return HistoryResponse(
            documents=[
                HistoryItem(**{k: v for k, v in row.items() if k in HistoryItem.model_fields})
                for row in rows
            ]
        )

    @app.get("/health", response_model=HealthResponse)
    def health(request: Request) -> HealthResponse:
        """Get service health status."""
        storage: SQLiteStorage = request.app.state.storage
        return HealthResponse(
            status="ready",
            document_count=storage.get_document_count(),
            model=request.app.state.settings.llm_model,
        )

    return app


app = create_app()
