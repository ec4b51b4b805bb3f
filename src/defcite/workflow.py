"""End-to-end processing: extraction → confidence routing → paraphrase → citation.

Two entry points:

- :func:`process_document` searches a document for the keyword's definition
  and falls back to full AI analysis when no rule or indicator sentence
  matches.
- :func:`paraphrase_text` paraphrases a definition the user typed in, skipping
  extraction entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from defcite.citation import (
    LastNameParser,
    build_bibliography,
    build_citations,
    select_best_bibliography,
    select_best_citation,
)
from defcite.config import ProcessingOptions
from defcite.extraction import (
    ConfidenceTier,
    classify_confidence,
    extract_definitions,
    select_context,
)
from defcite.paraphrase import ParaphraseOrchestrator, analyze_document
from defcite.shared.llm.base import TextGenerator
from defcite.shared.text import count_sentences

logger = logging.getLogger(__name__)

MAX_ALTERNATIVE_CITATIONS = 3
MAX_ALTERNATIVE_BIBLIOGRAPHIES = 2
MANUAL_NOTE = "Definisi diberikan langsung oleh pengguna sehingga pencarian dalam dokumen dilewati."


@dataclass
class SentenceAnalysis:
    target_sentences: int
    actual_sentences: int
    original_sentences: int

    @property
    def processing_success(self) -> bool:
        return self.actual_sentences == self.target_sentences


@dataclass
class ProcessingResult:
    """Outcome of processing one keyword against one source."""

    keyword: str
    author: str
    publication_year: int
    definition_found: bool
    confidence: ConfidenceTier
    original_definition: str
    paraphrased: str
    citation: str
    bibliography: str
    citation_format: str
    sentence_analysis: SentenceAnalysis
    processing_notes: str = ""
    top_score: float = 0
    alternative_citations: list[str] = field(default_factory=list)
    alternative_bibliographies: list[str] = field(default_factory=list)


def _format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else f"{score:.1f}"


def processing_notes(found: bool, confidence: ConfidenceTier, score: float) -> str:
    """Human-readable note describing how the paraphrase was produced."""
    if not found:
        return (
            "Definisi eksplisit tidak ditemukan dalam dokumen. Telah dilakukan analisis menyeluruh "
            "menggunakan berbagai teknik pencarian dan AI untuk memastikan tidak ada informasi yang terlewat."
        )
    if confidence is ConfidenceTier.HIGH:
        return (
            f"Definisi ditemukan dengan tingkat kepercayaan tinggi (skor: {_format_score(score)}). "
            "Parafrase dibuat dari definisi yang ditemukan beserta konteksnya."
        )
    if confidence is ConfidenceTier.MEDIUM:
        return (
            f"Definisi ditemukan dengan tingkat kepercayaan sedang (skor: {_format_score(score)}). "
            "Dilakukan analisis kontekstual untuk menghasilkan parafrase multi-kalimat yang akurat."
        )
    return (
        "Definisi ditemukan dengan tingkat kepercayaan rendah. "
        "Digunakan analisis komprehensif AI untuk memastikan akurasi parafrase multi-kalimat."
    )


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def _assemble(
    *,
    keyword: str,
    author: str,
    year: int,
    title: str,
    options: ProcessingOptions,
    found: bool,
    confidence: ConfidenceTier,
    original_definition: str,
    paraphrased: str,
    top_score: float,
    name_parser: LastNameParser | None,
    notes: str | None = None,
) -> ProcessingResult:
    citations = build_citations(paraphrased, author, year, options.citation_format, name_parser)
    bibliographies = build_bibliography(title, author, year, options.citation_format)
    original_definition = _strip_quotes(original_definition)

    sentence_analysis = SentenceAnalysis(
        target_sentences=options.sentence_count,
        actual_sentences=count_sentences(paraphrased),
        original_sentences=count_sentences(original_definition),
    )
    logger.info(
        "Generated paraphrase: target=%d actual=%d sentences",
        sentence_analysis.target_sentences,
        sentence_analysis.actual_sentences,
    )

    return ProcessingResult(
        keyword=keyword,
        author=author,
        publication_year=year,
        definition_found=found,
        confidence=confidence,
        original_definition=original_definition,
        paraphrased=paraphrased,
        citation=select_best_citation(citations),
        bibliography=select_best_bibliography(bibliographies),
        citation_format=options.citation_format.value,
        sentence_analysis=sentence_analysis,
        processing_notes=notes or processing_notes(found, confidence, top_score),
        top_score=top_score,
        alternative_citations=citations[:MAX_ALTERNATIVE_CITATIONS],
        alternative_bibliographies=bibliographies[:MAX_ALTERNATIVE_BIBLIOGRAPHIES],
    )


def process_document(
    text: str,
    keyword: str,
    author: str,
    year: int,
    filename: str,
    generator: TextGenerator,
    options: ProcessingOptions | None = None,
    name_parser: LastNameParser | None = None,
) -> ProcessingResult:
    """Find, paraphrase and cite the definition of *keyword* in *text*."""
    options = options or ProcessingOptions()
    orchestrator = ParaphraseOrchestrator(generator)

    extraction = extract_definitions(text, keyword)
    decision = classify_confidence(extraction)
    logger.info(
        "Keyword %r: %d candidates, tier=%s strategy=%s",
        keyword,
        len(extraction),
        decision.tier.value,
        decision.strategy.value,
    )

    if decision.paraphrases_candidate:
        found = True
        confidence = decision.tier
        original_definition = extraction.definitions[0]
        paraphrased = orchestrator.paraphrase(
            original_definition,
            keyword,
            select_context(extraction, decision),
            options.sentence_count,
        )
    else:
        analysis = analyze_document(generator, text, keyword, options.citation_format)
        found = analysis.found
        confidence = analysis.confidence
        original_definition = analysis.explicit_definition
        if found and analysis.analysis:
            paraphrased = orchestrator.paraphrase(
                analysis.analysis,
                keyword,
                analysis.implicit_definition,
                options.sentence_count,
            )
        else:
            paraphrased = orchestrator.explain_not_found(keyword, filename, options.sentence_count)

    return _assemble(
        keyword=keyword,
        author=author,
        year=year,
        title=filename,
        options=options,
        found=found,
        confidence=confidence,
        original_definition=original_definition,
        paraphrased=paraphrased,
        top_score=extraction.top_score,
        name_parser=name_parser,
    )


def paraphrase_text(
    definition: str,
    keyword: str,
    author: str,
    year: int,
    generator: TextGenerator,
    options: ProcessingOptions | None = None,
    name_parser: LastNameParser | None = None,
) -> ProcessingResult:
    """Paraphrase and cite a definition supplied directly by the user."""
    options = options or ProcessingOptions()
    paraphrased = ParaphraseOrchestrator(generator).paraphrase(
        definition, keyword, definition, options.sentence_count
    )
    return _assemble(
        keyword=keyword,
        author=author,
        year=year,
        title=f'Definisi untuk "{keyword}"',
        options=options,
        found=True,
        confidence=ConfidenceTier.HIGH,
        original_definition=definition,
        paraphrased=paraphrased,
        top_score=0,
        name_parser=name_parser,
        notes=MANUAL_NOTE,
    )
